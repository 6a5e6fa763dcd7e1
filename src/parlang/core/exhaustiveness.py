"""Exhaustiveness checking for match expressions.

Decides whether the arms of one match expression cover every value of the
scrutinee type, and if not, names the cases that are missing. Findings are
advisory: they never change the inferred type and never stop evaluation.

The arms form a pattern matrix, one row per arm, starting with a single
column. The first column is split by its head patterns and the rest of the
row is checked recursively, so gaps that only show up in a combination of
fields are found too:

* constructor patterns: every constructor of the owning type (taken from
  the first constructor pattern) must appear. A constructor that appears
  replaces the column by its fields, filled with wildcards for rows whose
  head is a wildcard or variable. Gaps are reported qualified by the
  constructor, e.g. ``Some None`` or ``MkPair true false``;
* boolean literals: both ``true`` and ``false`` must be covered;
* integer literals: each listed value is checked, and the remaining
  integers are covered only by wildcard rows, reported as
  ``<other integers>``;
* tuple and record patterns: never expanded. Unless a wildcard row covers
  the column the gap is reported as ``_``.

A wildcard or variable covers any column it heads, so an irrefutable arm
makes the match exhaustive.

Example::

    type Option a = Some a | None in
    match x with
    | Some n -> n        -- Missing cases: None
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from parlang.core.ast import PBool, PConstructor, PInt, PVar, PWildcard, Pattern
from parlang.core.registry import ConstructorRegistry

WILDCARD = "_"
OTHER_INTEGERS = "<other integers>"

# One uncovered value per column, rendered
Vector = list[str]


@dataclass(frozen=True)
class ExhaustivenessResult:
    """Outcome of checking one match expression."""

    exhaustive: bool
    missing: list[str] = field(default_factory=list)

    @staticmethod
    def from_missing(missing: list[str]) -> "ExhaustivenessResult":
        return ExhaustivenessResult(not missing, missing)


@dataclass(frozen=True)
class ExhaustivenessWarning:
    """Warning surfaced for one non-exhaustive match expression."""

    missing: list[str]

    def __str__(self) -> str:
        return f"Warning: pattern match is non-exhaustive\nMissing cases: {', '.join(self.missing)}"


def check_exhaustiveness(patterns: list[Pattern], registry: ConstructorRegistry) -> ExhaustivenessResult:
    """Check whether `patterns` cover every value of the scrutinee type.

    Args:
        patterns: Arm patterns of one match expression, in arm order
        registry: Declared constructors

    Returns:
        The result, listing missing-case descriptors when not exhaustive

    Raises:
        UndefinedConstructor: If a pattern names an undeclared constructor
    """
    result = ExhaustivenessResult.from_missing(_missing_cases(patterns, registry))
    logger.debug(
        "exhaustiveness.checked arms={} exhaustive={} missing={}",
        len(patterns),
        result.exhaustive,
        result.missing,
    )
    return result


def _missing_cases(patterns: list[Pattern], registry: ConstructorRegistry) -> list[str]:
    return [vector[0] for vector in _missing_rows([[p] for p in patterns], 1, registry, top=True)]


def _irrefutable(pattern: Pattern) -> bool:
    return isinstance(pattern, (PWildcard, PVar))


def _missing_rows(
    rows: list[list[Pattern]],
    width: int,
    registry: ConstructorRegistry,
    top: bool = False,
) -> list[Vector]:
    """Uncovered value vectors of a pattern matrix with `width` columns."""
    if not rows:
        return [[WILDCARD] * width]
    if width == 0:
        return []

    heads = [row[0] for row in rows]
    constructors = [p for p in heads if isinstance(p, PConstructor)]
    if constructors:
        return _split_constructors(rows, width, constructors, registry, top)

    if any(isinstance(p, PBool) for p in heads):
        return _split_literals(rows, width, PBool, [True, False], registry)

    if any(isinstance(p, PInt) for p in heads):
        values = list(dict.fromkeys(p.value for p in heads if isinstance(p, PInt)))
        listed = _split_literals(rows, width, PInt, values, registry)
        rest = _missing_rows(_default(rows), width - 1, registry)
        return listed + [[OTHER_INTEGERS, *vector] for vector in rest]

    # Wildcards, variables, tuples and records
    return [[WILDCARD, *vector] for vector in _missing_rows(_default(rows), width - 1, registry)]


def _default(rows: list[list[Pattern]]) -> list[list[Pattern]]:
    """Rows whose first column matches anything, without that column."""
    return [row[1:] for row in rows if _irrefutable(row[0])]


def _split_literals(
    rows: list[list[Pattern]],
    width: int,
    kind: type[PBool] | type[PInt],
    values: list,
    registry: ConstructorRegistry,
) -> list[Vector]:
    absent: list[Vector] = []
    nested: list[Vector] = []
    for value in values:
        label = str(kind(value))
        specialized = [
            row[1:] for row in rows if _irrefutable(row[0]) or (isinstance(row[0], kind) and row[0].value == value)
        ]
        if not specialized:
            absent.append([label] + [WILDCARD] * (width - 1))
            continue
        nested.extend([label, *vector] for vector in _missing_rows(specialized, width - 1, registry))
    return absent + nested


def _split_constructors(
    rows: list[list[Pattern]],
    width: int,
    constructors: list[PConstructor],
    registry: ConstructorRegistry,
    top: bool,
) -> list[Vector]:
    for pattern in constructors:
        registry.require(pattern.name)

    absent: list[Vector] = []
    nested: list[Vector] = []
    for name in registry.require(constructors[0].name).siblings:
        arity = registry.require(name).arity
        specialized = []
        for row in rows:
            match row[0]:
                case PConstructor(head, args) if head == name:
                    fields = (list(args) + [PWildcard()] * arity)[:arity]
                    specialized.append(fields + row[1:])
                case head if _irrefutable(head):
                    specialized.append([PWildcard()] * arity + row[1:])
        if not specialized:
            # Missing top-level constructors are named bare, nested ones show their fields
            label = name if top else _render(name, [WILDCARD] * arity)
            absent.append([label] + [WILDCARD] * (width - 1))
            continue
        for vector in _missing_rows(specialized, arity + width - 1, registry):
            nested.append([_render(name, vector[:arity]), *vector[arity:]])
    return absent + nested


def _render(name: str, args: Vector) -> str:
    """Render a gap inside its enclosing constructor, e.g. `Pair _ None`."""
    if not args:
        return name
    parts = [f"({arg})" if " " in arg and not arg.startswith("<") else arg for arg in args]
    return f"{name} {' '.join(parts)}"
