"""Type representations for the Hindley-Milner core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


class Type:
    """Base class for types."""

    def free_vars(self) -> set[int]:
        """Return set of free type variable ids."""
        raise NotImplementedError


@dataclass(frozen=True)
class PrimitiveType(Type):
    """Builtin type with no structure: Int, Bool, Char, Range."""

    name: str

    def __str__(self) -> str:
        return self.name

    def free_vars(self) -> set[int]:
        return set()


INT = PrimitiveType("Int")
BOOL = PrimitiveType("Bool")
CHAR = PrimitiveType("Char")
RANGE = PrimitiveType("Range")

PRIMITIVES: dict[str, PrimitiveType] = {t.name: t for t in (INT, BOOL, CHAR, RANGE)}


@dataclass(frozen=True)
class TypeVar(Type):
    """Type variable identified by a unique integer id.

    Ids are handed out by one checker instance and compare in allocation
    order, which is also the order quantified variables are displayed in.
    """

    id: int

    def __str__(self) -> str:
        return f"t{self.id}"

    def free_vars(self) -> set[int]:
        return {self.id}


@dataclass(frozen=True)
class TypeArrow(Type):
    """Function type: σ → τ."""

    arg: Type
    ret: Type

    def __str__(self) -> str:
        match self.arg:
            case TypeArrow():
                arg_str = f"({self.arg})"
            case _:
                arg_str = str(self.arg)
        return f"{arg_str} -> {self.ret}"

    def free_vars(self) -> set[int]:
        return self.arg.free_vars() | self.ret.free_vars()


@dataclass(frozen=True)
class TypeTuple(Type):
    """Tuple type: (τ₁, ..., τₙ)."""

    elements: list[Type]

    def __str__(self) -> str:
        return "(" + ", ".join(str(t) for t in self.elements) + ")"

    def free_vars(self) -> set[int]:
        result: set[int] = set()
        for element in self.elements:
            result |= element.free_vars()
        return result


@dataclass(frozen=True)
class TypeRecord(Type):
    """Record type: {l₁: τ₁, ..., lₙ: τₙ} or, with a row variable, {l₁: τ₁ | ρ}.

    A record with `rest` set is open: `rest` is the id of a row variable
    standing for the fields not listed. Row variables share the id supply
    of type variables and are bound by substitutions to other records.

    Field order is kept for unification; equality and display ignore it.
    """

    fields: dict[str, Type]
    rest: int | None = None

    @property
    def is_open(self) -> bool:
        return self.rest is not None

    def __str__(self) -> str:
        inner = ", ".join(f"{name}: {self.fields[name]}" for name in sorted(self.fields))
        if self.rest is not None:
            inner = f"{inner} | t{self.rest}" if inner else f"t{self.rest}"
        return "{" + inner + "}"

    def free_vars(self) -> set[int]:
        result: set[int] = set()
        for ty in self.fields.values():
            result |= ty.free_vars()
        if self.rest is not None:
            result.add(self.rest)
        return result


@dataclass(frozen=True)
class TypeConstructor(Type):
    """Instantiated user sum type: T τ₁...τₙ."""

    name: str
    args: list[Type] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.args:
            return self.name
        args_strs = []
        for arg in self.args:
            match arg:
                case TypeArrow():
                    args_strs.append(f"({arg})")
                case TypeConstructor(_, inner) if inner:
                    args_strs.append(f"({arg})")
                case _:
                    args_strs.append(str(arg))
        return f"{self.name} {' '.join(args_strs)}"

    def free_vars(self) -> set[int]:
        result: set[int] = set()
        for arg in self.args:
            result |= arg.free_vars()
        return result


@dataclass(frozen=True)
class TypeScheme:
    """Polymorphic type ∀ vars. body.

    `vars` holds the quantified ids in ascending order; an empty list is a
    monomorphic scheme.
    """

    vars: list[int]
    body: Type

    @staticmethod
    def mono(ty: Type) -> TypeScheme:
        """Wrap a type in a scheme with no quantified variables."""
        return TypeScheme([], ty)

    def free_vars(self) -> set[int]:
        return self.body.free_vars() - set(self.vars)

    def instantiate(self, fresh: Callable[[], TypeVar]) -> Type:
        """Replace every quantified variable with a fresh one.

        Repeated occurrences of one quantified variable map to the same
        fresh variable.
        """
        if not self.vars:
            return self.body
        from parlang.core.unify import Substitution

        subst = Substitution({var: fresh() for var in self.vars})
        return subst.apply(self.body)

    def __str__(self) -> str:
        if not self.vars:
            return str(self.body)
        quantified = ", ".join(f"t{v}" for v in self.vars)
        return f"forall {quantified}. {self.body}"

