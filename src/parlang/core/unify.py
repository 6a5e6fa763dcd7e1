"""Substitutions and unification for Hindley-Milner types."""

from dataclasses import dataclass
from typing import Callable

from parlang.core.errors import OccursCheckError, UnificationError
from parlang.core.types import (
    PrimitiveType,
    Type,
    TypeArrow,
    TypeConstructor,
    TypeRecord,
    TypeScheme,
    TypeTuple,
    TypeVar,
)

FreshSupply = Callable[[], TypeVar]


@dataclass(frozen=True)
class Substitution:
    """Immutable substitution mapping type variable ids to types."""

    mapping: dict[int, Type]

    @staticmethod
    def empty() -> "Substitution":
        """Create an empty substitution."""
        return Substitution({})

    @staticmethod
    def singleton(var: int, t: Type) -> "Substitution":
        """Create a substitution with a single mapping."""
        return Substitution({var: t})

    def apply(self, t: Type) -> Type:
        """Apply this substitution to a type."""
        if not self.mapping:
            return t
        match t:
            case TypeVar(var):
                return self.mapping.get(var, t)
            case PrimitiveType():
                return t
            case TypeArrow(arg, ret):
                return TypeArrow(self.apply(arg), self.apply(ret))
            case TypeTuple(elements):
                return TypeTuple([self.apply(e) for e in elements])
            case TypeRecord(fields, rest):
                return self._apply_record(fields, rest)
            case TypeConstructor(name, args):
                return TypeConstructor(name, [self.apply(arg) for arg in args])
            case _:
                raise TypeError(f"Unknown type: {t}")

    def _apply_record(self, fields: dict[str, Type], rest: int | None) -> TypeRecord:
        applied = {name: self.apply(ty) for name, ty in fields.items()}
        if rest is None or rest not in self.mapping:
            return TypeRecord(applied, rest)
        # A bound row variable splices its fields into the record
        match self.mapping[rest]:
            case TypeRecord(more, tail):
                return TypeRecord({**applied, **more}, tail)
            case TypeVar(tail):
                return TypeRecord(applied, tail)
            case other:
                raise TypeError(f"Row variable t{rest} bound to non-record type {other}")

    def apply_scheme(self, scheme: TypeScheme) -> TypeScheme:
        """Apply this substitution to a scheme, leaving quantified variables alone."""
        filtered = {k: v for k, v in self.mapping.items() if k not in scheme.vars}
        if not filtered:
            return scheme
        return TypeScheme(scheme.vars, Substitution(filtered).apply(scheme.body))

    def compose(self, other: "Substitution") -> "Substitution":
        """Compose substitutions: self ∘ other (apply other first, then self).

        Returns a new substitution equivalent to λt. self.apply(other.apply(t))
        """
        # Apply self to all values in other
        new_mapping = {var: self.apply(ty) for var, ty in other.mapping.items()}
        # Add mappings from self that aren't in other
        for var, ty in self.mapping.items():
            if var not in new_mapping:
                new_mapping[var] = ty
        return Substitution(new_mapping)

    def __str__(self) -> str:
        items = ", ".join(f"t{k} -> {v}" for k, v in sorted(self.mapping.items()))
        return f"{{{items}}}"


def compose(s1: Substitution, s2: Substitution) -> Substitution:
    """Sequential composition: the result applies `s1` first, then `s2`."""
    return s2.compose(s1)


def occurs_in(var: int, t: Type) -> bool:
    """Check if a type variable occurs in a type.

    Args:
        var: Id of the type variable
        t: Type to check

    Returns:
        True if var occurs in t
    """
    match t:
        case TypeVar(other):
            return other == var
        case PrimitiveType():
            return False
        case TypeArrow(arg, ret):
            return occurs_in(var, arg) or occurs_in(var, ret)
        case TypeTuple(elements):
            return any(occurs_in(var, e) for e in elements)
        case TypeRecord(fields, rest):
            return rest == var or any(occurs_in(var, ty) for ty in fields.values())
        case TypeConstructor(_, args):
            return any(occurs_in(var, arg) for arg in args)
        case _:
            raise TypeError(f"Unknown type: {t}")


def _bind(var: int, t: Type) -> Substitution:
    if t == TypeVar(var):
        return Substitution.empty()
    if occurs_in(var, t):
        raise OccursCheckError(var, t)
    return Substitution.singleton(var, t)


def _unify_many(pairs: list[tuple[Type, Type]], fresh: FreshSupply | None = None) -> Substitution:
    """Unify pairs left to right, threading the substitution."""
    subst = Substitution.empty()
    for left, right in pairs:
        s = unify(subst.apply(left), subst.apply(right), fresh)
        subst = s.compose(subst)
    return subst


def _bind_row(var: int, record: TypeRecord, subst: Substitution, fresh: FreshSupply | None) -> Substitution:
    """Bind row variable `var` to `record` on top of `subst`."""
    row = subst.apply(TypeRecord({}, var))
    target = subst.apply(record)
    if isinstance(row, TypeRecord) and row.rest == var and not row.fields:
        return _bind(var, target).compose(subst)
    # Already bound while unifying shared fields
    return unify(row, target, fresh).compose(subst)


def _unify_records(r1: TypeRecord, r2: TypeRecord, fresh: FreshSupply | None) -> Substitution:
    """Unify shared fields, then let each open side absorb the other's extra fields.

    Closed records must have the same field set. An open record's row
    variable is bound to the fields only the other side has; two open
    records with fields missing on both sides share a fresh row.
    """
    subst = _unify_many([(ty, r2.fields[name]) for name, ty in r1.fields.items() if name in r2.fields], fresh)
    only1 = {name: ty for name, ty in r1.fields.items() if name not in r2.fields}
    only2 = {name: ty for name, ty in r2.fields.items() if name not in r1.fields}

    if r1.rest == r2.rest:
        if only1 or only2:
            raise UnificationError(r1, r2)
        return subst

    if r2.rest is None:
        if only1:
            raise UnificationError(r1, r2)
        return _bind_row(r1.rest, TypeRecord(only2), subst, fresh)

    if r1.rest is None:
        if only2:
            raise UnificationError(r1, r2)
        return _bind_row(r2.rest, TypeRecord(only1), subst, fresh)

    if not only1:
        return _bind_row(r1.rest, TypeRecord(only2, r2.rest), subst, fresh)
    if not only2:
        return _bind_row(r2.rest, TypeRecord(only1, r1.rest), subst, fresh)

    if fresh is None:
        raise UnificationError(r1, r2)
    tail = fresh().id
    subst = _bind_row(r1.rest, TypeRecord(only2, tail), subst, fresh)
    return _bind_row(r2.rest, TypeRecord(only1, tail), subst, fresh)


def unify(t1: Type, t2: Type, fresh: FreshSupply | None = None) -> Substitution:
    """Compute the most general unifier of two types.

    Implements Robinson's unification algorithm with occurs check, extended
    with row variables for open records.

    Args:
        t1: First type
        t2: Second type
        fresh: Supply of fresh variables, needed only when two open records
            each lack fields of the other

    Returns:
        A substitution θ such that θ(t1) = θ(t2)

    Raises:
        UnificationError: If types cannot be unified
        OccursCheckError: If occurs check fails (infinite type)
    """
    match t1, t2:
        case PrimitiveType(name1), PrimitiveType(name2):
            if name1 != name2:
                raise UnificationError(t1, t2)
            return Substitution.empty()

        # t1 is a variable
        case TypeVar(var), _:
            return _bind(var, t2)

        # t2 is a variable
        case _, TypeVar(var):
            return _bind(var, t1)

        # Both are arrow types
        case TypeArrow(arg1, ret1), TypeArrow(arg2, ret2):
            s1 = unify(arg1, arg2, fresh)
            s2 = unify(s1.apply(ret1), s1.apply(ret2), fresh)
            return s2.compose(s1)

        case TypeTuple(elements1), TypeTuple(elements2):
            if len(elements1) != len(elements2):
                raise UnificationError(t1, t2)
            return _unify_many(list(zip(elements1, elements2)), fresh)

        case TypeRecord(), TypeRecord():
            return _unify_records(t1, t2, fresh)

        # Both are sum types
        case TypeConstructor(name1, args1), TypeConstructor(name2, args2):
            if name1 != name2:
                raise UnificationError(t1, t2)
            if len(args1) != len(args2):
                raise UnificationError(t1, t2)
            return _unify_many(list(zip(args1, args2)), fresh)

        # Types are different constructors
        case _:
            raise UnificationError(t1, t2)
