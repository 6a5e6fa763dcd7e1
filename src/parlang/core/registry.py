"""Constructor registry built from sum type and alias declarations."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping

from loguru import logger

from parlang.core.ast import (
    Declaration,
    TyApp,
    TyFun,
    TyName,
    TyRecord,
    TyTuple,
    TyVar,
    TypeAliasDeclaration,
    TypeAnnotation,
    TypeDeclaration,
)
from parlang.core.errors import (
    CyclicTypeAlias,
    DuplicateConstructor,
    DuplicateType,
    TypeArityMismatch,
    UndefinedConstructor,
    UnknownType,
)
from parlang.core.types import PRIMITIVES, Type, TypeArrow, TypeConstructor, TypeRecord, TypeTuple, TypeVar


@dataclass(frozen=True)
class ConstructorInfo:
    """Everything known about one constructor of a sum type.

    Attributes:
        name: Constructor name, unique across all declared types
        type_name: Name of the owning sum type
        type_params: Declared type parameters of the owning type
        fields: Field types, which may mention `type_params`
        siblings: All constructor names of the owning type, in declaration order
    """

    name: str
    type_name: str
    type_params: tuple[str, ...]
    fields: tuple[TypeAnnotation, ...]
    siblings: tuple[str, ...]

    @property
    def arity(self) -> int:
        return len(self.fields)


class ConstructorRegistry:
    """Frozen table of constructors, keyed by constructor name.

    Also holds the program's type aliases, which annotations and field types
    expand transparently. Built once from the program's declarations before
    inference begins; no method mutates it afterwards.
    """

    def __init__(
        self,
        constructors: Mapping[str, ConstructorInfo] | None = None,
        type_params: Mapping[str, tuple[str, ...]] | None = None,
        aliases: Mapping[str, TypeAliasDeclaration] | None = None,
    ):
        constructors = dict(constructors) if constructors is not None else {}
        params: dict[str, tuple[str, ...]] = dict(type_params) if type_params is not None else {}
        types: dict[str, tuple[str, ...]] = {name: () for name in params}
        for info in constructors.values():
            types[info.type_name] = info.siblings
            params[info.type_name] = info.type_params
        self._constructors: Mapping[str, ConstructorInfo] = MappingProxyType(constructors)
        self._types: Mapping[str, tuple[str, ...]] = MappingProxyType(types)
        self._params: Mapping[str, tuple[str, ...]] = MappingProxyType(params)
        self._aliases: Mapping[str, TypeAliasDeclaration] = MappingProxyType(dict(aliases or {}))

    @staticmethod
    def empty() -> "ConstructorRegistry":
        """Create a registry with no declared types."""
        return ConstructorRegistry()

    @classmethod
    def from_declarations(cls, declarations: list[Declaration]) -> "ConstructorRegistry":
        """Register every sum type, constructor and alias.

        Declarations may refer to each other in any order.

        Raises:
            DuplicateType: If a type name is declared twice or is a builtin
            DuplicateConstructor: If a constructor name is declared twice
            UnknownType: If a field or alias type names an undeclared type or parameter
            TypeArityMismatch: If a field or alias type applies a declared type wrongly
            CyclicTypeAlias: If an alias expands to itself
        """
        constructors: dict[str, ConstructorInfo] = {}
        type_params: dict[str, tuple[str, ...]] = {}
        aliases: dict[str, TypeAliasDeclaration] = {}
        for decl in declarations:
            if decl.name in PRIMITIVES or decl.name in type_params or decl.name in aliases:
                raise DuplicateType(decl.name)
            if isinstance(decl, TypeAliasDeclaration):
                aliases[decl.name] = decl
                logger.debug("registry.alias name={} params={} target={}", decl.name, decl.params, decl.target)
                continue

            type_params[decl.name] = tuple(decl.params)
            siblings = tuple(ctor_name for ctor_name, _ in decl.constructors)
            for ctor_name, field_types in decl.constructors:
                if ctor_name in constructors:
                    raise DuplicateConstructor(ctor_name, constructors[ctor_name].type_name, decl.name)
                constructors[ctor_name] = ConstructorInfo(
                    name=ctor_name,
                    type_name=decl.name,
                    type_params=tuple(decl.params),
                    fields=tuple(field_types),
                    siblings=siblings,
                )
            logger.debug("registry.declare type={} constructors={}", decl.name, list(siblings))

        registry = cls(constructors, type_params, aliases)
        for info in constructors.values():
            type_vars: dict[str, Type] = {param: TypeVar(i) for i, param in enumerate(info.type_params)}
            for field_type in info.fields:
                registry.resolve(field_type, type_vars)
        for alias in aliases.values():
            registry.resolve(TyApp(alias.name, [TyVar(p) for p in alias.params]), {
                param: TypeVar(i) for i, param in enumerate(alias.params)
            })
        return registry

    def lookup(self, name: str) -> ConstructorInfo | None:
        """Return the info for constructor `name`, or None."""
        return self._constructors.get(name)

    def require(self, name: str) -> ConstructorInfo:
        """Return the info for constructor `name`.

        Raises:
            UndefinedConstructor: If `name` was never declared
        """
        info = self._constructors.get(name)
        if info is None:
            raise UndefinedConstructor(name)
        return info

    def knows_type(self, type_name: str) -> bool:
        """Whether `type_name` is a declared sum type."""
        return type_name in self._types

    def lookup_alias(self, name: str) -> TypeAliasDeclaration | None:
        return self._aliases.get(name)

    def constructors_of(self, type_name: str) -> tuple[str, ...]:
        """Constructor names of a declared type, in declaration order."""
        return self._types.get(type_name, ())

    def type_params_of(self, type_name: str) -> tuple[str, ...]:
        return self._params.get(type_name, ())

    def instantiate(self, name: str, fresh: Callable[[], TypeVar]) -> tuple[TypeConstructor, list[Type]]:
        """Instantiate a constructor's owning type with fresh variables.

        Returns:
            The fresh owning sum type and the field types expressed in the
            same fresh variables

        Raises:
            UndefinedConstructor: If `name` was never declared
        """
        info = self.require(name)
        type_vars: dict[str, Type] = {param: fresh() for param in info.type_params}
        owner = TypeConstructor(info.type_name, [type_vars[p] for p in info.type_params])
        fields = [self.resolve(f, type_vars) for f in info.fields]
        return owner, fields

    def resolve(
        self,
        annotation: TypeAnnotation,
        type_vars: dict[str, Type],
        fresh: Callable[[], TypeVar] | None = None,
    ) -> Type:
        """Convert a type annotation into a type, expanding aliases.

        Args:
            annotation: Annotation to convert
            type_vars: Types for annotation variables; extended in place when
                `fresh` is given and an unseen variable name is encountered
            fresh: Supply of fresh variables for unseen names; when None an
                unseen variable name is an error

        Raises:
            UnknownType: If a name is neither builtin, declared nor bound
            TypeArityMismatch: If a declared type or alias gets the wrong argument count
            CyclicTypeAlias: If an alias expands to itself
        """
        return self._resolve(annotation, type_vars, fresh, ())

    def _resolve(
        self,
        annotation: TypeAnnotation,
        type_vars: dict[str, Type],
        fresh: Callable[[], TypeVar] | None,
        expanding: tuple[str, ...],
    ) -> Type:
        match annotation:
            case TyVar(var_name):
                if var_name not in type_vars:
                    if fresh is None:
                        raise UnknownType(var_name)
                    type_vars[var_name] = fresh()
                return type_vars[var_name]
            case TyName(type_name):
                if type_name in PRIMITIVES:
                    return PRIMITIVES[type_name]
                return self._resolve_named(type_name, [], type_vars, fresh, expanding)
            case TyApp(type_name, args):
                return self._resolve_named(type_name, args, type_vars, fresh, expanding)
            case TyFun(arg, ret):
                return TypeArrow(
                    self._resolve(arg, type_vars, fresh, expanding),
                    self._resolve(ret, type_vars, fresh, expanding),
                )
            case TyTuple(elements):
                return TypeTuple([self._resolve(e, type_vars, fresh, expanding) for e in elements])
            case TyRecord(fields):
                return TypeRecord({k: self._resolve(v, type_vars, fresh, expanding) for k, v in fields.items()})
            case _:
                raise TypeError(f"Unknown type annotation: {annotation}")

    def _resolve_named(
        self,
        type_name: str,
        args: list[TypeAnnotation],
        type_vars: dict[str, Type],
        fresh: Callable[[], TypeVar] | None,
        expanding: tuple[str, ...],
    ) -> Type:
        alias = self._aliases.get(type_name)
        if alias is not None:
            if type_name in expanding:
                raise CyclicTypeAlias([*expanding[expanding.index(type_name):], type_name])
            if len(alias.params) != len(args):
                raise TypeArityMismatch(type_name, len(alias.params), len(args))
            arg_types = [self._resolve(a, type_vars, fresh, expanding) for a in args]
            # The target sees only the alias's own parameters
            return self._resolve(alias.target, dict(zip(alias.params, arg_types)), None, (*expanding, type_name))

        if not self.knows_type(type_name):
            raise UnknownType(type_name)
        expected = len(self.type_params_of(type_name))
        if expected != len(args):
            raise TypeArityMismatch(type_name, expected, len(args))
        return TypeConstructor(type_name, [self._resolve(a, type_vars, fresh, expanding) for a in args])

    def __contains__(self, name: str) -> bool:
        return name in self._constructors

    def __len__(self) -> int:
        return len(self._constructors)
