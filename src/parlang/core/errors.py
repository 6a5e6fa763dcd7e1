"""Error types for the type checker."""

from parlang.core.types import Type


class TypeError(Exception):
    """Base class for type errors."""

    def __init__(self, message: str):
        super().__init__(message)


class UnboundVariable(TypeError):
    """Variable not found in the type environment."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unbound variable: {name}")


class UnificationError(TypeError):
    """Unification failure - types cannot be made equal."""

    def __init__(self, t1: Type, t2: Type):
        self.t1 = t1
        self.t2 = t2
        super().__init__(f"Cannot unify types: {t1} and {t2}")


class OccursCheckError(TypeError):
    """Occurs check failed - infinite type detected."""

    def __init__(self, var: int, t: Type):
        self.var = var
        self.t = t
        super().__init__(f"Occurs check failed: t{var} occurs in {t}")


class ConstructorArityMismatch(TypeError):
    """Constructor applied to the wrong number of arguments."""

    def __init__(self, name: str, expected: int, got: int):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(f"Constructor '{name}' expects {expected} arguments, but got {got}")


class UndefinedConstructor(TypeError):
    """Data constructor not declared."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown constructor: {name}")


class DuplicateConstructor(TypeError):
    """Constructor name declared by more than one type."""

    def __init__(self, name: str, first_owner: str, second_owner: str):
        self.name = name
        self.first_owner = first_owner
        self.second_owner = second_owner
        super().__init__(
            f"Constructor '{name}' of type {second_owner} is already declared by type {first_owner}"
        )


class DuplicateType(TypeError):
    """Type or alias name declared twice, or shadowing a builtin type."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Type '{name}' is already declared")


class CyclicTypeAlias(TypeError):
    """Type alias whose expansion refers back to itself."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Type alias cycle: {' -> '.join(cycle)}")


class UnknownType(TypeError):
    """Type annotation names a type that was never declared."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown type: {name}")


class TypeArityMismatch(TypeError):
    """Declared type applied to the wrong number of type arguments."""

    def __init__(self, name: str, expected: int, got: int):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(f"Type '{name}' expects {expected} type arguments, but got {got}")


class FieldNotFound(TypeError):
    """Record field access on a record without that field."""

    def __init__(self, field: str, available: list[str]):
        self.field = field
        self.available = available
        super().__init__(f"Field '{field}' not found. Available fields: {available}")


class RecordExpected(TypeError):
    """Field access on something that is not a known record."""

    def __init__(self, t: Type):
        self.t = t
        super().__init__(f"Expected record type, got {t}")


class TupleExpected(TypeError):
    """Projection on something that is not a known tuple."""

    def __init__(self, t: Type):
        self.t = t
        super().__init__(f"Expected tuple type, got {t}")


class TupleIndexOutOfRange(TypeError):
    """Tuple projection index past the tuple's arity."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Tuple index {index} out of range for tuple of size {size}")
