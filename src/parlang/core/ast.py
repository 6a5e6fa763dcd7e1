"""Core language AST: expressions, patterns, type annotations, declarations.

Nodes are produced by the parser and consumed unchanged by the type checker,
the exhaustiveness checker and the evaluator. String literals arrive already
desugared into list constructor applications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union


# =============================================================================
# Type annotations
# =============================================================================


class TypeAnnotation:
    """Base class for source-level type annotations."""

    pass


@dataclass(frozen=True)
class TyName(TypeAnnotation):
    """Named type without arguments: Int, Bool, Color."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TyVar(TypeAnnotation):
    """Type variable in an annotation or constructor field: a, b."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TyFun(TypeAnnotation):
    """Function type annotation: a -> b."""

    arg: TypeAnnotation
    ret: TypeAnnotation

    def __str__(self) -> str:
        if isinstance(self.arg, TyFun):
            return f"({self.arg}) -> {self.ret}"
        return f"{self.arg} -> {self.ret}"


@dataclass(frozen=True)
class TyApp(TypeAnnotation):
    """Declared type applied to arguments: Option a, Either Int b."""

    name: str
    args: list[TypeAnnotation]

    def __str__(self) -> str:
        return " ".join([self.name] + [f"({a})" if isinstance(a, (TyApp, TyFun)) else str(a) for a in self.args])


@dataclass(frozen=True)
class TyTuple(TypeAnnotation):
    """Tuple type annotation: (a, b)."""

    elements: list[TypeAnnotation]

    def __str__(self) -> str:
        return "(" + ", ".join(str(e) for e in self.elements) + ")"


@dataclass(frozen=True)
class TyRecord(TypeAnnotation):
    """Record type annotation: {x: Int, y: Int}."""

    fields: dict[str, TypeAnnotation]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.fields.items()) + "}"


# =============================================================================
# Patterns
# =============================================================================


class Pattern:
    """Base class for match patterns."""

    pass


@dataclass(frozen=True)
class PWildcard(Pattern):
    """Wildcard pattern: _"""

    def __str__(self) -> str:
        return "_"


@dataclass(frozen=True)
class PVar(Pattern):
    """Variable pattern: binds the matched value."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PBool(Pattern):
    """Boolean literal pattern."""

    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class PInt(Pattern):
    """Integer literal pattern."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PConstructor(Pattern):
    """Constructor pattern: C p₁...pₙ."""

    name: str
    args: list[Pattern] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.args:
            return self.name
        parts = []
        for arg in self.args:
            match arg:
                case PConstructor(_, inner) if inner:
                    parts.append(f"({arg})")
                case _:
                    parts.append(str(arg))
        return f"{self.name} {' '.join(parts)}"


@dataclass(frozen=True)
class PTuple(Pattern):
    """Tuple pattern: (p₁, ..., pₙ)."""

    elements: list[Pattern]

    def __str__(self) -> str:
        return "(" + ", ".join(str(e) for e in self.elements) + ")"


@dataclass(frozen=True)
class PRecord(Pattern):
    """Record pattern: {l₁ = p₁, ..., lₙ = pₙ}."""

    fields: dict[str, Pattern]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k} = {v}" for k, v in self.fields.items()) + "}"


# =============================================================================
# Expressions
# =============================================================================


class Expr:
    """Base class for expressions."""

    pass


@dataclass(frozen=True)
class IntLit(Expr):
    """Integer literal: 42"""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BoolLit(Expr):
    """Boolean literal: true, false"""

    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class CharLit(Expr):
    """Character literal: 'a'"""

    value: str

    def __str__(self) -> str:
        return f"'{self.value}'"


@dataclass(frozen=True)
class Var(Expr):
    """Variable reference by name."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Abs(Expr):
    """Lambda abstraction: fun x -> body, optionally fun (x : τ) -> body."""

    param: str
    body: Expr
    annotation: Optional[TypeAnnotation] = None

    def __str__(self) -> str:
        if self.annotation is not None:
            return f"(fun ({self.param} : {self.annotation}) -> {self.body})"
        return f"(fun {self.param} -> {self.body})"


@dataclass(frozen=True)
class App(Expr):
    """Function application: f arg."""

    func: Expr
    arg: Expr

    def __str__(self) -> str:
        return f"({self.func} {self.arg})"


@dataclass(frozen=True)
class Let(Expr):
    """Non-recursive let binding: let name = value in body."""

    name: str
    value: Expr
    body: Expr
    annotation: Optional[TypeAnnotation] = None

    def __str__(self) -> str:
        ann = f" : {self.annotation}" if self.annotation is not None else ""
        return f"(let {self.name}{ann} = {self.value} in {self.body})"


@dataclass(frozen=True)
class LetRec(Expr):
    """Recursive let binding: let rec name = value in body."""

    name: str
    value: Expr
    body: Expr

    def __str__(self) -> str:
        return f"(let rec {self.name} = {self.value} in {self.body})"


@dataclass(frozen=True)
class If(Expr):
    """Conditional: if cond then then_branch else else_branch."""

    cond: Expr
    then_branch: Expr
    else_branch: Expr

    def __str__(self) -> str:
        return f"(if {self.cond} then {self.then_branch} else {self.else_branch})"


@dataclass(frozen=True)
class BinOp(Expr):
    """Binary operator application: left op right."""

    op: str
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"({self.left} {self.op} {self.right})"


@dataclass(frozen=True)
class Constructor(Expr):
    """Data constructor application: C e₁...eₙ."""

    name: str
    args: list[Expr] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.args:
            return self.name
        args_str = " ".join(str(arg) for arg in self.args)
        return f"({self.name} {args_str})"


@dataclass(frozen=True)
class Tuple(Expr):
    """Tuple literal: (e₁, ..., eₙ)."""

    elements: list[Expr]

    def __str__(self) -> str:
        return "(" + ", ".join(str(e) for e in self.elements) + ")"


@dataclass(frozen=True)
class TupleProj(Expr):
    """Tuple projection by 0-based index: e.0"""

    tuple: Expr
    index: int

    def __str__(self) -> str:
        return f"{self.tuple}.{self.index}"


@dataclass(frozen=True)
class Record(Expr):
    """Record literal: {l₁ = e₁, ..., lₙ = eₙ}."""

    fields: dict[str, Expr]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k} = {v}" for k, v in self.fields.items()) + "}"


@dataclass(frozen=True)
class FieldAccess(Expr):
    """Record field access: e.field"""

    record: Expr
    field: str

    def __str__(self) -> str:
        return f"{self.record}.{self.field}"


@dataclass(frozen=True)
class Range(Expr):
    """Integer range: start..end (descending ranges are legal)."""

    start: Expr
    end: Expr

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


@dataclass(frozen=True)
class MatchArm:
    """Match arm: pattern -> body."""

    pattern: Pattern
    body: Expr

    def __str__(self) -> str:
        return f"{self.pattern} -> {self.body}"


@dataclass(frozen=True)
class Match(Expr):
    """Pattern matching: match scrutinee with | p₁ -> e₁ | ..."""

    scrutinee: Expr
    arms: list[MatchArm]

    def __str__(self) -> str:
        arms_str = " ".join(f"| {arm}" for arm in self.arms)
        return f"(match {self.scrutinee} with {arms_str})"


# =============================================================================
# Declarations
# =============================================================================


@dataclass(frozen=True)
class TypeDeclaration:
    """type T a = K₁ τ₁ | ... | Kₙ τₙ"""

    name: str  # Sum type name
    params: list[str]  # Type parameters
    constructors: list[tuple[str, list[TypeAnnotation]]]  # (name, field types)


@dataclass(frozen=True)
class TypeAliasDeclaration:
    """type T a = τ, a transparent name for an existing type."""

    name: str
    params: list[str]
    target: TypeAnnotation


Declaration = Union[TypeDeclaration, TypeAliasDeclaration]


@dataclass(frozen=True)
class Program:
    """Type and alias declarations plus the expression they scope over."""

    declarations: list[Declaration]
    body: Expr

