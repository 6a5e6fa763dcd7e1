"""Core language: AST, types, type checker, exhaustiveness checker."""

from parlang.core.ast import (
    Abs,
    App,
    BinOp,
    BoolLit,
    CharLit,
    Constructor,
    Declaration,
    Expr,
    FieldAccess,
    If,
    IntLit,
    Let,
    LetRec,
    Match,
    MatchArm,
    Pattern,
    PBool,
    PConstructor,
    PInt,
    PRecord,
    PTuple,
    PVar,
    PWildcard,
    Program,
    Range,
    Record,
    Tuple,
    TupleProj,
    TyApp,
    TyFun,
    TyName,
    TyRecord,
    TyTuple,
    TyVar,
    TypeAliasDeclaration,
    TypeAnnotation,
    TypeDeclaration,
    Var,
)
from parlang.core.checker import TypeChecker, check_program
from parlang.core.context import TypeEnvironment, generalize
from parlang.core.errors import (
    ConstructorArityMismatch,
    CyclicTypeAlias,
    DuplicateConstructor,
    DuplicateType,
    FieldNotFound,
    OccursCheckError,
    RecordExpected,
    TupleExpected,
    TupleIndexOutOfRange,
    TypeArityMismatch,
    TypeError,
    UnboundVariable,
    UndefinedConstructor,
    UnificationError,
    UnknownType,
)
from parlang.core.exhaustiveness import ExhaustivenessResult, ExhaustivenessWarning, check_exhaustiveness
from parlang.core.module import CheckedProgram
from parlang.core.registry import ConstructorInfo, ConstructorRegistry
from parlang.core.types import (
    BOOL,
    CHAR,
    INT,
    RANGE,
    PrimitiveType,
    Type,
    TypeArrow,
    TypeConstructor,
    TypeRecord,
    TypeScheme,
    TypeTuple,
    TypeVar,
)
from parlang.core.unify import Substitution, compose, unify

__all__ = [
    # AST
    "Expr",
    "IntLit",
    "BoolLit",
    "CharLit",
    "Var",
    "Abs",
    "App",
    "Let",
    "LetRec",
    "If",
    "BinOp",
    "Constructor",
    "Tuple",
    "TupleProj",
    "Record",
    "FieldAccess",
    "Range",
    "Match",
    "MatchArm",
    "Pattern",
    "PWildcard",
    "PVar",
    "PBool",
    "PInt",
    "PConstructor",
    "PTuple",
    "PRecord",
    "TypeAnnotation",
    "TyName",
    "TyVar",
    "TyFun",
    "TyApp",
    "TyTuple",
    "TyRecord",
    "TypeDeclaration",
    "TypeAliasDeclaration",
    "Declaration",
    "Program",
    # Types
    "Type",
    "PrimitiveType",
    "INT",
    "BOOL",
    "CHAR",
    "RANGE",
    "TypeVar",
    "TypeArrow",
    "TypeTuple",
    "TypeRecord",
    "TypeConstructor",
    "TypeScheme",
    # Environment and registry
    "TypeEnvironment",
    "generalize",
    "ConstructorInfo",
    "ConstructorRegistry",
    # Unification
    "Substitution",
    "compose",
    "unify",
    # Errors
    "TypeError",
    "UnboundVariable",
    "UnificationError",
    "OccursCheckError",
    "ConstructorArityMismatch",
    "UndefinedConstructor",
    "DuplicateConstructor",
    "DuplicateType",
    "CyclicTypeAlias",
    "UnknownType",
    "TypeArityMismatch",
    "FieldNotFound",
    "RecordExpected",
    "TupleExpected",
    "TupleIndexOutOfRange",
    # Exhaustiveness
    "ExhaustivenessResult",
    "ExhaustivenessWarning",
    "check_exhaustiveness",
    # Type Checker
    "TypeChecker",
    "CheckedProgram",
    "check_program",
]
