"""Algorithm W type inference with let-polymorphism over sum types."""

import itertools

from loguru import logger

from parlang.config.settings import CheckerSettings, load_settings
from parlang.core.ast import (
    Abs,
    App,
    BinOp,
    BoolLit,
    CharLit,
    Constructor,
    Expr,
    FieldAccess,
    If,
    IntLit,
    Let,
    LetRec,
    Match,
    PBool,
    PConstructor,
    PInt,
    PRecord,
    PTuple,
    PVar,
    PWildcard,
    Pattern,
    Program,
    Range,
    Record,
    Tuple,
    TupleProj,
    TypeAnnotation,
    Var,
)
from parlang.core.context import TypeEnvironment
from parlang.core.errors import (
    ConstructorArityMismatch,
    FieldNotFound,
    RecordExpected,
    TupleExpected,
    TupleIndexOutOfRange,
    UnboundVariable,
    UnificationError,
)
from parlang.core.exhaustiveness import ExhaustivenessWarning, check_exhaustiveness
from parlang.core.module import CheckedProgram
from parlang.core.registry import ConstructorRegistry
from parlang.core.types import (
    BOOL,
    CHAR,
    INT,
    RANGE,
    Type,
    TypeArrow,
    TypeRecord,
    TypeScheme,
    TypeTuple,
    TypeVar,
)
from parlang.core.unify import Substitution, unify

ARITHMETIC_OPS = frozenset({"+", "-", "*", "/"})
ORDERING_OPS = frozenset({"<", "<=", ">", ">="})
EQUALITY_OPS = frozenset({"==", "!="})

Inferred = tuple[Substitution, Type]


class TypeChecker:
    """Hindley-Milner inferencer for one inference pass.

    Owns the fresh type variable supply and collects exhaustiveness warnings
    for every match expression it visits. Separate instances share no state.
    """

    def __init__(
        self,
        registry: ConstructorRegistry | None = None,
        settings: CheckerSettings | None = None,
    ):
        """Initialize with the frozen constructor registry.

        Args:
            registry: Constructors declared by the program's type declarations
            settings: Pass settings; loaded from the environment when omitted
        """
        self.registry = registry if registry is not None else ConstructorRegistry.empty()
        self.settings = settings if settings is not None else load_settings()
        self.warnings: list[ExhaustivenessWarning] = []
        self._var_counter = itertools.count(0)

    def fresh_var(self) -> TypeVar:
        """Generate a fresh type variable."""
        return TypeVar(next(self._var_counter))

    def _unify(self, t1: Type, t2: Type) -> Substitution:
        return unify(t1, t2, self.fresh_var)

    def infer_type(self, expr: Expr, env: TypeEnvironment | None = None) -> Type:
        """Infer the fully substituted type of `expr`."""
        subst, ty = self.infer(env if env is not None else TypeEnvironment.empty(), expr)
        return subst.apply(ty)

    def infer(self, env: TypeEnvironment, expr: Expr) -> Inferred:
        """Infer a substitution and type for `expr` under `env`.

        Raises:
            TypeError: The first type error found; inference stops there
        """
        match expr:
            case IntLit(_):
                return Substitution.empty(), INT

            case BoolLit(_):
                return Substitution.empty(), BOOL

            case CharLit(_):
                return Substitution.empty(), CHAR

            case Var(name):
                scheme = env.lookup(name)
                if scheme is None:
                    raise UnboundVariable(name)
                return Substitution.empty(), scheme.instantiate(self.fresh_var)

            case Abs(param, body, annotation):
                param_ty = self._annotation_type(annotation) if annotation is not None else self.fresh_var()
                s1, body_ty = self.infer(env.extend(param, TypeScheme.mono(param_ty)), body)
                return s1, TypeArrow(s1.apply(param_ty), body_ty)

            case App(func, arg):
                s1, func_ty = self.infer(env, func)
                s2, arg_ty = self.infer(env.apply(s1), arg)
                result_ty = self.fresh_var()
                s3 = self._unify(s2.apply(func_ty), TypeArrow(arg_ty, result_ty))
                return s3.compose(s2.compose(s1)), s3.apply(result_ty)

            case Let(name, value, body, annotation):
                s1, value_ty = self.infer(env, value)
                if annotation is not None:
                    s_ann = self._unify(value_ty, self._annotation_type(annotation))
                    s1 = s_ann.compose(s1)
                    value_ty = s_ann.apply(value_ty)
                env1 = env.apply(s1)
                scheme = env1.generalize(value_ty)
                logger.debug("typecheck.let.generalize name={} scheme={}", name, scheme)
                s2, body_ty = self.infer(env1.extend(name, scheme), body)
                return s2.compose(s1), body_ty

            case LetRec(name, value, body):
                # Monomorphic inside its own definition, generalized only afterwards
                self_ty = self.fresh_var()
                s1, value_ty = self.infer(env.extend(name, TypeScheme.mono(self_ty)), value)
                s2 = self._unify(s1.apply(self_ty), value_ty)
                subst = s2.compose(s1)
                env1 = env.apply(subst)
                scheme = env1.generalize(s2.apply(value_ty))
                logger.debug("typecheck.let_rec.generalize name={} scheme={}", name, scheme)
                s3, body_ty = self.infer(env1.extend(name, scheme), body)
                return s3.compose(subst), body_ty

            case If(cond, then_branch, else_branch):
                s1, cond_ty = self.infer(env, cond)
                subst = self._unify(cond_ty, BOOL).compose(s1)
                s2, then_ty = self.infer(env.apply(subst), then_branch)
                subst = s2.compose(subst)
                s3, else_ty = self.infer(env.apply(subst), else_branch)
                subst = s3.compose(subst)
                then_ty = s3.apply(then_ty)
                s4 = self._unify(then_ty, else_ty)
                return s4.compose(subst), s4.apply(then_ty)

            case BinOp(op, left, right):
                return self._infer_binop(env, op, left, right)

            case Constructor(name, args):
                info = self.registry.require(name)
                if len(args) != info.arity:
                    raise ConstructorArityMismatch(name, info.arity, len(args))
                owner, fields = self.registry.instantiate(name, self.fresh_var)
                subst = Substitution.empty()
                for arg, field_ty in zip(args, fields):
                    s_arg, arg_ty = self.infer(env.apply(subst), arg)
                    subst = s_arg.compose(subst)
                    subst = self._unify(subst.apply(field_ty), arg_ty).compose(subst)
                return subst, subst.apply(owner)

            case Tuple(elements):
                subst, types = self._infer_sequence(env, elements)
                return subst, TypeTuple([subst.apply(t) for t in types])

            case Record(fields):
                subst, types = self._infer_sequence(env, list(fields.values()))
                return subst, TypeRecord({name: subst.apply(t) for name, t in zip(fields, types)})

            case TupleProj(tuple_expr, index):
                subst, tuple_ty = self.infer(env, tuple_expr)
                match subst.apply(tuple_ty):
                    case TypeTuple(elements):
                        if not 0 <= index < len(elements):
                            raise TupleIndexOutOfRange(index, len(elements))
                        return subst, elements[index]
                    case _:
                        raise TupleExpected(tuple_ty)

            case FieldAccess(record_expr, field_name):
                subst, record_ty = self.infer(env, record_expr)
                record_ty = subst.apply(record_ty)
                match record_ty:
                    case TypeRecord(fields, _) if field_name in fields:
                        return subst, fields[field_name]
                    case TypeRecord(fields, None):
                        raise FieldNotFound(field_name, sorted(fields))
                    case TypeRecord() | TypeVar():
                        # Require the field and leave the remaining fields open
                        field_ty = self.fresh_var()
                        s_row = self._unify(record_ty, TypeRecord({field_name: field_ty}, self.fresh_var().id))
                        return s_row.compose(subst), s_row.apply(field_ty)
                    case _:
                        raise RecordExpected(record_ty)

            case Range(start, end):
                s1, start_ty = self.infer(env, start)
                subst = self._unify(start_ty, INT).compose(s1)
                s2, end_ty = self.infer(env.apply(subst), end)
                subst = self._unify(end_ty, INT).compose(s2.compose(subst))
                return subst, RANGE

            case Match(scrutinee, arms):
                subst, scrut_ty = self.infer(env, scrutinee)
                result_ty = self.fresh_var()
                for arm in arms:
                    bindings: dict[str, Type] = {}
                    subst = self._infer_pattern(arm.pattern, subst.apply(scrut_ty), bindings).compose(subst)
                    arm_env = env.apply(subst).extend_many(
                        {name: TypeScheme.mono(subst.apply(ty)) for name, ty in bindings.items()}
                    )
                    s_body, body_ty = self.infer(arm_env, arm.body)
                    subst = s_body.compose(subst)
                    subst = self._unify(subst.apply(result_ty), body_ty).compose(subst)
                self._check_match(expr)
                return subst, subst.apply(result_ty)

            case _:
                raise TypeError(f"Unknown expression: {expr}")

    def _infer_sequence(self, env: TypeEnvironment, exprs: list[Expr]) -> tuple[Substitution, list[Type]]:
        """Infer sibling expressions left to right, threading the substitution."""
        subst = Substitution.empty()
        types = []
        for expr in exprs:
            s, ty = self.infer(env.apply(subst), expr)
            subst = s.compose(subst)
            types.append(ty)
        return subst, types

    def _infer_binop(self, env: TypeEnvironment, op: str, left: Expr, right: Expr) -> Inferred:
        s1, left_ty = self.infer(env, left)
        s2, right_ty = self.infer(env.apply(s1), right)
        subst = s2.compose(s1)
        left_ty = s2.apply(left_ty)

        if op in ARITHMETIC_OPS:
            s3 = self._unify(left_ty, INT)
            s4 = self._unify(s3.apply(right_ty), INT)
            return s4.compose(s3.compose(subst)), INT

        if op in ORDERING_OPS:
            s3 = self._unify(left_ty, right_ty)
            operand_ty = s3.apply(left_ty)
            match operand_ty:
                case TypeVar():
                    # Unresolved operands default to Int
                    s4 = self._unify(operand_ty, INT)
                case _ if operand_ty in (INT, CHAR):
                    s4 = Substitution.empty()
                case _:
                    raise UnificationError(operand_ty, INT)
            return s4.compose(s3.compose(subst)), BOOL

        if op in EQUALITY_OPS:
            s3 = self._unify(left_ty, right_ty)
            return s3.compose(subst), BOOL

        raise ValueError(f"Unknown operator: {op}")

    def _infer_pattern(self, pattern: Pattern, expected: Type, bindings: dict[str, Type]) -> Substitution:
        """Type `pattern` against `expected`, recording variable bindings.

        Recorded binding types are relative to the returned substitution's
        input; callers apply the final substitution to them.
        """
        match pattern:
            case PWildcard():
                return Substitution.empty()

            case PVar(name):
                bindings[name] = expected
                return Substitution.empty()

            case PBool(_):
                return self._unify(expected, BOOL)

            case PInt(_):
                return self._unify(expected, INT)

            case PConstructor(name, args):
                info = self.registry.require(name)
                if len(args) != info.arity:
                    raise ConstructorArityMismatch(name, info.arity, len(args))
                owner, fields = self.registry.instantiate(name, self.fresh_var)
                return self._infer_subpatterns(self._unify(expected, owner), list(zip(args, fields)), bindings)

            case PTuple(elements):
                element_types: list[Type] = [self.fresh_var() for _ in elements]
                subst = self._unify(expected, TypeTuple(element_types))
                return self._infer_subpatterns(subst, list(zip(elements, element_types)), bindings)

            case PRecord(fields):
                # Record patterns name a subset of the scrutinee's fields
                field_types: dict[str, Type] = {name: self.fresh_var() for name in fields}
                subst = self._unify(expected, TypeRecord(field_types, self.fresh_var().id))
                pairs = [(sub, field_types[name]) for name, sub in fields.items()]
                return self._infer_subpatterns(subst, pairs, bindings)

            case _:
                raise TypeError(f"Unknown pattern: {pattern}")

    def _infer_subpatterns(
        self,
        subst: Substitution,
        pairs: list[tuple[Pattern, Type]],
        bindings: dict[str, Type],
    ) -> Substitution:
        for sub_pattern, sub_type in pairs:
            s = self._infer_pattern(sub_pattern, subst.apply(sub_type), bindings)
            subst = s.compose(subst)
        return subst

    def _check_match(self, expr: Match) -> None:
        """Run the exhaustiveness check for one match and record any warning."""
        if not self.settings.check_exhaustiveness:
            return
        result = check_exhaustiveness([arm.pattern for arm in expr.arms], self.registry)
        if result.exhaustive:
            return
        warning = ExhaustivenessWarning(result.missing)
        self.warnings.append(warning)
        if self.settings.log_warnings:
            logger.warning("exhaustiveness.non_exhaustive missing={}", ", ".join(result.missing))

    def _annotation_type(self, annotation: TypeAnnotation) -> Type:
        """Resolve a source annotation; its type variables become fresh variables."""
        return self.registry.resolve(annotation, {}, self.fresh_var)


def check_program(program: Program, settings: CheckerSettings | None = None) -> CheckedProgram:
    """Run the static-analysis pass over a whole program.

    Registers the program's type declarations, infers the body's type, and
    collects exhaustiveness warnings from every match expression.

    Returns:
        The checked program with its generalized top-level type

    Raises:
        TypeError: On the first type error; no partial result is produced
    """
    registry = ConstructorRegistry.from_declarations(program.declarations)
    checker = TypeChecker(registry, settings)
    logger.debug("typecheck.start declarations={} constructors={}", len(program.declarations), len(registry))
    ty = checker.infer_type(program.body)
    scheme = TypeEnvironment.empty().generalize(ty)
    logger.debug("typecheck.done scheme={} warnings={}", scheme, len(checker.warnings))
    return CheckedProgram(
        body=program.body,
        registry=registry,
        type=ty,
        scheme=scheme,
        warnings=list(checker.warnings),
    )
