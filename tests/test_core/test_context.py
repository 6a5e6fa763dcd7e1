"""Tests for type environments and generalization."""

from parlang.core.context import TypeEnvironment, generalize
from parlang.core.types import BOOL, INT, TypeArrow, TypeScheme, TypeVar
from parlang.core.unify import Substitution


class TestEnvironmentLookup:
    """Tests for environment creation and lookup."""

    def test_empty(self):
        """Test creating empty environment."""
        env = TypeEnvironment.empty()
        assert len(env) == 0
        assert env.lookup("x") is None

    def test_lookup(self):
        env = TypeEnvironment({"x": TypeScheme.mono(INT)})
        assert env.lookup("x") == TypeScheme.mono(INT)
        assert "x" in env


class TestEnvironmentExtension:
    """Tests for persistent extension."""

    def test_extend_returns_new_environment(self):
        """Extending does not modify the original."""
        env = TypeEnvironment.empty()
        extended = env.extend("x", TypeScheme.mono(INT))
        assert "x" in extended
        assert "x" not in env

    def test_sibling_extensions_are_isolated(self):
        """Two extensions of the same base never see each other's bindings."""
        base = TypeEnvironment({"y": TypeScheme.mono(BOOL)})
        left = base.extend("x", TypeScheme.mono(INT))
        right = base.extend("z", TypeScheme.mono(INT))
        assert "z" not in left
        assert "x" not in right
        assert len(base) == 1

    def test_extend_shadows(self):
        env = TypeEnvironment.empty().extend("x", TypeScheme.mono(INT)).extend("x", TypeScheme.mono(BOOL))
        assert env.lookup("x") == TypeScheme.mono(BOOL)

    def test_extend_many(self):
        env = TypeEnvironment.empty().extend_many({"a": TypeScheme.mono(INT), "b": TypeScheme.mono(BOOL)})
        assert len(env) == 2

    def test_apply(self):
        """Applying a substitution touches free variables only."""
        env = TypeEnvironment(
            {
                "f": TypeScheme([0], TypeArrow(TypeVar(0), TypeVar(1))),
                "x": TypeScheme.mono(TypeVar(0)),
            }
        )
        applied = env.apply(Substitution({0: INT, 1: BOOL}))
        assert applied.lookup("f") == TypeScheme([0], TypeArrow(TypeVar(0), BOOL))
        assert applied.lookup("x") == TypeScheme.mono(INT)
        assert env.lookup("x") == TypeScheme.mono(TypeVar(0))


class TestGeneralize:
    """Tests for generalization."""

    def test_empty_environment(self):
        """Every free variable is quantified in an empty environment."""
        scheme = generalize(TypeEnvironment.empty(), TypeArrow(TypeVar(3), TypeVar(1)))
        assert scheme.vars == [1, 3]

    def test_never_quantifies_environment_vars(self):
        env = TypeEnvironment({"x": TypeScheme.mono(TypeVar(0))})
        scheme = generalize(env, TypeArrow(TypeVar(0), TypeVar(1)))
        assert scheme.vars == [1]
        assert 0 not in scheme.vars

    def test_quantified_env_vars_are_not_free(self):
        """Variables bound inside an environment scheme do not block generalization."""
        env = TypeEnvironment({"id": TypeScheme([0], TypeArrow(TypeVar(0), TypeVar(0)))})
        scheme = generalize(env, TypeVar(0))
        assert scheme.vars == [0]

    def test_closed_type(self):
        scheme = generalize(TypeEnvironment.empty(), INT)
        assert scheme.vars == []
        assert str(scheme) == "Int"
