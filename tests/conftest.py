"""Test configuration and shared fixtures."""

import pytest

from parlang.config.settings import CheckerSettings
from parlang.core.ast import TyApp, TyName, TyVar, TypeDeclaration
from parlang.core.checker import TypeChecker
from parlang.core.registry import ConstructorRegistry

OPTION = TypeDeclaration("Option", ["a"], [("Some", [TyVar("a")]), ("None", [])])
EITHER = TypeDeclaration("Either", ["a", "b"], [("Left", [TyVar("a")]), ("Right", [TyVar("b")])])
LIST = TypeDeclaration("List", ["a"], [("Nil", []), ("Cons", [TyVar("a"), TyApp("List", [TyVar("a")])])])
PAIR = TypeDeclaration("Pair", ["a", "b"], [("MkPair", [TyVar("a"), TyVar("b")])])
STATUS = TypeDeclaration(
    "Status",
    [],
    [("Active", []), ("Pending", []), ("Archived", []), ("Deleted", [])],
)
SHAPE = TypeDeclaration("Shape", [], [("Circle", [TyName("Int")]), ("Rect", [TyName("Int"), TyName("Int")])])

DECLARATIONS = [OPTION, EITHER, LIST, PAIR, STATUS, SHAPE]


@pytest.fixture
def registry() -> ConstructorRegistry:
    """Registry with Option, Either, List, Pair, Status and Shape declared."""
    return ConstructorRegistry.from_declarations(DECLARATIONS)


@pytest.fixture
def settings() -> CheckerSettings:
    """Default settings, independent of the process environment."""
    return CheckerSettings(check_exhaustiveness=True, log_warnings=True)


@pytest.fixture
def checker(registry: ConstructorRegistry, settings: CheckerSettings) -> TypeChecker:
    """A fresh checker over the shared registry."""
    return TypeChecker(registry, settings)


@pytest.fixture
def declarations() -> list[TypeDeclaration]:
    """Type declarations for whole-program tests."""
    return list(DECLARATIONS)
