"""Result of the static-analysis pass, handed on to the evaluator.

`CheckedProgram` is only produced when inference succeeded; a type error
aborts the pass before one is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from parlang.core.ast import Expr
from parlang.core.exhaustiveness import ExhaustivenessWarning
from parlang.core.registry import ConstructorRegistry
from parlang.core.types import Type, TypeScheme


@dataclass(frozen=True)
class CheckedProgram:
    """Container for everything the evaluator and front end need.

    Attributes:
        body: The type-checked program expression
        registry: Frozen constructor registry built from the declarations
        type: Fully substituted type of the body
        scheme: The body's type generalized over all of its variables
        warnings: One warning per non-exhaustive match expression, in
            traversal order
    """

    body: Expr
    registry: ConstructorRegistry
    type: Type
    scheme: TypeScheme
    warnings: list[ExhaustivenessWarning] = field(default_factory=list)

    @property
    def rendered_type(self) -> str:
        """Top-level type as shown to the user, e.g. `forall t0. t0 -> t0`."""
        return str(self.scheme)

    def render_warnings(self) -> list[str]:
        return [str(w) for w in self.warnings]
