"""Type environments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from parlang.core.types import Type, TypeScheme

if TYPE_CHECKING:
    from parlang.core.unify import Substitution


@dataclass
class TypeEnvironment:
    """Typing environment Γ mapping variable names to type schemes.

    Environments are never mutated after construction: `extend` returns a
    new environment, so a binding added for one branch or match arm is
    invisible to its siblings.
    """

    bindings: dict[str, TypeScheme]

    def __init__(self, bindings: dict[str, TypeScheme] | None = None):
        self.bindings = dict(bindings) if bindings is not None else {}

    @staticmethod
    def empty() -> "TypeEnvironment":
        """Create an empty environment."""
        return TypeEnvironment()

    def lookup(self, name: str) -> TypeScheme | None:
        """Look up the scheme bound to `name`, or None."""
        return self.bindings.get(name)

    def extend(self, name: str, scheme: TypeScheme) -> "TypeEnvironment":
        """Return a new environment with `name` bound to `scheme`."""
        new_bindings = dict(self.bindings)
        new_bindings[name] = scheme
        return TypeEnvironment(new_bindings)

    def extend_many(self, bindings: dict[str, TypeScheme]) -> "TypeEnvironment":
        """Return a new environment with all of `bindings` added."""
        if not bindings:
            return self
        new_bindings = dict(self.bindings)
        new_bindings.update(bindings)
        return TypeEnvironment(new_bindings)

    def apply(self, subst: Substitution) -> "TypeEnvironment":
        """Apply a substitution to every scheme in the environment."""
        if not subst.mapping:
            return self
        return TypeEnvironment({name: subst.apply_scheme(s) for name, s in self.bindings.items()})

    def free_vars(self) -> set[int]:
        """Type variables free in any bound scheme."""
        result: set[int] = set()
        for scheme in self.bindings.values():
            result |= scheme.free_vars()
        return result

    def generalize(self, ty: Type) -> TypeScheme:
        """Quantify the variables of `ty` that are not free in this environment."""
        quantified = sorted(ty.free_vars() - self.free_vars())
        return TypeScheme(quantified, ty)

    def __contains__(self, name: str) -> bool:
        return name in self.bindings

    def __len__(self) -> int:
        """Return the number of bound names."""
        return len(self.bindings)

    def __str__(self) -> str:
        items = ", ".join(f"{name}: {scheme}" for name, scheme in self.bindings.items())
        return f"TypeEnvironment([{items}])"


def generalize(env: TypeEnvironment, ty: Type) -> TypeScheme:
    """Quantify every variable free in `ty` but not in `env`, ascending by id."""
    return env.generalize(ty)
