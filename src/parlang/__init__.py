"""Static-analysis core of the ParLang functional language.

Hindley-Milner type inference with let-polymorphism over sum types, tuples,
records and ranges, plus a pattern-match exhaustiveness checker.
"""

from parlang.core import CheckedProgram, TypeChecker, check_program

__all__ = [
    "CheckedProgram",
    "TypeChecker",
    "check_program",
]
