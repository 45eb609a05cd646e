"""Pure utility functions for fixtory.

This module contains helpers with no dependencies on the engine itself, so
they can be imported from anywhere without circular import risk.

Modules:
- eval_safe: Safe expression evaluation for formula attributes
- naming: Factory name <-> class name conventions
- signatures: Positional arity of user callables
"""

from .eval_safe import (
    eval_safe,
    eval_formula,
    validate_expression_syntax,
    FormulaError,
    SAFE_BUILTINS,
)
from .naming import camelize, underscore
from .signatures import positional_arity

__all__ = [
    # Eval
    "eval_safe",
    "eval_formula",
    "validate_expression_syntax",
    "FormulaError",
    "SAFE_BUILTINS",
    # Naming
    "camelize",
    "underscore",
    # Signatures
    "positional_arity",
]
