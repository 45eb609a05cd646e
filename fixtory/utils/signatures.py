"""Call-shape helpers for user-supplied callables."""

import inspect
from typing import Callable


def positional_arity(fn: Callable) -> int:
    """Count how many positional arguments a callable accepts.

    Returns a large number for callables with ``*args`` and 1 for callables
    whose signature can't be inspected (most C builtins).
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return 1

    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 1 << 16
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count
