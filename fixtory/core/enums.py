"""Closed sets of names used across the engine: strategies and callback hooks."""

from enum import Enum

from .errors import InvalidCallbackNameError, InvalidStrategyError


class Strategy(str, Enum):
    """The four ways a factory can produce its result."""

    ATTRIBUTES_FOR = "attributes_for"
    BUILD = "build"
    CREATE = "create"
    STUB = "stub"

    @classmethod
    def coerce(cls, value: "Strategy | str") -> "Strategy":
        """Accept a Strategy or its string name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise InvalidStrategyError(
                f"Unknown strategy {value!r}. Expected one of: {valid}"
            ) from None


class CallbackName(str, Enum):
    """Lifecycle hooks a factory can attach behaviour to."""

    AFTER_BUILD = "after_build"
    AFTER_CREATE = "after_create"
    AFTER_STUB = "after_stub"

    @classmethod
    def coerce(cls, value: "CallbackName | str") -> "CallbackName":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise InvalidCallbackNameError(
                f"Unknown callback {value!r}. Expected one of: {valid}"
            ) from None
