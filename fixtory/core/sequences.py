"""Named monotonic counters that produce unique formatted values.

Counters are shared by every factory in a registry: the same sequence used
from two factories never hands out the same number twice.
"""

import logging
import threading
from typing import Any, Callable

from .errors import DuplicateSequenceError, UnknownSequenceError

logger = logging.getLogger(__name__)

Formatter = Callable[[int], Any]


def _identity(n: int) -> int:
    return n


class Sequence:
    """A counter plus the formatter that turns each count into a value."""

    def __init__(self, name: str, formatter: Formatter | None = None, start: int = 1):
        self.name = name
        self.formatter = formatter or _identity
        self.start = start
        self._value = start
        self._lock = threading.Lock()

    def next(self) -> Any:
        """Format the current count, then advance it."""
        with self._lock:
            n = self._value
            self._value += 1
        return self.formatter(n)

    @property
    def current(self) -> int:
        """The count the next call will use."""
        return self._value

    def rewind(self) -> None:
        with self._lock:
            self._value = self.start

    def __repr__(self) -> str:
        return f"Sequence({self.name!r}, current={self._value})"


class SequenceRegistry:
    """Name -> Sequence table for one factory registry."""

    def __init__(self) -> None:
        self._sequences: dict[str, Sequence] = {}
        self._lock = threading.Lock()

    def define(
        self, name: str, formatter: Formatter | None = None, start: int = 1
    ) -> Sequence:
        """Register a new sequence.

        Raises:
            DuplicateSequenceError: If the name is already registered
        """
        with self._lock:
            if name in self._sequences:
                raise DuplicateSequenceError(f"Sequence already defined: {name}")
            sequence = Sequence(name, formatter, start=start)
            self._sequences[name] = sequence
        logger.debug("Registered sequence: %s", name)
        return sequence

    def get(self, name: str) -> Sequence:
        """Return the Sequence object itself (not a value)."""
        try:
            return self._sequences[name]
        except KeyError:
            raise UnknownSequenceError(f"No such sequence: {name}") from None

    def next(self, name: str) -> Any:
        """Advance the named sequence and return its formatted value."""
        return self.get(name).next()

    def __contains__(self, name: object) -> bool:
        return name in self._sequences

    def names(self) -> list[str]:
        return list(self._sequences)

    def rewind(self) -> None:
        """Reset every counter to its starting value."""
        for sequence in self._sequences.values():
            sequence.rewind()

    def clear(self) -> None:
        with self._lock:
            self._sequences.clear()
        logger.debug("Sequence registry cleared")
