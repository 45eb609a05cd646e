"""Stub stand-ins produced by the stub strategy.

A Stub is deliberately not an instance of the factory's target class. It
answers attribute reads, accepts in-memory assignment (so after_stub
callbacks can adjust it) and reports itself as already persisted, but any
call that would reach the persistence layer raises StubbedObjectError.
"""

import itertools
import threading
from typing import Any

from .errors import StubbedObjectError

STUB_ID_START = 1000

_id_counter = itertools.count(STUB_ID_START)
_id_lock = threading.Lock()

# Slots set in __init__; every other name lives in the attribute mapping
_INTERNAL = frozenset({"_factory", "_attributes"})


def next_stub_id() -> int:
    """Allocate a process-wide unique stub id. Ids are never reused."""
    with _id_lock:
        return next(_id_counter)


class Stub:
    """Persisted-looking, database-free stand-in for a factory product."""

    def __init__(self, factory: str, attributes: dict[str, Any]):
        values = dict(attributes)
        if values.get("id") is None:
            values["id"] = next_stub_id()
        object.__setattr__(self, "_factory", factory)
        object.__setattr__(self, "_attributes", values)

    # ── Attribute access ──

    def __getattr__(self, name: str) -> Any:
        if name in _INTERNAL or name.startswith("__"):
            raise AttributeError(name)
        try:
            return self._attributes[name]
        except KeyError:
            raise AttributeError(
                f"Stub of '{self._factory}' has no attribute '{name}'"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _INTERNAL:
            raise AttributeError(f"Cannot set private attribute '{name}' on a stub")
        self._attributes[name] = value

    def __getitem__(self, name: str) -> Any:
        return self._attributes[name]

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    @property
    def factory_name(self) -> str:
        return self._factory

    @property
    def new_record(self) -> bool:
        return False

    @property
    def persisted(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return dict(self._attributes)

    # ── Forbidden persistence operations ──

    @property
    def connection(self) -> Any:
        raise StubbedObjectError("connection")

    def save(self, *args: Any, **kwargs: Any) -> None:
        raise StubbedObjectError("save")

    def reload(self, *args: Any, **kwargs: Any) -> None:
        raise StubbedObjectError("reload")

    def destroy(self, *args: Any, **kwargs: Any) -> None:
        raise StubbedObjectError("destroy")

    def delete(self, *args: Any, **kwargs: Any) -> None:
        raise StubbedObjectError("delete")

    def update_attribute(self, *args: Any, **kwargs: Any) -> None:
        raise StubbedObjectError("update_attribute")

    def update_attributes(self, *args: Any, **kwargs: Any) -> None:
        raise StubbedObjectError("update_attributes")

    def update(self, *args: Any, **kwargs: Any) -> None:
        raise StubbedObjectError("update")

    def increment(self, *args: Any, **kwargs: Any) -> None:
        raise StubbedObjectError("increment")

    def decrement(self, *args: Any, **kwargs: Any) -> None:
        raise StubbedObjectError("decrement")

    def toggle(self, *args: Any, **kwargs: Any) -> None:
        raise StubbedObjectError("toggle")

    def __repr__(self) -> str:
        return f"<Stub {self._factory} id={self._attributes.get('id')}>"
