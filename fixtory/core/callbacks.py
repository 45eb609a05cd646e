"""Lifecycle callbacks and their dispatch.

Callbacks run for side effect only; their return values are ignored. A
definition's effective callback list already holds inherited callbacks
first, so dispatch is a single in-order pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from ..utils.signatures import positional_arity
from .enums import CallbackName

if TYPE_CHECKING:
    from .definition import FactoryDefinition
    from .resolver import AttributeAccessor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Callback:
    """A named hook bound to the factory that declared it."""

    name: CallbackName
    fn: Callable[..., Any]
    factory: str = ""
    _takes_accessor: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", CallbackName.coerce(self.name))
        object.__setattr__(self, "_takes_accessor", positional_arity(self.fn) >= 2)

    def __call__(self, obj: Any, accessor: AttributeAccessor | None = None) -> None:
        if self._takes_accessor:
            self.fn(obj, accessor)
        else:
            self.fn(obj)


def run_callbacks(
    definition: FactoryDefinition,
    name: CallbackName | str,
    obj: Any,
    accessor: AttributeAccessor | None = None,
) -> None:
    """Invoke every effective callback called ``name`` against ``obj``, in order.

    Args:
        definition: Effective (inheritance-merged) factory definition
        name: Which hook to run
        obj: The produced object, mutated by the callbacks
        accessor: Attribute accessor of the build, for two-argument callbacks
    """
    name = CallbackName.coerce(name)
    callbacks = definition.callbacks_for(name)
    if not callbacks:
        return
    logger.debug(
        "Running %d %s callback(s) for factory %s",
        len(callbacks),
        name.value,
        definition.name,
    )
    for callback in callbacks:
        callback(obj, accessor)
