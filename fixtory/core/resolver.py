"""Per-build attribute resolution.

One BuildContext exists per strategy invocation. It owns the caller's
overrides, the memo of attributes already evaluated and the in-progress
markers used to detect dependency cycles. Lazy attributes read siblings
through the context's AttributeAccessor, which forces (and memoizes) the
sibling on first access.

The complete attribute mapping is resolved before the strategy touches any
live object, so a failure never leaves a half-assigned instance behind.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .attributes import Association
from .enums import Strategy
from .errors import CircularAttributeError, SequenceAbuseError
from .sequences import Sequence

if TYPE_CHECKING:
    from .definition import FactoryDefinition
    from .registry import FactoryRegistry
    from .strategies import BaseStrategy

logger = logging.getLogger(__name__)


class _Omitted:
    """Marker for attributes a strategy leaves out of its result."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMITTED"

    def __bool__(self) -> bool:
        return False


OMITTED = _Omitted()


class AttributeAccessor:
    """Read-only view of the attributes of the build in progress.

    Supports ``a.name``, ``a["name"]`` and ``"name" in a``. Omitted
    associations and alias-suppressed attributes read as None.
    """

    __slots__ = ("_context",)

    def __init__(self, context: BuildContext):
        object.__setattr__(self, "_context", context)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return self._context.get(name)

    def __getitem__(self, name: str) -> Any:
        try:
            return self._context.get(name)
        except AttributeError:
            raise KeyError(name) from None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._context.knows(name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(
            f"Attributes are read-only during resolution (tried to set '{name}')"
        )

    def __repr__(self) -> str:
        return f"<AttributeAccessor factory={self._context.definition.name!r}>"


# Helpers take the accessor as an argument so that every public name on the
# accessor stays free for declared attributes.


def build_strategy(accessor: AttributeAccessor) -> Strategy:
    """Strategy of the build the accessor belongs to."""
    return accessor._context.strategy.name


def associate(
    accessor: AttributeAccessor,
    factory: str,
    strategy: Strategy | str | None = None,
    /,
    **overrides: Any,
) -> Any:
    """Run another factory the way the accessor's build runs its associations.

    Returns None under attributes_for, a stub under stub, and otherwise
    the factory's result for ``strategy`` (the association default when
    omitted).
    """
    association = Association(
        "association", factory=factory, strategy=strategy, overrides=overrides
    )
    value = accessor._context.associate(association)
    return None if value is OMITTED else value


class BuildContext:
    """Ephemeral state for resolving one factory invocation."""

    def __init__(
        self,
        definition: FactoryDefinition,
        overrides: dict[str, Any],
        strategy: BaseStrategy,
        registry: FactoryRegistry,
        depth: int = 0,
    ):
        self.definition = definition
        self.overrides = dict(overrides)
        self.strategy = strategy
        self.registry = registry
        self.depth = depth
        self.accessor = AttributeAccessor(self)

        self._values: dict[str, Any] = {}
        self._in_progress: list[str] = []
        self._suppressed = self._find_suppressed()

    def _find_suppressed(self) -> set[str]:
        """Declared attributes an override covers under another name.

        Supplying ``author_id`` suppresses a declared ``author`` (and the
        reverse) so an object never gets both a relation and its key.
        """
        suppressed = set()
        for name in self.definition.attribute_names():
            if name in self.overrides:
                continue
            if any(alias in self.overrides for alias in self.registry.aliases_for(name)):
                suppressed.add(name)
        if suppressed:
            logger.debug(
                "Factory %s: overrides suppress %s",
                self.definition.name,
                sorted(suppressed),
            )
        return suppressed

    def knows(self, name: str) -> bool:
        return name in self.overrides or self.definition.get_attribute(name) is not None

    def get(self, name: str) -> Any:
        """Resolved value of one attribute, evaluating it on first access."""
        if name in self.overrides:
            return self.overrides[name]
        if name in self._values:
            value = self._values[name]
            return None if value is OMITTED else value
        if name in self._suppressed:
            return None

        attribute = self.definition.get_attribute(name)
        if attribute is None:
            raise AttributeError(
                f"Factory '{self.definition.name}' has no attribute '{name}'"
            )

        if name in self._in_progress:
            start = self._in_progress.index(name)
            raise CircularAttributeError(
                self.definition.name, self._in_progress[start:] + [name]
            )

        self._in_progress.append(name)
        try:
            value = attribute.evaluate(self)
        finally:
            self._in_progress.pop()

        if isinstance(value, Sequence):
            raise SequenceAbuseError(
                f"Attribute '{name}' of factory '{self.definition.name}' evaluated "
                f"to sequence '{value.name}' itself. Call next() on the sequence, "
                f"or declare an inline sequence for the attribute."
            )
        self._values[name] = value
        return None if value is OMITTED else value

    def associate(self, association: Association) -> Any:
        """Produce an association's value under the current strategy."""
        strategy = self.strategy.association_strategy(
            association, self.registry.config.engine.association_strategy
        )
        if strategy is None:
            return OMITTED
        return self.registry.run_factory(
            association.factory,
            strategy,
            association.overrides,
            depth=self.depth + 1,
        )

    def resolve_all(self) -> dict[str, Any]:
        """Resolve every attribute into an ordered name -> value mapping.

        Declared attributes come first in their effective order, then
        overrides for names the factory doesn't declare.
        """
        result: dict[str, Any] = {}
        for name in self.definition.attribute_names():
            if name in self._suppressed:
                continue
            if name in self.overrides:
                result[name] = self.overrides[name]
                continue
            self.get(name)
            value = self._values[name]
            if value is OMITTED:
                continue
            result[name] = value

        for name, value in self.overrides.items():
            if name not in result:
                result[name] = value
        return result
