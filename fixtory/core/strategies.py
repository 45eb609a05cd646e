"""The four build strategies.

Every strategy shares the same resolution step (BuildContext.resolve_all)
and differs only in two places:
- association_strategy: how associations are evaluated (or omitted)
- produce: what is done with the resolved attribute mapping

| Strategy       | Associations          | Result         | Persistence | Callbacks                 |
|----------------|-----------------------|----------------|-------------|---------------------------|
| attributes_for | omitted               | dict           | none        | none                      |
| build          | association strategy  | target object  | none        | after_build               |
| create         | association strategy  | target object  | save()      | after_build, after_create |
| stub           | stubbed               | Stub           | forbidden   | after_stub                |
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .callbacks import run_callbacks
from .enums import CallbackName, Strategy
from .stub import Stub

if TYPE_CHECKING:
    from .attributes import Association
    from .resolver import BuildContext

logger = logging.getLogger(__name__)


class BaseStrategy(ABC):
    """One way of turning a resolved attribute mapping into a result."""

    name: Strategy

    def association_strategy(
        self, association: Association, default: Strategy | str
    ) -> Strategy | None:
        """Strategy for an association, or None to leave it out entirely."""
        if association.strategy is not None:
            return association.strategy
        return Strategy.coerce(default)

    @abstractmethod
    def produce(self, context: BuildContext, attributes: dict[str, Any]) -> Any:
        """Turn the resolved attributes into this strategy's result."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class AttributesForStrategy(BaseStrategy):
    """Plain attribute mapping; no objects, no persistence, no callbacks."""

    name = Strategy.ATTRIBUTES_FOR

    def association_strategy(
        self, association: Association, default: Strategy | str
    ) -> Strategy | None:
        return None

    def produce(self, context: BuildContext, attributes: dict[str, Any]) -> dict:
        return dict(attributes)


class BuildStrategy(BaseStrategy):
    """Unsaved target instance with attributes assigned."""

    name = Strategy.BUILD

    def instantiate(self, context: BuildContext, attributes: dict[str, Any]) -> Any:
        target = context.registry.resolve_class(context.definition)
        instance = target()
        for attr_name, value in attributes.items():
            setattr(instance, attr_name, value)
        return instance

    def produce(self, context: BuildContext, attributes: dict[str, Any]) -> Any:
        instance = self.instantiate(context, attributes)
        run_callbacks(
            context.definition, CallbackName.AFTER_BUILD, instance, context.accessor
        )
        return instance


class CreateStrategy(BuildStrategy):
    """Built instance, then saved through its own ``save()``."""

    name = Strategy.CREATE

    def produce(self, context: BuildContext, attributes: dict[str, Any]) -> Any:
        instance = self.instantiate(context, attributes)
        run_callbacks(
            context.definition, CallbackName.AFTER_BUILD, instance, context.accessor
        )
        instance.save()
        logger.debug("Saved %s from factory %s", type(instance).__name__, context.definition.name)
        run_callbacks(
            context.definition, CallbackName.AFTER_CREATE, instance, context.accessor
        )
        return instance


class StubStrategy(BaseStrategy):
    """Read-only stand-in; associations are stubbed too."""

    name = Strategy.STUB

    def association_strategy(
        self, association: Association, default: Strategy | str
    ) -> Strategy | None:
        return Strategy.STUB

    def produce(self, context: BuildContext, attributes: dict[str, Any]) -> Stub:
        stub = Stub(context.definition.name, attributes)
        run_callbacks(
            context.definition, CallbackName.AFTER_STUB, stub, context.accessor
        )
        return stub


STRATEGIES: dict[Strategy, BaseStrategy] = {
    Strategy.ATTRIBUTES_FOR: AttributesForStrategy(),
    Strategy.BUILD: BuildStrategy(),
    Strategy.CREATE: CreateStrategy(),
    Strategy.STUB: StubStrategy(),
}


def get_strategy(strategy: Strategy | str) -> BaseStrategy:
    """Look up the implementation for a strategy name."""
    return STRATEGIES[Strategy.coerce(strategy)]
