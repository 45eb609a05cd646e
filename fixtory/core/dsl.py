"""Python definition front-end.

A FactoryBuilder collects declarations inside a ``with`` block and registers
the finished definition when the block exits cleanly:

    with registry.define("user", class_=User) as f:
        f.set("first_name", "Jimi")
        f.set("last_name", "Hendrix")
        f.lazy("email", lambda a: f"{a.first_name}.{a.last_name}@example.com".lower())
        f.sequence("username", lambda n: f"username{n}")

        @f.after_build
        def mark(user):
            user.built = True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from .attributes import (
    Association,
    FormulaAttribute,
    LazyAttribute,
    SequenceAttribute,
    StaticAttribute,
)
from .definition import FactoryDefinition
from .enums import CallbackName, Strategy
from .sequences import Formatter

if TYPE_CHECKING:
    from .registry import FactoryRegistry


class FactoryBuilder:
    """Declaration surface for one factory definition."""

    def __init__(self, registry: FactoryRegistry, definition: FactoryDefinition):
        self._registry = registry
        self.definition = definition

    def __enter__(self) -> FactoryBuilder:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self._registry.register(self.definition)
        return False

    # ── Attributes ──

    def set(self, name: str, value: Any) -> None:
        """Declare a static attribute. Callables are stored as-is, not called."""
        self.definition.add_attribute(StaticAttribute(name, value))

    def lazy(self, name: str, fn: Callable[..., Any] | None = None):
        """Declare a lazy attribute; usable directly or as a decorator.

        The callable takes no arguments or the build's attribute accessor.
        """
        if fn is None:

            def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
                self.definition.add_attribute(LazyAttribute(name, func))
                return func

            return decorator
        self.definition.add_attribute(LazyAttribute(name, fn))
        return fn

    def formula(self, name: str, expression: str) -> None:
        """Declare an attribute computed by a restricted expression."""
        self.definition.add_attribute(FormulaAttribute(name, expression))

    def sequence(
        self, name: str, formatter: Formatter | None = None, start: int = 1
    ) -> None:
        """Declare an inline sequence attribute with its own counter."""
        self.definition.add_attribute(SequenceAttribute(name, formatter, start=start))

    def association(
        self,
        name: str,
        /,
        factory: str | type | None = None,
        strategy: Strategy | str | None = None,
        **overrides: Any,
    ) -> None:
        """Declare an attribute filled by running another factory.

        Example:
            f.association("author", factory="user", strategy="build", admin=True)

        Args:
            name: Attribute name (also the factory name when ``factory`` is omitted)
            factory: Factory to run
            strategy: Strategy for the associated factory (configured
                association default, normally create, when omitted)
            **overrides: Overrides passed to the associated factory
        """
        factory_name = self._registry.factory_name(factory) if factory else None
        self.definition.add_attribute(
            Association(name, factory=factory_name, strategy=strategy, overrides=overrides)
        )

    # ── Callbacks ──

    def callback(self, name: CallbackName | str, fn: Callable[..., Any]):
        self.definition.add_callback(name, fn)
        return fn

    def after_build(self, fn: Callable[..., Any]):
        return self.callback(CallbackName.AFTER_BUILD, fn)

    def after_create(self, fn: Callable[..., Any]):
        return self.callback(CallbackName.AFTER_CREATE, fn)

    def after_stub(self, fn: Callable[..., Any]):
        return self.callback(CallbackName.AFTER_STUB, fn)
