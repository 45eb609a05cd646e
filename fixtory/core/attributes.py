"""Attribute definitions: what a factory says about each attribute.

An attribute definition knows how to produce one value given the build
context it is evaluated in. The context decides everything strategy
specific (whether associations run, and how), so the definitions stay the
same for every strategy.

Kinds:
- StaticAttribute: a fixed value
- LazyAttribute: a callable evaluated once per build, optionally reading
  sibling attributes through the accessor it receives
- FormulaAttribute: a restricted expression over sibling attributes
- SequenceAttribute: an inline sequence owned by the attribute
- Association: the result of running another factory
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Callable

from ..utils.eval_safe import eval_formula
from ..utils.signatures import positional_arity
from .enums import Strategy
from .errors import AttributeDefinitionError
from .sequences import Formatter, Sequence

if TYPE_CHECKING:
    from .resolver import BuildContext


def validate_attribute_name(name: str) -> str:
    """Check an attribute name; leading underscores belong to accessor and stub internals."""
    if not isinstance(name, str) or not name.isidentifier():
        raise AttributeDefinitionError(f"Invalid attribute name: {name!r}")
    if name.startswith("_"):
        raise AttributeDefinitionError(
            f"Attribute names may not start with '_': {name!r}"
        )
    return name


class Attribute:
    """Base class for attribute definitions."""

    kind = "attribute"

    def __init__(self, name: str):
        self.name = validate_attribute_name(name)

    def evaluate(self, context: BuildContext) -> Any:
        raise NotImplementedError

    def describe(self) -> str:
        """Short human-readable summary, used by the CLI."""
        return self.kind

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class StaticAttribute(Attribute):
    kind = "static"

    def __init__(self, name: str, value: Any):
        super().__init__(name)
        self.value = value

    def evaluate(self, context: BuildContext) -> Any:
        # Container defaults must not leak mutations between builds
        if isinstance(self.value, (list, dict, set)):
            return copy.deepcopy(self.value)
        return self.value

    def describe(self) -> str:
        return repr(self.value)


class LazyAttribute(Attribute):
    """A value computed by a callable when the build first needs it.

    The callable may take no arguments, or one: the accessor of the build in
    progress, which reads other attributes by name (``a.first_name`` or
    ``a["first_name"]``).
    """

    kind = "lazy"

    def __init__(self, name: str, fn: Callable[..., Any]):
        super().__init__(name)
        if not callable(fn):
            raise AttributeDefinitionError(
                f"Lazy attribute '{name}' needs a callable, got {type(fn).__name__}"
            )
        self.fn = fn
        self._takes_accessor = positional_arity(fn) >= 1

    def evaluate(self, context: BuildContext) -> Any:
        return self.fn(context.accessor) if self._takes_accessor else self.fn()

    def describe(self) -> str:
        return getattr(self.fn, "__name__", "callable")


class FormulaAttribute(Attribute):
    """A restricted Python expression over the other attributes."""

    kind = "formula"

    def __init__(self, name: str, expression: str):
        super().__init__(name)
        self.expression = expression

    def evaluate(self, context: BuildContext) -> Any:
        return eval_formula(self.expression, context.accessor)

    def describe(self) -> str:
        return self.expression


class SequenceAttribute(Attribute):
    """An inline sequence: every build takes the next value of its own counter."""

    kind = "sequence"

    def __init__(self, name: str, formatter: Formatter | None = None, start: int = 1):
        super().__init__(name)
        self.sequence = Sequence(name, formatter, start=start)

    def evaluate(self, context: BuildContext) -> Any:
        return self.sequence.next()

    def describe(self) -> str:
        return f"next #{self.sequence.current}"


class Association(Attribute):
    """Another factory's result, produced with the association's own strategy.

    ``strategy=None`` means "the configured association strategy", which
    defaults to create regardless of the outer build's strategy.
    """

    kind = "association"

    def __init__(
        self,
        name: str,
        factory: str | None = None,
        strategy: Strategy | str | None = None,
        overrides: dict[str, Any] | None = None,
    ):
        super().__init__(name)
        self.factory = factory or name
        self.strategy = Strategy.coerce(strategy) if strategy is not None else None
        self.overrides = dict(overrides or {})

    def evaluate(self, context: BuildContext) -> Any:
        return context.associate(self)

    def describe(self) -> str:
        via = self.strategy.value if self.strategy else "default"
        return f"-> {self.factory} ({via})"
