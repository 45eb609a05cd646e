"""Factory definitions and inheritance merging.

A FactoryDefinition is what one ``define`` block declares. The registry
flattens a definition and its ancestors into an *effective* definition with
``merge_parent`` before anything is built from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .attributes import Attribute
from .callbacks import Callback
from .enums import CallbackName, Strategy
from .errors import AttributeDefinitionError


@dataclass
class FactoryDefinition:
    """A named blueprint: target class, attributes, callbacks, defaults.

    Attributes:
        name: Unique factory name
        class_: Target class, class name, dotted import path, or None to
            inherit / derive it
        parent: Name of the parent factory, if any
        default_strategy: Strategy used by ``run`` when none is given
        attributes: Declared attributes, in declaration order
        callbacks: Declared callbacks, in declaration order
        lineage: Factory names from the root ancestor down to this one
            (filled in on effective definitions)
    """

    name: str
    class_: type | str | None = None
    parent: str | None = None
    default_strategy: Strategy | None = None
    attributes: list[Attribute] = field(default_factory=list)
    callbacks: list[Callback] = field(default_factory=list)
    lineage: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.default_strategy is not None:
            self.default_strategy = Strategy.coerce(self.default_strategy)
        if not self.lineage:
            self.lineage = [self.name]

    # ── Declaration ──

    def add_attribute(self, attribute: Attribute) -> None:
        if self.get_attribute(attribute.name) is not None:
            raise AttributeDefinitionError(
                f"Attribute already defined in factory '{self.name}': {attribute.name}"
            )
        self.attributes.append(attribute)

    def add_callback(self, name: CallbackName | str, fn: Any) -> Callback:
        callback = Callback(CallbackName.coerce(name), fn, factory=self.name)
        self.callbacks.append(callback)
        return callback

    # ── Lookup ──

    def get_attribute(self, name: str) -> Attribute | None:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def attribute_names(self) -> list[str]:
        return [attribute.name for attribute in self.attributes]

    def callbacks_for(self, name: CallbackName | str) -> list[Callback]:
        name = CallbackName.coerce(name)
        return [cb for cb in self.callbacks if cb.name == name]

    # ── Inheritance ──

    def merge_parent(self, parent: FactoryDefinition) -> FactoryDefinition:
        """Return the effective definition of this factory under ``parent``.

        ``parent`` must already be effective. Attributes the child redeclares
        replace the parent's in place; new ones are appended. Callbacks are
        never replaced: the parent's run first, then the child's.
        """
        own = {attribute.name: attribute for attribute in self.attributes}
        attributes = [own.pop(a.name, a) for a in parent.attributes]
        attributes.extend(a for a in self.attributes if a.name in own)

        return FactoryDefinition(
            name=self.name,
            class_=self.class_ if self.class_ is not None else parent.class_,
            parent=self.parent,
            default_strategy=self.default_strategy or parent.default_strategy,
            attributes=attributes,
            callbacks=list(parent.callbacks) + list(self.callbacks),
            lineage=list(parent.lineage) + [self.name],
        )

    def as_root(self) -> FactoryDefinition:
        """Effective definition of a factory without a parent."""
        return FactoryDefinition(
            name=self.name,
            class_=self.class_ if self.class_ is not None else self.name,
            parent=None,
            default_strategy=self.default_strategy,
            attributes=list(self.attributes),
            callbacks=list(self.callbacks),
            lineage=[self.name],
        )
