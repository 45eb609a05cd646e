"""Factory registry: definitions, sequences, model classes and entry points.

The registry is the object callers talk to. It owns:
- factory definitions by name (duplicate / unknown detection)
- a SequenceRegistry for named sequences
- model classes the target-class derivation can find by name
- alias patterns used for override suppression (``author_id`` <-> ``author``)

and runs the pipeline: resolve the effective definition, resolve every
attribute in a BuildContext, hand the mapping to the chosen strategy.
"""

import importlib
import logging
import re
import threading
from typing import Any

from ..config import FixtoryConfig, get_config
from ..utils.naming import camelize, underscore
from .definition import FactoryDefinition
from .dsl import FactoryBuilder
from .enums import Strategy
from .errors import (
    AssociationDepthError,
    CircularInheritanceError,
    DuplicateFactoryError,
    UnknownClassError,
    UnknownFactoryError,
)
from .resolver import BuildContext
from .sequences import Formatter, Sequence, SequenceRegistry
from .strategies import get_strategy

logger = logging.getLogger(__name__)

DEFAULT_ALIASES: list[tuple[str, str]] = [
    (r"(.+)_id", r"\1"),
    (r"(.+)", r"\1_id"),
]


class FactoryRegistry:
    """Name -> FactoryDefinition table plus the strategy entry points.

    Example:
        registry = FactoryRegistry()
        with registry.define("user", class_=User) as f:
            f.set("name", "Jimi")
        user = registry.build("user", name="Bill")
    """

    def __init__(self, config: FixtoryConfig | None = None):
        self._config = config
        self.sequences = SequenceRegistry()
        self._factories: dict[str, FactoryDefinition] = {}
        self._models: dict[str, type] = {}
        self._aliases: list[tuple[re.Pattern, str]] = [
            (re.compile(pattern), replacement) for pattern, replacement in DEFAULT_ALIASES
        ]
        self._lock = threading.Lock()

    @property
    def config(self) -> FixtoryConfig:
        """Explicit config if one was given, else the global config."""
        return self._config if self._config is not None else get_config()

    # =========================================================================
    # Definitions
    # =========================================================================

    def factory_name(self, name: str | type) -> str:
        """Normalize a factory reference: classes map to their snake-cased name."""
        if isinstance(name, type):
            return underscore(name.__name__)
        return str(name)

    def define(
        self,
        name: str | type,
        *,
        class_: type | str | None = None,
        parent: str | type | None = None,
        default_strategy: Strategy | str | None = None,
    ) -> FactoryBuilder:
        """Start a factory definition; it is registered when the ``with`` block exits.

        A class given as ``name`` doubles as the target class.
        """
        if isinstance(name, type) and class_ is None:
            class_ = name
        definition = FactoryDefinition(
            name=self.factory_name(name),
            class_=class_,
            parent=self.factory_name(parent) if parent is not None else None,
            default_strategy=default_strategy,
        )
        return FactoryBuilder(self, definition)

    def register(self, definition: FactoryDefinition) -> None:
        """Add a definition.

        Raises:
            DuplicateFactoryError: If the name is already registered
        """
        with self._lock:
            if definition.name in self._factories:
                raise DuplicateFactoryError(
                    f"Factory already defined: {definition.name}"
                )
            self._factories[definition.name] = definition
        logger.debug(
            "Registered factory: %s (parent=%s, %d attributes)",
            definition.name,
            definition.parent,
            len(definition.attributes),
        )

    def get(self, name: str | type) -> FactoryDefinition:
        """The definition as declared (without inherited parts)."""
        key = self.factory_name(name)
        try:
            return self._factories[key]
        except KeyError:
            raise UnknownFactoryError(f"No such factory: {key}") from None

    def resolve(self, name: str | type) -> FactoryDefinition:
        """The effective definition, with every ancestor merged in.

        Raises:
            UnknownFactoryError: For an unknown factory or parent
            CircularInheritanceError: If the parent chain loops
        """
        chain: list[FactoryDefinition] = []
        seen: list[str] = []
        definition = self.get(name)
        while True:
            if definition.name in seen:
                raise CircularInheritanceError(seen + [definition.name])
            seen.append(definition.name)
            chain.append(definition)
            if definition.parent is None:
                break
            try:
                definition = self.get(definition.parent)
            except UnknownFactoryError:
                raise UnknownFactoryError(
                    f"Factory '{definition.name}' has unknown parent "
                    f"'{definition.parent}'"
                ) from None

        effective = chain.pop().as_root()
        while chain:
            effective = chain.pop().merge_parent(effective)
        return effective

    def __contains__(self, name: object) -> bool:
        if isinstance(name, type):
            name = self.factory_name(name)
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def names(self) -> list[str]:
        return list(self._factories)

    # =========================================================================
    # Target classes
    # =========================================================================

    def register_model(self, cls: type, name: str | None = None) -> type:
        """Make a class findable by name for target-class derivation.

        Usable as a class decorator.
        """
        self._models[name or cls.__name__] = cls
        return cls

    def resolve_class(self, definition: FactoryDefinition) -> type:
        """Target class of an effective definition.

        Class specs are tried as: a class; a registered model name (given
        or camel-cased); a dotted import path; a camel-cased name in one of
        the configured model modules.

        Raises:
            UnknownClassError: If nothing matches
        """
        spec = definition.class_ if definition.class_ is not None else definition.name
        if isinstance(spec, type):
            return spec

        class_name = camelize(spec)
        for candidate in (spec, class_name):
            if candidate in self._models:
                return self._models[candidate]

        if "." in spec:
            module_name, _, attr = spec.rpartition(".")
            try:
                module = importlib.import_module(module_name)
            except ImportError as exc:
                raise UnknownClassError(
                    f"Cannot import '{module_name}' for factory "
                    f"'{definition.name}': {exc}"
                ) from exc
            target = getattr(module, attr, None)
            if isinstance(target, type):
                return target

        for module_name in self.config.loader.model_modules:
            try:
                module = importlib.import_module(module_name)
            except ImportError as exc:
                logger.warning("Cannot import model module %s: %s", module_name, exc)
                continue
            target = getattr(module, class_name, None)
            if isinstance(target, type):
                return target

        raise UnknownClassError(
            f"Cannot resolve class '{spec}' for factory '{definition.name}'"
        )

    # =========================================================================
    # Aliases
    # =========================================================================

    def add_alias(self, pattern: str, replacement: str) -> None:
        """Declare that attributes matching ``pattern`` are aliased by ``replacement``."""
        self._aliases.append((re.compile(pattern), replacement))

    def aliases_for(self, name: str) -> list[str]:
        """Names whose override suppresses the attribute ``name``."""
        aliases = []
        for pattern, replacement in self._aliases:
            match = pattern.fullmatch(name)
            if match:
                alias = match.expand(replacement)
                if alias != name:
                    aliases.append(alias)
        return aliases

    # =========================================================================
    # Sequences
    # =========================================================================

    def define_sequence(
        self, name: str, formatter: Formatter | None = None, start: int = 1
    ) -> Sequence:
        return self.sequences.define(name, formatter, start=start)

    def next_value(self, name: str) -> Any:
        return self.sequences.next(name)

    def rewind_sequences(self) -> None:
        """Reset named and inline sequence counters to their start."""
        self.sequences.rewind()
        for definition in self._factories.values():
            for attribute in definition.attributes:
                sequence = getattr(attribute, "sequence", None)
                if isinstance(sequence, Sequence):
                    sequence.rewind()

    # =========================================================================
    # Strategy entry points
    # =========================================================================

    def run_factory(
        self,
        name: str | type,
        strategy: Strategy | str | None,
        overrides: dict[str, Any],
        depth: int = 0,
    ) -> Any:
        """Resolve and produce one factory result. All entry points end here."""
        max_depth = self.config.engine.max_association_depth
        if depth > max_depth:
            raise AssociationDepthError(
                f"Association nesting exceeded {max_depth} levels at factory '{name}'"
            )

        definition = self.resolve(name)
        chosen = Strategy.coerce(
            strategy
            or definition.default_strategy
            or self.config.engine.default_strategy
        )
        implementation = get_strategy(chosen)
        context = BuildContext(definition, overrides, implementation, self, depth=depth)
        attributes = context.resolve_all()
        logger.debug(
            "Factory %s resolved %d attributes for %s",
            definition.name,
            len(attributes),
            chosen.value,
        )
        return implementation.produce(context, attributes)

    def attributes_for(self, name: str | type, /, **overrides: Any) -> dict[str, Any]:
        return self.run_factory(name, Strategy.ATTRIBUTES_FOR, overrides)

    def build(self, name: str | type, /, **overrides: Any) -> Any:
        return self.run_factory(name, Strategy.BUILD, overrides)

    def create(self, name: str | type, /, **overrides: Any) -> Any:
        return self.run_factory(name, Strategy.CREATE, overrides)

    def stub(self, name: str | type, /, **overrides: Any) -> Any:
        return self.run_factory(name, Strategy.STUB, overrides)

    def run(
        self,
        name: str | type,
        strategy: Strategy | str | None = None,
        /,
        **overrides: Any,
    ) -> Any:
        """Run with an explicit strategy, else the factory's default, else the config's."""
        return self.run_factory(name, strategy, overrides)

    def run_batch(
        self,
        name: str | type,
        count: int,
        strategy: Strategy | str | None = None,
        /,
        **overrides: Any,
    ) -> list[Any]:
        """Run the same factory ``count`` times with the same overrides."""
        return [self.run_factory(name, strategy, overrides) for _ in range(count)]

    def attributes_for_batch(self, name: str | type, count: int, /, **overrides: Any) -> list[dict]:
        return self.run_batch(name, count, Strategy.ATTRIBUTES_FOR, **overrides)

    def build_batch(self, name: str | type, count: int, /, **overrides: Any) -> list[Any]:
        return self.run_batch(name, count, Strategy.BUILD, **overrides)

    def create_batch(self, name: str | type, count: int, /, **overrides: Any) -> list[Any]:
        return self.run_batch(name, count, Strategy.CREATE, **overrides)

    def stub_batch(self, name: str | type, count: int, /, **overrides: Any) -> list[Any]:
        return self.run_batch(name, count, Strategy.STUB, **overrides)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def clear(self) -> None:
        """Drop every factory, sequence and model. Useful for testing."""
        with self._lock:
            self._factories.clear()
            self._models.clear()
        self.sequences.clear()
        logger.debug("Factory registry cleared")


# =============================================================================
# Process-wide registry handle
# =============================================================================

_registry: FactoryRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> FactoryRegistry:
    """Get the process-wide registry, creating it on first use.

    The default registry lives until reset_registry() or process exit.
    """
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = FactoryRegistry()
    return _registry


def set_registry(registry: FactoryRegistry) -> None:
    """Install a registry as the process-wide default."""
    global _registry
    _registry = registry


def reset_registry() -> None:
    """Discard the process-wide registry (a fresh one is made on next use)."""
    global _registry
    _registry = None
