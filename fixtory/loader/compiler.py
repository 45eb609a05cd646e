"""Compile validated factory files into registry definitions."""

import copy
import importlib
import inspect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

import yaml
from pydantic import ValidationError

from ..core.attributes import (
    Association,
    FormulaAttribute,
    LazyAttribute,
    SequenceAttribute,
    StaticAttribute,
)
from ..core.definition import FactoryDefinition
from ..core.enums import CallbackName
from ..core.errors import FactoryFileError, FixtoryError
from ..core.registry import FactoryRegistry
from ..core.sequences import Formatter
from .schemas import AttributeSpec, FactoryFile, FactorySpec

logger = logging.getLogger(__name__)


def _template_formatter(template: str | None) -> Callable[[int], Any] | None:
    if template is None:
        return None

    def format_value(n: int) -> str:
        return template.format(n=n)

    format_value.__name__ = f"format({template!r})"
    return format_value


def _sequence_draw(registry: FactoryRegistry, sequence_name: str) -> Callable[[], Any]:
    def draw() -> Any:
        return registry.next_value(sequence_name)

    draw.__name__ = f"next({sequence_name})"
    return draw


def _assigner(values: dict[str, Any]) -> Callable[[Any], None]:
    def assign(obj: Any) -> None:
        for attr_name, value in values.items():
            setattr(obj, attr_name, copy.deepcopy(value))

    return assign


def compile_attribute(name: str, spec: AttributeSpec, registry: FactoryRegistry):
    """Turn one AttributeSpec into an attribute definition."""
    kind = spec.kind
    if kind == "formula":
        return FormulaAttribute(name, spec.formula)
    if kind == "sequence":
        return SequenceAttribute(name, _template_formatter(spec.sequence), start=spec.start)
    if kind == "next":
        return LazyAttribute(name, _sequence_draw(registry, spec.next))
    if kind == "association":
        return Association(
            name,
            factory=spec.association,
            strategy=spec.strategy,
            overrides=spec.overrides,
        )
    return StaticAttribute(name, spec.value)


def compile_factory(
    name: str, spec: FactorySpec, registry: FactoryRegistry
) -> FactoryDefinition:
    """Turn one FactorySpec into an (unregistered) FactoryDefinition."""
    definition = FactoryDefinition(
        name=name,
        class_=spec.class_,
        parent=spec.parent,
        default_strategy=spec.default_strategy,
    )
    for attr_name, attr_spec in spec.attributes.items():
        definition.add_attribute(compile_attribute(attr_name, attr_spec, registry))

    for hook in CallbackName:
        values = getattr(spec, hook.value)
        if values:
            definition.add_callback(hook, _assigner(values))
    return definition


def import_model_modules(modules: list[str]) -> list[ModuleType]:
    """Import model modules without registering anything.

    Raises:
        FactoryFileError: If a module cannot be imported
    """
    imported = []
    for module_name in modules:
        try:
            imported.append(importlib.import_module(module_name))
        except ImportError as exc:
            raise FactoryFileError(
                f"Cannot import model module '{module_name}': {exc}"
            ) from exc
    return imported


def _register_classes(modules: list[ModuleType], registry: FactoryRegistry) -> int:
    count = 0
    for module in modules:
        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls.__module__ == module.__name__:
                registry.register_model(cls)
                count += 1
    return count


def register_model_modules(modules: list[str], registry: FactoryRegistry) -> int:
    """Register every class defined in the given modules as a model."""
    return _register_classes(import_model_modules(modules), registry)


def read_factory_file(path: Path | str) -> FactoryFile:
    """Parse and validate a YAML factory file.

    Raises:
        FactoryFileError: On missing files, YAML syntax errors or schema errors
    """
    path = Path(path)
    try:
        return FactoryFile.from_yaml(path)
    except FileNotFoundError as exc:
        raise FactoryFileError(f"Factory file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise FactoryFileError(f"Invalid YAML in {path}: {exc}") from exc
    except ValidationError as exc:
        raise FactoryFileError(f"Invalid factory file {path}:\n{exc}") from exc


@dataclass
class CompiledFile:
    """Everything a factory file registers, checked but not yet registered."""

    source: str
    models: list[str] = field(default_factory=list)
    sequences: list[tuple[str, Formatter | None, int]] = field(default_factory=list)
    definitions: list[FactoryDefinition] = field(default_factory=list)


def compile_factory_file(
    factory_file: FactoryFile, registry: FactoryRegistry, source: str = "<factory file>"
) -> CompiledFile:
    """Compile every sequence and factory of a parsed file.

    Raises:
        FactoryFileError: If a factory does not compile; the message names
            the file and the factory
    """
    compiled = CompiledFile(source=source, models=list(factory_file.models))
    for seq_name, seq_spec in factory_file.sequences.items():
        compiled.sequences.append(
            (seq_name, _template_formatter(seq_spec.format), seq_spec.start)
        )
    for factory_name, factory_spec in factory_file.factories.items():
        try:
            definition = compile_factory(factory_name, factory_spec, registry)
        except FixtoryError as exc:
            raise FactoryFileError(
                f"Invalid factory file {source}: factory '{factory_name}': {exc}"
            ) from exc
        compiled.definitions.append(definition)
    return compiled


def _check_names(compiled: list[CompiledFile], registry: FactoryRegistry) -> None:
    """Reject sequence and factory names that are already taken."""
    sequences = set(registry.sequences.names())
    factories = set(registry.names())
    for batch in compiled:
        for seq_name, _, _ in batch.sequences:
            if seq_name in sequences:
                raise FactoryFileError(
                    f"Invalid factory file {batch.source}: "
                    f"sequence already defined: {seq_name}"
                )
            sequences.add(seq_name)
        for definition in batch.definitions:
            if definition.name in factories:
                raise FactoryFileError(
                    f"Invalid factory file {batch.source}: "
                    f"factory already defined: {definition.name}"
                )
            factories.add(definition.name)


def _register_compiled(compiled: list[CompiledFile], registry: FactoryRegistry) -> list[str]:
    """Register checked files; import failures surface before anything is added."""
    _check_names(compiled, registry)
    modules = import_model_modules([m for batch in compiled for m in batch.models])
    _register_classes(modules, registry)

    names: list[str] = []
    for batch in compiled:
        for seq_name, formatter, start in batch.sequences:
            registry.define_sequence(seq_name, formatter, start=start)
        for definition in batch.definitions:
            registry.register(definition)
        logger.info("Loaded %d factories from %s", len(batch.definitions), batch.source)
        names.extend(definition.name for definition in batch.definitions)
    return names


def load_factory_file(factory_file: FactoryFile, registry: FactoryRegistry) -> list[str]:
    """Register the models, sequences and factories of a parsed file.

    The whole file is compiled and checked first, so a bad factory leaves
    the registry untouched.
    """
    return _register_compiled([compile_factory_file(factory_file, registry)], registry)


def load_factories(*paths: Path | str, registry: FactoryRegistry) -> list[str]:
    """Load YAML factory files into a registry.

    Every file is read, validated and compiled first, and names are checked
    against the registry and each other; nothing is registered if any file
    fails.

    Returns:
        Names of the registered factories, in file order

    Raises:
        FactoryFileError: Naming the offending file
    """
    compiled = [
        compile_factory_file(read_factory_file(p), registry, source=str(p))
        for p in paths
    ]
    return _register_compiled(compiled, registry)
