"""fixtory: declarative object factories for test fixtures.

Factories are named blueprints that produce attribute dicts, built objects,
saved objects or database-free stubs, with inheritance, lazy dependent
attributes, sequences, associations and lifecycle callbacks.

Package use:
    import fixtory

    with fixtory.define("user", class_=User) as f:
        f.set("first_name", "Jimi")
        f.set("last_name", "Hendrix")
        f.lazy("email", lambda a: f"{a.first_name}.{a.last_name}@example.com".lower())

    fixtory.attributes_for("user", first_name="Bill")
    fixtory.create("user")

The module-level functions act on the process-wide registry returned by
get_registry(); call reset_registry() between independent test runs.
"""

from typing import Any

from .core import (
    Association,
    AttributeAccessor,
    CallbackName,
    FactoryDefinition,
    FactoryRegistry,
    Sequence,
    Strategy,
    Stub,
    associate,
    build_strategy,
    get_registry,
    reset_registry,
    set_registry,
)
from .core.errors import (
    FixtoryError,
    DuplicateFactoryError,
    DuplicateSequenceError,
    AttributeDefinitionError,
    InvalidCallbackNameError,
    InvalidStrategyError,
    UnknownFactoryError,
    UnknownSequenceError,
    UnknownClassError,
    CircularInheritanceError,
    CircularAttributeError,
    SequenceAbuseError,
    AssociationDepthError,
    StubbedObjectError,
    FactoryFileError,
)

__version__ = "0.3.0"


def define(name, **options):
    """Start a factory definition on the default registry."""
    return get_registry().define(name, **options)


def define_sequence(name: str, formatter=None, start: int = 1) -> Sequence:
    return get_registry().define_sequence(name, formatter, start=start)


def next_value(name: str) -> Any:
    """Next value of a named sequence on the default registry."""
    return get_registry().next_value(name)


def attributes_for(name, /, **overrides: Any) -> dict[str, Any]:
    return get_registry().attributes_for(name, **overrides)


def build(name, /, **overrides: Any) -> Any:
    return get_registry().build(name, **overrides)


def create(name, /, **overrides: Any) -> Any:
    return get_registry().create(name, **overrides)


def stub(name, /, **overrides: Any) -> Any:
    return get_registry().stub(name, **overrides)


def run(name, strategy=None, /, **overrides: Any) -> Any:
    """Run a factory with its default strategy unless one is given."""
    return get_registry().run(name, strategy, **overrides)


def attributes_for_batch(name, count: int, /, **overrides: Any) -> list[dict]:
    return get_registry().attributes_for_batch(name, count, **overrides)


def build_batch(name, count: int, /, **overrides: Any) -> list[Any]:
    return get_registry().build_batch(name, count, **overrides)


def create_batch(name, count: int, /, **overrides: Any) -> list[Any]:
    return get_registry().create_batch(name, count, **overrides)


def stub_batch(name, count: int, /, **overrides: Any) -> list[Any]:
    return get_registry().stub_batch(name, count, **overrides)


def load_factories(*paths, registry: FactoryRegistry | None = None) -> list[str]:
    """Register the factories of YAML files; see fixtory.loader."""
    from .loader import load_factories as _load_factories

    return _load_factories(*paths, registry=registry or get_registry())


__all__ = [
    "__version__",
    # Entry points
    "define",
    "define_sequence",
    "next_value",
    "attributes_for",
    "build",
    "create",
    "stub",
    "run",
    "attributes_for_batch",
    "build_batch",
    "create_batch",
    "stub_batch",
    "load_factories",
    "associate",
    "build_strategy",
    # Registry
    "FactoryRegistry",
    "get_registry",
    "set_registry",
    "reset_registry",
    # Types
    "Association",
    "AttributeAccessor",
    "CallbackName",
    "FactoryDefinition",
    "Sequence",
    "Strategy",
    "Stub",
    # Errors
    "FixtoryError",
    "DuplicateFactoryError",
    "DuplicateSequenceError",
    "AttributeDefinitionError",
    "InvalidCallbackNameError",
    "InvalidStrategyError",
    "UnknownFactoryError",
    "UnknownSequenceError",
    "UnknownClassError",
    "CircularInheritanceError",
    "CircularAttributeError",
    "SequenceAbuseError",
    "AssociationDepthError",
    "StubbedObjectError",
    "FactoryFileError",
]
