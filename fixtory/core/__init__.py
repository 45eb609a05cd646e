"""The factory engine: registries, attribute resolution, strategies, callbacks.

- sequences.py: named monotonic counters
- attributes.py: attribute definitions (static, lazy, formula, sequence, association)
- definition.py: factory definitions and inheritance merging
- resolver.py: per-build resolution context and attribute accessor
- strategies.py: attributes_for / build / create / stub
- callbacks.py: lifecycle hook dispatch
- stub.py: database-free stand-ins
- registry.py: the registry and the process-wide handle
- dsl.py: the ``with registry.define(...)`` builder
"""

from .attributes import (
    Attribute,
    StaticAttribute,
    LazyAttribute,
    FormulaAttribute,
    SequenceAttribute,
    Association,
)
from .callbacks import Callback, run_callbacks
from .definition import FactoryDefinition
from .dsl import FactoryBuilder
from .enums import CallbackName, Strategy
from .errors import (
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
from .registry import FactoryRegistry, get_registry, set_registry, reset_registry
from .resolver import AttributeAccessor, BuildContext, associate, build_strategy
from .sequences import Sequence, SequenceRegistry
from .strategies import (
    BaseStrategy,
    AttributesForStrategy,
    BuildStrategy,
    CreateStrategy,
    StubStrategy,
    get_strategy,
)
from .stub import Stub

__all__ = [
    # Attributes
    "Attribute",
    "StaticAttribute",
    "LazyAttribute",
    "FormulaAttribute",
    "SequenceAttribute",
    "Association",
    # Callbacks
    "Callback",
    "run_callbacks",
    # Definitions
    "FactoryDefinition",
    "FactoryBuilder",
    # Enums
    "CallbackName",
    "Strategy",
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
    # Registry
    "FactoryRegistry",
    "get_registry",
    "set_registry",
    "reset_registry",
    # Resolution
    "AttributeAccessor",
    "BuildContext",
    "associate",
    "build_strategy",
    # Sequences
    "Sequence",
    "SequenceRegistry",
    # Strategies
    "BaseStrategy",
    "AttributesForStrategy",
    "BuildStrategy",
    "CreateStrategy",
    "StubStrategy",
    "get_strategy",
    # Stubs
    "Stub",
]
