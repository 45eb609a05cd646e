"""Error taxonomy for the factory engine.

Every failure is immediate and synchronous. Nothing here is retried or
recovered from inside the engine; callers see the exception as raised.
"""


class FixtoryError(Exception):
    """Base class for all fixtory errors."""

    pass


# =============================================================================
# Registration errors
# =============================================================================


class DuplicateFactoryError(FixtoryError):
    """Raised when a factory name is registered twice."""

    pass


class DuplicateSequenceError(FixtoryError):
    """Raised when a sequence name is registered twice."""

    pass


class AttributeDefinitionError(FixtoryError):
    """Raised when an attribute is declared twice or has an invalid name."""

    pass


class InvalidCallbackNameError(FixtoryError):
    """Raised when a callback name is not one of the supported hooks."""

    pass


class InvalidStrategyError(FixtoryError, ValueError):
    """Raised when a strategy name is not one of the four strategies."""

    pass


# =============================================================================
# Resolution errors
# =============================================================================


class UnknownFactoryError(FixtoryError, LookupError):
    """Raised when a factory name (or a parent/association reference) is unknown."""

    pass


class UnknownSequenceError(FixtoryError, LookupError):
    """Raised when a sequence name is unknown."""

    pass


class UnknownClassError(FixtoryError, LookupError):
    """Raised when a factory's target class cannot be resolved."""

    pass


class CircularInheritanceError(FixtoryError):
    """Raised when a factory's parent chain loops back on itself."""

    def __init__(self, chain: list[str]):
        self.chain = chain
        super().__init__(
            "Circular factory inheritance: " + " -> ".join(chain)
        )


class CircularAttributeError(FixtoryError):
    """Raised when lazy attributes depend on each other in a cycle."""

    def __init__(self, factory: str, chain: list[str]):
        self.factory = factory
        self.chain = chain
        super().__init__(
            f"Circular attribute dependency in factory '{factory}': "
            + " -> ".join(chain)
        )


class SequenceAbuseError(FixtoryError):
    """Raised when an attribute evaluates to a raw Sequence object.

    Attributes must call ``next`` on a sequence (or declare an inline
    sequence); returning the sequence itself is a wiring mistake.
    """

    pass


class AssociationDepthError(FixtoryError):
    """Raised when nested associations exceed the configured depth."""

    pass


# =============================================================================
# Stub errors
# =============================================================================


class StubbedObjectError(FixtoryError, RuntimeError):
    """Raised when a stub is asked to touch the persistence layer."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"stubbed objects are not allowed to access the database ({operation})"
        )


# =============================================================================
# Front-end errors
# =============================================================================


class FactoryFileError(FixtoryError):
    """Raised when a YAML factory file cannot be loaded or validated."""

    pass
