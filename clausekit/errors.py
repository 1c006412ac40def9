"""Custom exception hierarchy for clausekit.

All public errors inherit from ClauseKitError so callers can catch the base
class for any clausekit-specific failure.  Errors that also describe a
standard Python failure kind (an unsupported engine, a missing dependency)
additionally inherit from the matching built-in so generic handlers keep
working.
"""
from __future__ import annotations


class ClauseKitError(Exception):
    """Base exception for all clausekit errors."""


class EngineNotSupportedError(ClauseKitError, NotImplementedError):
    """Raised when a factory is asked for an engine it has no registration for.

    Args:
        engine: The requested engine identifier.
        component: What was being created (``'query builder'``,
            ``'metadata service'``, ``'type converter'``).
        registered: Engine identifiers that *are* registered.
    """

    def __init__(
        self,
        engine: str,
        component: str,
        registered: list[str] | None = None,
    ) -> None:
        self.engine = engine
        self.component = component
        self.registered: list[str] = registered or []
        super().__init__(
            f"No {component} is registered for engine '{engine}'. "
            f"Registered engines: {self.registered}."
        )


class InvalidArgumentError(ClauseKitError, ValueError):
    """Raised when a required constructor dependency is missing.

    Args:
        message: Human-readable description.
        argument: Name of the offending argument.
    """

    def __init__(self, message: str, argument: str) -> None:
        super().__init__(message)
        self.argument = argument


class ConditionError(ClauseKitError):
    """Raised when a condition cannot be rendered (e.g. unknown operator)."""


class MetadataError(ClauseKitError):
    """Raised when schema introspection returns an unusable result.

    Args:
        message: Human-readable description.
        engine: Engine the metadata service was talking to.
    """

    def __init__(self, message: str, engine: str | None = None) -> None:
        super().__init__(message)
        self.engine = engine
