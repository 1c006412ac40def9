"""Engine registry (data-driven engine selection).

Every engine is described by one :class:`EngineProfile` bundle: its
:class:`~clausekit.dialect.Dialect`, its process-wide
:class:`~clausekit.column_cache.ColumnCache`, and a factory producing a fresh
:class:`~clausekit.params.ParameterManager` per statement.  A single generic
:class:`~clausekit.builder.query_builder.QueryBuilder` is wired from a
profile, so adding an engine means registering a profile, not subclassing.

Usage::

    from clausekit.engines.registry import EngineProfile, EngineRegistry

    EngineRegistry.register(
        "sqlite",
        EngineProfile(dialect=..., column_cache=..., parameter_manager_factory=...),
    )
    profile = EngineRegistry.get("sqlite")
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from clausekit.column_cache import ColumnCache
from clausekit.dialect import Dialect
from clausekit.errors import EngineNotSupportedError
from clausekit.log import get_logger
from clausekit.params import ParameterManager

logger = get_logger(__name__)


def engine_key(engine: str | Enum) -> str:
    """Return the registry key for an engine identifier or enum member."""
    value = engine.value if isinstance(engine, Enum) else engine
    return str(value).strip().lower()


@dataclass(frozen=True)
class EngineProfile:
    """Everything a query builder needs to know about one engine.

    Attributes:
        dialect: Shared immutable lexical rules.
        column_cache: Shared, thread-safe column quoting cache.
        parameter_manager_factory: Zero-argument callable returning a new
            :class:`ParameterManager` for each statement.
    """

    dialect: Dialect
    column_cache: ColumnCache
    parameter_manager_factory: Callable[[], ParameterManager]

    @property
    def name(self) -> str:
        return self.dialect.name

    def create_parameter_manager(self) -> ParameterManager:
        return self.parameter_manager_factory()


class EngineRegistry:
    """Registry mapping engine identifiers to :class:`EngineProfile` bundles."""

    _profiles: ClassVar[dict[str, EngineProfile]] = {}

    @classmethod
    def register(cls, engine: str | Enum, profile: EngineProfile) -> EngineProfile:
        """Register ``profile`` under ``engine`` and return it.

        Args:
            engine: Engine identifier (``'sqlserver'``, ``DatabaseType.MYSQL``).
            profile: The engine's bundle.

        Returns:
            The registered profile, so modules can bind it to a constant.
        """
        cls._profiles[engine_key(engine)] = profile
        return profile

    @classmethod
    def get(cls, engine: str | Enum) -> EngineProfile:
        """Return the profile registered for ``engine``.

        Raises:
            EngineNotSupportedError: If no profile is registered for ``engine``.
        """
        key = engine_key(engine)
        profile = cls._profiles.get(key)
        if profile is None:
            logger.warning("engine_not_supported", engine=key, component="query builder")
            raise EngineNotSupportedError(key, "query builder", cls.registered_engines())
        return profile

    @classmethod
    def is_registered(cls, engine: str | Enum) -> bool:
        return engine_key(engine) in cls._profiles

    @classmethod
    def registered_engines(cls) -> list[str]:
        """Return the sorted list of registered engine identifiers."""
        return sorted(cls._profiles)
