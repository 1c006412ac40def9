"""Runtime configuration for clausekit.

Settings are read from ``CLAUSEKIT_*`` environment variables (or a local
``.env`` file) through pydantic-settings.  The library never requires any of
them; the defaults produce the behaviour documented on each field.

Usage::

    from clausekit.settings import get_settings

    settings = get_settings()
    settings.column_cache_size
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from clausekit.types import DatabaseType


class ClauseKitSettings(BaseSettings):
    """Process-wide clausekit configuration.

    Attributes:
        default_engine: Engine used by :func:`clausekit.create_builder` when
            the caller does not name one.
        column_cache_size: Maximum number of entries kept by each engine's
            column cache before least-recently-used entries are evicted.
        log_sql: When true, every ``build()`` emits a ``sql_built`` debug
            event carrying the rendered statement.
    """

    model_config = SettingsConfigDict(
        env_prefix="CLAUSEKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_engine: DatabaseType = DatabaseType.SQLSERVER
    column_cache_size: int = Field(default=4096, ge=1)
    log_sql: bool = False


@lru_cache()
def get_settings() -> ClauseKitSettings:
    """Return the cached settings instance."""
    return ClauseKitSettings()
