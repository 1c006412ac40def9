"""clausekit – a fluent, cross-dialect SQL query builder.

Write the query once, render it for SqlServer, MySQL, PostgreSQL or Oracle.

Public API
----------
``create_builder``
    Return a :class:`QueryBuilder` for an engine (default from settings).

``create_exists_builder``
    Wrap a builder into a boolean ``Exists`` scalar query.

Re-exported types
-----------------
``QueryBuilder``, ``ExistsBuilder``, ``SqlBuilderResult``, ``Operator``,
``Boundary``, ``Pager``, ``Dialect``, ``ParameterManager``, ``SqlParam``,
``MetadataServiceFactory``, ``TypeConverterFactory``, the snapshot models,
and all error classes.

Extensibility
-------------
A new engine is one registered profile::

    from clausekit.engines.registry import EngineProfile, EngineRegistry

    EngineRegistry.register(
        "sqlite",
        EngineProfile(
            dialect=SQLITE_DIALECT,
            column_cache=ColumnCache(SQLITE_DIALECT),
            parameter_manager_factory=partial(ParameterManager, ":"),
        ),
    )

After registration, ``create_builder("sqlite")`` renders for it.
"""

from __future__ import annotations

from enum import Enum

from clausekit.builder import (
    Boundary,
    ConditionFactory,
    ExistsBuilder,
    Operator,
    Pager,
    QueryBuilder,
    SqlBuilderResult,
    SqlCondition,
)
from clausekit.column_cache import ColumnCache
from clausekit.dialect import Dialect, PagingStyle
from clausekit.engines import (
    MYSQL,
    ORACLE,
    POSTGRESQL,
    SQLSERVER,
    EngineProfile,
    EngineRegistry,
)
from clausekit.errors import (
    ClauseKitError,
    ConditionError,
    EngineNotSupportedError,
    InvalidArgumentError,
    MetadataError,
)
from clausekit.metadata import (
    ColumnInfo,
    DatabaseInfo,
    MetadataService,
    MetadataServiceFactory,
    SqlExecutor,
    TableInfo,
    TypeConverter,
    TypeConverterFactory,
)
from clausekit.params import ParameterManager, SqlParam
from clausekit.settings import ClauseKitSettings, get_settings
from clausekit.types import DatabaseType, DbType, ParameterDirection

__all__ = [
    # Entry points
    "create_builder",
    "create_exists_builder",
    # Builder
    "QueryBuilder",
    "ExistsBuilder",
    "SqlBuilderResult",
    "SqlCondition",
    "ConditionFactory",
    "Operator",
    "Boundary",
    "Pager",
    # Engines
    "Dialect",
    "PagingStyle",
    "ColumnCache",
    "EngineProfile",
    "EngineRegistry",
    "SQLSERVER",
    "MYSQL",
    "POSTGRESQL",
    "ORACLE",
    # Parameters
    "ParameterManager",
    "SqlParam",
    # Metadata
    "MetadataService",
    "MetadataServiceFactory",
    "SqlExecutor",
    "TypeConverter",
    "TypeConverterFactory",
    "DatabaseInfo",
    "TableInfo",
    "ColumnInfo",
    # Types
    "DatabaseType",
    "DbType",
    "ParameterDirection",
    # Settings
    "ClauseKitSettings",
    "get_settings",
    # Errors
    "ClauseKitError",
    "ConditionError",
    "EngineNotSupportedError",
    "InvalidArgumentError",
    "MetadataError",
]


def create_builder(engine: str | Enum | None = None) -> QueryBuilder:
    """Return a blank query builder for ``engine``.

    Example::

        result = (
            clausekit.create_builder("postgresql")
            .select("id, name")
            .from_("public.users u")
            .where("u.age", 18, Operator.GREATER_EQUAL)
            .build()
        )
        cursor.execute(result.sql, ...)

    Args:
        engine: Engine identifier or :class:`DatabaseType`.  Defaults to
            ``ClauseKitSettings.default_engine``.

    Raises:
        EngineNotSupportedError: If ``engine`` is not registered.
    """
    return QueryBuilder.create(engine)


def create_exists_builder(builder: QueryBuilder) -> ExistsBuilder:
    """Wrap ``builder`` into an :class:`ExistsBuilder`.

    Raises:
        InvalidArgumentError: If ``builder`` is ``None``.
    """
    return ExistsBuilder(builder)
