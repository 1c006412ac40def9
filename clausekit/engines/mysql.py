"""MySQL engine: backtick identifiers, ``@name`` parameters."""

from __future__ import annotations

from functools import partial

from clausekit.column_cache import ColumnCache
from clausekit.dialect import Dialect, PagingStyle
from clausekit.engines.registry import EngineProfile, EngineRegistry
from clausekit.params import ParameterManager
from clausekit.types import DatabaseType

MYSQL_DIALECT = Dialect(
    name=DatabaseType.MYSQL.value,
    opening_identifier="`",
    closing_identifier="`",
    parameter_prefix="@",
    true_literal="1",
    false_literal="0",
    paging=PagingStyle.LIMIT_OFFSET,
)

MYSQL = EngineRegistry.register(
    DatabaseType.MYSQL,
    EngineProfile(
        dialect=MYSQL_DIALECT,
        column_cache=ColumnCache(MYSQL_DIALECT),
        parameter_manager_factory=partial(ParameterManager, MYSQL_DIALECT.parameter_prefix),
    ),
)
