"""PostgreSQL engine: double-quoted identifiers, ``@name`` parameters.

PostgreSQL has a native boolean type, so exists-checks select ``True`` /
``False`` instead of casting integers.
"""

from __future__ import annotations

from functools import partial

from clausekit.column_cache import ColumnCache
from clausekit.dialect import Dialect, PagingStyle
from clausekit.engines.registry import EngineProfile, EngineRegistry
from clausekit.params import ParameterManager
from clausekit.types import DatabaseType

POSTGRESQL_DIALECT = Dialect(
    name=DatabaseType.POSTGRESQL.value,
    opening_identifier='"',
    closing_identifier='"',
    parameter_prefix="@",
    true_literal="True",
    false_literal="False",
    paging=PagingStyle.LIMIT_OFFSET,
)

POSTGRESQL = EngineRegistry.register(
    DatabaseType.POSTGRESQL,
    EngineProfile(
        dialect=POSTGRESQL_DIALECT,
        column_cache=ColumnCache(POSTGRESQL_DIALECT),
        parameter_manager_factory=partial(ParameterManager, POSTGRESQL_DIALECT.parameter_prefix),
    ),
)
