"""SqlServer engine: ``[name]`` identifiers, ``@name`` parameters."""

from __future__ import annotations

from functools import partial

from clausekit.column_cache import ColumnCache
from clausekit.dialect import Dialect, PagingStyle
from clausekit.engines.registry import EngineProfile, EngineRegistry
from clausekit.params import ParameterManager
from clausekit.types import DatabaseType

SQLSERVER_DIALECT = Dialect(
    name=DatabaseType.SQLSERVER.value,
    opening_identifier="[",
    closing_identifier="]",
    parameter_prefix="@",
    true_literal="Cast(1 As Bit)",
    false_literal="Cast(0 As Bit)",
    paging=PagingStyle.OFFSET_FETCH,
    paging_requires_order=True,
)

SQLSERVER = EngineRegistry.register(
    DatabaseType.SQLSERVER,
    EngineProfile(
        dialect=SQLSERVER_DIALECT,
        column_cache=ColumnCache(SQLSERVER_DIALECT),
        parameter_manager_factory=partial(ParameterManager, SQLSERVER_DIALECT.parameter_prefix),
    ),
)
