"""Oracle engine: double-quoted identifiers, ``:name`` parameters.

Oracle differs from the other engines in a few ways that matter here:

* bind names must start with a letter, so generated names are ``:p_0``
  rather than ``:_p_0``;
* there is no boolean bind type, so ``bool`` values are bound as ``1``/``0``
  and UUIDs as their string form;
* a scalar ``Select`` needs ``From Dual``;
* ``As`` is not allowed before a table alias.
"""

from __future__ import annotations

import uuid
from typing import Any

from clausekit.column_cache import ColumnCache
from clausekit.dialect import Dialect, PagingStyle
from clausekit.engines.registry import EngineProfile, EngineRegistry
from clausekit.params import ParameterManager
from clausekit.types import DatabaseType

ORACLE_DIALECT = Dialect(
    name=DatabaseType.ORACLE.value,
    opening_identifier='"',
    closing_identifier='"',
    parameter_prefix=":",
    supports_select_as=False,
    true_literal="1",
    false_literal="0",
    dual_table="Dual",
    paging=PagingStyle.OFFSET_FETCH,
)


class OracleParameterManager(ParameterManager):
    """Parameter manager with Oracle's naming and value binding rules."""

    def __init__(self) -> None:
        super().__init__(ORACLE_DIALECT.parameter_prefix)

    def _format_generated_name(self, index: int) -> str:
        return f"{self.prefix}p_{index}"

    def convert_value(self, value: Any) -> Any:
        if isinstance(value, bool):
            return 1 if value else 0
        if isinstance(value, uuid.UUID):
            return str(value)
        return value


ORACLE = EngineRegistry.register(
    DatabaseType.ORACLE,
    EngineProfile(
        dialect=ORACLE_DIALECT,
        column_cache=ColumnCache(ORACLE_DIALECT),
        parameter_manager_factory=OracleParameterManager,
    ),
)
