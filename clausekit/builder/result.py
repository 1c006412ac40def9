"""The output of a query builder: SQL text plus everything to bind."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from clausekit.params import SqlParam


@dataclass(frozen=True)
class SqlBuilderResult:
    """A rendered statement ready to hand to an executor.

    Attributes:
        sql: Executable SQL text with dialect-prefixed parameter tokens.
        params: Named parameters referenced by ``sql``, in creation order.
        dynamic_params: Opaque parameter bags supplied by the caller.
        engine: Engine identifier the text was rendered for.
        parameter_prefix: Prefix carried by every name in ``params``.
    """

    sql: str
    params: tuple[SqlParam, ...] = ()
    dynamic_params: tuple[Any, ...] = ()
    engine: str = ""
    parameter_prefix: str = "@"
    _by_name: dict[str, SqlParam] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._by_name.update({param.name: param for param in self.params})

    def get_param(self, name: str) -> SqlParam | None:
        """Look up a parameter with or without its prefix."""
        name = name.strip()
        if not name.startswith(self.parameter_prefix):
            name = f"{self.parameter_prefix}{name}"
        return self._by_name.get(name)

    def get_value(self, name: str) -> Any:
        param = self.get_param(name)
        return param.value if param is not None else None

    def get_debug_sql(self) -> str:
        """Return ``sql`` with every named parameter inlined as a literal.

        For logs and diagnostics only; never execute the returned text.
        """
        sql = self.sql
        for param in sorted(self.params, key=lambda p: len(p.name), reverse=True):
            pattern = re.compile(rf"{re.escape(param.name)}\b")
            sql = pattern.sub(lambda _match, p=param: _to_literal(p.value), sql)
        return sql


def _to_literal(value: Any) -> str:
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return f"'{value.isoformat(sep=' ') if isinstance(value, datetime) else value.isoformat()}'"
    if isinstance(value, uuid.UUID):
        return f"'{value}'"
    text = str(value).replace("'", "''")
    return f"'{text}'"
