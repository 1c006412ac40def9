"""SQLAlchemy implementation of the executor boundary.

Rendered statements carry dialect parameter tokens (``@_p_0``, ``:p_0``).
:class:`SqlAlchemyExecutor` rewrites every *registered* token to a
SQLAlchemy ``:name`` bind, so server variables such as SqlServer's
``@@spid`` pass through untouched, and then runs the text on an
``AsyncEngine`` (or an already-open ``AsyncConnection``).

Example::

    from sqlalchemy.ext.asyncio import create_async_engine
    from clausekit.metadata.sqlalchemy_executor import SqlAlchemyExecutor

    engine = create_async_engine("postgresql+asyncpg://user:pw@host/db")
    executor = SqlAlchemyExecutor(engine)
    rows = await executor.fetch_all(result.sql, result.params)
"""
from __future__ import annotations

import dataclasses
import re
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from pydantic import BaseModel
from sqlalchemy import TextClause, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from clausekit.errors import InvalidArgumentError
from clausekit.log import get_logger
from clausekit.params import SqlParam

logger = get_logger(__name__)


def dynamic_params_to_dict(bag: Any) -> dict[str, Any]:
    """Flatten one dynamic parameter bag into ``{name: value}``.

    Mappings are copied, pydantic models dumped, dataclasses converted and
    any other object read through ``vars()``.
    """
    if isinstance(bag, Mapping):
        return dict(bag)
    if isinstance(bag, BaseModel):
        return bag.model_dump()
    if dataclasses.is_dataclass(bag) and not isinstance(bag, type):
        return dataclasses.asdict(bag)
    return dict(vars(bag))


class SqlAlchemyExecutor:
    """Executes rendered SQL through SQLAlchemy's async core.

    Args:
        bind: An ``AsyncEngine`` (a connection is opened per call, and
            :meth:`execute` commits) or an ``AsyncConnection`` owned by the
            caller (used as-is; the caller commits).
        parameter_prefix: Prefix used for dynamic-bag names in the SQL text.

    Raises:
        InvalidArgumentError: If ``bind`` is ``None``.
    """

    def __init__(self, bind: AsyncEngine | AsyncConnection, parameter_prefix: str = "@") -> None:
        if bind is None:
            raise InvalidArgumentError("SqlAlchemyExecutor requires an engine or connection.", "bind")
        self._bind = bind
        self._prefix = parameter_prefix

    # ------------------------------------------------------------------
    # Statement preparation
    # ------------------------------------------------------------------

    def prepare(
        self,
        sql: str,
        params: Sequence[SqlParam] = (),
        dynamic_params: Sequence[Any] = (),
    ) -> tuple[TextClause, dict[str, Any]]:
        """Return the ``text()`` clause and bind values for a rendered statement."""
        values: dict[str, Any] = {}
        tokens: dict[str, str] = {}
        for bag in dynamic_params:
            for key, value in dynamic_params_to_dict(bag).items():
                values[key] = value
                tokens[f"{self._prefix}{key}"] = key
        for param in params:
            key = self._bind_key(param.name)
            values[key] = param.value
            tokens[param.name] = key
        for token in sorted(tokens, key=len, reverse=True):
            pattern = re.compile(rf"(?<![\w@:]){re.escape(token)}\b")
            sql = pattern.sub(f":{tokens[token]}", sql)
        return text(sql), values

    @staticmethod
    def _bind_key(name: str) -> str:
        return name.lstrip("@:?$")

    @asynccontextmanager
    async def _connection(self, write: bool = False) -> AsyncIterator[AsyncConnection]:
        if isinstance(self._bind, AsyncConnection):
            yield self._bind
            return
        context = self._bind.begin() if write else self._bind.connect()
        async with context as connection:
            yield connection

    # ------------------------------------------------------------------
    # SqlExecutor
    # ------------------------------------------------------------------

    async def fetch_all(
        self,
        sql: str,
        params: Sequence[SqlParam] = (),
        dynamic_params: Sequence[Any] = (),
    ) -> list[Mapping[str, Any]]:
        statement, values = self.prepare(sql, params, dynamic_params)
        async with self._connection() as connection:
            result = await connection.execute(statement, values)
            rows = [dict(row) for row in result.mappings().all()]
        logger.debug("sql_fetch_all", rows=len(rows))
        return rows

    async def fetch_one(
        self,
        sql: str,
        params: Sequence[SqlParam] = (),
        dynamic_params: Sequence[Any] = (),
    ) -> Mapping[str, Any] | None:
        statement, values = self.prepare(sql, params, dynamic_params)
        async with self._connection() as connection:
            result = await connection.execute(statement, values)
            row = result.mappings().first()
        return dict(row) if row is not None else None

    async def fetch_scalar(
        self,
        sql: str,
        params: Sequence[SqlParam] = (),
        dynamic_params: Sequence[Any] = (),
    ) -> Any:
        statement, values = self.prepare(sql, params, dynamic_params)
        async with self._connection() as connection:
            result = await connection.execute(statement, values)
            return result.scalar()

    async def execute(
        self,
        sql: str,
        params: Sequence[SqlParam] = (),
        dynamic_params: Sequence[Any] = (),
    ) -> int:
        statement, values = self.prepare(sql, params, dynamic_params)
        async with self._connection(write=True) as connection:
            result = await connection.execute(statement, values)
            count = result.rowcount
        logger.debug("sql_executed", rowcount=count)
        return count
