"""The boundary between rendered SQL and a live database.

clausekit never opens connections itself.  Anything that satisfies
:class:`SqlExecutor` can run what a builder renders;
:class:`~clausekit.metadata.sqlalchemy_executor.SqlAlchemyExecutor` is the
bundled implementation.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from clausekit.params import SqlParam


@runtime_checkable
class SqlExecutor(Protocol):
    """Runs SQL text with named parameters and opaque parameter bags.

    Every method receives the SQL text exactly as rendered (dialect-prefixed
    parameter tokens included), the named :class:`SqlParam` list, and the
    dynamic parameter bags, and is responsible for binding both.
    """

    async def fetch_all(
        self,
        sql: str,
        params: Sequence[SqlParam] = (),
        dynamic_params: Sequence[Any] = (),
    ) -> list[Mapping[str, Any]]:
        """Return every row as a column-name → value mapping."""
        ...

    async def fetch_one(
        self,
        sql: str,
        params: Sequence[SqlParam] = (),
        dynamic_params: Sequence[Any] = (),
    ) -> Mapping[str, Any] | None:
        """Return the first row, or ``None`` when there is none."""
        ...

    async def fetch_scalar(
        self,
        sql: str,
        params: Sequence[SqlParam] = (),
        dynamic_params: Sequence[Any] = (),
    ) -> Any:
        """Return the first column of the first row."""
        ...

    async def execute(
        self,
        sql: str,
        params: Sequence[SqlParam] = (),
        dynamic_params: Sequence[Any] = (),
    ) -> int:
        """Run a statement and return the affected row count."""
        ...
