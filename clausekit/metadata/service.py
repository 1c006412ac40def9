"""Schema introspection shared by every engine.

A :class:`MetadataService` issues two builder-produced queries through an
executor: one for the current database's identity and one joining the
engine's table catalog with its column catalog (one row per table/column
pair).  :func:`reduce_table_rows` then folds those flat rows into tables in
a single forward pass, so the number of queries never depends on the number
of tables.

Catalog queries alias their columns to a fixed row shape::

    table_id, table_schema, table_name, table_comment,
    column_id, column_name, column_comment, is_primary_key,
    is_auto_increment, is_nullable, data_type, length, precision, scale

Engines fold unquoted alias case differently, so rows are matched
case-insensitively.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from clausekit.builder.query_builder import QueryBuilder
from clausekit.errors import InvalidArgumentError, MetadataError
from clausekit.log import get_logger
from clausekit.metadata.executor import SqlExecutor
from clausekit.metadata.models import ColumnInfo, DatabaseInfo, TableInfo
from clausekit.types import DatabaseType

logger = get_logger(__name__)


def _lower_keys(row: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key).lower(): value for key, value in row.items()}


def reduce_table_rows(rows: Iterable[Mapping[str, Any]]) -> list[TableInfo]:
    """Fold joined (table, column) rows into tables.

    Tables appear in first-seen order and each table id appears once; every
    row appends its column to its table.  Rows missing either the table id or
    the column id are skipped.

    Args:
        rows: Catalog rows in the shape documented on this module.

    Returns:
        The tables, each holding exactly the columns that joined to it.
    """
    tables: dict[str, TableInfo] = {}
    for raw in rows:
        row = _lower_keys(raw)
        table_id = row.get("table_id")
        column_id = row.get("column_id")
        if table_id is None or column_id is None:
            continue
        key = str(table_id)
        table = tables.get(key)
        if table is None:
            table = TableInfo(
                id=key,
                schema_name=row.get("table_schema"),
                name=row.get("table_name") or key,
                comment=row.get("table_comment"),
            )
            tables[key] = table
        table.columns.append(
            ColumnInfo(
                id=column_id,
                name=row.get("column_name") or str(column_id),
                comment=row.get("column_comment"),
                is_primary_key=bool(row.get("is_primary_key") or False),
                is_auto_increment=bool(row.get("is_auto_increment") or False),
                is_nullable=row.get("is_nullable"),
                data_type=row.get("data_type"),
                length=row.get("length"),
                precision=row.get("precision"),
                scale=row.get("scale"),
            )
        )
    return list(tables.values())


class MetadataService(ABC):
    """Reads a database → tables → columns snapshot through an executor.

    Subclasses supply the two engine-specific queries; the run order and the
    row reduction live here.

    Args:
        executor: Anything implementing :class:`SqlExecutor`.

    Raises:
        InvalidArgumentError: If ``executor`` is ``None``.
    """

    engine: ClassVar[DatabaseType]

    def __init__(self, executor: SqlExecutor) -> None:
        if executor is None:
            raise InvalidArgumentError(f"{type(self).__name__} requires an executor.", "executor")
        self._executor = executor

    @property
    def executor(self) -> SqlExecutor:
        return self._executor

    def create_builder(self) -> QueryBuilder:
        return QueryBuilder.create(self.engine)

    @abstractmethod
    def build_database_query(self) -> QueryBuilder:
        """Return the query selecting ``id`` and ``name`` of the current database."""

    @abstractmethod
    def build_tables_query(self) -> QueryBuilder:
        """Return the joined table/column catalog query."""

    async def get_database_info(self) -> DatabaseInfo:
        """Return a fresh snapshot of the connected database.

        Raises:
            MetadataError: If the identity query returns no row.
        """
        database = await self._get_database()
        database.tables.extend(await self._get_tables())
        logger.info(
            "metadata_loaded",
            engine=self.engine.value,
            database=database.name,
            tables=len(database.tables),
            columns=sum(len(table.columns) for table in database.tables),
        )
        return database

    get_database_info_async = get_database_info

    async def _get_database(self) -> DatabaseInfo:
        result = self.build_database_query().build()
        row = await self._executor.fetch_one(result.sql, result.params, result.dynamic_params)
        if row is None:
            raise MetadataError("The database identity query returned no row.", self.engine.value)
        row = _lower_keys(row)
        return DatabaseInfo(id=row.get("id"), name=row.get("name"))

    async def _get_tables(self) -> list[TableInfo]:
        result = self.build_tables_query().build()
        rows = await self._executor.fetch_all(result.sql, result.params, result.dynamic_params)
        return reduce_table_rows(rows)
