"""Pydantic models for the schema snapshot produced by a metadata service.

The snapshot is a plain tree (database → tables → columns) created fresh on
every call and owned by the caller.  Field names are snake_case in Python;
``model_dump(by_alias=True)`` produces the camelCase shape consumed by
schema-diff and code-generation tooling::

    {"id": ..., "name": ..., "tables": [
        {"id": ..., "schema": ..., "name": ..., "comment": ..., "columns": [
            {"id": ..., "name": ..., "comment": ..., "isPrimaryKey": ...,
             "isAutoIncrement": ..., "isNullable": ..., "dataType": ...,
             "length": ..., "precision": ..., "scale": ...}]}]}
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_SNAPSHOT_CONFIG = ConfigDict(
    extra="forbid",
    alias_generator=to_camel,
    populate_by_name=True,
    coerce_numbers_to_str=True,
)


class ColumnInfo(BaseModel):
    """Metadata for a single column.

    Attributes:
        id: Engine-specific column identifier (ordinal or name).
        name: Column name.
        comment: Column description, if the engine stores one.
        is_primary_key: Whether the column belongs to the primary key.
            Composite keys mark several columns.
        is_auto_increment: Whether the engine generates values.
        is_nullable: Whether the column accepts NULL, when known.
        data_type: Native type name (``'nvarchar'``, ``'int4'``, ...).
        length: Maximum length or numeric precision; ``0`` when unknown.
        precision: Numeric precision, when applicable.
        scale: Numeric scale, when applicable.
    """

    model_config = _SNAPSHOT_CONFIG

    id: str
    name: str
    comment: str | None = None
    is_primary_key: bool = False
    is_auto_increment: bool = False
    is_nullable: bool | None = None
    data_type: str | None = None
    length: int = 0
    precision: int | None = None
    scale: int | None = None

    @field_validator("length", mode="before")
    @classmethod
    def _length_defaults_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class TableInfo(BaseModel):
    """Metadata for a single table.

    Attributes:
        id: Engine-specific table identifier (object id, oid or name).
        schema_name: Owning schema; serialized as ``schema``.
        name: Table name.
        comment: Table description, if the engine stores one.
        columns: Columns in catalog order.
    """

    model_config = _SNAPSHOT_CONFIG

    id: str
    schema_name: str | None = Field(default=None, alias="schema")
    name: str
    comment: str | None = None
    columns: list[ColumnInfo] = Field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def primary_key(self) -> list[ColumnInfo]:
        return [c for c in self.columns if c.is_primary_key]


class DatabaseInfo(BaseModel):
    """Snapshot of one database.

    Attributes:
        id: Engine-specific database identifier.
        name: Database name.
        tables: Tables in first-seen catalog order; a table id appears once.
    """

    model_config = _SNAPSHOT_CONFIG

    id: str
    name: str
    tables: list[TableInfo] = Field(default_factory=list)

    def get_table(self, name: str, schema: str | None = None) -> TableInfo | None:
        """Return the first table called ``name`` (optionally within ``schema``)."""
        for table in self.tables:
            if table.name == name and (schema is None or table.schema_name == schema):
                return table
        return None
