"""Native column type name → :class:`~clausekit.types.DbType`.

Each converter is a pure, case-insensitive lookup.  Some names need the
column length to disambiguate (MySQL stores GUIDs as ``char(36)`` and
booleans as ``tinyint(1)``).  Blank or unknown names map to ``None``.
"""
from __future__ import annotations

from typing import ClassVar

from clausekit.metadata.factory import TypeConverterFactory
from clausekit.types import DatabaseType, DbType


class TypeConverter:
    """Base converter driven by a class-level lookup table."""

    types: ClassVar[dict[str, DbType]] = {}

    def to_type(self, data_type: str | None, length: int | None = None) -> DbType | None:
        """Return the generic type for ``data_type``, or ``None`` if unmapped.

        Args:
            data_type: Native type name as reported by the catalog.
            length: Column length, for names that need it.
        """
        if data_type is None or not data_type.strip():
            return None
        return self._lookup(data_type.strip().lower(), length)

    def _lookup(self, data_type: str, length: int | None) -> DbType | None:
        return self.types.get(data_type)


@TypeConverterFactory.register(DatabaseType.SQLSERVER)
class SqlServerTypeConverter(TypeConverter):
    types: ClassVar[dict[str, DbType]] = {
        "uniqueidentifier": DbType.GUID,
        "char": DbType.ANSI_STRING_FIXED_LENGTH,
        "nchar": DbType.STRING_FIXED_LENGTH,
        "varchar": DbType.ANSI_STRING,
        "nvarchar": DbType.STRING,
        "text": DbType.STRING,
        "ntext": DbType.STRING,
        "sysname": DbType.STRING,
        "bit": DbType.BOOLEAN,
        "tinyint": DbType.BYTE,
        "smallint": DbType.INT16,
        "int": DbType.INT32,
        "bigint": DbType.INT64,
        "real": DbType.SINGLE,
        "float": DbType.DOUBLE,
        "decimal": DbType.DECIMAL,
        "numeric": DbType.DECIMAL,
        "money": DbType.DECIMAL,
        "smallmoney": DbType.DECIMAL,
        "date": DbType.DATE,
        "time": DbType.TIME,
        "datetime": DbType.DATETIME,
        "smalldatetime": DbType.DATETIME,
        "datetime2": DbType.DATETIME2,
        "datetimeoffset": DbType.DATETIMEOFFSET,
        "binary": DbType.BINARY,
        "varbinary": DbType.BINARY,
        "varbinary(max)": DbType.BINARY,
        "image": DbType.BINARY,
        "rowversion": DbType.BINARY,
        "timestamp": DbType.BINARY,
        "xml": DbType.XML,
        "sql_variant": DbType.OBJECT,
    }


@TypeConverterFactory.register(DatabaseType.MYSQL)
class MySqlTypeConverter(TypeConverter):
    types: ClassVar[dict[str, DbType]] = {
        "char": DbType.STRING,
        "varchar": DbType.STRING,
        "tinytext": DbType.STRING,
        "mediumtext": DbType.STRING,
        "longtext": DbType.STRING,
        "text": DbType.STRING,
        "tinyint": DbType.BYTE,
        "bit": DbType.BOOLEAN,
        "smallint": DbType.INT16,
        "integer": DbType.INT32,
        "int": DbType.INT32,
        "mediumint": DbType.INT32,
        "bigint": DbType.INT64,
        "float": DbType.SINGLE,
        "double": DbType.DOUBLE,
        "decimal": DbType.DECIMAL,
        "numeric": DbType.DECIMAL,
        "date": DbType.DATE,
        "time": DbType.TIME,
        "datetime": DbType.DATETIME,
        "timestamp": DbType.DATETIME,
        "tinyblob": DbType.BINARY,
        "mediumblob": DbType.BINARY,
        "longblob": DbType.BINARY,
        "blob": DbType.BINARY,
    }

    def _lookup(self, data_type: str, length: int | None) -> DbType | None:
        if data_type == "char" and length == 36:
            return DbType.GUID
        if data_type == "tinyint" and length == 1:
            return DbType.BOOLEAN
        return super()._lookup(data_type, length)


@TypeConverterFactory.register(DatabaseType.POSTGRESQL)
class PostgreSqlTypeConverter(TypeConverter):
    """Maps ``udt_name`` values (``int4``, ``bpchar``) as well as SQL names."""

    types: ClassVar[dict[str, DbType]] = {
        "uuid": DbType.GUID,
        "bpchar": DbType.STRING_FIXED_LENGTH,
        "char": DbType.STRING_FIXED_LENGTH,
        "character": DbType.STRING_FIXED_LENGTH,
        "varchar": DbType.STRING,
        "character varying": DbType.STRING,
        "text": DbType.STRING,
        "citext": DbType.STRING,
        "bool": DbType.BOOLEAN,
        "boolean": DbType.BOOLEAN,
        "int2": DbType.INT16,
        "smallint": DbType.INT16,
        "int4": DbType.INT32,
        "integer": DbType.INT32,
        "int8": DbType.INT64,
        "bigint": DbType.INT64,
        "float4": DbType.SINGLE,
        "real": DbType.SINGLE,
        "float8": DbType.DOUBLE,
        "double precision": DbType.DOUBLE,
        "numeric": DbType.DECIMAL,
        "decimal": DbType.DECIMAL,
        "money": DbType.CURRENCY,
        "date": DbType.DATE,
        "time": DbType.TIME,
        "timetz": DbType.TIME,
        "timestamp": DbType.DATETIME,
        "timestamptz": DbType.DATETIMEOFFSET,
        "bytea": DbType.BINARY,
        "xml": DbType.XML,
        "json": DbType.STRING,
        "jsonb": DbType.STRING,
    }
