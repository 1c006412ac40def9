"""clausekit metadata layer: schema snapshots and native type mapping.

Importing this package registers the built-in metadata services and type
converters with :class:`MetadataServiceFactory` and
:class:`TypeConverterFactory`.
"""
from clausekit.metadata.executor import SqlExecutor
from clausekit.metadata.factory import MetadataServiceFactory, TypeConverterFactory
from clausekit.metadata.models import ColumnInfo, DatabaseInfo, TableInfo
from clausekit.metadata.mysql import MySqlMetadataService
from clausekit.metadata.postgres import PostgreSqlMetadataService
from clausekit.metadata.service import MetadataService, reduce_table_rows
from clausekit.metadata.sqlserver import SqlServerMetadataService
from clausekit.metadata.type_converters import (
    MySqlTypeConverter,
    PostgreSqlTypeConverter,
    SqlServerTypeConverter,
    TypeConverter,
)

__all__ = [
    "ColumnInfo",
    "DatabaseInfo",
    "MetadataService",
    "MetadataServiceFactory",
    "MySqlMetadataService",
    "MySqlTypeConverter",
    "PostgreSqlMetadataService",
    "PostgreSqlTypeConverter",
    "SqlExecutor",
    "SqlServerMetadataService",
    "SqlServerTypeConverter",
    "TableInfo",
    "TypeConverter",
    "TypeConverterFactory",
    "reduce_table_rows",
]
