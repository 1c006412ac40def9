"""Engine-agnostic enumerations shared across clausekit.

``DatabaseType``
    Identifiers of the engines clausekit knows how to talk to.

``DbType``
    Generic column/parameter type tags.  Native catalog type names are mapped
    onto these by :mod:`clausekit.metadata.type_converters`, and
    :class:`~clausekit.params.SqlParam` carries one as an optional hint for
    the executor.

``ParameterDirection``
    Whether a bound parameter is read, written, or both by the statement.
"""
from __future__ import annotations

from enum import Enum


class DatabaseType(str, Enum):
    """Engine identifiers used as registry keys."""

    SQLSERVER = "sqlserver"
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    ORACLE = "oracle"


class DbType(str, Enum):
    """Generic, engine-agnostic type tag."""

    ANSI_STRING = "ansi_string"
    ANSI_STRING_FIXED_LENGTH = "ansi_string_fixed_length"
    STRING = "string"
    STRING_FIXED_LENGTH = "string_fixed_length"
    GUID = "guid"
    BOOLEAN = "boolean"
    BYTE = "byte"
    SBYTE = "sbyte"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    SINGLE = "single"
    DOUBLE = "double"
    DECIMAL = "decimal"
    CURRENCY = "currency"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    DATETIME2 = "datetime2"
    DATETIMEOFFSET = "datetimeoffset"
    BINARY = "binary"
    XML = "xml"
    OBJECT = "object"


class ParameterDirection(str, Enum):
    """Direction of a bound parameter."""

    INPUT = "input"
    OUTPUT = "output"
    INPUT_OUTPUT = "input_output"
    RETURN_VALUE = "return_value"
