"""SqlServer schema introspection via ``sys.*`` catalog views."""

from __future__ import annotations

from typing import ClassVar

from clausekit.builder.query_builder import QueryBuilder
from clausekit.metadata.factory import MetadataServiceFactory
from clausekit.metadata.service import MetadataService
from clausekit.types import DatabaseType


@MetadataServiceFactory.register(DatabaseType.SQLSERVER)
class SqlServerMetadataService(MetadataService):
    """Reads user tables (``sys.Objects`` type ``U``) and their columns.

    Table and column comments come from the ``MS_Description`` extended
    property; primary-key membership is resolved per column against
    ``Information_Schema`` key usage.
    """

    engine: ClassVar[DatabaseType] = DatabaseType.SQLSERVER

    def build_database_query(self) -> QueryBuilder:
        return (
            self.create_builder()
            .select("Dbid As id, Name As name")
            .from_("sys.SysDataBases")
            .where(
                "DbId",
                lambda sub: sub.select("Dbid").from_("sys.SysProcesses").append_where("Spid=@@spid"),
            )
        )

    def build_tables_query(self) -> QueryBuilder:
        builder = self.create_builder()
        return (
            builder.select("o.object_id As table_id, s.name As table_schema, o.name As table_name")
            .append_select(",Cast([tep].[value] As nvarchar(4000)) As [table_comment]")
            .select("c.column_id, c.column_name, c.column_comment")
            .append_select(",(Case When Exists(")
            .append_select(self._primary_key_query(builder))
            .append_select(") Then Cast(1 As Bit) Else Cast(0 As Bit) End) As [is_primary_key]")
            .select("c.is_identity As is_auto_increment, c.is_nullable")
            .select("c.data_type, c.max_length As length, c.precision, c.scale")
            .from_("sys.Objects o")
            .left_join("sys.Schemas s")
            .on("o.schema_id", "s.schema_id")
            .left_join("sys.Extended_Properties tep")
            .on("o.object_id", "tep.major_id")
            .on("tep.minor_id", 0)
            .append_on("[tep].[name]='MS_Description'")
            .join(self._columns_query(builder), "c")
            .on("c.object_id", "o.object_id")
            .in_("o.type", ["U"])
            .order_by("s.name, o.name, c.column_id")
        )

    @staticmethod
    def _primary_key_query(builder: QueryBuilder) -> QueryBuilder:
        return (
            builder.new()
            .select("*")
            .from_("Information_Schema.Key_Column_Usage k")
            .join("Information_Schema.Table_Constraints tc")
            .on("k.Table_Schema", "tc.Table_Schema")
            .on("k.Table_Name", "tc.Table_Name")
            .on("k.Constraint_Name", "tc.Constraint_Name")
            .append_on("[tc].[Constraint_Type]='PRIMARY KEY'")
            .append_where("[s].[name]=[k].[Table_Schema]")
            .append_where("[o].[name]=[k].[Table_Name]")
            .append_where("[c].[column_name]=[k].[Column_Name]")
        )

    @staticmethod
    def _columns_query(builder: QueryBuilder) -> QueryBuilder:
        return (
            builder.new()
            .select("c.object_id, c.column_id, c.name As column_name")
            .append_select(",Cast([ep].[value] As nvarchar(4000)) As [column_comment]")
            .select("c.is_identity, c.is_nullable, t.name As data_type, c.max_length")
            .select("c.precision, c.scale")
            .from_("sys.Columns c")
            .left_join("sys.Extended_Properties ep")
            .on("c.object_id", "ep.major_id")
            .on("c.column_id", "ep.minor_id")
            .append_on("[ep].[name]='MS_Description'")
            .left_join("sys.Types t")
            .on("c.user_type_id", "t.user_type_id")
        )
