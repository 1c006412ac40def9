"""MySQL schema introspection via ``Information_Schema``."""

from __future__ import annotations

from typing import ClassVar

from clausekit.builder.query_builder import QueryBuilder
from clausekit.metadata.factory import MetadataServiceFactory
from clausekit.metadata.service import MetadataService
from clausekit.types import DatabaseType


@MetadataServiceFactory.register(DatabaseType.MYSQL)
class MySqlMetadataService(MetadataService):
    """Reads the base tables of the current schema (``Database()``).

    MySQL has no table ids, so the table name doubles as the id.  The
    reported ``length`` of a ``tinyint(1)`` column is ``1`` so that the type
    converter can tell booleans from bytes.
    """

    engine: ClassVar[DatabaseType] = DatabaseType.MYSQL

    def build_database_query(self) -> QueryBuilder:
        return self.create_builder().append_select("Database() As [id],Database() As [name]")

    def build_tables_query(self) -> QueryBuilder:
        return (
            self.create_builder()
            .select("t.Table_Name As table_id, t.Table_Schema As table_schema")
            .select("t.Table_Name As table_name, t.Table_Comment As table_comment")
            .select("c.Column_Name As column_id, c.Column_Name As column_name")
            .select("c.Column_Comment As column_comment, c.Data_Type As data_type")
            .select("c.Numeric_Precision As precision, c.Numeric_Scale As scale")
            .append_select(",(Case When [c].[Column_Key]='PRI' Then 1 Else 0 End) As [is_primary_key]")
            .append_select(",(Case When [c].[Extra] Like '%auto_increment%' Then 1 Else 0 End) As [is_auto_increment]")
            .append_select(",(Case When [c].[Is_Nullable]='NO' Then 0 Else 1 End) As [is_nullable]")
            .append_select(",(Case When [c].[Column_Type]='tinyint(1)' Then 1 ")
            .append_select("When [c].[Numeric_Precision] Is Not Null Then [c].[Numeric_Precision] ")
            .append_select("When [c].[Character_Maximum_Length] Is Not Null Then [c].[Character_Maximum_Length] ")
            .append_select("Else Null End) As [length]")
            .from_("Information_Schema.Tables t")
            .join("Information_Schema.Columns c")
            .on("t.Table_Schema", "c.Table_Schema")
            .on("t.Table_Name", "c.Table_Name")
            .append_where("[t].[Table_Schema]=Database()")
            .append_where("[t].[Table_Type]='BASE TABLE'")
            .order_by("t.Table_Name, c.Ordinal_Position")
        )
