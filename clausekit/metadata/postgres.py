"""PostgreSQL schema introspection via ``pg_catalog`` and ``information_schema``."""

from __future__ import annotations

from typing import ClassVar

from clausekit.builder.query_builder import QueryBuilder
from clausekit.metadata.factory import MetadataServiceFactory
from clausekit.metadata.service import MetadataService
from clausekit.types import DatabaseType


@MetadataServiceFactory.register(DatabaseType.POSTGRESQL)
class PostgreSqlMetadataService(MetadataService):
    """Reads tables of every user schema in the current database.

    System schemas (``information_schema`` and ``pg_*``) are excluded.
    ``data_type`` is the ``udt_name`` (``int4``, ``varchar``), which is what
    :class:`~clausekit.metadata.type_converters.PostgreSqlTypeConverter`
    expects.
    """

    engine: ClassVar[DatabaseType] = DatabaseType.POSTGRESQL

    def build_database_query(self) -> QueryBuilder:
        return (
            self.create_builder()
            .select("oid As id, datname As name")
            .from_("pg_database")
            .append_where("datname=current_database()")
        )

    def build_tables_query(self) -> QueryBuilder:
        builder = self.create_builder()
        return (
            builder.select("c1.oid As table_id, t.schemaname As table_schema, t.tablename As table_name")
            .append_select(",obj_description(c1.oid, 'pg_class') As [table_comment]")
            .select("c.column_id, c.column_name, c.column_comment, c.data_type")
            .select("c.length, c.precision, c.scale")
            .select("c.is_nullable, c.is_primary_key, c.is_auto_increment")
            .from_("pg_tables t")
            .join("pg_namespace n1")
            .on("n1.nspname", "t.schemaname")
            .join("pg_class c1")
            .on("c1.relname", "t.tablename")
            .on("c1.relnamespace", "n1.oid")
            .join(self._columns_query(builder), "c")
            .on("c.table_id", "c1.oid")
            .in_(
                "t.schemaname",
                lambda sub: sub.select("schema_name")
                .from_("information_schema.schemata")
                .append_where("catalog_name=current_database()")
                .append_where("schema_name<>'information_schema'")
                .append_where("Left(schema_name, 3)<>'pg_'"),
            )
            .order_by("t.schemaname, t.tablename, c.ordinal")
        )

    @staticmethod
    def _columns_query(builder: QueryBuilder) -> QueryBuilder:
        return (
            builder.new()
            .select("a.attrelid As table_id, a.attnum As ordinal")
            .select("a.attname As column_id, a.attname As column_name, col.udt_name As data_type")
            .select("col.numeric_precision As precision, col.numeric_scale As scale")
            .append_select(",Coalesce(col.character_maximum_length, col.numeric_precision, 0) As [length]")
            .append_select(",(Case When a.attnotnull Then 0 Else 1 End) As [is_nullable]")
            .append_select(
                ",(Case When con.conkey Is Not Null And a.attnum = Any(con.conkey) Then 1 Else 0 End)"
                " As [is_primary_key]"
            )
            .append_select(
                ",(Case When col.is_identity='YES' Or col.column_default Like 'nextval(%' Then 1 Else 0 End)"
                " As [is_auto_increment]"
            )
            .append_select(",col_description(a.attrelid, a.attnum) As [column_comment]")
            .from_("pg_attribute a")
            .join("pg_class c2")
            .on("a.attrelid", "c2.oid")
            .join("pg_namespace n")
            .on("n.oid", "c2.relnamespace")
            .left_join("pg_constraint con")
            .on("con.conrelid", "c2.oid")
            .append_on("con.contype='p'")
            .join("information_schema.columns col")
            .on("col.table_schema", "n.nspname")
            .on("col.table_name", "c2.relname")
            .on("col.column_name", "a.attname")
            .append_where("a.attnum>0")
            .append_where("Not a.attisdropped")
        )
