"""Unit tests for metadata services, the row reduction and the snapshot models."""

from __future__ import annotations

import pytest

from clausekit import (
    DatabaseInfo,
    MetadataServiceFactory,
    TableInfo,
)
from clausekit.errors import EngineNotSupportedError, InvalidArgumentError, MetadataError
from clausekit.metadata import (
    MySqlMetadataService,
    PostgreSqlMetadataService,
    SqlServerMetadataService,
    reduce_table_rows,
)
from tests.fixtures import FakeExecutor, load_catalog_rows


def _service(engine: str = "sqlserver", row=None, rows=None):
    executor = FakeExecutor(
        row={"ID": 5, "Name": "shop"} if row is None else row,
        rows=load_catalog_rows() if rows is None else rows,
    )
    return MetadataServiceFactory.create(engine, executor), executor


# ---------------------------------------------------------------------------
# Row reduction
# ---------------------------------------------------------------------------


def test_reduce_groups_columns_by_table():
    tables = reduce_table_rows(load_catalog_rows())
    assert [t.id for t in tables] == ["1", "2"]
    assert tables[0].column_names == ["Id", "Name", "CreatedAt"]
    assert tables[1].column_names == ["OrderId"]


def test_reduce_matches_keys_case_insensitively():
    orders = reduce_table_rows(load_catalog_rows())[1]
    assert orders.name == "Orders"
    column = orders.columns[0]
    assert column.is_primary_key is True
    assert column.is_nullable is False
    assert column.length == 0
    assert column.precision == 19


def test_reduce_skips_rows_without_ids():
    tables = reduce_table_rows([{"table_id": None, "column_id": 1}, {"table_id": 9, "column_id": None}])
    assert tables == []


def test_reduce_empty():
    assert reduce_table_rows([]) == []


def test_reduce_column_details():
    users = reduce_table_rows(load_catalog_rows())[0]
    assert users.schema_name == "dbo"
    assert users.comment == "Application users"
    assert [c.name for c in users.primary_key] == ["Id"]
    name = users.columns[1]
    assert name.comment == "Display name"
    assert name.data_type == "nvarchar"
    assert name.length == 200
    assert name.is_auto_increment is False


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


async def test_get_database_info():
    service, executor = _service()
    info = await service.get_database_info()
    assert isinstance(info, DatabaseInfo)
    assert info.id == "5"
    assert info.name == "shop"
    assert [t.name for t in info.tables] == ["Users", "Orders"]
    assert sum(len(t.columns) for t in info.tables) == 4
    assert len(executor.calls) == 2


async def test_get_database_info_async_alias():
    service, _ = _service("mysql", row={"id": "shop", "name": "shop"})
    info = await service.get_database_info_async()
    assert info.id == "shop"
    assert info.get_table("Users", "dbo") is not None
    assert info.get_table("Users", "sales") is None


async def test_each_call_returns_a_fresh_snapshot():
    service, _ = _service()
    first = await service.get_database_info()
    second = await service.get_database_info()
    assert first == second
    assert first is not second
    first.tables.clear()
    assert len(second.tables) == 2


async def test_missing_database_row_raises():
    service = SqlServerMetadataService(FakeExecutor(row=None))
    with pytest.raises(MetadataError) as exc_info:
        await service.get_database_info()
    assert exc_info.value.engine == "sqlserver"


def test_service_requires_executor():
    with pytest.raises(InvalidArgumentError):
        PostgreSqlMetadataService(None)


def test_factory_creates_registered_services():
    assert isinstance(_service("SqlServer")[0], SqlServerMetadataService)
    assert isinstance(_service("mysql")[0], MySqlMetadataService)
    assert isinstance(_service("postgresql")[0], PostgreSqlMetadataService)
    assert MetadataServiceFactory.registered_engines() == ["mysql", "postgresql", "sqlserver"]


def test_factory_rejects_oracle():
    with pytest.raises(EngineNotSupportedError) as exc_info:
        MetadataServiceFactory.create("oracle", FakeExecutor())
    assert exc_info.value.component == "metadata service"


def test_factory_rejects_unknown_url_backend():
    with pytest.raises(EngineNotSupportedError):
        MetadataServiceFactory.create_for_url("sqlite:///catalog.db")


# ---------------------------------------------------------------------------
# Catalog queries
# ---------------------------------------------------------------------------


def test_sqlserver_database_query():
    service, _ = _service("sqlserver")
    assert service.build_database_query().build().sql == (
        "Select [Dbid] As [id],[Name] As [name]\n"
        "From [sys].[SysDataBases]\n"
        "Where [DbId]=(Select [Dbid]\nFrom [sys].[SysProcesses]\nWhere Spid=@@spid)"
    )


def test_mysql_database_query():
    service, _ = _service("mysql")
    assert service.build_database_query().build().sql == "Select Database() As `id`,Database() As `name`"


def test_postgres_database_query():
    service, _ = _service("postgresql")
    assert service.build_database_query().build().sql == (
        'Select "oid" As "id","datname" As "name"\nFrom "pg_database"\nWhere datname=current_database()'
    )


def test_sqlserver_tables_query():
    service, _ = _service("sqlserver")
    result = service.build_tables_query().build()
    assert "From [sys].[Objects] [o]" in result.sql
    assert (
        "Left Join [sys].[Extended_Properties] [tep] On [o].[object_id]=[tep].[major_id]"
        " And [tep].[minor_id]=0 And [tep].[name]='MS_Description'"
    ) in result.sql
    assert "[tc].[Constraint_Type]='PRIMARY KEY'" in result.sql
    assert "Where [o].[type] In (@_p_0)" in result.sql
    assert result.sql.endswith("Order By [s].[name],[o].[name],[c].[column_id]")
    assert [p.value for p in result.params] == ["U"]


def test_mysql_tables_query():
    service, _ = _service("mysql")
    result = service.build_tables_query().build()
    assert "From `Information_Schema`.`Tables` `t`" in result.sql
    assert "Where `t`.`Table_Schema`=Database() And `t`.`Table_Type`='BASE TABLE'" in result.sql
    assert "Then 1 Else 0 End) As `is_primary_key`" in result.sql
    assert result.params == ()


def test_postgres_tables_query():
    service, _ = _service("postgresql")
    result = service.build_tables_query().build()
    assert 'Where "t"."schemaname" In (Select "schema_name"' in result.sql
    assert "a.attnum = Any(con.conkey)" in result.sql
    assert "Left(schema_name, 3)<>'pg_'" in result.sql
    assert result.sql.endswith('Order By "t"."schemaname","t"."tablename","c"."ordinal"')


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


def test_snapshot_serializes_camel_case():
    table = reduce_table_rows(load_catalog_rows())[0]
    dumped = table.model_dump(by_alias=True)
    assert dumped["schema"] == "dbo"
    assert dumped["columns"][0]["isPrimaryKey"] is True
    assert dumped["columns"][0]["dataType"] == "int"


def test_snapshot_accepts_aliases():
    table = TableInfo.model_validate(
        {"id": 7, "schema": "sales", "name": "Leads", "columns": [{"id": 1, "name": "Id", "isPrimaryKey": True}]}
    )
    assert table.id == "7"
    assert table.schema_name == "sales"
    assert table.primary_key[0].name == "Id"
