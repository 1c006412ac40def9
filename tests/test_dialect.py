"""Unit tests for Dialect quoting and identifier parsing."""

from __future__ import annotations

import pytest

from clausekit.engines import MYSQL_DIALECT, ORACLE_DIALECT, POSTGRESQL_DIALECT, SQLSERVER_DIALECT
from clausekit.names import ColumnItem, NameItem, TableItem


@pytest.mark.parametrize(
    ("dialect", "expected"),
    [
        (SQLSERVER_DIALECT, "[Name]"),
        (MYSQL_DIALECT, "`Name`"),
        (POSTGRESQL_DIALECT, '"Name"'),
        (ORACLE_DIALECT, '"Name"'),
    ],
)
def test_safe_name_wraps_once(dialect, expected):
    assert dialect.safe_name("Name") == expected
    assert dialect.safe_name(expected) == expected


def test_safe_name_blank_and_star():
    assert SQLSERVER_DIALECT.safe_name(None) == ""
    assert SQLSERVER_DIALECT.safe_name("   ") == ""
    assert SQLSERVER_DIALECT.safe_name("*") == "*"


def test_safe_name_strips_whitespace():
    assert SQLSERVER_DIALECT.safe_name("  Name ") == "[Name]"


def test_replace_sql_rewrites_brackets():
    assert POSTGRESQL_DIALECT.replace_sql("[u].[Name]='x'") == '"u"."Name"=\'x\''
    assert MYSQL_DIALECT.replace_sql("[u].[Name]") == "`u`.`Name`"
    assert SQLSERVER_DIALECT.replace_sql("[u].[Name]") == "[u].[Name]"


def test_replace_sql_keeps_escaped_brackets():
    assert POSTGRESQL_DIALECT.replace_sql("[tags][[1]]") == '"tags"[1]'


def test_replace_sql_blank():
    assert POSTGRESQL_DIALECT.replace_sql(None) == ""
    assert POSTGRESQL_DIALECT.replace_sql("") == ""


def test_param_token():
    assert SQLSERVER_DIALECT.param_token("id") == "@id"
    assert SQLSERVER_DIALECT.param_token("@id") == "@id"
    assert ORACLE_DIALECT.param_token(" id ") == ":id"


def test_dialect_literals():
    assert SQLSERVER_DIALECT.true_literal == "Cast(1 As Bit)"
    assert POSTGRESQL_DIALECT.false_literal == "False"
    assert ORACLE_DIALECT.dual_table == "Dual"
    assert ORACLE_DIALECT.supports_select_as is False


# ---------------------------------------------------------------------------
# Name parsing
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("text", ["a.b As c", "a.b c", "a . b  as  c", "a.b AS c"])
def test_name_item_parse_variants(text):
    assert NameItem.parse(text) == NameItem(name="b", prefix="a", alias="c")


def test_name_item_without_prefix_or_alias():
    assert NameItem.parse("Id") == NameItem(name="Id")


def test_name_item_multi_part_prefix():
    item = NameItem.parse("db.dbo.Users u")
    assert item.prefix == "db.dbo"
    assert item.name == "Users"
    assert item.alias == "u"


def test_column_item_renders_alias_with_as():
    assert ColumnItem.parse(SQLSERVER_DIALECT, "t.Name UserName").to_sql() == "[t].[Name] As [UserName]"


def test_table_item_renders_alias_without_as():
    assert TableItem.parse(ORACLE_DIALECT, "hr.Employees e").to_sql() == '"hr"."Employees" "e"'


def test_table_item_validity():
    assert TableItem.parse(SQLSERVER_DIALECT, "Users").is_valid
    assert not TableItem.parse(SQLSERVER_DIALECT, "   ").is_valid
