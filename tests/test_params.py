"""Unit tests for ParameterManager and the Oracle binding rules."""

from __future__ import annotations

import uuid

from clausekit.engines import OracleParameterManager
from clausekit.params import ParameterManager
from clausekit.types import DbType, ParameterDirection


def test_add_normalizes_name():
    params = ParameterManager("@")
    param = params.add("p0", 42, DbType.INT32)
    assert param is not None
    assert param.name == "@p0"
    assert param.db_type is DbType.INT32
    assert params.get_param("p0").value == 42
    assert params.get_param("@p0").value == 42
    assert params.contains(" @p0 ")
    assert "p0" in params


def test_add_with_full_description():
    params = ParameterManager("@")
    param = params.add("out", None, DbType.STRING, ParameterDirection.OUTPUT, size=50)
    assert param.direction is ParameterDirection.OUTPUT
    assert param.size == 50


def test_add_overwrites_existing_name():
    params = ParameterManager("@")
    params.add("p0", 1)
    params.add("@p0", 2)
    assert len(params) == 1
    assert params.get_value("p0") == 2


def test_add_blank_name_is_ignored():
    params = ParameterManager("@")
    assert params.add("   ", 1) is None
    assert params.add("", 1) is None
    assert len(params) == 0


def test_generated_names_are_sequential():
    params = ParameterManager("@")
    assert params.add_value("a") == "@_p_0"
    assert params.add_value("b") == "@_p_1"
    assert [p.value for p in params.get_params()] == ["a", "b"]


def test_generated_name_skips_taken_names():
    params = ParameterManager("@")
    params.add("_p_0", "manual")
    assert params.add_value("generated") == "@_p_1"
    assert params.get_value("@_p_0") == "manual"


def test_clear_restarts_generation():
    params = ParameterManager("@")
    params.add_value(1)
    params.add_dynamic_params({"x": 1})
    params.clear()
    assert len(params) == 0
    assert params.get_dynamic_params() == ()
    assert params.generate_name() == "@_p_0"


def test_remove():
    params = ParameterManager("@")
    params.add("p0", 1)
    params.remove("p0")
    assert not params.contains("p0")
    params.remove("missing")


def test_managers_are_isolated():
    first = ParameterManager("@")
    second = ParameterManager("@")
    first.add_value(1)
    assert len(second) == 0
    assert second.add_value(2) == "@_p_0"


def test_clone_is_independent():
    params = ParameterManager("@")
    params.add_value(1)
    copy = params.clone()
    copy.add_value(2)
    params.add("x", 3)
    assert len(params) == 2
    assert [p.name for p in copy.get_params()] == ["@_p_0", "@_p_1"]


def test_dynamic_params_ignore_none():
    params = ParameterManager("@")
    params.add_dynamic_params(None)
    params.add_dynamic_params({"tenant": "acme"})
    assert params.get_dynamic_params() == ({"tenant": "acme"},)


def test_lookup_of_blank_or_missing_name():
    params = ParameterManager("@")
    assert params.get_param("") is None
    assert params.get_value("missing") is None
    assert not params.contains("")


def test_oracle_names_and_values():
    params = OracleParameterManager()
    assert params.prefix == ":"
    name = params.add_value(True)
    assert name == ":p_0"
    assert params.get_value(name) == 1
    key = uuid.UUID("12345678-1234-5678-1234-567812345678")
    assert params.get_value(params.add_value(key)) == str(key)
    assert params.get_value(params.add_value(False)) == 0
