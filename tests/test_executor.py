"""Unit tests for SQL preparation in SqlAlchemyExecutor."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from clausekit.errors import InvalidArgumentError
from clausekit.metadata.sqlalchemy_executor import SqlAlchemyExecutor, dynamic_params_to_dict
from clausekit.params import SqlParam


def _executor(prefix: str = "@") -> SqlAlchemyExecutor:
    # prepare() never touches the bind
    return SqlAlchemyExecutor(object(), parameter_prefix=prefix)


def test_prepare_rewrites_registered_tokens():
    statement, values = _executor().prepare(
        "Select * From T Where a=@_p_0 And b=@name And c=@@spid",
        params=(SqlParam("@_p_0", 1),),
        dynamic_params=({"name": "x"},),
    )
    assert str(statement) == "Select * From T Where a=:_p_0 And b=:name And c=@@spid"
    assert values == {"_p_0": 1, "name": "x"}


def test_prepare_prefers_longer_tokens():
    params = tuple(SqlParam(f"@_p_{i}", i) for i in range(11))
    sql = " ".join(f"{p.name}," for p in params)
    statement, values = _executor().prepare(sql, params)
    assert ":_p_10," in str(statement)
    assert ":_p_1," in str(statement)
    assert values["_p_10"] == 10


def test_prepare_oracle_tokens():
    statement, values = _executor(":").prepare("Select 1 From Dual Where a=:p_0", (SqlParam(":p_0", 5),))
    assert str(statement) == "Select 1 From Dual Where a=:p_0"
    assert values == {"p_0": 5}


def test_prepare_leaves_unregistered_tokens():
    statement, values = _executor().prepare("Select @@version")
    assert str(statement) == "Select @@version"
    assert values == {}


def test_executor_requires_bind():
    with pytest.raises(InvalidArgumentError):
        SqlAlchemyExecutor(None)


class _Filter(BaseModel):
    tenant: str
    active: bool = True


@dataclass
class _Range:
    low: int
    high: int


class _Plain:
    def __init__(self) -> None:
        self.region = "eu"


def test_dynamic_params_to_dict():
    assert dynamic_params_to_dict({"a": 1}) == {"a": 1}
    assert dynamic_params_to_dict(_Filter(tenant="acme")) == {"tenant": "acme", "active": True}
    assert dynamic_params_to_dict(_Range(1, 9)) == {"low": 1, "high": 9}
    assert dynamic_params_to_dict(_Plain()) == {"region": "eu"}
