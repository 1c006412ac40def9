"""Shared pytest fixtures for clausekit unit and integration tests."""
from __future__ import annotations

import pytest

from clausekit import QueryBuilder
from clausekit.settings import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so env overrides never leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def sqlserver() -> QueryBuilder:
    return QueryBuilder.create("sqlserver")


@pytest.fixture()
def mysql() -> QueryBuilder:
    return QueryBuilder.create("mysql")


@pytest.fixture()
def postgres() -> QueryBuilder:
    return QueryBuilder.create("postgresql")


@pytest.fixture()
def oracle() -> QueryBuilder:
    return QueryBuilder.create("oracle")

