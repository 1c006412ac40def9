"""Test fixtures: sample catalog rows as a metadata service receives them."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from clausekit.params import SqlParam

_FIXTURES_DIR = Path(__file__).parent


def load_catalog_rows() -> list[dict[str, Any]]:
    """Load the joined table/column rows from catalog_rows.json.

    The rows deliberately mix key casing (``TABLE_ID`` vs ``table_id``) and
    revisit table ``1`` after table ``2`` to exercise the reduction.
    """
    return json.loads((_FIXTURES_DIR / "catalog_rows.json").read_text())


class FakeExecutor:
    """In-memory executor returning canned rows and recording every call."""

    def __init__(
        self,
        row: Mapping[str, Any] | None = None,
        rows: Sequence[Mapping[str, Any]] = (),
    ) -> None:
        self.row = row
        self.rows = list(rows)
        self.calls: list[tuple[str, tuple[SqlParam, ...]]] = []

    async def fetch_all(self, sql, params=(), dynamic_params=()):
        self.calls.append((sql, tuple(params)))
        return list(self.rows)

    async def fetch_one(self, sql, params=(), dynamic_params=()):
        self.calls.append((sql, tuple(params)))
        return self.row

    async def fetch_scalar(self, sql, params=(), dynamic_params=()):
        self.calls.append((sql, tuple(params)))
        return None

    async def execute(self, sql, params=(), dynamic_params=()):
        self.calls.append((sql, tuple(params)))
        return 0
