"""Unit tests for ColumnCache."""

from __future__ import annotations

import threading

from clausekit.column_cache import ColumnCache
from clausekit.engines import MYSQL_DIALECT, SQLSERVER_DIALECT


class _CountingCache(ColumnCache):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.loads = 0

    def _normalize_columns(self, columns: str) -> str:
        self.loads += 1
        return super()._normalize_columns(columns)


def test_quotes_column_list():
    cache = ColumnCache(SQLSERVER_DIALECT, maxsize=16)
    assert cache.get_safe_columns("a, t.b As c") == "[a],[t].[b] As [c]"


def test_skips_blank_items():
    cache = ColumnCache(MYSQL_DIALECT, maxsize=16)
    assert cache.get_safe_columns("a,, b ,") == "`a`,`b`"


def test_does_not_double_wrap():
    cache = ColumnCache(SQLSERVER_DIALECT, maxsize=16)
    assert cache.get_safe_columns("[a], [t].[b]") == "[a],[t].[b]"
    assert cache.get_safe_column("[Name]") == "[Name]"


def test_multi_part_prefix():
    cache = ColumnCache(SQLSERVER_DIALECT, maxsize=16)
    assert cache.get_safe_column("db.dbo.Users") == "[db].[dbo].[Users]"


def test_blank_input_returns_none():
    cache = ColumnCache(SQLSERVER_DIALECT, maxsize=16)
    assert cache.get_safe_columns(None) is None
    assert cache.get_safe_columns("  ") is None
    assert cache.get_safe_column("") is None
    assert len(cache) == 0


def test_repeated_lookup_hits_cache():
    cache = _CountingCache(SQLSERVER_DIALECT, maxsize=16)
    first = cache.get_safe_columns("a, b")
    second = cache.get_safe_columns("a, b")
    assert first == second == "[a],[b]"
    assert cache.loads == 1


def test_distinct_inputs_never_share_entries():
    cache = _CountingCache(SQLSERVER_DIALECT, maxsize=16)
    assert cache.get_safe_columns("a,b") == "[a],[b]"
    assert cache.get_safe_columns("a, b") == "[a],[b]"
    assert cache.loads == 2


def test_lru_bound():
    cache = ColumnCache(SQLSERVER_DIALECT, maxsize=2)
    for name in ("a", "b", "c", "d"):
        cache.get_safe_column(name)
    assert len(cache) == 2


def test_clear():
    cache = ColumnCache(SQLSERVER_DIALECT, maxsize=16)
    cache.get_safe_column("a")
    cache.clear()
    assert len(cache) == 0


def test_concurrent_lookups_agree():
    cache = ColumnCache(SQLSERVER_DIALECT, maxsize=64)
    results: list[str | None] = []

    def worker() -> None:
        for _ in range(50):
            results.append(cache.get_safe_columns("x.a, y.b As c"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert set(results) == {"[x].[a],[y].[b] As [c]"}
