"""Memoized column-list quoting.

Building a statement quotes the same column lists over and over, so each
engine keeps one process-wide :class:`ColumnCache`.  Entries are keyed by the
raw input string itself, which makes a lookup exact: two different inputs
can never share a cached result.
"""
from __future__ import annotations

import threading
from collections.abc import Callable, Hashable

from cachetools import LRUCache

from clausekit.dialect import Dialect
from clausekit.names import ColumnItem
from clausekit.settings import get_settings


class ColumnCache:
    """Thread-safe cache of dialect-quoted column text.

    Args:
        dialect: Dialect whose delimiters are applied.
        maxsize: Maximum number of cached entries.  Defaults to
            ``ClauseKitSettings.column_cache_size``.

    Example::

        cache = ColumnCache(SQLSERVER_DIALECT)
        cache.get_safe_columns("a, t.b As c")   # '[a],[t].[b] As [c]'
    """

    def __init__(self, dialect: Dialect, maxsize: int | None = None) -> None:
        self._dialect = dialect
        self._cache: LRUCache = LRUCache(maxsize=maxsize or get_settings().column_cache_size)
        self._lock = threading.RLock()

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def get_safe_columns(self, columns: str | None) -> str | None:
        """Quote every item of a comma-separated column list.

        Args:
            columns: Raw list such as ``"id, u.name As userName"``.

        Returns:
            The quoted list joined by ``,``, or ``None`` for blank input.
        """
        if columns is None or not columns.strip():
            return None
        return self._get_cached(("columns", columns), lambda: self._normalize_columns(columns))

    def get_safe_column(self, column: str | None) -> str | None:
        """Quote a single column reference; ``None`` for blank input."""
        if column is None or not column.strip():
            return None
        return self._get_cached(("column", column), lambda: self._normalize_column(column))

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def _get_cached(self, key: Hashable, loader: Callable[[], str]) -> str:
        with self._lock:
            if key in self._cache:
                return self._cache[key]
            result = loader()
            self._cache[key] = result
            return result

    def _normalize_columns(self, columns: str) -> str:
        items = (item for item in columns.split(",") if item.strip())
        return ",".join(self._normalize_column(item) for item in items)

    def _normalize_column(self, column: str) -> str:
        return ColumnItem.parse(self._dialect, column).to_sql()
