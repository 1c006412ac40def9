"""The fluent, cross-dialect query builder.

``QueryBuilder`` accumulates clause fragments and renders them into one SQL
statement.  Everything engine-specific comes from the injected
:class:`~clausekit.engines.registry.EngineProfile`: identifier quoting and
paging syntax from its dialect, quoted column text from its shared column
cache, and a fresh parameter manager per statement.

Rendering order
---------------
start (CTEs) → insert → update/set → select → from → join → where →
group by/having → order by → end (paging), one clause per line.

With set operations (``union`` and friends) every branch body is wrapped in
parentheses and order by / paging apply to the combined result.

Sub-builders
------------
:meth:`QueryBuilder.new` returns a blank builder sharing this builder's
parameter manager, for subqueries whose parameters must land in the outer
statement.  :meth:`QueryBuilder.clone` copies every clause *and* the
parameter manager, for reusing a partially built statement as a template.

A nested builder that owns a different parameter manager (for example one
made with :meth:`QueryBuilder.create`) is rendered when it is passed in and
its parameters move into this statement's manager.  Names that are already
taken are replaced by freshly generated ones, both in the manager and in the
rendered text.  Later changes to that builder are not seen.

Usage::

    builder = QueryBuilder.create("sqlserver")
    result = (
        builder.select("a.Id, a.Name As UserName")
        .from_("dbo.Users a")
        .where("a.Age", 18, Operator.GREATER_EQUAL)
        .order_by("a.Name desc")
        .build()
    )
"""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, TextIO, Union

from clausekit.builder.conditions import (
    AndCondition,
    Boundary,
    ConditionFactory,
    ExistsCondition,
    NotExistsCondition,
    Operator,
    OrCondition,
    RawCondition,
    SqlCondition,
    SqlFragment,
    render_fragment,
)
from clausekit.builder.pager import Pager
from clausekit.builder.result import SqlBuilderResult
from clausekit.column_cache import ColumnCache
from clausekit.dialect import Dialect, PagingStyle
from clausekit.engines.registry import EngineProfile, EngineRegistry
from clausekit.log import get_logger
from clausekit.names import TableItem
from clausekit.params import ParameterManager, SqlParam
from clausekit.settings import get_settings
from clausekit.types import DbType, ParameterDirection

logger = get_logger(__name__)

#: A nested builder (or any other SQL fragment such as an exists check), or a
#: callable that fills a fresh sub-builder.
SubQuery = Union[SqlFragment, Callable[["QueryBuilder"], Any]]

@dataclass(frozen=True)
class RenderedFragment:
    """SQL text captured from a builder whose parameters were adopted."""

    sql: str

    def append_to(self, buffer: TextIO) -> None:
        buffer.write(self.sql)


_JOIN = "Join"
_LEFT_JOIN = "Left Join"
_RIGHT_JOIN = "Right Join"


@dataclass
class _JoinItem:
    head: str
    conditions: list[str] = field(default_factory=list)

    def copy(self) -> _JoinItem:
        return _JoinItem(self.head, list(self.conditions))

    def to_sql(self) -> str:
        if not self.conditions:
            return self.head
        return f"{self.head} On {' And '.join(self.conditions)}"


class QueryBuilder:
    """Accumulates clauses and renders one dialect-correct statement.

    Instances are not thread-safe: build one statement per call chain and use
    :meth:`clone` or :meth:`new` to reuse work elsewhere.

    Args:
        profile: Engine bundle (dialect, column cache, parameter factory).
        parameter_manager: Manager to share.  A fresh one is created from
            ``profile`` when omitted.
    """

    def __init__(
        self,
        profile: EngineProfile,
        parameter_manager: ParameterManager | None = None,
    ) -> None:
        self._profile = profile
        self._params = parameter_manager or profile.create_parameter_manager()
        self._conditions = ConditionFactory(self._params)
        self._ctes: list[tuple[str, str]] = []
        self._start: list[str] = []
        self._insert_table = ""
        self._insert_columns: list[str] = []
        self._insert_sql: list[str] = []
        self._values: list[str] = []
        self._values_sql: list[str] = []
        self._update_table = ""
        self._sets_assignments: list[str] = []
        self._select: list[str] = []
        self._from: list[str] = []
        self._joins: list[_JoinItem] = []
        self._where: list[str] = []
        self._group_by: list[str] = []
        self._having: list[str] = []
        self._order_by: list[str] = []
        self._end: list[str] = []
        self._offset_param: str | None = None
        self._limit_param: str | None = None
        self._set_operations: list[tuple[str, QueryBuilder | str]] = []

    @classmethod
    def create(cls, engine: str | Enum | None = None) -> QueryBuilder:
        """Return a builder for ``engine`` (default: ``settings.default_engine``).

        Raises:
            EngineNotSupportedError: If ``engine`` is not registered.
        """
        if engine is None:
            engine = get_settings().default_engine
        return cls(EngineRegistry.get(engine))

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    @property
    def profile(self) -> EngineProfile:
        return self._profile

    @property
    def dialect(self) -> Dialect:
        return self._profile.dialect

    @property
    def column_cache(self) -> ColumnCache:
        return self._profile.column_cache

    @property
    def parameter_manager(self) -> ParameterManager:
        return self._params

    @property
    def condition_factory(self) -> ConditionFactory:
        return self._conditions

    def new(self) -> QueryBuilder:
        """Return a blank builder sharing this builder's parameter manager."""
        return type(self)(self._profile, self._params)

    def clone(self) -> QueryBuilder:
        """Return a copy of every clause with an isolated parameter manager."""
        other = type(self)(self._profile, self._params.clone())
        other._ctes = list(self._ctes)
        other._start = list(self._start)
        other._insert_table = self._insert_table
        other._insert_columns = list(self._insert_columns)
        other._insert_sql = list(self._insert_sql)
        other._values = list(self._values)
        other._values_sql = list(self._values_sql)
        other._update_table = self._update_table
        other._sets_assignments = list(self._sets_assignments)
        other._select = list(self._select)
        other._from = list(self._from)
        other._joins = [join.copy() for join in self._joins]
        other._where = list(self._where)
        other._group_by = list(self._group_by)
        other._having = list(self._having)
        other._order_by = list(self._order_by)
        other._end = list(self._end)
        other._offset_param = self._offset_param
        other._limit_param = self._limit_param
        other._set_operations = list(self._set_operations)
        return other

    def clear(self) -> QueryBuilder:
        """Drop every clause and every parameter."""
        self._params.clear()
        self.clear_start()
        self.clear_insert()
        self.clear_set()
        self.clear_select()
        self.clear_from()
        self.clear_join()
        self.clear_where()
        self.clear_group_by()
        self.clear_order_by()
        self.clear_end()
        self.clear_sets()
        return self

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _raw(self, sql: str, raw: bool) -> str:
        return sql if raw else self.dialect.replace_sql(sql)

    def _sub_builder(self, value: SubQuery | None) -> SqlFragment | None:
        if value is None:
            return None
        if isinstance(value, SqlFragment):
            return self._adopt(value)
        builder = self.new()
        value(builder)
        return builder

    def _owns(self, fragment: object) -> bool:
        manager = getattr(fragment, "parameter_manager", None)
        return manager is None or manager is self._params

    def _adopt(self, fragment: SqlFragment) -> SqlFragment:
        if self._owns(fragment):
            return fragment
        result = fragment.build()  # type: ignore[attr-defined]
        return RenderedFragment(self._adopt_params(result.sql, result.params, result.dynamic_params))

    def _adopt_params(
        self,
        sql: str,
        params: Iterable[SqlParam],
        dynamic_params: Iterable[Any],
    ) -> str:
        """Move foreign parameters into this manager and return ``sql`` renamed to match."""
        renames: dict[str, str] = {}
        for param in params:
            name = param.name
            if not _references(sql, name):
                continue
            if self._params.contains(name):
                name = self._params.generate_name()
                renames[param.name] = name
            self._params.add(
                name,
                param.value,
                param.db_type,
                param.direction,
                param.size,
                param.precision,
                param.scale,
            )
        for bag in dynamic_params:
            self._params.add_dynamic_params(bag)
        return _rename_params(sql, renames)

    def _subquery_item(self, builder: SqlFragment, alias: str | None) -> str:
        sql = f"({render_fragment(builder)})"
        if not alias or not alias.strip():
            return sql
        keyword = " As " if self.dialect.supports_select_as else " "
        return f"{sql}{keyword}{self.dialect.safe_name(alias)}"

    def _safe_column(self, column: str) -> str:
        return self.column_cache.get_safe_column(column) or ""

    @staticmethod
    def _append_item(fragments: list[str], item: str) -> None:
        if fragments:
            fragments.append(",")
        fragments.append(item)

    # ------------------------------------------------------------------
    # Start clause (CTEs)
    # ------------------------------------------------------------------

    def cte(self, name: str, builder: SubQuery) -> QueryBuilder:
        """Add ``name As (builder)`` to the statement's ``With`` list."""
        sub = self._sub_builder(builder)
        if not name or not name.strip() or sub is None:
            return self
        self._ctes.append((self._safe_column(name), render_fragment(sub)))
        return self

    def append_start(self, sql: str, raw: bool = False) -> QueryBuilder:
        if sql and sql.strip():
            self._start.append(self._raw(sql, raw))
        return self

    def clear_cte(self) -> QueryBuilder:
        self._ctes.clear()
        return self

    def clear_start(self) -> QueryBuilder:
        self._ctes.clear()
        self._start.clear()
        return self

    def _start_sql(self) -> str:
        parts: list[str] = []
        if self._ctes:
            ctes = ",\n".join(f"{name}\nAs ({body})" for name, body in self._ctes)
            parts.append(f"With {ctes}")
        parts.extend(self._start)
        return "\n".join(parts)

    # ------------------------------------------------------------------
    # Insert clause
    # ------------------------------------------------------------------

    def insert(self, columns: str, table: str | None = None) -> QueryBuilder:
        """Start (or extend) ``Insert Into table(columns)``.

        ``table`` is required on the first call; later calls add columns.
        """
        if not self._insert_table:
            if not table or not table.strip():
                return self
            self._insert_table = TableItem.parse(self.dialect, table).to_sql()
        safe = self.column_cache.get_safe_columns(columns)
        if safe:
            self._insert_columns.append(safe)
        return self

    def values(self, *values: Any) -> QueryBuilder:
        """Add one parameterized row to the ``Values`` list."""
        if not values:
            return self
        names = [self._params.add_value(value) for value in values]
        self._values.append(f"({','.join(names)})")
        return self

    def append_insert(self, sql: str, raw: bool = False) -> QueryBuilder:
        if sql and sql.strip():
            self._insert_sql.append(self._raw(sql, raw))
        return self

    def append_values(self, sql: str, raw: bool = False) -> QueryBuilder:
        if sql and sql.strip():
            self._values_sql.append(self._raw(sql, raw))
        return self

    def clear_insert(self) -> QueryBuilder:
        self._insert_table = ""
        self._insert_columns.clear()
        self._insert_sql.clear()
        self._values.clear()
        self._values_sql.clear()
        return self

    def _insert_clause(self) -> str:
        if not self._insert_table and not self._insert_sql:
            return ""
        target = self._insert_table
        if self._insert_columns:
            target += f"({','.join(self._insert_columns)})"
        sql = f"Insert Into {target}{''.join(self._insert_sql)}"
        if self._values or self._values_sql:
            sql += f"\nValues{','.join(self._values)}{''.join(self._values_sql)}"
        return sql

    # ------------------------------------------------------------------
    # Update / set clause
    # ------------------------------------------------------------------

    def update(self, table: str) -> QueryBuilder:
        """Target ``table`` with an ``Update`` statement."""
        if table and table.strip():
            self._update_table = TableItem.parse(self.dialect, table).to_sql()
        return self

    def set(self, column: str, value: Any, parameterize: bool = True) -> QueryBuilder:
        """Add ``column=value`` to the ``Set`` assignment list.

        A nested builder (or callable) assigns a scalar subquery.
        """
        column = self._safe_column(column)
        if not column:
            return self
        if isinstance(value, SqlFragment) or callable(value):
            operand = f"({render_fragment(self._sub_builder(value))})"
        elif parameterize:
            operand = self._params.add_value(value)
        else:
            operand = "Null" if value is None else str(value)
        self._sets_assignments.append(f"{column}={operand}")
        return self

    def append_set(self, sql: str, raw: bool = False) -> QueryBuilder:
        if sql and sql.strip():
            self._sets_assignments.append(self._raw(sql, raw))
        return self

    def clear_set(self) -> QueryBuilder:
        self._update_table = ""
        self._sets_assignments.clear()
        return self

    def _update_clause(self) -> str:
        lines: list[str] = []
        if self._update_table:
            lines.append(f"Update {self._update_table}")
        if self._sets_assignments:
            lines.append(f"Set {','.join(self._sets_assignments)}")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Select clause
    # ------------------------------------------------------------------

    def select(self, columns: str | SubQuery = "*", alias: str | None = None) -> QueryBuilder:
        """Add columns (or a scalar subquery named ``alias``) to the select list.

        ``"*"`` replaces whatever was selected before.
        """
        if isinstance(columns, str):
            if not columns.strip():
                return self
            if columns.strip() == "*":
                self._select = ["*"]
                return self
            safe = self.column_cache.get_safe_columns(columns)
            if safe:
                self._append_item(self._select, safe)
            return self
        sub = self._sub_builder(columns)
        if sub is not None:
            self._append_item(self._select, self._subquery_item(sub, alias))
        return self

    def append_select(self, sql: str | SubQuery, raw: bool = False) -> QueryBuilder:
        """Append raw text (or a rendered builder) to the select list as-is."""
        if isinstance(sql, str):
            if sql.strip():
                self._select.append(self._raw(sql, raw))
            return self
        sub = self._sub_builder(sql)
        if sub is not None:
            self._select.append(render_fragment(sub))
        return self

    def clear_select(self) -> QueryBuilder:
        self._select.clear()
        return self

    # ------------------------------------------------------------------
    # From clause
    # ------------------------------------------------------------------

    def from_(self, table: str | SubQuery, alias: str | None = None) -> QueryBuilder:
        """Set the ``From`` source: ``"schema.table alias"`` or a subquery."""
        if isinstance(table, str):
            item = TableItem.parse(self.dialect, table)
            if item.is_valid:
                self._from.append(item.to_sql())
            return self
        sub = self._sub_builder(table)
        if sub is not None:
            self._from.append(self._subquery_item(sub, alias))
        return self

    def append_from(self, sql: str, raw: bool = False) -> QueryBuilder:
        if sql and sql.strip():
            self._from.append(self._raw(sql, raw))
        return self

    def clear_from(self) -> QueryBuilder:
        self._from.clear()
        return self

    # ------------------------------------------------------------------
    # Join clause
    # ------------------------------------------------------------------

    def _join(self, keyword: str, table: str | SubQuery, alias: str | None) -> QueryBuilder:
        if isinstance(table, str):
            item = TableItem.parse(self.dialect, table)
            if item.is_valid:
                self._joins.append(_JoinItem(f"{keyword} {item.to_sql()}"))
            return self
        sub = self._sub_builder(table)
        if sub is not None:
            self._joins.append(_JoinItem(f"{keyword} {self._subquery_item(sub, alias)}"))
        return self

    def join(self, table: str | SubQuery, alias: str | None = None) -> QueryBuilder:
        return self._join(_JOIN, table, alias)

    def left_join(self, table: str | SubQuery, alias: str | None = None) -> QueryBuilder:
        return self._join(_LEFT_JOIN, table, alias)

    def right_join(self, table: str | SubQuery, alias: str | None = None) -> QueryBuilder:
        return self._join(_RIGHT_JOIN, table, alias)

    def on(
        self,
        column: str,
        value: Any,
        operator: Operator = Operator.EQUAL,
        parameterize: bool = False,
    ) -> QueryBuilder:
        """Add a condition to the most recent join.

        Unless ``parameterize`` is set, a string ``value`` is a column of the
        other table and gets quoted; other values are written literally.
        Without a preceding join the call has no effect.
        """
        if not self._joins:
            return self
        if isinstance(value, str) and not parameterize:
            value = self._safe_column(value)
        condition = self._conditions.create(self._safe_column(column), value, operator, parameterize)
        return self.on_condition(condition)

    def on_condition(self, condition: SqlCondition) -> QueryBuilder:
        if not self._joins:
            return self
        sql = condition.to_sql()
        if sql:
            self._joins[-1].conditions.append(sql)
        return self

    def _append_join(self, keyword: str, sql: str, raw: bool) -> QueryBuilder:
        if sql and sql.strip():
            self._joins.append(_JoinItem(f"{keyword} {self._raw(sql, raw)}"))
        return self

    def append_join(self, sql: str, raw: bool = False) -> QueryBuilder:
        return self._append_join(_JOIN, sql, raw)

    def append_left_join(self, sql: str, raw: bool = False) -> QueryBuilder:
        return self._append_join(_LEFT_JOIN, sql, raw)

    def append_right_join(self, sql: str, raw: bool = False) -> QueryBuilder:
        return self._append_join(_RIGHT_JOIN, sql, raw)

    def append_on(self, sql: str, raw: bool = False) -> QueryBuilder:
        if not sql or not sql.strip():
            return self
        return self.on_condition(RawCondition(self._raw(sql, raw)))

    def clear_join(self) -> QueryBuilder:
        self._joins.clear()
        return self

    # ------------------------------------------------------------------
    # Where clause
    # ------------------------------------------------------------------

    def where_condition(self, condition: SqlCondition | None) -> QueryBuilder:
        """``And`` a prebuilt condition onto the where clause."""
        if condition is None:
            return self
        sql = condition.to_sql()
        if sql:
            self._where.append(sql)
        return self

    def or_condition(self, condition: SqlCondition | None) -> QueryBuilder:
        """``Or`` a condition with everything in the where clause so far."""
        if condition is None:
            return self
        if not self._where:
            return self.where_condition(condition)
        existing = RawCondition(" And ".join(self._where))
        sql = OrCondition(existing, condition).to_sql()
        self._where = [sql] if sql else []
        return self

    def where(
        self,
        column: str,
        value: Any,
        operator: Operator = Operator.EQUAL,
    ) -> QueryBuilder:
        """``And`` ``column <operator> value`` onto the where clause.

        ``value`` is bound as a parameter; a nested builder or callable is
        rendered as a subquery.  ``None`` with equal / not-equal renders
        ``Is Null`` / ``Is Not Null``.
        """
        if isinstance(value, SqlFragment) or callable(value):
            value = self._sub_builder(value)
        return self.where_condition(
            self._conditions.create(self._safe_column(column), value, operator)
        )

    def or_where(
        self,
        column: str,
        value: Any,
        operator: Operator = Operator.EQUAL,
    ) -> QueryBuilder:
        if isinstance(value, SqlFragment) or callable(value):
            value = self._sub_builder(value)
        return self.or_condition(
            self._conditions.create(self._safe_column(column), value, operator)
        )

    def in_(self, column: str, values: Iterable[Any] | SubQuery) -> QueryBuilder:
        return self.where(column, values, Operator.IN)

    def not_in(self, column: str, values: Iterable[Any] | SubQuery) -> QueryBuilder:
        return self.where(column, values, Operator.NOT_IN)

    def is_null(self, column: str) -> QueryBuilder:
        return self.where(column, None, Operator.EQUAL)

    def is_not_null(self, column: str) -> QueryBuilder:
        return self.where(column, None, Operator.NOT_EQUAL)

    def is_empty(self, column: str) -> QueryBuilder:
        """``(column Is Null Or column='')``."""
        column = self._safe_column(column)
        return self.where_condition(
            OrCondition(
                self._conditions.create(column, None, Operator.EQUAL),
                self._conditions.create(column, "''", Operator.EQUAL, parameterize=False),
            )
        )

    def is_not_empty(self, column: str) -> QueryBuilder:
        """``column Is Not Null And column<>''``."""
        column = self._safe_column(column)
        return self.where_condition(
            AndCondition(
                self._conditions.create(column, None, Operator.NOT_EQUAL),
                self._conditions.create(column, "''", Operator.NOT_EQUAL, parameterize=False),
            )
        )

    def between(
        self,
        column: str,
        min_value: Any,
        max_value: Any,
        boundary: Boundary = Boundary.BOTH,
    ) -> QueryBuilder:
        """Range test; swapped bounds are put back in order, blank bounds dropped."""
        if min_value is not None and max_value is not None and min_value > max_value:
            min_value, max_value = max_value, min_value
        return self.where_condition(
            self._conditions.create_segment(self._safe_column(column), min_value, max_value, boundary)
        )

    def between_dates(
        self,
        column: str,
        min_value: date | None,
        max_value: date | None,
        include_time: bool = True,
        boundary: Boundary | None = None,
    ) -> QueryBuilder:
        """Date range test.

        With ``include_time=False`` both bounds are truncated to the day and
        the upper bound moves to the start of the following day, so the
        default boundary becomes :attr:`Boundary.LEFT` (``>= min And < max``).
        """
        if min_value is not None and max_value is not None and min_value > max_value:
            min_value, max_value = max_value, min_value
        if not include_time:
            min_value = _start_of_day(min_value)
            max_value = _start_of_day(max_value)
            if max_value is not None:
                max_value = max_value + timedelta(days=1)
        if boundary is None:
            boundary = Boundary.BOTH if include_time else Boundary.LEFT
        return self.where_condition(
            self._conditions.create_segment(self._safe_column(column), min_value, max_value, boundary)
        )

    def exists(self, builder: SubQuery) -> QueryBuilder:
        sub = self._sub_builder(builder)
        if sub is None:
            return self
        return self.where_condition(ExistsCondition(sub))

    def not_exists(self, builder: SubQuery) -> QueryBuilder:
        sub = self._sub_builder(builder)
        if sub is None:
            return self
        return self.where_condition(NotExistsCondition(sub))

    def append_where(self, sql: str, raw: bool = False) -> QueryBuilder:
        if not sql or not sql.strip():
            return self
        return self.where_condition(RawCondition(self._raw(sql, raw)))

    def clear_where(self) -> QueryBuilder:
        self._where.clear()
        return self

    # ------------------------------------------------------------------
    # Group by / having
    # ------------------------------------------------------------------

    def group_by(self, columns: str) -> QueryBuilder:
        safe = self.column_cache.get_safe_columns(columns)
        if safe:
            self._append_item(self._group_by, safe)
        return self

    def having(
        self,
        expression: str,
        value: Any,
        operator: Operator = Operator.EQUAL,
        parameterize: bool = True,
    ) -> QueryBuilder:
        """``And`` an aggregate test; ``expression`` is written verbatim."""
        sql = self._conditions.create(expression, value, operator, parameterize).to_sql()
        if sql:
            self._having.append(sql)
        return self

    def append_group_by(self, sql: str, raw: bool = False) -> QueryBuilder:
        if sql and sql.strip():
            self._group_by.append(self._raw(sql, raw))
        return self

    def append_having(self, sql: str, raw: bool = False) -> QueryBuilder:
        if sql and sql.strip():
            self._having.append(self._raw(sql, raw))
        return self

    def clear_group_by(self) -> QueryBuilder:
        self._group_by.clear()
        self._having.clear()
        return self

    def _group_by_clause(self) -> str:
        if not self._group_by:
            return ""
        sql = f"Group By {''.join(self._group_by)}"
        if self._having:
            sql += f" Having {' And '.join(self._having)}"
        return sql

    # ------------------------------------------------------------------
    # Order by
    # ------------------------------------------------------------------

    def order_by(self, order: str) -> QueryBuilder:
        """Add sort keys, e.g. ``"a.Name desc, Id"``."""
        if not order or not order.strip():
            return self
        items = [self._order_item(item) for item in order.split(",") if item.strip()]
        if items:
            self._append_item(self._order_by, ",".join(items))
        return self

    def _order_item(self, item: str) -> str:
        words = item.split()
        direction = words[-1].lower() if len(words) > 1 else ""
        if direction in ("asc", "desc"):
            column = self._safe_column(" ".join(words[:-1]))
            return f"{column} Desc" if direction == "desc" else column
        return self._safe_column(item)

    def append_order_by(self, sql: str, raw: bool = False) -> QueryBuilder:
        if sql and sql.strip():
            self._order_by.append(self._raw(sql, raw))
        return self

    def clear_order_by(self) -> QueryBuilder:
        self._order_by.clear()
        return self

    # ------------------------------------------------------------------
    # End clause (paging)
    # ------------------------------------------------------------------

    def skip(self, count: int) -> QueryBuilder:
        self._params.add(self._get_offset_param(), count)
        return self

    def take(self, count: int) -> QueryBuilder:
        """Limit the row count; the offset defaults to ``0`` until :meth:`skip` sets it."""
        self._params.add(self._get_limit_param(), count)
        self._get_offset_param()
        return self

    def page(self, pager: Pager | None) -> QueryBuilder:
        if pager is None:
            return self
        return self.skip(pager.skip_count).take(pager.page_size)

    def _get_offset_param(self) -> str:
        if self._offset_param is None:
            self._offset_param = self._params.add_value(0)
        return self._offset_param

    def _get_limit_param(self) -> str:
        if self._limit_param is None:
            self._limit_param = self._params.generate_name()
        return self._limit_param

    def append_end(self, sql: str, raw: bool = False) -> QueryBuilder:
        if sql and sql.strip():
            self._end.append(self._raw(sql, raw))
        return self

    def clear_page(self) -> QueryBuilder:
        """Drop paging along with the parameters it registered."""
        for name in (self._offset_param, self._limit_param):
            if name is not None:
                self._params.remove(name)
        self._offset_param = None
        self._limit_param = None
        return self

    def clear_end(self) -> QueryBuilder:
        self._end.clear()
        return self.clear_page()

    def _end_clause(self) -> str:
        parts: list[str] = []
        if self._limit_param is not None:
            if self.dialect.paging is PagingStyle.OFFSET_FETCH:
                parts.append(f"Offset {self._offset_param} Rows Fetch Next {self._limit_param} Rows Only")
            else:
                parts.append(f"Limit {self._limit_param} OFFSET {self._offset_param}")
        parts.extend(self._end)
        return "".join(parts)

    # ------------------------------------------------------------------
    # Set operations
    # ------------------------------------------------------------------

    def _set_operation(self, operator: str, builders: tuple[QueryBuilder, ...]) -> QueryBuilder:
        for builder in builders:
            if builder is None:
                continue
            if self._owns(builder):
                self._set_operations.append((operator, builder))
                continue
            body = _join_lines(builder._body_clauses())
            body = self._adopt_params(body, builder.get_params(), builder.get_dynamic_params())
            self._set_operations.append((operator, body))
        return self

    def union(self, *builders: QueryBuilder) -> QueryBuilder:
        return self._set_operation("Union", builders)

    def union_all(self, *builders: QueryBuilder) -> QueryBuilder:
        return self._set_operation("Union All", builders)

    def intersect(self, *builders: QueryBuilder) -> QueryBuilder:
        return self._set_operation("Intersect", builders)

    def except_(self, *builders: QueryBuilder) -> QueryBuilder:
        return self._set_operation("Except", builders)

    def clear_sets(self) -> QueryBuilder:
        self._set_operations.clear()
        return self

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def add_param(
        self,
        name: str,
        value: Any = None,
        db_type: DbType | None = None,
        direction: ParameterDirection | None = None,
        size: int | None = None,
        precision: int | None = None,
        scale: int | None = None,
    ) -> QueryBuilder:
        self._params.add(name, value, db_type, direction, size, precision, scale)
        return self

    def add_dynamic_params(self, params: Any) -> QueryBuilder:
        self._params.add_dynamic_params(params)
        return self

    def get_param(self, name: str) -> SqlParam | None:
        return self._params.get_param(name)

    def get_params(self) -> tuple[SqlParam, ...]:
        return self._params.get_params()

    def get_dynamic_params(self) -> tuple[Any, ...]:
        return self._params.get_dynamic_params()

    def clear_params(self) -> QueryBuilder:
        self._params.clear()
        return self

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _body_clauses(self) -> list[str]:
        return [
            "Select " + "".join(self._select) if self._select else "",
            "From " + "".join(self._from) if self._from else "",
            "\n".join(join.to_sql() for join in self._joins),
            "Where " + " And ".join(self._where) if self._where else "",
            self._group_by_clause(),
        ]

    def _order_by_clause(self) -> str:
        if self._order_by:
            return "Order By " + "".join(self._order_by)
        if self._limit_param is not None and self.dialect.paging_requires_order:
            return "Order By (Select 0)"
        return ""

    def _tail_clauses(self) -> list[str]:
        return [
            self._order_by_clause(),
            self._end_clause(),
        ]

    def _statement_sql(self) -> str:
        clauses = [
            self._start_sql(),
            self._insert_clause(),
            self._update_clause(),
            *self._body_clauses(),
            *self._tail_clauses(),
        ]
        return _join_lines(clauses)

    def _set_sql(self) -> str:
        lines: list[str] = []
        start = self._start_sql()
        if start:
            lines.append(start)
        lines.append("(")
        lines.extend(clause for clause in self._body_clauses() if clause)
        lines.append(")")
        for operator, branch in self._set_operations:
            lines.append(operator)
            lines.append("(")
            if isinstance(branch, str):
                lines.append(branch)
            else:
                lines.extend(clause for clause in branch._body_clauses() if clause)
            lines.append(")")
        lines.extend(clause for clause in self._tail_clauses() if clause)
        return "\n".join(lines)

    def get_sql(self) -> str:
        """Render the statement text without building a result."""
        if self._set_operations:
            return self._set_sql()
        return self._statement_sql()

    def append_to(self, buffer: TextIO) -> None:
        """Write the statement text into ``buffer`` (e.g. an ``io.StringIO``)."""
        buffer.write(self.get_sql())

    def build(self) -> SqlBuilderResult:
        """Render the statement together with every parameter it needs."""
        sql = self.get_sql()
        params = self._params.get_params()
        dynamic = self._params.get_dynamic_params()
        if get_settings().log_sql:
            logger.debug("sql_built", engine=self.dialect.name, sql=sql, params=len(params))
        return SqlBuilderResult(
            sql=sql,
            params=params,
            dynamic_params=dynamic,
            engine=self.dialect.name,
            parameter_prefix=self._params.prefix,
        )

    def __str__(self) -> str:
        return self.get_sql()


def _join_lines(clauses: Iterable[str]) -> str:
    return "\n".join(clause for clause in clauses if clause)


def _token_pattern(names: Iterable[str]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(name) for name in sorted(names, key=len, reverse=True))
    return re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)")


def _references(sql: str, name: str) -> bool:
    return _token_pattern([name]).search(sql) is not None


def _rename_params(sql: str, renames: dict[str, str]) -> str:
    """Replace every parameter token in one pass so renamed names never chain."""
    if not renames:
        return sql
    return _token_pattern(renames).sub(lambda match: renames[match.group(0)], sql)


def _start_of_day(value: date | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return datetime.combine(value.date(), time.min, tzinfo=value.tzinfo)
    return value

