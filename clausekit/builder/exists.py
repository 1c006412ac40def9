"""Boolean ``EXISTS`` scalar built from a query builder."""

from __future__ import annotations

from typing import TextIO

from clausekit.builder.query_builder import QueryBuilder
from clausekit.builder.result import SqlBuilderResult
from clausekit.errors import InvalidArgumentError
from clausekit.params import ParameterManager


class ExistsBuilder:
    """Wraps a select statement into a one-row, one-column boolean query.

    The wrapped builder is never modified: rendering works on a clone whose
    select list is replaced by ``1`` and whose ordering and paging are
    dropped.  The boolean literals come from the builder's dialect, so
    SqlServer selects ``Cast(1 As Bit)`` while PostgreSQL selects ``True``.

    Args:
        builder: A builder carrying a complete select body.

    Raises:
        InvalidArgumentError: If ``builder`` is ``None``.
    """

    def __init__(self, builder: QueryBuilder) -> None:
        if builder is None:
            raise InvalidArgumentError("An exists check requires a query builder.", "builder")
        self._builder = builder

    @property
    def parameter_manager(self) -> ParameterManager:
        return self._builder.parameter_manager

    def _inner(self) -> QueryBuilder:
        inner = self._builder.clone()
        inner.clear_select().append_select("1", raw=True)
        inner.clear_order_by().clear_page()
        return inner

    @staticmethod
    def _wrap(inner: QueryBuilder) -> str:
        dialect = inner.dialect
        sql = (
            "Select Case\n"
            f"  When Exists (\n{inner.get_sql()}\n)\n"
            f"  Then {dialect.true_literal}\n"
            f"  Else {dialect.false_literal} \n"
            "End"
        )
        if dialect.dual_table:
            sql += f" From {dialect.dual_table}"
        return sql

    def get_sql(self) -> str:
        return self._wrap(self._inner())

    def append_to(self, buffer: TextIO) -> None:
        buffer.write(self.get_sql())

    def build(self) -> SqlBuilderResult:
        """Render the exists query with the parameters of the wrapped statement."""
        inner = self._inner()
        result = inner.build()
        return SqlBuilderResult(
            sql=self._wrap(inner),
            params=result.params,
            dynamic_params=result.dynamic_params,
            engine=result.engine,
            parameter_prefix=result.parameter_prefix,
        )
