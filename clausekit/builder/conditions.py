"""Predicate rendering for ``Where``, ``On`` and ``Having`` clauses.

Each :class:`SqlCondition` renders to a plain SQL string through
:meth:`~SqlCondition.to_sql`.  Parameterized conditions register their value
with the statement's :class:`~clausekit.params.ParameterManager` at render
time, so a condition must be rendered exactly once.  An empty string means
"no condition" and is dropped by the combinators.

:class:`ConditionFactory` maps an :class:`Operator` to the matching
condition class; the query builder never instantiates conditions directly.
"""
from __future__ import annotations

import io
from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum
from typing import Any, ClassVar, Protocol, TextIO, runtime_checkable

from clausekit.errors import ConditionError
from clausekit.params import ParameterManager


class Operator(str, Enum):
    """Comparison operators understood by :class:`ConditionFactory`."""

    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    GREATER = "greater"
    GREATER_EQUAL = "greater_equal"
    LESS = "less"
    LESS_EQUAL = "less_equal"
    CONTAINS = "contains"
    STARTS = "starts"
    ENDS = "ends"
    IN = "in"
    NOT_IN = "not_in"


class Boundary(str, Enum):
    """Which ends of a range are inclusive."""

    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"
    NEITHER = "neither"


@runtime_checkable
class SqlFragment(Protocol):
    """Anything that can write a SQL statement body into a text buffer."""

    def append_to(self, buffer: TextIO) -> None: ...


def render_fragment(fragment: SqlFragment) -> str:
    """Return the text ``fragment`` writes through ``append_to``."""
    buffer = io.StringIO()
    fragment.append_to(buffer)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Base and simple conditions
# ---------------------------------------------------------------------------


class SqlCondition(ABC):
    """A renderable predicate."""

    @abstractmethod
    def to_sql(self) -> str:
        """Return the predicate text, or ``""`` when there is nothing to test."""


class RawCondition(SqlCondition):
    """A predicate supplied verbatim by the caller."""

    def __init__(self, sql: str | None) -> None:
        self._sql = sql or ""

    def to_sql(self) -> str:
        return self._sql.strip()


class IsNullCondition(SqlCondition):
    def __init__(self, column: str) -> None:
        self._column = column

    def to_sql(self) -> str:
        return f"{self._column} Is Null"


class IsNotNullCondition(SqlCondition):
    def __init__(self, column: str) -> None:
        self._column = column

    def to_sql(self) -> str:
        return f"{self._column} Is Not Null"


class ExistsCondition(SqlCondition):
    keyword: ClassVar[str] = "Exists"

    def __init__(self, subquery: SqlFragment) -> None:
        self._subquery = subquery

    def to_sql(self) -> str:
        return f"{self.keyword} ({render_fragment(self._subquery)})"


class NotExistsCondition(ExistsCondition):
    keyword: ClassVar[str] = "Not Exists"


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


class AndCondition(SqlCondition):
    """Joins non-empty conditions with ``And``."""

    def __init__(self, *conditions: SqlCondition | None) -> None:
        self._conditions = [c for c in conditions if c is not None]

    def to_sql(self) -> str:
        parts = [sql for sql in (c.to_sql() for c in self._conditions) if sql]
        return " And ".join(parts)


class OrCondition(SqlCondition):
    """``(left Or right)``; collapses to the non-empty side when one is empty."""

    def __init__(self, left: SqlCondition | None, right: SqlCondition | None = None) -> None:
        self._left = left
        self._right = right

    def to_sql(self) -> str:
        left = self._left.to_sql() if self._left is not None else ""
        right = self._right.to_sql() if self._right is not None else ""
        if left and right:
            return f"({left} Or {right})"
        return left or right


# ---------------------------------------------------------------------------
# Column/value comparisons
# ---------------------------------------------------------------------------


class ComparisonCondition(SqlCondition):
    """``column <symbol> value`` where value is a parameter, literal or subquery.

    Args:
        parameters: Manager receiving the bound value.
        column: Already-quoted column (or expression) text.
        value: Value to compare with.  A :class:`SqlFragment` renders as a
            parenthesized subquery.
        parameterize: Bind ``value`` as a parameter (default) or write it
            into the SQL text verbatim.

    Raises:
        ConditionError: If ``column`` is blank.
    """

    symbol: ClassVar[str] = "="

    def __init__(
        self,
        parameters: ParameterManager,
        column: str | None,
        value: Any,
        parameterize: bool = True,
    ) -> None:
        if column is None or not column.strip():
            raise ConditionError("A condition requires a column.")
        self._parameters = parameters
        self._column = column
        self._value = value
        self._parameterize = parameterize

    def to_sql(self) -> str:
        if isinstance(self._value, SqlFragment):
            return self._format(f"({render_fragment(self._value)})")
        if self._parameterize:
            return self._format(self._parameters.add_value(self._bind_value()))
        return self._format(self._literal_value())

    def _format(self, operand: str) -> str:
        return f"{self._column}{self.symbol}{operand}"

    def _bind_value(self) -> Any:
        return self._value

    def _literal_value(self) -> str:
        return str(self._bind_value())


class EqualCondition(ComparisonCondition):
    symbol: ClassVar[str] = "="

    def to_sql(self) -> str:
        if self._value is None:
            return IsNullCondition(self._column).to_sql()
        return super().to_sql()


class NotEqualCondition(ComparisonCondition):
    symbol: ClassVar[str] = "<>"

    def to_sql(self) -> str:
        if self._value is None:
            return IsNotNullCondition(self._column).to_sql()
        return super().to_sql()


class GreaterCondition(ComparisonCondition):
    symbol: ClassVar[str] = ">"


class GreaterEqualCondition(ComparisonCondition):
    symbol: ClassVar[str] = ">="


class LessCondition(ComparisonCondition):
    symbol: ClassVar[str] = "<"


class LessEqualCondition(ComparisonCondition):
    symbol: ClassVar[str] = "<="


class ContainsCondition(ComparisonCondition):
    """``column Like '%value%'``."""

    pattern: ClassVar[str] = "%{}%"

    def _format(self, operand: str) -> str:
        return f"{self._column} Like {operand}"

    def _bind_value(self) -> Any:
        return self.pattern.format(self._value)

    def _literal_value(self) -> str:
        return f"'{self._bind_value()}'"


class StartsCondition(ContainsCondition):
    pattern: ClassVar[str] = "{}%"


class EndsCondition(ContainsCondition):
    pattern: ClassVar[str] = "%{}"


# ---------------------------------------------------------------------------
# Set membership and ranges
# ---------------------------------------------------------------------------


class InCondition(SqlCondition):
    """``column In (...)`` over a value collection or a subquery.

    ``None`` items are skipped; an empty collection renders nothing.  A
    single string is treated as one value, not as a sequence of characters.
    """

    keyword: ClassVar[str] = "In"

    def __init__(
        self,
        parameters: ParameterManager,
        column: str | None,
        value: Any,
        parameterize: bool = True,
    ) -> None:
        if column is None or not column.strip():
            raise ConditionError("A condition requires a column.")
        self._parameters = parameters
        self._column = column
        self._value = value
        self._parameterize = parameterize

    def to_sql(self) -> str:
        if isinstance(self._value, SqlFragment):
            return f"{self._column} {self.keyword} ({render_fragment(self._value)})"
        values = self._values()
        if not values:
            return ""
        if self._parameterize:
            items = [self._parameters.add_value(value) for value in values]
        else:
            items = [f"'{value}'" if isinstance(value, str) else str(value) for value in values]
        return f"{self._column} {self.keyword} ({','.join(items)})"

    def _values(self) -> list[Any]:
        if self._value is None:
            return []
        if isinstance(self._value, (str, bytes)) or not isinstance(self._value, Iterable):
            return [self._value]
        return [value for value in self._value if value is not None]


class NotInCondition(InCondition):
    keyword: ClassVar[str] = "Not In"


class SegmentCondition(SqlCondition):
    """A range test built from two comparisons joined by ``And``.

    A blank bound is left out, so ``(column, 1, None)`` is ``column>=@p``.
    """

    def __init__(
        self,
        parameters: ParameterManager,
        column: str,
        min_value: Any,
        max_value: Any,
        boundary: Boundary = Boundary.BOTH,
        parameterize: bool = True,
    ) -> None:
        self._parameters = parameters
        self._column = column
        self._min = min_value
        self._max = max_value
        self._boundary = boundary
        self._parameterize = parameterize

    def to_sql(self) -> str:
        return AndCondition(self._left(), self._right()).to_sql()

    def _left(self) -> SqlCondition | None:
        if _is_blank(self._min):
            return None
        if self._boundary in (Boundary.LEFT, Boundary.BOTH):
            return GreaterEqualCondition(self._parameters, self._column, self._min, self._parameterize)
        return GreaterCondition(self._parameters, self._column, self._min, self._parameterize)

    def _right(self) -> SqlCondition | None:
        if _is_blank(self._max):
            return None
        if self._boundary in (Boundary.RIGHT, Boundary.BOTH):
            return LessEqualCondition(self._parameters, self._column, self._max, self._parameterize)
        return LessCondition(self._parameters, self._column, self._max, self._parameterize)


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class ConditionFactory:
    """Creates conditions bound to one statement's parameter manager."""

    _conditions: ClassVar[dict[Operator, type[SqlCondition]]] = {
        Operator.EQUAL: EqualCondition,
        Operator.NOT_EQUAL: NotEqualCondition,
        Operator.GREATER: GreaterCondition,
        Operator.GREATER_EQUAL: GreaterEqualCondition,
        Operator.LESS: LessCondition,
        Operator.LESS_EQUAL: LessEqualCondition,
        Operator.CONTAINS: ContainsCondition,
        Operator.STARTS: StartsCondition,
        Operator.ENDS: EndsCondition,
        Operator.IN: InCondition,
        Operator.NOT_IN: NotInCondition,
    }

    def __init__(self, parameters: ParameterManager) -> None:
        self._parameters = parameters

    def create(
        self,
        column: str,
        value: Any,
        operator: Operator | str = Operator.EQUAL,
        parameterize: bool = True,
    ) -> SqlCondition:
        """Return the condition for ``column <operator> value``.

        Raises:
            ConditionError: If ``operator`` is not a known :class:`Operator`.
        """
        try:
            condition_cls = self._conditions[Operator(operator)]
        except (KeyError, ValueError) as exc:
            raise ConditionError(f"Unsupported operator: '{operator}'.") from exc
        return condition_cls(self._parameters, column, value, parameterize)

    def create_segment(
        self,
        column: str,
        min_value: Any,
        max_value: Any,
        boundary: Boundary = Boundary.BOTH,
        parameterize: bool = True,
    ) -> SqlCondition:
        return SegmentCondition(self._parameters, column, min_value, max_value, boundary, parameterize)
