"""clausekit builder layer: fluent clauses → parameterized SQL."""
from clausekit.builder.conditions import (
    Boundary,
    ConditionFactory,
    Operator,
    SqlCondition,
)
from clausekit.builder.exists import ExistsBuilder
from clausekit.builder.pager import Pager
from clausekit.builder.query_builder import QueryBuilder
from clausekit.builder.result import SqlBuilderResult

__all__ = [
    "Boundary",
    "ConditionFactory",
    "ExistsBuilder",
    "Operator",
    "Pager",
    "QueryBuilder",
    "SqlBuilderResult",
    "SqlCondition",
]
