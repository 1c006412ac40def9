"""Per-engine lexical rules.

A :class:`Dialect` is an immutable value object: identifier delimiters, the
bound-parameter prefix, and the handful of literals that differ between
engines.  One shared instance per engine lives in :mod:`clausekit.engines`
for the lifetime of the process.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_BRACKETS = re.compile(r"\[\[|\]\]|\[|\]")


class PagingStyle(str, Enum):
    """How an engine expresses ``skip`` / ``take``."""

    LIMIT_OFFSET = "limit_offset"
    OFFSET_FETCH = "offset_fetch"


@dataclass(frozen=True)
class Dialect:
    """Immutable lexical constants for one database engine.

    Attributes:
        name: Engine identifier (``'sqlserver'``, ``'postgresql'``, ...).
        opening_identifier: Delimiter written before a quoted identifier.
        closing_identifier: Delimiter written after a quoted identifier.
        parameter_prefix: Token the engine expects before a bound name.
        supports_select_as: Whether ``As`` may precede a *table* alias in a
            ``From (...)`` subquery.  Oracle rejects it.
        true_literal: Boolean ``true`` as a scalar select expression.
        false_literal: Boolean ``false`` as a scalar select expression.
        dual_table: Table a bare scalar ``Select`` must read from, if any.
        paging: Paging syntax used by ``skip`` / ``take``.
        paging_requires_order: Whether paging is only valid after an
            ``Order By``.  SqlServer rejects ``Offset`` without one.
    """

    name: str
    opening_identifier: str
    closing_identifier: str
    parameter_prefix: str
    supports_select_as: bool = True
    true_literal: str = "1"
    false_literal: str = "0"
    dual_table: str | None = None
    paging: PagingStyle = PagingStyle.LIMIT_OFFSET
    paging_requires_order: bool = False

    def safe_name(self, name: str | None) -> str:
        """Wrap ``name`` in this dialect's delimiters exactly once.

        Blank input yields ``""`` and ``*`` is returned untouched.  A name
        that already carries the delimiters is not wrapped again.

        Args:
            name: Raw identifier, optionally quoted already.

        Returns:
            The quoted identifier.
        """
        if name is None:
            return ""
        name = name.strip()
        if not name:
            return ""
        if name == "*":
            return name
        if name.startswith(self.opening_identifier):
            name = name[len(self.opening_identifier):]
        if name.endswith(self.closing_identifier):
            name = name[: -len(self.closing_identifier)]
        return f"{self.opening_identifier}{name}{self.closing_identifier}"

    def replace_sql(self, sql: str | None) -> str:
        """Rewrite SqlServer-style ``[name]`` quoting to this dialect.

        ``[[`` and ``]]`` are escapes for a literal bracket, which lets raw
        fragments such as PostgreSQL array subscripts survive the rewrite.

        Args:
            sql: Raw SQL fragment.

        Returns:
            The fragment with every delimiter rewritten.
        """
        if not sql:
            return ""

        def _swap(match: re.Match[str]) -> str:
            token = match.group(0)
            if token == "[[":
                return "["
            if token == "]]":
                return "]"
            if token == "[":
                return self.opening_identifier
            return self.closing_identifier

        return _BRACKETS.sub(_swap, sql)

    def param_token(self, name: str) -> str:
        """Return ``name`` with this dialect's parameter prefix applied once."""
        name = name.strip()
        if name.startswith(self.parameter_prefix):
            return name
        return f"{self.parameter_prefix}{name}"
