"""Parsing and quoting of ``[prefix.]name [As] alias`` identifiers.

:class:`NameItem` splits raw identifier text into its parts;
:class:`ColumnItem` and :class:`TableItem` render those parts with a
dialect's delimiters.  Parsing is best-effort and total: any non-null text
produces *some* item, never an exception.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from clausekit.dialect import Dialect

_AS_KEYWORD = re.compile(r"\s+as\s+", re.IGNORECASE)
_DOT_SPACING = re.compile(r"\s*\.\s*")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class NameItem:
    """Raw identifier parts.

    Attributes:
        name: The bare identifier.
        prefix: Everything before the last dot (table alias or schema), which
            may itself be dotted (``db.dbo``).
        alias: Optional alias following the identifier.
    """

    name: str
    prefix: str | None = None
    alias: str | None = None

    @classmethod
    def parse(cls, text: str | None) -> NameItem:
        """Split ``text`` into prefix, name and alias.

        ``"a.b As c"``, ``"a.b c"`` and ``"a . b  as  c"`` all parse to
        ``NameItem(name="b", prefix="a", alias="c")``.
        """
        text = (text or "").strip()
        text = _AS_KEYWORD.sub(" ", text)
        text = _DOT_SPACING.sub(".", text)
        parts = _WHITESPACE.split(text, maxsplit=1)
        head = parts[0]
        alias = parts[1].strip() if len(parts) > 1 and parts[1].strip() else None
        prefix, dot, name = head.rpartition(".")
        if not dot:
            return cls(name=head, alias=alias)
        return cls(name=name, prefix=prefix or None, alias=alias)


def _quote_prefix(dialect: Dialect, prefix: str | None) -> str:
    if not prefix:
        return ""
    return ".".join(dialect.safe_name(part) for part in prefix.split(".")) + "."


@dataclass(frozen=True)
class ColumnItem:
    """A column reference rendered as ``[t].[col] As [alias]``."""

    dialect: Dialect
    item: NameItem

    @classmethod
    def parse(cls, dialect: Dialect, text: str | None) -> ColumnItem:
        return cls(dialect, NameItem.parse(text))

    def to_sql(self) -> str:
        sql = _quote_prefix(self.dialect, self.item.prefix)
        sql += self.dialect.safe_name(self.item.name)
        if self.item.alias:
            sql += f" As {self.dialect.safe_name(self.item.alias)}"
        return sql


@dataclass(frozen=True)
class TableItem:
    """A table reference rendered as ``[schema].[table] [alias]``.

    Table aliases never carry ``As`` because Oracle rejects it.
    """

    dialect: Dialect
    item: NameItem

    @classmethod
    def parse(cls, dialect: Dialect, text: str | None) -> TableItem:
        return cls(dialect, NameItem.parse(text))

    @property
    def is_valid(self) -> bool:
        return bool(self.item.name.strip())

    def to_sql(self) -> str:
        sql = _quote_prefix(self.dialect, self.item.prefix)
        sql += self.dialect.safe_name(self.item.name)
        if self.item.alias:
            sql += f" {self.dialect.safe_name(self.item.alias)}"
        return sql
