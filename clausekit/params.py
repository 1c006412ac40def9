"""Bound-parameter bookkeeping for a single statement.

A :class:`ParameterManager` owns every named :class:`SqlParam` produced while
a statement is being built, plus any opaque *dynamic* parameter bags the
caller hands over whole (a mapping, a pydantic model, a plain object).  Named
parameters and dynamic bags live in separate collections; executors bind
both.

Names are always stored in prefixed form, so ``"p0"``, ``"@p0"`` and
``" @p0 "`` all address the same parameter on a ``@``-prefixed engine.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from clausekit.types import DbType, ParameterDirection


@dataclass(frozen=True)
class SqlParam:
    """A fully described bound parameter.

    Attributes:
        name: Prefixed parameter name (e.g. ``'@_p_0'``).
        value: Value bound at execution time.
        db_type: Optional generic type hint for the executor.
        direction: Optional parameter direction.
        size: Optional size hint (string / binary length).
        precision: Optional numeric precision.
        scale: Optional numeric scale.
    """

    name: str
    value: Any = None
    db_type: DbType | None = None
    direction: ParameterDirection | None = None
    size: int | None = None
    precision: int | None = None
    scale: int | None = None


class ParameterManager:
    """Tracks the named and dynamic parameters of one statement.

    Instances are not thread-safe; one statement is built by one call chain.
    Use :meth:`clone` to reuse a populated manager elsewhere.

    Args:
        prefix: The owning dialect's parameter prefix (``'@'``, ``':'``).
    """

    def __init__(self, prefix: str = "@") -> None:
        self._prefix = prefix
        self._index = 0
        self._params: dict[str, SqlParam] = {}
        self._dynamic_params: list[Any] = []

    @property
    def prefix(self) -> str:
        return self._prefix

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    def generate_name(self) -> str:
        """Return a parameter name not yet registered in this manager."""
        while True:
            name = self._format_generated_name(self._index)
            self._index += 1
            if name not in self._params:
                return name

    def _format_generated_name(self, index: int) -> str:
        return f"{self._prefix}_p_{index}"

    def normalize_name(self, name: str) -> str:
        """Return ``name`` trimmed and carrying the prefix exactly once.

        Blank names are returned unchanged.
        """
        if not name or not name.strip():
            return name
        name = name.strip()
        if name.startswith(self._prefix):
            return name
        return f"{self._prefix}{name}"

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add(
        self,
        name: str,
        value: Any = None,
        db_type: DbType | None = None,
        direction: ParameterDirection | None = None,
        size: int | None = None,
        precision: int | None = None,
        scale: int | None = None,
    ) -> SqlParam | None:
        """Register a parameter, replacing any existing one with the same name.

        Args:
            name: Parameter name, with or without the prefix.  Blank names
                are ignored.
            value: Value to bind; passed through :meth:`convert_value`.
            db_type: Optional generic type hint.
            direction: Optional parameter direction.
            size: Optional size hint.
            precision: Optional numeric precision.
            scale: Optional numeric scale.

        Returns:
            The stored :class:`SqlParam`, or ``None`` for a blank name.
        """
        if not name or not name.strip():
            return None
        name = self.normalize_name(name)
        param = SqlParam(
            name=name,
            value=self.convert_value(value),
            db_type=db_type,
            direction=direction,
            size=size,
            precision=precision,
            scale=scale,
        )
        self._params.pop(name, None)
        self._params[name] = param
        return param

    def add_value(self, value: Any, db_type: DbType | None = None) -> str:
        """Register ``value`` under a freshly generated name and return the name."""
        name = self.generate_name()
        self.add(name, value, db_type)
        return name

    def convert_value(self, value: Any) -> Any:
        """Hook for engines whose drivers cannot bind some Python values."""
        return value

    def remove(self, name: str) -> None:
        """Forget the named parameter if it is registered."""
        if name:
            self._params.pop(self.normalize_name(name), None)

    def add_dynamic_params(self, params: Any) -> None:
        """Store an opaque parameter bag; ``None`` is ignored."""
        if params is None:
            return
        self._dynamic_params.append(params)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def contains(self, name: str) -> bool:
        if not name:
            return False
        return self.normalize_name(name) in self._params

    def get_param(self, name: str) -> SqlParam | None:
        if not name:
            return None
        return self._params.get(self.normalize_name(name))

    def get_value(self, name: str) -> Any:
        param = self.get_param(name)
        return param.value if param is not None else None

    def get_params(self) -> tuple[SqlParam, ...]:
        """Return a read-only snapshot of the named parameters, in insertion order."""
        return tuple(self._params.values())

    def get_dynamic_params(self) -> tuple[Any, ...]:
        """Return a read-only snapshot of the dynamic parameter bags."""
        return tuple(self._dynamic_params)

    def __len__(self) -> int:
        return len(self._params)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Forget every parameter and restart name generation."""
        self._index = 0
        self._params.clear()
        self._dynamic_params.clear()

    def clone(self) -> ParameterManager:
        """Return an independent copy; later changes to either side stay local."""
        other = copy.copy(self)
        other._params = dict(self._params)
        other._dynamic_params = list(self._dynamic_params)
        return other
