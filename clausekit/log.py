"""Structured logging helpers.

clausekit emits structlog events but never configures processors or
handlers; that is left to the host application.

Usage::

    from clausekit.log import get_logger

    logger = get_logger(__name__)
    logger.info("metadata_loaded", engine="mysql", tables=12)
"""
from __future__ import annotations

from typing import Any

import structlog


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger bound to ``name``.

    Args:
        name: Logger name, normally the calling module's ``__name__``.
        **initial_values: Context bound to every event from this logger.

    Returns:
        A lazily-configured structlog bound logger.
    """
    return structlog.get_logger(name, **initial_values)
