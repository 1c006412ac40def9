"""Paging request model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Pager(BaseModel):
    """A 1-based page request.

    Attributes:
        page: Page number, starting at 1.
        page_size: Rows per page.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1)

    @property
    def skip_count(self) -> int:
        """Rows preceding this page."""
        return (self.page - 1) * self.page_size
