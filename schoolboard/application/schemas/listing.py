"""DTOs for paged listings: the query a view issues and the page it gets back."""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from schoolboard.domain.entities import RecordT

SortOrder = Literal["asc", "desc"]


class ListQuery(BaseModel):
    """Parameters of one listing call.

    ``filters`` holds active filter keys (attribute names) → selected value.
    ``fetch_all`` switches to the unpaged bulk variant of the listing.
    """

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    sort_by: str | None = "created_at"
    sort_order: SortOrder = "desc"
    filters: dict[str, str] = Field(default_factory=dict)
    search: str = ""
    fetch_all: bool = False


@dataclass
class Page(Generic[RecordT]):
    """One page of entities plus the counters of the listing envelope."""

    docs: list[RecordT]
    total_docs: int
    limit: int
    page: int = 1
    total_pages: int = field(default=0)
    has_prev_page: bool = False
    has_next_page: bool = False

    def __post_init__(self) -> None:
        if self.total_pages < 1:
            self.total_pages = total_pages_for(self.total_docs, self.limit)
        self.has_prev_page = self.page > 1
        self.has_next_page = self.page < self.total_pages


def total_pages_for(total_count: int, page_size: int) -> int:
    """``max(1, ceil(total_count / page_size))``."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return max(1, math.ceil(total_count / page_size))


# ── Wire envelopes ───────────────────────────────────────────────────


class ApiEnvelope(BaseModel):
    """``{ success, data, message }`` wrapper around every backend response."""

    success: bool
    data: Any = None
    message: str | None = None


class PageEnvelope(BaseModel):
    """The ``data`` of a paged listing response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    docs: list[dict[str, Any]]
    total_docs: int = Field(ge=0)
    limit: int = Field(default=10, ge=0)
    total_pages: int = Field(default=1, ge=0)
    page: int = Field(default=1, ge=1)
    has_prev_page: bool = False
    has_next_page: bool = False
