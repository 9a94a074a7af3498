"""Pagination controller shared by client- and server-paginated list views."""

import logging
from collections.abc import Sequence
from typing import TypeVar

from schoolboard.application.schemas import Page, total_pages_for

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PaginationController:
    """Current page, page size and total count.

    ``current_page`` always stays within ``[1, total_pages]``.
    """

    def __init__(self, page_size: int = 10):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._page_size = page_size
        self._total_count = 0
        self._current_page = 1
        self.loading = False

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def total_count(self) -> int:
        return self._total_count

    @property
    def total_pages(self) -> int:
        return total_pages_for(self._total_count, self._page_size)

    @property
    def offset(self) -> int:
        return (self._current_page - 1) * self._page_size

    @property
    def has_prev_page(self) -> bool:
        return self._current_page > 1

    @property
    def has_next_page(self) -> bool:
        return self._current_page < self.total_pages

    def go_to_page(self, page: int) -> bool:
        """Move to ``page``. Returns False, leaving state untouched, when the
        page is out of range, already current, or a load is in flight."""
        if self.loading:
            logger.debug("Ignoring page change to %d while loading", page)
            return False
        if page < 1 or page > self.total_pages or page == self._current_page:
            return False
        self._current_page = page
        return True

    def reset(self) -> None:
        self._current_page = 1

    def set_total(self, total_count: int) -> None:
        self._total_count = max(0, total_count)
        self._clamp()

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._page_size = page_size
        self._clamp()

    def sync(self, page: Page) -> None:
        """Adopt the counters of a server-paginated response."""
        self._total_count = max(0, page.total_docs)
        self._current_page = page.page
        self._clamp()

    def slice(self, items: Sequence[T]) -> list[T]:
        """The current page of a client-paginated sequence."""
        return list(items[self.offset : self.offset + self._page_size])

    def _clamp(self) -> None:
        self._current_page = min(max(1, self._current_page), self.total_pages)
