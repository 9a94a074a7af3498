"""List-Filter-Detail-Mutate controller — one generic view model per entity kind."""

import logging
from enum import Enum
from typing import Generic

from schoolboard.application.interfaces import CollectionSource, Notifier
from schoolboard.application.schemas import ListQuery, SortOrder
from schoolboard.application.services.collection_store import CollectionStore
from schoolboard.application.services.derived_view import derive_view
from schoolboard.application.services.filter_set import FilterPredicateSet
from schoolboard.application.services.mutation_panel import DetailMutationPanel
from schoolboard.application.services.pagination import PaginationController
from schoolboard.config import get_settings
from schoolboard.domain.entities import RecordT
from schoolboard.domain.exceptions import ApiError, DuplicateEntityError

logger = logging.getLogger(__name__)


class ListController(Generic[RecordT]):
    """State behind a management list page.

    Works in two modes behind the same interface, decided by the source:

    - server-side: every filter, sort or page change re-issues ``load`` and
      the records pass through the derived view untouched;
    - client-side: the whole set is loaded once and filtered, sorted and
      sliced locally.

    ``fetch_all`` loads the unpaged bulk listing from a server-side source
    and then pages through it locally.
    """

    def __init__(
        self,
        source: CollectionSource[RecordT],
        notifier: Notifier,
        *,
        page_size: int | None = None,
        sort_by: str | None = "created_at",
        sort_order: SortOrder = "desc",
        fetch_detail: bool = False,
    ):
        self._source = source
        self._sort_by = sort_by
        self._sort_order: SortOrder = sort_order
        self._fetch_all = False
        self._generation = 0
        self._closed = False

        self.store: CollectionStore[RecordT] = CollectionStore(source.entity_type)
        self.pagination = PaginationController(page_size or get_settings().default_page_size)
        self.filters = FilterPredicateSet(source.entity_type, on_change=self.pagination.reset)
        self.panel: DetailMutationPanel[RecordT] = DetailMutationPanel(
            source,
            self.store,
            notifier,
            fetch_detail=fetch_detail,
            on_added=self._record_added,
            on_removed=self._record_removed,
        )

    # ── State ────────────────────────────────────────────────────────

    @property
    def entity_type(self) -> type[RecordT]:
        return self._source.entity_type

    @property
    def loading(self) -> bool:
        return self.pagination.loading

    @property
    def error(self) -> str | None:
        return self.store.error

    @property
    def fetching_all(self) -> bool:
        return self._fetch_all

    @property
    def sort(self) -> tuple[str | None, SortOrder]:
        return self._sort_by, self._sort_order

    @property
    def active_filter_count(self) -> int:
        return self.filters.active_filter_count

    @property
    def _server_paged(self) -> bool:
        return self._source.filters_server_side and not self._fetch_all

    def view(self) -> list[RecordT]:
        """Every record passing the active filters, in display order."""
        return derive_view(
            self.store.records,
            self.filters.values,
            self.filters.search_term,
            self._sort_by,
            self._sort_order,
            server_side=self._source.filters_server_side,
        )

    def visible(self) -> list[RecordT]:
        """The records of the current page, recomputed like a render."""
        derived = self.view()
        if self._server_paged:
            return derived
        self.pagination.set_total(len(derived))
        return self.pagination.slice(derived)

    # ── Loading ──────────────────────────────────────────────────────

    async def load(self, *, use_cache: bool = True) -> bool:
        """Replace the store with a fresh listing.

        On failure the store is cleared and ``error`` carries the message
        for the error banner. Responses superseded by a newer load, or
        arriving after ``close``, are dropped.
        """
        self._generation += 1
        generation = self._generation
        self.pagination.loading = True
        query = self._build_query()

        try:
            page = await self._source.load(query, use_cache=use_cache)
            if self._is_stale(generation):
                logger.debug("Dropping stale %s listing", self.entity_type.kind())
                return False
            self.store.replace_all(page.docs)
        except (ApiError, DuplicateEntityError) as exc:
            if self._is_stale(generation):
                return False
            message = exc.message if isinstance(exc, ApiError) else str(exc)
            logger.warning("Loading %s failed: %s", self.entity_type.collection, message)
            self.store.clear(error=message)
            self.pagination.reset()
            self.pagination.set_total(0)
            return False
        finally:
            if generation == self._generation:
                self.pagination.loading = False

        if self._server_paged:
            self.pagination.sync(page)
        else:
            self.pagination.set_total(len(self.view()))
        logger.debug(
            "Loaded %d of %d %s", len(page.docs), page.total_docs, self.entity_type.collection
        )
        return True

    async def retry(self) -> bool:
        """Re-issue the last load, bypassing cached responses."""
        return await self.load(use_cache=False)

    async def fetch_all(self) -> bool:
        """Load the whole collection at once and page through it locally."""
        self._fetch_all = True
        self.pagination.reset()
        return await self.load()

    async def fetch_paged(self) -> bool:
        """Leave fetch-all mode and go back to server pagination."""
        self._fetch_all = False
        self.pagination.reset()
        return await self.load()

    def close(self) -> None:
        """Unmount: in-flight responses are ignored from now on."""
        self._closed = True
        self.panel.close()

    # ── Filters, sort, paging ────────────────────────────────────────

    async def set_filter(self, key: str, value: str | Enum | None) -> None:
        self.filters.set_filter(key, value)
        await self._reload_if_server_side()

    async def set_search(self, term: str) -> None:
        self.filters.set_search(term)
        await self._reload_if_server_side()

    async def reset_filters(self) -> None:
        self.filters.reset()
        await self._reload_if_server_side()

    async def set_sort(self, sort_by: str, sort_order: SortOrder = "asc") -> None:
        if sort_by not in self.entity_type.field_names():
            raise ValueError(f"{self.entity_type.kind()} cannot be sorted by '{sort_by}'")
        self._sort_by = sort_by
        self._sort_order = sort_order
        self.pagination.reset()
        await self._reload_if_server_side()

    async def set_page_size(self, page_size: int) -> None:
        self.pagination.set_page_size(page_size)
        self.pagination.reset()
        await self._reload_if_server_side()

    async def go_to_page(self, page: int) -> bool:
        """Change page; a no-op returning False when ``page`` is out of range
        or a load is in flight."""
        if not self._server_paged:
            self.visible()
        if not self.pagination.go_to_page(page):
            return False
        if self._server_paged:
            await self.load()
        return True

    # ── Internals ────────────────────────────────────────────────────

    def _build_query(self) -> ListQuery:
        return ListQuery(
            page=self.pagination.current_page if self._server_paged else 1,
            limit=self.pagination.page_size,
            sort_by=self._sort_by,
            sort_order=self._sort_order,
            filters=self.filters.values,
            search=self.filters.search_term.strip(),
            fetch_all=self._fetch_all,
        )

    async def _reload_if_server_side(self) -> None:
        if self._source.filters_server_side:
            await self.load()

    async def _record_added(self, _record: RecordT) -> None:
        await self._reload_current_page(+1)

    async def _record_removed(self, _record_id: str) -> None:
        await self._reload_current_page(-1)

    async def _reload_current_page(self, delta: int) -> None:
        """Re-fetch a server page after a create or delete changed its rows.

        The total is adjusted first so a page emptied by the delete is
        clamped before the reload.
        """
        if not self._server_paged or self._closed:
            return
        self.pagination.set_total(self.pagination.total_count + delta)
        await self.load()

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation
