"""Server-style listing over a client-side source: filter, search, sort, page."""

from schoolboard.application.interfaces import CollectionSource
from schoolboard.application.schemas import ListQuery, Page, total_pages_for
from schoolboard.application.services.derived_view import derive_view
from schoolboard.domain.entities import RecordT


class ListingService:
    """Answers a ListQuery the way the backend's paged listing does.

    Used by the fixture API so fixture collections can be browsed through
    the same envelope as the real endpoints.
    """

    async def list(self, source: CollectionSource[RecordT], query: ListQuery) -> Page[RecordT]:
        everything = await source.load(ListQuery(fetch_all=True))
        entity_type = source.entity_type
        filters = {k: v for k, v in query.filters.items() if k in entity_type.filter_fields}
        sort_by = query.sort_by if query.sort_by in entity_type.field_names() else None
        selected = derive_view(everything.docs, filters, query.search, sort_by, query.sort_order)

        if query.fetch_all:
            return Page(docs=selected, total_docs=len(selected), limit=max(1, len(selected)), page=1)

        total_pages = total_pages_for(len(selected), query.limit)
        page = min(query.page, total_pages)
        start = (page - 1) * query.limit
        return Page(
            docs=selected[start : start + query.limit],
            total_docs=len(selected),
            limit=query.limit,
            page=page,
            total_pages=total_pages,
        )
