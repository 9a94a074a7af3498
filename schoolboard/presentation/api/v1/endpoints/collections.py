"""Fixture collection endpoints — the backend listing contract over fixture data.

Serves ``/{collection}`` with the same envelope and query parameters as
the school backend so list views can run against fixture data locally.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Request, status

from schoolboard.application.interfaces import CollectionSource
from schoolboard.application.schemas import ListQuery, Page
from schoolboard.application.services import ListingService
from schoolboard.domain.exceptions import DuplicateEntityError, EntityNotFoundError, ParseError
from schoolboard.infrastructure.dependencies import get_fixture_sources, get_listing_service
from schoolboard.infrastructure.sources import entity_codec

_RESERVED_PARAMS = frozenset({"page", "limit", "sortBy", "sortOrder", "search", "fetchAll"})


def require_bearer(authorization: str | None = Header(None)) -> str:
    """Reject requests without a bearer token, like the real backend."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized request")
    return token


router = APIRouter(tags=["Fixture Collections"], dependencies=[Depends(require_bearer)])


def _source(
    collection: str,
    sources: dict[str, CollectionSource] = Depends(get_fixture_sources),
) -> CollectionSource:
    source = sources.get(collection)
    if source is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown collection '{collection}'")
    return source


def _list_query(request: Request, source: CollectionSource, *, fetch_all: bool) -> ListQuery:
    params = request.query_params
    entity_type = source.entity_type
    filters = {
        entity_codec.attribute_name(entity_type, key): value
        for key, value in params.items()
        if key not in _RESERVED_PARAMS and value
    }
    sort_by = params.get("sortBy")
    try:
        return ListQuery(
            page=int(params.get("page", 1)),
            limit=int(params.get("limit", 10)),
            sort_by=entity_codec.attribute_name(entity_type, sort_by) if sort_by else "created_at",
            sort_order="asc" if params.get("sortOrder") == "asc" else "desc",
            filters=filters,
            search=params.get("search", ""),
            fetch_all=fetch_all or params.get("fetchAll") == "true",
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid query: {exc}")


def _envelope(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}


def _page_envelope(page: Page) -> dict[str, Any]:
    return _envelope(
        {
            "docs": [entity_codec.encode(record) for record in page.docs],
            "totalDocs": page.total_docs,
            "limit": page.limit,
            "totalPages": page.total_pages,
            "page": page.page,
            "hasPrevPage": page.has_prev_page,
            "hasNextPage": page.has_next_page,
        }
    )


@router.get("/{collection}")
async def list_records(
    request: Request,
    source: CollectionSource = Depends(_source),
    service: ListingService = Depends(get_listing_service),
) -> dict[str, Any]:
    """Paged listing with filters, search and sorting."""
    page = await service.list(source, _list_query(request, source, fetch_all=False))
    return _page_envelope(page)


@router.get("/{collection}/all")
async def list_all_records(
    request: Request,
    source: CollectionSource = Depends(_source),
    service: ListingService = Depends(get_listing_service),
) -> dict[str, Any]:
    """Unpaged bulk listing."""
    page = await service.list(source, _list_query(request, source, fetch_all=True))
    return _page_envelope(page)


@router.get("/{collection}/{record_id}")
async def get_record(record_id: str, source: CollectionSource = Depends(_source)) -> dict[str, Any]:
    try:
        record = await source.get(record_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _envelope(entity_codec.encode(record))


@router.post("/{collection}", status_code=status.HTTP_201_CREATED)
async def create_record(
    body: dict[str, Any] = Body(...),
    source: CollectionSource = Depends(_source),
) -> dict[str, Any]:
    attributes = _attributes(source, body)
    try:
        record = await source.create(attributes)
    except ParseError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return _envelope(entity_codec.encode(record))


@router.patch("/{collection}/{record_id}")
async def update_record(
    record_id: str,
    body: dict[str, Any] = Body(...),
    source: CollectionSource = Depends(_source),
) -> dict[str, Any]:
    changes_description = body.pop("changesDescription", None)
    attributes = _attributes(source, body)
    attributes.pop("id", None)
    try:
        record = await source.update(
            record_id, attributes, changes_description=changes_description
        )
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ParseError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return _envelope(entity_codec.encode(record) if record is not None else None)


@router.delete("/{collection}/{record_id}")
async def delete_record(record_id: str, source: CollectionSource = Depends(_source)) -> dict[str, Any]:
    try:
        await source.delete(record_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "message": "Deleted"}


def _attributes(source: CollectionSource, body: dict[str, Any]) -> dict[str, Any]:
    entity_type = source.entity_type
    known = set(entity_type.field_names())
    attributes = {entity_codec.attribute_name(entity_type, key): value for key, value in body.items()}
    unknown = sorted(set(attributes) - known)
    if unknown:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown {entity_type.kind()} fields: {', '.join(unknown)}",
        )
    return attributes
