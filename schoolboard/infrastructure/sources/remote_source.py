"""Collection source backed by the school backend REST API."""

import logging
from typing import Any

from pydantic import ValidationError

from schoolboard.application.interfaces import CollectionSource
from schoolboard.application.schemas import ListQuery, Page, PageEnvelope
from schoolboard.domain.entities import RecordT
from schoolboard.domain.exceptions import EntityNotFoundError, ParseError, ServerError
from schoolboard.infrastructure.http.api_client import SchoolApiClient
from schoolboard.infrastructure.sources import entity_codec

logger = logging.getLogger(__name__)


class RemoteCollectionSource(CollectionSource[RecordT]):
    """Implements the CollectionSource port over ``/{collection}`` endpoints.

    Filtering, search, sorting and paging happen on the server.
    """

    def __init__(self, entity_type: type[RecordT], api_client: SchoolApiClient):
        self.entity_type = entity_type
        self._api = api_client
        self._path = f"/{entity_type.collection}"

    @property
    def filters_server_side(self) -> bool:
        return True

    async def load(self, query: ListQuery, *, use_cache: bool = True) -> Page[RecordT]:
        path = f"{self._path}/all" if query.fetch_all else self._path
        data = await self._api.get(path, self._params(query), use_cache=use_cache)

        try:
            envelope = PageEnvelope.model_validate(data)
        except ValidationError as exc:
            raise ParseError(f"Malformed {self.entity_type.collection} listing") from exc

        docs = [entity_codec.decode(self.entity_type, doc) for doc in envelope.docs]
        return Page(
            docs=docs,
            total_docs=envelope.total_docs,
            limit=envelope.limit or max(1, len(docs)),
            page=envelope.page,
            total_pages=envelope.total_pages,
        )

    async def get(self, record_id: str) -> RecordT:
        try:
            data = await self._api.get(f"{self._path}/{record_id}")
        except ServerError as exc:
            if exc.status_code == 404:
                raise EntityNotFoundError(self.entity_type.kind(), record_id) from exc
            raise
        return entity_codec.decode(self.entity_type, data)

    async def create(self, data: dict[str, Any]) -> RecordT:
        body = entity_codec.encode_fields(self.entity_type, data)
        created = await self._api.post(self._path, body)
        return entity_codec.decode(self.entity_type, created)

    async def update(
        self,
        record_id: str,
        fields: dict[str, Any],
        *,
        changes_description: str | None = None,
    ) -> RecordT | None:
        body = entity_codec.encode_fields(self.entity_type, fields)
        if changes_description:
            body["changesDescription"] = changes_description
        data = await self._api.patch(f"{self._path}/{record_id}", body)
        if not data:
            return None
        return entity_codec.decode(self.entity_type, data)

    async def delete(self, record_id: str) -> None:
        await self._api.delete(f"{self._path}/{record_id}")
        logger.info("Deleted %s %s", self.entity_type.kind(), record_id)

    def _params(self, query: ListQuery) -> dict[str, Any]:
        params: dict[str, Any] = {
            "page": query.page,
            "limit": query.limit,
        }
        if query.sort_by:
            params["sortBy"] = entity_codec.wire_name(self.entity_type, query.sort_by)
            params["sortOrder"] = query.sort_order
        for key, value in query.filters.items():
            params[entity_codec.wire_name(self.entity_type, key)] = value
        if query.search:
            params["search"] = query.search
        if query.fetch_all:
            params["fetchAll"] = "true"
        return params
