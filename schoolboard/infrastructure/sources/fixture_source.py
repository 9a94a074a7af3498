"""Collection source over a fixed fixture set held in memory.

Fixture-only pages load their whole collection at once and filter it on
the client. An optional latency stands in for a network round-trip.
"""

import asyncio
import copy
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4

import yaml

from schoolboard.application.interfaces import CollectionSource
from schoolboard.application.schemas import ListQuery, Page
from schoolboard.domain.entities import ENTITY_TYPES, RecordT
from schoolboard.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from schoolboard.infrastructure.sources import entity_codec

logger = logging.getLogger(__name__)


class FixtureCollectionSource(CollectionSource[RecordT]):
    """Implements the CollectionSource port over an in-memory record list.

    Mutations apply to this source's own copy, so a later ``get`` or
    ``load`` observes them.
    """

    def __init__(
        self,
        entity_type: type[RecordT],
        records: Iterable[RecordT] = (),
        *,
        latency_ms: int = 0,
    ):
        self.entity_type = entity_type
        self._latency = max(0, latency_ms) / 1000
        self._records: dict[str, RecordT] = {}
        for record in records:
            if record.id in self._records:
                raise DuplicateEntityError(entity_type.kind(), "id", record.id)
            self._records[record.id] = record

    @classmethod
    def from_documents(
        cls,
        entity_type: type[RecordT],
        documents: Iterable[dict[str, Any]],
        *,
        latency_ms: int = 0,
    ) -> "FixtureCollectionSource[RecordT]":
        records = [entity_codec.decode(entity_type, doc) for doc in documents]
        return cls(entity_type, records, latency_ms=latency_ms)

    @property
    def filters_server_side(self) -> bool:
        return False

    @property
    def records(self) -> list[RecordT]:
        return [copy.copy(r) for r in self._records.values()]

    async def load(self, query: ListQuery, *, use_cache: bool = True) -> Page[RecordT]:
        await self._simulate_latency()
        docs = self.records
        return Page(docs=docs, total_docs=len(docs), limit=max(1, len(docs)), page=1)

    async def get(self, record_id: str) -> RecordT:
        await self._simulate_latency()
        record = self._records.get(record_id)
        if record is None:
            raise EntityNotFoundError(self.entity_type.kind(), record_id)
        return copy.copy(record)

    async def create(self, data: dict[str, Any]) -> RecordT:
        await self._simulate_latency()
        now = datetime.now(timezone.utc)
        record = entity_codec.build(
            self.entity_type,
            {**data, "id": data.get("id") or uuid4().hex, "created_at": now, "updated_at": now},
        )
        if record.id in self._records:
            raise DuplicateEntityError(self.entity_type.kind(), "id", record.id)
        self._records[record.id] = record
        return copy.copy(record)

    async def update(
        self,
        record_id: str,
        fields: dict[str, Any],
        *,
        changes_description: str | None = None,
    ) -> RecordT | None:
        await self._simulate_latency()
        current = self._records.get(record_id)
        if current is None:
            raise EntityNotFoundError(self.entity_type.kind(), record_id)

        attributes = entity_codec.to_attributes(current)
        attributes.update(fields)
        attributes["id"] = record_id
        attributes["updated_at"] = datetime.now(timezone.utc)
        updated = entity_codec.build(self.entity_type, attributes)
        self._records[record_id] = updated
        if changes_description:
            logger.debug("%s %s: %s", self.entity_type.kind(), record_id, changes_description)
        return copy.copy(updated)

    async def delete(self, record_id: str) -> None:
        await self._simulate_latency()
        if self._records.pop(record_id, None) is None:
            raise EntityNotFoundError(self.entity_type.kind(), record_id)

    async def _simulate_latency(self) -> None:
        if self._latency:
            await asyncio.sleep(self._latency)


def load_fixture_file(
    path: str | Path, *, latency_ms: int = 0
) -> dict[str, FixtureCollectionSource]:
    """Read a YAML file mapping collection names to lists of wire documents.

    Unknown collection names are skipped with a warning.
    """
    raw = yaml.safe_load(Path(path).read_text("utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Fixture file {path} must contain a mapping of collections")

    sources: dict[str, FixtureCollectionSource] = {}
    for collection, documents in raw.items():
        entity_type = ENTITY_TYPES.get(collection)
        if entity_type is None:
            logger.warning("Skipping unknown fixture collection '%s'", collection)
            continue
        sources[collection] = FixtureCollectionSource.from_documents(
            entity_type, documents or [], latency_ms=latency_ms
        )
        logger.debug("Loaded %d %s fixture(s)", len(documents or []), collection)
    return sources
