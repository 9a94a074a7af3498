"""In-memory collection store owned by one list view."""

import logging
from collections.abc import Iterable, Iterator
from typing import Generic

from schoolboard.domain.entities import RecordT
from schoolboard.domain.exceptions import DuplicateEntityError, EntityNotFoundError

logger = logging.getLogger(__name__)


class CollectionStore(Generic[RecordT]):
    """Ordered records of one entity kind, unique by id.

    Optimistic edits are two-phase: ``apply_tentative`` swaps in the patched
    record and keeps a snapshot of the last confirmed one; ``confirm``
    replaces it with the server's answer, ``rollback`` restores the snapshot.
    """

    def __init__(self, entity_type: type[RecordT]):
        self._entity_type = entity_type
        self._records: list[RecordT] = []
        self._snapshots: dict[str, RecordT] = {}
        self.error: str | None = None

    # ── Reads ────────────────────────────────────────────────────────

    @property
    def records(self) -> list[RecordT]:
        return list(self._records)

    def get(self, record_id: str) -> RecordT | None:
        index = self._index_of(record_id)
        return None if index is None else self._records[index]

    def is_pending(self, record_id: str) -> bool:
        return record_id in self._snapshots

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(list(self._records))

    def __contains__(self, record_id: object) -> bool:
        return isinstance(record_id, str) and self._index_of(record_id) is not None

    # ── Wholesale load results ───────────────────────────────────────

    def replace_all(self, records: Iterable[RecordT]) -> None:
        """Replace the store with a freshly loaded set and clear any error."""
        incoming = list(records)
        seen: set[str] = set()
        for record in incoming:
            if record.id in seen:
                raise DuplicateEntityError(self._entity_type.kind(), "id", record.id)
            seen.add(record.id)
        self._records = incoming
        self._snapshots.clear()
        self.error = None

    def clear(self, error: str | None = None) -> None:
        """Drop every record. A failed load passes its message as ``error``."""
        self._records = []
        self._snapshots.clear()
        self.error = error

    # ── Single-record changes ────────────────────────────────────────

    def add(self, record: RecordT) -> None:
        """Insert a newly created record at the top of the list."""
        if record.id in self:
            raise DuplicateEntityError(self._entity_type.kind(), "id", record.id)
        self._records.insert(0, record)

    def upsert(self, record: RecordT) -> None:
        """Replace the record with the same id in place, or append it."""
        index = self._index_of(record.id)
        if index is None:
            self._records.append(record)
        else:
            self._records[index] = record

    def remove(self, record_id: str) -> bool:
        index = self._index_of(record_id)
        if index is None:
            return False
        del self._records[index]
        self._snapshots.pop(record_id, None)
        return True

    # ── Two-phase optimistic updates ─────────────────────────────────

    def apply_tentative(self, record: RecordT) -> None:
        index = self._index_of(record.id)
        if index is None:
            raise EntityNotFoundError(self._entity_type.kind(), record.id)
        self._snapshots.setdefault(record.id, self._records[index])
        self._records[index] = record
        logger.debug("Tentative patch on %s %s", self._entity_type.kind(), record.id)

    def confirm(self, record_id: str, confirmed: RecordT | None = None) -> None:
        """Settle a tentative patch, optionally with the authoritative record.

        A record reloaded or removed in the meantime is left as it is.
        """
        had_snapshot = self._snapshots.pop(record_id, None) is not None
        if confirmed is None:
            return
        index = self._index_of(record_id)
        if index is not None:
            self._records[index] = confirmed
        elif had_snapshot:
            logger.debug("Confirmed %s %s is no longer listed", self._entity_type.kind(), record_id)

    def rollback(self, record_id: str) -> None:
        snapshot = self._snapshots.pop(record_id, None)
        if snapshot is None:
            return
        index = self._index_of(record_id)
        if index is not None:
            self._records[index] = snapshot
            logger.debug("Rolled back %s %s", self._entity_type.kind(), record_id)

    def _index_of(self, record_id: str) -> int | None:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None
