"""Detail/mutation panel — selection, status changes, saves, creates and deletes."""

import dataclasses
import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Generic

from schoolboard.application.interfaces import CollectionSource, Notifier
from schoolboard.application.services.collection_store import CollectionStore
from schoolboard.domain.entities import Record, RecordT
from schoolboard.domain.exceptions import (
    ApiError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidStatusTransitionError,
)

logger = logging.getLogger(__name__)

_READ_ONLY_FIELDS = frozenset({"id", "created_at", "updated_at"})

# Failures a source may raise for a single mutation; all become notifications.
_MUTATION_ERRORS = (ApiError, EntityNotFoundError, DuplicateEntityError)

Listener = Callable[..., Awaitable[None] | None]


class DetailMutationPanel(Generic[RecordT]):
    """Acts on single records of a list view.

    At most one mutation per record id is in flight; a second request for
    the same id is ignored until the first settles. Mutations on different
    ids may run concurrently and settle in any order, so every store patch
    is keyed by id. Backend failures become error notifications and never
    propagate to the caller.

    ``on_added`` and ``on_removed`` run after a successful create or delete
    and may be coroutine functions.
    """

    def __init__(
        self,
        source: CollectionSource[RecordT],
        store: CollectionStore[RecordT],
        notifier: Notifier,
        *,
        fetch_detail: bool = False,
        on_added: Listener | None = None,
        on_removed: Listener | None = None,
    ):
        self._source = source
        self._store = store
        self._notifier = notifier
        self._fetch_detail = fetch_detail
        self._on_added = on_added
        self._on_removed = on_removed
        self._in_flight: set[str] = set()
        self._creating = False
        self._closed = False

        self.selected_id: str | None = None
        self.detail: RecordT | None = None
        self.pending_delete_id: str | None = None

    @property
    def entity_type(self) -> type[RecordT]:
        return self._source.entity_type

    def is_in_flight(self, record_id: str) -> bool:
        return record_id in self._in_flight

    def close(self) -> None:
        """Detach from the view; responses arriving later are dropped."""
        self._closed = True

    # ── Selection ────────────────────────────────────────────────────

    async def select(self, record_id: str) -> RecordT | None:
        """Show one record, fetching it when the store only holds summaries."""
        self.selected_id = record_id
        record = self._store.get(record_id)
        if record is not None and not self._fetch_detail:
            self.detail = record
            return record

        try:
            record = await self._source.get(record_id)
        except EntityNotFoundError as exc:
            if not self._closed:
                self._notifier.error(str(exc))
            return None
        except ApiError as exc:
            logger.warning("Could not load %s %s: %s", self.entity_type.kind(), record_id, exc)
            if not self._closed:
                self._notifier.error(exc.message)
            return None

        if self._closed or self.selected_id != record_id:
            return record
        self.detail = record
        if record_id in self._store and not self._store.is_pending(record_id):
            self._store.upsert(record)
        return record

    def clear_selection(self) -> None:
        self.selected_id = None
        self.detail = None

    # ── Status / field updates ───────────────────────────────────────

    async def update_status(self, record_id: str, new_status: str | Enum) -> bool:
        """Move a record to ``new_status``.

        Returns False without any request or notification when the record
        already has that status or another mutation on it is in flight.
        """
        try:
            status = self.entity_type.parse_status(new_status)
        except ValueError:
            raw = new_status.value if isinstance(new_status, Enum) else new_status
            raise InvalidStatusTransitionError(self.entity_type.kind(), str(raw)) from None

        current = self._current(record_id)
        if current.field_value("status") == status.value:
            return False
        if record_id in self._in_flight:
            return False

        return await self._patch(
            record_id,
            {"status": status},
            changes_description=f"Status changed to {status.value}",
            success_message=f"Status updated to {status.value}",
        )

    async def save(self, record_id: str, patch: dict[str, Any]) -> bool:
        """Send a full or partial field update for one record."""
        editable = set(self.entity_type.field_names()) - _READ_ONLY_FIELDS
        unknown = set(patch) - editable
        if unknown:
            raise ValueError(f"Cannot patch {self.entity_type.kind()} fields: {sorted(unknown)}")
        if not patch:
            return False
        self._current(record_id)
        if record_id in self._in_flight:
            return False

        changed = ", ".join(patch)
        return await self._patch(
            record_id,
            dict(patch),
            changes_description=f"Updated {changed}",
            success_message=f"{self.entity_type.kind()} saved",
        )

    async def _patch(
        self,
        record_id: str,
        fields: dict[str, Any],
        *,
        changes_description: str,
        success_message: str,
    ) -> bool:
        self._in_flight.add(record_id)
        current = self._store.get(record_id)
        if current is not None:
            self._store.apply_tentative(dataclasses.replace(current, **fields))

        try:
            confirmed = await self._source.update(
                record_id, fields, changes_description=changes_description
            )
        except _MUTATION_ERRORS as exc:
            logger.warning(
                "Update of %s %s failed: %s", self.entity_type.kind(), record_id, exc
            )
            self._store.rollback(record_id)
            if not self._closed:
                self._notifier.error(_message(exc))
            return False
        finally:
            self._in_flight.discard(record_id)

        self._store.confirm(record_id, confirmed)
        if self.detail is not None and self.detail.id == record_id:
            self.detail = self._store.get(record_id) or confirmed or dataclasses.replace(
                self.detail, **fields
            )
        if not self._closed:
            self._notifier.success(success_message)
        return True

    # ── Create ───────────────────────────────────────────────────────

    async def create(self, data: dict[str, Any]) -> RecordT | None:
        if self._creating:
            return None
        self._creating = True
        try:
            record = await self._source.create(data)
        except _MUTATION_ERRORS as exc:
            logger.warning("Create %s failed: %s", self.entity_type.kind(), exc)
            if not self._closed:
                self._notifier.error(_message(exc))
            return None
        finally:
            self._creating = False

        if self._closed:
            return record
        if record.id not in self._store:
            self._store.add(record)
        self._notifier.success(f"{self.entity_type.kind()} \"{_label(record)}\" created")
        await _call(self._on_added, record)
        return record

    # ── Delete (two-step: request, then confirm) ─────────────────────

    def request_delete(self, record_id: str) -> None:
        """Open the confirmation step for deleting ``record_id``."""
        self._current(record_id)
        self.pending_delete_id = record_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    async def confirm_delete(self) -> bool:
        """Fire the delete confirmed by the user.

        On success the record leaves the store and the selection goes back to
        the list. On failure the record stays and the confirmation stays open.
        """
        record_id = self.pending_delete_id
        if record_id is None or record_id in self._in_flight:
            return False

        record = self._store.get(record_id)
        label = _label(record) if record is not None else record_id
        self._in_flight.add(record_id)
        try:
            await self._source.delete(record_id)
        except _MUTATION_ERRORS as exc:
            logger.warning(
                "Delete of %s %s failed: %s", self.entity_type.kind(), record_id, exc
            )
            if not self._closed:
                self._notifier.error(_message(exc))
            return False
        finally:
            self._in_flight.discard(record_id)

        if self._closed:
            return True
        self.pending_delete_id = None
        self._store.remove(record_id)
        if self.selected_id == record_id:
            self.clear_selection()
        self._notifier.success(f"{self.entity_type.kind()} \"{label}\" deleted successfully.")
        await _call(self._on_removed, record_id)
        return True

    def _current(self, record_id: str) -> RecordT:
        record = self._store.get(record_id)
        if record is None and self.detail is not None and self.detail.id == record_id:
            record = self.detail
        if record is None:
            raise EntityNotFoundError(self.entity_type.kind(), record_id)
        return record


async def _call(listener: Listener | None, *args: Any) -> None:
    if listener is None:
        return
    result = listener(*args)
    if inspect.isawaitable(result):
        await result


def _message(exc: Exception) -> str:
    return exc.message if isinstance(exc, ApiError) else str(exc)


def _label(record: Record) -> str:
    for name in ("title", "name", "full_name", "student_name"):
        value = getattr(record, name, None)
        if value:
            return str(value)
    return record.id
