"""Abstract collection source (port) — where a list view gets its records."""

from abc import ABC, abstractmethod
from typing import Any, Generic

from schoolboard.application.schemas import ListQuery, Page
from schoolboard.domain.entities import RecordT


class CollectionSource(ABC, Generic[RecordT]):
    """Port for loading and mutating one entity collection.

    Implementations raise the ``ApiError`` family on failure, and
    ``EntityNotFoundError`` or ``DuplicateEntityError`` for a missing or
    clashing record. Callers in the application layer convert all of these
    into user-visible state.
    """

    entity_type: type[RecordT]

    @property
    @abstractmethod
    def filters_server_side(self) -> bool:
        """True when ``load`` already applies filters, search, sort and paging."""
        ...

    @abstractmethod
    async def load(self, query: ListQuery, *, use_cache: bool = True) -> Page[RecordT]:
        """Retrieve a listing for the given query."""
        ...

    @abstractmethod
    async def get(self, record_id: str) -> RecordT:
        """Retrieve one record. Raises EntityNotFoundError if absent."""
        ...

    @abstractmethod
    async def create(self, data: dict[str, Any]) -> RecordT:
        """Create a record from attribute values and return it with its id."""
        ...

    @abstractmethod
    async def update(
        self,
        record_id: str,
        fields: dict[str, Any],
        *,
        changes_description: str | None = None,
    ) -> RecordT | None:
        """Patch a record. Returns the authoritative record when the backend sends one."""
        ...

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        """Delete a record."""
        ...
