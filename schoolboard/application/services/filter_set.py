"""Filter predicate set: selected filter values plus the free-text search term."""

from collections.abc import Callable
from enum import Enum

from schoolboard.domain.entities import Record
from schoolboard.domain.exceptions import InvalidFilterError

# Select inputs send this value for "no filter".
ALL = "all"


class FilterPredicateSet:
    """Active filters of one list view, combined with logical AND.

    Every change (filter, search term or reset) calls the registered
    listeners so the owner can jump back to the first page.
    """

    def __init__(
        self,
        entity_type: type[Record],
        on_change: Callable[[], None] | None = None,
    ):
        self._entity_type = entity_type
        self._values: dict[str, str] = {}
        self._search_term = ""
        self._listeners: list[Callable[[], None]] = []
        if on_change is not None:
            self._listeners.append(on_change)

    @property
    def values(self) -> dict[str, str]:
        return dict(self._values)

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def active_filter_count(self) -> int:
        return len(self._values) + (1 if self._search_term.strip() else 0)

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def set_filter(self, key: str, value: str | Enum | None) -> None:
        """Select a value for ``key``; ``None``, ``""`` or ``"all"`` clears it."""
        try:
            domain = self._entity_type.filter_domain(key)
        except KeyError:
            raise InvalidFilterError(self._entity_type.kind(), key) from None

        raw = value.value if isinstance(value, Enum) else value
        if raw is None or raw == "" or raw == ALL:
            self._values.pop(key, None)
        else:
            raw = str(raw)
            if domain is not None and raw not in domain:
                raise InvalidFilterError(self._entity_type.kind(), key, raw)
            self._values[key] = raw
        self._notify()

    def set_search(self, term: str) -> None:
        self._search_term = term
        self._notify()

    def reset(self) -> None:
        """Clear every filter and the search term in one step."""
        self._values.clear()
        self._search_term = ""
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()
