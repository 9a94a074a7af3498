"""Derived view — pure filter/search/sort over the loaded records."""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from schoolboard.application.schemas import SortOrder
from schoolboard.domain.entities import RecordT


def matches(record: RecordT, filters: Mapping[str, str], search_term: str = "") -> bool:
    """True when the record satisfies every active filter and the search term.

    Filters are exact equality on the (enum-normalised) field value; the
    search term is a case-insensitive substring of any search field.
    """
    for key, expected in filters.items():
        actual = record.field_value(key)
        if actual is None or str(actual) != expected:
            return False

    needle = search_term.strip().casefold()
    if not needle:
        return True
    for name in type(record).search_fields:
        value = record.field_value(name)
        if value is not None and needle in str(value).casefold():
            return True
    return False


def sort_records(
    records: Sequence[RecordT],
    sort_by: str | None,
    sort_order: SortOrder = "desc",
) -> list[RecordT]:
    """Stable sort on one field. Records without a value go last either way."""
    if not sort_by or not records or sort_by not in type(records[0]).field_names():
        return list(records)

    present = [r for r in records if r.field_value(sort_by) is not None]
    missing = [r for r in records if r.field_value(sort_by) is None]
    present.sort(key=lambda r: _sort_key(r.field_value(sort_by)), reverse=sort_order == "desc")
    return present + missing


def derive_view(
    records: Sequence[RecordT],
    filters: Mapping[str, str],
    search_term: str = "",
    sort_by: str | None = None,
    sort_order: SortOrder = "desc",
    *,
    server_side: bool = False,
) -> list[RecordT]:
    """Filtered and sorted copy of ``records``.

    With ``server_side=True`` the records were already filtered and ordered
    upstream, so they pass through unchanged.
    """
    if server_side:
        return list(records)
    selected = [r for r in records if matches(r, filters, search_term)]
    return sort_records(selected, sort_by, sort_order)


def _sort_key(value: Any) -> Any:
    if isinstance(value, str):
        return value.casefold()
    if isinstance(value, datetime):
        # naive and aware datetimes can appear side by side
        return value.timestamp()
    return value
