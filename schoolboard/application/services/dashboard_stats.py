"""Derived statistics for dashboard cards: averages, percentages, completion rates."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from schoolboard.domain.entities import RecordT


def average(values: Iterable[float | int | None]) -> float:
    """Mean of the non-missing values, one decimal; 0.0 when there are none."""
    present = [float(v) for v in values if v is not None]
    if not present:
        return 0.0
    return round(sum(present) / len(present), 1)


def percentage(part: float, total: float) -> float:
    """``part`` as a percentage of ``total``, one decimal; 0.0 when total is 0."""
    if total <= 0:
        return 0.0
    return round(part * 100 / total, 1)


def completion_rate(records: Sequence[RecordT], is_complete: Callable[[RecordT], bool]) -> float:
    return percentage(sum(1 for r in records if is_complete(r)), len(records))


def count_by(records: Iterable[RecordT], field_name: str) -> dict[str, int]:
    """Number of records per value of ``field_name``, skipping missing values."""
    counts: dict[str, int] = {}
    for record in records:
        value = record.field_value(field_name)
        if value is None or value == "":
            continue
        key = str(value)
        counts[key] = counts.get(key, 0) + 1
    return counts


def status_breakdown(records: Sequence[RecordT], entity_type: type[RecordT]) -> dict[str, int]:
    """Count per status, with every status of the kind present (zero if unused)."""
    if entity_type.status_type is None:
        return {}
    breakdown = {str(member.value): 0 for member in entity_type.status_type}
    for status, count in count_by(records, "status").items():
        breakdown[status] = breakdown.get(status, 0) + count
    return breakdown


@dataclass
class DashboardSummary:
    """Numbers behind a row of dashboard cards."""

    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    average_score: float = 0.0
    completion_rate: float = 0.0


def summarize(
    records: Sequence[RecordT],
    entity_type: type[RecordT],
    *,
    score_field: str | None = None,
    is_complete: Callable[[RecordT], bool] | None = None,
) -> DashboardSummary:
    """Build the dashboard summary of a loaded collection.

    An empty collection (including one cleared after a failed load) yields
    an all-zero summary.
    """
    if not records:
        return DashboardSummary(by_status=status_breakdown([], entity_type))
    return DashboardSummary(
        total=len(records),
        by_status=status_breakdown(records, entity_type),
        average_score=average(r.field_value(score_field) for r in records) if score_field else 0.0,
        completion_rate=completion_rate(records, is_complete) if is_complete else 0.0,
    )
