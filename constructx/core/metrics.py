from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable

from constructx.core.catalog import StatDefinition
from constructx.core.comparators import to_date, to_number
from constructx.core.list_view import match_value


def _matches(record: dict, where: dict[str, list[str]]) -> bool:
    for field_name, allowed in where.items():
        if match_value(record.get(field_name)) not in allowed:
            return False
    return True


def _is_overdue(record: dict, field_name: str, today: date) -> bool:
    due = to_date(record.get(field_name))
    return due is not None and due.date() < today


def compute_stat(records: list[dict], stat: StatDefinition, today: date) -> float | int:
    rows = [record for record in records if _matches(record, stat.where)]
    if stat.overdue_field:
        rows = [record for record in rows if _is_overdue(record, stat.overdue_field, today)]
    if stat.kind == "sum":
        return sum(to_number(record.get(stat.field)) or 0 for record in rows)
    return len(rows)


def compute_stats(
    records: Iterable[dict],
    stats: Iterable[StatDefinition],
    today: date | None = None,
) -> dict[str, float | int]:
    """Header figures of a list page, computed from the loaded records."""

    today = today or datetime.now(timezone.utc).date()
    rows = [record for record in records if isinstance(record, dict)]
    return {stat.name: compute_stat(rows, stat, today) for stat in stats}


__all__ = ["compute_stat", "compute_stats"]
