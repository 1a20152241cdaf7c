"""Typed sort keys, built once per entity from the catalog's declared field kinds."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

SortKey = Callable[[Any], Any]


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text.casefold() if text else None


def to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        try:
            result = float(str(value).replace(",", "").strip())
        except (TypeError, ValueError):
            return None
    if result != result:  # NaN
        return None
    return result


def to_date(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif value is None:
        return None
    else:
        raw = str(value).strip()
        if not raw:
            return None
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _boolean(value: Any) -> int | None:
    if isinstance(value, bool):
        return int(value)
    if value is None:
        return None
    lowered = str(value).strip().lower()
    if lowered in {"true", "1", "yes"}:
        return 1
    if lowered in {"false", "0", "no"}:
        return 0
    return None


def _enum(vocabulary: Iterable[str]) -> SortKey:
    order = {value: index for index, value in enumerate(vocabulary)}
    fallback = len(order)

    def key(value: Any) -> tuple[int, str] | None:
        if value is None:
            return None
        text = str(value)
        # values outside the vocabulary sort after it, alphabetically
        return (order.get(text, fallback), text.casefold())

    return key


def build_comparators(kinds: Mapping[str, str], vocabulary: Iterable[str] = ()) -> dict[str, SortKey]:
    """Return ``{field: normaliser}``; a normaliser returns None for values it cannot order."""

    vocabulary = list(vocabulary)
    table: dict[str, SortKey] = {}
    for field_name, kind in kinds.items():
        if kind == "number":
            table[field_name] = to_number
        elif kind == "date":
            table[field_name] = to_date
        elif kind == "bool":
            table[field_name] = _boolean
        elif kind == "enum":
            table[field_name] = _enum(vocabulary)
        else:
            table[field_name] = _text
    return table


def normaliser_for(table: Mapping[str, SortKey], field_name: str) -> SortKey:
    """Fields missing from the table are compared as case-insensitive text."""

    return table.get(field_name, _text)


def sort_records(
    records: list[dict],
    field_name: str,
    normaliser: SortKey,
    *,
    descending: bool = False,
) -> list[dict]:
    """Stable sort on one field; records whose value cannot be normalised go last."""

    present: list[tuple[Any, dict]] = []
    missing: list[dict] = []
    for record in records:
        value = normaliser(record.get(field_name))
        if value is None:
            missing.append(record)
        else:
            present.append((value, record))
    present.sort(key=lambda item: item[0], reverse=descending)
    return [record for _, record in present] + missing


__all__ = ["SortKey", "build_comparators", "normaliser_for", "sort_records", "to_date", "to_number"]
