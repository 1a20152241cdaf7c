from __future__ import annotations

import io
import json
from typing import Any, Iterable, Sequence

import pandas as pd

MEDIA_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def _cell(value: Any) -> Any:
    if isinstance(value, list):
        return "; ".join(json.dumps(item, ensure_ascii=False) if isinstance(item, dict) else str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return value


def records_frame(records: Iterable[dict], columns: Sequence[str] | None = None) -> pd.DataFrame:
    """One row per record, nested values flattened to text."""

    rows = [{key: _cell(value) for key, value in record.items()} for record in records]
    frame = pd.DataFrame(rows)
    if columns:
        frame = frame.reindex(columns=list(columns))
    return frame


def export_csv(records: Iterable[dict], columns: Sequence[str] | None = None) -> bytes:
    frame = records_frame(records, columns)
    return frame.to_csv(index=False).encode("utf-8")


def export_xlsx(records: Iterable[dict], columns: Sequence[str] | None = None, *, sheet_name: str = "Records") -> bytes:
    frame = records_frame(records, columns)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=sheet_name[:31], index=False)
    return buffer.getvalue()


def export_records(
    records: Iterable[dict],
    fmt: str,
    columns: Sequence[str] | None = None,
    *,
    sheet_name: str = "Records",
) -> tuple[bytes, str]:
    """Return ``(payload, media_type)`` for ``fmt`` in ``csv`` / ``xlsx``."""

    fmt = fmt.lower()
    if fmt == "csv":
        return export_csv(records, columns), MEDIA_TYPES["csv"]
    if fmt == "xlsx":
        return export_xlsx(records, columns, sheet_name=sheet_name), MEDIA_TYPES["xlsx"]
    raise ValueError(f"unsupported export format: {fmt}")
