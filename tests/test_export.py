import io
import sys
from pathlib import Path

import pandas as pd
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from constructx.exporters.records import MEDIA_TYPES, export_records, records_frame

RECORDS = [
    {"id": "inv-1", "invoiceNumber": "INV-2025-001", "totalAmount": 125000, "tags": ["billing", "q2"]},
    {"id": "inv-2", "invoiceNumber": "INV-2025-002", "totalAmount": 98000, "client": {"name": "City Development"}},
]


def test_csv_export_has_one_row_per_record():
    payload, media_type = export_records(RECORDS, "csv")

    frame = pd.read_csv(io.BytesIO(payload))
    assert media_type == MEDIA_TYPES["csv"]
    assert list(frame["id"]) == ["inv-1", "inv-2"]
    assert frame.loc[0, "tags"] == "billing; q2"
    assert frame.loc[1, "client"] == '{"name": "City Development"}'


def test_xlsx_export_round_trips_through_openpyxl():
    payload, media_type = export_records(RECORDS, "XLSX", sheet_name="Invoices")

    frame = pd.read_excel(io.BytesIO(payload), sheet_name="Invoices", engine="openpyxl")
    assert media_type == MEDIA_TYPES["xlsx"]
    assert list(frame["invoiceNumber"]) == ["INV-2025-001", "INV-2025-002"]
    assert list(frame["totalAmount"]) == [125000, 98000]


def test_columns_select_and_order_output():
    frame = records_frame(RECORDS, columns=["invoiceNumber", "id", "dueDate"])
    assert list(frame.columns) == ["invoiceNumber", "id", "dueDate"]
    assert frame["dueDate"].isna().all()


def test_unsupported_format():
    with pytest.raises(ValueError):
        export_records(RECORDS, "pdf")
