import sys
from datetime import date
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from constructx.core.catalog import load_catalog
from constructx.core.metrics import compute_stats
from constructx.infrastructure.mock_data import generate_mock_bids, seed_collections


def test_bid_header_figures():
    bids = [
        {"id": "1", "status": "draft", "estimatedValue": 1000},
        {"id": "2", "status": "submitted", "estimatedValue": "2,500"},
        {"id": "3", "status": "won", "estimatedValue": 400},
        {"id": "4", "status": "lost", "estimatedValue": None},
    ]
    stats = compute_stats(bids, load_catalog().entity("bids").stats)

    assert stats == {"totalBids": 4, "activeBids": 2, "totalValue": 3900, "wonBids": 1}


def test_overdue_counts_only_open_items_past_due():
    rfis = seed_collections()["rfis"]
    stats = compute_stats(rfis, load_catalog().entity("rfis").stats, today=date(2025, 6, 21))

    assert stats["totalRFIs"] == 5
    assert stats["openRFIs"] == 3
    assert stats["overdueRFIs"] == 1
    assert stats["respondedRFIs"] == 1


def test_boolean_fields_match_string_vocabulary():
    messages = [{"id": "1", "isRead": False}, {"id": "2", "isRead": True}, {"id": "3", "isRead": False}]
    stats = compute_stats(messages, load_catalog().entity("emails").stats)

    assert stats == {"totalEmails": 3, "unreadEmails": 2}


def test_sum_with_filter_and_malformed_rows():
    invoices = seed_collections()["invoices"] + ["not a record"]
    stats = compute_stats(invoices, load_catalog().entity("invoices").stats)

    assert stats["totalInvoices"] == 4
    assert stats["totalOverdue"] == 13450
    assert stats["totalPaid"] == 130000


def test_mock_bids_are_repeatable_and_cover_every_status():
    first = generate_mock_bids()
    assert first == generate_mock_bids()
    assert {bid["status"] for bid in first} == {"draft", "submitted", "under-review", "won", "lost", "cancelled"}
