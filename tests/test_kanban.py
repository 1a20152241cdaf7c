import asyncio
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from constructx.core.kanban import KanbanBoard
from constructx.core.notifications import ToastCenter
from constructx.domain import DragResult, KanbanPosition, MoveOutcome
from constructx.infrastructure.api import ApiError

COLUMNS = ["draft", "submitted", "under-review", "won", "lost"]


def _board(toasts=None) -> KanbanBoard:
    bids = [
        {"id": "b1", "status": "submitted", "estimatedValue": 100000},
        {"id": "b2", "status": "submitted", "estimatedValue": "250000"},
        {"id": "b3", "status": "won", "estimatedValue": 50000},
        {"id": "b4", "status": "draft", "estimatedValue": None},
        {"id": "b5", "status": "archived"},
        {"id": "b1", "status": "draft"},
    ]
    return KanbanBoard(bids, COLUMNS, toasts=toasts)


class StatusCalls:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, card_id, status):
        self.calls.append((card_id, status))
        if self.fail:
            raise ApiError("transition rejected", status_code=409)
        return {"id": card_id, "status": status}


def _drop(card_id, source, destination=None) -> DragResult:
    return DragResult(
        card_id=card_id,
        source=KanbanPosition(*source),
        destination=KanbanPosition(*destination) if destination else None,
    )


def test_cards_grouped_by_status_with_unknown_and_duplicates_dropped():
    board = _board()
    assert board.column_counts() == {"draft": 1, "submitted": 2, "under-review": 0, "won": 1, "lost": 0}
    assert [card["id"] for card in board.column("draft")] == ["b4"]


def test_cross_column_move_sets_status_and_calls_back_once():
    board = _board()
    on_change = StatusCalls()

    outcome = asyncio.run(board.move(_drop("b1", ("submitted", 0), ("won", 0)), on_change))

    assert outcome is MoveOutcome.MOVED
    assert on_change.calls == [("b1", "won")]
    won = board.column("won")
    assert won[0]["id"] == "b1"
    assert won[0]["status"] == "won"
    assert [card["id"] for card in board.column("submitted")] == ["b2"]


def test_rejected_move_is_reverted_with_error_toast():
    toasts = ToastCenter()
    board = _board(toasts)
    on_change = StatusCalls(fail=True)

    outcome = asyncio.run(board.move(_drop("b2", ("submitted", 1), ("lost", 0)), on_change))

    assert outcome is MoveOutcome.REVERTED
    assert on_change.calls == [("b2", "lost")]
    assert [card["id"] for card in board.column("submitted")] == ["b1", "b2"]
    assert board.column("submitted")[1]["status"] == "submitted"
    assert board.column("lost") == []
    (toast,) = toasts.drain()
    assert toast.description == "Failed to update status. Please try again."


def test_drop_outside_any_column_is_noop():
    board = _board()
    on_change = StatusCalls()
    before = board.columns()

    outcome = asyncio.run(board.move(_drop("b1", ("submitted", 0)), on_change))

    assert outcome is MoveOutcome.NOOP
    assert board.columns() == before
    assert on_change.calls == []


def test_drop_on_same_position_is_noop():
    board = _board()
    on_change = StatusCalls()
    outcome = asyncio.run(board.move(_drop("b1", ("submitted", 0), ("submitted", 0)), on_change))
    assert outcome is MoveOutcome.NOOP
    assert on_change.calls == []


def test_reorder_within_column_is_local_only():
    board = _board()
    on_change = StatusCalls()

    outcome = asyncio.run(board.move(_drop("b1", ("submitted", 0), ("submitted", 1)), on_change))

    assert outcome is MoveOutcome.REORDERED
    assert [card["id"] for card in board.column("submitted")] == ["b2", "b1"]
    assert on_change.calls == []


def test_unknown_card_or_column_is_ignored():
    board = _board()
    on_change = StatusCalls()

    missing = asyncio.run(board.move(_drop("zzz", ("submitted", 0), ("won", 0)), on_change))
    unknown = asyncio.run(board.move(_drop("b1", ("submitted", 0), ("archived", 0)), on_change))

    assert missing is MoveOutcome.NOOP
    assert unknown is MoveOutcome.NOOP
    assert on_change.calls == []


def test_column_totals_parse_numbers_and_ignore_blanks():
    board = _board()
    assert board.column_total("submitted", "estimatedValue") == 350000
    assert board.column_total("draft", "estimatedValue") == 0
    snapshot = board.snapshot("estimatedValue")
    assert snapshot[1] == {
        "column": "submitted",
        "count": 2,
        "total": 350000,
        "cards": board.column("submitted"),
    }


def test_negative_drop_index_lands_at_top_of_column():
    board = _board()
    on_change = StatusCalls()

    moved = asyncio.run(board.move(_drop("b4", ("draft", 0), ("submitted", -1)), on_change))
    reordered = asyncio.run(board.move(_drop("b2", ("submitted", 2), ("submitted", -3)), on_change))

    assert moved is MoveOutcome.MOVED
    assert reordered is MoveOutcome.REORDERED
    assert [card["id"] for card in board.column("submitted")] == ["b2", "b4", "b1"]
