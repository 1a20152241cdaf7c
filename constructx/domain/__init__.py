"""Domain layer definitions."""

from .pages import (
    ASCENDING,
    DESCENDING,
    BulkActionResult,
    DragResult,
    FilterState,
    KanbanPosition,
    MoveOutcome,
    PageState,
    SortState,
    StatusOption,
    Toast,
)

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "BulkActionResult",
    "DragResult",
    "FilterState",
    "KanbanPosition",
    "MoveOutcome",
    "PageState",
    "SortState",
    "StatusOption",
    "Toast",
]
