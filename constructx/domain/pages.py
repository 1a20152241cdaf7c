"""Value objects describing the state of an open page."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ASCENDING = "asc"
DESCENDING = "desc"


@dataclass(frozen=True, slots=True)
class SortState:
    key: str | None = None
    direction: str = ASCENDING


@dataclass(frozen=True, slots=True)
class FilterState:
    """Free-text query, categorical filters and sort order of a list."""

    query: str = ""
    filters: dict[str, str] = field(default_factory=dict)
    sort: SortState = field(default_factory=SortState)

    def active_filters(self) -> dict[str, str]:
        return {name: value for name, value in self.filters.items() if value}


@dataclass(frozen=True, slots=True)
class PageState:
    """Everything a list page needs besides the records themselves.

    Instances are never mutated; the transition functions in
    :mod:`constructx.core.page_state` return a new value for every change.
    """

    view: FilterState = field(default_factory=FilterState)
    selection: frozenset[str] = frozenset()
    is_loading: bool = False
    error: str | None = None


@dataclass(frozen=True, slots=True)
class StatusOption:
    value: str
    label: str
    color: str | None = None


@dataclass(slots=True)
class Toast:
    """Transient notification shown once to the user."""

    title: str
    description: str
    variant: str = "default"

    @property
    def destructive(self) -> bool:
        return self.variant == "destructive"


@dataclass(frozen=True, slots=True)
class KanbanPosition:
    column: str
    index: int


@dataclass(frozen=True, slots=True)
class DragResult:
    """Drop event reported by the board; ``destination`` is None outside any column."""

    card_id: str
    source: KanbanPosition
    destination: KanbanPosition | None = None


class MoveOutcome(str, Enum):
    NOOP = "noop"
    REORDERED = "reordered"
    MOVED = "moved"
    REVERTED = "reverted"


@dataclass(slots=True)
class BulkActionResult:
    action: str
    ids: list[str] = field(default_factory=list)
    results: dict[str, Any] = field(default_factory=dict)
