"""Status-column board with drag-and-drop moves (bid pipeline, RFI board)."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Iterable

from constructx.core.comparators import to_number
from constructx.core.notifications import ToastCenter, failure_message
from constructx.domain import DragResult, MoveOutcome
from constructx.infrastructure.api import ApiError

logger = logging.getLogger(__name__)

StatusChangeFn = Callable[[str, str], Awaitable[Any]]


class KanbanBoard:
    """Records grouped into one ordered list per status column.

    Records whose status is not a column are left off the board, and a
    duplicated id keeps its first occurrence only.
    """

    def __init__(
        self,
        records: Iterable[dict],
        columns: Iterable[str],
        *,
        status_field: str = "status",
        id_field: str = "id",
        toasts: ToastCenter | None = None,
    ) -> None:
        self._status_field = status_field
        self._id_field = id_field
        self._toasts = toasts
        self._columns: dict[str, list[dict]] = {column: [] for column in columns}
        seen: set[str] = set()
        for record in records:
            if not isinstance(record, dict):
                continue
            record_id = str(record.get(id_field))
            if record_id in seen:
                continue
            column = record.get(status_field)
            if column in self._columns:
                self._columns[column].append(record)
                seen.add(record_id)

    @classmethod
    def for_entity(cls, entity, records: Iterable[dict], *, toasts: ToastCenter | None = None) -> "KanbanBoard":
        return cls(records, entity.board_columns, status_field=entity.status_field, toasts=toasts)

    def columns(self) -> dict[str, list[dict]]:
        return {name: list(cards) for name, cards in self._columns.items()}

    def column(self, name: str) -> list[dict]:
        return list(self._columns.get(name, []))

    def column_counts(self) -> dict[str, int]:
        return {name: len(cards) for name, cards in self._columns.items()}

    def column_total(self, column: str, field_name: str) -> float:
        """Sum of a numeric field over one column; unparseable values count as 0."""

        return sum(to_number(card.get(field_name)) or 0.0 for card in self._columns.get(column, []))

    def _index_of(self, column: str, card_id: str) -> int | None:
        for index, card in enumerate(self._columns.get(column, [])):
            if str(card.get(self._id_field)) == card_id:
                return index
        return None

    async def move(self, drop: DragResult, on_status_change: StatusChangeFn) -> MoveOutcome:
        """Apply a drop event.

        A move across columns rewrites the card's status and awaits
        ``on_status_change(card_id, new_status)`` once; if that call fails the
        card goes back to where it came from with its old status.
        """

        destination = drop.destination
        if destination is None:
            return MoveOutcome.NOOP
        source = drop.source
        if source.column == destination.column and source.index == destination.index:
            return MoveOutcome.NOOP
        if destination.column not in self._columns:
            logger.debug("drop on unknown column %r ignored", destination.column)
            return MoveOutcome.NOOP

        card_id = str(drop.card_id)
        source_index = self._index_of(source.column, card_id)
        if source_index is None:
            logger.debug("card %s not found in column %r", card_id, source.column)
            return MoveOutcome.NOOP

        source_cards = self._columns[source.column]
        card = source_cards.pop(source_index)

        if source.column == destination.column:
            source_cards.insert(max(0, min(destination.index, len(source_cards))), card)
            return MoveOutcome.REORDERED

        moved = {**card, self._status_field: destination.column}
        target = self._columns[destination.column]
        target.insert(max(0, min(destination.index, len(target))), moved)
        try:
            await on_status_change(card_id, destination.column)
        except ApiError as exc:
            logger.warning("status change of %s to %r failed, reverting: %s", card_id, destination.column, exc)
            landed = self._index_of(destination.column, card_id)
            if landed is not None:
                target.pop(landed)
            source_cards.insert(min(source_index, len(source_cards)), card)
            if self._toasts is not None:
                self._toasts.error(failure_message("update", "status"))
            return MoveOutcome.REVERTED
        return MoveOutcome.MOVED

    def snapshot(self, total_field: str | None = None) -> list[dict[str, Any]]:
        return [
            {
                "column": name,
                "count": len(cards),
                "total": self.column_total(name, total_field) if total_field else None,
                "cards": list(cards),
            }
            for name, cards in self._columns.items()
        ]


__all__ = ["KanbanBoard"]
