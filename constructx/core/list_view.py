"""Client-side list state: search, categorical filters, sort, selection and bulk actions."""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping

from constructx.core import page_state
from constructx.core.comparators import SortKey, build_comparators, normaliser_for, sort_records
from constructx.domain import DESCENDING, BulkActionResult, PageState

logger = logging.getLogger(__name__)


def match_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ListViewController:
    """Derives the visible rows of a record collection and tracks row selection.

    The visible list is a pure function of (records, query, filters, sort).
    Selection is kept independently of it: ids stay selected when a later
    filter hides their rows until :meth:`prune_selection` or
    :meth:`clear_selection` is called.
    """

    def __init__(
        self,
        records: Iterable[dict] = (),
        *,
        search_fields: Iterable[str] = (),
        filter_fields: Mapping[str, str] | None = None,
        comparators: Mapping[str, SortKey] | None = None,
        state: PageState | None = None,
        id_field: str = "id",
    ) -> None:
        self._search_fields = list(search_fields)
        self._filter_fields = dict(filter_fields or {})
        self._comparators = dict(comparators or {})
        self._id_field = id_field
        self._state = state or page_state.initial_state()
        self._records: list[dict] = []
        self.set_records(records)

    @classmethod
    def for_entity(cls, entity, records: Iterable[dict] = ()) -> "ListViewController":
        """Build a controller configured from an :class:`EntityDefinition`."""

        return cls(
            records,
            search_fields=entity.search_fields,
            filter_fields=entity.filter_fields(),
            comparators=build_comparators(entity.sort_kinds(), entity.status_values),
            state=page_state.initial_state(entity.default_sort, entity.default_direction),
        )

    # ------------------------------------------------------------------
    # source
    # ------------------------------------------------------------------
    @property
    def records(self) -> list[dict]:
        return list(self._records)

    @property
    def state(self) -> PageState:
        return self._state

    def set_records(self, records: Iterable[dict] | None) -> None:
        self._records = [record for record in (records or []) if isinstance(record, dict)]

    def _record_id(self, record: dict) -> str | None:
        value = record.get(self._id_field)
        return None if value is None else str(value)

    # ------------------------------------------------------------------
    # query, filters, sort
    # ------------------------------------------------------------------
    def set_query(self, text: str | None) -> None:
        self._state = page_state.with_query(self._state, text)

    def set_filter(self, name: str, value: str | None) -> None:
        self._state = page_state.with_filter(self._state, name, value)

    def set_filters(self, filters: Mapping[str, str | None]) -> None:
        for name, value in filters.items():
            self.set_filter(name, value)

    def set_sort(self, key: str, direction: str | None = None) -> None:
        if direction is None:
            self._state = page_state.with_sort(self._state, key)
        else:
            self._state = page_state.with_sort_direction(self._state, key, direction)

    def _matches_query(self, record: dict, needle: str) -> bool:
        for field_name in self._search_fields:
            value = record.get(field_name)
            if value is not None and needle in str(value).casefold():
                return True
        return False

    def _matches_filters(self, record: dict, filters: Mapping[str, str]) -> bool:
        for name, expected in filters.items():
            field_name = self._filter_fields.get(name, name)
            if match_value(record.get(field_name)) != expected:
                return False
        return True

    def visible(self) -> list[dict]:
        view = self._state.view
        needle = view.query.strip().casefold()
        filters = view.active_filters()

        rows = [
            record
            for record in self._records
            if (not needle or self._matches_query(record, needle)) and self._matches_filters(record, filters)
        ]
        if view.sort.key:
            normaliser = normaliser_for(self._comparators, view.sort.key)
            rows = sort_records(rows, view.sort.key, normaliser, descending=view.sort.direction == DESCENDING)
        return rows

    def visible_ids(self) -> list[str]:
        return [rid for rid in (self._record_id(record) for record in self.visible()) if rid is not None]

    # ------------------------------------------------------------------
    # selection
    # ------------------------------------------------------------------
    def toggle_select(self, record_id: str) -> None:
        self._state = page_state.toggle_selected(self._state, str(record_id))

    def select_all(self) -> None:
        self._state = page_state.select_all(self._state, self.visible_ids())

    def clear_selection(self) -> None:
        self._state = page_state.clear_selection(self._state)

    def prune_selection(self) -> None:
        self._state = page_state.keep_selected(self._state, self.visible_ids())

    def is_selected(self, record_id: str) -> bool:
        return str(record_id) in self._state.selection

    def selected_ids(self) -> list[str]:
        """Selected ids in visible order, followed by hidden ones sorted."""

        visible = [rid for rid in self.visible_ids() if rid in self._state.selection]
        return visible + self.hidden_selection()

    def hidden_selection(self) -> list[str]:
        visible = set(self.visible_ids())
        return sorted(rid for rid in self._state.selection if rid not in visible)

    def selected_records(self) -> list[dict]:
        selection = self._state.selection
        return [record for record in self._records if self._record_id(record) in selection]

    def apply_bulk_action(self, action: str, callback: Callable[[str], Any]) -> BulkActionResult:
        """Run ``callback`` once per selected id, then clear the selection."""

        result = BulkActionResult(action=action)
        for record_id in self.selected_ids():
            result.ids.append(record_id)
            result.results[record_id] = callback(record_id)
        logger.debug("bulk action %s applied to %d records", action, len(result.ids))
        self.clear_selection()
        return result


__all__ = ["ListViewController", "match_value"]
