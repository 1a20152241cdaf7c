"""Pure transitions over :class:`PageState`.

Each function takes the current state and returns a new one; nothing here
touches records or performs I/O.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from constructx.domain import ASCENDING, DESCENDING, FilterState, PageState, SortState

# select boxes send "all" to mean "no filter"
UNCONSTRAINED = {"", "all"}


def initial_state(sort_key: str | None = None, direction: str = ASCENDING) -> PageState:
    return PageState(view=FilterState(sort=SortState(key=sort_key, direction=direction)))


def with_query(state: PageState, text: str | None) -> PageState:
    return replace(state, view=replace(state.view, query=(text or "")))


def with_filter(state: PageState, name: str, value: str | None) -> PageState:
    filters = dict(state.view.filters)
    value = "" if value is None else str(value)
    if value.strip().lower() in UNCONSTRAINED:
        filters.pop(name, None)
    else:
        filters[name] = value
    return replace(state, view=replace(state.view, filters=filters))


def with_sort(state: PageState, key: str) -> PageState:
    current = state.view.sort
    if current.key == key:
        direction = DESCENDING if current.direction == ASCENDING else ASCENDING
    else:
        direction = ASCENDING
    return replace(state, view=replace(state.view, sort=SortState(key=key, direction=direction)))


def with_sort_direction(state: PageState, key: str, direction: str) -> PageState:
    if direction not in (ASCENDING, DESCENDING):
        raise ValueError(f"unknown sort direction {direction!r}")
    return replace(state, view=replace(state.view, sort=SortState(key=key, direction=direction)))


def toggle_selected(state: PageState, record_id: str) -> PageState:
    selection = set(state.selection)
    if record_id in selection:
        selection.remove(record_id)
    else:
        selection.add(record_id)
    return replace(state, selection=frozenset(selection))


def select_all(state: PageState, visible_ids: Iterable[str]) -> PageState:
    visible = frozenset(visible_ids)
    if state.selection and state.selection == visible:
        return replace(state, selection=frozenset())
    return replace(state, selection=visible)


def clear_selection(state: PageState) -> PageState:
    return replace(state, selection=frozenset())


def keep_selected(state: PageState, allowed_ids: Iterable[str]) -> PageState:
    return replace(state, selection=state.selection & frozenset(allowed_ids))


def with_status(state: PageState, *, is_loading: bool, error: str | None) -> PageState:
    return replace(state, is_loading=is_loading, error=error)
