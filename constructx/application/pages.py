"""One open list page: its records, view state, board and edit dialog."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Awaitable, Mapping

from constructx.core import page_state
from constructx.core.catalog import EntityDefinition
from constructx.core.forms import FormDraftController
from constructx.core.kanban import KanbanBoard
from constructx.core.list_view import ListViewController
from constructx.core.metrics import compute_stats
from constructx.core.notifications import ToastCenter, failure_message, sentence_case
from constructx.core.remote import RemoteCollectionStore
from constructx.domain import BulkActionResult, DragResult, MoveOutcome, PageState
from constructx.exporters.records import MEDIA_TYPES, export_records
from constructx.infrastructure.api import ApiError
from constructx.services import ResourceService

logger = logging.getLogger(__name__)


class PageSession:
    """Controllers behind one open entity page.

    The store owns the fetched records, the list view owns query, filters,
    sort and selection, and every mutation ends with :meth:`refresh`.
    """

    def __init__(
        self,
        session_id: str,
        entity: EntityDefinition,
        service: ResourceService,
        *,
        project_id: str | None = None,
        today: date | None = None,
    ) -> None:
        self.id = session_id
        self.entity = entity
        self.service = service
        self.toasts = ToastCenter()
        self.view = ListViewController.for_entity(entity)
        self.store: RemoteCollectionStore[list[dict]] = RemoteCollectionStore(
            self._fetch,
            key=project_id,
            initial=[],
            toasts=self.toasts,
            error_message=failure_message("load", entity.label),
        )
        self.board: KanbanBoard | None = None
        self.form: FormDraftController | None = None
        self._today = today

    # ------------------------------------------------------------------
    # loading
    # ------------------------------------------------------------------
    @property
    def project_id(self) -> str | None:
        return self.store.key

    async def _fetch(self, project_id: str | None) -> list[dict]:
        return await self.service.list(project_id)

    def _sync(self) -> None:
        self.view.set_records(self.store.data or [])
        self._rebuild_board()

    def _rebuild_board(self) -> None:
        if self.entity.board_columns:
            self.board = KanbanBoard.for_entity(self.entity, self.view.visible(), toasts=self.toasts)

    async def load(self) -> bool:
        applied = await self.store.load()
        self._sync()
        return applied

    async def set_key(self, project_id: str | None) -> bool:
        applied = await self.store.set_key(project_id)
        self._sync()
        return applied

    async def refresh(self, *_: Any) -> bool:
        return await self.load()

    def close(self) -> None:
        self.store.close()

    @property
    def state(self) -> PageState:
        return page_state.with_status(self.view.state, is_loading=self.store.is_loading, error=self.store.error)

    # ------------------------------------------------------------------
    # view state
    # ------------------------------------------------------------------
    def set_query(self, text: str | None) -> None:
        self.view.set_query(text)
        self._rebuild_board()

    def set_filters(self, filters: Mapping[str, str | None]) -> None:
        self.view.set_filters(filters)
        self._rebuild_board()

    def set_sort(self, key: str, direction: str | None = None) -> None:
        self.view.set_sort(key, direction)
        self._rebuild_board()

    def select(self, mode: str, record_id: str | None = None) -> None:
        if mode == "toggle":
            if not record_id:
                raise ValueError("toggle needs an id")
            self.view.toggle_select(record_id)
        elif mode == "all":
            self.view.select_all()
        elif mode == "clear":
            self.view.clear_selection()
        elif mode == "prune":
            self.view.prune_selection()
        else:
            raise ValueError(f"unknown selection mode {mode!r}")

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------
    async def _run_bulk(self, action: str, calls: BulkActionResult, verb: str) -> BulkActionResult:
        ids = list(calls.ids)
        outcomes = await asyncio.gather(*(calls.results[rid] for rid in ids), return_exceptions=True)
        failed: list[str] = []
        for rid, outcome in zip(ids, outcomes):
            if isinstance(outcome, ApiError):
                logger.warning("bulk %s failed for %s: %s", action, rid, outcome)
                failed.append(rid)
            elif isinstance(outcome, BaseException):
                raise outcome
            calls.results[rid] = None if isinstance(outcome, BaseException) else outcome
        label = self.entity.label
        if failed:
            self.toasts.error(failure_message(verb, f"{len(failed)} of {len(ids)} {label}"))
        elif ids:
            self.toasts.success(f"{len(ids)} {label} {verb}d successfully.")
        await self.refresh()
        return calls

    async def bulk_delete(self) -> BulkActionResult:
        calls = self.view.apply_bulk_action("delete", self.service.delete)
        return await self._run_bulk("delete", calls, "delete")

    async def bulk_status(self, status: str) -> BulkActionResult:
        if not self.entity.bulk_status:
            raise ValueError(f"{self.entity.name} does not support bulk status changes")
        if status not in self.entity.status_values:
            raise ValueError(f"unknown status {status!r}")
        calls = self.view.apply_bulk_action("status", lambda rid: self.service.set_status(rid, status))
        return await self._run_bulk("status", calls, "update")

    def export(self, fmt: str, scope: str = "visible") -> tuple[bytes, str]:
        if scope == "selected":
            records = self.view.selected_records()
        elif scope == "visible":
            records = self.view.visible()
        else:
            raise ValueError(f"unknown export scope {scope!r}")
        return export_records(records, fmt, sheet_name=self.entity.label)

    def bulk_export(self, fmt: str) -> tuple[bytes, str]:
        if fmt.lower() not in MEDIA_TYPES:
            raise ValueError(f"unsupported export format: {fmt}")
        by_id = {str(record.get("id")): record for record in self.view.selected_records()}
        result = self.view.apply_bulk_action("export", by_id.get)
        records = [record for record in result.results.values() if record is not None]
        payload = export_records(records, fmt, sheet_name=self.entity.label)
        self.toasts.success(f"{self.entity.label} exported as {fmt.upper()} successfully.", title="Export Complete")
        return payload

    async def _mutate(self, verb: str, call: Awaitable[Any], success: str) -> Any | None:
        try:
            result = await call
        except ApiError as exc:
            logger.warning("failed to %s %s: %s", verb, self.entity.singular, exc)
            self.toasts.error(failure_message(verb, self.entity.singular))
            return None
        self.toasts.success(success)
        await self.refresh()
        return result if result is not None else {}

    async def perform(self, record_id: str, action: str, payload: Mapping[str, Any] | None = None) -> Any | None:
        call = self.service.perform(record_id, action, payload)
        return await self._mutate(action, call, f"{sentence_case(self.entity.singular)} {action} completed.")

    async def delete_record(self, record_id: str) -> Any | None:
        call = self.service.delete(record_id)
        return await self._mutate("delete", call, f"{sentence_case(self.entity.singular)} deleted successfully.")

    async def upload_attachment(
        self,
        record_id: str,
        filename: str,
        content: bytes,
        content_type: str | None = None,
        sub: str = "attachments",
    ) -> Any | None:
        call = self.service.upload(record_id, sub, filename, content, content_type)
        return await self._mutate("upload", call, f"{filename} uploaded successfully.")

    async def move_card(self, drop: DragResult) -> MoveOutcome:
        if self.board is None:
            raise ValueError(f"{self.entity.name} has no board")
        outcome = await self.board.move(drop, self.service.set_status)
        if outcome is MoveOutcome.MOVED:
            for record in self.store.data or []:
                if str(record.get("id")) == str(drop.card_id):
                    record[self.entity.status_field] = drop.destination.column
            self.toasts.success(f"{sentence_case(self.entity.singular)} moved to {drop.destination.column}.")
            await self.refresh()
        return outcome

    # ------------------------------------------------------------------
    # edit dialog
    # ------------------------------------------------------------------
    def find_record(self, record_id: str) -> dict:
        for record in self.store.data or []:
            if str(record.get("id")) == str(record_id):
                return record
        raise KeyError(record_id)

    def open_draft(self, record_id: str | None = None, defaults: Mapping[str, Any] | None = None) -> FormDraftController:
        options = {"subject": self.entity.singular, "toasts": self.toasts, "on_saved": self.refresh}
        if record_id is not None:
            self.form = FormDraftController.for_record(self.find_record(record_id), defaults, **options)
        else:
            initial = {self.entity.status_field: self.entity.status_values[0]} if self.entity.statuses else {}
            initial.update(defaults or {})
            self.form = FormDraftController.for_create(initial, **options)
        return self.form

    def close_draft(self) -> None:
        if self.form is not None:
            self.form.cancel()
        self.form = None

    async def submit_draft(self) -> Any | None:
        if self.form is None:
            raise ValueError("no draft is open")
        saved = await self.form.submit(
            lambda draft: self.service.create(draft, self.project_id),
            self.service.update,
        )
        if not self.form.is_open:
            self.form = None
        return saved

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------
    def snapshot(self) -> dict[str, Any]:
        state = self.state
        view = state.view
        records = self.view.records
        visible = self.view.visible()
        return {
            "id": self.id,
            "entity": self.entity.name,
            "label": self.entity.label,
            "project_id": self.project_id,
            "rows": visible,
            "total": len(records),
            "visible_count": len(visible),
            "query": view.query,
            "filters": dict(view.filters),
            "sort": {"key": view.sort.key, "direction": view.sort.direction},
            "selection": self.view.selected_ids(),
            "hidden_selection": len(self.view.hidden_selection()),
            "statuses": [asdict(option) for option in self.entity.status_options()],
            "stats": compute_stats(records, self.entity.stats, self._today),
            "board": self.board.snapshot(self.entity.board_total_field) if self.board else None,
            "draft": (
                {"record_id": self.form.record_id, "values": dict(self.form.draft), "is_submitting": self.form.is_submitting}
                if self.form
                else None
            ),
            "is_loading": state.is_loading,
            "error": state.error,
            "toasts": [asdict(toast) for toast in self.toasts.drain()],
        }


__all__ = ["PageSession"]
