"""Email client page: account and folder navigation over a filterable message list."""
from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Mapping

from constructx.core.catalog import EntityDefinition
from constructx.core.list_view import ListViewController
from constructx.core.notifications import ToastCenter, failure_message
from constructx.core.remote import RemoteCollectionStore, fetch_all
from constructx.infrastructure.api import ApiError
from constructx.services import EmailService

logger = logging.getLogger(__name__)

INBOX = "Inbox"

# past tense used in the confirmation toast
ACTION_DONE = {
    "read": "marked as read",
    "unread": "marked as unread",
    "flag": "flagged",
    "unflag": "unflagged",
    "archive": "archived",
    "delete": "deleted",
}


class EmailPanel:
    """Keyed on ``(account_id, folder_id, project_id)``; a missing account or folder means the default."""

    def __init__(self, service: EmailService, entity: EntityDefinition) -> None:
        self.service = service
        self.toasts = ToastCenter()
        self.view = ListViewController.for_entity(entity)
        self.store: RemoteCollectionStore[dict[str, Any]] = RemoteCollectionStore(
            self._fetch,
            key=(None, None, None),
            initial={"accounts": [], "folders": [], "messages": [], "account_id": None, "folder_id": None},
            toasts=self.toasts,
            error_message=failure_message("load", "email data"),
        )

    async def _fetch(self, key: tuple[str | None, str | None, str | None]) -> dict[str, Any]:
        account_id, folder_id, project_id = key
        accounts = await self.service.accounts()
        if account_id is None and accounts:
            default = next((item for item in accounts if item.get("isDefault")), accounts[0])
            account_id = default["id"]
        if account_id is None:
            return {"accounts": accounts, "folders": [], "messages": [], "account_id": None, "folder_id": None}
        if folder_id is None:
            folders = await self.service.folders(account_id)
            inbox = next((item for item in folders if item.get("name") == INBOX), None)
            folder_id = inbox["id"] if inbox else None
            messages = await self.service.messages(account_id, folder_id, project_id)
            loaded = {"folders": folders, "messages": messages}
        else:
            loaded = await fetch_all(
                folders=self.service.folders(account_id),
                messages=self.service.messages(account_id, folder_id, project_id),
            )
        return {"accounts": accounts, "account_id": account_id, "folder_id": folder_id, **loaded}

    def _sync(self) -> None:
        self.view.set_records((self.store.data or {}).get("messages", []))

    async def open(
        self,
        account_id: str | None = None,
        folder_id: str | None = None,
        project_id: str | None = None,
    ) -> None:
        await self.store.set_key((account_id, folder_id, project_id))
        self._sync()

    async def refresh(self) -> None:
        await self.store.refresh()
        self._sync()

    def apply_view(
        self,
        query: str | None = None,
        filters: Mapping[str, str | None] | None = None,
        sort: str | None = None,
        direction: str | None = None,
    ) -> None:
        """Apply query, filters and sort; a sort without a direction only switches keys."""

        if query is not None:
            self.view.set_query(query)
        if filters:
            self.view.set_filters(filters)
        current = self.view.state.view.sort.key
        if direction and (sort or current):
            self.view.set_sort(sort or current, direction)
        elif sort and sort != current:
            self.view.set_sort(sort)

    async def compose(self, payload: Mapping[str, Any]) -> dict | None:
        data = self.store.data or {}
        account_id = payload.get("accountId") or data.get("account_id")
        if not account_id:
            raise ValueError("no email account selected")
        if not (payload.get("recipients") or payload.get("to")):
            raise ValueError("at least one recipient is required")
        try:
            sent = await self.service.send(str(account_id), payload, project_id=self.store.key[2])
        except ApiError as exc:
            logger.warning("failed to send email: %s", exc)
            self.toasts.error(failure_message("send", "email"))
            return None
        self.toasts.success("Email sent successfully.")
        await self.refresh()
        return sent

    async def act(self, message_id: str, action: str) -> dict | None:
        if action not in ACTION_DONE:
            raise ValueError(f"unknown email action {action!r}")
        try:
            result = await self.service.perform(message_id, action)
        except ApiError as exc:
            logger.warning("email %s failed for %s: %s", action, message_id, exc)
            self.toasts.error(failure_message("update", "email"))
            return None
        self.toasts.success(f"Email {ACTION_DONE[action]} successfully.")
        await self.refresh()
        return result if result is not None else {}

    def snapshot(self) -> dict[str, Any]:
        data = self.store.data or {}
        view = self.view.state.view
        return {
            "accounts": data.get("accounts", []),
            "account_id": data.get("account_id"),
            "folders": data.get("folders", []),
            "folder_id": data.get("folder_id"),
            "messages": self.view.visible(),
            "total": len(self.view.records),
            "query": view.query,
            "filters": dict(view.filters),
            "sort": {"key": view.sort.key, "direction": view.sort.direction},
            "is_loading": self.store.is_loading,
            "error": self.store.error,
            "toasts": [asdict(toast) for toast in self.toasts.drain()],
        }


__all__ = ["EmailPanel"]
