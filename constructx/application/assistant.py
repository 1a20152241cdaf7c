"""AI assistant side panel: conversations, messages, suggested actions and insights."""
from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from constructx.core.notifications import ToastCenter, failure_message
from constructx.core.remote import RemoteCollectionStore, fetch_all
from constructx.infrastructure.api import ApiError
from constructx.services import AssistantService

logger = logging.getLogger(__name__)

EMPTY_OVERVIEW: dict[str, list] = {"conversations": [], "actions": [], "insights": []}


class AssistantPanel:
    def __init__(self, service: AssistantService) -> None:
        self.service = service
        self.toasts = ToastCenter()
        self.overview: RemoteCollectionStore[dict[str, list]] = RemoteCollectionStore(
            self._fetch_overview,
            initial=dict(EMPTY_OVERVIEW),
            toasts=self.toasts,
            error_message=failure_message("load", "assistant data"),
        )
        self.messages: RemoteCollectionStore[list[dict]] = RemoteCollectionStore(
            self._fetch_messages,
            initial=[],
            toasts=self.toasts,
            error_message=failure_message("load", "messages"),
        )

    async def _fetch_overview(self, project_id: str | None) -> dict[str, list]:
        return await fetch_all(
            conversations=self.service.conversations(project_id),
            actions=self.service.actions(project_id),
            insights=self.service.insights(project_id),
        )

    async def _fetch_messages(self, conversation_id: str | None) -> list[dict]:
        if not conversation_id:
            return []
        return await self.service.messages(conversation_id)

    @property
    def project_id(self) -> str | None:
        return self.overview.key

    @property
    def conversation_id(self) -> str | None:
        return self.messages.key

    async def open(self, project_id: str | None = None, conversation_id: str | None = None) -> None:
        await self.overview.set_key(project_id)
        if conversation_id is not None or not self.messages.loaded:
            await self.messages.set_key(conversation_id)

    async def _call(self, verb: str, subject: str, call) -> Any | None:
        try:
            return await call
        except ApiError as exc:
            logger.warning("failed to %s %s: %s", verb, subject, exc)
            self.toasts.error(failure_message(verb, subject))
            return None

    async def create_conversation(self, title: str | None = None) -> dict | None:
        payload = {"title": title or "New conversation", "projectId": self.project_id}
        created = await self._call("create", "conversation", self.service.create_conversation(payload))
        if created is not None:
            await self.overview.refresh()
            await self.messages.set_key(str(created.get("id")))
        return created

    async def send_message(self, conversation_id: str, content: str) -> dict | None:
        if not content.strip():
            raise ValueError("message content is required")
        sent = await self._call("send", "message", self.service.send_message(conversation_id, content))
        if sent is not None:
            if self.messages.key == conversation_id:
                await self.messages.refresh()
            else:
                await self.messages.set_key(conversation_id)
        return sent

    async def delete_conversation(self, conversation_id: str) -> bool:
        call = self.service.delete_conversation(conversation_id)
        try:
            await call
        except ApiError as exc:
            logger.warning("failed to delete conversation %s: %s", conversation_id, exc)
            self.toasts.error(failure_message("delete", "conversation"))
            return False
        if self.messages.key == conversation_id:
            await self.messages.set_key(None)
        await self.overview.refresh()
        self.toasts.success("Conversation deleted successfully.")
        return True

    async def resolve_action(self, action_id: str, decision: str) -> dict | None:
        if decision == "accept":
            call = self.service.accept_action(action_id)
        elif decision == "reject":
            call = self.service.reject_action(action_id)
        else:
            raise ValueError(f"unknown decision {decision!r}")
        result = await self._call(decision, "action", call)
        if result is not None:
            self.toasts.success(f"Action {decision}ed.")
            await self.overview.refresh()
        return result

    async def mark_insight_read(self, insight_id: str) -> dict | None:
        result = await self._call("update", "insight", self.service.mark_insight_read(insight_id))
        if result is not None:
            await self.overview.refresh()
        return result

    def snapshot(self) -> dict[str, Any]:
        overview = self.overview.data or EMPTY_OVERVIEW
        return {
            "project_id": self.project_id,
            "conversation_id": self.conversation_id,
            "conversations": overview.get("conversations", []),
            "actions": overview.get("actions", []),
            "insights": overview.get("insights", []),
            "messages": self.messages.data or [],
            "is_loading": self.overview.is_loading or self.messages.is_loading,
            "error": self.overview.error or self.messages.error,
            "toasts": [asdict(toast) for toast in self.toasts.drain()],
        }


__all__ = ["AssistantPanel"]
