from __future__ import annotations

from typing import Any, Mapping

from constructx.infrastructure.api import ApiClient

from .base import as_list


class AssistantService:
    """AI assistant endpoints under ``/ai``."""

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def config(self) -> dict:
        return await self._api.get("/ai/assistant")

    async def update_config(self, payload: Mapping[str, Any]) -> dict:
        return await self._api.put("/ai/assistant", dict(payload))

    async def enable(self) -> dict:
        return await self._api.put("/ai/assistant/enable")

    async def disable(self) -> dict:
        return await self._api.put("/ai/assistant/disable")

    async def conversations(self, project_id: str | None = None) -> list[dict]:
        return as_list(await self._api.get("/ai/conversations", params={"projectId": project_id}))

    async def create_conversation(self, payload: Mapping[str, Any]) -> dict:
        return await self._api.post("/ai/conversations", dict(payload))

    async def update_conversation(self, conversation_id: str, payload: Mapping[str, Any]) -> dict:
        return await self._api.put(f"/ai/conversations/{conversation_id}", dict(payload))

    async def archive_conversation(self, conversation_id: str) -> dict:
        return await self.update_conversation(conversation_id, {"status": "archived"})

    async def delete_conversation(self, conversation_id: str) -> None:
        await self._api.delete(f"/ai/conversations/{conversation_id}")

    async def messages(self, conversation_id: str) -> list[dict]:
        return as_list(await self._api.get(f"/ai/conversations/{conversation_id}/messages"))

    async def send_message(self, conversation_id: str, content: str) -> dict:
        return await self._api.post(
            f"/ai/conversations/{conversation_id}/messages",
            {"role": "user", "content": content},
        )

    async def actions(self, project_id: str | None = None) -> list[dict]:
        return as_list(await self._api.get("/ai/actions", params={"projectId": project_id}))

    async def accept_action(self, action_id: str) -> dict:
        return await self._api.post(f"/ai/actions/{action_id}/accept")

    async def reject_action(self, action_id: str) -> dict:
        return await self._api.post(f"/ai/actions/{action_id}/reject")

    async def insights(self, project_id: str | None = None) -> list[dict]:
        return as_list(await self._api.get("/ai/insights", params={"projectId": project_id}))

    async def mark_insight_read(self, insight_id: str) -> dict:
        return await self._api.put(f"/ai/insights/{insight_id}/read")
