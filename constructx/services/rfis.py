from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceService


class RFIService(ResourceService):
    collection = "rfis"
    create_nested = True
    actions = {
        "assign": ("PUT", "assign"),
        "notify": ("PUT", "notify"),
    }

    async def statuses(self) -> list:
        return await self.vocabulary("statuses")

    async def priorities(self) -> list:
        return await self.vocabulary("priorities")

    async def categories(self) -> list:
        return await self.vocabulary("categories")

    async def assign(self, rfi_id: str, user_id: str) -> dict:
        return await self.api.put(self.path(rfi_id, "assign"), {"assignedTo": user_id})

    async def responses(self, rfi_id: str) -> list[dict]:
        return await self.list_children(rfi_id, "responses")

    async def add_response(self, rfi_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(rfi_id, "responses", payload)

    async def mark_response_official(self, response_id: str) -> dict:
        return await self.api.put(f"/rfi-responses/{response_id}/official")

    async def attachments(self, rfi_id: str) -> list[dict]:
        return await self.list_children(rfi_id, "attachments")

    async def comments(self, rfi_id: str) -> list[dict]:
        return await self.list_children(rfi_id, "comments")

    async def add_comment(self, rfi_id: str, text: str) -> dict:
        return await self.add_child(rfi_id, "comments", {"content": text})

    async def distribution(self, rfi_id: str) -> list[dict]:
        return await self.list_children(rfi_id, "distribution")

    async def add_to_distribution(self, rfi_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(rfi_id, "distribution", payload)

    async def notify_distribution(self, rfi_id: str) -> Any:
        return await self.api.put(self.path(rfi_id, "notify"))
