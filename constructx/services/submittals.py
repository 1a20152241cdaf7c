from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceService


class SubmittalService(ResourceService):
    collection = "submittals"
    create_nested = True
    actions = {
        "ball-in-court": ("PUT", "ball-in-court"),
        "notify": ("PUT", "notify"),
    }

    async def statuses(self) -> list:
        return await self.vocabulary("statuses")

    async def categories(self) -> list:
        return await self.vocabulary("categories")

    async def set_ball_in_court(self, submittal_id: str, party: str) -> dict:
        return await self.api.put(self.path(submittal_id, "ball-in-court"), {"ballInCourt": party})

    async def items(self, submittal_id: str) -> list[dict]:
        return await self.list_children(submittal_id, "items")

    async def add_item(self, submittal_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(submittal_id, "items", payload)

    async def reviews(self, submittal_id: str) -> list[dict]:
        return await self.list_children(submittal_id, "reviews")

    async def add_review(self, submittal_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(submittal_id, "reviews", payload)

    async def complete_review(self, review_id: str, decision: str, comments: str = "") -> dict:
        return await self.api.put(
            f"/submittal-reviews/{review_id}/complete",
            {"decision": decision, "comments": comments},
        )

    async def attachments(self, submittal_id: str) -> list[dict]:
        return await self.list_children(submittal_id, "attachments")

    async def comments(self, submittal_id: str) -> list[dict]:
        return await self.list_children(submittal_id, "comments")

    async def add_comment(self, submittal_id: str, text: str) -> dict:
        return await self.add_child(submittal_id, "comments", {"content": text})

    async def distribution(self, submittal_id: str) -> list[dict]:
        return await self.list_children(submittal_id, "distribution")

    async def notify_distribution(self, submittal_id: str) -> Any:
        return await self.api.put(self.path(submittal_id, "notify"))
