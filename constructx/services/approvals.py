from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceService, as_list


class ApprovalService(ResourceService):
    """Approval requests, plus the workflows and notifications around them."""

    collection = "approval-requests"
    actions = {
        "approve": ("POST", "approve"),
        "reject": ("POST", "reject"),
        "delegate": ("POST", "delegate"),
        "comment": ("POST", "comment"),
        "remind": ("POST", "send-reminder"),
        "cancel": ("PUT", "cancel"),
    }

    async def statuses(self) -> list:
        return await self.vocabulary("statuses")

    async def entity_types(self) -> list:
        return await self.vocabulary("entity-types")

    async def approve(self, request_id: str, comments: str = "") -> dict:
        return await self.api.post(self.path(request_id, "approve"), {"comments": comments})

    async def reject(self, request_id: str, comments: str = "") -> dict:
        return await self.api.post(self.path(request_id, "reject"), {"comments": comments})

    async def delegate(self, request_id: str, user_id: str, comments: str = "") -> dict:
        return await self.api.post(self.path(request_id, "delegate"), {"delegateTo": user_id, "comments": comments})

    async def cancel(self, request_id: str) -> dict:
        return await self.transition(request_id, "cancel")

    async def comment(self, request_id: str, text: str) -> dict:
        return await self.api.post(self.path(request_id, "comment"), {"comments": text})

    async def history(self, request_id: str) -> list[dict]:
        return await self.list_children(request_id, "history")

    async def attachments(self, request_id: str) -> list[dict]:
        return await self.list_children(request_id, "attachments")

    async def send_reminder(self, request_id: str) -> dict:
        return await self.api.post(self.path(request_id, "send-reminder"))

    # workflows
    async def workflows(self) -> list[dict]:
        return as_list(await self.api.get("/approval-workflows"))

    async def create_workflow(self, payload: Mapping[str, Any]) -> dict:
        return await self.api.post("/approval-workflows", dict(payload))

    async def activate_workflow(self, workflow_id: str) -> dict:
        return await self.api.put(f"/approval-workflows/{workflow_id}/activate")

    async def deactivate_workflow(self, workflow_id: str) -> dict:
        return await self.api.put(f"/approval-workflows/{workflow_id}/deactivate")

    async def workflow_steps(self, workflow_id: str) -> list[dict]:
        return as_list(await self.api.get(f"/approval-workflows/{workflow_id}/steps"))

    async def add_workflow_step(self, workflow_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.api.post(f"/approval-workflows/{workflow_id}/steps", dict(payload))

    async def reorder_workflow_steps(self, workflow_id: str, order: list[str]) -> Any:
        return await self.api.put(f"/approval-workflows/{workflow_id}/steps/reorder", {"steps": order})

    # notifications
    async def notifications(self, user_id: str) -> list[dict]:
        return as_list(await self.api.get(f"/users/{user_id}/approval-notifications"))

    async def mark_notification_read(self, notification_id: str) -> dict:
        return await self.api.put(f"/approval-notifications/{notification_id}/read")

    async def mark_all_notifications_read(self) -> Any:
        return await self.api.put("/approval-notifications/read-all")
