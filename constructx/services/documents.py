from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceService, as_list


class DocumentService(ResourceService):
    collection = "documents"
    scope = "query"
    create_nested = True
    actions = {
        "request-approval": ("POST", "approvals"),
    }

    async def categories(self) -> list:
        return await self.vocabulary("categories")

    async def statuses(self) -> list:
        return await self.vocabulary("statuses")

    async def folders(self, project_id: str | None = None) -> list[dict]:
        return as_list(await self.api.get("/folders", params={"projectId": project_id}))

    async def create_folder(self, project_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.api.post(f"/projects/{project_id}/folders", dict(payload))

    async def versions(self, document_id: str) -> list[dict]:
        return await self.list_children(document_id, "versions")

    async def upload_version(self, document_id: str, filename: str, content: bytes, content_type: str | None = None) -> dict:
        return await self.upload(document_id, "versions", filename, content, content_type)

    async def restore_version(self, document_id: str, version_id: str) -> dict:
        return await self.api.put(self.path(document_id, "versions", version_id, "restore"))

    async def comments(self, document_id: str) -> list[dict]:
        return await self.list_children(document_id, "comments")

    async def add_comment(self, document_id: str, text: str) -> dict:
        return await self.add_child(document_id, "comments", {"content": text})

    async def approvals(self, document_id: str) -> list[dict]:
        return await self.list_children(document_id, "approvals")

    async def access(self, document_id: str) -> list[dict]:
        return await self.list_children(document_id, "access")

    async def grant_access(self, document_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(document_id, "access", payload)
