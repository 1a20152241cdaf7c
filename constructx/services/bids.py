from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceService, as_list


class BidService(ResourceService):
    """Bid pipeline: bids, their sections and items, documents, versions and competitors."""

    collection = "bids"
    scope = "global"
    status_method = "PATCH"
    actions = {
        "duplicate": ("POST", "duplicate"),
        "convert-to-project": ("POST", "convert-to-project"),
        "create-version": ("POST", "versions"),
    }

    async def duplicate(self, bid_id: str) -> dict:
        return await self.api.post(self.path(bid_id, "duplicate"))

    async def convert_to_project(self, bid_id: str) -> dict:
        return await self.api.post(self.path(bid_id, "convert-to-project"))

    async def sections(self, bid_id: str) -> list[dict]:
        return await self.list_children(bid_id, "sections")

    async def create_section(self, bid_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(bid_id, "sections", payload)

    async def reorder_sections(self, bid_id: str, order: list[str]) -> Any:
        return await self.api.patch(self.path(bid_id, "sections", "order"), {"sections": order})

    async def items(self, bid_id: str, section_id: str) -> list[dict]:
        return as_list(await self.api.get(self.path(bid_id, "sections", section_id, "items")))

    async def create_item(self, bid_id: str, section_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.api.post(self.path(bid_id, "sections", section_id, "items"), dict(payload))

    async def documents(self, bid_id: str) -> list[dict]:
        return await self.list_children(bid_id, "documents")

    async def upload_document(self, bid_id: str, filename: str, content: bytes, content_type: str | None = None) -> dict:
        return await self.upload(bid_id, "documents", filename, content, content_type)

    async def download_document(self, bid_id: str, document_id: str) -> bytes:
        return await self.download(bid_id, "documents", document_id)

    async def versions(self, bid_id: str) -> list[dict]:
        return await self.list_children(bid_id, "versions")

    async def create_version(self, bid_id: str) -> dict:
        return await self.api.post(self.path(bid_id, "versions"))

    async def restore_version(self, bid_id: str, version_id: str) -> dict:
        return await self.api.post(self.path(bid_id, "versions", version_id, "restore"))

    async def compare_versions(self, bid_id: str, from_version_id: str, to_version_id: str) -> dict:
        return await self.api.get(
            self.path(bid_id, "versions", "compare"),
            params={"fromVersionId": from_version_id, "toVersionId": to_version_id},
        )

    async def competitors(self, bid_id: str) -> list[dict]:
        return await self.list_children(bid_id, "competitors")

    async def add_competitor(self, bid_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(bid_id, "competitors", payload)

    async def metrics(self, **filters: Any) -> dict:
        return await self.api.get(self.path("metrics"), params=filters)

    async def by_status(self, status: str) -> list[dict]:
        return await self.list(status=status)
