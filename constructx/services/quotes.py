from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceService


class QuoteService(ResourceService):
    collection = "quotes"
    actions = {
        "send": ("POST", "send"),
        "convert": ("POST", "convert"),
        "generate-pdf": ("POST", "generate-pdf"),
        "create-version": ("POST", "versions"),
    }

    async def statuses(self) -> list:
        return await self.vocabulary("statuses")

    async def types(self) -> list:
        return await self.vocabulary("types")

    async def send(self, quote_id: str, payload: Mapping[str, Any] | None = None) -> dict:
        return await self.api.post(self.path(quote_id, "send"), dict(payload or {}))

    async def convert(self, quote_id: str, target: str = "project") -> dict:
        return await self.api.post(self.path(quote_id, "convert"), {"target": target})

    async def sections(self, quote_id: str) -> list[dict]:
        return await self.list_children(quote_id, "sections")

    async def add_section(self, quote_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(quote_id, "sections", payload)

    async def items(self, quote_id: str) -> list[dict]:
        return await self.list_children(quote_id, "items")

    async def add_item(self, quote_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(quote_id, "items", payload)

    async def documents(self, quote_id: str) -> list[dict]:
        return await self.list_children(quote_id, "documents")

    async def generate_pdf(self, quote_id: str) -> dict:
        return await self.api.post(self.path(quote_id, "generate-pdf"))

    async def versions(self, quote_id: str) -> list[dict]:
        return await self.list_children(quote_id, "versions")

    async def restore_version(self, quote_id: str, version_id: str) -> dict:
        return await self.api.put(self.path(quote_id, "restore", version_id))

    async def comments(self, quote_id: str) -> list[dict]:
        return await self.list_children(quote_id, "comments")

    async def add_comment(self, quote_id: str, text: str) -> dict:
        return await self.add_child(quote_id, "comments", {"content": text})
