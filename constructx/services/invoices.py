from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceService, as_list


class InvoiceService(ResourceService):
    collection = "invoices"
    actions = {
        "send": ("POST", "send"),
        "record-payment": ("POST", "record-payment"),
        "generate-pdf": ("POST", "generate-pdf"),
        "remind": ("POST", "reminders"),
    }

    async def statuses(self) -> list:
        return await self.vocabulary("statuses")

    async def types(self) -> list:
        return await self.vocabulary("types")

    async def send(self, invoice_id: str, payload: Mapping[str, Any] | None = None) -> dict:
        return await self.api.post(self.path(invoice_id, "send"), dict(payload or {}))

    async def record_payment(self, invoice_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.api.post(self.path(invoice_id, "record-payment"), dict(payload))

    async def payments(self, invoice_id: str) -> list[dict]:
        return await self.list_children(invoice_id, "payments")

    async def line_items(self, invoice_id: str) -> list[dict]:
        return await self.list_children(invoice_id, "items")

    async def add_line_item(self, invoice_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(invoice_id, "items", payload)

    async def reorder_line_items(self, invoice_id: str, order: list[str]) -> Any:
        return await self.api.put(self.path(invoice_id, "items", "reorder"), {"items": order})

    async def documents(self, invoice_id: str) -> list[dict]:
        return await self.list_children(invoice_id, "documents")

    async def generate_pdf(self, invoice_id: str) -> dict:
        return await self.api.post(self.path(invoice_id, "generate-pdf"))

    async def reminders(self, invoice_id: str) -> list[dict]:
        return await self.list_children(invoice_id, "reminders")

    async def send_reminder(self, invoice_id: str, payload: Mapping[str, Any] | None = None) -> dict:
        return await self.add_child(invoice_id, "reminders", payload)

    async def overdue(self, project_id: str | None = None) -> list[dict]:
        return as_list(await self.api.get(self.path("overdue"), params={"projectId": project_id}))

    async def comments(self, invoice_id: str) -> list[dict]:
        return await self.list_children(invoice_id, "comments")

    async def add_comment(self, invoice_id: str, text: str) -> dict:
        return await self.add_child(invoice_id, "comments", {"content": text})
