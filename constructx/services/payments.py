from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceService, as_list


class PaymentService(ResourceService):
    collection = "payments"
    actions = {
        "approve": ("POST", "approve"),
    }

    async def statuses(self) -> list:
        return await self.vocabulary("statuses")

    async def types(self) -> list:
        return await self.vocabulary("types")

    async def approve(self, payment_id: str, payload: Mapping[str, Any] | None = None) -> dict:
        return await self.api.post(self.path(payment_id, "approve"), dict(payload or {}))

    async def approval(self, payment_id: str) -> dict:
        return await self.api.get(self.path(payment_id, "approval"))

    async def pending_approval(self) -> list[dict]:
        return as_list(await self.api.get(self.path("pending-approval")))

    async def link_invoice(self, payment_id: str, invoice_id: str) -> dict:
        return await self.api.post(self.path(payment_id, "link-invoice"), {"invoiceId": invoice_id})

    async def link_expense(self, payment_id: str, expense_id: str) -> dict:
        return await self.api.post(self.path(payment_id, "link-expense"), {"expenseId": expense_id})

    # payment methods live under their own collection
    async def payment_methods(self) -> list[dict]:
        return as_list(await self.api.get("/payment-methods"))

    async def create_payment_method(self, payload: Mapping[str, Any]) -> dict:
        return await self.api.post("/payment-methods", dict(payload))

    async def activate_payment_method(self, method_id: str) -> dict:
        return await self.api.put(f"/payment-methods/{method_id}/activate")

    async def deactivate_payment_method(self, method_id: str) -> dict:
        return await self.api.put(f"/payment-methods/{method_id}/deactivate")

    async def set_default_payment_method(self, method_id: str) -> dict:
        return await self.api.put(f"/payment-methods/{method_id}/set-default")
