from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceService


class ContractService(ResourceService):
    collection = "contracts"
    scope = "query"
    status_method = "PATCH"

    async def parties(self, contract_id: str) -> list[dict]:
        return await self.list_children(contract_id, "parties")

    async def add_party(self, contract_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(contract_id, "parties", payload)

    async def sections(self, contract_id: str) -> list[dict]:
        return await self.list_children(contract_id, "sections")

    async def add_section(self, contract_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(contract_id, "sections", payload)

    async def milestones(self, contract_id: str) -> list[dict]:
        return await self.list_children(contract_id, "milestones")

    async def add_milestone(self, contract_id: str, payload: Mapping[str, Any]) -> dict:
        return await self.add_child(contract_id, "milestones", payload)

    async def documents(self, contract_id: str) -> list[dict]:
        return await self.list_children(contract_id, "documents")

    async def change_orders(self, contract_id: str) -> list[dict]:
        return await self.list_children(contract_id, "change-orders")
