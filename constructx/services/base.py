"""Generic REST client for one upstream collection."""
from __future__ import annotations

import logging
from typing import Any, ClassVar, Mapping

from constructx.infrastructure.api import ApiClient

logger = logging.getLogger(__name__)


def as_list(payload: Any) -> list[dict]:
    """Accept both bare arrays and ``{"items": [...]}`` / ``{"data": [...]}`` envelopes."""

    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, dict)]
    if isinstance(payload, dict):
        for key in ("items", "data", "results"):
            value = payload.get(key)
            if isinstance(value, list):
                return [item for item in value if isinstance(item, dict)]
    return []


class UnknownActionError(ValueError):
    """Raised for a row action the service does not offer."""


class ResourceService:
    """CRUD, status transitions and sub-resources of ``/{collection}``.

    ``scope`` decides how lists are narrowed to a project:

    * ``nested``: ``GET /projects/{projectId}/{collection}``
    * ``query``: ``GET /{collection}?projectId=...``
    * ``global``: ``GET /{collection}``
    """

    collection: str = ""
    scope: str = "nested"
    create_nested: ClassVar[bool] = False
    status_method: ClassVar[str] = "PUT"
    # action name -> (HTTP method, path suffix)
    actions: ClassVar[dict[str, tuple[str, str]]] = {}

    def __init__(self, api: ApiClient, *, collection: str | None = None, scope: str | None = None) -> None:
        self._api = api
        self.collection = collection or self.collection
        self.scope = scope or self.scope
        if not self.collection:
            raise ValueError(f"{type(self).__name__} needs a collection")

    @property
    def api(self) -> ApiClient:
        return self._api

    def path(self, *parts: Any) -> str:
        return "/".join([f"/{self.collection}", *(str(part) for part in parts)])

    def list_path(self, project_id: str | None = None) -> str:
        if self.scope == "nested" and project_id:
            return f"/projects/{project_id}/{self.collection}"
        return f"/{self.collection}"

    # ------------------------------------------------------------------
    # records
    # ------------------------------------------------------------------
    async def list(self, project_id: str | None = None, **filters: Any) -> list[dict]:
        params = dict(filters)
        if self.scope == "query" and project_id:
            params["projectId"] = project_id
        return as_list(await self._api.get(self.list_path(project_id), params=params))

    async def get(self, record_id: str) -> dict:
        return await self._api.get(self.path(record_id))

    async def create(self, payload: Mapping[str, Any], project_id: str | None = None) -> dict:
        if self.create_nested and project_id:
            return await self._api.post(f"/projects/{project_id}/{self.collection}", dict(payload))
        body = dict(payload)
        if project_id and self.scope != "global":
            body.setdefault("projectId", project_id)
        return await self._api.post(self.path(), body)

    async def update(self, record_id: str, payload: Mapping[str, Any]) -> dict:
        return await self._api.put(self.path(record_id), dict(payload))

    async def delete(self, record_id: str) -> None:
        await self._api.delete(self.path(record_id))

    async def set_status(self, record_id: str, status: str) -> dict:
        body = {"status": status}
        if self.status_method == "PATCH":
            return await self._api.patch(self.path(record_id, "status"), body)
        return await self._api.put(self.path(record_id, "status"), body)

    async def transition(self, record_id: str, action: str, payload: Mapping[str, Any] | None = None) -> Any:
        """``PUT /{collection}/{id}/{action}``: named state transition."""

        return await self._api.put(self.path(record_id, action), dict(payload) if payload else None)

    async def perform(self, record_id: str, action: str, payload: Mapping[str, Any] | None = None) -> Any:
        """Run one of the row actions declared in :attr:`actions`."""

        if action == "status":
            status = (payload or {}).get("status")
            if not status:
                raise UnknownActionError("status action needs a status")
            return await self.set_status(record_id, str(status))
        try:
            method, suffix = self.actions[action]
        except KeyError as exc:
            raise UnknownActionError(f"{self.collection} has no action {action!r}") from exc
        body = dict(payload) if payload else None
        path = self.path(record_id, suffix)
        logger.debug("%s %s", method, path)
        if method == "POST":
            return await self._api.post(path, body)
        if method == "PATCH":
            return await self._api.patch(path, body)
        return await self._api.put(path, body)

    # ------------------------------------------------------------------
    # vocabularies and sub-resources
    # ------------------------------------------------------------------
    async def vocabulary(self, name: str) -> list:
        payload = await self._api.get(self.path(name))
        return payload if isinstance(payload, list) else as_list(payload)

    async def list_children(self, record_id: str, sub: str) -> list[dict]:
        return as_list(await self._api.get(self.path(record_id, sub)))

    async def add_child(self, record_id: str, sub: str, payload: Mapping[str, Any] | None = None) -> dict:
        return await self._api.post(self.path(record_id, sub), dict(payload or {}))

    async def update_child(self, record_id: str, sub: str, child_id: str, payload: Mapping[str, Any]) -> dict:
        return await self._api.put(self.path(record_id, sub, child_id), dict(payload))

    async def delete_child(self, record_id: str, sub: str, child_id: str) -> None:
        await self._api.delete(self.path(record_id, sub, child_id))

    async def upload(
        self,
        record_id: str,
        sub: str,
        filename: str,
        content: bytes,
        content_type: str | None = None,
        fields: Mapping[str, Any] | None = None,
    ) -> dict:
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        return await self._api.upload(self.path(record_id, sub), files, data=dict(fields) if fields else None)

    async def download(self, record_id: str, sub: str, child_id: str) -> bytes:
        return await self._api.download(self.path(record_id, sub, child_id, "download"))


__all__ = ["ResourceService", "UnknownActionError", "as_list"]
