"""In-memory stand-in for the upstream REST API.

``InMemoryBackend`` answers the same URL shapes the services call and is
mounted into httpx through :class:`httpx.MockTransport`, so the rest of the
stack cannot tell it from the real server. Used when mock data is enabled
and throughout the tests.
"""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

import httpx

logger = logging.getLogger(__name__)

# named transitions that imply a status change
ACTION_STATUS = {
    "accept": "accepted",
    "approve": "Approved",
    "reject": "Rejected",
    "cancel": "Cancelled",
    "send": "Sent",
    "convert": "Accepted",
    "convert-to-project": "won",
}

VOCABULARY_FIELDS = {
    "statuses": "status",
    "types": "type",
    "categories": "category",
    "priorities": "priority",
}

_FILENAME = re.compile(rb'filename="([^"]+)"')


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class InMemoryBackend:
    """Simple in-memory API server for fast iteration and tests."""

    def __init__(self, collections: Mapping[str, Iterable[dict]] | None = None, *, prefix: str = "/api") -> None:
        self._prefix = prefix.rstrip("/")
        self._collections: dict[str, list[dict]] = {}
        self._counter = 0
        self._failures: set[tuple[str, str]] = set()
        self.requests: list[tuple[str, str]] = []
        for name, rows in (collections or {}).items():
            self._collections[name] = [dict(row) for row in rows]

    # ------------------------------------------------------------------
    # test helpers
    # ------------------------------------------------------------------
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def records(self, collection: str) -> list[dict]:
        return [dict(row) for row in self._collections.get(collection, [])]

    def fail(self, method: str, path: str) -> None:
        """Answer ``method path`` with HTTP 500 until :meth:`recover` is called."""

        self._failures.add((method.upper(), path))

    def recover(self) -> None:
        self._failures.clear()

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _next_id(self, collection: str) -> str:
        self._counter += 1
        return f"{collection.rstrip('s')}-new-{self._counter}"

    def _find(self, collection: str, record_id: str) -> dict | None:
        for row in self._collections.get(collection, []):
            if str(row.get("id")) == record_id:
                return row
        return None

    @staticmethod
    def _body(request: httpx.Request) -> Any:
        if not request.content:
            return None
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("multipart/"):
            names = [name.decode("utf-8", "replace") for name in _FILENAME.findall(request.content)]
            return {"files": names}
        try:
            return json.loads(request.content.decode("utf-8"))
        except ValueError:
            return None

    def _list(self, collection: str, params: Mapping[str, str], project_id: str | None) -> list[dict]:
        rows = self._collections.get(collection, [])
        project_id = project_id or params.get("projectId")
        if project_id:
            rows = [row for row in rows if row.get("projectId") in (None, project_id)]
        return [dict(row) for row in rows]

    def _create(self, collection: str, payload: Any, project_id: str | None) -> dict:
        record = dict(payload or {})
        record.setdefault("id", self._next_id(collection))
        if project_id:
            record.setdefault("projectId", project_id)
        record.setdefault("createdAt", _now())
        self._collections.setdefault(collection, []).append(record)
        return dict(record)

    @staticmethod
    def _child(children: list, child_id: str, method: str, payload: Any) -> httpx.Response:
        child = next((item for item in children if isinstance(item, dict) and str(item.get("id")) == child_id), None)
        if child is None:
            return httpx.Response(404, json={"message": f"{child_id} not found"})
        if method == "GET":
            return httpx.Response(200, json=dict(child))
        if method in {"PUT", "PATCH", "POST"}:
            child.update(dict(payload or {}) if isinstance(payload, dict) else {})
            return httpx.Response(200, json=dict(child))
        if method == "DELETE":
            children.remove(child)
            return httpx.Response(204)
        return httpx.Response(405)

    # ------------------------------------------------------------------
    # transport entry point
    # ------------------------------------------------------------------
    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method.upper()
        path = request.url.path
        if self._prefix and path.startswith(self._prefix):
            path = path[len(self._prefix):]
        self.requests.append((method, path))

        if (method, path) in self._failures:
            logger.debug("injected failure for %s %s", method, path)
            return httpx.Response(500, json={"message": "injected failure"})

        segments = [segment for segment in path.split("/") if segment]
        project_id: str | None = None
        if len(segments) >= 3 and segments[0] == "projects":
            project_id = segments[1]
            segments = segments[2:]
        if segments and segments[0] == "ai":
            segments = segments[1:]
        if not segments or segments[0] not in self._collections:
            return httpx.Response(404, json={"message": f"unknown resource {path}"})

        collection = segments[0]
        payload = self._body(request)

        if len(segments) == 1:
            if method == "GET":
                return httpx.Response(200, json=self._list(collection, request.url.params, project_id))
            if method == "POST":
                return httpx.Response(201, json=self._create(collection, payload, project_id))
            return httpx.Response(405)

        if len(segments) == 2 and method == "GET" and segments[1] in VOCABULARY_FIELDS:
            field_name = VOCABULARY_FIELDS[segments[1]]
            values = {row.get(field_name) for row in self._collections[collection] if row.get(field_name)}
            return httpx.Response(200, json=sorted(str(value) for value in values))

        record = self._find(collection, segments[1])
        if record is None:
            return httpx.Response(404, json={"message": f"{collection} {segments[1]} not found"})

        if len(segments) == 2:
            if method == "GET":
                return httpx.Response(200, json=dict(record))
            if method in {"PUT", "PATCH"}:
                record.update({key: value for key, value in dict(payload or {}).items() if key != "id"})
                record["updatedAt"] = _now()
                return httpx.Response(200, json=dict(record))
            if method == "DELETE":
                self._collections[collection].remove(record)
                return httpx.Response(204)
            return httpx.Response(405)

        action = segments[2]
        if action == "status" and method in {"PUT", "PATCH"}:
            status = dict(payload or {}).get("status")
            if not status:
                return httpx.Response(400, json={"message": "status is required"})
            record["status"] = status
            return httpx.Response(200, json=dict(record))
        if action == "read" and method in {"PUT", "POST"}:
            record["isRead"] = True
            return httpx.Response(200, json=dict(record))
        if action in ACTION_STATUS and method in {"PUT", "POST"}:
            record["status"] = ACTION_STATUS[action]
            return httpx.Response(200, json=dict(record))
        if action.endswith("download") or (len(segments) > 3 and segments[-1] == "download"):
            return httpx.Response(200, content=f"{collection}/{record['id']}".encode("utf-8"))

        children = record.setdefault(action, [])
        if not isinstance(children, list):
            return httpx.Response(200, json=children)
        if len(segments) > 3:
            return self._child(children, segments[3], method, payload)
        if method == "GET":
            return httpx.Response(200, json=list(children))
        if method in {"POST", "PUT"}:
            entry = dict(payload) if isinstance(payload, dict) else {"value": payload}
            entry.setdefault("id", f"{action}-{len(children) + 1}")
            children.append(entry)
            return httpx.Response(201 if method == "POST" else 200, json=entry)
        return httpx.Response(405)


__all__ = ["ACTION_STATUS", "InMemoryBackend"]
