"""Shared HTTP client for the upstream project-management REST API."""
from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlparse

import httpx


class ApiError(RuntimeError):
    """Raised when a request to the upstream API fails.

    Transport errors and non-2xx responses are not told apart by callers;
    ``status_code`` is kept for logging only.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiClient:
    """Thin JSON client; every call either returns the decoded body or raises :class:`ApiError`."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        headers: Mapping[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        parsed = urlparse(base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("base_url must include scheme and host")

        self._base_url = base_url.rstrip("/")
        self._headers = dict(headers or {})
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def url(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self._base_url}{path}"

    @staticmethod
    def _clean_params(params: Mapping[str, Any] | None) -> dict[str, Any] | None:
        if not params:
            return None
        cleaned = {key: value for key, value in params.items() if value not in (None, "")}
        return cleaned or None

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"{response.request.method} {response.request.url} returned invalid JSON") from exc

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        data: Mapping[str, Any] | None = None,
        files: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method,
                self.url(path),
                params=self._clean_params(params),
                json=json,
                data=data,
                files=files,
                headers=self._headers or None,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise ApiError(f"{method} {path} failed with status {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            raise ApiError(f"{method} {path} failed: {exc}") from exc
        return response

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._decode(await self.request("GET", path, params=params))

    async def post(self, path: str, json: Any = None, *, params: Mapping[str, Any] | None = None) -> Any:
        return self._decode(await self.request("POST", path, params=params, json=json))

    async def put(self, path: str, json: Any = None) -> Any:
        return self._decode(await self.request("PUT", path, json=json))

    async def patch(self, path: str, json: Any = None) -> Any:
        return self._decode(await self.request("PATCH", path, json=json))

    async def delete(self, path: str) -> Any:
        return self._decode(await self.request("DELETE", path))

    async def upload(self, path: str, files: Mapping[str, Any], data: Mapping[str, Any] | None = None) -> Any:
        """POST ``multipart/form-data``; ``files`` follows the httpx ``files=`` format."""

        return self._decode(await self.request("POST", path, files=files, data=data))

    async def download(self, path: str, params: Mapping[str, Any] | None = None) -> bytes:
        response = await self.request("GET", path, params=params)
        return response.content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


_client: ApiClient | None = None


def configure_api_client(client: ApiClient | None) -> None:
    """Install the process-wide client (called from ``create_app`` and tests)."""

    global _client
    _client = client


def get_api_client() -> ApiClient:
    global _client
    if _client is None:
        from constructx.core.settings import load_settings

        settings = load_settings()
        _client = ApiClient(settings.api_url, timeout=settings.api_timeout)
    return _client


__all__ = ["ApiClient", "ApiError", "configure_api_client", "get_api_client"]
