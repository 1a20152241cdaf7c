import asyncio
import json
import sys
from pathlib import Path

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from constructx.infrastructure.api import ApiClient, ApiError


def _client(handler) -> ApiClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ApiClient("http://upstream.test/api", http_client=http_client)


def test_get_sends_clean_params_and_decodes_json():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        return httpx.Response(200, json=[{"id": "rfi-1"}])

    client = _client(handler)
    result = asyncio.run(client.get("/rfis", params={"projectId": "proj-1", "status": None, "q": ""}))

    assert result == [{"id": "rfi-1"}]
    assert captured["url"] == "http://upstream.test/api/rfis?projectId=proj-1"


def test_post_serialises_body():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["body"] = json.loads(request.content.decode("utf-8"))
        return httpx.Response(201, json={"id": "quo-9", **captured["body"]})

    client = _client(handler)
    created = asyncio.run(client.post("quotes", {"title": "Fit-out"}))

    assert captured == {"method": "POST", "body": {"title": "Fit-out"}}
    assert created["id"] == "quo-9"


def test_non_2xx_response_raises_api_error_with_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"message": "maintenance"})

    client = _client(handler)
    with pytest.raises(ApiError) as excinfo:
        asyncio.run(client.get("/invoices"))

    assert excinfo.value.status_code == 503
    assert "GET /invoices" in str(excinfo.value)


def test_transport_failure_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(ApiError) as excinfo:
        asyncio.run(client.delete("/bids/bid-1"))

    assert excinfo.value.status_code is None


def test_empty_body_decodes_to_none_and_invalid_json_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(200, content=b"<html>oops</html>")

    client = _client(handler)
    assert asyncio.run(client.delete("/payments/pay-1")) is None
    with pytest.raises(ApiError):
        asyncio.run(client.get("/payments"))


def test_download_returns_raw_bytes():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"%PDF-1.7")

    client = _client(handler)
    assert asyncio.run(client.download("/invoices/inv-1/pdf")) == b"%PDF-1.7"


def test_upload_sends_multipart():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["content_type"] = request.headers["content-type"]
        captured["body"] = request.content
        return httpx.Response(201, json={"id": "att-1"})

    client = _client(handler)
    files = {"file": ("drawing.pdf", b"pdf-bytes", "application/pdf")}
    result = asyncio.run(client.upload("/rfis/rfi-1/attachments", files, data={"description": "rev C"}))

    assert result == {"id": "att-1"}
    assert str(captured["content_type"]).startswith("multipart/form-data")
    assert b'filename="drawing.pdf"' in captured["body"]
    assert b"rev C" in captured["body"]


def test_base_url_must_be_absolute():
    with pytest.raises(ValueError):
        ApiClient("/api")
