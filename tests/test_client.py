"""Tests for the outbound HTTP client."""

import httpx
import pytest

from switchyard.app import App
from switchyard.client import fetch
from switchyard.errors import ClientError
from switchyard.testing import TestClient


def _transport(status: int = 200, text: str = "<h1>Example Domain</h1>") -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text=text)

    return httpx.MockTransport(handler)


class TestFetch:
    async def test_returns_status_and_text(self) -> None:
        status, body = await fetch("https://example.com", transport=_transport())
        assert status == 200
        assert "Example Domain" in body

    async def test_error_status_is_returned(self) -> None:
        status, body = await fetch("https://example.com/missing", transport=_transport(404, "nope"))
        assert (status, body) == (404, "nope")

    async def test_headers_sent(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["x-token"])
            return httpx.Response(200)

        await fetch("https://example.com", headers={"X-Token": "t"}, transport=httpx.MockTransport(handler))
        assert seen == ["t"]

    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ClientError) as exc_info:
            await fetch("https://example.com", transport=httpx.MockTransport(handler))

        assert exc_info.value.url == "https://example.com"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_handler_proxies_upstream(self) -> None:
        app = App()

        @app.get("/proxy")
        async def proxy() -> tuple[str, int]:
            status, body = await fetch("https://example.com", transport=_transport())
            return body, status

        async with TestClient(app) as client:
            response = await client.get("/proxy")

        assert response.status == 200
        assert "Example Domain" in response.text
