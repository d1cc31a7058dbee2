"""Tests for switchyard.context: request-scoped ContextVar and g namespace."""

import pytest

from switchyard.app import App
from switchyard.context import _RequestGlobals, g, get_request, request_scope, request_var
from switchyard.http.request import Request
from switchyard.testing import TestClient


class TestRequestVar:
    def test_get_request_raises_outside_context(self) -> None:
        with pytest.raises(LookupError):
            get_request()

    def test_set_and_get_request(self) -> None:
        request = Request(method="GET", path="/test")
        token = request_var.set(request)
        try:
            assert get_request() is request
        finally:
            request_var.reset(token)

    def test_request_scope_binds_and_restores(self) -> None:
        request = Request(method="GET", path="/scoped")
        with request_scope(request):
            assert get_request() is request
            g.seen = True
            assert g.seen is True
        with pytest.raises(LookupError):
            get_request()
        assert "seen" not in g

    async def test_reset_after_dispatch(self) -> None:
        app = App()
        app.get("/", lambda: get_request().path)

        async with TestClient(app) as client:
            response = await client.get("/")

        assert response.text == "/"
        with pytest.raises(LookupError):
            get_request()


class TestGlobals:
    def test_set_get_delete(self) -> None:
        ns = _RequestGlobals()
        ns.user = "dika"
        assert ns.user == "dika"
        assert "user" in ns
        del ns.user
        assert "user" not in ns

    def test_missing_attribute(self) -> None:
        ns = _RequestGlobals()
        with pytest.raises(AttributeError, match="no attribute 'missing'"):
            ns.missing  # noqa: B018
        with pytest.raises(AttributeError):
            del ns.missing

    def test_get_default(self) -> None:
        assert _RequestGlobals().get("missing", 1) == 1

    async def test_cleared_between_requests(self) -> None:
        app = App()

        @app.get("/set")
        def set_value() -> str:
            g.value = "x"
            return "set"

        app.get("/read", lambda: g.get("value", "empty"))

        async with TestClient(app) as client:
            await client.get("/set")
            response = await client.get("/read")

        assert response.text == "empty"
