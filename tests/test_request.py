"""Tests for the immutable Request and its async body access."""

from dataclasses import dataclass
from typing import Any

import pytest

from switchyard.errors import MalformedBody, UnsupportedMediaType
from switchyard.http.decoding import BodyDecoders
from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams
from switchyard.http.request import Request


def _receive_chunks(*chunks: bytes):
    messages = [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks)
    ]
    calls = 0

    async def receive() -> dict[str, Any]:
        nonlocal calls
        message = messages[calls]
        calls += 1
        return message

    return receive


def _request(body: bytes = b"", content_type: str | None = None, **kwargs: Any) -> Request:
    headers = {"content-type": content_type} if content_type else {}
    return Request(
        method="POST",
        path="/",
        headers=Headers.from_dict(headers),
        _receive=_receive_chunks(body),
        **kwargs,
    )


@dataclass
class LoginRequest:
    username: str = ""
    password: str = ""


class TestMetadata:
    def test_param(self) -> None:
        request = Request(method="GET", path="/", path_params={"userId": "dika"})
        assert request.param("userId") == "dika"
        assert request.param("missing", "x") == "x"

    def test_url_with_query(self) -> None:
        request = Request(method="GET", path="/hello", query=QueryParams(b"name=Dika"))
        assert request.url == "/hello?name=Dika"

    def test_content_length(self) -> None:
        good = Request(method="GET", path="/", headers=Headers.from_dict({"content-length": "12"}))
        bad = Request(method="GET", path="/", headers=Headers.from_dict({"content-length": "x"}))
        assert good.content_length == 12
        assert bad.content_length is None

    def test_immutable(self) -> None:
        request = Request(method="GET", path="/")
        with pytest.raises(AttributeError):
            request.path = "/other"  # type: ignore[misc]

    def test_from_asgi(self) -> None:
        scope = {
            "type": "http",
            "method": "GET",
            "path": "/",
            "query_string": b"name=Dika",
            "headers": [(b"firstname", b"Dika"), (b"cookie", b"lastname=Koko")],
            "client": ["127.0.0.1", 5000],
        }
        request = Request.from_asgi(scope, _receive_chunks(b""))
        assert request.query.get("name") == "Dika"
        assert request.headers["firstname"] == "Dika"
        assert request.cookies == {"lastname": "Koko"}
        assert request.client == ("127.0.0.1", 5000)

    def test_with_params_shares_body_cache(self) -> None:
        request = Request(method="GET", path="/users/dika")
        request._state.body = b"cached"
        updated = request.with_params({"userId": "dika"}, None)
        assert updated.path_params == {"userId": "dika"}
        assert updated._state is request._state


class TestBody:
    async def test_body_joins_chunks_and_caches(self) -> None:
        request = Request(method="POST", path="/", _receive=_receive_chunks(b"Hello ", b"World"))
        assert await request.body() == b"Hello World"
        assert await request.body() == b"Hello World"

    async def test_text_and_json(self) -> None:
        request = _request(b'{"username": "Dika"}', "application/json")
        assert await request.json() == {"username": "Dika"}
        assert await request.text() == '{"username": "Dika"}'

    async def test_form_value(self) -> None:
        request = _request(b"name=Dika", "application/x-www-form-urlencoded")
        assert await request.form_value("name") == "Dika"
        assert await request.form_value("missing", "Guest") == "Guest"

    async def test_form_defaults_to_urlencoded(self) -> None:
        request = _request(b"name=Dika")
        assert (await request.form())["name"] == "Dika"


class TestBind:
    async def test_bind_json(self) -> None:
        request = _request(b'{"username": "Dika", "password": "rahasia"}', "application/json")
        login = await request.bind(LoginRequest)
        assert login == LoginRequest("Dika", "rahasia")

    async def test_bind_uses_installed_decoders(self) -> None:
        decoders = BodyDecoders()
        decoders.register("text/plain", lambda raw, ct: {"username": raw.decode()})
        request = _request(b"Dika", "text/plain").with_params({}, decoders)
        assert (await request.bind(LoginRequest)).username == "Dika"

    async def test_bind_unsupported(self) -> None:
        with pytest.raises(UnsupportedMediaType):
            await _request(b"Dika", "text/plain").bind(LoginRequest)

    async def test_bind_malformed_leaves_instance(self) -> None:
        target = LoginRequest(username="before")
        with pytest.raises(MalformedBody):
            await _request(b"{oops", "application/json").bind(target)
        assert target.username == "before"
