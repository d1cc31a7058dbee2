"""The incoming request.

``Request`` is a frozen dataclass built from the ASGI scope. Metadata is
available immediately; the body is pulled from ASGI ``receive`` on the
first ``await request.body()`` and reused by every later reader
(``text``, ``json``, ``form``, ``bind``), including readers further down
the middleware chain.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from switchyard._internal.asgi import Receive
from switchyard.http.cookies import parse_cookies
from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams

if TYPE_CHECKING:
    from switchyard.http.decoding import BodyDecoders
    from switchyard.http.forms import FormData


async def _no_body() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


class _BodyState:
    """Body bytes and parsed form, filled in lazily and shared across copies."""

    __slots__ = ("body", "form")

    def __init__(self) -> None:
        self.body: bytes | None = None
        self.form: FormData | None = None


@dataclass(frozen=True, slots=True)
class Request:
    """An HTTP request.

    ``path_params`` stays empty until the dispatcher has matched a route
    and called ``with_params``.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    path_params: dict[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    client: tuple[str, int] | None = None

    _receive: Receive = field(default=_no_body, repr=False, compare=False)
    _decoders: BodyDecoders | None = field(default=None, repr=False, compare=False)
    _state: _BodyState = field(default_factory=_BodyState, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], receive: Receive) -> Request:
        headers = Headers(tuple(scope.get("headers", ())))
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=headers,
            query=QueryParams(scope.get("query_string", b"")),
            cookies=parse_cookies(headers.get("cookie", "")),
            client=(client[0], client[1]) if client else None,
            _receive=receive,
        )

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """Declared ``Content-Length``, or None when absent or not a number."""
        declared = self.headers.get("content-length", "")
        return int(declared) if declared.isdigit() else None

    @property
    def url(self) -> str:
        """Path plus the raw query string, as the client sent it."""
        raw = self.query.raw
        return f"{self.path}?{raw.decode('latin-1')}" if raw else self.path

    def param(self, name: str, default: str | None = None) -> str | None:
        return self.path_params.get(name, default)

    def with_params(self, path_params: dict[str, str], decoders: BodyDecoders | None) -> Request:
        """Copy with route parameters and the app's decoder registry attached.

        The copy reads the same body as the original.
        """
        return replace(self, path_params=path_params, _decoders=decoders)

    async def stream(self) -> AsyncIterator[bytes]:
        more_body = True
        while more_body:
            message = await self._receive()
            if chunk := message.get("body", b""):
                yield chunk
            more_body = message.get("more_body", False)

    async def body(self) -> bytes:
        state = self._state
        if state.body is None:
            state.body = b"".join([chunk async for chunk in self.stream()])
        return state.body

    async def text(self) -> str:
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        return json.loads(await self.body())

    async def form(self) -> FormData:
        """Parsed URL-encoded or multipart body.

        A request without ``Content-Type`` is read as URL-encoded.

        Raises:
            ValueError: The body is not a form encoding or does not parse.
        """
        state = self._state
        if state.form is None:
            from switchyard.http.forms import parse_form_data

            content_type = self.content_type or "application/x-www-form-urlencoded"
            state.form = parse_form_data(await self.body(), content_type)
        return state.form

    async def form_value(self, key: str, default: str = "") -> str:
        value = (await self.form()).get(key)
        return default if value is None else value

    async def bind[T](self, target: T) -> T:
        """Decode the body into *target*, chosen by ``Content-Type``.

        *target* is either a dataclass type, which yields a new instance,
        or a dataclass instance, which is updated only once every field
        has converted.

        Raises:
            UnsupportedMediaType: No decoder for the ``Content-Type``.
            MalformedBody: The payload does not parse or convert.
        """
        from switchyard.http.decoding import default_decoders

        decoders = self._decoders or default_decoders()
        return decoders.decode(self.content_type or "", await self.body(), target)
