"""Response values.

``Response`` is a frozen dataclass; every ``with_*`` call returns a
modified copy, so a middleware can decorate the response it got back
from ``next`` without affecting anyone else holding it::

    response = await next(request)
    return response.with_header("X-Served-By", "switchyard")

``Redirect`` and ``Download`` are handler return values that the
dispatcher turns into a ``Response``.
"""

import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

import anyio

from switchyard.http.cookies import SetCookie


@dataclass(frozen=True, slots=True)
class Response:
    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()

    def with_status(self, status: int) -> "Response":
        return replace(self, status=status)

    def with_content_type(self, content_type: str) -> "Response":
        return replace(self, content_type=content_type)

    def with_header(self, name: str, value: str) -> "Response":
        """Append a header. Earlier headers with the same name are kept."""
        return self.with_headers({name: value})

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        return replace(self, headers=self.headers + tuple(headers.items()))

    def with_cookie(
        self,
        name: str,
        value: str,
        *,
        max_age: int | None = None,
        path: str = "/",
        httponly: bool = True,
        samesite: str = "lax",
    ) -> "Response":
        cookie = SetCookie(name, value, max_age, path, httponly, samesite)
        return replace(self, cookies=(*self.cookies, cookie))

    def header(self, name: str) -> str | None:
        """First value of header *name*, case-insensitive.

        ``Content-Type`` is answered from ``content_type``.
        """
        if name.lower() == "content-type":
            return self.content_type
        return next((v for k, v in self.headers if k.lower() == name.lower()), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body


@dataclass(frozen=True, slots=True)
class Redirect:
    url: str
    status: int = 302


@dataclass(frozen=True, slots=True)
class Download:
    """A file sent as an attachment.

    Usage::

        @app.get("/download")
        def download():
            return Download("./source/sample.txt", "sample.txt")

    *filename* defaults to the file's own name. The file is read when the
    dispatcher converts the return value, so a missing file reaches the
    error handler as ``FileNotFoundError``.
    """

    path: str | Path
    filename: str | None = None
    content_type: str | None = None

    async def load(self) -> Response:
        path = Path(self.path)
        async with await anyio.open_file(path, "rb") as fh:
            body = await fh.read()

        content_type = (
            self.content_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        )
        disposition = f'attachment; filename="{self.filename or path.name}"'
        return Response(body, content_type=content_type).with_header(
            "Content-Disposition", disposition
        )
