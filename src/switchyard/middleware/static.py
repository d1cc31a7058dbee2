"""Serve files from a directory under a URL prefix.

``StaticFiles`` is ordinary middleware bound to its prefix, so it only
sees requests beneath that prefix. A request that names no existing file
continues down the chain; routes registered under the same prefix keep
working, and anything else ends in the usual 404.
"""

import mimetypes
from pathlib import Path

import anyio

from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.chain import normalize_prefix
from switchyard.middleware.protocol import Next

_FORBIDDEN = Response("Forbidden", status=403)


class StaticFiles:
    """Static file middleware.

    Usage::

        app.static("/public", "./source")

        # same as
        app.use("/public", StaticFiles("./source", prefix="/public"))

    ``GET /public`` and ``GET /public/docs/`` serve the directory's
    *index* file when there is one. Paths that resolve outside the
    directory, through ``..`` or symlinks, get ``403 Forbidden``.
    """

    __slots__ = ("_cache_control", "_directory", "_index", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._prefix = normalize_prefix(prefix)
        self._index = index
        self._cache_control = cache_control

    @property
    def directory(self) -> Path:
        return self._directory

    async def __call__(self, request: Request, next: Next) -> Response:
        relative = self._relative_path(request)
        if relative is None:
            return await next(request)

        candidate = (self._directory / relative).resolve()
        if not candidate.is_relative_to(self._directory):
            return _FORBIDDEN
        if candidate.is_dir():
            candidate /= self._index
        if not candidate.is_file():
            return await next(request)

        async with await anyio.open_file(candidate, "rb") as fh:
            body = await fh.read()
        content_type = mimetypes.guess_type(candidate.name)[0] or "application/octet-stream"
        return Response(body, content_type=content_type).with_header(
            "Cache-Control", self._cache_control
        )

    def _relative_path(self, request: Request) -> str | None:
        """Path below the prefix, or None when this request is not ours."""
        if request.method not in ("GET", "HEAD"):
            return None
        path = request.path
        if not self._prefix:
            return path.lstrip("/")
        if path == self._prefix or path.startswith(self._prefix + "/"):
            return path.removeprefix(self._prefix).lstrip("/")
        return None
