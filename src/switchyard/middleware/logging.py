"""Request logging middleware.

Logs one line per request on the ``switchyard.access`` logger::

    GET /api/v1 -> 200 (0.42ms)

Configure it like any stdlib logger::

    logging.getLogger("switchyard.access").setLevel(logging.INFO)
"""

import logging
import time

from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import Next

logger = logging.getLogger("switchyard.access")


class RequestLogger:
    """Log method, path, status and elapsed time for every request.

    Errors raised further down the chain are logged with status 500 and
    re-raised untouched so the error handler still sees them.

    Usage::

        app.use(RequestLogger())
        app.use("/api", RequestLogger(level=logging.DEBUG))
    """

    __slots__ = ("_level",)

    def __init__(self, *, level: int = logging.INFO) -> None:
        self._level = level

    async def __call__(self, request: Request, next: Next) -> Response:
        start = time.perf_counter()
        try:
            response = await next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.log(
                self._level,
                "%s %s -> 500 (%.2fms)",
                request.method,
                request.path,
                elapsed_ms,
            )
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.log(
            self._level,
            "%s %s -> %d (%.2fms)",
            request.method,
            request.path,
            response.status,
            elapsed_ms,
        )
        return response
