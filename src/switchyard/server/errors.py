"""Error handling for the dispatcher.

Every error that escapes the middleware chain is passed exactly once to
the app's error handler. The default handler keeps the status of an
``HTTPError`` and turns anything else into a 500 with body
``"Error: <message>"``.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from kida import Environment

from switchyard._internal.invoke import invoke
from switchyard.errors import HTTPError
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.server.negotiation import negotiate

logger = logging.getLogger("switchyard.server")


def default_error_handler(request: Request, exc: Exception) -> Response:
    """Map *exc* to a plain-text response."""
    if isinstance(exc, HTTPError):
        logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
        response = Response(body=exc.detail or f"Error {exc.status}", status=exc.status)
        for name, value in exc.headers:
            response = response.with_header(name, value)
        return response

    logger.error("500 %s %s", request.method, request.path, exc_info=exc)
    return Response(body=f"Error: {exc}", status=500)


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    *,
    kida_env: Environment | None = None,
    template_extension: str = ".html",
) -> Response:
    """Run *handler* and negotiate its return value.

    The handler takes ``(request, exc)``, ``(request)`` or nothing, and
    may be sync or async.
    """
    args = (request, exc)[: _positional_arity(handler)]
    result = await invoke(handler, *args)
    return negotiate(result, kida_env=kida_env, template_extension=template_extension)


def _positional_arity(handler: Callable[..., Any]) -> int:
    """How many of ``(request, exc)`` *handler* accepts positionally."""
    count = 0
    for param in inspect.signature(handler).parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 2
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return min(count, 2)
