"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. ``next`` runs the rest of the chain (the
remaining middleware, then the route handler) and hands its response
back, so code after ``await next(request)`` runs after everything
downstream has finished.  Errors raised downstream propagate out of
``await next(request)`` and can be caught there.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from switchyard.http.request import Request
from switchyard.http.response import Response

# The rest of the middleware chain
type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for switchyard middleware.

    Accepts both functions and callable objects::

        # Wrap: work before and after the rest of the chain
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")

        # Short-circuit: answer without calling next
        class RequireToken:
            async def __call__(self, request: Request, next: Next) -> Response:
                if "authorization" not in request.headers:
                    return Response("Unauthorized", status=401)
                return await next(request)
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
