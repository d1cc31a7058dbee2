"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

and is bound to a path prefix with ``app.use(prefix, mw)`` (or globally
with ``app.use(mw)``).

Built-in middleware:
    RequestLogger -- One access-log line per request
    StaticFiles -- Serve static files from a directory
"""

from switchyard.middleware.chain import Chain, MiddlewareBinding, MiddlewareStack
from switchyard.middleware.logging import RequestLogger
from switchyard.middleware.protocol import Middleware, Next
from switchyard.middleware.static import StaticFiles

__all__ = [
    "Chain",
    "Middleware",
    "MiddlewareBinding",
    "MiddlewareStack",
    "Next",
    "RequestLogger",
    "StaticFiles",
]
