"""Prefix-bound middleware and chain composition.

Middleware is registered against a path prefix (``""`` = every request).
For each request the stack selects the bindings whose prefix covers the
path and orders them outermost-first:

1. global bindings (no prefix),
2. then progressively more specific prefixes (more path segments),
3. registration order within equal specificity.

The selected middleware and the terminal endpoint form a ``Chain``.  The
chain keeps an index into its steps; each middleware receives a ``next``
callable that runs step ``index + 1`` and returns its response, so
before/after code nests properly across ``await`` points. A middleware
that returns an exception instead of a response has it raised in its
place, so outer middleware and the error handler see it as a failure.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from switchyard.errors import returned_error
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.protocol import Middleware
from switchyard.routing.router import join_paths, split_path

# The innermost step: route handler invocation or the 404 answer
type Endpoint = Callable[[Request], Awaitable[Response]]


def normalize_prefix(prefix: str) -> str:
    """``""`` and ``"/"`` mean global; others become ``/a/b`` (no trailing slash)."""
    if prefix.strip("/") == "":
        return ""
    return join_paths("", prefix)


@dataclass(frozen=True, slots=True)
class MiddlewareBinding:
    """Middleware registered together under one prefix."""

    prefix: str
    middleware: tuple[Middleware, ...]
    order: int

    @property
    def depth(self) -> int:
        """Number of segments in the prefix (0 for global bindings)."""
        return len(split_path(self.prefix))

    def applies_to(self, path: str) -> bool:
        """True if *path* is the prefix itself or lies beneath it."""
        if not self.prefix:
            return True
        return path == self.prefix or path.startswith(self.prefix + "/")


class MiddlewareStack:
    """Ordered middleware bindings. Built at setup, read-only while serving."""

    __slots__ = ("_bindings", "_frozen")

    def __init__(self) -> None:
        self._bindings: list[MiddlewareBinding] = []
        self._frozen = False

    def use(self, prefix: str, *middleware: Middleware) -> MiddlewareBinding:
        """Bind *middleware* (in the given order) to *prefix*."""
        if self._frozen:
            msg = "Cannot add middleware after the stack is frozen."
            raise RuntimeError(msg)
        binding = MiddlewareBinding(
            prefix=normalize_prefix(prefix),
            middleware=tuple(middleware),
            order=len(self._bindings),
        )
        self._bindings.append(binding)
        return binding

    def freeze(self) -> None:
        self._frozen = True

    @property
    def bindings(self) -> tuple[MiddlewareBinding, ...]:
        return tuple(self._bindings)

    def select(self, path: str) -> tuple[Middleware, ...]:
        """Return the middleware that applies to *path*, outermost first."""
        applicable = sorted(
            (b for b in self._bindings if b.applies_to(path)),
            key=lambda b: (b.depth, b.order),
        )
        return tuple(mw for binding in applicable for mw in binding.middleware)

    def build(self, path: str, endpoint: Endpoint) -> "Chain":
        """Compose the middleware for *path* around *endpoint*."""
        return Chain(self.select(path), endpoint)

    def __len__(self) -> int:
        return len(self._bindings)


class Chain:
    """An invocation chain: middleware steps ending in an endpoint.

    Usage::

        chain = Chain((log, auth), endpoint)
        response = await chain(request)
    """

    __slots__ = ("endpoint", "middleware")

    def __init__(self, middleware: tuple[Middleware, ...], endpoint: Endpoint) -> None:
        self.middleware = middleware
        self.endpoint = endpoint

    @property
    def steps(self) -> tuple[Middleware | Endpoint, ...]:
        """Every step in call order, ending with the endpoint."""
        return (*self.middleware, self.endpoint)

    async def __call__(self, request: Request) -> Response:
        return await self._run(0, request)

    async def _run(self, index: int, request: Request) -> Response:
        if index == len(self.middleware):
            return await self.endpoint(request)

        middleware = self.middleware[index]

        async def next_step(req: Request) -> Response:
            return await self._run(index + 1, req)

        result = await middleware(request, next_step)
        if isinstance(result, BaseException):
            raise returned_error(result)
        return result

    def __repr__(self) -> str:
        return f"Chain({len(self.middleware)} middleware)"
