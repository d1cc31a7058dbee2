"""Per-request context.

The dispatcher enters ``request_scope(request)`` around every chain run.
Inside it:

- ``get_request()`` returns the request being handled,
- ``g`` is a fresh attribute namespace middleware can use to hand data
  to handlers.

Both live in ContextVars, so concurrent requests never see each other's
values. Outside a scope ``get_request()`` raises ``LookupError`` and
``g`` falls back to a namespace private to the calling context.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from switchyard.http.request import Request

request_var: ContextVar[Request] = ContextVar("switchyard_request")

_globals_var: ContextVar[dict[str, Any] | None] = ContextVar("switchyard_g", default=None)


def get_request() -> Request:
    return request_var.get()


@contextmanager
def request_scope(request: Request) -> Iterator[Request]:
    """Bind *request* and an empty ``g`` for the duration of the block."""
    request_token = request_var.set(request)
    globals_token = _globals_var.set({})
    try:
        yield request
    finally:
        _globals_var.reset(globals_token)
        request_var.reset(request_token)


class _RequestGlobals:
    """Attribute-style access to the current request's scratch space.

    Usage::

        from switchyard.context import g

        async def load_user(request, next):
            g.user = await lookup(request.headers.get("authorization"))
            return await next(request)

        @app.get("/me")
        def me():
            return g.user.name
    """

    __slots__ = ()

    @staticmethod
    def _namespace() -> dict[str, Any]:
        namespace = _globals_var.get()
        if namespace is None:
            namespace = {}
            _globals_var.set(namespace)
        return namespace

    def __getattr__(self, name: str) -> Any:
        try:
            return self._namespace()[name]
        except KeyError:
            msg = f"'g' has no attribute {name!r} in the current request scope"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: Any) -> None:
        self._namespace()[name] = value

    def __delattr__(self, name: str) -> None:
        if self._namespace().pop(name, _MISSING) is _MISSING:
            msg = f"'g' has no attribute {name!r} in the current request scope"
            raise AttributeError(msg)

    def __contains__(self, name: str) -> bool:
        return name in self._namespace()

    def get(self, name: str, default: Any = None) -> Any:
        return self._namespace().get(name, default)

    def __repr__(self) -> str:
        return f"<g {self._namespace()!r}>"


_MISSING = object()

g = _RequestGlobals()
