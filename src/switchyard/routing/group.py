"""Route registration helpers and prefix groups.

``RouteRegistrar`` supplies the method shortcuts (``get``, ``post``, ...)
shared by ``App`` and ``RouteGroup``.  Each shortcut works both as a
plain call and as a decorator::

    app.get("/", index)

    @app.post("/login")
    async def login(request): ...

A ``RouteGroup`` forwards every registration to its owner with the group
prefix prepended; groups nest::

    api = app.group("/api")
    api.get("/hello", hello)             # GET /api/hello
    v1 = api.group("/v1")
    v1.get("/users/:userId", show_user)  # GET /api/v1/users/:userId
"""

from collections.abc import Callable
from typing import Any, Protocol

from switchyard._internal.types import Handler
from switchyard.errors import ConfigurationError
from switchyard.routing.route import METHODS
from switchyard.routing.router import join_paths


class _RouteOwner(Protocol):
    def add(
        self,
        method: str,
        pattern: str,
        handler: Callable[..., Any],
        *,
        name: str | None = None,
    ) -> Any: ...


class RouteRegistrar:
    """Method shortcuts on top of a single ``add()`` primitive."""

    __slots__ = ()

    def add(
        self,
        method: str,
        pattern: str,
        handler: Handler,
        *,
        name: str | None = None,
    ) -> Any:
        raise NotImplementedError

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a handler for several methods via decorator (default ``GET``)."""

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self.add(method, path, func, name=name)
            return func

        return decorator

    def _register(
        self,
        methods: tuple[str, ...],
        path: str,
        handler: Handler | None,
        name: str | None,
    ) -> Any:
        def decorator(func: Handler) -> Handler:
            for method in methods:
                self.add(method, path, func, name=name)
            return func

        if handler is None:
            return decorator
        return decorator(handler)

    def get(self, path: str, handler: Handler | None = None, *, name: str | None = None) -> Any:
        """Register ``GET`` (and ``HEAD``, answered with an empty body)."""
        return self._register(("GET", "HEAD"), path, handler, name)

    def head(self, path: str, handler: Handler | None = None, *, name: str | None = None) -> Any:
        return self._register(("HEAD",), path, handler, name)

    def post(self, path: str, handler: Handler | None = None, *, name: str | None = None) -> Any:
        return self._register(("POST",), path, handler, name)

    def put(self, path: str, handler: Handler | None = None, *, name: str | None = None) -> Any:
        return self._register(("PUT",), path, handler, name)

    def patch(self, path: str, handler: Handler | None = None, *, name: str | None = None) -> Any:
        return self._register(("PATCH",), path, handler, name)

    def delete(self, path: str, handler: Handler | None = None, *, name: str | None = None) -> Any:
        return self._register(("DELETE",), path, handler, name)

    def options(self, path: str, handler: Handler | None = None, *, name: str | None = None) -> Any:
        return self._register(("OPTIONS",), path, handler, name)

    def all(self, path: str, handler: Handler | None = None, *, name: str | None = None) -> Any:
        """Register one handler for every supported method."""
        return self._register(tuple(sorted(METHODS)), path, handler, name)


class RouteGroup(RouteRegistrar):
    """A view over a route owner that prepends ``prefix`` to every pattern."""

    __slots__ = ("_owner", "prefix")

    def __init__(self, owner: _RouteOwner, prefix: str) -> None:
        self._owner = owner
        self.prefix = join_paths("", prefix)

    def add(
        self,
        method: str,
        pattern: str,
        handler: Handler,
        *,
        name: str | None = None,
    ) -> Any:
        return self._owner.add(method, join_paths(self.prefix, pattern), handler, name=name)

    def group(self, prefix: str) -> "RouteGroup":
        """Return a nested group under this group's prefix."""
        return RouteGroup(self._owner, join_paths(self.prefix, prefix))

    def use(self, *middleware: Any) -> None:
        """Bind middleware to this group's prefix.

        Only groups created from an ``App`` carry middleware.
        """
        use = getattr(self._owner, "use", None)
        if use is None:
            msg = "Middleware can only be bound to groups created from an App."
            raise ConfigurationError(msg)
        use(self.prefix, *middleware)

    def __repr__(self) -> str:
        return f"RouteGroup({self.prefix!r})"
