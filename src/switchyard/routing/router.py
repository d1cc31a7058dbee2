"""Route table and matcher.

Routes are registered during setup, grouped by method in registration
order, and frozen by ``compile()`` before the first request.  Matching
walks the routes for the request's method and returns the first whose
segments all match, so overlapping patterns resolve to the one
registered first.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from switchyard.errors import ConfigurationError, RouteNotFound
from switchyard.routing.route import METHODS, PathSegment, Route, RouteMatch

if TYPE_CHECKING:
    from switchyard.routing.group import RouteGroup


def split_path(path: str) -> list[str]:
    """Split a request path into segments.

    Leading and trailing slashes are ignored, so ``/`` has no segments
    and ``/users/`` equals ``/users``.  Inner empty segments are kept
    (``/a//b`` has three) so a parameter never matches an empty string.
    """
    stripped = path.strip("/")
    if not stripped:
        return []
    return stripped.split("/")


def parse_path(pattern: str) -> tuple[PathSegment, ...]:
    """Parse a route pattern into segments.

    Examples::

        "/"                              -> ()
        "/users"                         -> (PathSegment("users"),)
        "/users/:userId/orders/:orderId" -> (users, :userId, orders, :orderId)

    Raises ``ConfigurationError`` for empty or duplicate parameter names
    and for ``{param}`` / ``<param>`` placeholders from other frameworks.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()
    for part in split_path(pattern):
        if (part.startswith("{") and part.endswith("}")) or (
            part.startswith("<") and part.endswith(">")
        ):
            msg = (
                f"Route pattern {pattern!r} uses {part!r}. "
                f"Parameters are written as ':name', e.g. '/users/:{part[1:-1]}'."
            )
            raise ConfigurationError(msg)
        if not part.startswith(":"):
            segments.append(PathSegment(part))
            continue
        name = part[1:]
        if not name:
            msg = f"Route pattern {pattern!r} has a parameter without a name."
            raise ConfigurationError(msg)
        if name in seen:
            msg = f"Route pattern {pattern!r} repeats parameter {name!r}."
            raise ConfigurationError(msg)
        seen.add(name)
        segments.append(PathSegment(name, is_param=True))
    return tuple(segments)


def join_paths(prefix: str, path: str) -> str:
    """Join a group prefix and a route path into a normalized pattern."""
    parts = split_path(prefix) + split_path(path)
    return "/" + "/".join(parts)


class Router:
    """Ordered route table with first-match-wins lookup.

    Usage::

        router = Router()
        router.add("GET", "/users/:userId", handler)
        router.compile()
        match = router.match("GET", "/users/dika")
        match.path_params  # {"userId": "dika"}
    """

    __slots__ = ("_by_method", "_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._by_method: dict[str, list[Route]] = {}
        self._compiled = False

    def add(
        self,
        method: str,
        pattern: str,
        handler: Callable[..., Any],
        *,
        name: str | None = None,
    ) -> Route:
        """Register *handler* for (*method*, *pattern*). Must precede compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        method = method.upper()
        if method not in METHODS:
            msg = f"Unsupported HTTP method {method!r} for route {pattern!r}."
            raise ConfigurationError(msg)

        route = Route(
            method=method,
            path=join_paths("", pattern),
            segments=parse_path(pattern),
            handler=handler,
            name=name,
        )
        self._routes.append(route)
        self._by_method.setdefault(method, []).append(route)
        return route

    def group(self, prefix: str) -> "RouteGroup":
        """Return a view that registers routes under *prefix*."""
        from switchyard.routing.group import RouteGroup

        return RouteGroup(self, prefix)

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._routes)

    @property
    def compiled(self) -> bool:
        return self._compiled

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Return the first route of *method* whose pattern matches *path*.

        Raises ``RouteNotFound`` if no route matches.
        """
        parts = split_path(path)
        for route in self._by_method.get(method.upper(), ()):
            params = _match_segments(route.segments, parts)
            if params is not None:
                return RouteMatch(route=route, path_params=params)
        raise RouteNotFound(f"Cannot {method} {path}")


def _match_segments(
    segments: tuple[PathSegment, ...],
    parts: list[str],
) -> dict[str, str] | None:
    if len(segments) != len(parts):
        return None
    params: dict[str, str] = {}
    for seg, part in zip(segments, parts, strict=True):
        if not seg.matches(part):
            return None
        if seg.is_param:
            params[seg.value] = part
    return params

