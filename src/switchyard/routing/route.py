"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# The fixed set of methods a route may be registered for
METHODS: frozenset[str] = frozenset(
    {"GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "CONNECT", "TRACE"}
)


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Literal:  ``users``    (is_param=False)
    Param:    ``:userId``  (is_param=True, value="userId")
    """

    value: str
    is_param: bool = False

    def matches(self, part: str) -> bool:
        """Literals compare exactly (case-sensitive); params take any non-empty part."""
        if self.is_param:
            return part != ""
        return part == self.value


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen (method, pattern) -> handler binding."""

    method: str
    path: str
    segments: tuple[PathSegment, ...]
    handler: Callable[..., Any]
    name: str | None = None

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(seg.value for seg in self.segments if seg.is_param)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``path_params`` preserves the order parameters appear in the pattern.
    """

    route: Route
    path_params: dict[str, str]
