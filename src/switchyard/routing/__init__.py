"""Routing: ordered route table with first-match-wins lookup.

Routes are registered during setup (directly or through prefix groups)
and frozen before the app serves its first request.
"""

from switchyard.routing.group import RouteGroup, RouteRegistrar
from switchyard.routing.route import METHODS, PathSegment, Route, RouteMatch
from switchyard.routing.router import Router, join_paths, parse_path, split_path

__all__ = [
    "METHODS",
    "PathSegment",
    "Route",
    "RouteGroup",
    "RouteMatch",
    "RouteRegistrar",
    "Router",
    "join_paths",
    "parse_path",
    "split_path",
]
