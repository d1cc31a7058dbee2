"""Callable shapes accepted from application code."""

from collections.abc import Callable
from typing import Any

# Any signature; arguments are filled from the request by name and annotation
type Handler = Callable[..., Any]

# (request, exc), (request) or (); returns anything a Handler may return
type ErrorHandler = Callable[..., Any]
