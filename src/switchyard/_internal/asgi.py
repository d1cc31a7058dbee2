"""ASGI 3 callable signatures.

Only the ASGI entry points (``App.__call__``, the request handler, the
sender and the test client) deal in these; everything past them works
with ``Request`` and ``Response``.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

type Message = MutableMapping[str, Any]
type Scope = MutableMapping[str, Any]
type Receive = Callable[[], Awaitable[Message]]
type Send = Callable[[Message], Awaitable[None]]
