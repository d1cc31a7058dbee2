"""HTTP entry point behind ``App.__call__``.

Builds a ``Request`` from the scope, rejects bodies whose declared length
exceeds the configured limit, dispatches, and writes the ``Response``.
"""

import logging

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.server.dispatcher import Dispatcher
from switchyard.server.sender import send_response

logger = logging.getLogger("switchyard.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    max_content_length: int | None = None,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    length = request.content_length
    if max_content_length is not None and length is not None and length > max_content_length:
        logger.debug(
            "413 %s %s: %d bytes exceeds %d",
            request.method,
            request.path,
            length,
            max_content_length,
        )
        response = Response(body="Payload Too Large", status=413)
    else:
        response = await dispatcher.handle(request)

    await send_response(response, send, head=request.method == "HEAD")
