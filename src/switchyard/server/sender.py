"""Write a ``Response`` to the ASGI ``send`` callable.

Every response goes out as exactly two messages: ``http.response.start``
with the status and encoded headers, then one ``http.response.body``.
"""

from collections.abc import Iterator

from switchyard._internal.asgi import Send
from switchyard.http.response import Response

# Statuses that never carry a body (RFC 9110 §6.4.1)
_BODYLESS = frozenset({204, 304})


def _encoded_headers(response: Response, content_length: int) -> Iterator[tuple[bytes, bytes]]:
    yield b"content-type", response.content_type.encode("latin-1")
    for name, value in response.headers:
        yield name.lower().encode("latin-1"), value.encode("latin-1")
    for cookie in response.cookies:
        yield b"set-cookie", cookie.to_header_value().encode("latin-1")
    yield b"content-length", str(content_length).encode("ascii")


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send *response*.

    A ``HEAD`` response advertises the length of the body it would have
    had, then sends an empty body.
    """
    status = response.status
    body = b"" if status < 200 or status in _BODYLESS else response.body_bytes

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": list(_encoded_headers(response, len(body))),
        }
    )
    await send({"type": "http.response.body", "body": b"" if head else body})
