"""Outbound HTTP client.

A thin layer over ``httpx.AsyncClient`` for handlers that call other
services::

    status, body = await fetch("https://example.com")

Transport failures raise ``ClientError``; HTTP error statuses do not,
the caller decides what a 404 or 500 from upstream means.
"""

import logging

import httpx

from switchyard.errors import ClientError

logger = logging.getLogger("switchyard.client")


async def fetch(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: float = 5.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[int, str]:
    """GET *url* and return ``(status, text)``.

    *transport* replaces the network layer, e.g. ``httpx.MockTransport``
    in tests.
    """
    async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
        try:
            response = await client.get(url, headers=headers, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("GET %s failed: %s", url, exc)
            raise ClientError(url, str(exc) or type(exc).__name__) from exc

    logger.debug("GET %s -> %d", url, response.status_code)
    return response.status_code, response.text
