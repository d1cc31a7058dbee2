"""Turn whatever a handler returned into a ``Response``."""

import json as json_module
from typing import Any

from kida import Environment

from switchyard.errors import ConfigurationError
from switchyard.http.response import Redirect, Response
from switchyard.templating.integration import render
from switchyard.templating.returns import Template


def negotiate(
    value: Any,
    *,
    kida_env: Environment | None = None,
    template_extension: str = ".html",
) -> Response:
    """Convert a route handler's return value to a Response.

    Dispatch order:

    1. ``Response``         -> pass through
    2. ``Redirect``         -> status with Location header
    3. ``Template``         -> render via kida, text/html
    4. ``str``              -> 200, text/plain
    5. ``bytes``            -> 200, application/octet-stream
    6. ``dict`` / ``list``  -> 200, application/json
    7. ``None``             -> 200, empty body
    8. ``(value, int)``     -> negotiate value, override status
    9. ``(value, int, dict)`` -> negotiate value, override status + headers

    ``Download`` values and returned exceptions are resolved by the
    dispatcher before negotiation.
    """
    match value:
        case Response():
            return value
        case Redirect():
            return Response(body="").with_status(value.status).with_header("Location", value.url)
        case Template():
            if kida_env is None:
                msg = (
                    "Template return type requires kida integration. "
                    "Ensure a template_dir is configured in AppConfig."
                )
                raise ConfigurationError(msg)
            html = render(kida_env, value.name, value.context, extension=template_extension)
            return Response(body=html, content_type="text/html; charset=utf-8")
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            body = json_module.dumps(value, separators=(",", ":"), default=str)
            return Response(body=body, content_type="application/json")
        case None:
            return Response(body="")
        case (inner, int() as status):
            return negotiate(
                inner, kida_env=kida_env, template_extension=template_extension
            ).with_status(status)
        case (inner, int() as status, dict() as headers):
            return (
                negotiate(inner, kida_env=kida_env, template_extension=template_extension)
                .with_status(status)
                .with_headers(headers)
            )
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                "Return a Response, str, bytes, dict, list, Template, Download or Redirect."
            )
            raise TypeError(msg)
