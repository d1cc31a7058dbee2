"""Switchyard: HTTP routing, prefix-bound middleware and body decoding for ASGI.

Basic usage::

    from switchyard import App

    app = App()

    app.get("/", lambda: "Hello, World!")

    @app.get("/users/:userId/orders/:orderId")
    def show_order(userId: str, orderId: str) -> str:
        return f"Get Order {orderId} from user {userId}"

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ClientError",
    "ConfigurationError",
    "Download",
    "HTTPError",
    "HandlerError",
    "MalformedBody",
    "Middleware",
    "Next",
    "Redirect",
    "Request",
    "RequestLogger",
    "Response",
    "RouteNotFound",
    "StaticFiles",
    "SwitchyardError",
    "Template",
    "UnsupportedMediaType",
    "UploadFile",
    "g",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Resolve the public names on first access."""
    if name == "App":
        from switchyard.app import App

        return App

    if name == "AppConfig":
        from switchyard.config import AppConfig

        return AppConfig

    if name == "Request":
        from switchyard.http.request import Request

        return Request

    if name in ("Response", "Redirect", "Download"):
        from switchyard.http import response as _resp

        return getattr(_resp, name)

    if name == "UploadFile":
        from switchyard.http.forms import UploadFile

        return UploadFile

    if name == "Template":
        from switchyard.templating.returns import Template

        return Template

    if name in ("Middleware", "Next"):
        from switchyard.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("RequestLogger", "StaticFiles"):
        from switchyard import middleware as _middleware

        return getattr(_middleware, name)

    if name in ("g", "get_request"):
        from switchyard import context as _ctx

        return getattr(_ctx, name)

    if name in (
        "ClientError",
        "ConfigurationError",
        "HTTPError",
        "HandlerError",
        "MalformedBody",
        "RouteNotFound",
        "SwitchyardError",
        "UnsupportedMediaType",
    ):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
