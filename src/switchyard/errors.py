"""Switchyard exception hierarchy.

Shared across Router, App, dispatcher, decoders, and middleware so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when app configuration is invalid.

    Typically raised while registering routes or during ``App._freeze()``.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or middleware. The default error handler keeps
    ``status`` instead of collapsing it to 500.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class RouteNotFound(HTTPError):  # noqa: N818
    """404: no registered pattern matches the request.

    Produced by the matcher and answered by the dispatcher directly;
    never handed to the error handler.
    """

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class HandlerError(SwitchyardError):
    """An application error produced by a handler or middleware.

    Handlers may either raise or *return* an exception instance; returned
    exceptions that are not already switchyard errors are wrapped in a
    ``HandlerError`` so the error handler sees a uniform type.  The
    original exception is available as ``.error`` and ``__cause__``.
    """

    def __init__(self, error: BaseException) -> None:
        self.error = error
        super().__init__(str(error))


class DecodeError(SwitchyardError):
    """Request body could not be decoded into the requested shape.

    ``status`` is a hint for custom error handlers; the default handler
    maps every non-HTTP error to 500.
    """

    status: int = 400

    def __init__(self, message: str, *, media_type: str = "", cause: BaseException | None = None) -> None:
        self.media_type = media_type
        self.cause = cause
        super().__init__(message)


class UnsupportedMediaType(DecodeError):  # noqa: N818
    """No decoding strategy is registered for the request's content type."""

    status = 415


class MalformedBody(DecodeError):  # noqa: N818
    """The payload is not valid for the strategy its content type selected."""

    status = 400


class ClientError(SwitchyardError):
    """An outbound request failed before a response arrived.

    Wraps the underlying ``httpx`` error (timeout, connection refused,
    invalid URL); it is available as ``__cause__``.
    """

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"GET {url} failed: {detail}")


def returned_error(error: BaseException) -> SwitchyardError:
    """The exception to raise for *error* returned by a handler or middleware.

    Switchyard errors pass through; anything else is wrapped in
    ``HandlerError`` with *error* as its cause.
    """
    if isinstance(error, SwitchyardError):
        return error
    wrapped = HandlerError(error)
    wrapped.__cause__ = error
    return wrapped
