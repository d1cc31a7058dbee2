"""Request dispatch: match, build the chain, invoke, route failures.

The dispatcher is the seam between the frozen route table and a single
request:

1. Match the request against the router. An unmatched path gets a
   terminal step that answers 404 directly.
2. Compose the middleware that applies to the path around the terminal
   step and run the chain.
3. Any exception that escapes the chain (raised, or returned by a
   handler or middleware as a value) reaches the error handler exactly
   once.

Exactly one ``Response`` comes out of ``handle()`` per request.
"""

import dataclasses
import inspect
import logging
from collections.abc import Callable
from typing import Any

from kida import Environment

from switchyard._internal.invoke import invoke
from switchyard._internal.types import ErrorHandler
from switchyard.context import request_scope
from switchyard.errors import HTTPError, RouteNotFound, returned_error
from switchyard.http.decoding import BodyDecoders, bind
from switchyard.http.request import Request
from switchyard.http.response import Download, Response
from switchyard.middleware.chain import Endpoint, MiddlewareStack
from switchyard.routing.route import Route
from switchyard.routing.router import Router
from switchyard.server.errors import call_error_handler, default_error_handler
from switchyard.server.negotiation import negotiate

logger = logging.getLogger("switchyard.server")


class Dispatcher:
    """Turns one ``Request`` into one ``Response``.

    Usage::

        dispatcher = Dispatcher(router, middleware, decoders=decoders)
        response = await dispatcher.handle(request)
    """

    __slots__ = (
        "_decoders",
        "_error_handler",
        "_kida_env",
        "_middleware",
        "_router",
        "_template_extension",
    )

    def __init__(
        self,
        router: Router,
        middleware: MiddlewareStack,
        *,
        decoders: BodyDecoders | None = None,
        error_handler: ErrorHandler | None = None,
        kida_env: Environment | None = None,
        template_extension: str = ".html",
    ) -> None:
        self._router = router
        self._middleware = middleware
        self._decoders = decoders or BodyDecoders()
        self._error_handler = error_handler or default_error_handler
        self._kida_env = kida_env
        self._template_extension = template_extension

    async def handle(self, request: Request) -> Response:
        """Dispatch *request* through the middleware chain to its handler."""
        endpoint: Endpoint
        try:
            match = self._router.match(request.method, request.path)
        except RouteNotFound as exc:
            logger.debug("404 %s %s", request.method, request.path)
            request = request.with_params({}, self._decoders)
            endpoint = _not_found(exc)
        else:
            request = request.with_params(match.path_params, self._decoders)
            endpoint = self._endpoint_for(match.route)

        chain = self._middleware.build(request.path, endpoint)
        with request_scope(request):
            try:
                return await chain(request)
            except Exception as exc:
                return await self._handle_error(request, exc)

    def _endpoint_for(self, route: Route) -> Endpoint:
        async def endpoint(request: Request) -> Response:
            return await self._invoke_handler(route.handler, request)

        return endpoint

    async def _invoke_handler(self, handler: Callable[..., Any], request: Request) -> Response:
        """Call the route handler and convert its return value."""
        kwargs = await _build_handler_kwargs(handler, request)
        result = await invoke(handler, **kwargs)

        if isinstance(result, BaseException):
            raise returned_error(result)
        if isinstance(result, Download):
            return await result.load()
        return negotiate(
            result,
            kida_env=self._kida_env,
            template_extension=self._template_extension,
        )

    async def _handle_error(self, request: Request, exc: Exception) -> Response:
        try:
            return await call_error_handler(
                self._error_handler,
                request,
                exc,
                kida_env=self._kida_env,
                template_extension=self._template_extension,
            )
        except Exception:
            logger.exception("Error handler failed for %s %s", request.method, request.path)
            return Response(body="Internal Server Error", status=500)


def _not_found(exc: RouteNotFound) -> Endpoint:
    async def endpoint(request: Request) -> Response:
        return Response(body=exc.detail, status=404)

    return endpoint


async def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
) -> dict[str, Any]:
    """Inspect the handler signature and build kwargs from the request.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters (by name; an ``int`` or ``float`` annotation that
       does not convert answers 400)
    3. Dataclass annotation: query string for GET/HEAD, body otherwise
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        annotation = param.annotation
        if name == "request" or annotation is Request:
            kwargs[name] = request
        elif name in request.path_params:
            value = request.path_params[name]
            if annotation in (int, float):
                try:
                    kwargs[name] = annotation(value)
                except ValueError as exc:
                    msg = f"Invalid {annotation.__name__} for {name}: {value!r}"
                    raise HTTPError(400, msg) from exc
            else:
                kwargs[name] = value
        elif isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
            if request.method in ("GET", "HEAD"):
                kwargs[name] = bind(annotation, dict(request.query.items()), media="query")
            else:
                kwargs[name] = await request.bind(annotation)

    return kwargs
