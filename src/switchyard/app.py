"""App: the explicit router/dispatcher value.

Mutable during setup, frozen at runtime. There is no global app: routes,
middleware and the error handler live on the ``App`` you create.
"""

import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from kida import Environment

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.invoke import invoke
from switchyard._internal.types import ErrorHandler, Handler
from switchyard.config import AppConfig
from switchyard.errors import ConfigurationError
from switchyard.http.decoding import BodyDecoders, Strategy
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.middleware.chain import MiddlewareBinding, MiddlewareStack
from switchyard.middleware.protocol import Middleware
from switchyard.middleware.static import StaticFiles
from switchyard.routing.group import RouteGroup, RouteRegistrar
from switchyard.routing.route import Route
from switchyard.routing.router import Router
from switchyard.server.dispatcher import Dispatcher
from switchyard.server.handler import handle_request
from switchyard.templating.integration import create_environment


class App(RouteRegistrar):
    """The switchyard application.

    Mutable during setup (register routes, groups, middleware, static
    directories, the error handler). Frozen on the first request, the
    ASGI lifespan startup, or ``run()``.

    Usage::

        app = App(AppConfig(port=3000))

        app.get("/", lambda: "Hello, World!")

        api = app.group("/api")
        api.use(RequestLogger())
        api.get("/users/:userId/orders/:orderId", show_order)

        app.static("/public", "./source")
        app.run()

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the app, even when several ASGI workers receive
        their first request at the same time.
    """

    __slots__ = (
        "_decoders",
        "_dispatcher",
        "_error_handler",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_middleware",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        error_handler: ErrorHandler | None = None,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router = Router()
        self._middleware = MiddlewareStack()
        self._decoders = BodyDecoders()
        self._error_handler: ErrorHandler | None = error_handler
        self._kida_env: Environment | None = kida_env
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._dispatcher: Dispatcher | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Route registration --

    def add(
        self,
        method: str,
        pattern: str,
        handler: Handler,
        *,
        name: str | None = None,
    ) -> Route:
        """Register *handler* for one method and pattern.

        Patterns use ``:name`` for parameters: ``/users/:userId``.
        The ``get``/``post``/... shortcuts and ``route()`` build on this.
        """
        self._check_not_frozen()
        return self._router.add(method, pattern, handler, name=name)

    def group(self, prefix: str) -> RouteGroup:
        """Return a group that registers routes (and middleware) under *prefix*."""
        return RouteGroup(self, prefix)

    @property
    def routes(self) -> list[Route]:
        """Registered routes in registration order."""
        return self._router.routes

    # -- Middleware --

    def use(self, prefix_or_middleware: str | Middleware, *middleware: Middleware) -> MiddlewareBinding:
        """Bind middleware to a path prefix, or globally.

        Usage::

            app.use(RequestLogger())           # every request
            app.use("/api", auth, audit)       # /api and everything under it
        """
        self._check_not_frozen()
        if isinstance(prefix_or_middleware, str):
            prefix, chain = prefix_or_middleware, middleware
        else:
            prefix, chain = "", (prefix_or_middleware, *middleware)
        if not chain:
            msg = f"app.use({prefix_or_middleware!r}) needs at least one middleware."
            raise ConfigurationError(msg)
        return self._middleware.use(prefix, *chain)

    def static(self, prefix: str, directory: str | Path, **options: Any) -> MiddlewareBinding:
        """Serve files from *directory* under the URL *prefix*.

        Usage::

            app.static("/public", "./source")   # GET /public/sample.txt
        """
        return self.use(prefix, StaticFiles(directory, prefix, **options))

    # -- Error handling and decoding --

    def error_handler(self, func: ErrorHandler) -> ErrorHandler:
        """Register the error handler via decorator.

        The handler receives ``(request, exc)`` and may return any value a
        route handler may return. It replaces the default handler, which
        answers ``"Error: <message>"`` with status 500 (or the status of
        an ``HTTPError``).
        """
        self._check_not_frozen()
        self._error_handler = func
        return func

    def body_decoder(self, media: str) -> Callable[[Strategy], Strategy]:
        """Register a body decoding strategy for a media type via decorator.

        Usage::

            @app.body_decoder("text/csv")
            def decode_csv(raw: bytes, content_type: str) -> dict[str, str]:
                header, row = raw.decode().splitlines()[:2]
                return dict(zip(header.split(","), row.split(",")))
        """

        def decorator(func: Strategy) -> Strategy:
            self._check_not_frozen()
            self._decoders.register(media, func)
            return func

        return decorator

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with pounce.

        ``AppConfig.workers`` sets the number of prefork worker processes.
        """
        self._ensure_frozen()

        from switchyard.server.runner import run_server

        run_server(self, host, port)

    async def handle(self, request: Request) -> Response:
        """Dispatch a single request without going through ASGI."""
        self._ensure_frozen()
        assert self._dispatcher is not None
        return await self._dispatcher.handle(request)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()
        assert self._dispatcher is not None

        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self._dispatcher,
            max_content_length=self.config.max_content_length,
        )

    async def _handle_lifespan(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup, then runs the registered hooks and
        signals completion back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Freeze the app and run the startup hooks in registration order."""
        self._ensure_frozen()
        for hook in self._startup_hooks:
            await invoke(hook)

    async def shutdown(self) -> None:
        for hook in self._shutdown_hooks:
            await invoke(hook)

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Mount the configured static directory, if it exists
        static_dir = self.config.static_dir
        if static_dir is not None and Path(static_dir).is_dir():
            self._middleware.use(self.config.static_url, StaticFiles(static_dir, self.config.static_url))

        # 2. No more routes or middleware
        self._router.compile()
        self._middleware.freeze()

        # 3. Template environment
        if self._kida_env is None:
            self._kida_env = create_environment(self.config)

        self._dispatcher = Dispatcher(
            self._router,
            self._middleware,
            decoders=self._decoders,
            error_handler=self._error_handler,
            kida_env=self._kida_env,
            template_extension=self.config.template_extension,
        )
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and handlers before calling app.run()."
            )
            raise RuntimeError(msg)
