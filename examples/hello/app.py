"""Hello World: prefork serving with prefix-bound middleware.

Middleware registered for ``/api`` runs around ``/api`` and everything
beneath it, and never around ``/``.

Run:
    python app.py
"""

import logging

from switchyard import App, AppConfig, Request, Response
from switchyard.middleware import Next

logger = logging.getLogger("hello")

app = App(
    AppConfig(
        port=3000,
        workers=4,  # prefork
        keep_alive_timeout=5.0,
        request_timeout=5.0,
    )
)


async def around_api(request: Request, next: Next) -> Response:
    logger.info("Middleware before request")
    response = await next(request)
    logger.info("Middleware after request")
    return response


app.use("/api", around_api)


@app.get("/")
def index():
    return "Hello, World!"


@app.get("/api/v1")
def api_v1():
    return "Hello, World!"


if __name__ == "__main__":
    app.run()
