"""Serve an App with pounce.

Maps ``AppConfig`` onto pounce's ``ServerConfig``: ``workers`` is the
prefork process count, ``keep_alive_timeout`` bounds idle connections,
and ``request_timeout`` bounds reading and writing a single request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from switchyard.app import App

logger = logging.getLogger("switchyard.server")


def configure_logging(level: str) -> None:
    """Send switchyard's loggers to stderr at *level* (``"info"``, ``"debug"``, ...)."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_server(app: App, host: str | None = None, port: int | None = None) -> None:
    """Start pounce with the live App object.

    Requires the ``server`` extra (``pip install switchyard[server]``).
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = app.config
    configure_logging(config.log_level)

    server_config = ServerConfig(
        host=host or config.host,
        port=port or config.port,
        workers=config.workers,
        log_level=config.log_level,
        keep_alive_timeout=config.keep_alive_timeout,
        request_timeout=config.request_timeout,
    )
    logger.info(
        "Serving on http://%s:%d with %d worker(s)",
        server_config.host,
        server_config.port,
        config.workers,
    )
    Server(server_config, app).run()
