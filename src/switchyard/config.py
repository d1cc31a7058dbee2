"""Application configuration.

One frozen ``AppConfig`` is handed to ``App``. The runner reads the server
settings (host, port, workers, timeouts, log level) from it; the app
reads the template, static and limit settings.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Settings for one application. Every field has a default::

        config = AppConfig(port=3000, workers=4, template_dir="template")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Templates
    template_dir: str | Path = "templates"
    template_extension: str = ".html"  # Appended to Template names without a suffix
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Static files (mounted only when the directory exists)
    static_dir: str | Path | None = None
    static_url: str = "/static"

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    # Worker processes (0 = auto-detect from CPU count, 1 = no prefork)
    workers: int = 1

    # Timeouts, in seconds
    keep_alive_timeout: float = 5.0  # idle connection
    request_timeout: float = 5.0  # read + write of a single request

    # Logging
    log_level: str = "info"
