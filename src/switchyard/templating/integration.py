"""Kida environment setup.

Creates a kida Environment from switchyard's AppConfig. The environment
is created once when the app freezes and passed through the dispatcher.
"""

from collections.abc import Mapping
from pathlib import PurePosixPath
from typing import Any

from kida import ChoiceLoader, Environment, FileSystemLoader

from switchyard.config import AppConfig


def create_environment(config: AppConfig) -> Environment:
    """Create a kida Environment from app configuration.

    Templates load from ``config.template_dir``. When a static directory
    is configured it is searched as well, so pages kept next to their
    assets can be rendered too.
    """
    loaders = [FileSystemLoader(str(config.template_dir))]
    if config.static_dir is not None:
        loaders.append(FileSystemLoader(str(config.static_dir)))

    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )


def template_filename(name: str, extension: str) -> str:
    """Append *extension* to *name* unless it already has a suffix."""
    if not extension or PurePosixPath(name).suffix:
        return name
    return name + extension


def render(
    env: Environment,
    name: str,
    values: Mapping[str, Any],
    *,
    extension: str = ".html",
) -> bytes:
    """Render the template *name* with *values* to UTF-8 bytes."""
    template = env.get_template(template_filename(name, extension))
    return template.render(dict(values)).encode("utf-8")
