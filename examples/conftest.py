"""Fixtures for the example apps.

Each example directory holds an ``app.py`` defining ``app`` and a
``test_app.py`` next to it. ``example_app`` executes that ``app.py`` as a
new module for every test, so registrations never leak between tests.
"""

import importlib.util
from pathlib import Path

import pytest

from switchyard import App


def load_example(app_file: Path) -> App:
    spec = importlib.util.spec_from_file_location(f"examples.{app_file.parent.name}", app_file)
    if spec is None or spec.loader is None:
        msg = f"Cannot load {app_file}"
        raise ImportError(msg)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.app


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> App:
    """The ``app`` from the ``app.py`` beside the requesting test module."""
    return load_example(Path(request.path).with_name("app.py"))
