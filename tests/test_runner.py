"""Tests for serving an App with pounce."""

import logging

import pytest

from switchyard.app import App
from switchyard.config import AppConfig
from switchyard.server import runner


class TestRun:
    def test_app_run_freezes_and_delegates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple[object, str | None, int | None]] = []
        monkeypatch.setattr(runner, "run_server", lambda app, host, port: calls.append((app, host, port)))

        app = App()
        app.get("/", lambda: "home")
        app.run(port=3000)

        assert calls == [(app, None, 3000)]
        with pytest.raises(RuntimeError):
            app.get("/late", lambda: "late")

    def test_pounce_config_from_app_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        pytest.importorskip("pounce")
        import pounce.server

        started: list[object] = []

        class RecordingServer:
            def __init__(self, config: object, app: object) -> None:
                self.config = config
                self.app = app

            def run(self) -> None:
                started.append(self)

        monkeypatch.setattr(pounce.server, "Server", RecordingServer)
        monkeypatch.setattr(runner, "configure_logging", lambda level: None)

        app = App(AppConfig(port=3000, workers=4, keep_alive_timeout=5.0, request_timeout=5.0))
        runner.run_server(app)

        [server] = started
        assert server.app is app
        assert server.config.port == 3000
        assert server.config.workers == 4
        assert server.config.request_timeout == 5.0


class TestConfigureLogging:
    def test_level_name(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict[str, object] = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: seen.update(kwargs))

        runner.configure_logging("debug")

        assert seen["level"] == "DEBUG"
