"""Tests for kida template rendering and the Template return type."""

import pytest

from switchyard.app import App
from switchyard.config import AppConfig
from switchyard.templating import Template, create_environment, render, template_filename
from switchyard.testing import TestClient

INDEX = "<html><head><title>{{ title }}</title></head><body><h1>{{ header }}</h1><p>{{ content }}</p></body></html>"


@pytest.fixture
def template_dir(tmp_path):
    templates = tmp_path / "template"
    templates.mkdir()
    (templates / "index.html").write_text(INDEX)
    return templates


class TestTemplateFilename:
    def test_extension_appended(self) -> None:
        assert template_filename("index", ".html") == "index.html"

    def test_existing_suffix_kept(self) -> None:
        assert template_filename("index.txt", ".html") == "index.txt"

    def test_no_extension_configured(self) -> None:
        assert template_filename("index", "") == "index"


class TestRender:
    def test_render_returns_bytes(self, template_dir) -> None:
        env = create_environment(AppConfig(template_dir=template_dir))
        html = render(env, "index", {"title": "T", "header": "H", "content": "C"})
        assert isinstance(html, bytes)
        assert b"<title>T</title>" in html
        assert b"<h1>H</h1>" in html

    def test_template_values(self) -> None:
        tpl = Template("index", title="Hello Title")
        assert tpl.name == "index"
        assert tpl.context == {"title": "Hello Title"}


class TestTemplateResponse:
    async def test_handler_returns_template(self, template_dir) -> None:
        app = App(AppConfig(template_dir=template_dir))

        @app.get("/view")
        def view() -> Template:
            return Template(
                "index",
                title="Hello Title",
                header="Hello Header",
                content="Hello Content",
            )

        async with TestClient(app) as client:
            response = await client.get("/view")

        assert response.status == 200
        assert response.content_type == "text/html; charset=utf-8"
        assert "Hello Title" in response.text
        assert "Hello Header" in response.text
        assert "Hello Content" in response.text

    async def test_values_autoescaped(self, template_dir) -> None:
        app = App(AppConfig(template_dir=template_dir))
        app.get("/view", lambda: Template("index", title="<b>x</b>", header="", content=""))

        async with TestClient(app) as client:
            response = await client.get("/view")

        assert "<b>x</b>" not in response.text
        assert "&lt;b&gt;" in response.text

    async def test_missing_template_is_500(self, template_dir) -> None:
        app = App(AppConfig(template_dir=template_dir))
        app.get("/view", lambda: Template("missing"))

        async with TestClient(app) as client:
            response = await client.get("/view")

        assert response.status == 500
        assert response.text.startswith("Error: ")
