"""Tests for the tour example: every request and response feature end to end."""

from pathlib import Path

import pytest

from switchyard.testing import TestClient

UPLOAD_DIR = Path(__file__).parent / "target"

XML_BODY = (
    b"<RegisterRequest>"
    b"<username>Dika</username>"
    b"<password>rahasia</password>"
    b"<name>Dika Koko</name>"
    b"</RegisterRequest>"
)


@pytest.fixture(autouse=True)
def _clean_uploads():
    """Remove test uploads after each test."""
    yield
    for f in UPLOAD_DIR.iterdir():
        if f.is_file() and f.name != ".gitkeep":
            f.unlink()


class TestRequests:
    async def test_hello_world(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.text == "Hello, World!"

    async def test_query(self, example_app) -> None:
        async with TestClient(example_app) as client:
            assert (await client.get("/hello?name=Dika")).text == "Hello Dika"
            assert (await client.get("/hello")).text == "Hello Guest"

    async def test_header_and_cookie(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get(
                "/request", headers={"firstname": "Dika"}, cookies={"lastname": "Koko"}
            )
            assert response.text == "Hello Dika Koko"

    async def test_route_parameters(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/users/dika/orders/10")
            assert response.text == "Get Order 10 from user dika"

    async def test_form(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/hello", form={"name": "Dika"})
            assert response.text == "Hello Dika"

    async def test_upload(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/upload",
                files={"file": ("sample.txt", b"Sample file upload!\n", "text/plain")},
            )
            assert response.text == "Upload file to target sample.txt successfully"
        assert (UPLOAD_DIR / "sample.txt").read_bytes() == b"Sample file upload!\n"

    async def test_upload_without_file(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/upload", files={}, form={"other": "x"})
            assert response.status == 500
            assert response.text == "Error: missing file field"

    async def test_json_login(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/login", json={"username": "Dika", "password": "rahasia"})
            assert response.text == "Hello Dika"

    async def test_register_json(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/register",
                json={"username": "Dika", "password": "rahasia", "name": "Dika Koko"},
            )
            assert response.text == "Register Dika successfully"

    async def test_register_form(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/register",
                body=b"username=Dika&password=rahasia&name=Dika+Koko",
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            assert response.text == "Register Dika successfully"

    async def test_register_xml(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post(
                "/register", body=XML_BODY, headers={"Content-Type": "application/xml"}
            )
            assert response.text == "Register Dika successfully"


class TestResponses:
    async def test_json(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/user")
            assert response.content_type == "application/json"
            assert response.text == '{"username":"Dika","name":"Dika koko"}'

    async def test_download(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/download")
            assert response.header("content-disposition") == 'attachment; filename="sample.txt"'
            assert response.text == "Sample file upload!\n"

    async def test_groups(self, example_app) -> None:
        async with TestClient(example_app) as client:
            for path in ("/api/hello", "/api/world", "/web/hello", "/web/world"):
                assert (await client.get(path)).text == "Hello World"

    async def test_static(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/public/sample.txt")
            assert response.text == "Sample file upload!\n"

    async def test_error_handler(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/error")
            assert response.status == 500
            assert response.text == "Error: ups"

    async def test_view(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/view")
            assert "Hello Title" in response.text
            assert "Hello Header" in response.text
            assert "Hello Content" in response.text

    async def test_outbound_client(self, example_app, monkeypatch: pytest.MonkeyPatch) -> None:
        route = next(r for r in example_app.routes if r.path == "/example")

        async def fake_fetch(url: str) -> tuple[int, str]:
            assert url == "https://example.com"
            return 200, "<h1>Example Domain</h1>"

        monkeypatch.setitem(route.handler.__globals__, "fetch", fake_fetch)

        async with TestClient(example_app) as client:
            response = await client.get("/example")
            assert "Example Domain" in response.text
