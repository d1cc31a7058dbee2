"""Tour: one handler per request and response feature.

Query strings, headers and cookies, path parameters, form values,
multipart uploads, JSON bodies, content-type binding (JSON, form, XML),
JSON responses, downloads, groups, static files, a custom error handler,
templates, and an outbound HTTP call.

Run:
    python app.py
"""

from dataclasses import dataclass
from pathlib import Path

from switchyard import App, AppConfig, Download, Request, Response, Template
from switchyard.client import fetch

HERE = Path(__file__).parent
UPLOAD_DIR = HERE / "target"


@dataclass
class LoginRequest:
    username: str = ""
    password: str = ""


@dataclass
class RegisterRequest:
    username: str = ""
    password: str = ""
    name: str = ""


def on_error(request: Request, exc: Exception) -> Response:
    return Response(f"Error: {exc}", status=500)


app = App(AppConfig(template_dir=HERE / "template"), error_handler=on_error)


@app.get("/")
def index():
    return "Hello, World!"


@app.get("/hello")
def hello(request: Request):
    return f"Hello {request.query.get('name', 'Guest')}"


@app.get("/request")
def request_info(request: Request):
    first = request.headers.get("firstname", "")
    last = request.cookies.get("lastname", "")
    return f"Hello {first} {last}"


@app.get("/users/:userId/orders/:orderId")
def order(userId: str, orderId: str):
    return f"Get Order {orderId} from user {userId}"


@app.post("/hello")
async def hello_form(request: Request):
    return f"Hello {await request.form_value('name')}"


@app.post("/upload")
async def upload(request: Request):
    form = await request.form()
    file = form.files.get("file")
    if file is None:
        return Exception("missing file field")
    await file.save(UPLOAD_DIR / file.filename)
    return f"Upload file to target {file.filename} successfully"


@app.post("/login")
async def login(request: Request):
    body = await request.bind(LoginRequest)
    return f"Hello {body.username}"


@app.post("/register")
def register(body: RegisterRequest):
    return f"Register {body.username} successfully"


@app.get("/user")
def user():
    return {"username": "Dika", "name": "Dika koko"}


@app.get("/download")
def download():
    return Download(HERE / "source" / "sample.txt", "sample.txt")


def hello_world():
    return "Hello World"


api = app.group("/api")
api.get("/hello", hello_world)
api.get("/world", hello_world)

web = app.group("/web")
web.get("/hello", hello_world)
web.get("/world", hello_world)

app.static("/public", HERE / "source")


@app.get("/error")
def error():
    return Exception("ups")


@app.get("/view")
def view():
    return Template(
        "index",
        title="Hello Title",
        header="Hello Header",
        content="Hello Content",
    )


@app.get("/example")
async def example():
    status, body = await fetch("https://example.com")
    return body, status


if __name__ == "__main__":
    app.run()
