import asyncio
import json
import os
import threading
import time
import typing

import pytest
from uvicorn.config import Config
from uvicorn.server import Server

import webreq

ENVIRONMENT_VARIABLES = {
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "ALL_PROXY",
    "NO_PROXY",
    "WEBREQ_TIMEOUT",
}


@pytest.fixture(scope="function", autouse=True)
def clean_environ():
    """Keeps os.environ clean for every test without having to mock os.environ"""
    original_environ = os.environ.copy()
    os.environ.clear()
    os.environ.update(
        {
            k: v
            for k, v in original_environ.items()
            if k not in ENVIRONMENT_VARIABLES and k.lower() not in ENVIRONMENT_VARIABLES
        }
    )
    yield
    os.environ.clear()
    os.environ.update(original_environ)


@pytest.fixture(autouse=True)
def restore_defaults():
    """Tests may swap the process-wide timeout or client; put them back."""
    timeout = webreq.defaults.timeout
    client = webreq.defaults._client
    owns_client = webreq.defaults._owns_client
    yield
    webreq.defaults.timeout = timeout
    webreq.defaults._client = client
    webreq.defaults._owns_client = owns_client


Message = typing.Dict[str, typing.Any]
Receive = typing.Callable[[], typing.Awaitable[Message]]
Send = typing.Callable[
    [typing.Dict[str, typing.Any]], typing.Coroutine[None, None, None]
]
Scope = typing.Dict[str, typing.Any]


async def app(scope: Scope, receive: Receive, send: Send) -> None:
    assert scope["type"] == "http"
    path = scope["path"]
    if path.startswith("/slow_response"):
        await slow_response(scope, receive, send)
    elif path.startswith("/status"):
        await status_code(scope, receive, send)
    elif path.startswith("/echo_body"):
        await echo_body(scope, receive, send)
    elif path.startswith("/echo_headers"):
        await echo_headers(scope, receive, send)
    elif path.startswith("/echo_request"):
        await echo_request(scope, receive, send)
    elif path.startswith("/redirect_301"):
        await redirect_301(scope, receive, send)
    elif path.startswith("/timestamp"):
        await timestamp(scope, receive, send)
    elif path.startswith("/trickle"):
        await trickle(scope, receive, send)
    elif path.startswith("/latin1"):
        await latin1(scope, receive, send)
    elif path.startswith("/empty"):
        await empty(scope, receive, send)
    elif path.startswith("/rest"):
        await rest(scope, receive, send)
    else:
        await hello_world(scope, receive, send)


async def _respond(
    send: Send, body: bytes, content_type: bytes = b"text/plain", status: int = 200
) -> None:
    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": [[b"content-type", content_type]],
        }
    )
    await send({"type": "http.response.body", "body": body})


async def _read_body(receive: Receive) -> bytes:
    body = b""
    more_body = True
    while more_body:
        message = await receive()
        body += message.get("body", b"")
        more_body = message.get("more_body", False)
    return body


async def hello_world(scope: Scope, receive: Receive, send: Send) -> None:
    await _respond(send, b"Hello, world!")


async def rest(scope: Scope, receive: Receive, send: Send) -> None:
    # Answers like a small REST API: {"<method>": "t"}, POST also changes "c".
    method = scope["method"].lower()
    body: dict[str, str] = {method: "t"}
    if method == "post":
        body["c"] = "t"
    await _respond(send, json.dumps(body).encode(), b"application/json")


async def timestamp(scope: Scope, receive: Receive, send: Send) -> None:
    await _respond(send, b"20220322075441")


async def empty(scope: Scope, receive: Receive, send: Send) -> None:
    await _respond(send, b"")


async def slow_response(scope: Scope, receive: Receive, send: Send) -> None:
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [[b"content-type", b"text/plain"]],
        }
    )
    await asyncio.sleep(1.0)  # Allow triggering a read timeout.
    await send({"type": "http.response.body", "body": b"Hello, world!"})


async def trickle(scope: Scope, receive: Receive, send: Send) -> None:
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [[b"content-type", b"text/plain"]],
        }
    )
    # One byte every 0.4s keeps every per-read timer fresh.
    for _ in range(8):
        await send({"type": "http.response.body", "body": b"x", "more_body": True})
        await asyncio.sleep(0.4)
    await send({"type": "http.response.body", "body": b""})


async def latin1(scope: Scope, receive: Receive, send: Send) -> None:
    await _respond(send, "café".encode("latin-1"), b"text/plain; charset=latin-1")


async def status_code(scope: Scope, receive: Receive, send: Send) -> None:
    status_code = int(scope["path"].replace("/status/", ""))
    await _respond(send, b"Hello, world!", status=status_code)


async def echo_body(scope: Scope, receive: Receive, send: Send) -> None:
    body = await _read_body(receive)
    await _respond(send, body)


async def echo_headers(scope: Scope, receive: Receive, send: Send) -> None:
    body = {
        name.capitalize().decode(): value.decode()
        for name, value in scope.get("headers", [])
    }
    await _respond(send, json.dumps(body).encode(), b"application/json")


async def echo_request(scope: Scope, receive: Receive, send: Send) -> None:
    body = await _read_body(receive)
    echoed = {
        "method": scope["method"],
        "path": scope["path"],
        "query": scope["query_string"].decode(),
        "body": body.decode(),
    }
    await _respond(send, json.dumps(echoed).encode(), b"application/json")


async def redirect_301(scope: Scope, receive: Receive, send: Send) -> None:
    await send(
        {
            "type": "http.response.start",
            "status": 301,
            "headers": [[b"location", b"/rest"]],
        }
    )
    await send({"type": "http.response.body"})


class TestServer(Server):
    __test__ = False

    def install_signal_handlers(self) -> None:
        # Disable the default installation of handlers for signals such as SIGTERM,
        # because it can only be done in the main thread.
        pass  # pragma: no cover

    @property
    def url(self) -> str:
        port = self.servers[0].sockets[0].getsockname()[1]
        return f"http://{self.config.host}:{port}"


def serve_in_thread(server: TestServer) -> typing.Iterator[TestServer]:
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()
    try:
        deadline = time.monotonic() + 10
        while not server.started:
            if time.monotonic() > deadline:
                raise RuntimeError("Server failed to start within 10 seconds")
            time.sleep(1e-3)
        yield server
    finally:
        server.should_exit = True
        thread.join(timeout=5)


@pytest.fixture(scope="session")
def server() -> typing.Iterator[TestServer]:
    config = Config(app=app, lifespan="off", loop="asyncio", host="127.0.0.1", port=0)
    server = TestServer(config=config)
    yield from serve_in_thread(server)
