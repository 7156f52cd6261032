"""
Shared fixtures: a mock Forge render server and settings isolation.
"""

import asyncio
import json
import logging
import socket
import threading
import time
from dataclasses import dataclass, field
from typing import Any

import pytest
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import StreamingResponse

from forgesdk.client import ForgeClient
from forgesdk.config import reset_settings
from forgesdk.shared.logging import ROOT_LOGGER_NAME


@dataclass
class MockServerState:
    """Behaviour of the mock server, reset before every test."""
    health_status: int = 200
    render_status: int = 200
    render_body: bytes = b"%PDF-1.7 mock"
    render_media_type: str = "application/pdf"
    render_delay: float = 0.0
    # Seconds between body bytes; 0 sends the body at once
    chunk_delay: float = 0.0
    payloads: list[dict[str, Any]] = field(default_factory=list)
    headers: list[dict[str, str]] = field(default_factory=list)

    def reset(self) -> None:
        self.__init__()


@dataclass
class MockServer:
    url: str
    state: MockServerState


def _respond(state: MockServerState, body: bytes, status_code: int, media_type: str) -> Response:
    if not state.chunk_delay:
        return Response(content=body, status_code=status_code, media_type=media_type)

    async def trickle():
        for i in range(len(body)):
            await asyncio.sleep(state.chunk_delay)
            yield body[i:i + 1]

    return StreamingResponse(
        trickle(),
        status_code=status_code,
        media_type=media_type,
        headers={"Content-Length": str(len(body))},
    )


def build_mock_app(state: MockServerState) -> FastAPI:
    """FastAPI app speaking the Forge wire contract."""
    app = FastAPI()

    @app.get("/health")
    async def health() -> Response:
        body = json.dumps({"status": "ok"}).encode()
        return _respond(state, body, state.health_status, "application/json")

    @app.post("/render")
    async def render(request: Request) -> Response:
        state.payloads.append(await request.json())
        state.headers.append(dict(request.headers))
        if state.render_delay:
            await asyncio.sleep(state.render_delay)
        return _respond(state, state.render_body, state.render_status, state.render_media_type)

    return app


class _ThreadedServer(uvicorn.Server):
    """Uvicorn server that can run outside the main thread."""

    def install_signal_handlers(self) -> None:
        pass


def find_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep FORGE_* variables from the host out of tests."""
    for var in ("FORGE_BASE_URL", "FORGE_TIMEOUT_MS", "FORGE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def isolated_logging():
    """Undo setup_logging() so handlers never outlive a test's captured streams."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def mock_server_session():
    """Start the mock render server once per test session."""
    state = MockServerState()
    port = find_free_port()
    config = uvicorn.Config(
        build_mock_app(state), host="127.0.0.1", port=port, log_level="warning"
    )
    server = _ThreadedServer(config)
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    deadline = time.monotonic() + 10
    while not server.started:
        if time.monotonic() > deadline:
            raise RuntimeError("mock render server did not start")
        time.sleep(0.02)

    yield MockServer(url=f"http://127.0.0.1:{port}", state=state)

    server.should_exit = True
    thread.join(timeout=5)


@pytest.fixture
def mock_server(mock_server_session: MockServer) -> MockServer:
    """Mock server with default behaviour restored."""
    mock_server_session.state.reset()
    return mock_server_session


@pytest.fixture
def client(mock_server: MockServer):
    """Client pointed at the mock server."""
    with ForgeClient(mock_server.url, timeout=5_000) as forge:
        yield forge


@pytest.fixture
def refused_url() -> str:
    """Base URL with nothing listening on it."""
    return f"http://127.0.0.1:{find_free_port()}"
