"""
Forge render server client.

Owns the connection settings and performs all network I/O: the /health
check and the requests issued by RenderRequestBuilder.send().
"""

import json
import socket
import threading
import time
from dataclasses import dataclass, field
from typing import Any

import requests

from forgesdk.config import DEFAULT_TIMEOUT_MS, Settings, get_settings
from forgesdk.modules.render.builder import RenderRequestBuilder
from forgesdk.shared.logging import get_logger

logger = get_logger(__name__)

HEALTH_PATH = "/health"
CHUNK_SIZE = 64 * 1024


@dataclass
class RawResponse:
    """Fully buffered HTTP response, returned for any status code."""
    status_code: int
    content: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Decode the body as JSON. Raises ValueError if it is not JSON."""
        return json.loads(self.content)


def _shutdown_socket(response: requests.Response) -> None:
    """Wake a read blocked on the response's socket."""
    connection = getattr(response.raw, "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # Already closed or released back to the pool
        pass


class _Watchdog:
    """
    Timer armed for one call. When it fires, the in-flight response is
    aborted and the call reports a timeout.
    """

    def __init__(self, seconds: float):
        self.expired = threading.Event()
        self._lock = threading.Lock()
        self._response: requests.Response | None = None
        self._timer = threading.Timer(seconds, self._fire)
        self._timer.daemon = True

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        self._timer.cancel()

    def attach(self, response: requests.Response) -> None:
        with self._lock:
            self._response = response
            expired = self.expired.is_set()
        if expired:
            _shutdown_socket(response)

    def _fire(self) -> None:
        with self._lock:
            self.expired.set()
            response = self._response
        if response is not None:
            _shutdown_socket(response)


class ForgeClient:
    """
    Client for a Forge rendering server.

    Usage:
        client = ForgeClient("http://localhost:3000", timeout=30_000)
        if client.health():
            png = client.render_url("https://example.com").format("png").send()

    Each call makes exactly one attempt; nothing is retried. The timeout
    (milliseconds, default 120000) bounds the whole request, body download
    included. Environment settings are only consulted by from_settings().

    A client holds one requests.Session, which is not guaranteed to be
    thread-safe. Use one client per thread.
    """

    def __init__(self, base_url: str, timeout: int | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT_MS
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        self.session = requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ForgeClient":
        """Create a client from FORGE_* configuration."""
        settings = settings or get_settings()
        return cls(settings.base_url, timeout=settings.timeout_ms)

    def __enter__(self) -> "ForgeClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def render_html(self, html: str) -> RenderRequestBuilder:
        """Start a render request from an HTML string."""
        return RenderRequestBuilder(self, html=html)

    def render_url(self, url: str) -> RenderRequestBuilder:
        """Start a render request from a URL."""
        return RenderRequestBuilder(self, url=url)

    def health(self) -> bool:
        """Check if the server is healthy. Never raises."""
        try:
            response = self.request("GET", HEALTH_PATH)
        except requests.RequestException as e:
            logger.warning(f"Forge health check failed: {e}")
            return False

        if not response.ok:
            logger.warning(f"Forge health check returned HTTP {response.status_code}")
        return response.ok

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _remaining(self, deadline: float) -> float:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise requests.Timeout(f"request exceeded {self.timeout} ms")
        return remaining

    def request(self, method: str, path: str, json_body: str | None = None) -> RawResponse:
        """
        Perform one HTTP call within the client timeout.

        A timer is armed when the call starts. Until headers arrive the
        remaining budget is the socket timeout; afterwards the timer shuts
        the response socket down if it fires mid-download. Either way the
        call raises requests.Timeout. The timer is cancelled and the
        response closed on every exit path.

        Args:
            method: HTTP method
            path: Path appended to the base URL
            json_body: Optional JSON-encoded request body

        Returns:
            Buffered response for any HTTP status

        Raises:
            requests.RequestException: on any transport failure or timeout
        """
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "application/json"} if json_body is not None else {}
        start = time.monotonic()
        deadline = start + self.timeout / 1000
        watchdog = _Watchdog(self.timeout / 1000)
        response: requests.Response | None = None

        logger.debug(f"{method} {url}")
        watchdog.start()
        try:
            try:
                response = self.session.request(
                    method=method,
                    url=url,
                    data=json_body,
                    headers=headers,
                    timeout=self._remaining(deadline),
                    stream=True,
                )
                watchdog.attach(response)
                chunks = []
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    self._remaining(deadline)
                    chunks.append(chunk)
            except requests.RequestException as e:
                if watchdog.expired.is_set() and not isinstance(e, requests.Timeout):
                    raise requests.Timeout(f"request exceeded {self.timeout} ms") from e
                raise
            if watchdog.expired.is_set():
                # Socket shut down after the last chunk arrived; body may be cut short
                raise requests.Timeout(f"request exceeded {self.timeout} ms")
            content = b"".join(chunks)
        finally:
            watchdog.cancel()
            if response is not None:
                response.close()

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug(f"{method} {url} -> {response.status_code} ({len(content)} bytes, {elapsed_ms} ms)")
        return RawResponse(
            status_code=response.status_code,
            content=content,
            headers=dict(response.headers),
        )
