"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
import httpx
import pytest
import pytest_asyncio
from contextlib import closing
from typing import AsyncGenerator, List, Tuple

from src.cache.ttl_cache import TTLCache
from src.network.http_server import HTTPServer
from src.protocol.messages import Request, Response

# Client address reported by the in-process ASGI transport
ASGI_CLIENT = ("10.0.0.7", 50000)


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class FakeClock:
    """Manually driven millisecond clock."""

    def __init__(self, start: int = 1_000_000):
        self.now = start
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


# ============================================================================
# Cache Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock starting at a fixed instant."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    """Create a TTLCache with a 1000 ms TTL driven by the fake clock."""
    return TTLCache(1000, clock=clock)


@pytest.fixture
def wall_cache() -> TTLCache:
    """Create a TTLCache with a 1000 ms TTL on the real wall clock."""
    return TTLCache(1000)


# ============================================================================
# Server Fixtures
# ============================================================================

class RecordingHandler:
    """
    Test handler that remembers every (request, remote_ip) it sees.

    Paths:
        /boom            -> raises RuntimeError
        /not-a-response  -> returns a plain string
        /str-body        -> Response whose body is a str
        /bad-header      -> Response with a non-Latin-1 header value
        anything else    -> 200 text "<method> <path> from <ip>"
    """

    def __init__(self):
        self.calls: List[Tuple[Request, str]] = []

    def __call__(self, request: Request, remote_ip: str) -> Response:
        self.calls.append((request, remote_ip))
        if request.path == "/boom":
            raise RuntimeError("handler exploded")
        if request.path == "/not-a-response":
            return "oops"
        if request.path == "/str-body":
            return Response(body="hello")
        if request.path == "/bad-header":
            return Response(body=b"hello", headers={"X-Name": "日本"})
        return Response.text(f"{request.method} {request.path} from {remote_ip}")


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def http_server(handler: RecordingHandler, server_port: int) -> HTTPServer:
    """Create an HTTPServer around the recording handler (not started)."""
    return HTTPServer(handler, host='127.0.0.1', port=server_port)


@pytest_asyncio.fixture
async def app_client(http_server: HTTPServer) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Client talking to the server's ASGI app in-process, without a socket.

    Requests appear to come from ASGI_CLIENT.
    """
    transport = httpx.ASGITransport(app=http_server.app, client=ASGI_CLIENT)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(http_server: HTTPServer) -> AsyncGenerator[HTTPServer, None]:
    """
    Start the server on a real socket for testing.

    This fixture:
    1. Starts the HTTPServer on a random free port in a background task
    2. Waits until uvicorn reports it is accepting connections
    3. Yields the server for testing
    4. Cleans up after the test
    """
    server_task = asyncio.create_task(http_server.start())

    for _ in range(100):
        if http_server.is_ready():
            break
        await asyncio.sleep(0.05)

    yield http_server

    await http_server.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass


@pytest_asyncio.fixture
async def live_client(server: HTTPServer) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client connected to the running server."""
    base_url = f"http://127.0.0.1:{server.port}"
    async with httpx.AsyncClient(base_url=base_url, trust_env=False) as client:
        yield client


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
