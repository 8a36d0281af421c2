"""Pytest configuration and fixtures."""

import random
import socket
from typing import Tuple

import httpx
import pytest

from shortkey.lib.keygen import KeyGenerator
from shortkey.lib.store import URLStore
from shortkey.lib.common.logging_config import setup_logging
from shortkey.line_server import RegistrationServer
from shortkey.web_app import create_app


def _send_line(address: Tuple[str, int], payload: bytes, timeout: float = 5.0) -> str:
    """Send raw bytes to the registration server and return its reply."""
    with socket.create_connection(address, timeout=timeout) as conn:
        conn.sendall(payload)
        conn.shutdown(socket.SHUT_WR)
        chunks = []
        while True:
            chunk = conn.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks).decode("utf-8")


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def key_generator():
    """Create a key generator with a seeded random source."""
    return KeyGenerator(length=6, rng=random.Random(1337))


@pytest.fixture
def store(key_generator, logger):
    """Create an empty store."""
    return URLStore(key_generator=key_generator, logger=logger)


@pytest.fixture
def registration_server(store, logger):
    """Run a registration server on a free local port."""
    server = RegistrationServer(store, host="127.0.0.1", port=0, logger=logger)
    server.start_in_thread()

    yield server

    server.shutdown()


@pytest.fixture
def app(store, logger):
    """Create test FastAPI app."""
    return create_app(store, logger=logger)


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456?tab=votes#answers",
        "http://localhost:8000/path/to/page",
    ]


@pytest.fixture
def send_line():
    """Helper that sends raw bytes to a registration server."""
    return _send_line
