"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import random
import socket
import pytest
import pytest_asyncio
from contextlib import closing
from typing import AsyncGenerator

from msglookup.network.tcp_server import MessageServer
from msglookup.protocol.codec import encode_request, read_response
from msglookup.protocol.messages import Request, Response
from msglookup.store.message_store import MessageStore


SAMPLE_MESSAGES = ["Hello", "World", "Foo"]


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


def write_message_file(path, lines) -> str:
    """Write raw lines to a message file and return its path as a string."""
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return str(path)


# ============================================================================
# MessageStore Fixtures
# ============================================================================

@pytest.fixture
def store() -> MessageStore:
    """Create a store holding the three sample messages."""
    return MessageStore(SAMPLE_MESSAGES)


@pytest.fixture
def empty_store() -> MessageStore:
    """Create a store with no messages."""
    return MessageStore([])


@pytest.fixture
def messages_file(tmp_path) -> str:
    """Create a well-formed message file with the sample messages."""
    return write_message_file(
        tmp_path / "messages.txt",
        [str(len(SAMPLE_MESSAGES))] + SAMPLE_MESSAGES,
    )


@pytest.fixture
def rng() -> random.Random:
    """A deterministic random source."""
    return random.Random(1234)


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(server_port: int, store: MessageStore) -> AsyncGenerator[MessageServer, None]:
    """
    Create and start a server instance for testing.

    This fixture:
    1. Creates a MessageServer on a random free port serving the sample store
    2. Starts it in a background task
    3. Yields the server for testing
    4. Cleans up after the test
    """
    srv = MessageServer(host='127.0.0.1', port=server_port, store=store)

    # Start server in background task
    server_task = asyncio.create_task(srv.start())

    # Wait for server to be ready
    await asyncio.sleep(0.1)

    yield srv

    # Cleanup
    await srv.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass


# ============================================================================
# Client Fixtures
# ============================================================================

class AsyncClient:
    """
    Helper class for testing server interactions.

    Speaks the binary frame protocol over asyncio streams.

    Usage:
        async with AsyncClient('127.0.0.1', port) as client:
            response = await client.request(2)
            assert response.text == "World"
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader = None
        self.writer = None

    async def connect(self) -> None:
        """Establish connection to server."""
        self.reader, self.writer = await asyncio.open_connection(
            self.host, self.port
        )

    async def disconnect(self) -> None:
        """Close connection to server."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def send_raw(self, data: bytes) -> None:
        self.writer.write(data)
        await self.writer.drain()

    async def request(self, message_index: int, close: bool = False) -> Response:
        """
        Send a request frame and read back the response frame.

        Args:
            message_index: Message number (0 for random)
            close: Ask the server to close after responding

        Returns:
            The decoded Response
        """
        await self.send_raw(encode_request(Request(message_index, close)))
        return await read_response(self.reader)

    async def is_closed_by_server(self, timeout: float = 1.0) -> bool:
        """True if the server has closed its end of the connection."""
        data = await asyncio.wait_for(self.reader.read(1), timeout)
        return data == b''

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


@pytest.fixture
def client_factory(server_port: int):
    """
    Factory fixture to create test clients.

    Usage:
        async def test_something(server, client_factory):
            async with client_factory() as client:
                response = await client.request(1)
    """
    def factory() -> AsyncClient:
        return AsyncClient('127.0.0.1', server_port)
    return factory


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
