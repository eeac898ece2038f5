"""
Async TCP Server Module

This module implements the accepting side of the message service.

The server does no protocol work itself: every accepted connection is
handed to its own ConnectionSession, which runs as an independent
asyncio task. Accepting the next client never waits on a session.
"""

import asyncio
import logging
import random
from asyncio import StreamReader, StreamWriter
from typing import Callable, Dict, Optional

from ..config.settings import settings
from ..store.message_store import MessageStore
from .session import ConnectionSession

logger = logging.getLogger(__name__)


class MessageServer:
    """
    Asynchronous TCP server for the message service.

    asyncio.start_server() runs handle_client() in a new task for each
    connection, so clients are served concurrently without threads.

    Features:
    - Persistent and transient connections (chosen per request)
    - One independently seeded random source per connection
    - Shared read-only MessageStore across all connections

    Usage:
        server = MessageServer(host='localhost', port=5000, store=store)
        await server.start()  # Runs forever

    Attributes:
        host: Server bind address (e.g., 'localhost')
        port: Server port number (e.g., 5000)
        store: The MessageStore shared by all connections
        rng_factory: Called once per connection to create its random source
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            store: MessageStore = None,
            rng_factory: Callable[[], random.Random] = random.Random,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings)
            store: MessageStore instance (empty store if not provided)
            rng_factory: Factory for per-connection random sources.
                random.Random() seeds each instance from the OS.
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.store = store if store is not None else MessageStore()
        self.rng_factory = rng_factory

        # Server state
        self._server: Optional[asyncio.Server] = None
        self._running = False
        self._connection_count = 0
        self._total_requests = 0
        self._sessions: Dict[asyncio.Task, ConnectionSession] = {}

    async def handle_client(
            self,
            reader: StreamReader,
            writer: StreamWriter
    ) -> None:
        """
        Handle a single client connection.

        Called by asyncio for every accepted connection. Runs a
        ConnectionSession until it terminates; the session closes the
        connection and logs any failure itself.

        Args:
            reader: StreamReader for reading from the client
            writer: StreamWriter for writing to the client
        """
        self._connection_count += 1
        session = ConnectionSession(reader, writer, self.store, rng=self.rng_factory())
        task = asyncio.current_task()
        self._sessions[task] = session
        try:
            await session.run()
        finally:
            del self._sessions[task]
            self._total_requests += session.requests_served

    async def start(self) -> None:
        """
        Start the server and begin accepting connections.

        Runs until cancelled or stop() is called.

        Example:
            server = MessageServer(port=5000, store=store)
            asyncio.run(server.start())
        """
        if self._running:
            return

        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port,
        )
        self._running = True

        addrs = ', '.join(str(sock.getsockname()) for sock in self._server.sockets or [])
        logger.info(f"Serving {self.store.total()} messages on {addrs}")

        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            # Expected during shutdown/fixture cleanup
            logger.debug("Server start cancelled")
        finally:
            self._running = False

    async def stop(self) -> None:
        """
        Stop the server.

        Closes the listening socket, cancels every open session (each one
        closes its own connection) and waits for both to finish.
        """
        if self._server is None:
            return

        self._server.close()

        sessions = list(self._sessions)
        if sessions:
            logger.info(f"Closing {len(sessions)} open connection(s)")
            for task in sessions:
                task.cancel()
            await asyncio.gather(*sessions, return_exceptions=True)

        try:
            await self._server.wait_closed()
        finally:
            self._server = None
            self._running = False

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with server stats including connection counts,
            request counts, and store statistics.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_connections": self._connection_count,
            "active_connections": len(self._sessions),
            "total_requests": self._total_requests + sum(
                session.requests_served for session in self._sessions.values()
            ),
            "store_stats": self.store.get_stats(),
        }
