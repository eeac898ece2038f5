"""
Connection Session Module

This module drives a single client connection from accept to close.

State machine:
    AWAIT_REQUEST -> VALIDATE -> RESPOND -> AWAIT_REQUEST
                                         -> TERMINATED

A malformed frame or any I/O failure moves straight to TERMINATED
without sending a response. An out-of-range message number is not a
failure: it is answered with an ERROR response and the loop continues.
"""

import asyncio
import logging
import random
from asyncio import StreamReader, StreamWriter
from enum import Enum, auto
from typing import Optional

from ..protocol.codec import encode_response, read_request
from ..protocol.errors import ConnectionClosed, InvalidIndex, ProtocolError
from ..protocol.messages import Request, Response
from ..store.message_store import MessageStore

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """States of a connection session."""
    AWAIT_REQUEST = auto()
    VALIDATE = auto()
    RESPOND = auto()
    TERMINATED = auto()


class ConnectionSession:
    """
    Serves one client connection end-to-end.

    The session owns its reader/writer pair exclusively and its own
    random source, so nothing it does is visible to other sessions.
    Only the MessageStore is shared, and it is read-only.

    Attributes:
        store: The shared MessageStore
        rng: This session's random source for random-message requests
        state: Current SessionState
        requests_served: Number of responses sent so far
    """

    def __init__(
            self,
            reader: StreamReader,
            writer: StreamWriter,
            store: MessageStore,
            rng: Optional[random.Random] = None,
    ):
        self.reader = reader
        self.writer = writer
        self.store = store
        self.rng = rng if rng is not None else random.Random()
        self.state = SessionState.AWAIT_REQUEST
        self.requests_served = 0
        self.peer = writer.get_extra_info('peername')

    def resolve(self, request: Request) -> Response:
        """
        Build the response for a decoded request.

        Args:
            request: The client's request

        Returns:
            OK response with the message text, or ERROR response
            describing the valid range
        """
        try:
            return Response.ok(self._lookup(request))
        except InvalidIndex as exc:
            return Response.error(str(exc))

    def _lookup(self, request: Request) -> str:
        index = request.message_index
        total = self.store.total()
        if index < 0 or index > total:
            raise InvalidIndex.out_of_range(total)
        if request.is_random:
            if total == 0:
                raise InvalidIndex.empty_store()
            return self.store.random(self.rng)
        return self.store.by_index(index)

    async def run(self) -> int:
        """
        Serve requests until the client asks to close or the stream fails.

        The writer is always closed before returning. Failures are
        logged here and never raised to the caller.

        Returns:
            Number of requests served
        """
        logger.debug(f"Client connected: {self.peer}")

        try:
            while self.state is not SessionState.TERMINATED:
                self.state = SessionState.AWAIT_REQUEST
                request = await read_request(self.reader)

                self.state = SessionState.VALIDATE
                response = self.resolve(request)

                self.state = SessionState.RESPOND
                self.writer.write(encode_response(response))
                await self.writer.drain()
                self.requests_served += 1

                if request.close_after_response:
                    logger.debug(f"Client requested close: {self.peer}")
                    self.state = SessionState.TERMINATED

        except ConnectionClosed as exc:
            if exc.mid_frame:
                logger.warning(f"Client {self.peer} disconnected mid-frame: {exc}")
            else:
                logger.debug(f"Client disconnected: {self.peer}")
        except ProtocolError as exc:
            logger.warning(f"Protocol error from {self.peer}, closing: {exc}")
        except ConnectionError as exc:
            logger.warning(f"Connection error with {self.peer}: {exc}")
        except asyncio.CancelledError:
            logger.debug(f"Session cancelled: {self.peer}")
            raise
        except Exception as exc:  # Log unexpected errors but keep server alive
            logger.exception(f"Error handling client {self.peer}: {exc}")
        finally:
            self.state = SessionState.TERMINATED
            await self._close()

        return self.requests_served

    async def _close(self) -> None:
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError):
            # Peer already gone; the socket is closed either way
            pass
