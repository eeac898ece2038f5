#!/usr/bin/env python3
"""
Message Lookup Client

A blocking TCP client for the message server, plus the interactive
console that drives it.

Usage:
    python -m msglookup.client                  # Connect to localhost:5000
    python -m msglookup.client --host 1.2.3.4   # Connect to specific host
    python -m msglookup.client --port 8080      # Connect to specific port

Each round asks for a message number (0 for a random message) and
whether the server should close the connection after answering.
"""

import argparse
import logging
import socket
import sys
from typing import Callable, Optional

from .config.settings import settings
from .protocol.codec import decode_response, encode_request
from .protocol.errors import ConnectionClosed, MessageServiceError
from .protocol.messages import RESPONSE_SIZE, Request, Response

logger = logging.getLogger(__name__)

YES_ANSWERS = ("y", "yes")


class MessageClient:
    """
    Blocking TCP client for the message server.

    One request is in flight at a time: request() sends a frame and
    waits for exactly one response. A request with close_after_response
    set ends the connection once its response has arrived.

    Usage:
        with MessageClient('localhost', 5000) as client:
            response = client.request(2)
            print(response.text)
    """

    def __init__(self, host: str, port: int, timeout: Optional[float] = None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.socket: Optional[socket.socket] = None

    @property
    def is_connected(self) -> bool:
        return self.socket is not None

    def connect(self) -> None:
        """
        Connect to the server.

        Raises:
            OSError: If the connection cannot be established
        """
        self.socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
        logger.debug(f"Connected to {self.host}:{self.port}")

    def disconnect(self) -> None:
        """Disconnect from the server."""
        if self.socket:
            try:
                self.socket.close()
            finally:
                self.socket = None

    def request(self, message_index: int, close_after_response: bool = False) -> Response:
        """
        Send one request and wait for its response.

        Args:
            message_index: Message number, or 0 for a random message
            close_after_response: Ask the server to close afterwards

        Returns:
            The decoded Response

        Raises:
            ConnectionClosed: If not connected or the server hung up
            ProtocolError: If the response frame is malformed
            OSError: On socket errors
        """
        if not self.socket:
            raise ConnectionClosed("not connected")

        request = Request(message_index, close_after_response)
        try:
            self.socket.sendall(encode_request(request))
            response = decode_response(self._recv_exactly(RESPONSE_SIZE))
        except (MessageServiceError, OSError):
            self.disconnect()
            raise

        if close_after_response:
            self.disconnect()
        return response

    def _recv_exactly(self, size: int) -> bytes:
        data = b''
        while len(data) < size:
            chunk = self.socket.recv(size - len(data))
            if not chunk:
                raise ConnectionClosed(
                    f"server closed the connection after {len(data)} of {size} bytes",
                    received=len(data),
                )
            data += chunk
        return data

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


def _ask_index(input_func: Callable[[str], str], output_func: Callable[[str], None]) -> int:
    while True:
        answer = input_func("Message number (0 for random): ").strip()
        try:
            index = int(answer)
            Request(index)
        except ValueError:
            output_func(f"Not a valid message number: {answer!r}")
            continue
        return index


def run_console(
        client: MessageClient,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
) -> int:
    """
    Run the interactive request loop on a connected client.

    Each round reads a message number and a close choice, sends one
    request and prints the result. The loop ends after a request that
    asked the server to close, or when input runs out.

    Args:
        client: A connected MessageClient
        input_func: Prompt reader (input() by default)
        output_func: Line writer (print() by default)

    Returns:
        Number of completed exchanges
    """
    exchanges = 0

    while client.is_connected:
        try:
            index = _ask_index(input_func, output_func)
            answer = input_func("Close connection after response? (y/n): ")
        except EOFError:
            break

        close = answer.strip().lower() in YES_ANSWERS
        response = client.request(index, close_after_response=close)
        exchanges += 1

        if response.is_ok:
            output_func(f"Message: {response.text}")
        else:
            output_func(f"Error: {response.text}")
        output_func("")

    return exchanges


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Interactive client for the message server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Server host",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Server port",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.CLIENT_TIMEOUT,
        help="Socket timeout in seconds (0 waits forever)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)

    client = MessageClient(args.host, args.port, args.timeout or None)
    try:
        client.connect()
    except OSError as e:
        print(f"Connection error: {e}")
        print("Failed to connect. Is the server running?")
        print(f"  Try: python -m msglookup.server --port {args.port}")
        sys.exit(1)

    print(f"Connected to message server at {args.host}:{args.port}.")

    try:
        run_console(client)
    except KeyboardInterrupt:
        print("\n\nInterrupted.")
    except (MessageServiceError, OSError) as e:
        print(f"Client error: {e}")
        sys.exit(1)
    finally:
        client.disconnect()

    print("Client closed.")


if __name__ == "__main__":
    main()
