"""
Protocol Request and Response Definitions

This module defines the data structures exchanged between client and
server, together with the fixed wire-format constants.

Request frame (6 bytes, big-endian):
    1 byte   tag (always REQUEST_TAG)
    4 bytes  message index, signed 32-bit
    1 byte   close-after-response flag (0 = keep open)

Response frame (128 bytes):
    1 byte     status (0 = OK, 1 = ERROR)
    127 bytes  UTF-8 text, space padded
"""

from dataclasses import dataclass
from enum import IntEnum

REQUEST_TAG = 1
REQUEST_SIZE = 6
TEXT_SIZE = 127
RESPONSE_SIZE = 1 + TEXT_SIZE

RANDOM_INDEX = 0

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class ResponseStatus(IntEnum):
    """Status byte carried in every response frame."""
    OK = 0
    ERROR = 1


@dataclass(frozen=True)
class Request:
    """
    A single client request.

    Attributes:
        message_index: 1-based message number, or 0 for a random message
        close_after_response: Whether the server closes the connection
            once it has answered this request
    """
    message_index: int
    close_after_response: bool = False

    def __post_init__(self):
        """Reject indexes that cannot be carried by the 32-bit wire field."""
        if not INT32_MIN <= self.message_index <= INT32_MAX:
            raise ValueError(
                f"message index {self.message_index} does not fit in 32 bits"
            )

    @property
    def is_random(self) -> bool:
        """True if the request asks for a random message."""
        return self.message_index == RANDOM_INDEX


@dataclass(frozen=True)
class Response:
    """
    Represents a protocol response.

    Attributes:
        status: OK or ERROR
        text: The message text, or a description of the error
    """
    status: ResponseStatus
    text: str = ""

    @classmethod
    def ok(cls, text: str) -> "Response":
        """Create a successful response."""
        return cls(status=ResponseStatus.OK, text=text)

    @classmethod
    def error(cls, text: str) -> "Response":
        """Create an error response."""
        return cls(status=ResponseStatus.ERROR, text=text)

    @property
    def is_ok(self) -> bool:
        return self.status == ResponseStatus.OK
