"""Protocol module for Message Lookup."""

from .codec import (
    decode_request,
    decode_response,
    encode_request,
    encode_response,
    read_request,
    read_response,
)
from .errors import (
    ConnectionClosed,
    InvalidIndex,
    MessageServiceError,
    MessageSourceError,
    ProtocolError,
)
from .messages import (
    RANDOM_INDEX,
    REQUEST_SIZE,
    REQUEST_TAG,
    RESPONSE_SIZE,
    TEXT_SIZE,
    Request,
    Response,
    ResponseStatus,
)

__all__ = [
    "ConnectionClosed",
    "InvalidIndex",
    "MessageServiceError",
    "MessageSourceError",
    "ProtocolError",
    "RANDOM_INDEX",
    "REQUEST_SIZE",
    "REQUEST_TAG",
    "RESPONSE_SIZE",
    "TEXT_SIZE",
    "Request",
    "Response",
    "ResponseStatus",
    "decode_request",
    "decode_response",
    "encode_request",
    "encode_response",
    "read_request",
    "read_response",
]
