"""
Wire Codec Module

Encodes and decodes the fixed-size request and response frames.

The encode_* / decode_* functions work on plain bytes so they can be
used with any transport. read_request() / read_response() pull exactly
one frame off an asyncio StreamReader.
"""

import asyncio
import struct

from .errors import ConnectionClosed, ProtocolError
from .messages import (
    REQUEST_SIZE,
    REQUEST_TAG,
    RESPONSE_SIZE,
    TEXT_SIZE,
    Request,
    Response,
    ResponseStatus,
)

# tag, message index, close flag
_REQUEST_STRUCT = struct.Struct(">BiB")

_PAD = b" "


def encode_request(request: Request) -> bytes:
    """
    Serialize a request into its 6-byte frame.

    Examples:
        >>> encode_request(Request(2, close_after_response=True))
        b'\\x01\\x00\\x00\\x00\\x02\\x01'
    """
    return _REQUEST_STRUCT.pack(
        REQUEST_TAG,
        request.message_index,
        1 if request.close_after_response else 0,
    )


def decode_request(data: bytes) -> Request:
    """
    Parse a 6-byte request frame.

    Raises:
        ProtocolError: If the frame has the wrong size or tag. The stream
            is not resynchronized; the caller should drop the connection.
    """
    if len(data) != REQUEST_SIZE:
        raise ProtocolError(
            f"request frame must be {REQUEST_SIZE} bytes, got {len(data)}"
        )

    tag, message_index, close_flag = _REQUEST_STRUCT.unpack(data)
    if tag != REQUEST_TAG:
        raise ProtocolError(f"invalid request tag: {tag}")

    return Request(message_index=message_index, close_after_response=close_flag != 0)


def _fit_text(text: str) -> bytes:
    """
    Encode text into exactly TEXT_SIZE bytes.

    Long text is cut back to the last complete UTF-8 character that fits;
    short text is right-padded with spaces.
    """
    data = text.encode("utf-8")
    if len(data) > TEXT_SIZE:
        # Only the cut at the end can be an incomplete sequence
        data = data[:TEXT_SIZE].decode("utf-8", errors="ignore").encode("utf-8")
    return data.ljust(TEXT_SIZE, _PAD)


def encode_response(response: Response) -> bytes:
    """
    Serialize a response into its 128-byte frame.

    Examples:
        >>> frame = encode_response(Response.ok("Hello"))
        >>> len(frame), frame[:6]
        (128, b'\\x00Hello')
    """
    return bytes([int(response.status)]) + _fit_text(response.text)


def decode_response(data: bytes) -> Response:
    """
    Parse a 128-byte response frame.

    Trailing whitespace is trimmed from the text, so a message that
    really ends in spaces comes back without them.

    Raises:
        ProtocolError: If the frame has the wrong size or an unknown status.
    """
    if len(data) != RESPONSE_SIZE:
        raise ProtocolError(
            f"response frame must be {RESPONSE_SIZE} bytes, got {len(data)}"
        )

    try:
        status = ResponseStatus(data[0])
    except ValueError:
        raise ProtocolError(f"invalid response status: {data[0]}") from None

    text = data[1:].decode("utf-8", errors="replace").rstrip()
    return Response(status=status, text=text)


async def _read_frame(reader: asyncio.StreamReader, size: int) -> bytes:
    try:
        return await reader.readexactly(size)
    except asyncio.IncompleteReadError as exc:
        raise ConnectionClosed(
            f"stream ended after {len(exc.partial)} of {size} bytes",
            received=len(exc.partial),
        ) from exc


async def read_request(reader: asyncio.StreamReader) -> Request:
    """Read and decode exactly one request frame from the stream."""
    return decode_request(await _read_frame(reader, REQUEST_SIZE))


async def read_response(reader: asyncio.StreamReader) -> Response:
    """Read and decode exactly one response frame from the stream."""
    return decode_response(await _read_frame(reader, RESPONSE_SIZE))
