"""
Protocol and Service Exceptions

Every error raised by the service derives from MessageServiceError so
callers can catch the whole family in one place.
"""


class MessageServiceError(Exception):
    """Base exception class for all message service errors."""
    pass


class ProtocolError(MessageServiceError):
    """Raised when a frame is malformed (wrong tag, size or status)."""
    pass


class ConnectionClosed(MessageServiceError):
    """
    Raised when the stream ends before a complete frame was read.

    Attributes:
        received: Number of bytes of the partial frame that did arrive.
            Zero means the peer disconnected cleanly between frames.
    """

    def __init__(self, message: str = "connection closed by peer", received: int = 0):
        super().__init__(message)
        self.received = received

    @property
    def mid_frame(self) -> bool:
        """True if the stream ended part way through a frame."""
        return self.received > 0


class InvalidIndex(MessageServiceError):
    """
    Raised when a requested message number cannot be served.

    This never closes a connection: the session turns it into an ERROR
    response whose text is str(exc).
    """

    def __init__(self, message: str, total: int):
        super().__init__(message)
        self.total = total

    @classmethod
    def out_of_range(cls, total: int) -> "InvalidIndex":
        return cls(f"valid values: 0 to {total}", total)

    @classmethod
    def empty_store(cls) -> "InvalidIndex":
        return cls("no messages available", 0)


class MessageSourceError(MessageServiceError):
    """Raised when the message file is missing or malformed."""
    pass
