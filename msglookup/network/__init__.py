"""Network module for Message Lookup."""

from .session import ConnectionSession, SessionState
from .tcp_server import MessageServer

__all__ = ["ConnectionSession", "MessageServer", "SessionState"]
