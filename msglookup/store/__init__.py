"""Message store module for Message Lookup."""

from .message_store import MessageStore, load_messages

__all__ = ["MessageStore", "load_messages"]
