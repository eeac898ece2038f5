"""
Message Lookup Configuration Settings

This module contains the runtime configuration for the server and the
console client. Wire-format constants live in msglookup.protocol.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server and client configuration settings."""

    # Network settings
    HOST: str = os.environ.get("MSG_LOOKUP_HOST", "localhost")
    PORT: int = int(os.environ.get("MSG_LOOKUP_PORT", "5000"))

    # Message source loaded once at startup
    MESSAGE_FILE: str = os.environ.get("MSG_LOOKUP_MESSAGES", "messages.txt")

    # Client settings
    CLIENT_TIMEOUT: float = 0  # 0 means block forever

    # Logging settings
    DEBUG: bool = os.environ.get("MSG_LOOKUP_DEBUG", "false").lower() == "true"


# Global settings instance
settings = Settings()
