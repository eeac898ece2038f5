"""Configuration module for Message Lookup."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
