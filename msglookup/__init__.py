"""
Message Lookup: Indexed Message Server

A small message-lookup service built with Python asyncio. Clients ask
for a stored message by number (or a random one) over a fixed-size
binary protocol on raw TCP sockets.
"""

__version__ = "1.0.0"
