#!/usr/bin/env python3
"""
Message Lookup Server Entry Point

This is the main entry point for starting the message server.

Usage:
    python -m msglookup.server                        # Default settings (localhost:5000)
    python -m msglookup.server --port 8080            # Custom port
    python -m msglookup.server --host 0.0.0.0         # Custom host
    python -m msglookup.server --messages msgs.txt    # Custom message file
    python -m msglookup.server --debug                # Enable debug logging

Environment Variables:
    MSG_LOOKUP_HOST       - Server bind address
    MSG_LOOKUP_PORT       - Server port
    MSG_LOOKUP_MESSAGES   - Path to the message file
    MSG_LOOKUP_DEBUG      - Enable debug mode (true/false)
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional

from .config.settings import settings
from .network.tcp_server import MessageServer
from .protocol.errors import MessageSourceError
from .store.message_store import MessageStore


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Message Lookup: indexed message server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Host address to bind to",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port number to listen on",
    )

    parser.add_argument(
        "--messages",
        type=str,
        default=settings.MESSAGE_FILE,
        help="Message file: first line is the count, then one message per line",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the server."""
    args = parse_args(argv)

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    # Messages must load before the socket opens
    try:
        store = MessageStore.from_file(args.messages)
    except MessageSourceError as e:
        logger.error(f"Cannot start server: {e}")
        sys.exit(1)

    server = MessageServer(host=args.host, port=args.port, store=store)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    shutdown_tasks = []

    async def shutdown(sig: signal.Signals) -> None:
        """Handle shutdown signal."""
        logger.info(f"Received signal {sig.name}, initiating shutdown...")
        await server.stop()

    # Register signal handlers (Unix only)
    if sys.platform != 'win32':
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda s=sig: shutdown_tasks.append(asyncio.create_task(shutdown(s)))
            )

    # Log startup info
    logger.info("Starting message server")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  Messages: {args.messages} ({store.total()} loaded)")
    logger.info(f"  Debug: {args.debug}")

    # Run the server
    try:
        loop.run_until_complete(server.start())
        # start() returns as soon as the socket closes; let stop() finish too
        if shutdown_tasks:
            loop.run_until_complete(asyncio.gather(*shutdown_tasks))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        loop.run_until_complete(server.stop())
    except OSError as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
        logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
