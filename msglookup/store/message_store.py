"""
Message Store Module

This module implements the read-only message catalog served by the
server, plus the loader for the line-oriented message file.

Message file format:
    <N>
    <message 1>
    ...
    <message N>
"""

import logging
import random as _random
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Tuple, Union

from ..protocol.errors import MessageSourceError

logger = logging.getLogger(__name__)


class MessageStore:
    """
    Immutable, 1-based catalog of text messages.

    The store is built once at startup and shared by every connection
    session. Nothing mutates it afterwards, so concurrent sessions read
    it without any locking.

    Randomness is not owned by the store: random() takes the caller's
    random source so each session can use its own independently seeded
    generator.

    Attributes:
        source: Where the messages were loaded from (for logging/stats)
    """

    def __init__(self, messages: Iterable[str] = (), source: str = "<memory>"):
        """
        Initialize the store.

        Args:
            messages: Messages in order; the first one is message number 1
            source: Description of where the messages came from
        """
        self._messages: Tuple[str, ...] = tuple(messages)
        self.source = source

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "MessageStore":
        """Build a store from a message file (see load_messages())."""
        return cls(load_messages(path), source=str(path))

    def total(self) -> int:
        """Number of messages loaded."""
        return len(self._messages)

    def by_index(self, index: int) -> str:
        """
        Return message number `index` (1-based).

        Args:
            index: Message number, 1 <= index <= total()

        Returns:
            The message text, unchanged

        Raises:
            IndexError: If index is out of range. Callers are expected to
                validate first; this is never wrapped like a Python
                negative index.
        """
        if not 1 <= index <= len(self._messages):
            raise IndexError(
                f"message {index} out of range 1..{len(self._messages)}"
            )
        return self._messages[index - 1]

    def random(self, rng: _random.Random) -> str:
        """
        Return a message chosen uniformly at random.

        Args:
            rng: The caller's random source

        Raises:
            IndexError: If the store is empty
        """
        if not self._messages:
            raise IndexError("cannot choose from an empty message store")
        return self._messages[rng.randrange(len(self._messages))]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __repr__(self) -> str:
        return f"MessageStore(total={len(self._messages)}, source={self.source!r})"

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary containing:
            - total_messages: Number of messages
            - source: Where they were loaded from
            - longest_message_bytes: Largest UTF-8 size of any message
        """
        return {
            "total_messages": len(self._messages),
            "source": self.source,
            "longest_message_bytes": max(
                (len(m.encode("utf-8")) for m in self._messages), default=0
            ),
        }


def load_messages(path: Union[str, Path]) -> Tuple[str, ...]:
    """
    Load messages from a line-oriented message file.

    The first line holds the declared count N; the next N lines are the
    messages. Line terminators are stripped, everything else is kept as
    is. Lines after the N-th are ignored.

    Args:
        path: Path to the message file

    Returns:
        The N messages in file order

    Raises:
        MessageSourceError: If the file cannot be read, the count is not
            a non-negative integer, or fewer than N messages follow it.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            header = handle.readline()
            try:
                declared = int(header.strip())
            except ValueError:
                raise MessageSourceError(
                    f"{path}: first line must be the message count, got {header.strip()!r}"
                ) from None
            if declared < 0:
                raise MessageSourceError(f"{path}: message count cannot be negative ({declared})")

            messages = []
            for _ in range(declared):
                line = handle.readline()
                if not line:
                    raise MessageSourceError(
                        f"{path}: declares {declared} messages but only {len(messages)} found"
                    )
                messages.append(line.rstrip("\r\n"))
    except OSError as exc:
        raise MessageSourceError(f"cannot read message file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise MessageSourceError(f"{path}: not valid UTF-8: {exc}") from exc

    logger.debug(f"Loaded {len(messages)} messages from {path}")
    return tuple(messages)
