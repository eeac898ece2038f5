"""
Tests for the Message Store

These tests verify the MessageStore class and the message file loader:
- total(), by_index(), random()
- load_messages() / MessageStore.from_file()

Run with: python -m pytest tests/test_store.py -v
"""

import random

import pytest
from msglookup.protocol.errors import MessageSourceError
from msglookup.store.message_store import MessageStore, load_messages
from tests.conftest import SAMPLE_MESSAGES, write_message_file


class TestMessageStoreLookup:
    """Test total() and by_index()."""

    def test_total(self, store: MessageStore):
        assert store.total() == 3
        assert len(store) == 3

    def test_by_index_is_one_based(self, store: MessageStore):
        assert store.by_index(1) == "Hello"
        assert store.by_index(2) == "World"
        assert store.by_index(3) == "Foo"

    def test_every_index(self):
        messages = [f"message {i}" for i in range(1, 51)]
        store = MessageStore(messages)
        for i, message in enumerate(messages, start=1):
            assert store.by_index(i) == message

    def test_by_index_out_of_range(self, store: MessageStore):
        for index in (0, 4, -1, -3):
            with pytest.raises(IndexError):
                store.by_index(index)

    def test_empty_store(self, empty_store: MessageStore):
        assert empty_store.total() == 0
        with pytest.raises(IndexError):
            empty_store.by_index(1)

    def test_store_is_a_snapshot(self):
        """Changing the source list after construction has no effect."""
        messages = ["a", "b"]
        store = MessageStore(messages)
        messages.append("c")
        assert store.total() == 2

    def test_iteration(self, store: MessageStore):
        assert list(store) == SAMPLE_MESSAGES


class TestMessageStoreRandom:
    """Test random()."""

    def test_random_returns_stored_message(self, store: MessageStore, rng: random.Random):
        for _ in range(100):
            assert store.random(rng) in SAMPLE_MESSAGES

    def test_random_reaches_every_message(self, store: MessageStore, rng: random.Random):
        seen = {store.random(rng) for _ in range(1000)}
        assert seen == set(SAMPLE_MESSAGES)

    def test_random_single_message(self, rng: random.Random):
        store = MessageStore(["only"])
        assert store.random(rng) == "only"

    def test_random_uses_given_source(self, store: MessageStore):
        """Two sources with the same seed pick the same sequence."""
        a, b = random.Random(42), random.Random(42)
        assert [store.random(a) for _ in range(20)] == [store.random(b) for _ in range(20)]

    def test_random_empty_store(self, empty_store: MessageStore, rng: random.Random):
        with pytest.raises(IndexError):
            empty_store.random(rng)


class TestMessageStoreStats:
    """Test get_stats()."""

    def test_stats(self, store: MessageStore):
        stats = store.get_stats()
        assert stats["total_messages"] == 3
        assert stats["longest_message_bytes"] == 5
        assert stats["source"] == "<memory>"

    def test_stats_empty(self, empty_store: MessageStore):
        assert empty_store.get_stats()["longest_message_bytes"] == 0


class TestLoadMessages:
    """Test the message file loader."""

    def test_load(self, messages_file: str):
        assert load_messages(messages_file) == tuple(SAMPLE_MESSAGES)

    def test_from_file(self, messages_file: str):
        store = MessageStore.from_file(messages_file)
        assert store.total() == 3
        assert store.by_index(2) == "World"
        assert store.source == messages_file

    def test_zero_messages(self, tmp_path):
        path = write_message_file(tmp_path / "m.txt", ["0"])
        assert load_messages(path) == ()

    def test_extra_lines_ignored(self, tmp_path):
        path = write_message_file(tmp_path / "m.txt", ["2", "one", "two", "three"])
        assert load_messages(path) == ("one", "two")

    def test_lines_kept_verbatim(self, tmp_path):
        path = tmp_path / "m.txt"
        path.write_bytes(b"3\r\n  padded  \r\n\r\nl\xc3\xa9\n")
        assert load_messages(path) == ("  padded  ", "", "lé")

    def test_last_line_without_newline(self, tmp_path):
        path = tmp_path / "m.txt"
        path.write_text("2\nfirst\nsecond", encoding="utf-8")
        assert load_messages(path) == ("first", "second")

    def test_count_with_surrounding_whitespace(self, tmp_path):
        path = write_message_file(tmp_path / "m.txt", [" 1 ", "x"])
        assert load_messages(path) == ("x",)

    def test_missing_file(self, tmp_path):
        with pytest.raises(MessageSourceError, match="cannot read"):
            load_messages(tmp_path / "nope.txt")

    def test_count_not_a_number(self, tmp_path):
        path = write_message_file(tmp_path / "m.txt", ["three", "a", "b", "c"])
        with pytest.raises(MessageSourceError, match="message count"):
            load_messages(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "m.txt"
        path.write_text("", encoding="utf-8")
        with pytest.raises(MessageSourceError):
            load_messages(path)

    def test_negative_count(self, tmp_path):
        path = write_message_file(tmp_path / "m.txt", ["-1"])
        with pytest.raises(MessageSourceError, match="negative"):
            load_messages(path)

    def test_fewer_lines_than_declared(self, tmp_path):
        path = write_message_file(tmp_path / "m.txt", ["4", "a", "b"])
        with pytest.raises(MessageSourceError, match="only 2"):
            load_messages(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "m.txt"
        path.write_bytes(b"1\n\xff\xfe\n")
        with pytest.raises(MessageSourceError, match="UTF-8"):
            load_messages(path)
