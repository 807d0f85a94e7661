"""
Tests for the Alphabet Registry.

These tests verify:
1. append() is idempotent and keeps the alphabet sorted
2. Malformed symbols fail before any storage access
3. An unreadable alphabet is treated as empty
"""

import logging

import pytest

from scrambler.alphabet import AlphabetRegistry
from scrambler.domain import Glyph, GlyphValidationError
from scrambler.storage.store import PersistentStore, Record


@pytest.fixture
def store(tmp_path):
    return PersistentStore(tmp_path / "data")


@pytest.fixture
def registry(store):
    return AlphabetRegistry(store)


class TestAppend:
    """Test appending glyphs."""

    def test_append_persists(self, registry, store):
        registry.append("a")
        assert store.load_alphabet() == [Glyph("a")]

    def test_append_keeps_sorted_order(self, registry):
        for symbol in ["c", "a", "b"]:
            registry.append(symbol)
        assert [glyph.symbol for glyph in registry.load()] == ["a", "b", "c"]

    def test_append_is_idempotent(self, registry):
        """Adding a known symbol keeps the original glyph and timestamp."""
        first = registry.append("a")
        second = registry.append("a")

        assert second.time_added == first.time_added
        assert len(registry.load()) == 1

    def test_append_unicode_grapheme(self, registry):
        registry.append("e\u0301")
        assert registry.load() == [Glyph("e\u0301")]

    def test_invalid_symbol_fails_before_io(self, registry, store):
        """Malformed symbols are programming errors; nothing is written."""
        with pytest.raises(GlyphValidationError):
            registry.append("ab")
        with pytest.raises(GlyphValidationError):
            registry.append("\t")

        assert not store.data_dir.exists()


class TestLoad:
    """Test reading the alphabet."""

    def test_missing_alphabet_is_empty(self, registry):
        assert registry.load() == []

    def test_corrupted_alphabet_is_empty(self, registry, store, caplog):
        """Load failures are logged and treated as an empty alphabet."""
        store.ensure_directory()
        store.primary_path(Record.ALPHABET).write_text("oops", "utf-8")

        with caplog.at_level(logging.WARNING, logger="scrambler.alphabet"):
            assert registry.load() == []

        assert "Treating alphabet as empty" in caplog.text

    def test_append_after_corruption_starts_fresh(self, registry, store):
        store.ensure_directory()
        store.primary_path(Record.ALPHABET).write_text("oops", "utf-8")

        registry.append("x")

        assert store.load_alphabet() == [Glyph("x")]
