"""
Alphabet Registry for Scrambler.

The alphabet is the ordered set of glyphs translations are built from.
It only ever grows: glyphs are appended, never mutated. Removing a glyph
is done by editing the data file by hand.
"""

from __future__ import annotations

import logging

from .domain import Glyph, RecordNotFoundError, ScramblerError
from .storage.store import PersistentStore

logger = logging.getLogger(__name__)


class AlphabetRegistry:
    """Append-only access to the persisted alphabet."""

    def __init__(self, store: PersistentStore):
        self.store = store

    def load(self) -> list[Glyph]:
        """
        Snapshot of the current alphabet, sorted by symbol.

        Any load failure is logged and treated as an empty alphabet.
        """
        try:
            alphabet = self.store.load_alphabet()
        except RecordNotFoundError:
            return []
        except ScramblerError as e:
            logger.warning("Treating alphabet as empty: %s", e)
            return []
        return sorted(alphabet, key=lambda glyph: glyph.symbol)

    def append(self, symbol: str) -> Glyph:
        """
        Add a symbol to the alphabet unless it is already present.

        Returns the stored Glyph (the existing one if the symbol was known).

        Raises:
            GlyphValidationError: If symbol is not a single non-whitespace
                grapheme. Raised before any storage access.
            StorageError: If the updated alphabet cannot be written
        """
        glyph = Glyph(symbol)

        with self.store.locked():
            alphabet = self.load()
            for existing in alphabet:
                if existing == glyph:
                    logger.debug("Glyph %r already in alphabet", symbol)
                    return existing

            alphabet.append(glyph)
            self.store.save_alphabet(sorted(alphabet, key=lambda g: g.symbol))

        logger.info("Added glyph %r to alphabet", symbol)
        return glyph
