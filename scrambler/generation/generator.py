"""
Candidate Generator for Scrambler.

Produces one random candidate translation for a word-key. The candidate's
length is scaled to the word so translations visibly differ in size from
their source while staying roughly proportionate:

    n = grapheme count of the word-key
    L ~ uniform integer in [max(1, n // 2), 2 * n]

Each of the L positions is drawn independently and uniformly from the
alphabet (with replacement). Glyphs can merge when joined, so the joined
text is segmented again: candidates whose grapheme count falls outside the
range or that contain three consecutive identical graphemes are
discarded and redrawn.

Global uniqueness (blocked and already-assigned translations) is NOT
checked here; that belongs to the ConsistencyEngine.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from ..domain import (
    EmptyAlphabetError,
    GenerationExhaustedError,
    Glyph,
    Translation,
)
from ..text import grapheme_count, graphemes, has_triple_repeat

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10_000


def length_bounds(n: int) -> tuple[int, int]:
    """Inclusive translation length range for a word of n graphemes."""
    return max(1, n // 2), 2 * n


class CandidateGenerator:
    """
    Draws candidate translations.

    Pass a seeded ``random.Random`` for reproducible output. The default
    generator is not suitable for cryptographic use.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.max_attempts = max_attempts

    def draw(self, word_key: str, symbols: Sequence[str]) -> list[str]:
        """Draw one raw candidate as a list of symbols, without validity checks."""
        low, high = length_bounds(grapheme_count(word_key))
        length = self.rng.randint(low, high)
        return [self.rng.choice(symbols) for _ in range(length)]

    def generate(self, word_key: str, alphabet: Sequence[Glyph]) -> Translation:
        """
        Generate one candidate within the length range and without triple repeats.

        Raises:
            EmptyAlphabetError: If the alphabet has no glyphs
            GenerationExhaustedError: If max_attempts draws were all rejected
                (e.g. a one-glyph alphabet and a long word)
        """
        if not alphabet:
            raise EmptyAlphabetError(word_key)

        symbols = [glyph.symbol for glyph in alphabet]
        low, high = length_bounds(grapheme_count(word_key))

        for attempt in range(1, self.max_attempts + 1):
            text = "".join(self.draw(word_key, symbols))
            # Adjacent glyphs can merge into one cluster (Hangul jamo,
            # regional indicators), so check the joined text.
            clusters = graphemes(text)
            if not low <= len(clusters) <= high:
                logger.debug(
                    "Discarding candidate %r for %r: %d graphemes (attempt %d)",
                    text, word_key, len(clusters), attempt,
                )
                continue
            if has_triple_repeat(clusters):
                logger.debug(
                    "Discarding candidate %r for %r: triple repeat (attempt %d)",
                    text, word_key, attempt,
                )
                continue
            return Translation(text)

        raise GenerationExhaustedError(
            word_key,
            self.max_attempts,
            "every candidate was out of length bounds or repeated a grapheme three times",
        )
