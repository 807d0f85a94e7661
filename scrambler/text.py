"""
Unicode text helpers for Scrambler.

All lengths and positions are counted in grapheme clusters (user-perceived
characters), never in code points. Segmentation follows UAX #29 via the
``regex`` module's ``\\X`` pattern.
"""

from __future__ import annotations

import unicodedata
from typing import Sequence

import regex

GRAPHEME_PATTERN = regex.compile(r"\X")


def graphemes(text: str) -> list[str]:
    """Split text into grapheme clusters."""
    return GRAPHEME_PATTERN.findall(text)


def grapheme_count(text: str) -> int:
    return len(graphemes(text))


def is_single_grapheme(symbol: str) -> bool:
    return grapheme_count(symbol) == 1


def tokenize(raw: str) -> list[str]:
    """Split raw input on any run of whitespace."""
    return raw.split()


def is_punctuation(char: str) -> bool:
    # Unicode general categories Pc, Pd, Ps, Pe, Pi, Pf, Po
    return unicodedata.category(char).startswith("P")


def strip_punctuation(token: str) -> str:
    """Remove every punctuation character from a token."""
    return "".join(char for char in token if not is_punctuation(char))


def has_triple_repeat(clusters: Sequence[str]) -> bool:
    """Check for three consecutive identical grapheme clusters."""
    for i in range(2, len(clusters)):
        if clusters[i] == clusters[i - 1] == clusters[i - 2]:
            return True
    return False
