"""
Input Validation for Scrambler.

Derives the word-key used for lookup and storage from raw user input.
Validation is binary: a raw input either yields a word-key or raises an
input error. There is no partial result.

Word-key derivation:
1. Empty input is the empty case (no word-key, no storage access)
2. Input must be exactly one whitespace-separated token
3. Punctuation is stripped from the token
4. Something other than whitespace must remain
5. The remainder is case-folded so lookups are lowercase-agnostic
"""

from __future__ import annotations

from .domain import EmptyWordError, MultiWordInputError
from .text import strip_punctuation, tokenize


def is_empty_input(raw_input: str) -> bool:
    """Empty input short-circuits to an empty Translation."""
    return raw_input == ""


def validate_single_word(raw_input: str) -> str:
    """
    Return the single token of the input.

    Raises:
        MultiWordInputError: If the input holds more than one token
        EmptyWordError: If the input holds only whitespace
    """
    tokens = tokenize(raw_input)
    if len(tokens) > 1:
        raise MultiWordInputError(raw_input)
    if not tokens:
        raise EmptyWordError(raw_input)
    return tokens[0]


def normalize_word(raw_input: str) -> str:
    """
    Derive the word-key for a raw input.

    Returns "" for empty input; callers treat that as the empty case.

    Raises:
        MultiWordInputError: If the input holds more than one token
        EmptyWordError: If nothing but whitespace or punctuation is present
    """
    if is_empty_input(raw_input):
        return ""

    token = validate_single_word(raw_input)
    stripped = strip_punctuation(token)
    if not stripped.strip():
        raise EmptyWordError(raw_input)

    return stripped.casefold()


def normalize_translation_text(translation_text: str) -> str:
    """
    Validate a translation string supplied by an operator.

    Raises:
        EmptyWordError: If the text is empty or whitespace
    """
    text = translation_text.strip()
    if not text:
        raise EmptyWordError(translation_text)
    return text
