"""
Core Domain Objects for Scrambler.

Domain Objects:
    Glyph        — A single grapheme usable as an alphabet symbol
    Translation  — A generated or accepted output string
    ErrorReport  — A copyable snapshot of a ScramblerError

Equality of Glyphs and Translations is defined by their payload only.
Timestamps are metadata and never take part in collision checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from .text import is_single_grapheme


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _parse_timestamp(value: str) -> datetime:
    timestamp = datetime.fromisoformat(value)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


# =============================================================================
# ERROR TAXONOMY
# =============================================================================

class ErrorKind(Enum):
    """
    Recoverable error categories.

    Input errors:
        MULTI_WORD_INPUT, EMPTY_WORD
    Storage errors:
        DIRECTORY, STORAGE, RECORD_NOT_FOUND
    Generation errors:
        EMPTY_ALPHABET, GENERATION_EXHAUSTED
    Consistency errors:
        TRANSLATION_CONFLICT
    """
    MULTI_WORD_INPUT = "multi_word_input"
    EMPTY_WORD = "empty_word"
    DIRECTORY = "directory"
    STORAGE = "storage"
    RECORD_NOT_FOUND = "record_not_found"
    EMPTY_ALPHABET = "empty_alphabet"
    GENERATION_EXHAUSTED = "generation_exhausted"
    TRANSLATION_CONFLICT = "translation_conflict"


class ScramblerError(Exception):
    """Base class for every error reported to a caller of the engine."""

    kind: ErrorKind = ErrorKind.STORAGE

    def __init__(self, reason: str, subject: Optional[str] = None):
        self.reason = reason
        self.subject = subject
        super().__init__(f"[{self.kind.value}] {reason}")


class MultiWordInputError(ScramblerError):
    """Raised when the input holds more than one word."""
    kind = ErrorKind.MULTI_WORD_INPUT

    def __init__(self, raw_input: str):
        super().__init__(
            f'I can only translate single words. The input "{raw_input}" '
            f"is not a single word.",
            raw_input,
        )


class EmptyWordError(ScramblerError):
    """Raised when nothing is left of the input after normalization."""
    kind = ErrorKind.EMPTY_WORD

    def __init__(self, raw_input: str):
        super().__init__(
            f'The input "{raw_input}" contains no translatable characters.',
            raw_input,
        )


class DirectoryError(ScramblerError):
    """Raised when the storage directory cannot be created."""
    kind = ErrorKind.DIRECTORY

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(
            f"Issue encountered while creating directory '{path}': {cause}",
            path,
        )


class StorageError(ScramblerError):
    """Raised when a record cannot be read from either slot or cannot be written."""
    kind = ErrorKind.STORAGE

    def __init__(self, record: str, reason: str, cause: Optional[BaseException] = None):
        self.record = record
        self.cause = cause
        detail = f"{reason}: {cause}" if cause is not None else reason
        super().__init__(f"Record '{record}': {detail}", record)


class RecordNotFoundError(StorageError):
    """Raised when neither the primary nor the backup slot of a record exists."""
    kind = ErrorKind.RECORD_NOT_FOUND

    def __init__(self, record: str):
        super().__init__(record, "no primary or backup file exists yet")


class EmptyAlphabetError(ScramblerError):
    """Raised when a translation is requested but the alphabet has no glyphs."""
    kind = ErrorKind.EMPTY_ALPHABET

    def __init__(self, word_key: Optional[str] = None):
        super().__init__(
            "The alphabet is empty. Add at least one glyph before translating.",
            word_key,
        )


class GenerationExhaustedError(ScramblerError):
    """Raised when no acceptable candidate was found within the attempt budget."""
    kind = ErrorKind.GENERATION_EXHAUSTED

    def __init__(self, word_key: str, attempts: int, reason: str = ""):
        self.attempts = attempts
        message = f"No acceptable translation for '{word_key}' after {attempts} attempts"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, word_key)


class TranslationConflictError(ScramblerError):
    """Raised when an accepted translation is already assigned to another word."""
    kind = ErrorKind.TRANSLATION_CONFLICT

    def __init__(self, word_key: str, translation: str, owner: str):
        self.owner = owner
        super().__init__(
            f"Translation '{translation}' is already assigned to '{owner}'",
            word_key,
        )


@dataclass(frozen=True)
class ErrorReport:
    """
    A shareable, immutable description of a ScramblerError.

    Errors are handed across thread and UI boundaries as reports; the
    presentation layer decides how to render them.
    """
    kind: ErrorKind
    reason: str
    subject: Optional[str] = None

    @classmethod
    def from_error(cls, error: ScramblerError) -> ErrorReport:
        """Create an ErrorReport from a ScramblerError."""
        return cls(kind=error.kind, reason=error.reason, subject=error.subject)

    def render(self) -> str:
        return f"Error! {self.reason}"


# =============================================================================
# GLYPH
# =============================================================================

class GlyphValidationError(ValueError):
    """
    Raised when a Glyph is built from an invalid symbol.

    This is a programming error on the caller's side, not part of the
    recoverable ScramblerError taxonomy.
    """
    pass


@dataclass(frozen=True)
class Glyph:
    """
    A single grapheme cluster usable when generating translations.

    Invariants enforced:
    1. symbol is exactly one grapheme cluster
    2. symbol is not whitespace
    """
    symbol: str
    time_added: datetime = field(default_factory=utc_now, compare=False)

    def __post_init__(self):
        """Enforce invariants at construction time."""
        if not isinstance(self.symbol, str):
            raise GlyphValidationError(
                f"symbol must be str, got {type(self.symbol).__name__}"
            )
        if not self.symbol.strip():
            raise GlyphValidationError(
                f"symbol must not be empty or whitespace, got {self.symbol!r}"
            )
        if not is_single_grapheme(self.symbol):
            raise GlyphValidationError(
                f"symbol must be exactly one grapheme cluster, got {self.symbol!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "time_added": self.time_added.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Glyph:
        return cls(
            symbol=data["symbol"],
            time_added=_parse_timestamp(data["time_added"]),
        )


# =============================================================================
# TRANSLATION
# =============================================================================

@dataclass(frozen=True)
class Translation:
    """
    A generated or accepted translation.

    Two Translations collide iff their translation strings are equal.
    """
    translation: str
    time_added: datetime = field(default_factory=utc_now, compare=False)

    @classmethod
    def empty(cls) -> Translation:
        """The translation of empty input."""
        return cls("")

    @property
    def is_empty(self) -> bool:
        return self.translation == ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "translation": self.translation,
            "time_added": self.time_added.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Translation:
        if not isinstance(data["translation"], str):
            raise TypeError(
                f"translation must be str, got {type(data['translation']).__name__}"
            )
        return cls(
            translation=data["translation"],
            time_added=_parse_timestamp(data["time_added"]),
        )
