"""
Persistent Store for Scrambler.

Three named records live as JSON files in the data directory:

    alphabet.json              — list of Glyphs, sorted by symbol
    translated_words.json      — word-key -> Translation, sorted keys
    blocked_translations.json  — list of Translations, sorted by translation

Durability rules:
- Every save first copies the current primary file to its backup slot.
  A failed backup is logged and the save continues.
- Every save writes to a temp file and replaces the primary in one step,
  so a failed save leaves the previous primary untouched.
- Every load falls back to the backup slot when the primary cannot be
  read or decoded. Only when both fail is an error raised.
- Serialization is deterministic: logically identical data always
  produces byte-identical files.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Union

from filelock import FileLock, Timeout

from ..config import ScramblerConfig
from ..domain import (
    DirectoryError,
    Glyph,
    RecordNotFoundError,
    StorageError,
    Translation,
)

logger = logging.getLogger(__name__)

LOCK_FILENAME = ".scrambler.lock"

# Exceptions that mean "this slot is unusable"
DECODE_ERRORS = (OSError, ValueError, KeyError, TypeError, AttributeError)


class Record(Enum):
    """The persisted records and their file names."""
    ALPHABET = "alphabet.json"
    TRANSLATED_WORDS = "translated_words.json"
    BLOCKED_TRANSLATIONS = "blocked_translations.json"

    @property
    def label(self) -> str:
        return self.value.rsplit(".", 1)[0]


RecordData = Union[list[Glyph], dict[str, Translation], list[Translation]]


# =============================================================================
# RECORD CODECS
# =============================================================================

def encode_alphabet(alphabet: list[Glyph]) -> list[dict[str, Any]]:
    return [glyph.to_dict() for glyph in sorted(alphabet, key=lambda g: g.symbol)]


def decode_alphabet(payload: Any) -> list[Glyph]:
    if not isinstance(payload, list):
        raise TypeError(f"expected a JSON array, got {type(payload).__name__}")
    return [Glyph.from_dict(item) for item in payload]


def encode_translated_words(words: dict[str, Translation]) -> dict[str, dict[str, Any]]:
    return {key: words[key].to_dict() for key in sorted(words)}


def decode_translated_words(payload: Any) -> dict[str, Translation]:
    if not isinstance(payload, dict):
        raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
    return {key: Translation.from_dict(value) for key, value in payload.items()}


def encode_blocked_translations(blocked: list[Translation]) -> list[dict[str, Any]]:
    return [t.to_dict() for t in sorted(blocked, key=lambda t: t.translation)]


def decode_blocked_translations(payload: Any) -> list[Translation]:
    if not isinstance(payload, list):
        raise TypeError(f"expected a JSON array, got {type(payload).__name__}")
    return [Translation.from_dict(item) for item in payload]


CODECS: dict[Record, tuple[Callable[[Any], Any], Callable[[Any], Any]]] = {
    Record.ALPHABET: (encode_alphabet, decode_alphabet),
    Record.TRANSLATED_WORDS: (encode_translated_words, decode_translated_words),
    Record.BLOCKED_TRANSLATIONS: (encode_blocked_translations, decode_blocked_translations),
}


def serialize(record: Record, data: RecordData) -> str:
    """Render record data as canonical JSON text."""
    encode, _ = CODECS[record]
    return json.dumps(encode(data), indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def deserialize(record: Record, text: str) -> RecordData:
    _, decode = CODECS[record]
    return decode(json.loads(text))


# =============================================================================
# PERSISTENT STORE
# =============================================================================

class PersistentStore:
    """
    Owns the on-disk representation of all records.

    Loaded data is always a fresh snapshot; nothing is cached between
    calls.
    """

    def __init__(
        self,
        data_dir: Path | str = "scrambler_data",
        backup_suffix: str = ".bak",
        lock_timeout: float = 10.0,
    ):
        self.data_dir = Path(data_dir)
        self.backup_suffix = backup_suffix
        self.lock_timeout = lock_timeout
        self._lock: Optional[FileLock] = None

    @classmethod
    def from_config(cls, config: ScramblerConfig) -> PersistentStore:
        return cls(
            data_dir=config.data_dir,
            backup_suffix=config.backup_suffix,
            lock_timeout=config.lock_timeout,
        )

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def primary_path(self, record: Record) -> Path:
        return self.data_dir / record.value

    def backup_path(self, record: Record) -> Path:
        return self.data_dir / (record.value + self.backup_suffix)

    def ensure_directory(self) -> None:
        """
        Create the data directory if needed. Safe to call repeatedly.

        Raises:
            DirectoryError: If the directory cannot be created
        """
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryError(str(self.data_dir), e) from e

    # -------------------------------------------------------------------------
    # Locking
    # -------------------------------------------------------------------------

    def lock(self) -> FileLock:
        """
        Advisory lock guarding load-modify-save sequences.

        The returned lock is reentrant and shared by every caller of this
        store. Use it as a context manager via ``with store.locked():``.
        """
        if self._lock is None:
            self.ensure_directory()
            self._lock = FileLock(
                str(self.data_dir / LOCK_FILENAME),
                timeout=self.lock_timeout,
            )
        return self._lock

    def locked(self) -> _LockedSection:
        return _LockedSection(self)

    # -------------------------------------------------------------------------
    # Load / save
    # -------------------------------------------------------------------------

    def load(self, record: Record) -> RecordData:
        """
        Load a record, falling back to its backup slot.

        Raises:
            DirectoryError: If the data directory cannot be created
            RecordNotFoundError: If neither slot exists
            StorageError: If both slots exist but neither can be decoded
        """
        self.ensure_directory()
        primary = self.primary_path(record)
        backup = self.backup_path(record)

        if not primary.exists() and not backup.exists():
            raise RecordNotFoundError(record.label)

        try:
            return self._read(record, primary)
        except DECODE_ERRORS as primary_error:
            logger.warning(
                "Failed to load %s from %s, trying backup %s: %s",
                record.label, primary, backup, primary_error,
            )
            try:
                data = self._read(record, backup)
            except DECODE_ERRORS as backup_error:
                raise StorageError(
                    record.label,
                    "primary and backup could not be loaded",
                    backup_error,
                ) from backup_error
            logger.warning("Recovered %s from backup %s", record.label, backup)
            return data

    def save(self, record: Record, data: RecordData) -> None:
        """
        Persist a record, rotating the previous version into its backup slot.

        Raises:
            DirectoryError: If the data directory cannot be created
            StorageError: If the new data cannot be written
        """
        self.ensure_directory()
        primary = self.primary_path(record)

        try:
            text = serialize(record, data)
        except DECODE_ERRORS as e:
            raise StorageError(record.label, "data could not be serialized", e) from e

        if primary.exists():
            self._rotate_backup(record)

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{record.value}.", suffix=".tmp", dir=self.data_dir,
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, primary)
            tmp_name = None
        except OSError as e:
            raise StorageError(record.label, f"could not write {primary}", e) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.debug("Saved %s to %s", record.label, primary)

    def _read(self, record: Record, path: Path) -> RecordData:
        with open(path, encoding="utf-8") as f:
            return deserialize(record, f.read())

    def _rotate_backup(self, record: Record) -> None:
        """Copy the current primary into the backup slot. Failure is not fatal."""
        primary = self.primary_path(record)
        backup = self.backup_path(record)
        try:
            shutil.copyfile(primary, backup)
        except OSError as e:
            logger.warning(
                "Could not back up %s to %s, saving without a safety copy: %s",
                primary, backup, e,
            )

    # -------------------------------------------------------------------------
    # Typed helpers
    # -------------------------------------------------------------------------

    def load_alphabet(self) -> list[Glyph]:
        return self.load(Record.ALPHABET)

    def save_alphabet(self, alphabet: list[Glyph]) -> None:
        self.save(Record.ALPHABET, alphabet)

    def load_translated_words(self) -> dict[str, Translation]:
        return self.load(Record.TRANSLATED_WORDS)

    def save_translated_words(self, words: dict[str, Translation]) -> None:
        self.save(Record.TRANSLATED_WORDS, words)

    def load_blocked_translations(self) -> list[Translation]:
        return self.load(Record.BLOCKED_TRANSLATIONS)

    def save_blocked_translations(self, blocked: list[Translation]) -> None:
        self.save(Record.BLOCKED_TRANSLATIONS, blocked)

    def load_or_empty(self, record: Record) -> RecordData:
        """Load a record, treating a never-written record as empty."""
        try:
            return self.load(record)
        except RecordNotFoundError:
            logger.debug("No %s stored yet, starting empty", record.label)
            return {} if record is Record.TRANSLATED_WORDS else []


class _LockedSection:
    """Context manager translating lock timeouts into StorageError."""

    def __init__(self, store: PersistentStore):
        self.store = store

    def __enter__(self) -> PersistentStore:
        lock = self.store.lock()
        try:
            lock.acquire()
        except Timeout as e:
            raise StorageError(
                "lock",
                f"could not acquire {lock.lock_file} within {self.store.lock_timeout}s",
                e,
            ) from e
        return self.store

    def __exit__(self, exc_type, exc, tb) -> None:
        self.store.lock().release()
