"""
Consistency Engine for Scrambler.

Ties storage, alphabet and generation together into the operations a
user-facing shell calls.

translate() stages:
    1. Tokenize       — "" is the empty case, more than one word is an error
    2. Normalize      — strip punctuation, case-fold, reject empty remainder
    3. Lookup         — a stored translation is returned unchanged
    4. Generate       — draw candidates until one collides with nothing
    5. Commit         — persist the full translation map

Stages 4 and 5 run under the store lock with a fresh read of the map,
so read, validate and write happen in that order for a single writer.
"""

from __future__ import annotations

import logging
from typing import Optional

from .alphabet import AlphabetRegistry
from .config import ScramblerConfig, load_config
from .domain import (
    EmptyWordError,
    GenerationExhaustedError,
    Glyph,
    Translation,
    TranslationConflictError,
)
from .generation.generator import CandidateGenerator
from .storage.store import PersistentStore, Record
from .validation import normalize_translation_text, normalize_word

logger = logging.getLogger(__name__)


class ConsistencyEngine:
    """
    Assigns every word a stable translation that collides with no other.

    Invariants:
    - A word-key, once translated, always returns the same Translation
    - No two word-keys share a translation string
    - No generated translation equals a blocked one
    """

    def __init__(
        self,
        store: PersistentStore,
        generator: Optional[CandidateGenerator] = None,
        config: Optional[ScramblerConfig] = None,
    ):
        self.config = config if config is not None else ScramblerConfig(data_dir=store.data_dir)
        self.store = store
        self.generator = generator if generator is not None else CandidateGenerator(
            max_attempts=self.config.max_attempts,
        )
        self.alphabet = AlphabetRegistry(store)

    @classmethod
    def from_config(
        cls,
        config: Optional[ScramblerConfig] = None,
        generator: Optional[CandidateGenerator] = None,
    ) -> ConsistencyEngine:
        """Build the engine and its store from configuration."""
        if config is None:
            config = load_config()
        return cls(PersistentStore.from_config(config), generator, config)

    # =========================================================================
    # TRANSLATION
    # =========================================================================

    def translate(self, raw_input: str) -> Translation:
        """
        Return the translation for a single word, generating and storing
        one on first sight.

        Raises:
            MultiWordInputError: If the input holds more than one word
            EmptyWordError: If no translatable characters remain
            EmptyAlphabetError: If a translation must be generated but the
                alphabet is empty
            GenerationExhaustedError: If no candidate passed within
                max_attempts
            StorageError: If records cannot be read or written
        """
        return self._translate(raw_input, commit=True)

    def suggest(self, raw_input: str) -> Translation:
        """
        Like translate(), but a newly generated translation is not stored.

        Shells use this to offer a proposal the operator can accept(),
        reject (ask again) or block().
        """
        return self._translate(raw_input, commit=False)

    def _translate(self, raw_input: str, commit: bool) -> Translation:
        word_key = normalize_word(raw_input)
        if not word_key:
            return Translation.empty()

        known = self.store.load_or_empty(Record.TRANSLATED_WORDS)
        if word_key in known:
            return known[word_key]

        with self.store.locked():
            # Another writer may have committed since the first read
            known = self.store.load_or_empty(Record.TRANSLATED_WORDS)
            if word_key in known:
                return known[word_key]

            blocked = self.store.load_or_empty(Record.BLOCKED_TRANSLATIONS)
            alphabet = self.alphabet.load()
            candidate = self._generate_unique(word_key, alphabet, known, blocked)

            if commit:
                known[word_key] = candidate
                self.store.save_translated_words(known)
                logger.info("Committed translation %r for %r", candidate.translation, word_key)

        return candidate

    def _collision_key(self, text: str) -> str:
        return text.casefold() if self.config.case_insensitive_collisions else text

    def _generate_unique(
        self,
        word_key: str,
        alphabet: list[Glyph],
        known: dict[str, Translation],
        blocked: list[Translation],
    ) -> Translation:
        """
        Draw candidates until one is neither blocked nor already assigned.

        Known and blocked translations are snapshots taken once per call.
        """
        taken = {self._collision_key(t.translation) for t in known.values()}
        forbidden = {self._collision_key(t.translation) for t in blocked}

        for attempt in range(1, self.config.max_attempts + 1):
            candidate = self.generator.generate(word_key, alphabet)
            key = self._collision_key(candidate.translation)
            if key in forbidden:
                logger.debug("Rejected blocked candidate %r (attempt %d)", candidate.translation, attempt)
                continue
            if key in taken:
                logger.debug("Rejected assigned candidate %r (attempt %d)", candidate.translation, attempt)
                continue
            return candidate

        raise GenerationExhaustedError(
            word_key, self.config.max_attempts, "every candidate was blocked or already assigned",
        )

    # =========================================================================
    # OPERATOR ACTIONS
    # =========================================================================

    def accept(self, word: str, translation: Translation) -> None:
        """
        Store a translation for a word, replacing any previous one.

        Raises:
            MultiWordInputError, EmptyWordError: If word is not a single word
            EmptyWordError: If the translation string is empty
            TranslationConflictError: If another word already owns the
                translation string
            StorageError: If the map cannot be read or written
        """
        word_key = normalize_word(word)
        if not word_key:
            raise EmptyWordError(word)
        normalize_translation_text(translation.translation)

        with self.store.locked():
            known = self.store.load_or_empty(Record.TRANSLATED_WORDS)
            key = self._collision_key(translation.translation)
            for owner, existing in known.items():
                if owner != word_key and self._collision_key(existing.translation) == key:
                    raise TranslationConflictError(word_key, translation.translation, owner)

            known[word_key] = translation
            self.store.save_translated_words(known)

        logger.info("Accepted translation %r for %r", translation.translation, word_key)

    def block(self, translation_text: str) -> Translation:
        """
        Never offer this translation string again.

        Blocking is idempotent; the first block of a string keeps its
        timestamp. Already assigned translations are left in place.

        Raises:
            EmptyWordError: If the text is empty or whitespace
            StorageError: If the blocklist cannot be read or written
        """
        text = normalize_translation_text(translation_text)

        with self.store.locked():
            blocked = self.store.load_or_empty(Record.BLOCKED_TRANSLATIONS)
            for existing in blocked:
                if existing.translation == text:
                    return existing

            entry = Translation(text)
            blocked.append(entry)
            self.store.save_blocked_translations(blocked)

        logger.info("Blocked translation %r", text)
        return entry

    # =========================================================================
    # QUERIES
    # =========================================================================

    def is_known(self, raw_input: str) -> bool:
        """Whether the word already has a stored (confirmed) translation."""
        word_key = normalize_word(raw_input)
        if not word_key:
            return False
        return word_key in self.store.load_or_empty(Record.TRANSLATED_WORDS)

    def known_words(self) -> dict[str, Translation]:
        return self.store.load_or_empty(Record.TRANSLATED_WORDS)

    def blocked_translations(self) -> list[Translation]:
        return self.store.load_or_empty(Record.BLOCKED_TRANSLATIONS)

    # =========================================================================
    # ALPHABET
    # =========================================================================

    def append_to_alphabet(self, symbol: str) -> Glyph:
        return self.alphabet.append(symbol)

    def load_alphabet(self) -> list[Glyph]:
        return self.alphabet.load()
