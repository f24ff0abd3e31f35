"""Reader session: text, selection, lookups and saved vocabulary for one user."""

from __future__ import annotations

from typing import Optional, Tuple

from linguamaster import logging_manager as log_mgr
from linguamaster.config import LinguaSettings, get_settings
from linguamaster.exceptions import NothingToSaveError
from linguamaster.languages import Language
from linguamaster.lookup.coordinator import LookupCoordinator
from linguamaster.lookup.detection import DetectionState, LanguageDetectorDebouncer
from linguamaster.lookup.models import LookupState
from linguamaster.lookup.provider import LexicalProvider
from linguamaster.text import (
    NO_SELECTION,
    PhraseResolution,
    SelectionSpan,
    TextPart,
    resolve,
    span_from_offsets,
    tokenize,
)
from linguamaster.vocabulary import SavedEntry, VocabularyStore

logger = log_mgr.get_logger().getChild("session")


class ReaderSession:
    """Owns every piece of state behind one reading view.

    The session tokenizes the current text, drives debounced language
    detection, forwards clicks and selections to the lookup coordinator and
    keeps the saved vocabulary.
    """

    def __init__(
        self,
        provider: LexicalProvider,
        *,
        settings: Optional[LinguaSettings] = None,
        store: Optional[VocabularyStore] = None,
    ) -> None:
        resolved = settings or get_settings()
        self._provider = provider
        self._default_source_language = resolved.default_source_language
        self._target_language = resolved.default_target_language
        self._text = ""
        self._parts: Tuple[TextPart, ...] = ()
        self._detector = LanguageDetectorDebouncer(
            provider.detect_language,
            quiet_period=resolved.detection_quiet_period_seconds,
            timeout_seconds=resolved.provider_timeout_seconds,
        )
        self._coordinator = LookupCoordinator(
            provider, timeout_seconds=resolved.provider_timeout_seconds
        )
        self._store = store if store is not None else VocabularyStore()

    # ------------------------------------------------------------------ text

    @property
    def text(self) -> str:
        return self._text

    @property
    def parts(self) -> Tuple[TextPart, ...]:
        return self._parts

    def set_text(self, text: str) -> Tuple[TextPart, ...]:
        """Replace the input text and schedule language detection.

        A blank text also closes any displayed lookup.
        """

        self._text = text
        self._parts = tokenize(text)
        self._detector.on_text_changed(text)
        if not text.strip():
            self._coordinator.reset()
        logger.debug("Text updated: %d parts", len(self._parts))
        return self._parts

    def clear(self) -> None:
        self.set_text("")

    # ------------------------------------------------------------- languages

    @property
    def default_source_language(self) -> Language:
        return self._default_source_language

    @property
    def target_language(self) -> Language:
        return self._target_language

    def set_target_language(self, language: Language) -> None:
        self._target_language = language

    @property
    def detection(self) -> DetectionState:
        return self._detector.state

    @property
    def detector(self) -> LanguageDetectorDebouncer:
        return self._detector

    @property
    def source_language(self) -> Language:
        """Detected language, or the configured default when none."""

        return self._detector.effective_language(self._default_source_language)

    @property
    def is_rtl(self) -> bool:
        return self.source_language.is_rtl

    # --------------------------------------------------------------- lookups

    @property
    def lookup_state(self) -> LookupState:
        return self._coordinator.state

    @property
    def coordinator(self) -> LookupCoordinator:
        return self._coordinator

    async def lookup_term(
        self,
        term: str,
        *,
        source_language: Optional[Language] = None,
        target_language: Optional[Language] = None,
    ) -> Optional[LookupState]:
        return await self._coordinator.lookup(
            term,
            source_language or self.source_language,
            target_language or self._target_language,
        )

    def part_at(self, index: int) -> TextPart:
        """Return the part at ``index``; :class:`IndexError` when out of range."""

        if index < 0 or index >= len(self._parts):
            raise IndexError(f"Part index {index} out of range")
        return self._parts[index]

    async def lookup_part(self, index: int) -> Optional[LookupState]:
        """Look up the word at ``index``; non-word parts are ignored.

        Raises :class:`IndexError` when ``index`` does not address a part.
        """

        part = self.part_at(index)
        if not part.is_word or not part.normalized_key:
            return None
        return await self.lookup_term(part.normalized_key)

    def resolve_selection(self, span: Optional[SelectionSpan]) -> PhraseResolution:
        return resolve(span, self._parts)

    def resolve_offsets(self, start_offset: int, end_offset: int) -> PhraseResolution:
        span = span_from_offsets(self._parts, start_offset, end_offset)
        if span is None:
            return NO_SELECTION
        return resolve(span, self._parts)

    async def lookup_resolution(
        self, resolution: PhraseResolution
    ) -> Optional[LookupState]:
        if not resolution.triggers_lookup or resolution.term is None:
            return None
        return await self.lookup_term(resolution.term)

    async def lookup_selection(
        self, span: Optional[SelectionSpan]
    ) -> Tuple[PhraseResolution, Optional[LookupState]]:
        resolution = self.resolve_selection(span)
        return resolution, await self.lookup_resolution(resolution)

    def close_lookup(self) -> None:
        self._coordinator.reset()

    @property
    def audio_media_type(self) -> str:
        return getattr(self._provider, "audio_media_type", "application/octet-stream")

    # ------------------------------------------------------------ vocabulary

    @property
    def vocabulary(self) -> VocabularyStore:
        return self._store

    def save_current(self) -> Tuple[SavedEntry, bool]:
        """Save the resolved lookup; returns the entry and whether it was new."""

        state = self._coordinator.state
        if not state.is_resolved or state.key is None or state.detail is None:
            raise NothingToSaveError("No resolved lookup to save")
        key = state.key
        existing = self._store.get(key.term, key.source_language)
        if existing is not None:
            return existing, False
        entry = SavedEntry(key.term, key.source_language, key.target_language, state.detail)
        self._store.save(entry)
        logger.info("Saved term", extra={"event": "vocabulary.save", "term": key.term})
        return entry, True

    def remove_saved(self, term: str, source_language: Language) -> bool:
        return self._store.remove(term, source_language)

    @property
    def is_current_term_saved(self) -> bool:
        key = self._coordinator.active_key
        if key is None:
            return False
        return self._store.contains(key.term, key.source_language)

    def close(self) -> None:
        self._detector.close()
        self._coordinator.reset()


__all__ = ["ReaderSession"]
