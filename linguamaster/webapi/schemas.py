"""Pydantic schemas for the reader HTTP API."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from linguamaster.lookup.detection import DetectionState
from linguamaster.lookup.models import LookupState, WordDetail
from linguamaster.session import ReaderSession
from linguamaster.text import PhraseResolution, TextPart
from linguamaster.vocabulary import SavedEntry


class LanguageInfo(BaseModel):
    """One supported language."""

    name: str
    code: str
    rtl: bool


class LanguagesResponse(BaseModel):
    """Supported languages and the session's language choices."""

    languages: List[LanguageInfo]
    default_source_language: str
    target_language: str


class TextPartPayload(BaseModel):
    id: str
    index: int
    kind: Literal["word", "whitespace", "punctuation"]
    raw_text: str
    normalized_key: Optional[str] = None

    @classmethod
    def from_part(cls, part: TextPart) -> "TextPartPayload":
        return cls.model_validate(part.to_dict())


class DetectionPayload(BaseModel):
    """Detection state plus the language lookups will use."""

    detected_language: Optional[str] = None
    is_detecting: bool = False
    source_language: str
    direction: Literal["ltr", "rtl"] = "ltr"

    @classmethod
    def from_session(cls, session: ReaderSession) -> "DetectionPayload":
        state: DetectionState = session.detection
        return cls(
            **state.to_dict(),
            source_language=session.source_language.value,
            direction="rtl" if session.is_rtl else "ltr",
        )


class TextRequest(BaseModel):
    text: str = Field(max_length=100_000)


class TextResponse(BaseModel):
    text: str
    parts: List[TextPartPayload] = Field(default_factory=list)
    detection: DetectionPayload

    @classmethod
    def from_session(cls, session: ReaderSession) -> "TextResponse":
        return cls(
            text=session.text,
            parts=[TextPartPayload.from_part(part) for part in session.parts],
            detection=DetectionPayload.from_session(session),
        )


class TargetLanguageRequest(BaseModel):
    language: str


class WordDetailPayload(BaseModel):
    definition: str
    pronunciation: Optional[str] = None
    example_sentences: List[str] = Field(default_factory=list)
    part_of_speech: Optional[str] = None
    related_words: Optional[List[str]] = None
    translation: Optional[str] = None
    has_audio: bool = False

    @classmethod
    def from_detail(cls, detail: WordDetail) -> "WordDetailPayload":
        return cls.model_validate(detail.to_dict(include_audio=False))


class LookupKeyPayload(BaseModel):
    term: str
    source_language: str
    target_language: str


class LookupStateResponse(BaseModel):
    """Visible lookup state.

    ``superseded`` is true when the request's own attempt was overtaken by a
    newer one; the other fields then describe the newer attempt.
    """

    status: Literal["idle", "pending", "resolved", "failed"]
    key: Optional[LookupKeyPayload] = None
    detail: Optional[WordDetailPayload] = None
    reason: Optional[Literal["provider_error", "malformed_response"]] = None
    message: Optional[str] = None
    is_saved: bool = False
    superseded: bool = False

    @classmethod
    def from_session(
        cls, session: ReaderSession, *, superseded: bool = False
    ) -> "LookupStateResponse":
        state: LookupState = session.lookup_state
        payload: Dict[str, Any] = state.to_dict(include_audio=False)
        return cls.model_validate(
            {**payload, "is_saved": session.is_current_term_saved, "superseded": superseded}
        )


class LookupRequest(BaseModel):
    """Look up an arbitrary term, optionally with explicit languages."""

    term: str = Field(min_length=1, max_length=500)
    source_language: Optional[str] = None
    target_language: Optional[str] = None


class SelectionRequest(BaseModel):
    """A selection given either as two part indices or two character offsets."""

    start_index: Optional[int] = None
    end_index: Optional[int] = None
    start_offset: Optional[int] = None
    end_offset: Optional[int] = None

    @model_validator(mode="after")
    def _check_mode(self) -> "SelectionRequest":
        uses_indices = self.start_index is not None or self.end_index is not None
        uses_offsets = self.start_offset is not None or self.end_offset is not None
        if uses_indices and uses_offsets:
            raise ValueError("Provide either part indices or character offsets, not both")
        if uses_offsets and (self.start_offset is None or self.end_offset is None):
            raise ValueError("Both start_offset and end_offset are required")
        return self

    @property
    def uses_offsets(self) -> bool:
        return self.start_offset is not None


class ResolutionPayload(BaseModel):
    kind: Literal["no_selection", "non_word_selection", "single_word", "phrase"]
    term: Optional[str] = None
    part_indices: List[int] = Field(default_factory=list)

    @classmethod
    def from_resolution(cls, resolution: PhraseResolution) -> "ResolutionPayload":
        return cls.model_validate(resolution.to_dict())


class SelectionResponse(BaseModel):
    resolution: ResolutionPayload
    lookup: Optional[LookupStateResponse] = None


class SavedEntryPayload(BaseModel):
    term: str
    source_language: str
    target_language: str
    details: WordDetailPayload
    saved_at: float

    @classmethod
    def from_entry(cls, entry: SavedEntry) -> "SavedEntryPayload":
        return cls(
            term=entry.term,
            source_language=entry.source_language.value,
            target_language=entry.target_language.value,
            details=WordDetailPayload.from_detail(entry.details),
            saved_at=entry.saved_at,
        )


class VocabularyResponse(BaseModel):
    entries: List[SavedEntryPayload] = Field(default_factory=list)


class SaveResponse(BaseModel):
    saved: bool
    entry: SavedEntryPayload


class RemoveResponse(BaseModel):
    removed: bool


__all__ = [
    "DetectionPayload",
    "LanguageInfo",
    "LanguagesResponse",
    "LookupKeyPayload",
    "LookupRequest",
    "LookupStateResponse",
    "RemoveResponse",
    "ResolutionPayload",
    "SaveResponse",
    "SavedEntryPayload",
    "SelectionRequest",
    "SelectionResponse",
    "TargetLanguageRequest",
    "TextPartPayload",
    "TextRequest",
    "TextResponse",
    "VocabularyResponse",
    "WordDetailPayload",
]
