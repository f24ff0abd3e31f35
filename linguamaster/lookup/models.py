"""Data models for term lookups.

This module defines the lookup key, the merged word detail returned to
callers, and the visible lookup state exposed by the coordinator.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from linguamaster.languages import Language


@dataclass(frozen=True, slots=True)
class LookupKey:
    """Identity of a lookup request.

    Two keys are equal when term and both languages are equal, however the
    term was obtained (click, drag selection or saved list).
    """

    term: str
    """Single-word normalized key or space-joined phrase."""

    source_language: Language
    """Language of the looked-up term."""

    target_language: Language
    """Language the term is translated into."""

    @property
    def wants_translation(self) -> bool:
        return self.source_language != self.target_language

    def to_dict(self) -> Dict[str, Any]:
        return {
            "term": self.term,
            "source_language": self.source_language.value,
            "target_language": self.target_language.value,
        }


@dataclass(frozen=True, slots=True)
class WordDetail:
    """Merged lexical information for one term.

    ``translation`` is only ever set when the source and target languages
    differ. ``audio_data`` holds encoded audio bytes when speech synthesis
    succeeded.
    """

    definition: str
    example_sentences: Tuple[str, ...]
    pronunciation: Optional[str] = None
    part_of_speech: Optional[str] = None
    related_words: Optional[Tuple[str, ...]] = None
    translation: Optional[str] = None
    audio_data: Optional[bytes] = field(default=None, repr=False)

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_data)

    def to_dict(self, *, include_audio: bool = True) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary (audio as base64)."""

        payload: Dict[str, Any] = {
            "definition": self.definition,
            "pronunciation": self.pronunciation,
            "example_sentences": list(self.example_sentences),
            "part_of_speech": self.part_of_speech,
            "related_words": list(self.related_words) if self.related_words is not None else None,
        }
        if self.translation is not None:
            payload["translation"] = self.translation
        payload["has_audio"] = self.has_audio
        if include_audio and self.audio_data:
            payload["audio_base64"] = base64.b64encode(self.audio_data).decode("ascii")
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordDetail":
        """Create from a dictionary produced by :meth:`to_dict`."""

        audio = data.get("audio_base64")
        related = data.get("related_words")
        return cls(
            definition=str(data.get("definition", "")),
            example_sentences=tuple(str(item) for item in data.get("example_sentences") or ()),
            pronunciation=data.get("pronunciation"),
            part_of_speech=data.get("part_of_speech"),
            related_words=tuple(str(item) for item in related) if related is not None else None,
            translation=data.get("translation"),
            audio_data=base64.b64decode(audio) if audio else None,
        )


class LookupStatus(str, Enum):
    """Lifecycle of a lookup attempt."""

    IDLE = "idle"
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Why a lookup attempt failed."""

    PROVIDER_ERROR = "provider_error"
    MALFORMED_RESPONSE = "malformed_response"


FAILURE_MESSAGES: Dict[FailureReason, str] = {
    FailureReason.PROVIDER_ERROR: (
        "An unexpected error occurred while fetching term details. Please try again."
    ),
    FailureReason.MALFORMED_RESPONSE: (
        "The lookup service could not process this phrase into the requested format. "
        "This might happen with very complex or unusual phrases. "
        "Please try a simpler phrase or individual words."
    ),
}


@dataclass(frozen=True, slots=True)
class LookupState:
    """Snapshot of the lookup state visible to callers."""

    status: LookupStatus
    key: Optional[LookupKey] = None
    detail: Optional[WordDetail] = None
    reason: Optional[FailureReason] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "LookupState":
        return cls(LookupStatus.IDLE)

    @classmethod
    def pending(cls, key: LookupKey) -> "LookupState":
        return cls(LookupStatus.PENDING, key=key)

    @classmethod
    def resolved(cls, key: LookupKey, detail: WordDetail) -> "LookupState":
        return cls(LookupStatus.RESOLVED, key=key, detail=detail)

    @classmethod
    def failed(cls, key: LookupKey, reason: FailureReason) -> "LookupState":
        return cls(LookupStatus.FAILED, key=key, reason=reason, message=FAILURE_MESSAGES[reason])

    @property
    def is_pending(self) -> bool:
        return self.status is LookupStatus.PENDING

    @property
    def is_resolved(self) -> bool:
        return self.status is LookupStatus.RESOLVED

    def to_dict(self, *, include_audio: bool = False) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "key": self.key.to_dict() if self.key is not None else None,
            "detail": (
                self.detail.to_dict(include_audio=include_audio)
                if self.detail is not None
                else None
            ),
            "reason": self.reason.value if self.reason is not None else None,
            "message": self.message,
        }


__all__ = [
    "FAILURE_MESSAGES",
    "FailureReason",
    "LookupKey",
    "LookupState",
    "LookupStatus",
    "WordDetail",
]
