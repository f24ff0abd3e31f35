"""Validation of term-detail payloads and merging with synthesized audio."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from linguamaster.languages import Language
from linguamaster.exceptions import MalformedResponseError

from .models import WordDetail


def _clean_optional_text(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class TermDetailsPayload(BaseModel):
    """Structure a provider must return for a term lookup.

    ``definition`` and ``exampleSentences`` are required; everything else is
    optional. Both camelCase and snake_case keys are accepted.
    """

    model_config = ConfigDict(extra="ignore")

    definition: str
    example_sentences: List[str] = Field(
        validation_alias=AliasChoices("exampleSentences", "example_sentences")
    )
    pronunciation: Optional[str] = None
    part_of_speech: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("partOfSpeech", "part_of_speech")
    )
    related_words: Optional[List[str]] = Field(
        default=None, validation_alias=AliasChoices("relatedWords", "related_words")
    )
    translation: Optional[str] = None

    @field_validator("definition")
    @classmethod
    def _require_definition(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("definition must not be empty")
        return stripped

    @field_validator("pronunciation", "part_of_speech", "translation", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return _clean_optional_text(value)

    @field_validator("example_sentences", "related_words")
    @classmethod
    def _drop_blank_items(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        return [item.strip() for item in value if item.strip()]


def validate_term_details(payload: Any) -> TermDetailsPayload:
    """Validate a raw provider payload, raising :class:`MalformedResponseError`."""

    if not isinstance(payload, Mapping):
        raise MalformedResponseError("Term details payload must be a JSON object", payload=payload)
    try:
        return TermDetailsPayload.model_validate(dict(payload))
    except ValidationError as exc:
        raise MalformedResponseError(
            f"Term details payload failed validation: {exc.error_count()} error(s)",
            payload=payload,
        ) from exc


def merge_term_details(
    payload: Any,
    audio_data: Optional[bytes],
    *,
    source_language: Language,
    target_language: Language,
) -> WordDetail:
    """Build a :class:`WordDetail` from a text payload and optional audio bytes.

    The translation is dropped whenever the source and target languages are
    the same, whatever the payload contains. Empty audio is treated as absent.
    """

    details = validate_term_details(payload)
    translation = details.translation if source_language != target_language else None
    return WordDetail(
        definition=details.definition,
        example_sentences=tuple(details.example_sentences),
        pronunciation=details.pronunciation,
        part_of_speech=details.part_of_speech,
        related_words=tuple(details.related_words) if details.related_words is not None else None,
        translation=translation,
        audio_data=audio_data or None,
    )


__all__ = ["TermDetailsPayload", "merge_term_details", "validate_term_details"]
