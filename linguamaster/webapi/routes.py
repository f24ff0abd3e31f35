"""Reader HTTP routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from linguamaster.exceptions import NothingToSaveError
from linguamaster.languages import SUPPORTED_LANGUAGES, Language
from linguamaster.session import ReaderSession
from linguamaster.text import SelectionSpan

from .dependencies import get_session
from .schemas import (
    DetectionPayload,
    LanguageInfo,
    LanguagesResponse,
    LookupRequest,
    LookupStateResponse,
    RemoveResponse,
    ResolutionPayload,
    SaveResponse,
    SavedEntryPayload,
    SelectionRequest,
    SelectionResponse,
    TargetLanguageRequest,
    TextRequest,
    TextResponse,
    VocabularyResponse,
)

router = APIRouter(prefix="/api", tags=["reader"])


def _parse_language(raw: Optional[str], field: str) -> Optional[Language]:
    if raw is None:
        return None
    language = Language.from_name(raw)
    if language is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported {field}: {raw}",
        )
    return language


@router.get("/languages", response_model=LanguagesResponse)
async def list_languages(session: ReaderSession = Depends(get_session)) -> LanguagesResponse:
    return LanguagesResponse(
        languages=[
            LanguageInfo(name=language.value, code=language.code, rtl=language.is_rtl)
            for language in SUPPORTED_LANGUAGES
        ],
        default_source_language=session.default_source_language.value,
        target_language=session.target_language.value,
    )


@router.put("/text", response_model=TextResponse)
async def set_text(
    payload: TextRequest, session: ReaderSession = Depends(get_session)
) -> TextResponse:
    """Replace the input text; language detection runs after a quiet period."""

    session.set_text(payload.text)
    return TextResponse.from_session(session)


@router.get("/text", response_model=TextResponse)
async def get_text(session: ReaderSession = Depends(get_session)) -> TextResponse:
    return TextResponse.from_session(session)


@router.delete("/text", response_model=TextResponse)
async def clear_text(session: ReaderSession = Depends(get_session)) -> TextResponse:
    session.clear()
    return TextResponse.from_session(session)


@router.get("/detection", response_model=DetectionPayload)
async def get_detection(session: ReaderSession = Depends(get_session)) -> DetectionPayload:
    return DetectionPayload.from_session(session)


@router.put("/target-language", response_model=LanguagesResponse)
async def set_target_language(
    payload: TargetLanguageRequest, session: ReaderSession = Depends(get_session)
) -> LanguagesResponse:
    language = _parse_language(payload.language, "target language")
    session.set_target_language(language)
    return await list_languages(session)


@router.post("/parts/{index}/lookup", response_model=LookupStateResponse)
async def lookup_part(
    index: int, session: ReaderSession = Depends(get_session)
) -> LookupStateResponse:
    """Look up the word part at ``index``; other parts leave the state unchanged."""

    try:
        part = session.part_at(index)
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    # The text may be replaced while the lookup is pending; judge the clicked part.
    state = await session.lookup_part(index)
    return LookupStateResponse.from_session(session, superseded=part.is_word and state is None)


@router.post("/selection", response_model=SelectionResponse)
async def lookup_selection(
    payload: SelectionRequest, session: ReaderSession = Depends(get_session)
) -> SelectionResponse:
    """Resolve a selection and look up its term when it covers any words."""

    if payload.uses_offsets:
        resolution = session.resolve_offsets(payload.start_offset, payload.end_offset)
    else:
        resolution = session.resolve_selection(
            SelectionSpan(payload.start_index, payload.end_index)
        )
    if not resolution.triggers_lookup:
        return SelectionResponse(resolution=ResolutionPayload.from_resolution(resolution))

    state = await session.lookup_resolution(resolution)
    return SelectionResponse(
        resolution=ResolutionPayload.from_resolution(resolution),
        lookup=LookupStateResponse.from_session(session, superseded=state is None),
    )


@router.post("/lookup", response_model=LookupStateResponse)
async def lookup_term(
    payload: LookupRequest, session: ReaderSession = Depends(get_session)
) -> LookupStateResponse:
    term = payload.term.strip()
    if not term:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Term must not be blank"
        )
    state = await session.lookup_term(
        term,
        source_language=_parse_language(payload.source_language, "source language"),
        target_language=_parse_language(payload.target_language, "target language"),
    )
    return LookupStateResponse.from_session(session, superseded=state is None)


@router.get("/lookup", response_model=LookupStateResponse)
async def get_lookup(session: ReaderSession = Depends(get_session)) -> LookupStateResponse:
    return LookupStateResponse.from_session(session)


@router.delete("/lookup", response_model=LookupStateResponse)
async def close_lookup(session: ReaderSession = Depends(get_session)) -> LookupStateResponse:
    session.close_lookup()
    return LookupStateResponse.from_session(session)


@router.get("/lookup/audio")
async def get_lookup_audio(session: ReaderSession = Depends(get_session)) -> Response:
    """Return the pronunciation audio of the resolved lookup."""

    detail = session.lookup_state.detail
    if detail is None or not detail.audio_data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No audio available")
    return Response(content=detail.audio_data, media_type=session.audio_media_type)


@router.get("/vocabulary", response_model=VocabularyResponse)
async def list_vocabulary(session: ReaderSession = Depends(get_session)) -> VocabularyResponse:
    return VocabularyResponse(
        entries=[SavedEntryPayload.from_entry(entry) for entry in session.vocabulary.list()]
    )


@router.post("/vocabulary", response_model=SaveResponse)
async def save_current(session: ReaderSession = Depends(get_session)) -> SaveResponse:
    """Save the currently resolved lookup."""

    try:
        entry, created = session.save_current()
    except NothingToSaveError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return SaveResponse(saved=created, entry=SavedEntryPayload.from_entry(entry))


@router.delete("/vocabulary", response_model=RemoveResponse)
async def remove_saved(
    term: str = Query(..., min_length=1),
    source_language: str = Query(...),
    session: ReaderSession = Depends(get_session),
) -> RemoveResponse:
    language = _parse_language(source_language, "source language")
    return RemoveResponse(removed=session.remove_saved(term, language))


__all__ = ["router"]
