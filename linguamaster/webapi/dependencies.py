"""Dependency helpers for the reader API."""

from __future__ import annotations

from fastapi import Request

from linguamaster.config import LinguaSettings, get_settings
from linguamaster.lookup.provider import GenerativeLexicalProvider, LexicalProvider
from linguamaster.session import ReaderSession


def get_app_settings() -> LinguaSettings:
    return get_settings()


def build_provider(settings: LinguaSettings) -> LexicalProvider:
    """Create the default LLM + TTS backed provider."""

    return GenerativeLexicalProvider.from_settings(settings)


def get_session(request: Request) -> ReaderSession:
    """Return the application's reader session, creating it on first use."""

    state = request.app.state
    session = getattr(state, "reader_session", None)
    if session is None:
        settings = get_app_settings()
        session = ReaderSession(build_provider(settings), settings=settings)
        state.reader_session = session
    return session


__all__ = ["build_provider", "get_app_settings", "get_session"]
