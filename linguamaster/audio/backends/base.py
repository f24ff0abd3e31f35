"""Base interface for text-to-speech backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from linguamaster.exceptions import TTSBackendError


class BaseTTSBackend(ABC):
    """Abstract base class for concrete TTS backends.

    Implementations return encoded audio bytes and surface every operational
    failure as :class:`TTSBackendError` so callers can treat missing audio
    uniformly.
    """

    name: str = "base"
    media_type: str = "application/octet-stream"

    @abstractmethod
    def synthesize(self, *, text: str, lang_code: str) -> bytes:
        """Generate speech audio for ``text`` spoken in ``lang_code``."""


__all__ = ["BaseTTSBackend", "TTSBackendError"]
