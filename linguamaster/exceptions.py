"""Exception hierarchy for lookup providers and speech backends."""

from __future__ import annotations


class LinguaMasterError(RuntimeError):
    """Base exception raised by linguamaster components."""


class ProviderError(LinguaMasterError):
    """Raised when a lexical provider call fails (transport, HTTP or timeout)."""


class MalformedResponseError(LinguaMasterError):
    """Raised when a provider payload fails structural validation."""

    def __init__(self, message: str, *, payload: object = None) -> None:
        super().__init__(message)
        self.payload = payload


class TTSBackendError(LinguaMasterError):
    """Raised when a speech backend fails to synthesize audio."""


class NothingToSaveError(LinguaMasterError):
    """Raised when saving is requested without a resolved lookup."""


__all__ = [
    "LinguaMasterError",
    "MalformedResponseError",
    "NothingToSaveError",
    "ProviderError",
    "TTSBackendError",
]
