"""Registry and helpers for TTS backends."""

from __future__ import annotations

from typing import MutableMapping, Optional, Type

from linguamaster.config import LinguaSettings, get_settings

from .base import BaseTTSBackend, TTSBackendError
from .gtts import GTTSBackend

_BACKENDS: MutableMapping[str, Type[BaseTTSBackend]] = {
    GTTSBackend.name: GTTSBackend,
}

_BACKEND_ALIASES = {
    "google": GTTSBackend.name,
    "gtts": GTTSBackend.name,
}


def register_backend(name: str, backend_cls: Type[BaseTTSBackend]) -> None:
    """Register ``backend_cls`` under ``name``."""

    _BACKENDS[name.strip().lower()] = backend_cls


def _resolve_backend_name(name: str) -> str:
    normalized = name.strip().lower()
    if not normalized or normalized == "auto":
        return GTTSBackend.name
    return _BACKEND_ALIASES.get(normalized, normalized)


def create_backend(name: str) -> BaseTTSBackend:
    """Instantiate the backend registered as ``name``."""

    key = _resolve_backend_name(name)
    backend_cls = _BACKENDS.get(key)
    if backend_cls is None:
        raise KeyError(f"Unknown TTS backend: {name}")
    return backend_cls()


def get_tts_backend(settings: Optional[LinguaSettings] = None) -> BaseTTSBackend:
    """Return the backend selected by ``settings`` (or the loaded settings)."""

    resolved = settings or get_settings()
    return create_backend(resolved.tts_backend)


__all__ = [
    "BaseTTSBackend",
    "GTTSBackend",
    "TTSBackendError",
    "create_backend",
    "get_tts_backend",
    "register_backend",
]
