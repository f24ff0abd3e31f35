"""gTTS backend implementation."""

from __future__ import annotations

import io

from gtts import gTTS
from gtts.tts import gTTSError

from .base import BaseTTSBackend, TTSBackendError


class GTTSBackend(BaseTTSBackend):
    """Backend using the Google Text-to-Speech API; produces MP3 bytes."""

    name = "gtts"
    media_type = "audio/mpeg"

    def synthesize(self, *, text: str, lang_code: str) -> bytes:
        buffer = io.BytesIO()
        try:
            gTTS(text=text, lang=lang_code).write_to_fp(buffer)
        except (gTTSError, ValueError, AssertionError) as exc:
            raise TTSBackendError(f"gTTS synthesis failed for lang {lang_code!r}") from exc
        audio = buffer.getvalue()
        if not audio:
            raise TTSBackendError("gTTS returned no audio")
        return audio


__all__ = ["GTTSBackend"]
