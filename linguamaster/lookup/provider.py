"""Lexical provider interface and its LLM + TTS backed implementation."""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from linguamaster import logging_manager as log_mgr
from linguamaster.audio.backends import BaseTTSBackend, get_tts_backend
from linguamaster.config import LinguaSettings, get_settings
from linguamaster.exceptions import ProviderError
from linguamaster.languages import Language, infer_language_from_script
from linguamaster.llm_client import LLMClient, create_client, make_chat_payload
from linguamaster.llm_json import parse_json_payload

from .prompts import DICTIONARY_SYSTEM_PROMPT, build_detection_prompt, build_term_details_prompt

logger = log_mgr.get_logger().getChild("lookup.provider")


def _is_json_object(text: str) -> bool:
    return isinstance(parse_json_payload(text), Mapping)


@runtime_checkable
class LexicalProvider(Protocol):
    """Asynchronous lexical knowledge and speech services used by lookups."""

    async def detect_language(self, text: str) -> Optional[Language]:
        """Return the language of ``text`` or ``None`` when unknown."""

    async def get_term_details(
        self, term: str, source_language: Language, target_language: Language
    ) -> Optional[Mapping[str, Any]]:
        """Return the raw details payload for ``term``.

        ``None`` means the provider answered with something unusable; a
        raised :class:`ProviderError` means the call itself failed.
        """

    async def synthesize_speech(self, term: str) -> Optional[bytes]:
        """Return encoded audio pronouncing ``term``, if available."""


class GenerativeLexicalProvider:
    """Provider backed by an Ollama-compatible chat model and a TTS backend."""

    def __init__(
        self,
        client: LLMClient,
        tts_backend: Optional[BaseTTSBackend] = None,
        *,
        max_attempts: int = 2,
        default_speech_lang: str = "en",
    ) -> None:
        self._client = client
        self._tts_backend = tts_backend
        self._max_attempts = max_attempts
        self._default_speech_lang = default_speech_lang

    @classmethod
    def from_settings(cls, settings: Optional[LinguaSettings] = None) -> "GenerativeLexicalProvider":
        resolved = settings or get_settings()
        return cls(
            create_client(resolved),
            get_tts_backend(resolved),
            max_attempts=resolved.llm_max_attempts,
            default_speech_lang=resolved.tts_default_lang,
        )

    @property
    def audio_media_type(self) -> str:
        if self._tts_backend is None:
            return "application/octet-stream"
        return self._tts_backend.media_type

    async def _chat(self, prompt: str):
        payload = make_chat_payload(
            prompt, model=self._client.model, system_prompt=DICTIONARY_SYSTEM_PROMPT
        )
        return await asyncio.to_thread(
            self._client.send_chat_request,
            payload,
            max_attempts=self._max_attempts,
            validator=_is_json_object,
        )

    async def detect_language(self, text: str) -> Optional[Language]:
        if not text.strip():
            return None
        response = await self._chat(build_detection_prompt(text))
        if response.error:
            logger.info("Language detection failed: %s", response.error)
            return None
        parsed = parse_json_payload(response.text)
        name = parsed.get("language") if isinstance(parsed, Mapping) else None
        language = Language.from_name(name if isinstance(name, str) else None)
        if language is None:
            logger.info("Language detection returned an unsupported answer: %r", name)
        return language

    async def get_term_details(
        self, term: str, source_language: Language, target_language: Language
    ) -> Optional[Mapping[str, Any]]:
        prompt = build_term_details_prompt(term, source_language, target_language)
        response = await self._chat(prompt)
        if response.error and not response.rejected:
            raise ProviderError(response.error)
        parsed = parse_json_payload(response.text)
        if not isinstance(parsed, Mapping):
            logger.warning("Term details reply for %r was not a JSON object", term)
            return None
        return parsed

    def speech_language_code(self, term: str) -> str:
        """Pick the speech language from the term's script."""

        language = infer_language_from_script(term)
        return language.code if language is not None else self._default_speech_lang

    async def synthesize_speech(self, term: str) -> Optional[bytes]:
        if self._tts_backend is None or not term.strip():
            return None
        lang_code = self.speech_language_code(term)
        audio = await asyncio.to_thread(self._tts_backend.synthesize, text=term, lang_code=lang_code)
        return audio or None

    def close(self) -> None:
        self._client.close()


__all__ = ["GenerativeLexicalProvider", "LexicalProvider"]
