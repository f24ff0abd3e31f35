"""Blocking client for Ollama and OpenAI-compatible chat endpoints.

Failures never raise out of :meth:`LLMClient.send_chat_request`: transport
errors, HTTP errors and unusable bodies are retried and finally reported
through :attr:`LLMResponse.error`.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from linguamaster import logging_manager as log_mgr
from linguamaster.config import DEFAULT_MODEL, DEFAULT_OLLAMA_URL, LinguaSettings

logger = log_mgr.get_logger().getChild("llm_client")

TokenUsage = Dict[str, int]
Validator = Callable[[str], bool]

# Ollama reports *_count at the top level; OpenAI nests *_tokens under "usage".
_TOKEN_USAGE_KEYS = ("prompt_eval_count", "eval_count", "prompt_tokens", "completion_tokens")
_ERROR_BODY_PREVIEW = 300
VALIDATION_FAILED = "Validation failed"


@dataclass(frozen=True)
class ClientSettings:
    """Connection parameters for an :class:`LLMClient`."""

    model: str = DEFAULT_MODEL
    api_url: str = DEFAULT_OLLAMA_URL
    api_key: Optional[str] = None
    timeout_seconds: float = 45.0
    debug: bool = False

    @classmethod
    def from_settings(cls, settings: LinguaSettings) -> "ClientSettings":
        return cls(
            model=settings.llm_model,
            api_url=settings.llm_api_url,
            api_key=settings.api_key,
            timeout_seconds=settings.llm_timeout_seconds,
            debug=settings.debug,
        )

    def with_updates(self, **updates: Any) -> "ClientSettings":
        return replace(self, **updates)

    def auth_headers(self) -> Optional[Dict[str, str]]:
        if not self.api_key:
            return None
        return {"Authorization": f"Bearer {self.api_key}"}


@dataclass
class LLMResponse:
    """Outcome of a chat request; ``error`` is set when no usable reply arrived."""

    text: str
    status_code: int = 0
    token_usage: TokenUsage = field(default_factory=dict)
    raw: Optional[Any] = None
    error: Optional[str] = None
    # Set when the reply arrived but every attempt failed the validator.
    rejected: bool = False

    @classmethod
    def failed(cls, error: Optional[str], *, status_code: int = 0, raw: Any = None) -> "LLMResponse":
        return cls(text="", status_code=status_code, raw=raw, error=error)


def _token_usage(body: Mapping[str, Any]) -> TokenUsage:
    scopes: List[Mapping[str, Any]] = [body]
    nested = body.get("usage")
    if isinstance(nested, Mapping):
        scopes.append(nested)
    return {
        key: scope[key]
        for scope in scopes
        for key in _TOKEN_USAGE_KEYS
        if isinstance(scope.get(key), int)
    }


def _reply_text(body: Mapping[str, Any]) -> str:
    """Pull the assistant text from an Ollama chat, OpenAI or generate body."""

    message = body.get("message")
    if isinstance(message, Mapping) and isinstance(message.get("content"), str):
        return message["content"]
    choices = body.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], Mapping):
        content = (choices[0].get("message") or {}).get("content")
        if isinstance(content, str):
            return content
    generated = body.get("response")
    return generated if isinstance(generated, str) else ""


class LLMClient:
    """Issues non-streaming chat requests over a shared ``requests`` session."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._session = session or requests.Session()

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def model(self) -> str:
        return self._settings.model

    @property
    def api_url(self) -> str:
        return self._settings.api_url

    def _post_once(self, payload: Dict[str, Any], timeout: float) -> LLMResponse:
        if self._settings.debug:
            logger.debug(
                "POST %s %s", self.api_url, json.dumps(payload, ensure_ascii=False)
            )
        response = self._session.post(
            self.api_url,
            json=payload,
            headers=self._settings.auth_headers(),
            timeout=timeout,
        )
        status = response.status_code
        if status != 200:
            preview = (response.text or "")[:_ERROR_BODY_PREVIEW]
            reason = f"HTTP {status}: {preview}" if preview else f"HTTP {status}"
            return LLMResponse.failed(reason, status_code=status, raw=response.text)

        try:
            body = response.json()
        except ValueError as exc:
            return LLMResponse.failed(f"Invalid JSON response: {exc}", status_code=status, raw=response.text)
        if not isinstance(body, dict):
            return LLMResponse.failed("Unexpected response body", status_code=status, raw=body)

        usage = _token_usage(body)
        if usage and self._settings.debug:
            logger.debug("Token usage: %s", usage)
        return LLMResponse(text=_reply_text(body), status_code=status, token_usage=usage, raw=body)

    def send_chat_request(
        self,
        payload: Dict[str, Any],
        *,
        max_attempts: int = 2,
        timeout: Optional[float] = None,
        validator: Optional[Validator] = None,
        backoff_seconds: float = 1.0,
    ) -> LLMResponse:
        """Send ``payload`` up to ``max_attempts`` times.

        A reply counts only when it is non-empty and, if given, accepted by
        ``validator``. Waits ``backoff_seconds * attempt`` between tries. When
        the final attempt is a rejected reply, its text is kept and
        ``rejected`` is set so callers can tell it from a transport failure.
        """

        request = {"model": self.model, "stream": False, **payload}
        effective_timeout = timeout or self._settings.timeout_seconds
        failure: Optional[str] = None
        last_rejected: Optional[LLMResponse] = None

        for attempt in range(1, max_attempts + 1):
            last_rejected = None
            try:
                result = self._post_once(request, effective_timeout)
            except requests.exceptions.RequestException as exc:
                failure = str(exc) or type(exc).__name__
            else:
                if result.error:
                    failure = result.error
                elif not result.text.strip():
                    failure = "Empty response"
                elif validator is not None and not validator(result.text.strip()):
                    failure = VALIDATION_FAILED
                    last_rejected = result
                else:
                    return result
            logger.warning("LLM attempt %s/%s failed: %s", attempt, max_attempts, failure)
            if attempt < max_attempts:
                time.sleep(backoff_seconds * attempt)

        if last_rejected is not None:
            return replace(last_rejected, error=failure, rejected=True)
        return LLMResponse.failed(failure)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "LLMClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def make_chat_payload(
    prompt: str,
    *,
    model: Optional[str] = None,
    system_prompt: Optional[str] = None,
    json_format: bool = True,
) -> Dict[str, Any]:
    """Build a single-turn chat payload, asking for JSON output by default."""

    messages: List[Dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    payload: Dict[str, Any] = {"model": model or DEFAULT_MODEL, "messages": messages, "stream": False}
    if json_format:
        payload["format"] = "json"
    return payload


def create_client(
    settings: Optional[LinguaSettings] = None,
    *,
    session: Optional[requests.Session] = None,
    **overrides: Any,
) -> LLMClient:
    """Return an :class:`LLMClient` built from ``settings`` plus ``overrides``."""

    client_settings = ClientSettings.from_settings(settings) if settings is not None else ClientSettings()
    if overrides:
        client_settings = client_settings.with_updates(**overrides)
    return LLMClient(settings=client_settings, session=session)


__all__ = ["ClientSettings", "LLMClient", "LLMResponse", "create_client", "make_chat_payload"]
