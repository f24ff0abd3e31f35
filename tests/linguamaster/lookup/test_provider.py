from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List

import pytest

from linguamaster.audio.backends import BaseTTSBackend, TTSBackendError
from linguamaster.exceptions import ProviderError
from linguamaster.languages import Language
from linguamaster.llm_client import ClientSettings, LLMClient, LLMResponse
from linguamaster.lookup import GenerativeLexicalProvider, LexicalProvider

pytestmark = pytest.mark.lookup


class _FakeClient:
    def __init__(self, responses: List[LLMResponse], model: str = "fake-model") -> None:
        self.model = model
        self._responses = list(responses)
        self.payloads: List[Dict[str, Any]] = []
        self.validators: List[Any] = []
        self.closed = False

    def send_chat_request(self, payload, *, max_attempts=2, timeout=None, validator=None, backoff_seconds=1.0):
        self.payloads.append(payload)
        self.validators.append(validator)
        return self._responses.pop(0)

    def close(self) -> None:
        self.closed = True


class _RecordingBackend(BaseTTSBackend):
    name = "recording"
    media_type = "audio/mpeg"

    def __init__(self, audio: bytes = b"mp3", error: Exception | None = None) -> None:
        self.audio = audio
        self.error = error
        self.calls: List[tuple] = []

    def synthesize(self, *, text: str, lang_code: str) -> bytes:
        self.calls.append((text, lang_code))
        if self.error is not None:
            raise self.error
        return self.audio


def _ok(content: Any) -> LLMResponse:
    text = content if isinstance(content, str) else json.dumps(content)
    return LLMResponse(text=text, status_code=200, token_usage={})


def _failed(error: str) -> LLMResponse:
    return LLMResponse(text="", status_code=0, token_usage={}, error=error)


def test_provider_satisfies_protocol() -> None:
    provider = GenerativeLexicalProvider(_FakeClient([]))

    assert isinstance(provider, LexicalProvider)


def test_term_details_returns_parsed_mapping() -> None:
    payload = {"definition": "cat", "exampleSentences": ["A cat."], "translation": "gato"}
    client = _FakeClient([_ok("```json\n" + json.dumps(payload) + "\n```")])
    provider = GenerativeLexicalProvider(client)

    result = asyncio.run(provider.get_term_details("cat", Language.ENGLISH, Language.SPANISH))

    assert result == payload
    prompt = client.payloads[0]["messages"][-1]["content"]
    assert "translation of the term to Spanish" in prompt
    assert client.payloads[0]["format"] == "json"
    assert client.payloads[0]["model"] == "fake-model"


def test_term_details_prompt_omits_translation_for_same_language() -> None:
    client = _FakeClient([_ok({"definition": "cat", "exampleSentences": []})])
    provider = GenerativeLexicalProvider(client)

    asyncio.run(provider.get_term_details("cat", Language.ENGLISH, Language.ENGLISH))

    prompt = client.payloads[0]["messages"][-1]["content"]
    assert "translation" not in prompt


def test_term_details_transport_error_raises() -> None:
    provider = GenerativeLexicalProvider(_FakeClient([_failed("HTTP 503: busy")]))

    with pytest.raises(ProviderError, match="HTTP 503"):
        asyncio.run(provider.get_term_details("cat", Language.ENGLISH, Language.SPANISH))


def test_term_details_non_json_returns_none() -> None:
    provider = GenerativeLexicalProvider(_FakeClient([_ok("I am not JSON at all")]))

    assert asyncio.run(provider.get_term_details("cat", Language.ENGLISH, Language.SPANISH)) is None


class _ScriptedSession:
    """``requests.Session`` stand-in answering with chat bodies in order."""

    class _Reply:
        status_code = 200
        text = ""

        def __init__(self, content: str) -> None:
            self._content = content

        def json(self) -> Dict[str, Any]:
            return {"message": {"content": self._content}}

    def __init__(self, contents: List[str]) -> None:
        self._contents = list(contents)
        self.calls = 0

    def post(self, url, *, json=None, headers=None, timeout=None):
        self.calls += 1
        return self._Reply(self._contents.pop(0))

    def close(self) -> None:
        pass


def _live_provider(contents: List[str], max_attempts: int = 2):
    session = _ScriptedSession(contents)
    client = LLMClient(ClientSettings(model="fake-model"), session=session)
    provider = GenerativeLexicalProvider(client, max_attempts=max_attempts)
    return provider, session


def test_chat_requests_carry_json_object_validator() -> None:
    client = _FakeClient([_ok({"language": "Spanish"})])
    provider = GenerativeLexicalProvider(client)

    asyncio.run(provider.detect_language("hola amigo"))

    (validator,) = client.validators
    assert validator('{"language": "Spanish"}') is True
    assert validator("Spanish, probably.") is False
    assert validator("[1, 2]") is False


def test_term_details_retries_after_non_json_reply(monkeypatch) -> None:
    monkeypatch.setattr("linguamaster.llm_client.time.sleep", lambda _: None)
    provider, session = _live_provider(
        ["Sorry, let me think about that.", json.dumps({"definition": "cat"})]
    )

    result = asyncio.run(provider.get_term_details("cat", Language.ENGLISH, Language.SPANISH))

    assert result == {"definition": "cat"}
    assert session.calls == 2


def test_term_details_non_json_after_all_attempts_is_malformed(monkeypatch) -> None:
    monkeypatch.setattr("linguamaster.llm_client.time.sleep", lambda _: None)
    provider, session = _live_provider(["not json", "still not json"])

    result = asyncio.run(provider.get_term_details("cat", Language.ENGLISH, Language.SPANISH))

    assert result is None
    assert session.calls == 2


@pytest.mark.parametrize(
    ("response", "expected"),
    [
        (_ok({"language": "Spanish"}), Language.SPANISH),
        (_ok({"language": " hebrew "}), Language.HEBREW),
        (_ok({"language": "Klingon"}), None),
        (_ok({"lang": "French"}), None),
        (_ok("French"), None),
        (_failed("timeout"), None),
    ],
)
def test_detect_language(response: LLMResponse, expected) -> None:
    provider = GenerativeLexicalProvider(_FakeClient([response]))

    assert asyncio.run(provider.detect_language("hola amigo")) is expected


def test_detect_language_skips_blank_text() -> None:
    client = _FakeClient([])
    provider = GenerativeLexicalProvider(client)

    assert asyncio.run(provider.detect_language("  ")) is None
    assert client.payloads == []


def test_speech_uses_script_language() -> None:
    backend = _RecordingBackend()
    provider = GenerativeLexicalProvider(_FakeClient([]), backend, default_speech_lang="es")

    assert asyncio.run(provider.synthesize_speech("שלום")) == b"mp3"
    assert asyncio.run(provider.synthesize_speech("hola")) == b"mp3"
    assert backend.calls == [("שלום", "iw"), ("hola", "es")]


def test_speech_backend_errors_propagate() -> None:
    backend = _RecordingBackend(error=TTSBackendError("offline"))
    provider = GenerativeLexicalProvider(_FakeClient([]), backend)

    with pytest.raises(TTSBackendError):
        asyncio.run(provider.synthesize_speech("cat"))


def test_speech_without_backend_returns_none() -> None:
    provider = GenerativeLexicalProvider(_FakeClient([]))

    assert asyncio.run(provider.synthesize_speech("cat")) is None
    assert provider.audio_media_type == "application/octet-stream"


def test_close_releases_client() -> None:
    client = _FakeClient([])
    GenerativeLexicalProvider(client).close()

    assert client.closed
