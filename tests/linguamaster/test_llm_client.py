from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests

from linguamaster.config import LinguaSettings
from linguamaster.llm_client import ClientSettings, LLMClient, create_client, make_chat_payload
from linguamaster.llm_json import parse_json_payload

pytestmark = pytest.mark.lookup


class _FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self) -> Any:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class _FakeSession:
    def __init__(self, outcomes: List[Any]) -> None:
        self._outcomes = list(outcomes)
        self.requests: List[Dict[str, Any]] = []
        self.closed = False

    def post(self, url, *, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


def _client(outcomes: List[Any], **settings: Any) -> tuple[LLMClient, _FakeSession]:
    session = _FakeSession(outcomes)
    return LLMClient(ClientSettings(**settings), session=session), session


def test_ollama_message_content_is_extracted() -> None:
    client, session = _client(
        [_FakeResponse(body={"message": {"content": '{"ok": true}'}, "eval_count": 7})],
        api_url="http://llm.local/api/chat",
        model="tiny",
    )

    response = client.send_chat_request({"messages": []}, backoff_seconds=0)

    assert response.error is None
    assert response.text == '{"ok": true}'
    assert response.token_usage == {"eval_count": 7}
    sent = session.requests[0]
    assert sent["url"] == "http://llm.local/api/chat"
    assert sent["json"]["model"] == "tiny"
    assert sent["json"]["stream"] is False
    assert sent["headers"] is None


def test_openai_style_choices_are_supported() -> None:
    client, _ = _client(
        [_FakeResponse(body={"choices": [{"message": {"content": "hi"}}], "usage": {"prompt_tokens": 3}})]
    )

    response = client.send_chat_request({"messages": []}, backoff_seconds=0)

    assert response.text == "hi"
    assert response.token_usage == {"prompt_tokens": 3}


def test_api_key_is_sent_as_bearer_token() -> None:
    client, session = _client([_FakeResponse(body={"response": "x"})], api_key="abc")

    client.send_chat_request({"messages": []}, backoff_seconds=0)

    assert session.requests[0]["headers"] == {"Authorization": "Bearer abc"}


def test_transient_failures_are_retried() -> None:
    client, session = _client(
        [
            requests.exceptions.ConnectionError("refused"),
            _FakeResponse(body={"message": {"content": "done"}}),
        ]
    )

    response = client.send_chat_request({"messages": []}, max_attempts=2, backoff_seconds=0)

    assert response.text == "done"
    assert len(session.requests) == 2


def test_http_error_is_reported_after_last_attempt() -> None:
    client, session = _client(
        [_FakeResponse(status_code=500, text="boom"), _FakeResponse(status_code=500, text="boom")]
    )

    response = client.send_chat_request({"messages": []}, max_attempts=2, backoff_seconds=0)

    assert response.error == "HTTP 500: boom"
    assert response.text == ""
    assert len(session.requests) == 2


def test_invalid_json_body_is_an_error() -> None:
    client, _ = _client([_FakeResponse(body=ValueError("bad json"), text="<html>")])

    response = client.send_chat_request({"messages": []}, max_attempts=1)

    assert response.error is not None
    assert "Invalid JSON" in response.error


def test_validator_rejection_triggers_retry() -> None:
    client, session = _client(
        [
            _FakeResponse(body={"response": "nope"}),
            _FakeResponse(body={"response": "{}"}),
        ]
    )

    response = client.send_chat_request(
        {"messages": []},
        max_attempts=2,
        validator=lambda text: text.startswith("{"),
        backoff_seconds=0,
    )

    assert response.text == "{}"
    assert len(session.requests) == 2


def test_rejected_final_reply_keeps_its_text() -> None:
    client, _ = _client([_FakeResponse(body={"response": "nope"}), _FakeResponse(body={"response": "nah"})])

    response = client.send_chat_request(
        {"messages": []}, max_attempts=2, validator=lambda text: False, backoff_seconds=0
    )

    assert response.rejected is True
    assert response.error == "Validation failed"
    assert response.text == "nah"


def test_transport_failure_after_rejection_is_not_marked_rejected() -> None:
    client, _ = _client(
        [_FakeResponse(body={"response": "nope"}), requests.exceptions.Timeout("slow")]
    )

    response = client.send_chat_request(
        {"messages": []}, max_attempts=2, validator=lambda text: False, backoff_seconds=0
    )

    assert response.rejected is False
    assert response.error == "slow"
    assert response.text == ""


def test_explicit_timeout_overrides_default() -> None:
    client, session = _client([_FakeResponse(body={"response": "x"})], timeout_seconds=12.0)

    client.send_chat_request({"messages": []}, timeout=3.0)

    assert session.requests[0]["timeout"] == 3.0


def test_create_client_reads_settings() -> None:
    settings = LinguaSettings(llm_model="phi3", llm_api_url="http://x/api/chat", llm_api_key="k")
    session = _FakeSession([])

    client = create_client(settings, session=session, timeout_seconds=5.0)
    client.close()

    assert client.model == "phi3"
    assert client.api_url == "http://x/api/chat"
    assert client.settings.api_key == "k"
    assert client.settings.timeout_seconds == 5.0
    assert session.closed


def test_make_chat_payload() -> None:
    payload = make_chat_payload("hello", model="m", system_prompt="sys")

    assert payload["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "hello"},
    ]
    assert payload["format"] == "json"
    assert "format" not in make_chat_payload("hello", json_format=False)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('{"a": 1}', {"a": 1}),
        ('```json\n{"a": 1}\n```', {"a": 1}),
        ('Sure! Here it is: {"a": [1, 2]} Hope that helps.', {"a": [1, 2]}),
        ("no json here", None),
        ("", None),
    ],
)
def test_parse_json_payload(text: str, expected: Any) -> None:
    assert parse_json_payload(text) == expected
