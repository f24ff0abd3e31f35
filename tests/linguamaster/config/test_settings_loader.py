from __future__ import annotations

from pathlib import Path

import pytest

from linguamaster.config import LinguaSettings, get_settings, load_settings, resolve_config_path
from linguamaster.languages import Language

pytestmark = pytest.mark.config

_ENV_VARS = (
    "LINGUA_CONFIG_FILE",
    "LINGUA_LLM_MODEL",
    "OLLAMA_MODEL",
    "LINGUA_LLM_API_URL",
    "OLLAMA_URL",
    "LINGUA_LLM_API_KEY",
    "OLLAMA_API_KEY",
    "LINGUA_LLM_TIMEOUT_SECONDS",
    "LINGUA_DEFAULT_SOURCE_LANGUAGE",
    "LINGUA_DEFAULT_TARGET_LANGUAGE",
    "LINGUA_DETECTION_QUIET_PERIOD_SECONDS",
    "LINGUA_PROVIDER_TIMEOUT_SECONDS",
    "LINGUA_TTS_BACKEND",
    "LINGUA_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "linguamaster.yaml"
    path.write_text(body, encoding="utf-8")
    return path


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "absent.yaml")

    assert settings.default_source_language is Language.ENGLISH
    assert settings.detection_quiet_period_seconds == 0.5
    assert settings.provider_timeout_seconds == 60
    assert settings.tts_backend == "gtts"


def test_yaml_values_are_applied_and_unknown_keys_ignored(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "default_source_language: spanish\n"
        "default_target_language: Hebrew\n"
        "provider_timeout_seconds: null\n"
        "llm_model: llama3\n"
        "unrelated_key: 1\n",
    )

    settings = load_settings(path)

    assert settings.default_source_language is Language.SPANISH
    assert settings.default_target_language is Language.HEBREW
    assert settings.provider_timeout_seconds is None
    assert settings.llm_model == "llama3"


def test_environment_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path, "llm_model: llama3\ndetection_quiet_period_seconds: 2\n")
    monkeypatch.setenv("LINGUA_LLM_MODEL", "mistral")
    monkeypatch.setenv("LINGUA_DETECTION_QUIET_PERIOD_SECONDS", "0.25")
    monkeypatch.setenv("OLLAMA_API_KEY", "secret-token")

    settings = load_settings(path)

    assert settings.llm_model == "mistral"
    assert settings.detection_quiet_period_seconds == 0.25
    assert settings.api_key == "secret-token"
    assert "secret-token" not in repr(settings)
    public = settings.to_public_dict()
    assert "llm_api_key" not in public
    assert public["llm_api_key_configured"] is True


def test_environment_can_be_skipped(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINGUA_LLM_MODEL", "mistral")

    settings = load_settings(tmp_path / "absent.yaml", apply_environment=False)

    assert settings.llm_model != "mistral"


def test_explicit_overrides_win(tmp_path: Path) -> None:
    settings = load_settings(
        tmp_path / "absent.yaml", overrides={"default_target_language": "German", "bogus": True}
    )

    assert settings.default_target_language is Language.GERMAN


@pytest.mark.parametrize(
    "body",
    [
        "default_source_language: Elvish\n",
        "provider_timeout_seconds: -1\n",
        "llm_max_attempts: 0\n",
        "tts_backend: '  '\n",
    ],
)
def test_invalid_values_raise_value_error(tmp_path: Path, body: str) -> None:
    with pytest.raises(ValueError):
        load_settings(_write(tmp_path, body))


def test_non_mapping_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_settings(_write(tmp_path, "- just\n- a list\n"))


def test_config_path_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path, "default_target_language: Korean\n")
    monkeypatch.setenv("LINGUA_CONFIG_FILE", str(path))

    assert resolve_config_path() == path
    assert get_settings().default_target_language is Language.KOREAN
    assert get_settings() is get_settings()


def test_settings_are_frozen() -> None:
    settings = LinguaSettings()

    with pytest.raises(ValueError):
        settings.llm_model = "other"  # type: ignore[misc]
