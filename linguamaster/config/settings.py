"""Pydantic models describing runtime configuration values."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from linguamaster.languages import (
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    Language,
)

from .constants import (
    DEFAULT_DETECTION_QUIET_PERIOD_SECONDS,
    DEFAULT_LLM_MAX_ATTEMPTS,
    DEFAULT_LLM_TIMEOUT_SECONDS,
    DEFAULT_MODEL,
    DEFAULT_OLLAMA_URL,
    DEFAULT_PROVIDER_TIMEOUT_SECONDS,
    DEFAULT_TTS_BACKEND,
    DEFAULT_TTS_LANG,
)


class LinguaSettings(BaseModel):
    """Typed representation of the application configuration."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    llm_model: str = DEFAULT_MODEL
    llm_api_url: str = DEFAULT_OLLAMA_URL
    llm_api_key: Optional[SecretStr] = None
    llm_timeout_seconds: float = Field(default=DEFAULT_LLM_TIMEOUT_SECONDS, gt=0)
    llm_max_attempts: int = Field(default=DEFAULT_LLM_MAX_ATTEMPTS, ge=1)
    default_source_language: Language = DEFAULT_SOURCE_LANGUAGE
    default_target_language: Language = DEFAULT_TARGET_LANGUAGE
    detection_quiet_period_seconds: float = Field(
        default=DEFAULT_DETECTION_QUIET_PERIOD_SECONDS, ge=0
    )
    provider_timeout_seconds: Optional[float] = Field(
        default=DEFAULT_PROVIDER_TIMEOUT_SECONDS, gt=0
    )
    tts_backend: str = DEFAULT_TTS_BACKEND
    tts_default_lang: str = DEFAULT_TTS_LANG
    debug: bool = False

    @field_validator("default_source_language", "default_target_language", mode="before")
    @classmethod
    def _coerce_language(cls, value: Any) -> Any:
        if isinstance(value, Language):
            return value
        language = Language.from_name(value)
        if language is None:
            raise ValueError(f"unsupported language: {value!r}")
        return language

    @field_validator("tts_backend", "llm_model", "llm_api_url")
    @classmethod
    def _require_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must be a non-empty string")
        return stripped

    @property
    def api_key(self) -> Optional[str]:
        if self.llm_api_key is None:
            return None
        return self.llm_api_key.get_secret_value() or None

    def to_public_dict(self) -> Dict[str, Any]:
        """Return settings without secrets, suitable for logging or API output."""

        payload = self.model_dump(mode="json", exclude={"llm_api_key"})
        payload["llm_api_key_configured"] = self.llm_api_key is not None
        return payload


class EnvironmentOverrides(BaseSettings):
    """Configuration overrides sourced from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    llm_model: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LINGUA_LLM_MODEL", "OLLAMA_MODEL")
    )
    llm_api_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LINGUA_LLM_API_URL", "OLLAMA_URL")
    )
    llm_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LINGUA_LLM_API_KEY", "OLLAMA_API_KEY")
    )
    llm_timeout_seconds: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("LINGUA_LLM_TIMEOUT_SECONDS")
    )
    default_source_language: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LINGUA_DEFAULT_SOURCE_LANGUAGE")
    )
    default_target_language: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LINGUA_DEFAULT_TARGET_LANGUAGE")
    )
    detection_quiet_period_seconds: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("LINGUA_DETECTION_QUIET_PERIOD_SECONDS")
    )
    provider_timeout_seconds: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("LINGUA_PROVIDER_TIMEOUT_SECONDS")
    )
    tts_backend: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LINGUA_TTS_BACKEND")
    )
    debug: Optional[bool] = Field(default=None, validation_alias=AliasChoices("LINGUA_DEBUG"))

    def as_overrides(self) -> Dict[str, Any]:
        return {key: value for key, value in self.model_dump().items() if value is not None}


__all__ = ["EnvironmentOverrides", "LinguaSettings"]
