"""Shared constants for the configuration package."""
from __future__ import annotations

import os
from pathlib import Path

MODULE_DIR = Path(__file__).resolve().parent
PROJECT_DIR = MODULE_DIR.parent.parent.resolve()
CONF_DIR = PROJECT_DIR / "conf"
DEFAULT_CONFIG_PATH = CONF_DIR / "linguamaster.yaml"
CONFIG_FILE_ENV = "LINGUA_CONFIG_FILE"

DEFAULT_OLLAMA_URL = os.environ.get("OLLAMA_URL", "http://localhost:11434/api/chat")
DEFAULT_MODEL = "gemma3:12b"
DEFAULT_LLM_TIMEOUT_SECONDS = 45.0
DEFAULT_LLM_MAX_ATTEMPTS = 2
DEFAULT_DETECTION_QUIET_PERIOD_SECONDS = 0.5
DEFAULT_PROVIDER_TIMEOUT_SECONDS = 60.0
DEFAULT_TTS_BACKEND = "gtts"
DEFAULT_TTS_LANG = "en"

__all__ = [
    "CONFIG_FILE_ENV",
    "CONF_DIR",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_DETECTION_QUIET_PERIOD_SECONDS",
    "DEFAULT_LLM_MAX_ATTEMPTS",
    "DEFAULT_LLM_TIMEOUT_SECONDS",
    "DEFAULT_MODEL",
    "DEFAULT_OLLAMA_URL",
    "DEFAULT_PROVIDER_TIMEOUT_SECONDS",
    "DEFAULT_TTS_BACKEND",
    "DEFAULT_TTS_LANG",
    "MODULE_DIR",
    "PROJECT_DIR",
]
