"""Configuration access for linguamaster."""

from .constants import DEFAULT_CONFIG_PATH, DEFAULT_MODEL, DEFAULT_OLLAMA_URL
from .loader import get_settings, load_settings, reset_settings_cache, resolve_config_path
from .settings import EnvironmentOverrides, LinguaSettings

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_MODEL",
    "DEFAULT_OLLAMA_URL",
    "EnvironmentOverrides",
    "LinguaSettings",
    "get_settings",
    "load_settings",
    "reset_settings_cache",
    "resolve_config_path",
]
