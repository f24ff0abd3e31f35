"""Settings loader combining the YAML config file with environment overrides."""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

import yaml

from .constants import CONFIG_FILE_ENV, DEFAULT_CONFIG_PATH
from .settings import EnvironmentOverrides, LinguaSettings


def resolve_config_path(path: Optional[Path | str] = None) -> Path:
    """Return the config file path, honoring ``LINGUA_CONFIG_FILE``."""

    if path:
        return Path(path).expanduser()
    override = os.environ.get(CONFIG_FILE_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def _read_config_file(config_path: Path) -> MutableMapping[str, Any]:
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw_data = yaml.safe_load(handle) or {}
    except FileNotFoundError:
        return {}
    if not isinstance(raw_data, Mapping):
        raise ValueError(f"{config_path} must contain a mapping of settings")
    return dict(raw_data)


def _normalise_payload(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    known = LinguaSettings.model_fields
    return {key: value for key, value in data.items() if key in known}


def load_settings(
    path: Optional[Path | str] = None,
    *,
    apply_environment: bool = True,
    overrides: Optional[Mapping[str, Any]] = None,
) -> LinguaSettings:
    """Load and validate settings.

    Precedence, lowest first: defaults, the YAML file, environment variables,
    then explicit ``overrides``. Invalid values raise :class:`ValueError`.
    """

    payload = _normalise_payload(_read_config_file(resolve_config_path(path)))
    if apply_environment:
        payload.update(EnvironmentOverrides().as_overrides())
    if overrides:
        payload.update(_normalise_payload(overrides))
    return LinguaSettings.model_validate(payload)


@lru_cache(maxsize=1)
def get_settings() -> LinguaSettings:
    """Return the cached application settings."""

    return load_settings()


def reset_settings_cache() -> None:
    """Forget cached settings so the next :func:`get_settings` reloads them."""

    get_settings.cache_clear()


__all__ = ["get_settings", "load_settings", "reset_settings_cache", "resolve_config_path"]
