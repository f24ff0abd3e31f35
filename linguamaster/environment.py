"""Apply ``.env`` files to the process environment before settings are read."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import dotenv_values

ENV_FILE_VAR = "LINGUA_ENV_FILE"
ENV_NAME_VAR = "LINGUA_ENV"
PROJECT_ROOT = Path(__file__).resolve().parents[1]

_applied_files: Optional[Tuple[Path, ...]] = None


def candidate_env_files(root: Optional[Path] = None) -> List[Path]:
    """Return the existing dotenv files, highest precedence first.

    Paths listed in ``LINGUA_ENV_FILE`` (``os.pathsep`` separated) come first,
    followed by ``.env``, ``.env.<LINGUA_ENV>`` and ``.env.local`` in ``root``.
    """

    base = root or PROJECT_ROOT
    explicit = os.environ.get(ENV_FILE_VAR, "")
    paths = [Path(item.strip()).expanduser() for item in explicit.split(os.pathsep) if item.strip()]

    names = [".env"]
    env_name = os.environ.get(ENV_NAME_VAR, "").strip()
    if env_name:
        names.append(f".env.{env_name}")
    names.append(".env.local")
    paths.extend(base / name for name in names)

    existing: List[Path] = []
    for path in paths:
        resolved = path.resolve()
        if resolved.is_file() and resolved not in existing:
            existing.append(resolved)
    return existing


def load_environment(*, force: bool = False, root: Optional[Path] = None) -> Tuple[Path, ...]:
    """Copy dotenv values into ``os.environ`` without replacing set variables.

    Earlier files win over later ones. The list of applied files is cached;
    pass ``force=True`` to read them again.
    """

    global _applied_files
    if _applied_files is not None and not force:
        return _applied_files

    applied: List[Path] = []
    for path in candidate_env_files(root):
        for key, value in dotenv_values(path).items():
            if value is not None and key not in os.environ:
                os.environ[key] = value
        applied.append(path)
    _applied_files = tuple(applied)
    return _applied_files


__all__ = ["candidate_env_files", "load_environment"]
