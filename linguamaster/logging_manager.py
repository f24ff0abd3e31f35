"""JSON logging for linguamaster with context-variable enrichment.

Every component logs through a child of the ``linguamaster`` logger. Records
are written as one JSON document per line to a rotating file under
``LINGUA_LOG_DIR`` (``log/`` by default) and to stderr. Values bound with
:func:`log_context` (attempt ids, detection generations, the looked-up term)
are attached to every record emitted inside the block.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

LOGGER_NAME = "linguamaster"
PROJECT_DIR = Path(__file__).resolve().parent.parent
LOG_DIR = Path(os.environ.get("LINGUA_LOG_DIR") or PROJECT_DIR / "log")
LOG_FILE = LOG_DIR / "linguamaster.log"
LOG_MAX_BYTES = 2 * 1024 * 1024
LOG_BACKUP_COUNT = 3
DEFAULT_LOG_LEVEL = logging.INFO

# Attributes every LogRecord carries; anything else arrived through ``extra``
# or the context filter.
_STANDARD_RECORD_KEYS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}

_context: contextvars.ContextVar[Mapping[str, Any]] = contextvars.ContextVar(
    "linguamaster_log_context", default={}
)
_root_logger: Optional[logging.Logger] = None


class JSONLogFormatter(logging.Formatter):
    """Serialise records as single-line JSON documents.

    Names listed in ``fields`` are promoted to top-level keys; any other
    custom attribute is nested under ``"extra"``.
    """

    DEFAULT_FIELDS: Tuple[str, ...] = (
        "attempt_id",
        "generation",
        "term",
        "event",
        "duration_ms",
        "status",
    )

    def __init__(self, fields: Optional[Tuple[str, ...]] = None) -> None:
        super().__init__()
        self.fields = tuple(fields) if fields is not None else self.DEFAULT_FIELDS

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        document: Dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in self.fields:
            value = getattr(record, name, None)
            if value is not None:
                document[name] = value

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_KEYS and key not in self.fields
        }
        if extra:
            document["extra"] = extra
        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)
        return json.dumps(document, ensure_ascii=False, default=str)


class LogContextFilter(logging.Filter):
    """Copy the active :func:`log_context` values onto each record.

    Values passed explicitly through ``extra`` take precedence.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key, value in _context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def _build_handlers(level: int) -> List[logging.Handler]:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    formatter = JSONLogFormatter()
    # Filters sit on the handlers so records from child loggers are enriched.
    context_filter = LogContextFilter()
    handlers: List[logging.Handler] = [
        RotatingFileHandler(
            LOG_FILE, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        ),
        logging.StreamHandler(),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        handler.setLevel(level)
    return handlers


def setup_logging(log_level: int = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Create the ``linguamaster`` logger once; later calls only change its level."""

    global _root_logger
    if _root_logger is None:
        logger = logging.getLogger(LOGGER_NAME)
        logger.propagate = False
        for handler in _build_handlers(log_level):
            logger.addHandler(handler)
        _root_logger = logger
    configure_logging_level(log_level=log_level)
    return _root_logger


def get_logger() -> logging.Logger:
    """Return the package logger, configuring it on first use."""

    if _root_logger is None:
        return setup_logging()
    return _root_logger


def configure_logging_level(debug_enabled: bool = False, log_level: Optional[int] = None) -> int:
    """Set the level of the package logger and its handlers.

    An explicit ``log_level`` wins; otherwise ``debug_enabled`` selects
    DEBUG over the default INFO.
    """

    if log_level is None:
        log_level = logging.DEBUG if debug_enabled else DEFAULT_LOG_LEVEL
    logger = get_logger()
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)
    return log_level


def get_log_context() -> Dict[str, Any]:
    return dict(_context.get())


def push_log_context(**values: Any) -> contextvars.Token:
    """Bind ``values`` (``None`` entries skipped) and return a reset token."""

    merged = dict(_context.get())
    merged.update((key, value) for key, value in values.items() if value is not None)
    return _context.set(merged)


def pop_log_context(token: contextvars.Token) -> None:
    _context.reset(token)


@contextlib.contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Attach ``values`` to every record logged inside the block."""

    token = push_log_context(**values)
    try:
        yield
    finally:
        pop_log_context(token)


def clear_log_context() -> None:
    _context.set({})


__all__ = [
    "JSONLogFormatter",
    "LogContextFilter",
    "clear_log_context",
    "configure_logging_level",
    "get_log_context",
    "get_logger",
    "log_context",
    "pop_log_context",
    "push_log_context",
    "setup_logging",
]
