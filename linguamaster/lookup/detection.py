"""Debounced source-language detection."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Set

from linguamaster import logging_manager as log_mgr
from linguamaster.config.constants import DEFAULT_DETECTION_QUIET_PERIOD_SECONDS
from linguamaster.languages import Language

logger = log_mgr.get_logger().getChild("lookup.detection")

DetectFn = Callable[[str], Awaitable[Optional[Language]]]


@dataclass(frozen=True, slots=True)
class DetectionState:
    """Result of the most recent detection generation."""

    detected_language: Optional[Language] = None
    is_detecting: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detected_language": (
                self.detected_language.value if self.detected_language is not None else None
            ),
            "is_detecting": self.is_detecting,
        }


class LanguageDetectorDebouncer:
    """Run language detection once the text has been stable for a quiet period.

    Each text change starts a new generation and replaces the pending timer.
    Only the latest generation may update :attr:`state`; detections that
    finish after a newer change are ignored. Detection errors are logged and
    reported as "no language detected".
    """

    def __init__(
        self,
        detect: DetectFn,
        *,
        quiet_period: float = DEFAULT_DETECTION_QUIET_PERIOD_SECONDS,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        if quiet_period < 0:
            raise ValueError("quiet_period must be non-negative")
        self._detect = detect
        self._quiet_period = quiet_period
        self._timeout_seconds = timeout_seconds
        self._generation = 0
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self._state = DetectionState()

    @property
    def state(self) -> DetectionState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def has_pending_schedule(self) -> bool:
        return self._handle is not None

    def effective_language(self, default: Language) -> Language:
        return self._state.detected_language or default

    def _cancel_schedule(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def on_text_changed(self, text: str) -> None:
        """Register a text change; must be called from a running event loop
        unless ``text`` is blank."""

        self._cancel_schedule()
        self._generation += 1
        if not text.strip():
            self._state = DetectionState()
            return
        self._state = DetectionState(self._state.detected_language, False)
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._quiet_period, self._fire, self._generation, text)

    def _fire(self, generation: int, text: str) -> None:
        self._handle = None
        if generation != self._generation:
            return
        self._state = DetectionState(self._state.detected_language, True)
        task = asyncio.ensure_future(self._run(generation, text))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, generation: int, text: str) -> None:
        with log_mgr.log_context(generation=generation):
            try:
                pending = self._detect(text)
                if self._timeout_seconds is not None:
                    pending = asyncio.wait_for(pending, self._timeout_seconds)
                language = await pending
            except Exception as exc:  # detection is best-effort
                logger.info("Language detection failed: %s", exc)
                language = None

            if generation != self._generation:
                logger.debug("Ignoring stale language detection", extra={"event": "detect.stale"})
                return
            self._state = DetectionState(language, False)
            logger.debug(
                "Detected language %s",
                language.value if language is not None else None,
                extra={"event": "detect.complete"},
            )

    async def wait_idle(self) -> None:
        """Wait for detections that have already started."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel the pending schedule and invalidate in-flight detections."""

        self._cancel_schedule()
        self._generation += 1
        if self._state.is_detecting:
            self._state = DetectionState(self._state.detected_language, False)


__all__ = ["DetectFn", "DetectionState", "LanguageDetectorDebouncer"]
