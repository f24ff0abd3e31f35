"""Coordinates term lookups against a lexical provider.

Every call to :meth:`LookupCoordinator.lookup` starts a new attempt. The
term-details request and the speech request are scheduled together and
awaited together; their outcomes are merged into a single visible
:class:`~linguamaster.lookup.models.LookupState`. Attempts are never
cancelled: when a newer attempt (or a reset) happens while an older one is
still in flight, the older result is simply discarded once it settles.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Optional

from linguamaster import logging_manager as log_mgr
from linguamaster.config.constants import DEFAULT_PROVIDER_TIMEOUT_SECONDS
from linguamaster.exceptions import MalformedResponseError
from linguamaster.languages import Language

from .merge import merge_term_details
from .models import FailureReason, LookupKey, LookupState
from .provider import LexicalProvider

logger = log_mgr.get_logger().getChild("lookup.coordinator")


class LookupCoordinator:
    """Track the active lookup attempt and expose its visible state."""

    def __init__(
        self,
        provider: LexicalProvider,
        *,
        timeout_seconds: Optional[float] = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
    ) -> None:
        self._provider = provider
        self._timeout_seconds = timeout_seconds
        self._attempt_id = 0
        self._state = LookupState.idle()

    @property
    def state(self) -> LookupState:
        return self._state

    @property
    def active_key(self) -> Optional[LookupKey]:
        return self._state.key

    @property
    def attempt_id(self) -> int:
        return self._attempt_id

    def reset(self) -> None:
        """Return to idle and invalidate any in-flight attempt."""

        self._attempt_id += 1
        self._state = LookupState.idle()

    def _bounded(self, awaitable: Awaitable[Any]) -> Awaitable[Any]:
        if self._timeout_seconds is None:
            return awaitable
        return asyncio.wait_for(awaitable, self._timeout_seconds)

    async def lookup(
        self,
        term: str,
        source_language: Language,
        target_language: Language,
    ) -> Optional[LookupState]:
        """Run one lookup attempt.

        Returns the visible state produced by this attempt, or ``None`` when
        the attempt was superseded before it settled.
        """

        if not term or not term.strip():
            raise ValueError("term must not be empty")

        key = LookupKey(term, source_language, target_language)
        self._attempt_id += 1
        attempt_id = self._attempt_id
        self._state = LookupState.pending(key)

        with log_mgr.log_context(attempt_id=attempt_id, term=term):
            logger.debug(
                "Lookup started (%s -> %s)",
                source_language.value,
                target_language.value,
                extra={"event": "lookup.start"},
            )
            started = time.perf_counter()
            details_task = asyncio.ensure_future(
                self._bounded(
                    self._provider.get_term_details(term, source_language, target_language)
                )
            )
            audio_task = asyncio.ensure_future(
                self._bounded(self._provider.synthesize_speech(term))
            )
            details_result, audio_result = await asyncio.gather(
                details_task, audio_task, return_exceptions=True
            )
            duration_ms = round((time.perf_counter() - started) * 1000, 2)

            if attempt_id != self._attempt_id:
                logger.debug(
                    "Discarding superseded lookup result",
                    extra={"event": "lookup.superseded", "duration_ms": duration_ms},
                )
                return None

            state = self._settle(key, details_result, audio_result)
            self._state = state
            logger.info(
                "Lookup finished",
                extra={
                    "event": "lookup.complete",
                    "status": state.status.value,
                    "duration_ms": duration_ms,
                },
            )
            return state

    def _settle(self, key: LookupKey, details_result: Any, audio_result: Any) -> LookupState:
        if isinstance(details_result, BaseException):
            logger.warning(
                "Term details request failed: %s",
                details_result.__class__.__name__,
                exc_info=details_result,
            )
            return LookupState.failed(key, FailureReason.PROVIDER_ERROR)

        audio_data: Optional[bytes] = None
        if isinstance(audio_result, BaseException):
            logger.info(
                "Speech synthesis failed, continuing without audio: %s",
                audio_result,
            )
        elif isinstance(audio_result, (bytes, bytearray)):
            audio_data = bytes(audio_result) or None

        try:
            detail = merge_term_details(
                details_result,
                audio_data,
                source_language=key.source_language,
                target_language=key.target_language,
            )
        except MalformedResponseError as exc:
            logger.warning("Term details response was malformed: %s", exc)
            return LookupState.failed(key, FailureReason.MALFORMED_RESPONSE)
        return LookupState.resolved(key, detail)


__all__ = ["LookupCoordinator"]
