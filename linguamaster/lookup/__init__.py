"""Term lookup: provider interface, coordinator, merge and language detection."""

from .coordinator import LookupCoordinator
from .detection import DetectionState, LanguageDetectorDebouncer
from .merge import TermDetailsPayload, merge_term_details, validate_term_details
from .models import (
    FAILURE_MESSAGES,
    FailureReason,
    LookupKey,
    LookupState,
    LookupStatus,
    WordDetail,
)
from .provider import GenerativeLexicalProvider, LexicalProvider

__all__ = [
    "DetectionState",
    "FAILURE_MESSAGES",
    "FailureReason",
    "GenerativeLexicalProvider",
    "LanguageDetectorDebouncer",
    "LexicalProvider",
    "LookupCoordinator",
    "LookupKey",
    "LookupState",
    "LookupStatus",
    "TermDetailsPayload",
    "WordDetail",
    "merge_term_details",
    "validate_term_details",
]
