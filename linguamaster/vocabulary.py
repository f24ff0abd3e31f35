"""In-memory store of saved lookup results."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from linguamaster import logging_manager as log_mgr
from linguamaster.languages import Language
from linguamaster.lookup.models import WordDetail

logger = log_mgr.get_logger().getChild("vocabulary")

EntryKey = Tuple[str, Language]


@dataclass(frozen=True, slots=True)
class SavedEntry:
    """A looked-up term the user chose to keep."""

    term: str
    source_language: Language
    target_language: Language
    details: WordDetail
    saved_at: float = field(default_factory=time.time)

    @property
    def key(self) -> EntryKey:
        return (self.term, self.source_language)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "term": self.term,
            "source_language": self.source_language.value,
            "target_language": self.target_language.value,
            "details": self.details.to_dict(include_audio=True),
            "saved_at": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedEntry":
        source = Language.from_name(data.get("source_language"))
        target = Language.from_name(data.get("target_language"))
        if source is None or target is None:
            raise ValueError("Saved entry has unsupported languages")
        return cls(
            term=str(data["term"]),
            source_language=source,
            target_language=target,
            details=WordDetail.from_dict(data.get("details") or {}),
            saved_at=float(data.get("saved_at") or time.time()),
        )


class VocabularyStore:
    """Saved entries keyed by ``(term, source_language)`` in insertion order.

    The target language is not part of the identity: saving the same term
    from the same source language twice keeps only the first entry.
    """

    def __init__(self) -> None:
        self._entries: Dict[EntryKey, SavedEntry] = {}

    def save(self, entry: SavedEntry) -> bool:
        """Insert ``entry`` unless its key is already present."""

        if entry.key in self._entries:
            logger.debug("Term %r already saved", entry.term)
            return False
        self._entries[entry.key] = entry
        return True

    def remove(self, term: str, source_language: Language) -> bool:
        return self._entries.pop((term, source_language), None) is not None

    def contains(self, term: str, source_language: Language) -> bool:
        return (term, source_language) in self._entries

    def get(self, term: str, source_language: Language) -> Optional[SavedEntry]:
        return self._entries.get((term, source_language))

    def list(self) -> List[SavedEntry]:
        return list(self._entries.values())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SavedEntry]:
        return iter(list(self._entries.values()))

    def to_dict(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries.values()]


__all__ = ["EntryKey", "SavedEntry", "VocabularyStore"]
