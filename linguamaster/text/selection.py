"""Map a user's selection back onto tokenized text parts.

A selection arrives as two endpoints. A :class:`SelectionMapper` turns each
endpoint into the index of the part it falls in; :func:`resolve` then turns
the resulting :class:`SelectionSpan` into a :class:`PhraseResolution`.
Resolution never raises: every input, including empty or out-of-range ones,
yields a classification.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .tokenizer import TextPart, part_offsets


class ResolutionKind(str, Enum):
    """Outcome classes for a resolved selection."""

    NO_SELECTION = "no_selection"
    NON_WORD_SELECTION = "non_word_selection"
    SINGLE_WORD = "single_word"
    PHRASE = "phrase"


@dataclass(frozen=True, slots=True)
class SelectionSpan:
    """Part indices of the two selection endpoints, in capture order.

    ``None`` marks an endpoint that could not be mapped to a part.
    """

    start_index: Optional[int]
    end_index: Optional[int]

    @property
    def is_mapped(self) -> bool:
        return self.start_index is not None and self.end_index is not None

    def normalized(self) -> Tuple[int, int]:
        if not self.is_mapped:
            raise ValueError("Cannot normalize a span with an unmapped endpoint")
        return min(self.start_index, self.end_index), max(self.start_index, self.end_index)


@dataclass(frozen=True, slots=True)
class PhraseResolution:
    """Word parts covered by a selection, classified by how many there are."""

    kind: ResolutionKind
    parts: Tuple[TextPart, ...] = ()

    @property
    def triggers_lookup(self) -> bool:
        return self.kind in (ResolutionKind.SINGLE_WORD, ResolutionKind.PHRASE)

    @property
    def term(self) -> Optional[str]:
        """Lookup term for this selection, or ``None`` when nothing is selected.

        A single word uses its normalized key; a phrase joins the raw word
        texts with single spaces and keeps their case.
        """

        if self.kind is ResolutionKind.SINGLE_WORD:
            return self.parts[0].normalized_key
        if self.kind is ResolutionKind.PHRASE:
            return " ".join(part.raw_text for part in self.parts)
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "term": self.term,
            "part_indices": [part.index for part in self.parts],
        }


NO_SELECTION = PhraseResolution(ResolutionKind.NO_SELECTION)
NON_WORD_SELECTION = PhraseResolution(ResolutionKind.NON_WORD_SELECTION)


def resolve(span: Optional[SelectionSpan], parts: Sequence[TextPart]) -> PhraseResolution:
    """Classify the word parts covered by ``span`` (inclusive on both ends)."""

    if span is None or not span.is_mapped:
        return NO_SELECTION
    start, end = span.normalized()
    if start < 0 or end >= len(parts):
        return NO_SELECTION

    selected = tuple(part for part in parts[start : end + 1] if part.is_word)
    if not selected:
        return NON_WORD_SELECTION
    if len(selected) == 1:
        return PhraseResolution(ResolutionKind.SINGLE_WORD, selected)
    return PhraseResolution(ResolutionKind.PHRASE, selected)


@runtime_checkable
class SelectionMapper(Protocol):
    """Adapter translating host selection endpoints into part indices."""

    def part_index_for(self, endpoint: Any) -> Optional[int]:
        """Return the index of the part enclosing ``endpoint``, or ``None``."""


def span_from_endpoints(mapper: SelectionMapper, start: Any, end: Any) -> SelectionSpan:
    """Build a span by mapping both endpoints through ``mapper``."""

    return SelectionSpan(mapper.part_index_for(start), mapper.part_index_for(end))


class OffsetSelectionMapper:
    """Map character offsets in the tokenized source text to part indices."""

    def __init__(self, parts: Sequence[TextPart]) -> None:
        self._parts = tuple(parts)
        self._offsets = part_offsets(self._parts)
        self._length = sum(len(part.raw_text) for part in self._parts)

    @property
    def text_length(self) -> int:
        return self._length

    def part_index_for(self, endpoint: Any) -> Optional[int]:
        if isinstance(endpoint, bool) or not isinstance(endpoint, int):
            return None
        if endpoint < 0 or endpoint >= self._length:
            return None
        return bisect_right(self._offsets, endpoint) - 1


def span_from_offsets(
    parts: Sequence[TextPart], start_offset: int, end_offset: int
) -> Optional[SelectionSpan]:
    """Map a half-open character range ``[start, end)`` onto a span.

    The endpoints may arrive in either order. A collapsed range (no
    characters selected) yields ``None``.
    """

    low, high = min(start_offset, end_offset), max(start_offset, end_offset)
    if low == high:
        return None
    mapper = OffsetSelectionMapper(parts)
    return span_from_endpoints(mapper, low, high - 1)


__all__ = [
    "NON_WORD_SELECTION",
    "NO_SELECTION",
    "OffsetSelectionMapper",
    "PhraseResolution",
    "ResolutionKind",
    "SelectionMapper",
    "SelectionSpan",
    "resolve",
    "span_from_endpoints",
    "span_from_offsets",
]
