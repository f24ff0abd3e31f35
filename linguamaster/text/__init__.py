"""Text segmentation and selection resolution."""

from .selection import (
    NO_SELECTION,
    NON_WORD_SELECTION,
    OffsetSelectionMapper,
    PhraseResolution,
    ResolutionKind,
    SelectionMapper,
    SelectionSpan,
    resolve,
    span_from_endpoints,
    span_from_offsets,
)
from .tokenizer import (
    PartKind,
    TextPart,
    normalize_key,
    part_offsets,
    reconstruct,
    tokenize,
    word_parts,
)

__all__ = [
    "NO_SELECTION",
    "NON_WORD_SELECTION",
    "OffsetSelectionMapper",
    "PartKind",
    "PhraseResolution",
    "ResolutionKind",
    "SelectionMapper",
    "SelectionSpan",
    "TextPart",
    "normalize_key",
    "part_offsets",
    "reconstruct",
    "resolve",
    "span_from_endpoints",
    "span_from_offsets",
    "tokenize",
    "word_parts",
]
