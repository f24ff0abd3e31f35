"""Split raw text into indexed word, whitespace and punctuation parts.

Every maximal run of Unicode letters/numbers becomes a word, every maximal
run of whitespace becomes a whitespace part, and every maximal run of
anything else becomes punctuation. The parts cover the input exactly, so
joining their ``raw_text`` values reproduces the original string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

import regex

# Alternation order matters only for readability; the three classes are disjoint.
_PART_PATTERN = regex.compile(r"([\p{L}\p{N}]+)|(\s+)|([^\p{L}\p{N}\s]+)")


class PartKind(str, Enum):
    """Classification of a tokenized text part."""

    WORD = "word"
    WHITESPACE = "whitespace"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True, slots=True)
class TextPart:
    """One classified fragment of tokenized text.

    ``index`` is the part's position in the sequence produced by a single
    :func:`tokenize` call and is meaningless against any other sequence.
    """

    kind: PartKind
    raw_text: str
    index: int
    normalized_key: Optional[str] = None

    @property
    def is_word(self) -> bool:
        return self.kind is PartKind.WORD

    @property
    def part_id(self) -> str:
        """Identifier used by renderers to address this part."""

        if self.kind is PartKind.WORD:
            return f"word-{self.index}-{self.normalized_key}"
        if self.kind is PartKind.WHITESPACE:
            return f"ws-{self.index}"
        return f"punct-{self.index}"

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.part_id,
            "index": self.index,
            "kind": self.kind.value,
            "raw_text": self.raw_text,
            "normalized_key": self.normalized_key,
        }


def normalize_key(word: str) -> str:
    """Return the lookup key for a single word."""

    return word.lower()


def tokenize(text: str) -> Tuple[TextPart, ...]:
    """Partition ``text`` into an ordered tuple of :class:`TextPart` objects."""

    if not text:
        return ()

    parts: List[TextPart] = []
    for match in _PART_PATTERN.finditer(text):
        value = match.group(0)
        index = len(parts)
        if match.group(1) is not None:
            parts.append(
                TextPart(PartKind.WORD, value, index, normalized_key=normalize_key(value))
            )
        elif match.group(2) is not None:
            parts.append(TextPart(PartKind.WHITESPACE, value, index))
        else:
            parts.append(TextPart(PartKind.PUNCTUATION, value, index))
    return tuple(parts)


def reconstruct(parts: Iterable[TextPart]) -> str:
    """Join the raw text of ``parts`` back into a string."""

    return "".join(part.raw_text for part in parts)


def word_parts(parts: Iterable[TextPart]) -> List[TextPart]:
    """Return only the word parts, preserving order."""

    return [part for part in parts if part.is_word]


def part_offsets(parts: Sequence[TextPart]) -> List[int]:
    """Return the character offset at which each part starts."""

    offsets: List[int] = []
    position = 0
    for part in parts:
        offsets.append(position)
        position += len(part.raw_text)
    return offsets


__all__ = [
    "PartKind",
    "TextPart",
    "normalize_key",
    "part_offsets",
    "reconstruct",
    "tokenize",
    "word_parts",
]
