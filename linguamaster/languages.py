"""Supported languages and the script heuristics shared by lookups and speech."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import regex


class Language(str, Enum):
    """Languages offered for detection, lookup and translation."""

    ENGLISH = "English"
    SPANISH = "Spanish"
    FRENCH = "French"
    GERMAN = "German"
    ITALIAN = "Italian"
    PORTUGUESE = "Portuguese"
    HEBREW = "Hebrew"
    ARABIC = "Arabic"
    CHINESE = "Chinese"
    JAPANESE = "Japanese"
    KOREAN = "Korean"
    RUSSIAN = "Russian"
    HINDI = "Hindi"

    @classmethod
    def from_name(cls, raw: Optional[str]) -> Optional["Language"]:
        """Return the language named ``raw`` (case-insensitive), or ``None``."""

        if not isinstance(raw, str):
            return None
        normalized = raw.strip().lower()
        if not normalized:
            return None
        return _LANGUAGES_BY_NAME.get(normalized)

    @property
    def is_rtl(self) -> bool:
        return self in RTL_LANGUAGES

    @property
    def code(self) -> str:
        """Return the ISO-ish code used by speech backends."""

        return LANGUAGE_CODES[self]


_LANGUAGES_BY_NAME = {language.value.lower(): language for language in Language}

SUPPORTED_LANGUAGES: tuple[Language, ...] = tuple(Language)
RTL_LANGUAGES = frozenset({Language.HEBREW, Language.ARABIC})
DEFAULT_SOURCE_LANGUAGE = Language.ENGLISH
DEFAULT_TARGET_LANGUAGE = Language.ENGLISH

LANGUAGE_CODES: dict[Language, str] = {
    Language.ENGLISH: "en",
    Language.SPANISH: "es",
    Language.FRENCH: "fr",
    Language.GERMAN: "de",
    Language.ITALIAN: "it",
    Language.PORTUGUESE: "pt",
    Language.HEBREW: "iw",
    Language.ARABIC: "ar",
    Language.CHINESE: "zh-CN",
    Language.JAPANESE: "ja",
    Language.KOREAN: "ko",
    Language.RUSSIAN: "ru",
    Language.HINDI: "hi",
}


@dataclass(frozen=True)
class ScriptHint:
    """A writing system that identifies a language on its own."""

    language: Language
    script_pattern: regex.Pattern


# Kana is checked before Han so Japanese text with kanji is not read as Chinese.
_SCRIPT_HINTS: tuple[ScriptHint, ...] = (
    ScriptHint(Language.HEBREW, regex.compile(r"\p{Script=Hebrew}")),
    ScriptHint(Language.ARABIC, regex.compile(r"\p{Script=Arabic}")),
    ScriptHint(Language.JAPANESE, regex.compile(r"[\p{Script=Hiragana}\p{Script=Katakana}]")),
    ScriptHint(Language.KOREAN, regex.compile(r"\p{Script=Hangul}")),
    ScriptHint(Language.CHINESE, regex.compile(r"\p{Script=Han}")),
    ScriptHint(Language.RUSSIAN, regex.compile(r"\p{Script=Cyrillic}")),
    ScriptHint(Language.HINDI, regex.compile(r"\p{Script=Devanagari}")),
)


def infer_language_from_script(text: str) -> Optional[Language]:
    """Guess a language from the writing system used in ``text``.

    Only scripts that map to a single supported language are considered;
    Latin-script text returns ``None``.
    """

    if not text:
        return None
    for hint in _SCRIPT_HINTS:
        if hint.script_pattern.search(text):
            return hint.language
    return None


__all__ = [
    "DEFAULT_SOURCE_LANGUAGE",
    "DEFAULT_TARGET_LANGUAGE",
    "LANGUAGE_CODES",
    "Language",
    "RTL_LANGUAGES",
    "SUPPORTED_LANGUAGES",
    "infer_language_from_script",
]
