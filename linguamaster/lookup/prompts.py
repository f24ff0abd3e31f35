"""Prompt builders for language detection and term lookups."""

from __future__ import annotations

from linguamaster.languages import SUPPORTED_LANGUAGES, Language

SOURCE_START = "<<<BEGIN_SOURCE_TEXT>>>"
SOURCE_END = "<<<END_SOURCE_TEXT>>>"

DICTIONARY_SYSTEM_PROMPT = "\n".join(
    [
        "You are LinguaMaster, a concise dictionary assistant.",
        "Always answer with a single JSON object and nothing else.",
        "Never include markdown fences, commentary or the source-text markers.",
    ]
)


def wrap_source_text(text: str) -> str:
    return f"{SOURCE_START}\n{text}\n{SOURCE_END}"


def build_detection_prompt(text: str) -> str:
    """Ask for the language of ``text`` as ``{"language": "<name>"}``."""

    names = ", ".join(language.value for language in SUPPORTED_LANGUAGES)
    return "\n".join(
        [
            "Detect the language of the text between the markers below.",
            f"Respond with the English name of the language, one of: {names}.",
            'Return JSON in this exact format: {"language": "<name>"}',
            "",
            wrap_source_text(text),
        ]
    )


def build_term_details_prompt(
    term: str, source_language: Language, target_language: Language
) -> str:
    """Ask for the details of ``term``.

    The translation request and the ``translation`` key are only included
    when the two languages differ.
    """

    source = source_language.value
    wants_translation = source_language != target_language
    lines = [
        f"Provide the following details for the term between the markers, written in {source}:",
        "1. A concise definition.",
        "2. Phonetic pronunciation (if applicable).",
        f"3. Three example sentences using the term in {source}.",
        "4. Its part of speech (for a phrase, the primary type).",
        f"5. Two related words or phrases (synonyms or antonyms) in {source}.",
    ]
    if wants_translation:
        lines.append(f"6. A translation of the term to {target_language.value}.")

    schema_lines = [
        "{",
        '  "definition": "string (required)",',
        '  "pronunciation": "string or null",',
        '  "exampleSentences": ["string", "..."],',
        '  "partOfSpeech": "string or null",',
        '  "relatedWords": ["string", "..."]' + ("," if wants_translation else ""),
    ]
    if wants_translation:
        schema_lines.append('  "translation": "string"')
    schema_lines.append("}")

    lines.extend(
        [
            "",
            "Return JSON in this exact format (definition and exampleSentences are required):",
            *schema_lines,
            "",
            wrap_source_text(term),
        ]
    )
    return "\n".join(lines)


__all__ = [
    "DICTIONARY_SYSTEM_PROMPT",
    "SOURCE_END",
    "SOURCE_START",
    "build_detection_prompt",
    "build_term_details_prompt",
    "wrap_source_text",
]
