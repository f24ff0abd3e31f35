from __future__ import annotations

import pytest

from linguamaster.languages import Language
from linguamaster.lookup import WordDetail
from linguamaster.vocabulary import SavedEntry, VocabularyStore

DETAIL = WordDetail(definition="a feline", example_sentences=("A cat sat.",), audio_data=b"mp3")


def _entry(term: str, source: Language = Language.ENGLISH, target: Language = Language.SPANISH) -> SavedEntry:
    return SavedEntry(term, source, target, DETAIL)


def test_save_is_idempotent_per_term_and_source_language() -> None:
    store = VocabularyStore()

    assert store.save(_entry("cat"))
    assert not store.save(_entry("cat"))
    assert not store.save(_entry("cat", target=Language.FRENCH))
    assert len(store) == 1
    assert store.get("cat", Language.ENGLISH).target_language is Language.SPANISH


def test_same_term_in_other_source_language_is_separate() -> None:
    store = VocabularyStore()
    store.save(_entry("gift", Language.ENGLISH))
    store.save(_entry("gift", Language.GERMAN))

    assert len(store) == 2
    assert store.contains("gift", Language.GERMAN)


def test_list_keeps_insertion_order() -> None:
    store = VocabularyStore()
    for term in ("zebra", "apple", "mango"):
        store.save(_entry(term))

    assert [entry.term for entry in store.list()] == ["zebra", "apple", "mango"]


def test_remove() -> None:
    store = VocabularyStore()
    store.save(_entry("cat"))

    assert store.remove("cat", Language.ENGLISH)
    assert not store.remove("cat", Language.ENGLISH)
    assert not store.contains("cat", Language.ENGLISH)
    assert store.get("cat", Language.ENGLISH) is None


def test_entries_serialize_with_base64_audio() -> None:
    entry = SavedEntry("cat", Language.ENGLISH, Language.SPANISH, DETAIL, saved_at=1700000000.0)

    payload = entry.to_dict()

    assert payload["source_language"] == "English"
    assert payload["details"]["audio_base64"] == "bXAz"
    assert SavedEntry.from_dict(payload) == entry


def test_from_dict_rejects_unknown_language() -> None:
    payload = _entry("cat").to_dict()
    payload["source_language"] = "Elvish"

    with pytest.raises(ValueError):
        SavedEntry.from_dict(payload)
