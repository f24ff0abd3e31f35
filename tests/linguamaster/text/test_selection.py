from __future__ import annotations

import pytest

from linguamaster.text import (
    NO_SELECTION,
    OffsetSelectionMapper,
    ResolutionKind,
    SelectionMapper,
    SelectionSpan,
    resolve,
    span_from_endpoints,
    span_from_offsets,
    tokenize,
)

pytestmark = pytest.mark.text

# the(0) ' '(1) quick(2) ' '(3) fox(4)
PARTS = tokenize("the quick fox")


class TestResolve:
    """Resolution of part-index spans."""

    @pytest.mark.parametrize(("index", "term"), [(0, "the"), (2, "quick"), (4, "fox")])
    def test_single_word(self, index: int, term: str) -> None:
        resolution = resolve(SelectionSpan(index, index), PARTS)

        assert resolution.kind is ResolutionKind.SINGLE_WORD
        assert resolution.term == term
        assert [part.index for part in resolution.parts] == [index]
        assert resolution.triggers_lookup

    def test_reversed_span_is_normalized(self) -> None:
        resolution = resolve(SelectionSpan(4, 0), PARTS)

        assert resolution.kind is ResolutionKind.PHRASE
        assert [part.index for part in resolution.parts] == [0, 2, 4]
        assert resolution.term == "the quick fox"

    def test_whitespace_only(self) -> None:
        resolution = resolve(SelectionSpan(1, 1), PARTS)

        assert resolution.kind is ResolutionKind.NON_WORD_SELECTION
        assert resolution.term is None
        assert not resolution.triggers_lookup

    def test_out_of_range_endpoint(self) -> None:
        assert resolve(SelectionSpan(0, 99), PARTS) is NO_SELECTION
        assert resolve(SelectionSpan(-1, 2), PARTS) is NO_SELECTION

    def test_unmapped_or_missing_span(self) -> None:
        assert resolve(None, PARTS) is NO_SELECTION
        assert resolve(SelectionSpan(None, 2), PARTS) is NO_SELECTION

    def test_phrase_keeps_original_case(self) -> None:
        parts = tokenize("New York, baby")
        resolution = resolve(SelectionSpan(0, 2), parts)

        assert resolution.kind is ResolutionKind.PHRASE
        assert resolution.term == "New York"

    def test_single_word_term_is_lowercased(self) -> None:
        parts = tokenize("Paris!")

        assert resolve(SelectionSpan(0, 1), parts).term == "paris"

    def test_punctuation_between_words_is_dropped_from_phrase(self) -> None:
        parts = tokenize("well, then")
        resolution = resolve(SelectionSpan(0, 3), parts)

        assert resolution.term == "well then"

    def test_to_dict(self) -> None:
        assert resolve(SelectionSpan(0, 2), PARTS).to_dict() == {
            "kind": "phrase",
            "term": "the quick",
            "part_indices": [0, 2],
        }


class TestOffsetMapping:
    """Character-offset selections mapped onto parts."""

    def test_mapper_satisfies_protocol(self) -> None:
        assert isinstance(OffsetSelectionMapper(PARTS), SelectionMapper)

    def test_offsets_map_to_enclosing_parts(self) -> None:
        mapper = OffsetSelectionMapper(PARTS)

        assert mapper.part_index_for(0) == 0
        assert mapper.part_index_for(3) == 1
        assert mapper.part_index_for(6) == 2
        assert mapper.part_index_for(12) == 4
        assert mapper.part_index_for(13) is None
        assert mapper.part_index_for(-1) is None
        assert mapper.part_index_for("4") is None
        assert mapper.part_index_for(True) is None

    def test_partial_word_drag_selects_whole_words(self) -> None:
        span = span_from_offsets(PARTS, 1, 7)

        assert span == SelectionSpan(0, 2)
        assert resolve(span, PARTS).term == "the quick"

    def test_backwards_drag(self) -> None:
        span = span_from_offsets(PARTS, 13, 10)

        assert resolve(span, PARTS).term == "fox"

    def test_collapsed_range_has_no_span(self) -> None:
        assert span_from_offsets(PARTS, 5, 5) is None

    def test_range_past_end_is_unmapped(self) -> None:
        span = span_from_offsets(PARTS, 2, 40)

        assert span is not None and span.end_index is None
        assert resolve(span, PARTS) is NO_SELECTION

    def test_custom_mapper(self) -> None:
        class ById:
            def part_index_for(self, endpoint):
                return {"a": 0, "b": 4}.get(endpoint)

        assert span_from_endpoints(ById(), "b", "a") == SelectionSpan(4, 0)
        assert span_from_endpoints(ById(), "a", "zzz").end_index is None
