"""Tests for best-segment selection."""

from __future__ import annotations

from querysuggest.search.models import MatchedSegment, TaggedTerm
from querysuggest.search.segments import select_best


def test_select_best_returns_none_without_terms() -> None:
    assert select_best({}) is None
    assert select_best({MatchedSegment("sales "): []}) is None


def test_select_best_prefers_longest_segment() -> None:
    groups = {
        MatchedSegment("sales revenue "): [TaggedTerm("region", ("_1_21_dimension",))],
        MatchedSegment("sales "): [TaggedTerm("revenue", ("_1_11_metric",))],
        MatchedSegment("sales revenue by the "): [],
    }

    segment, terms = select_best(groups)

    assert segment.query_substring == "sales revenue "
    assert terms == (TaggedTerm("region", ("_1_21_dimension",)),)


def test_select_best_tie_goes_to_later_group() -> None:
    groups = {
        MatchedSegment("abc"): [TaggedTerm("first", ("_1_11_metric",))],
        MatchedSegment("xyz"): [TaggedTerm("second", ("_1_12_metric",))],
    }

    segment, terms = select_best(groups)

    assert segment.query_substring == "xyz"
    assert terms[0].text == "second"


def test_select_best_measures_detect_segment_when_present() -> None:
    groups = {
        MatchedSegment("sales revenue by ", detect_segment="re"): [TaggedTerm("region", ("_1_21_dimension",))],
        MatchedSegment("sales ", detect_segment="revenue by re"): [TaggedTerm("revenue", ("_1_11_metric",))],
    }

    segment, _ = select_best(groups)

    assert segment.query_substring == "sales "
