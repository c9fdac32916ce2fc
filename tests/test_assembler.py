"""Tests for merging suggestion sets."""

from __future__ import annotations

from querysuggest.search.assembler import OrderedSuggestionSet, assemble
from querysuggest.search.models import ElementKind, SuggestionResult


def _result(text: str, *, kind: ElementKind | None = ElementKind.METRIC, complete: bool = True) -> SuggestionResult:
    return SuggestionResult(
        dataset_id=1,
        dataset_name="Sales",
        recommend_text=text,
        sub_recommend_text=text,
        kind=kind,
        is_complete=complete,
    )


def test_ordered_set_keeps_first_occurrence() -> None:
    results = OrderedSuggestionSet([_result("a"), _result("b"), _result("a")])
    assert [item.recommend_text for item in results] == ["a", "b"]
    assert len(results) == 2
    assert _result("b") in results


def test_assemble_dedups_across_aggregators() -> None:
    merged = assemble([_result("revenue")], [(_result("revenue"), _result("north", kind=ElementKind.DIMENSION_VALUE))])
    assert [item.recommend_text for item in merged] == ["revenue", "north"]


def test_assemble_distinguishes_any_differing_field() -> None:
    merged = assemble([_result("north", kind=None, complete=False)], [(_result("north", kind=None),)])
    assert len(merged) == 2


def test_assemble_truncates_to_budget() -> None:
    many = [_result(f"metric {index}") for index in range(25)]
    assert len(assemble(many)) == 10
    assert len(assemble(many[:4], [many[4:8]], result_size=3)) == 3
