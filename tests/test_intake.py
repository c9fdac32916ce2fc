"""Tests for the dictionary tagger, prefix strategy and context store."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from querysuggest.intake import (
    DictionaryTagger,
    InMemoryContextStore,
    PrefixMatchStrategy,
    build_dictionary,
    tokenize,
)
from querysuggest.search import SearchRequest, SearchService
from querysuggest.search.models import ElementKind, MatchedSegment, TaggedTerm
from querysuggest.search.nature import classify
from querysuggest.semantic import SemanticSchema, load_semantic_schema


@pytest.fixture()
def schema(tmp_path: Path) -> SemanticSchema:
    schema_path = tmp_path / "schema.yaml"
    schema_path.write_text(
        dedent(
            """
            datasets:
              sales:
                id: 1
                metrics:
                  revenue:
                    id: 11
                    use_count: 50
                  active_users:
                    id: 12
                    synonyms: [active buyers]
                dimensions:
                  region:
                    id: 21
                    values: [north, south]
                entities:
                  customer:
                    id: 31
              support:
                id: 2
                metrics:
                  revenue:
                    id: 41
            """
        ).strip(),
        encoding="utf-8",
    )
    return load_semantic_schema(schema_path)


def test_tokenize_keeps_order() -> None:
    assert tokenize("Sales, Revenue by REGION!") == ("sales", "revenue", "by", "region")


def test_dictionary_natures_decode_to_expected_kinds(schema: SemanticSchema) -> None:
    dictionary = build_dictionary(schema)

    assert dictionary["revenue"] == ("_1_11_metric", "_2_41_metric")
    assert dictionary["active users"] == ("_1_12_metric",)
    assert dictionary["north"] == ("_1_21",)
    kinds = {classify(nature)[1] for natures in dictionary.values() for nature in natures}
    assert kinds == set(ElementKind)


def test_tagger_prefers_longest_phrase(schema: SemanticSchema) -> None:
    tagger = DictionaryTagger(schema)

    terms = tagger.tag("Active users in the north region", set())

    assert [term.text for term in terms] == ["active_users", "north", "region"]
    assert terms[1].natures == ("_1_21",)


def test_tagger_restricts_natures_to_hint(schema: SemanticSchema) -> None:
    tagger = DictionaryTagger(schema)

    assert tagger.tag("revenue", {2}) == [TaggedTerm("revenue", ("_2_41_metric",))]
    assert tagger.tag("north", {2}) == []


def test_complete_returns_prefix_matches_shortest_first(schema: SemanticSchema) -> None:
    tagger = DictionaryTagger(schema)

    assert [term.text for term in tagger.complete("re", set())] == ["region", "revenue"]
    assert [term.text for term in tagger.complete("active", set())] == ["active_users", "active buyers"]
    assert tagger.complete("   ", set()) == []


def test_prefix_strategy_groups_by_offset(schema: SemanticSchema) -> None:
    tagger = DictionaryTagger(schema)
    strategy = PrefixMatchStrategy(tagger)
    query = "sales revenue by nor"

    groups = strategy.match(tagger.tag(query, set()), set(), query)

    assert list(groups) == [
        MatchedSegment("", detect_segment="sales revenue by nor"),
        MatchedSegment("sales ", detect_segment="revenue by nor"),
        MatchedSegment("sales revenue by ", detect_segment="nor"),
    ]
    assert groups[MatchedSegment("sales revenue by ", detect_segment="nor")] == [
        TaggedTerm("north", ("_1_21",))
    ]
    assert groups[MatchedSegment("sales ", detect_segment="revenue by nor")] == []


def test_prefix_strategy_handles_empty_query(schema: SemanticSchema) -> None:
    strategy = PrefixMatchStrategy(DictionaryTagger(schema))
    assert strategy.match([], set(), "") == {}


def test_context_store_remembers_last_dataset() -> None:
    store = InMemoryContextStore({"c1": 3})
    store.remember("c2", 5)

    assert store.last_dataset("c1") == 3
    assert store.last_dataset("c2") == 5
    assert store.last_dataset("unknown") is None
    assert store.last_dataset(None) is None


def _write_schema(tmp_path: Path, content: str) -> SemanticSchema:
    schema_path = tmp_path / "cities.yaml"
    schema_path.write_text(dedent(content).strip(), encoding="utf-8")
    return load_semantic_schema(schema_path)


def _search(schema: SemanticSchema, query: str) -> list:
    tagger = DictionaryTagger(schema)
    service = SearchService(schema, tagger, PrefixMatchStrategy(tagger), InMemoryContextStore())
    return [result.recommend_text for result in service.search(SearchRequest(query))]


def test_suggestions_keep_schema_spelling(tmp_path: Path) -> None:
    schema = _write_schema(
        tmp_path,
        """
        datasets:
          sales:
            id: 1
            metrics:
              GMV:
                id: 11
                use_count: 5
            dimensions:
              region:
                id: 21
                values: [North]
        """,
    )

    assert DictionaryTagger(schema).complete("NOR", set()) == [TaggedTerm("North", ("_1_21",))]
    assert _search(schema, "sales by Nor") == ["sales by North", "sales by North GMV"]


def test_accented_values_are_tagged_whole(tmp_path: Path) -> None:
    schema = _write_schema(
        tmp_path,
        """
        datasets:
          sales:
            id: 1
            dimensions:
              city:
                id: 21
                values: [Zürich, São Paulo]
        """,
    )

    dictionary = build_dictionary(schema)

    assert sorted(dictionary) == ["city", "sales", "são paulo", "zürich"]
    assert DictionaryTagger(schema).tag("revenue in são paulo", set()) == [
        TaggedTerm("São Paulo", ("_1_21",))
    ]
    assert _search(schema, "sales in Zür") == ["sales in Zürich"]


def test_prefix_strategy_slices_the_raw_query(schema: SemanticSchema) -> None:
    tagger = DictionaryTagger(schema)
    query = "İİ nor"

    groups = PrefixMatchStrategy(tagger).match(tagger.tag(query, set()), set(), query)

    assert groups == {MatchedSegment("İİ ", detect_segment="nor"): [TaggedTerm("north", ("_1_21",))]}
