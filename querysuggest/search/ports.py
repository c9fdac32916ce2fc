"""Collaborator interfaces the suggestion pipeline depends on."""

from __future__ import annotations

from typing import AbstractSet, Mapping, Optional, Protocol, Sequence

from .models import MatchedSegment, SchemaElement, TaggedTerm


class TermTagger(Protocol):
    def tag(self, query_text: str, dataset_scope_hint: AbstractSet[int]) -> Sequence[TaggedTerm]:
        ...


class MatchStrategy(Protocol):
    def match(
        self,
        tagged_terms: Sequence[TaggedTerm],
        dataset_scope_hint: AbstractSet[int],
        query_text: str,
    ) -> Mapping[MatchedSegment, Sequence[TaggedTerm]]:
        ...


class SchemaIndex(Protocol):
    def dataset_names(self) -> Mapping[int, str]:
        ...

    def metrics_of(self, dataset_id: int) -> Sequence[SchemaElement]:
        ...


class ContextStore(Protocol):
    def last_dataset(self, conversation_id: Optional[str]) -> Optional[int]:
        ...
