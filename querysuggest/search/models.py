"""Request-scoped records shared by the suggestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple


class ElementKind(str, Enum):
    """Kind of schema element a nature resolves to."""

    DATASET = "dataset"
    METRIC = "metric"
    DIMENSION = "dimension"
    DIMENSION_VALUE = "dimension_value"
    ENTITY = "entity"


@dataclass(frozen=True)
class TaggedTerm:
    """A dictionary word found in the query together with its candidate natures."""

    text: str
    natures: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MatchedSegment:
    """Portion of the query a match group is anchored to.

    ``query_substring`` prefixes every recommendation built from the group.
    ``detect_segment`` is the tail the match strategy searched for, when it
    reports one; the longer of competing segments wins selection.
    """

    query_substring: str
    detect_segment: str = ""

    @property
    def segment_text(self) -> str:
        return self.detect_segment or self.query_substring


@dataclass(frozen=True)
class SchemaElement:
    id: int
    name: str
    dataset_id: int
    kind: ElementKind
    use_count: int = 0


@dataclass(frozen=True)
class DataSetStat:
    """Distinct dataset counts per element kind over a set of tagged terms."""

    metric_dataset_count: int = 0
    dimension_dataset_count: int = 0
    dimension_value_dataset_count: int = 0
    dataset_count: int = 0


@dataclass(frozen=True)
class SuggestionResult:
    """A single recommended completion.

    Two results with identical field values are the same suggestion. A missing
    ``kind`` marks a metric padding suggestion that still needs completing.
    """

    dataset_id: Optional[int]
    dataset_name: Optional[str]
    recommend_text: str
    sub_recommend_text: str
    kind: Optional[ElementKind] = None
    is_complete: bool = True

    def to_dict(self) -> Dict[str, object]:
        return {
            "dataset_id": self.dataset_id,
            "dataset_name": self.dataset_name,
            "recommend": self.recommend_text,
            "sub_recommend": self.sub_recommend_text,
            "kind": self.kind.value if self.kind else None,
            "is_complete": self.is_complete,
        }


@dataclass(frozen=True)
class QueryScope:
    """Datasets a request is restricted to.

    Exactly one of the sources is used: explicit ids when the caller supplied
    any, otherwise ids inferred from the tagged terms, otherwise the
    conversation's last dataset (which may itself be absent).
    """

    explicit_dataset_ids: FrozenSet[int] = field(default_factory=frozenset)
    inferred_dataset_ids: Tuple[int, ...] = field(default_factory=tuple)
    fallback_dataset_id: Optional[int] = None
    use_fallback: bool = False

    @property
    def dataset_ids(self) -> Tuple[Optional[int], ...]:
        if self.explicit_dataset_ids:
            return tuple(sorted(self.explicit_dataset_ids))
        if self.use_fallback:
            return (self.fallback_dataset_id,)
        return self.inferred_dataset_ids

    @property
    def concrete_ids(self) -> FrozenSet[int]:
        return frozenset(dataset_id for dataset_id in self.dataset_ids if dataset_id is not None)

    @property
    def is_unrestricted(self) -> bool:
        """True when no concrete dataset id limits the scope.

        An absent fallback id counts as no restriction, the same as an empty scope.
        """
        return not self.concrete_ids

    def contains(self, dataset_id: Optional[int]) -> bool:
        return self.is_unrestricted or dataset_id in self.concrete_ids


@dataclass(frozen=True)
class QueryFilter:
    value: str


@dataclass(frozen=True)
class SearchRequest:
    query_text: str
    explicit_dataset_ids: FrozenSet[int] = field(default_factory=frozenset)
    conversation_id: Optional[str] = None
    query_filters: Tuple[QueryFilter, ...] = field(default_factory=tuple)
