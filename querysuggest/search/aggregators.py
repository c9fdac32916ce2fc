"""Turn the selected match group into suggestion records."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .assembler import RESULT_SIZE, OrderedSuggestionSet
from .models import (
    ElementKind,
    MatchedSegment,
    QueryFilter,
    QueryScope,
    SuggestionResult,
    TaggedTerm,
)
from .nature import classify, dataset_id_of, matches_scope
from .ports import SchemaIndex

logger = logging.getLogger(__name__)

SPACE = " "
METRIC_OVERFETCH_FACTOR = 3


class MetricDimensionAggregator:
    """Suggest every in-scope metric or dimension matched in the segment."""

    def aggregate(
        self,
        segment: MatchedSegment,
        terms: Sequence[TaggedTerm],
        scope: QueryScope,
        dataset_names: Mapping[int, str],
    ) -> Tuple[Tuple[SuggestionResult, ...], bool]:
        """Return the suggestions and whether any metric or dimension matched."""
        results = OrderedSuggestionSet()
        existed_any_match = False
        for term in terms:
            classified = [classify(nature) for nature in term.natures]
            in_scope = [
                (dataset_id, kind)
                for dataset_id, kind in classified
                if matches_scope(kind, dataset_id, scope)
            ]
            if not in_scope:
                continue
            for dataset_id, kind in in_scope:
                existed_any_match = True
                results.add(
                    SuggestionResult(
                        dataset_id=dataset_id,
                        dataset_name=dataset_names.get(dataset_id),
                        recommend_text=segment.query_substring + term.text,
                        sub_recommend_text=term.text,
                        kind=kind,
                    )
                )
            logger.debug("term:%s, metricOrDimension:%s, scope:%s", term, in_scope, scope.dataset_ids)
        logger.info("metric/dimension suggestions: %s", results.as_tuple())
        return results.as_tuple(), existed_any_match


def nature_to_term_map(terms: Sequence[TaggedTerm], scope: QueryScope) -> Dict[str, str]:
    """Map each in-scope nature to the shortest term text carrying it."""
    candidates = [
        (nature, term.text)
        for term in terms
        for nature in term.natures
        if scope.contains(dataset_id_of(nature))
    ]
    candidates.sort(key=lambda item: len(item[1]))
    mapping: Dict[str, str] = {}
    for nature, text in candidates:
        mapping.setdefault(nature, text)
    return mapping


def filtered_by_query_filter(text: str, query_filters: Sequence[QueryFilter]) -> bool:
    """True when an explicit filter already pins ``text``."""
    lowered = text.casefold()
    return any(str(query_filter.value).casefold() == lowered for query_filter in query_filters)


def top_metric_names(schema: SchemaIndex, dataset_id: int, limit: int) -> List[str]:
    """Names of the dataset's most used metrics, highest use-count first."""
    metrics = sorted(
        (metric for metric in schema.metrics_of(dataset_id) if metric is not None),
        key=lambda metric: metric.use_count,
        reverse=True,
    )
    return [metric.name for metric in metrics][:limit]


class DimensionValueAggregator:
    """Suggest matched values, padded with popular metrics when nothing else matched."""

    def __init__(self, schema: SchemaIndex, *, result_size: int = RESULT_SIZE) -> None:
        self.schema = schema
        self.result_size = result_size

    def metric_budget(self, group_count: int) -> int:
        if group_count <= 0:
            return 1
        return max(1, self.result_size // group_count)

    def aggregate(
        self,
        segment: MatchedSegment,
        terms: Sequence[TaggedTerm],
        scope: QueryScope,
        query_filters: Sequence[QueryFilter],
        metric_dataset_count: int,
        existed_any_metric_or_dimension: bool,
        dataset_names: Mapping[int, str],
    ) -> List[Tuple[SuggestionResult, ...]]:
        """Return one tuple of suggestions per ``nature -> term`` group."""
        mapping = nature_to_term_map(terms, scope)
        logger.debug("possibleDataSets:%s, natureToNameMap:%s", scope.dataset_ids, mapping)
        budget = self.metric_budget(len(mapping))
        return [
            self.aggregate_nature(
                segment,
                nature,
                text,
                query_filters=query_filters,
                metric_dataset_count=metric_dataset_count,
                existed_any_metric_or_dimension=existed_any_metric_or_dimension,
                metric_budget=budget,
                dataset_names=dataset_names,
            )
            for nature, text in mapping.items()
        ]

    def aggregate_nature(
        self,
        segment: MatchedSegment,
        nature: str,
        text: str,
        *,
        query_filters: Sequence[QueryFilter],
        metric_dataset_count: int,
        existed_any_metric_or_dimension: bool,
        metric_budget: int,
        dataset_names: Mapping[int, str],
    ) -> Tuple[SuggestionResult, ...]:
        dataset_id, kind = classify(nature)
        if kind is ElementKind.ENTITY:
            return ()

        dataset_name: Optional[str] = dataset_names.get(dataset_id)
        base = SuggestionResult(
            dataset_id=dataset_id,
            dataset_name=dataset_name,
            recommend_text=segment.query_substring + text,
            sub_recommend_text=text,
            kind=kind,
        )
        if metric_dataset_count > 0 or existed_any_metric_or_dimension:
            return (base,)

        if filtered_by_query_filter(text, query_filters):
            logger.debug("Value %r already pinned by a query filter; skipping.", text)
            return ()

        results = OrderedSuggestionSet([base])
        # Over-fetch leaves room for secondary filtering before the final cut.
        candidates = top_metric_names(self.schema, dataset_id, metric_budget * METRIC_OVERFETCH_FACTOR)
        for metric_name in candidates[:metric_budget]:
            results.add(
                SuggestionResult(
                    dataset_id=dataset_id,
                    dataset_name=dataset_name,
                    recommend_text=segment.query_substring + text + SPACE + metric_name,
                    sub_recommend_text=text + SPACE + metric_name,
                    kind=None,
                    is_complete=False,
                )
            )
        return results.as_tuple()
