"""Request orchestration for search-box suggestions."""

from __future__ import annotations

import logging
from typing import List

from .aggregators import DimensionValueAggregator, MetricDimensionAggregator
from .assembler import RESULT_SIZE, assemble
from .models import SearchRequest, SuggestionResult
from .nature import dataset_stat
from .ports import ContextStore, MatchStrategy, SchemaIndex, TermTagger
from .scope import ScopeResolver
from .segments import select_best

logger = logging.getLogger(__name__)


class SearchService:
    """Rank and assemble completions for a partially typed query.

    Each call to :meth:`search` is independent: schema and context are read
    once at the start of the request and nothing is kept between calls.
    """

    def __init__(
        self,
        schema: SchemaIndex,
        tagger: TermTagger,
        match_strategy: MatchStrategy,
        context_store: ContextStore,
        *,
        result_size: int = RESULT_SIZE,
    ) -> None:
        if result_size <= 0:
            raise ValueError("result_size must be a positive integer.")
        self.schema = schema
        self.tagger = tagger
        self.match_strategy = match_strategy
        self.result_size = result_size
        self.scope_resolver = ScopeResolver(context_store)
        self.metric_dimension_aggregator = MetricDimensionAggregator()
        self.dimension_value_aggregator = DimensionValueAggregator(schema, result_size=result_size)

    def search(self, request: SearchRequest) -> List[SuggestionResult]:
        dataset_names = dict(self.schema.dataset_names())
        explicit_ids = frozenset(request.explicit_dataset_ids)

        tagged_terms = list(self.tagger.tag(request.query_text, explicit_ids))
        logger.info("tagger result: %s", tagged_terms)

        match_groups = self.match_strategy.match(tagged_terms, explicit_ids, request.query_text)
        selected = select_best(match_groups)
        if selected is None:
            logger.info("No match group for query %r.", request.query_text)
            return []
        segment, terms = selected
        logger.info("selected segment: %s, request: %s", segment, request)

        stat = dataset_stat(tagged_terms)
        scope = self.scope_resolver.resolve(explicit_ids, tagged_terms, request.conversation_id)

        metric_dimension_results, existed_any_match = self.metric_dimension_aggregator.aggregate(
            segment, terms, scope, dataset_names
        )
        dimension_value_groups = self.dimension_value_aggregator.aggregate(
            segment,
            terms,
            scope,
            request.query_filters,
            stat.metric_dataset_count,
            existed_any_match,
            dataset_names,
        )
        return assemble(
            metric_dimension_results,
            dimension_value_groups,
            result_size=self.result_size,
        )
