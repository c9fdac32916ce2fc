"""Infer which datasets a query most likely refers to."""

from __future__ import annotations

import logging
from typing import AbstractSet, Optional, Sequence

from .models import DataSetStat, QueryScope, TaggedTerm
from .nature import dataset_stat, possible_dataset_ids
from .ports import ContextStore

logger = logging.getLogger(__name__)


def nothing_or_only_metric(stat: DataSetStat) -> bool:
    """True when the terms carry no dimension, dimension value or dataset signal.

    The metric clause can never be false. It is kept as-is so observable
    behaviour does not change; whether it was meant to read ``> 0`` is an
    open question for the schema owners.
    """
    return (
        stat.metric_dataset_count >= 0
        and stat.dimension_dataset_count <= 0
        and stat.dimension_value_dataset_count <= 0
        and stat.dataset_count <= 0
    )


class ScopeResolver:
    """Resolve the dataset scope of a request once, up front."""

    def __init__(self, context_store: ContextStore) -> None:
        self.context_store = context_store

    def resolve(
        self,
        explicit_ids: AbstractSet[int],
        tagged_terms: Sequence[TaggedTerm],
        conversation_id: Optional[str],
    ) -> QueryScope:
        if explicit_ids:
            return QueryScope(explicit_dataset_ids=frozenset(explicit_ids))

        stat = dataset_stat(tagged_terms)
        inferred = possible_dataset_ids(tagged_terms)
        if nothing_or_only_metric(stat):
            fallback = self.context_store.last_dataset(conversation_id)
            logger.debug(
                "possibleDataSets:%s, dataSetStat:%s, contextDataSet:%s", inferred, stat, fallback
            )
            return QueryScope(
                inferred_dataset_ids=inferred,
                fallback_dataset_id=fallback,
                use_fallback=True,
            )

        logger.debug("possibleDataSets:%s, dataSetStat:%s", inferred, stat)
        return QueryScope(inferred_dataset_ids=inferred)
