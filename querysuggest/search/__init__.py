"""Suggestion ranking core: scope inference, segment selection and aggregation."""

from .assembler import RESULT_SIZE, OrderedSuggestionSet, assemble
from .models import (
    DataSetStat,
    ElementKind,
    MatchedSegment,
    QueryFilter,
    QueryScope,
    SchemaElement,
    SearchRequest,
    SuggestionResult,
    TaggedTerm,
)
from .nature import NatureDecodeError, classify, matches_scope
from .service import SearchService

__all__ = [
    "DataSetStat",
    "ElementKind",
    "MatchedSegment",
    "NatureDecodeError",
    "OrderedSuggestionSet",
    "QueryFilter",
    "QueryScope",
    "RESULT_SIZE",
    "SchemaElement",
    "SearchRequest",
    "SearchService",
    "SuggestionResult",
    "TaggedTerm",
    "assemble",
    "classify",
    "matches_scope",
]
