"""Prefix completion strategy grouping dictionary words by query segment."""

from __future__ import annotations

import logging
import re
from typing import AbstractSet, Dict, List, Sequence

from querysuggest.search.models import MatchedSegment, TaggedTerm

from .tagger import DictionaryTagger, normalize_word

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"[^\W_]+")


class PrefixMatchStrategy:
    """Complete the query tail starting at each tagged term and at the last token.

    Every candidate offset yields one group: the text before the offset is the
    recommend prefix and the tail from the offset is completed against the
    tagger's dictionary.
    """

    def __init__(self, tagger: DictionaryTagger) -> None:
        self.tagger = tagger

    def candidate_offsets(self, query_text: str, tagged_terms: Sequence[TaggedTerm]) -> List[int]:
        tokens = list(TOKEN_RE.finditer(query_text))
        offsets = set()
        for term in tagged_terms:
            first_token = normalize_word(term.text).split(" ")[0]
            for token in tokens:
                if normalize_word(token.group()) == first_token:
                    offsets.add(token.start())
        if tokens:
            offsets.add(tokens[-1].start())
        return sorted(offset for offset in offsets if query_text[offset:].strip())

    def match(
        self,
        tagged_terms: Sequence[TaggedTerm],
        dataset_scope_hint: AbstractSet[int],
        query_text: str,
    ) -> Dict[MatchedSegment, List[TaggedTerm]]:
        groups: Dict[MatchedSegment, List[TaggedTerm]] = {}
        for offset in self.candidate_offsets(query_text, tagged_terms):
            segment = MatchedSegment(
                query_substring=query_text[:offset],
                detect_segment=query_text[offset:].strip(),
            )
            groups[segment] = self.tagger.complete(segment.detect_segment, dataset_scope_hint)
        logger.debug("match groups: %s", groups)
        return groups
