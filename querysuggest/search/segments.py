"""Pick the most specific match group for a query."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence, Tuple

from .models import MatchedSegment, TaggedTerm

SelectedSegment = Tuple[MatchedSegment, Tuple[TaggedTerm, ...]]


def select_best(
    match_groups: Mapping[MatchedSegment, Sequence[TaggedTerm]],
) -> Optional[SelectedSegment]:
    """Return the non-empty group with the longest segment text.

    On equal length the group iterated later replaces the current winner.
    """
    best: Optional[SelectedSegment] = None
    for segment, terms in match_groups.items():
        if not terms:
            continue
        if best is None or not _keeps_winner(best[0], segment):
            best = (segment, tuple(terms))
    return best


def _keeps_winner(winner: MatchedSegment, challenger: MatchedSegment) -> bool:
    return len(winner.segment_text) > len(challenger.segment_text)
