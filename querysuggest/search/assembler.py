"""Merge aggregator output into the final, budget-bounded suggestion list."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from .models import SuggestionResult

RESULT_SIZE = 10


class OrderedSuggestionSet:
    """Insertion-ordered set of suggestions keyed by full-field equality."""

    def __init__(self, results: Iterable[SuggestionResult] = ()) -> None:
        self._items: Dict[SuggestionResult, None] = {}
        self.update(results)

    def add(self, result: SuggestionResult) -> None:
        self._items.setdefault(result, None)

    def update(self, results: Iterable[SuggestionResult]) -> None:
        for result in results:
            self.add(result)

    def __contains__(self, result: object) -> bool:
        return result in self._items

    def __iter__(self) -> Iterator[SuggestionResult]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def as_tuple(self) -> Tuple[SuggestionResult, ...]:
        return tuple(self._items)


def assemble(
    metric_dimension_results: Iterable[SuggestionResult],
    dimension_value_groups: Sequence[Iterable[SuggestionResult]] = (),
    *,
    result_size: int = RESULT_SIZE,
) -> List[SuggestionResult]:
    merged = OrderedSuggestionSet(metric_dimension_results)
    for group in dimension_value_groups:
        merged.update(group)
    return list(merged)[:result_size]
