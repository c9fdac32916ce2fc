"""Decode tagger natures into dataset ids and schema element kinds.

Natures are produced by the tagging collaborator in the form::

    _<dataset>                       dataset
    _<dataset>_<element>_metric      metric
    _<dataset>_<element>_dimension   dimension
    _<dataset>_<element>             dimension value
    _<dataset>_<element>_entity      entity
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Tuple

from .models import DataSetStat, ElementKind, QueryScope, TaggedTerm

NATURE_PREFIX = "_"
SUFFIX_KINDS: Dict[str, ElementKind] = {
    "metric": ElementKind.METRIC,
    "dimension": ElementKind.DIMENSION,
    "entity": ElementKind.ENTITY,
}
SUGGESTIBLE_KINDS = (ElementKind.METRIC, ElementKind.DIMENSION)


class NatureDecodeError(ValueError):
    """Raised when a nature does not follow the tagger's encoding."""


def classify(nature: str) -> Tuple[int, ElementKind]:
    """Return the ``(dataset_id, kind)`` pair encoded in ``nature``."""
    if not isinstance(nature, str) or not nature.startswith(NATURE_PREFIX):
        raise NatureDecodeError(f"Nature {nature!r} must start with {NATURE_PREFIX!r}.")

    parts = nature[len(NATURE_PREFIX):].split("_")
    kind = ElementKind.DIMENSION_VALUE
    if parts and parts[-1] in SUFFIX_KINDS:
        kind = SUFFIX_KINDS[parts.pop()]
        if len(parts) != 2:
            raise NatureDecodeError(f"Nature {nature!r} must carry a dataset and element id.")
    elif len(parts) == 1:
        kind = ElementKind.DATASET
    elif len(parts) != 2:
        raise NatureDecodeError(f"Nature {nature!r} has an unexpected number of segments.")

    if not all(part.isdigit() for part in parts):
        raise NatureDecodeError(f"Nature {nature!r} contains a non-numeric id.")
    return int(parts[0]), kind


def dataset_id_of(nature: str) -> int:
    return classify(nature)[0]


def matches_scope(kind: ElementKind, dataset_id: Optional[int], scope: QueryScope) -> bool:
    """True when a metric or dimension belongs to a dataset the request may use."""
    if kind not in SUGGESTIBLE_KINDS:
        return False
    return scope.contains(dataset_id)


def dataset_stat(tagged_terms: Iterable[TaggedTerm]) -> DataSetStat:
    """Count the distinct datasets referenced per element kind."""
    seen: Dict[ElementKind, Set[int]] = {kind: set() for kind in ElementKind}
    for term in tagged_terms:
        for nature in term.natures:
            dataset_id, kind = classify(nature)
            seen[kind].add(dataset_id)
    return DataSetStat(
        metric_dataset_count=len(seen[ElementKind.METRIC]),
        dimension_dataset_count=len(seen[ElementKind.DIMENSION]),
        dimension_value_dataset_count=len(seen[ElementKind.DIMENSION_VALUE]),
        dataset_count=len(seen[ElementKind.DATASET]),
    )


def possible_dataset_ids(tagged_terms: Iterable[TaggedTerm]) -> Tuple[int, ...]:
    """Distinct dataset ids referenced by the terms, in first-seen order."""
    ordered: List[int] = []
    for term in tagged_terms:
        for nature in term.natures:
            dataset_id = dataset_id_of(nature)
            if dataset_id not in ordered:
                ordered.append(dataset_id)
    return tuple(ordered)
