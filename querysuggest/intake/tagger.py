"""Dictionary-based term tagger built from the semantic schema."""

from __future__ import annotations

import bisect
import logging
import re
from typing import AbstractSet, Dict, Iterable, List, Sequence, Tuple

from querysuggest.search.models import TaggedTerm
from querysuggest.semantic import SemanticSchema

logger = logging.getLogger(__name__)

TOKEN_SPLIT_RE = re.compile(r"[\W_]+")


def tokenize(value: str) -> Tuple[str, ...]:
    """Split a string into lowercase word tokens, keeping their order."""
    return tuple(token for token in TOKEN_SPLIT_RE.split(value.lower()) if token)


def normalize_word(value: str) -> str:
    return " ".join(tokenize(value))


def dataset_nature(dataset_id: int) -> str:
    return f"_{dataset_id}"


def element_nature(dataset_id: int, element_id: int, suffix: str = "") -> str:
    nature = f"_{dataset_id}_{element_id}"
    return f"{nature}_{suffix}" if suffix else nature


def build_dictionary(schema: SemanticSchema) -> Dict[str, Tuple[str, ...]]:
    """Index every schema word under the natures it can resolve to."""
    return _index_schema(schema)[0]


def _index_schema(schema: SemanticSchema) -> Tuple[Dict[str, Tuple[str, ...]], Dict[str, str]]:
    """Return the nature index and the schema spelling of every normalized word.

    The first spelling seen for a normalized word is the one displayed.
    """
    dictionary: Dict[str, List[str]] = {}
    spellings: Dict[str, str] = {}

    def _add(words: Iterable[str], nature: str) -> None:
        for word in words:
            key = normalize_word(word)
            if not key:
                continue
            spellings.setdefault(key, word)
            natures = dictionary.setdefault(key, [])
            if nature not in natures:
                natures.append(nature)

    for dataset in schema:
        _add((dataset.display_name, dataset.name, *dataset.synonyms), dataset_nature(dataset.id))
        for metric in dataset.metrics.values():
            _add((metric.name, *metric.synonyms), element_nature(dataset.id, metric.id, "metric"))
        for dimension in dataset.dimensions.values():
            _add((dimension.name, *dimension.synonyms), element_nature(dataset.id, dimension.id, "dimension"))
            _add(dimension.values, element_nature(dataset.id, dimension.id))
        for entity in dataset.entities.values():
            _add((entity.name, *entity.synonyms), element_nature(dataset.id, entity.id, "entity"))

    return {word: tuple(natures) for word, natures in dictionary.items()}, spellings


def _restrict(natures: Sequence[str], dataset_ids: AbstractSet[int]) -> Tuple[str, ...]:
    if not dataset_ids:
        return tuple(natures)
    prefixes = tuple(dataset_nature(dataset_id) for dataset_id in dataset_ids)
    return tuple(
        nature
        for nature in natures
        if any(nature == prefix or nature.startswith(prefix + "_") for prefix in prefixes)
    )


class DictionaryTagger:
    """Tag schema words found in a query with their natures."""

    def __init__(self, schema: SemanticSchema) -> None:
        self.dictionary, self.spellings = _index_schema(schema)
        self._sorted_words = sorted(self.dictionary)
        self._max_word_tokens = max((len(word.split(" ")) for word in self.dictionary), default=0)
        logger.debug("Built tagging dictionary with %d words", len(self.dictionary))

    def tag(self, query_text: str, dataset_scope_hint: AbstractSet[int]) -> List[TaggedTerm]:
        """Return the dictionary words in ``query_text``, in order of appearance.

        Terms carry the schema spelling of the word, not the query's casing.

        Longer phrases are preferred at each position so "active users" is not
        also reported as "active".
        """
        tokens = tokenize(query_text)
        terms: List[TaggedTerm] = []
        index = 0
        while index < len(tokens):
            consumed = 1
            for length in range(min(self._max_word_tokens, len(tokens) - index), 0, -1):
                word = " ".join(tokens[index:index + length])
                natures = _restrict(self.dictionary.get(word, ()), dataset_scope_hint)
                if natures:
                    terms.append(TaggedTerm(text=self.spellings[word], natures=natures))
                    consumed = length
                    break
            index += consumed
        return terms

    def complete(self, prefix: str, dataset_scope_hint: AbstractSet[int]) -> List[TaggedTerm]:
        """Return dictionary words starting with ``prefix``, shortest first."""
        key = normalize_word(prefix)
        if not key:
            return []
        start = bisect.bisect_left(self._sorted_words, key)
        matches: List[TaggedTerm] = []
        for word in self._sorted_words[start:]:
            if not word.startswith(key):
                break
            natures = _restrict(self.dictionary[word], dataset_scope_hint)
            if natures:
                matches.append(TaggedTerm(text=self.spellings[word], natures=natures))
        matches.sort(key=lambda term: len(term.text))
        return matches
