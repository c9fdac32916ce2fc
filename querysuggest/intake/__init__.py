"""Intake package exports: the collaborators feeding the suggestion core."""

from .context import InMemoryContextStore
from .matching import PrefixMatchStrategy
from .tagger import DictionaryTagger, build_dictionary, tokenize

__all__ = [
    "DictionaryTagger",
    "InMemoryContextStore",
    "PrefixMatchStrategy",
    "build_dictionary",
    "tokenize",
]
