"""Semantic layer package for YAML-driven dataset definitions."""

from .loader import (
    DatasetSemantic,
    DimensionSemantic,
    EntitySemantic,
    MetricSemantic,
    SemanticConfigError,
    SemanticSchema,
    load_semantic_schema,
)

__all__ = [
    "DatasetSemantic",
    "DimensionSemantic",
    "EntitySemantic",
    "MetricSemantic",
    "SemanticConfigError",
    "SemanticSchema",
    "load_semantic_schema",
]
