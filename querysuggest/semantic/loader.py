"""Utilities for loading the semantic schema from YAML files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple

import yaml

from querysuggest.search.models import ElementKind, SchemaElement


class SemanticConfigError(ValueError):
    """Raised when the semantic configuration file contains invalid data."""


@dataclass(frozen=True)
class MetricSemantic:
    """Metric definition with its historical use-count."""

    id: int
    name: str
    description: Optional[str]
    use_count: int
    synonyms: Tuple[str, ...]


@dataclass(frozen=True)
class DimensionSemantic:
    """Dimension definition together with the literal values it may take."""

    id: int
    name: str
    description: Optional[str]
    synonyms: Tuple[str, ...]
    values: Tuple[str, ...]


@dataclass(frozen=True)
class EntitySemantic:
    id: int
    name: str
    synonyms: Tuple[str, ...]


@dataclass(frozen=True)
class DatasetSemantic:
    """Semantic metadata describing a dataset."""

    id: int
    name: str
    display_name: str
    description: Optional[str]
    synonyms: Tuple[str, ...]
    metrics: Mapping[str, MetricSemantic] = field(default_factory=dict)
    dimensions: Mapping[str, DimensionSemantic] = field(default_factory=dict)
    entities: Mapping[str, EntitySemantic] = field(default_factory=dict)

    def metric_elements(self) -> Tuple[SchemaElement, ...]:
        return tuple(
            SchemaElement(
                id=metric.id,
                name=metric.name,
                dataset_id=self.id,
                kind=ElementKind.METRIC,
                use_count=metric.use_count,
            )
            for metric in self.metrics.values()
        )


@dataclass(frozen=True)
class SemanticSchema:
    """Collection of datasets keyed by dataset id."""

    datasets: Mapping[int, DatasetSemantic]

    def get(self, dataset_id: int) -> Optional[DatasetSemantic]:
        return self.datasets.get(dataset_id)

    def dataset_names(self) -> Mapping[int, str]:
        return {dataset_id: dataset.display_name for dataset_id, dataset in self.datasets.items()}

    def metrics_of(self, dataset_id: int) -> Sequence[SchemaElement]:
        dataset = self.datasets.get(dataset_id)
        if dataset is None:
            return ()
        return dataset.metric_elements()

    def __iter__(self) -> Iterator[DatasetSemantic]:
        return iter(self.datasets.values())

    def __len__(self) -> int:
        return len(self.datasets)


def load_semantic_schema(path: Path | str) -> SemanticSchema:
    """Load semantic YAML files into a structured schema.

    Parameters
    ----------
    path:
        Location of the semantic configuration. Can point to a directory of
        YAML files or a single YAML file.

    Returns
    -------
    SemanticSchema
        The parsed schema. A missing path results in an empty schema.

    Raises
    ------
    SemanticConfigError
        If the YAML files contain invalid structure or types, or two datasets
        share an id.
    """

    semantic_path = Path(path)
    if not semantic_path.exists():
        return SemanticSchema(datasets={})

    datasets: Dict[int, DatasetSemantic] = {}
    for yaml_file in _collect_yaml_files(semantic_path):
        for dataset in _load_yaml_file(yaml_file):
            if dataset.id in datasets:
                raise SemanticConfigError(
                    f"Duplicate dataset id {dataset.id} ('{dataset.name}') found in {yaml_file}."
                )
            datasets[dataset.id] = dataset

    return SemanticSchema(datasets=datasets)


def _collect_yaml_files(path: Path) -> Sequence[Path]:
    if path.is_dir():
        return sorted(
            candidate
            for candidate in path.iterdir()
            if candidate.is_file() and candidate.suffix.lower() in {".yaml", ".yml"}
        )
    if path.is_file():
        return (path,)
    return ()


def _load_yaml_file(yaml_file: Path) -> Tuple[DatasetSemantic, ...]:
    try:
        raw = yaml.safe_load(yaml_file.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise SemanticConfigError(f"Failed to parse semantic YAML {yaml_file}: {exc}") from exc
    except OSError as exc:
        raise SemanticConfigError(f"Failed to read semantic YAML {yaml_file}: {exc}") from exc

    datasets_section = raw.get("datasets") if isinstance(raw, dict) else None
    if datasets_section is None:
        raise SemanticConfigError(
            f"Semantic YAML {yaml_file} must contain a top-level 'datasets' mapping."
        )
    if not isinstance(datasets_section, dict):
        raise SemanticConfigError(
            f"'datasets' in {yaml_file} must be a mapping of dataset names to definitions."
        )
    if not datasets_section:
        raise SemanticConfigError(f"{yaml_file} does not define any datasets.")

    datasets = []
    for dataset_name, dataset_payload in datasets_section.items():
        if not isinstance(dataset_payload, dict):
            raise SemanticConfigError(f"Dataset '{dataset_name}' in {yaml_file} must be a mapping.")
        datasets.append(_build_dataset_semantic(str(dataset_name), dataset_payload))
    return tuple(datasets)


def _build_dataset_semantic(dataset_name: str, payload: Mapping[str, object]) -> DatasetSemantic:
    return DatasetSemantic(
        id=_required_id(payload, f"dataset '{dataset_name}'"),
        name=dataset_name,
        display_name=str(payload.get("display_name") or dataset_name.replace("_", " ").title()),
        description=_optional_str(payload.get("description")),
        synonyms=_normalize_synonyms(payload.get("synonyms")),
        metrics=_parse_metrics(dataset_name, payload.get("metrics")),
        dimensions=_parse_dimensions(dataset_name, payload.get("dimensions")),
        entities=_parse_entities(dataset_name, payload.get("entities")),
    )


def _section_items(dataset_name: str, section: str, payload: object) -> Iterable[Tuple[str, Mapping[str, object]]]:
    if payload is None:
        return ()
    if not isinstance(payload, dict):
        raise SemanticConfigError(f"'{section}' for dataset '{dataset_name}' must be a mapping.")
    items = []
    for element_name, element_payload in payload.items():
        if not isinstance(element_payload, dict):
            raise SemanticConfigError(
                f"Entry '{element_name}' in '{section}' of dataset '{dataset_name}' must be a mapping."
            )
        items.append((str(element_name), element_payload))
    return items


def _parse_metrics(dataset_name: str, payload: object) -> Mapping[str, MetricSemantic]:
    metrics: Dict[str, MetricSemantic] = {}
    for metric_name, metric_payload in _section_items(dataset_name, "metrics", payload):
        metrics[metric_name] = MetricSemantic(
            id=_required_id(metric_payload, f"metric '{metric_name}'"),
            name=metric_name,
            description=_optional_str(metric_payload.get("description")),
            use_count=_non_negative_int(metric_payload.get("use_count", 0), f"use_count of metric '{metric_name}'"),
            synonyms=_normalize_synonyms(metric_payload.get("synonyms")),
        )
    return metrics


def _parse_dimensions(dataset_name: str, payload: object) -> Mapping[str, DimensionSemantic]:
    dimensions: Dict[str, DimensionSemantic] = {}
    for dimension_name, dimension_payload in _section_items(dataset_name, "dimensions", payload):
        dimensions[dimension_name] = DimensionSemantic(
            id=_required_id(dimension_payload, f"dimension '{dimension_name}'"),
            name=dimension_name,
            description=_optional_str(dimension_payload.get("description")),
            synonyms=_normalize_synonyms(dimension_payload.get("synonyms")),
            values=_normalize_synonyms(dimension_payload.get("values")),
        )
    return dimensions


def _parse_entities(dataset_name: str, payload: object) -> Mapping[str, EntitySemantic]:
    entities: Dict[str, EntitySemantic] = {}
    for entity_name, entity_payload in _section_items(dataset_name, "entities", payload):
        entities[entity_name] = EntitySemantic(
            id=_required_id(entity_payload, f"entity '{entity_name}'"),
            name=entity_name,
            synonyms=_normalize_synonyms(entity_payload.get("synonyms")),
        )
    return entities


def _required_id(payload: Mapping[str, object], label: str) -> int:
    if "id" not in payload:
        raise SemanticConfigError(f"The {label} must define an 'id'.")
    return _non_negative_int(payload["id"], f"id of {label}")


def _non_negative_int(value: object, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SemanticConfigError(f"The {label} must be a non-negative integer, got {value!r}.")
    return value


def _normalize_synonyms(value: object) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable):
        synonyms = tuple(str(item).strip() for item in value if str(item).strip())
        return tuple(sorted(set(synonyms)))
    raise SemanticConfigError("Synonyms and values must be provided as a string or list of strings.")


def _optional_str(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
