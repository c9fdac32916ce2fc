"""CLI entrypoint for the query suggestion service."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional, Sequence, Tuple

from querysuggest.intake import DictionaryTagger, InMemoryContextStore, PrefixMatchStrategy
from querysuggest.output.formatter import format_suggestions, format_suggestions_json
from querysuggest.search import RESULT_SIZE, QueryFilter, SearchRequest, SearchService, SuggestionResult
from querysuggest.semantic import SemanticConfigError, load_semantic_schema

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchConfig:
    """Configuration values required to build the suggestion service."""

    schema_path: Path
    result_size: int = RESULT_SIZE
    explicit_dataset_ids: FrozenSet[int] = field(default_factory=frozenset)
    conversation_id: Optional[str] = None
    last_dataset_id: Optional[int] = None
    query_filters: Tuple[str, ...] = field(default_factory=tuple)
    as_json: bool = False


def _load_env_file(path: Optional[str] = None) -> None:
    """Load environment variables from a `.env` file if present.

    Values already present in the environment take precedence.
    """
    candidate = path or os.getenv("QUERYSUGGEST_ENV_FILE", ".env")
    env_path = Path(candidate).expanduser()
    if not env_path.exists():
        return

    try:
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value
    except OSError as exc:  # pragma: no cover - unexpected IO errors
        LOGGER.warning("Failed to read environment file %s: %s", env_path, exc)


def _get_env_var(name: str, *, optional: bool = False) -> Optional[str]:
    value = os.getenv(name)
    if value:
        return value
    if optional:
        return None
    raise RuntimeError(
        f"Environment variable `{name}` is required but was not provided. "
        "Set it in your environment or a local `.env` file."
    )


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("QUERYSUGGEST_LOG_LEVEL", "INFO"),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )


def _parse_result_size(raw: Optional[str]) -> int:
    if raw is None:
        return RESULT_SIZE
    try:
        size = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"`QUERYSUGGEST_RESULT_SIZE` must be an integer, got {raw!r}.") from exc
    if size <= 0:
        raise RuntimeError("`QUERYSUGGEST_RESULT_SIZE` must be a positive integer.")
    return size


def build_config_from_env(args: argparse.Namespace) -> SearchConfig:
    """Create a SearchConfig from command-line arguments and environment variables."""
    schema_path = args.schema or _get_env_var("QUERYSUGGEST_SCHEMA_PATH")
    result_size = _parse_result_size(_get_env_var("QUERYSUGGEST_RESULT_SIZE", optional=True))
    return SearchConfig(
        schema_path=Path(schema_path),
        result_size=result_size,
        explicit_dataset_ids=frozenset(args.dataset_ids or ()),
        conversation_id=args.conversation,
        last_dataset_id=args.last_dataset,
        query_filters=tuple(args.filters or ()),
        as_json=args.as_json,
    )


def build_service(config: SearchConfig) -> SearchService:
    schema = load_semantic_schema(config.schema_path)
    LOGGER.info("Loaded %d datasets from %s", len(schema), config.schema_path)
    tagger = DictionaryTagger(schema)
    context_store = InMemoryContextStore()
    if config.conversation_id is not None and config.last_dataset_id is not None:
        context_store.remember(config.conversation_id, config.last_dataset_id)
    return SearchService(
        schema,
        tagger,
        PrefixMatchStrategy(tagger),
        context_store,
        result_size=config.result_size,
    )


def run_query(config: SearchConfig, query_text: str) -> List[SuggestionResult]:
    service = build_service(config)
    request = SearchRequest(
        query_text=query_text,
        explicit_dataset_ids=config.explicit_dataset_ids,
        conversation_id=config.conversation_id,
        query_filters=tuple(QueryFilter(value=value) for value in config.query_filters),
    )
    return service.search(request)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Suggest completions for a semantic search query.")
    parser.add_argument("query", help="Partially typed query text.")
    parser.add_argument(
        "--schema",
        default=None,
        help="YAML file or directory describing the datasets (defaults to $QUERYSUGGEST_SCHEMA_PATH).",
    )
    parser.add_argument(
        "--dataset-id",
        dest="dataset_ids",
        type=int,
        action="append",
        help="Restrict suggestions to this dataset id. May be repeated.",
    )
    parser.add_argument("--conversation", default=None, help="Conversation id used for context fallback.")
    parser.add_argument(
        "--last-dataset",
        dest="last_dataset",
        type=int,
        default=None,
        help="Dataset id last used in the conversation.",
    )
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        help="Literal filter value already applied to the query. May be repeated.",
    )
    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        default=False,
        help="Print suggestions as JSON.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Print suggestions for a single query."""
    args = _parse_args(argv)
    _configure_logging()
    _load_env_file()
    try:
        config = build_config_from_env(args)
        results = run_query(config, args.query)
    except SemanticConfigError as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(1) from exc
    except RuntimeError as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(1) from exc

    if config.as_json:
        print(format_suggestions_json(results))
    else:
        print(format_suggestions(args.query, results))


if __name__ == "__main__":
    main()
