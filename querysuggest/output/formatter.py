"""Utilities for turning suggestion results into terminal-friendly text."""

from __future__ import annotations

import json
from typing import List, Sequence

from querysuggest.search.models import SuggestionResult


def format_suggestion(result: SuggestionResult) -> str:
    kind = result.kind.value if result.kind else "metric hint"
    dataset = result.dataset_name or (str(result.dataset_id) if result.dataset_id is not None else "any dataset")
    line = f"• {result.recommend_text} [{kind} · {dataset}]"
    if not result.is_complete:
        line = f"{line} (incomplete)"
    return line


def format_suggestions(query_text: str, results: Sequence[SuggestionResult]) -> str:
    lines: List[str] = [f"Query: {query_text}"]
    if not results:
        lines.append("No suggestions matched your query.")
        return "\n".join(lines)
    lines.append(f"Suggestions ({len(results)}):")
    lines.extend(format_suggestion(result) for result in results)
    return "\n".join(lines)


def format_suggestions_json(results: Sequence[SuggestionResult]) -> str:
    return json.dumps([result.to_dict() for result in results], ensure_ascii=False, indent=2)
