"""In-memory record of the last dataset used per conversation."""

from __future__ import annotations

from typing import Dict, Mapping, Optional


class InMemoryContextStore:
    def __init__(self, last_datasets: Optional[Mapping[str, int]] = None) -> None:
        self._last_datasets: Dict[str, int] = dict(last_datasets or {})

    def remember(self, conversation_id: str, dataset_id: int) -> None:
        self._last_datasets[conversation_id] = dataset_id

    def last_dataset(self, conversation_id: Optional[str]) -> Optional[int]:
        if conversation_id is None:
            return None
        return self._last_datasets.get(conversation_id)
