"""Capped, newest-first history of past analyses.

The whole list lives as one JSON-encoded value under a single key of a
key-value store. Entries are immutable snapshots: selecting one returns the
stored result as-is, without contacting the model.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Callable

from pydantic import TypeAdapter, ValidationError

from cv_architect.adapters.storage.base import AbstractKeyValueStore
from cv_architect.core.errors import NotFoundAppError
from cv_architect.schemas.analysis import AnalysisResult
from cv_architect.schemas.history import HistoryItem

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "CV Analysis"

_history_adapter = TypeAdapter(list[HistoryItem])


class HistoryStore:
    """Persisted ring of at most ``limit`` analyses, newest first.

    Attributes:
        store: Backing key-value store.
        key: Key holding the encoded list.
        limit: Maximum number of retained entries.
    """

    def __init__(
        self,
        store: AbstractKeyValueStore,
        *,
        key: str,
        limit: int = 20,
        clock_ns: Callable[[], int] = time.time_ns,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.store = store
        self.key = key
        self.limit = limit
        self._clock_ns = clock_ns
        self._last_id_ns = 0

    def load_all(self) -> list[HistoryItem]:
        """Return the stored entries, newest first.

        Absent, unreadable or corrupt data yields an empty list.
        """
        try:
            raw = self.store.get(self.key)
        except (OSError, ValueError):
            logger.exception("history.load_failed", extra={"key": self.key})
            return []

        if raw is None:
            return []

        try:
            return _history_adapter.validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "history.corrupt",
                extra={"key": self.key, "error_count": exc.error_count()},
            )
            return []

    def _persist(self, items: list[HistoryItem]) -> None:
        encoded = json.dumps(
            [item.model_dump(mode="json", by_alias=True) for item in items],
            ensure_ascii=False,
        )
        self.store.set(self.key, encoded)

    def _next_id(self) -> tuple[str, int]:
        # Two appends inside the same nanosecond tick must still get distinct ids
        now_ns = max(self._clock_ns(), self._last_id_ns + 1)
        self._last_id_ns = now_ns
        return str(now_ns), now_ns // 1_000_000

    def append(self, result: AnalysisResult) -> HistoryItem:
        """Prepend ``result`` as a new entry and drop entries beyond the cap."""
        item_id, created_ms = self._next_id()
        item = HistoryItem(
            id=item_id,
            date=created_ms,
            title=result.job_title_detected or DEFAULT_TITLE,
            score=result.scores.overall_score,
            result=result,
        )
        items = [item, *self.load_all()][: self.limit]
        self._persist(items)
        logger.info(
            "history.append",
            extra={"history_id": item.id, "score": item.score, "size": len(items)},
        )
        return item

    def remove(self, item_id: str) -> list[HistoryItem]:
        """Drop the entry with ``item_id``; absent ids leave history unchanged."""
        items = self.load_all()
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) != len(items):
            self._persist(remaining)
            logger.info("history.remove", extra={"history_id": item_id, "size": len(remaining)})
        return remaining

    def get(self, item_id: str) -> HistoryItem:
        """Return a stored entry.

        Raises:
            NotFoundAppError: If no entry has ``item_id``.
        """
        for item in self.load_all():
            if item.id == item_id:
                return item
        raise NotFoundAppError(
            code="history_item_not_found",
            message="History item not found.",
            details={"history_id": item_id},
        )
