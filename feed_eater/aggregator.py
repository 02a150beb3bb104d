"""The category -> bodies mapping shared by all fetch tasks."""

from __future__ import annotations

import threading
from typing import Dict, List

from feed_eater.models import Feeds, FetchFailure


class FeedAggregator:
    """
    Collects response bodies per category. Every mutation happens under one
    lock owned by the instance; entries are appended whole, in the order the
    lock was taken, and never deduplicated.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._feeds: Dict[str, List[str]] = {}
        self._failures: List[FetchFailure] = []

    def add(self, category: str, body: str) -> None:
        """Append ``body`` to the list kept for ``category``."""
        with self._lock:
            self._feeds.setdefault(category, []).append(body)

    def record_failure(self, failure: FetchFailure) -> None:
        with self._lock:
            self._failures.append(failure)

    def snapshot(self) -> Feeds:
        """Return a copy of the current mapping, safe to use while tasks still run."""
        with self._lock:
            return {category: list(bodies) for category, bodies in self._feeds.items()}

    @property
    def failures(self) -> List[FetchFailure]:
        with self._lock:
            return list(self._failures)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bodies) for bodies in self._feeds.values())
