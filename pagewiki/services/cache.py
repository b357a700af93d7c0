"""Time-bounded snapshot of the full page listing."""

import time
from datetime import timedelta
from typing import Callable, List, Optional, Tuple

from pagewiki.models.page import Page


def _copy(pages: List[Page]) -> List[Page]:
    return [p.model_copy(deep=True) for p in pages]


class ListingCache:
    """Holds the last full listing until it is invalidated or expires.

    The snapshot and its deadline are swapped as one tuple, so concurrent
    readers see either the old or the new listing, never a mix. Two callers
    rebuilding after an invalidation may both store a listing; the last one
    wins and either is a consistent view.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=30),
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self._clock = clock
        self._entry: Optional[Tuple[List[Page], float]] = None

    def get(self) -> Optional[List[Page]]:
        entry = self._entry
        if entry is None:
            return None
        pages, expires_at = entry
        if self._clock() >= expires_at:
            self._entry = None
            return None
        return _copy(pages)

    def set(self, pages: List[Page]) -> None:
        self._entry = (_copy(pages), self._clock() + self.ttl.total_seconds())

    def invalidate(self) -> None:
        self._entry = None
