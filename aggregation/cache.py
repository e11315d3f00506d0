"""
aggregation/cache.py

Time-to-live cache for the merged performance snapshot.

The cache holds a single :class:`CacheEntry`.  A read returns the stored
entry while ``now - computed_at < ttl``; otherwise the snapshot is rebuilt
in full by calling ``compute`` and the entry reference is replaced.

Concurrent readers that hit an expired entry may both recompute.
Recomputation is a pure function of the sources, so the duplicate work is
wasted but the results are equivalent; the last writer wins.  Replacing one
attribute is atomic, so no lock is taken.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from app.domain.performance import CacheEntry, MergedDataset
from app.logging_utils import timed_event

logger = logging.getLogger(__name__)


class AggregationCache:
    """
    Memoizes the result of *compute* for ``ttl_seconds``.

    Parameters
    ----------
    compute:
        Zero-argument callable producing a fresh :class:`MergedDataset`.
        Exceptions propagate to the caller and nothing is stored.
    ttl_seconds:
        Freshness window.  ``0`` disables caching.
    clock:
        Time source returning seconds.  Injectable for deterministic tests.
    """

    def __init__(
        self,
        compute: Callable[[], MergedDataset],
        *,
        ttl_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0.")
        self._compute = compute
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entry: CacheEntry | None = None

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self) -> CacheEntry:
        """
        Return the current entry, recomputing it when missing or stale.
        """

        entry = self._entry
        now = self._clock()
        if entry is not None and entry.is_fresh(now):
            return entry
        return self._rebuild(now, reason="expired" if entry is not None else "empty")

    def refresh(self) -> CacheEntry:
        """
        Recompute unconditionally and replace the entry.

        If *compute* raises, the previous entry is kept untouched and keeps
        serving reads until it expires.
        """

        return self._rebuild(self._clock(), reason="refresh")

    def _rebuild(self, now: float, *, reason: str) -> CacheEntry:
        with timed_event(logger, logging.INFO, "performance_cache_recomputed", reason=reason) as event:
            snapshot = self._compute()
            event.update(
                total_dates=snapshot.metadata.total_dates,
                source_files=snapshot.metadata.source_files,
                failed_sources=snapshot.metadata.failed_sources,
            )

        fresh = CacheEntry(snapshot=snapshot, computed_at=now, ttl_seconds=self._ttl_seconds)
        self._entry = fresh
        return fresh

    def is_fresh(self) -> bool:
        entry = self._entry
        return entry is not None and entry.is_fresh(self._clock())

    def invalidate(self) -> None:
        """
        Force the next :meth:`get` to recompute regardless of freshness.
        """

        self._entry = None
        logger.debug("Performance cache invalidated")
