"""
app/services/aggregation_service.py

Performance aggregation façade.

Wires SourceRegistry → DatasetLoader → merge_datasets behind an
AggregationCache and exposes read-only projections of the merged snapshot:

    get_merged            – the cached MergedDataset (recomputed when stale)
    list_dates            – ascending distinct dates
    get_by_date           – asset → PR mapping for one date, or None
    get_asset_history     – date → PR mapping for one asset
    get_asset_summary     – lowest / highest (with dates) and average PR
    get_merged_snapshot   – JSON-ready {pr_data, metadata} for bulk consumers

Failure contract
----------------
- A single source failing to load is logged and excluded; the merge
  proceeds with the remaining sources.
- Every source failing, primary included, raises
  PerformanceDataUnavailableError.  Nothing is cached in that case.
- A missing date or asset is reported as ``None`` / ``{}``, never raised.

All returned mappings are copies.  The cached snapshot is never handed out
for mutation.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable

from aggregation.cache import AggregationCache
from aggregation.errors import PerformanceDataUnavailableError
from aggregation.loader import DatasetLoader
from aggregation.merger import merge_datasets
from app.config import get_aggregation_settings
from app.domain.performance import AssetSummary, CacheEntry, MergedDataset
from sources.registry import SourceRegistry, build_source_registry

logger = logging.getLogger(__name__)


class PerformanceAggregationService:
    """
    Serves the merged performance dataset and its projections.

    Parameters
    ----------
    registry:
        Source registry resolved once at startup.
    loader:
        Dataset loader.  Defaults to :class:`DatasetLoader`.
    ttl_seconds:
        Freshness window of the merged snapshot.
    clock:
        Time source for the cache, in seconds.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        *,
        loader: DatasetLoader | None = None,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._registry = registry
        self._loader = loader or DatasetLoader()
        self._cache = AggregationCache(self._compute, ttl_seconds=ttl_seconds, clock=clock)

    # ------------------------------------------------------------------
    # Snapshot lifecycle
    # ------------------------------------------------------------------

    def _compute(self) -> MergedDataset:
        descriptors = self._registry.discover_sources()
        loaded, failures = self._loader.load_all(descriptors)

        if not loaded:
            logger.error(
                "No performance source could be loaded (%d attempted): %s",
                len(descriptors),
                "; ".join(f"{f.source_name}: {f.error}" for f in failures),
            )
            raise PerformanceDataUnavailableError(
                f"No performance data available: all {len(descriptors)} source(s) failed to load."
            )

        if failures:
            logger.warning(
                "Merging %d of %d performance source(s); excluded: %s",
                len(loaded),
                len(descriptors),
                ", ".join(f.source_name for f in failures),
            )
        return merge_datasets(loaded, failures)

    def get_cache_entry(self) -> CacheEntry:
        return self._cache.get()

    def get_merged(self) -> MergedDataset:
        """
        Return the merged dataset, recomputing it when the cache is stale.

        Raises
        ------
        PerformanceDataUnavailableError
            If no source could be loaded.
        """

        return self._cache.get().snapshot

    def invalidate(self) -> None:
        """Force the next read to rediscover, reload and re-merge."""
        self._cache.invalidate()

    def refresh(self) -> MergedDataset:
        """
        Rebuild the snapshot now.

        On failure the previous snapshot stays in place and the error
        propagates.
        """

        return self._cache.refresh().snapshot

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def list_dates(self) -> list[str]:
        """Distinct dates in ascending order."""
        return self.get_merged().dates()

    def get_by_date(self, date: str) -> dict[str, float] | None:
        """
        Return the asset → PR mapping for *date*, or ``None`` when absent.
        """

        values = self.get_merged().pr_data.get(date)
        return dict(values) if values is not None else None

    def get_asset_history(self, asset_id: str) -> dict[str, float]:
        """
        Return the asset's PR on every date where it has a value.

        Keys are in ascending date order.  An unknown asset yields ``{}``.
        """

        merged = self.get_merged()
        history: dict[str, float] = {}
        for date_key in merged.dates():
            value = merged.pr_data[date_key].get(asset_id)
            if value is not None:
                history[date_key] = value
        return history

    def get_asset_summary(self, asset_id: str) -> AssetSummary | None:
        """
        Return lowest / highest value with their dates and the average over
        the asset's history, or ``None`` when the asset has no values.
        """

        history = self.get_asset_history(asset_id)
        if not history:
            return None

        points = list(history.items())
        lowest_date, lowest = min(points, key=lambda point: point[1])
        highest_date, highest = max(points, key=lambda point: point[1])
        return AssetSummary(
            lowest=lowest,
            lowest_date=lowest_date,
            highest=highest,
            highest_date=highest_date,
            average=sum(history.values()) / len(history),
        )

    def list_assets(self) -> list[str]:
        """Sorted distinct asset ids across all dates."""
        merged = self.get_merged()
        return sorted({asset_id for values in merged.pr_data.values() for asset_id in values})

    def get_merged_snapshot(self) -> dict[str, Any]:
        """
        Return the merged dataset and its metadata as plain JSON-ready data.
        """

        entry = self._cache.get()
        snapshot = entry.snapshot
        metadata = snapshot.metadata
        return {
            "pr_data": {
                date_key: dict(snapshot.pr_data[date_key]) for date_key in snapshot.dates()
            },
            "metadata": {
                "source_files": list(metadata.source_files),
                "failed_sources": list(metadata.failed_sources),
                "date_range": {
                    "earliest": metadata.earliest_date,
                    "latest": metadata.latest_date,
                },
                "total_dates": metadata.total_dates,
                "computed_at": datetime.fromtimestamp(entry.computed_at, tz=timezone.utc),
            },
        }


@lru_cache(maxsize=1)
def get_aggregation_service() -> PerformanceAggregationService:
    """
    Return the process-wide aggregation service built from settings.
    """

    settings = get_aggregation_settings()
    return PerformanceAggregationService(
        build_source_registry(settings),
        ttl_seconds=settings.cache_ttl_seconds,
    )
