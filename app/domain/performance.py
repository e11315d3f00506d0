"""
app/domain/performance.py

Domain models shared by the aggregation pipeline.

Shapes
------
A normalized dataset maps an ISO-8601 date string to a mapping of asset id
to Performance Ratio::

    {"2024-08-01": {"L17_LT1_INV1": 0.0095, "L17_LT1_INV2": 0.0091}}

Every model here is frozen.  The mappings they carry are plain dicts, so
callers handing data outward must copy them rather than expose the cached
instance.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

PRData = dict[str, dict[str, float]]

_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_pr_value(raw: object) -> float | None:
    """
    Coerce one raw PR entry into a finite float.

    Accepts ints, floats and numeric strings.  Returns ``None`` for anything
    else, including booleans, NaN and infinities.
    """

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def is_iso_date(raw: object) -> bool:
    """
    Return True when *raw* is a ``YYYY-MM-DD`` calendar date string.
    """

    if not isinstance(raw, str) or not _ISO_DATE_PATTERN.match(raw):
        return False
    try:
        date.fromisoformat(raw)
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class DataSource:
    """
    One raw dataset as fetched from its provider.
    """

    name: str
    origin: str
    rank: int
    payload: Mapping[str, Any]


@dataclass(frozen=True)
class LoadedDataset:
    """
    A source successfully parsed into the normalized ``date → asset → PR`` shape.
    """

    source_name: str
    rank: int
    pr_data: PRData
    dropped_entries: int = 0


@dataclass(frozen=True)
class LoadFailure:
    """
    A source that could not be read or parsed.
    """

    source_name: str
    rank: int
    error: str


@dataclass(frozen=True)
class MergedMetadata:
    """
    Metadata derived after merging.

    ``source_files`` lists successfully loaded sources in rank order;
    sources that failed to load are reported in ``failed_sources`` only.
    """

    source_files: tuple[str, ...]
    earliest_date: str | None
    latest_date: str | None
    total_dates: int
    failed_sources: tuple[str, ...] = ()


@dataclass(frozen=True)
class MergedDataset:
    """
    Unified dataset produced by the merger.
    """

    pr_data: PRData
    metadata: MergedMetadata

    def dates(self) -> list[str]:
        """Distinct dates in ascending order."""
        return sorted(self.pr_data)


@dataclass(frozen=True)
class CacheEntry:
    """
    Memoized merged snapshot.

    ``computed_at`` and ``ttl_seconds`` are expressed in the units of the
    cache clock (seconds).
    """

    snapshot: MergedDataset
    computed_at: float
    ttl_seconds: float

    def is_fresh(self, now: float) -> bool:
        return now - self.computed_at < self.ttl_seconds


@dataclass(frozen=True)
class AssetSummary:
    """
    Extremes and mean of one asset's PR history.

    On ties the earliest date is reported.
    """

    lowest: float
    lowest_date: str
    highest: float
    highest_date: str
    average: float
