"""
aggregation/merger.py

Combines normalized datasets into one :class:`MergedDataset`.

Datasets are applied in discovery order.  For each date the per-asset maps
are unioned into the accumulator; a later dataset overwrites any
(date, asset) value set by an earlier one.  Metadata is derived after the
merge: dates are ISO-8601, so lexicographic min/max equal chronological
min/max.
"""

from __future__ import annotations

from typing import Sequence

from app.domain.performance import LoadedDataset, LoadFailure, MergedDataset, MergedMetadata, PRData


def merge_datasets(
    datasets: Sequence[LoadedDataset],
    failures: Sequence[LoadFailure] = (),
) -> MergedDataset:
    """
    Merge *datasets* in the order given.

    Parameters
    ----------
    datasets:
        Successfully loaded datasets, lowest override rank first.
    failures:
        Sources that failed to load; reported in metadata only.
    """

    merged: PRData = {}
    for dataset in datasets:
        for date_key, asset_values in dataset.pr_data.items():
            merged.setdefault(date_key, {}).update(asset_values)

    dates = sorted(merged)
    metadata = MergedMetadata(
        source_files=tuple(dataset.source_name for dataset in datasets),
        earliest_date=dates[0] if dates else None,
        latest_date=dates[-1] if dates else None,
        total_dates=len(dates),
        failed_sources=tuple(failure.source_name for failure in failures),
    )
    return MergedDataset(pr_data=merged, metadata=metadata)
