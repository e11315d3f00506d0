"""
app/domain package marker.
"""

from app.domain.performance import (
    AssetSummary,
    CacheEntry,
    DataSource,
    LoadedDataset,
    LoadFailure,
    MergedDataset,
    MergedMetadata,
)

__all__ = [
    "AssetSummary",
    "CacheEntry",
    "DataSource",
    "LoadFailure",
    "LoadedDataset",
    "MergedDataset",
    "MergedMetadata",
]
