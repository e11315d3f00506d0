"""
aggregation/loader.py

Parses one raw performance source into the normalized
``date → (asset_id → PR)`` shape.

Failure isolation
-----------------
Each source is loaded on its own.  A source that cannot be fetched or whose
payload is structurally invalid yields a :class:`LoadFailure`; it is logged
and skipped, and never prevents the remaining sources from loading.

Entry-level parsing is lenient: a date key that is not a ``YYYY-MM-DD``
calendar date, a per-date value that is not a mapping, or a PR value that is
not a finite number is dropped and counted, not raised.  A date left with no
valid asset values is dropped as well.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from aggregation.errors import SourceLoadError
from app.domain.performance import (
    DataSource,
    LoadedDataset,
    LoadFailure,
    PRData,
    is_iso_date,
    parse_pr_value,
)
from app.logging_utils import log_event
from sources.base import SourceDescriptor

logger = logging.getLogger(__name__)


def normalize_pr_data(raw_pr_data: Mapping[str, Any]) -> tuple[PRData, int]:
    """
    Keep only well-formed (date, asset, value) entries.

    Returns
    -------
    tuple
        ``(pr_data, dropped_entries)``.
    """

    normalized: PRData = {}
    dropped = 0

    for date_key, asset_values in raw_pr_data.items():
        if not is_iso_date(date_key) or not isinstance(asset_values, Mapping):
            dropped += len(asset_values) if isinstance(asset_values, Mapping) else 1
            continue

        values: dict[str, float] = {}
        for asset_id, raw_value in asset_values.items():
            value = parse_pr_value(raw_value)
            if not isinstance(asset_id, str) or not asset_id or value is None:
                dropped += 1
                continue
            values[asset_id] = value

        if values:
            normalized[date_key] = values

    return normalized, dropped


class DatasetLoader:
    """
    Loads source descriptors into :class:`LoadedDataset` objects.
    """

    def load(self, descriptor: SourceDescriptor) -> LoadedDataset | LoadFailure:
        """
        Fetch and normalize a single source.

        Never raises for source-level problems; they are returned as a
        :class:`LoadFailure`.
        """

        try:
            payload = descriptor.provider.fetch()
            source = DataSource(
                name=descriptor.name,
                origin=descriptor.origin,
                rank=descriptor.rank,
                payload=payload,
            )
            raw_pr_data = source.payload.get("pr_data")
            if not isinstance(raw_pr_data, Mapping):
                raise SourceLoadError(f"{source.name}: payload has no 'pr_data' mapping.")
            pr_data, dropped = normalize_pr_data(raw_pr_data)
        except (SourceLoadError, OSError, ValueError, TypeError) as exc:
            log_event(
                logger,
                logging.WARNING,
                "source_load_failed",
                source=descriptor.name,
                origin=descriptor.origin,
                rank=descriptor.rank,
                error=str(exc),
            )
            return LoadFailure(source_name=descriptor.name, rank=descriptor.rank, error=str(exc))

        if dropped:
            logger.debug(
                "Source %s: dropped %d unparseable entr%s",
                descriptor.name,
                dropped,
                "y" if dropped == 1 else "ies",
            )
        logger.debug(
            "Source %s loaded rank=%d dates=%d",
            descriptor.name,
            descriptor.rank,
            len(pr_data),
        )
        return LoadedDataset(
            source_name=descriptor.name,
            rank=descriptor.rank,
            pr_data=pr_data,
            dropped_entries=dropped,
        )

    def load_all(
        self,
        descriptors: Iterable[SourceDescriptor],
    ) -> tuple[list[LoadedDataset], list[LoadFailure]]:
        """
        Load every descriptor independently, preserving discovery order.
        """

        loaded: list[LoadedDataset] = []
        failures: list[LoadFailure] = []
        for descriptor in descriptors:
            result = self.load(descriptor)
            if isinstance(result, LoadFailure):
                failures.append(result)
            else:
                loaded.append(result)
        return loaded, failures
