"""
app/services/insight_service.py

Connects the aggregation service to the insight generator.

Two entry points:

    get_insights        – caller supplies asset, current PR and history
    get_asset_insights  – current PR and history are read from the merged
                          dataset for a given (or the latest) date
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Mapping

from app.services.aggregation_service import PerformanceAggregationService, get_aggregation_service
from insights.generator import InsightGenerator
from insights.schema import Insight

logger = logging.getLogger(__name__)


class InsightService:
    """
    Produces insights for assets in the merged performance dataset.
    """

    def __init__(
        self,
        aggregation: PerformanceAggregationService,
        *,
        generator: InsightGenerator | None = None,
    ) -> None:
        self._aggregation = aggregation
        self._generator = generator or InsightGenerator()

    def get_insights(
        self,
        asset_id: str | None,
        current_pr: float | None,
        history: Mapping[str, object] | None,
        reference_date: str | None = None,
    ) -> list[Insight]:
        return self._generator.generate(asset_id, current_pr, history, reference_date)

    def get_asset_insights(self, asset_id: str, date: str | None = None) -> list[Insight]:
        """
        Generate insights for *asset_id* from the merged dataset.

        ``current_pr`` is the asset's value on *date*; without a date, the
        latest date on which the asset has a value is used.  When the asset
        has no value there, the result is ``[]``.
        """

        history = self._aggregation.get_asset_history(asset_id)
        reference_date = date if date is not None else next(reversed(history), None)

        current_pr = history.get(reference_date) if reference_date is not None else None
        if current_pr is None:
            logger.debug(
                "No current PR for asset=%r date=%r; returning no insights", asset_id, reference_date
            )
            return []

        return self.get_insights(asset_id, current_pr, history, reference_date)


@lru_cache(maxsize=1)
def get_insight_service() -> InsightService:
    """
    Return the process-wide insight service.
    """

    return InsightService(get_aggregation_service())
