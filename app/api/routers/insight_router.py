"""
app/api/routers/insight_router.py

Insight endpoints.

POST /insights                    – explicit asset, current PR and history
GET  /assets/{asset_id}/insights  – inputs resolved from the merged dataset

A request without an asset or current value is not an error: the response
is an empty list.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from aggregation.errors import PerformanceDataUnavailableError
from app.api.dependencies import data_unavailable, get_insights_service
from app.services.insight_service import InsightService
from insights.schema import Insight

logger = logging.getLogger(__name__)

router = APIRouter(tags=["insights"])


# ---------------------------------------------------------------------------
# Request schema
# ---------------------------------------------------------------------------


class InsightRequest(BaseModel):
    asset_id: str | None = None
    current_pr: float | None = None
    performance_history: dict[str, Any] = {}
    reference_date: str | None = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("/insights", response_model=list[Insight])
def generate_insights(
    body: InsightRequest,
    service: InsightService = Depends(get_insights_service),
) -> list[Insight]:
    """
    Generate insights from caller-supplied inputs.
    """
    return service.get_insights(
        body.asset_id,
        body.current_pr,
        body.performance_history,
        body.reference_date,
    )


@router.get("/assets/{asset_id}/insights", response_model=list[Insight])
def get_asset_insights(
    asset_id: str,
    date: str | None = None,
    service: InsightService = Depends(get_insights_service),
) -> list[Insight]:
    """
    Generate insights for an asset using the merged dataset.

    ``date`` selects the current PR; it defaults to the asset's latest date.
    """
    try:
        insights = service.get_asset_insights(asset_id, date)
    except PerformanceDataUnavailableError as exc:
        raise data_unavailable(exc) from exc

    logger.info(
        "Insights generated asset=%r date=%r count=%d", asset_id, date, len(insights)
    )
    return insights
