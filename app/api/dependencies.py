"""
app/api/dependencies.py

Shared FastAPI dependencies and error translation.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from aggregation.errors import PerformanceDataUnavailableError
from app.services.aggregation_service import PerformanceAggregationService, get_aggregation_service
from app.services.insight_service import InsightService, get_insight_service


def get_performance_service() -> PerformanceAggregationService:
    """
    Provide the process-wide aggregation service.
    """

    return get_aggregation_service()


def get_insights_service() -> InsightService:
    """
    Provide the process-wide insight service.
    """

    return get_insight_service()


def data_unavailable(exc: PerformanceDataUnavailableError) -> HTTPException:
    """
    Map a total source outage onto HTTP 503.
    """

    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Performance data unavailable: {exc}",
    )
