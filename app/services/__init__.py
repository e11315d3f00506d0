"""
app/services package marker.
"""

from app.services.aggregation_service import (
    PerformanceAggregationService,
    get_aggregation_service,
)
from app.services.insight_service import InsightService, get_insight_service

__all__ = [
    "InsightService",
    "PerformanceAggregationService",
    "get_aggregation_service",
    "get_insight_service",
]
