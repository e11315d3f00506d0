"""
app/api/routers/performance_router.py

Read-only endpoints over the merged performance dataset.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from aggregation.errors import PerformanceDataUnavailableError
from app.api.dependencies import data_unavailable, get_performance_service
from app.services.aggregation_service import PerformanceAggregationService

router = APIRouter(tags=["performance"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class DateRange(BaseModel):
    earliest: str | None
    latest: str | None


class SnapshotMetadata(BaseModel):
    source_files: list[str]
    failed_sources: list[str] = []
    date_range: DateRange
    total_dates: int
    computed_at: datetime


class PerformanceSnapshotResponse(BaseModel):
    pr_data: dict[str, dict[str, float]]
    metadata: SnapshotMetadata


class DatesResponse(BaseModel):
    dates: list[str]


class DatePerformanceResponse(BaseModel):
    date: str
    data: dict[str, float]


class AssetsResponse(BaseModel):
    assets: list[str]


class AssetSummaryResponse(BaseModel):
    lowest: float
    lowest_date: str
    highest: float
    highest_date: str
    average: float


class AssetHistoryResponse(BaseModel):
    asset_id: str
    performance_history: dict[str, float]
    summary: AssetSummaryResponse | None = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/performance", response_model=PerformanceSnapshotResponse)
def get_performance(
    service: PerformanceAggregationService = Depends(get_performance_service),
) -> PerformanceSnapshotResponse:
    """
    Return the merged dataset from all sources with its metadata.
    """
    try:
        snapshot = service.get_merged_snapshot()
    except PerformanceDataUnavailableError as exc:
        raise data_unavailable(exc) from exc
    return PerformanceSnapshotResponse.model_validate(snapshot)


@router.get("/dates", response_model=DatesResponse)
def list_dates(
    service: PerformanceAggregationService = Depends(get_performance_service),
) -> DatesResponse:
    try:
        return DatesResponse(dates=service.list_dates())
    except PerformanceDataUnavailableError as exc:
        raise data_unavailable(exc) from exc


@router.get("/performance/{date}", response_model=DatePerformanceResponse)
def get_performance_for_date(
    date: str,
    service: PerformanceAggregationService = Depends(get_performance_service),
) -> DatePerformanceResponse:
    """
    Return asset → PR values for one date.

    Raises HTTP 404 when the date is absent from the merged dataset.
    """
    try:
        data = service.get_by_date(date)
    except PerformanceDataUnavailableError as exc:
        raise data_unavailable(exc) from exc

    if data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Date not found")
    return DatePerformanceResponse(date=date, data=data)


@router.get("/assets", response_model=AssetsResponse)
def list_assets(
    service: PerformanceAggregationService = Depends(get_performance_service),
) -> AssetsResponse:
    try:
        return AssetsResponse(assets=service.list_assets())
    except PerformanceDataUnavailableError as exc:
        raise data_unavailable(exc) from exc


@router.get("/assets/{asset_id}/history", response_model=AssetHistoryResponse)
def get_asset_history(
    asset_id: str,
    service: PerformanceAggregationService = Depends(get_performance_service),
) -> AssetHistoryResponse:
    """
    Return the asset's PR across every date where it has a value, with
    lowest / highest / average summary statistics.

    Raises HTTP 404 when the asset has no data at all.
    """
    try:
        history = service.get_asset_history(asset_id)
        summary = service.get_asset_summary(asset_id)
    except PerformanceDataUnavailableError as exc:
        raise data_unavailable(exc) from exc

    if not history:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    return AssetHistoryResponse(
        asset_id=asset_id,
        performance_history=history,
        summary=AssetSummaryResponse.model_validate(asdict(summary)) if summary else None,
    )
