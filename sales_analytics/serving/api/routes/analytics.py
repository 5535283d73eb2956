"""
Analytics API Endpoints

Derived views over the current filtered dataset.
"""

from datetime import datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
import structlog

from sales_analytics.aggregation import top_products
from sales_analytics.config import get_settings
from sales_analytics.dataset import SalesDataset
from sales_analytics.domain import (
    CustomerSegment,
    DashboardMetrics,
    Granularity,
    Metric,
    ProductAggregate,
    RegionAggregate,
)
from sales_analytics.rendering import downsample, series_to_points
from sales_analytics.serving.api.dependencies import get_dataset

router = APIRouter()
logger = structlog.get_logger(__name__)


class ChartPointResponse(BaseModel):
    """Chart point"""
    x: Union[datetime, float]
    y: float


class TimeSeriesResponse(BaseModel):
    """Downsampled chart series"""
    version: int
    metric: Metric
    granularity: Granularity
    total_buckets: int
    points: List[ChartPointResponse]


@router.get("/metrics", response_model=DashboardMetrics)
async def get_dashboard_metrics(dataset: SalesDataset = Depends(get_dataset)) -> DashboardMetrics:
    """Headline metrics for the filtered dataset"""
    return dataset.snapshot().metrics


@router.get("/products", response_model=List[ProductAggregate])
async def get_products(
    limit: int = Query(10, ge=1, le=1000),
    dataset: SalesDataset = Depends(get_dataset),
) -> List[ProductAggregate]:
    """Top products by revenue"""
    return top_products(dataset.snapshot().products, limit)


@router.get("/regions", response_model=List[RegionAggregate])
async def get_regions(dataset: SalesDataset = Depends(get_dataset)) -> List[RegionAggregate]:
    """Regional performance, highest revenue first"""
    return sorted(dataset.snapshot().regions, key=lambda r: r.revenue, reverse=True)


@router.get("/segments", response_model=List[CustomerSegment])
async def get_segments(dataset: SalesDataset = Depends(get_dataset)) -> List[CustomerSegment]:
    """Customer segments (illustrative placeholder values)"""
    return dataset.snapshot().segments


@router.get("/timeseries", response_model=TimeSeriesResponse)
async def get_time_series(
    metric: Metric = Metric.REVENUE,
    granularity: Granularity = Granularity.DAY,
    max_points: Optional[int] = Query(None, ge=1),
    dataset: SalesDataset = Depends(get_dataset),
) -> TimeSeriesResponse:
    """
    Time series of a metric, downsampled for charting.
    """
    max_points = max_points or get_settings().chart.max_points
    logger.info(
        "get_time_series called",
        metric=metric.value,
        granularity=granularity.value,
        max_points=max_points,
    )

    snapshot = dataset.snapshot()
    buckets = snapshot.time_series(metric, granularity)
    try:
        points = downsample(series_to_points(buckets), max_points)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return TimeSeriesResponse(
        version=snapshot.version,
        metric=metric,
        granularity=granularity,
        total_buckets=len(buckets),
        points=[ChartPointResponse(x=p.x, y=p.y) for p in points],
    )
