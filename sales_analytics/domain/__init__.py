"""
Domain Models Module
"""
from .records import (
    ChartPoint,
    CustomerSegment,
    DashboardMetrics,
    DateRange,
    FilterCriteria,
    Granularity,
    Metric,
    PeriodComparison,
    ProductAggregate,
    RegionAggregate,
    SalesRecord,
    TimeBucket,
)

__all__ = [
    "ChartPoint",
    "CustomerSegment",
    "DashboardMetrics",
    "DateRange",
    "FilterCriteria",
    "Granularity",
    "Metric",
    "PeriodComparison",
    "ProductAggregate",
    "RegionAggregate",
    "SalesRecord",
    "TimeBucket",
]
