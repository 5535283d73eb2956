"""
Aggregation Module
"""
from .frames import records_to_frame
from .metrics import (
    PLACEHOLDER_CONVERSION_RATE,
    PLACEHOLDER_PERIOD_COMPARISON,
    PLACEHOLDER_SEGMENTS,
    DerivedViews,
    calculate_customer_segments,
    calculate_dashboard_metrics,
    calculate_product_metrics,
    calculate_regional_performance,
    compute_views,
    top_products,
)
from .timeseries import aggregate_frame, aggregate_time_series

__all__ = [
    "records_to_frame",
    "PLACEHOLDER_CONVERSION_RATE",
    "PLACEHOLDER_PERIOD_COMPARISON",
    "PLACEHOLDER_SEGMENTS",
    "DerivedViews",
    "calculate_customer_segments",
    "calculate_dashboard_metrics",
    "calculate_product_metrics",
    "calculate_regional_performance",
    "compute_views",
    "top_products",
    "aggregate_frame",
    "aggregate_time_series",
]
