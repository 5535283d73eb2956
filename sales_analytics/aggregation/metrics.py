"""
Aggregation Engine

Pure functions from a filtered record set to each derived view:
- Dashboard metrics
- Product rollup
- Region rollup
- Customer segments

Conversion rates, period comparison, growth rates and customer segments are
PLACEHOLDERS. The input carries no traffic, prior-period or lifetime data,
so these values are fixed illustrative constants and are not derived from
the records.
"""

from dataclasses import dataclass
from typing import List, Sequence

import polars as pl
import structlog

from sales_analytics.domain.records import (
    CustomerSegment,
    DashboardMetrics,
    PeriodComparison,
    ProductAggregate,
    RegionAggregate,
    SalesRecord,
)
from .frames import records_to_frame

logger = structlog.get_logger(__name__)


# =============================================================================
# PLACEHOLDER ANALYTICS (not data-derived)
# =============================================================================

PLACEHOLDER_CONVERSION_RATE = 0.045
PLACEHOLDER_PERIOD_COMPARISON = PeriodComparison(revenue=0.12, orders=0.08, customers=0.15)
PLACEHOLDER_PRODUCT_CONVERSION_RATE = 0.05
PLACEHOLDER_GROWTH_RATE = 0.10

PLACEHOLDER_SEGMENTS = [
    CustomerSegment(
        segment_id="segment_0",
        name="High Value",
        customer_count=150,
        total_revenue=75000.0,
        average_lifetime_value=5000.0,
        retention_rate=0.88,
    ),
    CustomerSegment(
        segment_id="segment_1",
        name="Regular",
        customer_count=600,
        total_revenue=48000.0,
        average_lifetime_value=800.0,
        retention_rate=0.72,
    ),
    CustomerSegment(
        segment_id="segment_2",
        name="New Customer",
        customer_count=400,
        total_revenue=12000.0,
        average_lifetime_value=300.0,
        retention_rate=0.65,
    ),
    CustomerSegment(
        segment_id="segment_3",
        name="At Risk",
        customer_count=200,
        total_revenue=10000.0,
        average_lifetime_value=500.0,
        retention_rate=0.60,
    ),
]


def calculate_dashboard_metrics(frame: pl.DataFrame) -> DashboardMetrics:
    """
    Headline metrics for a filtered frame.

    total_orders counts records, not the sum of order_count.
    """
    total_orders = frame.height
    total_revenue = float(frame["revenue"].sum()) if total_orders else 0.0
    customer_count = frame["customer_id"].n_unique() if total_orders else 0

    return DashboardMetrics(
        total_revenue=total_revenue,
        total_orders=total_orders,
        average_order_value=total_revenue / total_orders if total_orders > 0 else 0.0,
        customer_count=customer_count,
        conversion_rate=PLACEHOLDER_CONVERSION_RATE,
        period_comparison=PLACEHOLDER_PERIOD_COMPARISON,
    )


def calculate_product_metrics(frame: pl.DataFrame) -> List[ProductAggregate]:
    """
    Per-product rollup keyed by product_id, in first-seen order.

    The name is the first non-empty product_name seen for the product,
    otherwise "Product {product_id}". The category comes from the first record.
    """
    if frame.is_empty():
        return []

    rollup = frame.group_by("product_id", maintain_order=True).agg(
        pl.col("product_name")
        .filter(pl.col("product_name").str.len_chars() > 0)
        .first()
        .alias("product_name"),
        pl.col("category").first(),
        pl.col("revenue").sum().alias("total_revenue"),
        pl.len().alias("total_orders"),
    )

    return [
        ProductAggregate(
            product_id=row["product_id"],
            name=row["product_name"] or f"Product {row['product_id']}",
            category=row["category"],
            total_revenue=row["total_revenue"],
            total_orders=row["total_orders"],
            average_order_value=row["total_revenue"] / row["total_orders"],
            conversion_rate=PLACEHOLDER_PRODUCT_CONVERSION_RATE,
        )
        for row in rollup.iter_rows(named=True)
    ]


def calculate_regional_performance(frame: pl.DataFrame) -> List[RegionAggregate]:
    """Per-region revenue, record count and distinct customers, in first-seen order"""
    if frame.is_empty():
        return []

    rollup = frame.group_by("region", maintain_order=True).agg(
        pl.col("revenue").sum().alias("revenue"),
        pl.len().alias("orders"),
        pl.col("customer_id").n_unique().alias("customers"),
    )

    return [
        RegionAggregate(
            region=row["region"],
            revenue=row["revenue"],
            orders=row["orders"],
            customers=row["customers"],
            growth_rate=PLACEHOLDER_GROWTH_RATE,
        )
        for row in rollup.iter_rows(named=True)
    ]


def calculate_customer_segments(frame: pl.DataFrame) -> List[CustomerSegment]:
    """
    The four fixed customer segments.

    Returned unchanged regardless of input; see the module docstring.
    """
    return list(PLACEHOLDER_SEGMENTS)


def top_products(products: Sequence[ProductAggregate], limit: int = 10) -> List[ProductAggregate]:
    """Presentation helper: products by revenue, highest first"""
    return sorted(products, key=lambda p: p.total_revenue, reverse=True)[:limit]


@dataclass(frozen=True)
class DerivedViews:
    """Every record-derived view, computed from one record set"""
    metrics: DashboardMetrics
    products: List[ProductAggregate]
    regions: List[RegionAggregate]
    segments: List[CustomerSegment]


def compute_views(records: Sequence[SalesRecord]) -> DerivedViews:
    """Recompute all derived views from a filtered record set"""
    frame = records_to_frame(records)
    views = DerivedViews(
        metrics=calculate_dashboard_metrics(frame),
        products=calculate_product_metrics(frame),
        regions=calculate_regional_performance(frame),
        segments=calculate_customer_segments(frame),
    )
    logger.debug(
        "Derived views computed",
        records=frame.height,
        products=len(views.products),
        regions=len(views.regions),
    )
    return views
