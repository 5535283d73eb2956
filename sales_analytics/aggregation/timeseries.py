"""
Time series aggregation

Buckets filtered records by truncated timestamp. Weeks start on Monday.
"""

from typing import List, Sequence, Union

import polars as pl

from sales_analytics.domain.records import Granularity, Metric, SalesRecord, TimeBucket
from .frames import records_to_frame


def _bucket_expr(granularity: Granularity) -> pl.Expr:
    date = pl.col("date")
    if granularity == Granularity.HOUR:
        return date.dt.truncate("1h")
    if granularity == Granularity.DAY:
        return date.dt.truncate("1d")
    if granularity == Granularity.WEEK:
        # weekday(): Monday=1 .. Sunday=7
        return date.dt.truncate("1d") - pl.duration(days=date.dt.weekday().cast(pl.Int64) - 1)
    if granularity == Granularity.MONTH:
        return date.dt.truncate("1mo")
    raise ValueError(f"Unsupported granularity: {granularity}")


def aggregate_frame(
    frame: pl.DataFrame,
    metric: Union[Metric, str] = Metric.REVENUE,
    granularity: Union[Granularity, str] = Granularity.DAY,
) -> List[TimeBucket]:
    """
    Aggregate a record frame into ascending time buckets.

    Args:
        frame: Frame built by records_to_frame
        metric: revenue sums revenue, orders counts records
        granularity: hour, day, week or month

    Returns:
        One TimeBucket per distinct truncated timestamp, sorted ascending
    """
    metric = Metric(metric)
    granularity = Granularity(granularity)

    if frame.is_empty():
        return []

    if metric == Metric.REVENUE:
        value = pl.col("revenue").sum()
    else:
        value = pl.len()

    buckets = (
        frame.group_by(_bucket_expr(granularity).alias("timestamp"))
        .agg(value.cast(pl.Float64).alias("value"))
        .sort("timestamp")
    )

    return [
        TimeBucket(timestamp=row["timestamp"], value=row["value"])
        for row in buckets.iter_rows(named=True)
    ]


def aggregate_time_series(
    records: Sequence[SalesRecord],
    metric: Union[Metric, str] = Metric.REVENUE,
    granularity: Union[Granularity, str] = Granularity.DAY,
) -> List[TimeBucket]:
    """Time series of a metric over a filtered record set"""
    return aggregate_frame(records_to_frame(records), metric, granularity)
