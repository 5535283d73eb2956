"""
Record frames

Conversion of SalesRecord sequences into Polars DataFrames for aggregation.
"""

from typing import Sequence

import polars as pl

from sales_analytics.domain.records import SalesRecord

RECORD_SCHEMA = {
    "id": pl.Utf8,
    "date": pl.Datetime("us"),
    "revenue": pl.Float64,
    "order_count": pl.Int64,
    "customer_id": pl.Utf8,
    "product_id": pl.Utf8,
    "product_name": pl.Utf8,
    "category": pl.Utf8,
    "region": pl.Utf8,
}


def records_to_frame(records: Sequence[SalesRecord]) -> pl.DataFrame:
    """Build a DataFrame with one row per record, in record order"""
    if not records:
        return pl.DataFrame(schema=RECORD_SCHEMA)

    return pl.DataFrame(
        {
            "id": [r.id for r in records],
            "date": [r.date for r in records],
            "revenue": [float(r.revenue) for r in records],
            "order_count": [r.order_count for r in records],
            "customer_id": [r.customer_id for r in records],
            "product_id": [r.product_id for r in records],
            "product_name": [r.product_name for r in records],
            "category": [r.category for r in records],
            "region": [r.region for r in records],
        },
        schema=RECORD_SCHEMA,
    )
