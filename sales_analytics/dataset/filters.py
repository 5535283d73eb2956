"""
Record filtering

Filter predicate and default filter construction.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from sales_analytics.config import get_settings
from sales_analytics.domain.records import DateRange, FilterCriteria, SalesRecord


def default_filter(now: Optional[datetime] = None, window_days: Optional[int] = None) -> FilterCriteria:
    """Last `window_days` days up to now, no region/category/segment restriction"""
    now = now or datetime.now()
    if window_days is None:
        window_days = get_settings().dataset.default_window_days
    return FilterCriteria(date_range=DateRange(start=now - timedelta(days=window_days), end=now))


def matches(record: SalesRecord, criteria: FilterCriteria) -> bool:
    """Inclusive date range, then region and category membership when restricted"""
    if record.date is None or not criteria.date_range.contains(record.date):
        return False
    if criteria.regions and record.region not in criteria.regions:
        return False
    if criteria.categories and record.category not in criteria.categories:
        return False
    return True


def apply_filters(records: Sequence[SalesRecord], criteria: FilterCriteria) -> List[SalesRecord]:
    """Records passing the criteria, in original order"""
    return [record for record in records if matches(record, criteria)]
