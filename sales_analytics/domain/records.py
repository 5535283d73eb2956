"""
Domain Models

Core record, filter and derived-view types shared by the parser, the
dataset and the aggregation engine.

SalesRecord and FilterCriteria are immutable dataclasses; derived views are
pydantic models so they serialize straight out of the API.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict

from sales_analytics.errors import InvalidFilterError


class Metric(str, Enum):
    """Time series metrics ("orderCount" is accepted for ORDERS)"""
    REVENUE = "revenue"
    ORDERS = "orders"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str) and value.lower() in ("ordercount", "order_count"):
            return cls.ORDERS
        return None


class Granularity(str, Enum):
    """Time bucket widths"""
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class SalesRecord:
    """One validated commerce transaction"""
    id: str
    date: Optional[datetime]
    revenue: float
    order_count: int
    customer_id: str
    product_id: str
    category: str
    region: str
    product_name: Optional[str] = None

    def is_valid(self) -> bool:
        """Check the record invariant: required ids present, resolvable date, revenue >= 0"""
        return bool(
            self.id
            and self.date is not None
            and self.revenue >= 0
            and self.customer_id
            and self.product_id
            and self.category
            and self.region
        )


def _naive(value: Union[datetime, date], bound: time) -> datetime:
    if not isinstance(value, datetime):
        return datetime.combine(value, bound)
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive date range.

    Plain dates cover the whole day; aware datetimes are stored as naive UTC.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", _naive(self.start, time.min))
        object.__setattr__(self, "end", _naive(self.end, time.max))
        if self.start > self.end:
            raise InvalidFilterError(
                f"Date range start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    def contains(self, value: datetime) -> bool:
        return self.start <= value <= self.end


def _as_frozenset(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        return frozenset([values])
    return frozenset(values)


@dataclass(frozen=True)
class FilterCriteria:
    """
    Active filter state.

    Empty region/category sets mean "no restriction". customer_segments is
    carried for callers but does not restrict any record field.
    """
    date_range: DateRange
    regions: FrozenSet[str] = field(default_factory=frozenset)
    categories: FrozenSet[str] = field(default_factory=frozenset)
    customer_segments: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        for name in ("regions", "categories", "customer_segments"):
            object.__setattr__(self, name, _as_frozenset(getattr(self, name)))

    def merged(self, **partial: Any) -> "FilterCriteria":
        """
        Shallow-merge a partial update into a new FilterCriteria.

        Fields not supplied keep their current value. A ``date_range`` may be
        given as a DateRange or a (start, end) pair.

        Raises:
            InvalidFilterError: unknown field name or start after end
        """
        known = {f.name for f in fields(self)}
        unknown = set(partial) - known
        if unknown:
            raise InvalidFilterError(f"Unknown filter fields: {sorted(unknown)}")

        date_range = partial.get("date_range")
        if date_range is not None and not isinstance(date_range, DateRange):
            start, end = date_range
            partial["date_range"] = DateRange(start=start, end=end)
        elif "date_range" in partial and date_range is None:
            del partial["date_range"]

        return replace(self, **partial)

    def as_dict(self) -> dict:
        return {
            "date_range": {"start": self.date_range.start, "end": self.date_range.end},
            "regions": sorted(self.regions),
            "categories": sorted(self.categories),
            "customer_segments": sorted(self.customer_segments),
        }


@dataclass(frozen=True)
class ChartPoint:
    """Point fed to a chart renderer"""
    x: Union[datetime, float, int]
    y: float


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class _View(BaseModel):
    model_config = ConfigDict(frozen=True)


class PeriodComparison(_View):
    """Relative change against the previous period"""
    revenue: float
    orders: float
    customers: float


class DashboardMetrics(_View):
    """Headline dashboard numbers"""
    total_revenue: float
    total_orders: int
    average_order_value: float
    customer_count: int
    conversion_rate: float
    period_comparison: PeriodComparison


class ProductAggregate(_View):
    """Per-product rollup"""
    product_id: str
    name: str
    category: str
    total_revenue: float
    total_orders: int
    average_order_value: float
    conversion_rate: float


class RegionAggregate(_View):
    """Per-region rollup"""
    region: str
    revenue: float
    orders: int
    customers: int
    growth_rate: float


class CustomerSegment(_View):
    """Customer segment summary"""
    segment_id: str
    name: str
    customer_count: int
    total_revenue: float
    average_lifetime_value: float
    retention_rate: float


class TimeBucket(_View):
    """One time series bucket"""
    timestamp: datetime
    value: float
