"""
Sales Dataset

Owns the current record set and filter criteria and keeps every derived
view in step with them.

Each mutation eagerly recomputes the filtered view and all derived views
into a new immutable DatasetSnapshot, swaps it in under a single writer
lock, then notifies observers once. Readers always hold one snapshot, so
they never see metrics from old records combined with a new filter or the
other way round.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, Union
import threading

import httpx
import structlog

from sales_analytics.aggregation import DerivedViews, aggregate_time_series, compute_views
from sales_analytics.config import get_settings
from sales_analytics.domain.records import (
    ChartPoint,
    CustomerSegment,
    DashboardMetrics,
    FilterCriteria,
    Granularity,
    Metric,
    ProductAggregate,
    RegionAggregate,
    SalesRecord,
    TimeBucket,
)
from sales_analytics.ingestion import ParseResult, SalesCsvParser, parse_source, parse_url
from sales_analytics.ingestion.sources import TextSource
from sales_analytics.rendering import downsample, series_to_points
from .filters import apply_filters, default_filter

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DatasetSnapshot:
    """Records, filter and every derived view at one version"""
    version: int
    records: Tuple[SalesRecord, ...]
    filters: FilterCriteria
    filtered: Tuple[SalesRecord, ...]
    views: DerivedViews

    @property
    def metrics(self) -> DashboardMetrics:
        return self.views.metrics

    @property
    def products(self) -> List[ProductAggregate]:
        return self.views.products

    @property
    def regions(self) -> List[RegionAggregate]:
        return self.views.regions

    @property
    def segments(self) -> List[CustomerSegment]:
        return self.views.segments

    def time_series(
        self,
        metric: Union[Metric, str] = Metric.REVENUE,
        granularity: Union[Granularity, str] = Granularity.DAY,
    ) -> List[TimeBucket]:
        """Time series over this snapshot's filtered records"""
        return aggregate_time_series(self.filtered, metric, granularity)


Observer = Callable[[DatasetSnapshot], None]


class SalesDataset:
    """
    Filterable sales dataset with derived views.

    Records are replaced wholesale; filters are merged field by field.

    Example:
        dataset = SalesDataset()
        dataset.import_text(csv_text)
        dataset.update_filter(regions=["Europe"])
        print(dataset.snapshot().metrics.total_revenue)
    """

    def __init__(
        self,
        records: Optional[Iterable[SalesRecord]] = None,
        filters: Optional[FilterCriteria] = None,
        parser: Optional[SalesCsvParser] = None,
    ):
        self._lock = threading.RLock()
        self._observers: List[Observer] = []
        self._parser = parser or SalesCsvParser()
        self._snapshot = self._build_snapshot(
            version=0,
            records=tuple(records or ()),
            filters=filters or default_filter(),
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @staticmethod
    def _build_snapshot(
        version: int,
        records: Tuple[SalesRecord, ...],
        filters: FilterCriteria,
    ) -> DatasetSnapshot:
        filtered = tuple(apply_filters(records, filters))
        return DatasetSnapshot(
            version=version,
            records=records,
            filters=filters,
            filtered=filtered,
            views=compute_views(filtered),
        )

    def _commit(
        self,
        records: Tuple[SalesRecord, ...],
        filters: FilterCriteria,
        reason: str,
    ) -> DatasetSnapshot:
        """Recompute, swap in and announce a new snapshot"""
        with self._lock:
            snapshot = self._build_snapshot(self._snapshot.version + 1, records, filters)
            self._snapshot = snapshot

            logger.info(
                "Dataset updated",
                reason=reason,
                version=snapshot.version,
                records=len(snapshot.records),
                filtered=len(snapshot.filtered),
            )
            self._notify(snapshot)
        return snapshot

    def _notify(self, snapshot: DatasetSnapshot) -> None:
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception as e:
                logger.error(
                    "Dataset observer failed",
                    observer=getattr(observer, "__name__", repr(observer)),
                    version=snapshot.version,
                    error=str(e),
                )

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register an observer called with every new snapshot.

        Returns:
            Callable that removes the observer
        """
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def snapshot(self) -> DatasetSnapshot:
        """Current consistent snapshot"""
        return self._snapshot

    @property
    def records(self) -> Tuple[SalesRecord, ...]:
        return self._snapshot.records

    @property
    def filters(self) -> FilterCriteria:
        return self._snapshot.filters

    def filtered_records(self) -> Tuple[SalesRecord, ...]:
        """Records passing the current filter"""
        return self._snapshot.filtered

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def replace_records(self, records: Iterable[SalesRecord]) -> DatasetSnapshot:
        """Swap in a whole new record set"""
        records = tuple(records)
        with self._lock:
            return self._commit(records, self._snapshot.filters, "records_replaced")

    def update_filter(self, **partial) -> DatasetSnapshot:
        """
        Merge a partial filter update into the current criteria.

        Args:
            **partial: date_range, regions, categories and/or customer_segments

        Raises:
            InvalidFilterError: unknown field or inverted date range
        """
        with self._lock:
            filters = self._snapshot.filters.merged(**partial)
            return self._commit(self._snapshot.records, filters, "filter_updated")

    def reset_filter(self) -> DatasetSnapshot:
        """Restore the default filter"""
        with self._lock:
            return self._commit(self._snapshot.records, default_filter(), "filter_reset")

    def clear(self) -> DatasetSnapshot:
        """Drop all records"""
        return self.replace_records(())

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def import_text(self, text: str) -> ParseResult:
        """Parse CSV text and replace the record set with the result"""
        result = self._parser.parse(text)
        self.replace_records(result.records)
        return result

    async def import_source(self, source: TextSource) -> ParseResult:
        """
        Read, parse and load a local CSV source.

        An unreadable source empties the dataset and is reported as a
        source_fetch_failure diagnostic.
        """
        result = await parse_source(source, self._parser)
        self.replace_records(result.records)
        return result

    async def import_url(self, url: str, client: Optional[httpx.AsyncClient] = None) -> ParseResult:
        """Fetch, parse and load a remote CSV; fetch failures empty the dataset"""
        result = await parse_url(url, self._parser, client=client)
        self.replace_records(result.records)
        return result

    # ------------------------------------------------------------------
    # Series
    # ------------------------------------------------------------------

    def time_series(
        self,
        metric: Union[Metric, str] = Metric.REVENUE,
        granularity: Union[Granularity, str] = Granularity.DAY,
    ) -> List[TimeBucket]:
        """Time series over the current filtered records"""
        return self._snapshot.time_series(metric, granularity)

    def chart_series(
        self,
        metric: Union[Metric, str] = Metric.REVENUE,
        granularity: Union[Granularity, str] = Granularity.DAY,
        max_points: Optional[int] = None,
    ) -> List[ChartPoint]:
        """Time series as chart points, downsampled to max_points chunks"""
        if max_points is None:
            max_points = get_settings().chart.max_points
        return downsample(series_to_points(self.time_series(metric, granularity)), max_points)
