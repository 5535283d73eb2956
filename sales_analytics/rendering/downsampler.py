"""
Chart Downsampler

Reduces a point series to a bounded number of representative points while
keeping each chunk's boundaries and visual extrema.
"""

import math
from typing import Dict, List, Sequence

import numpy as np
import structlog

from sales_analytics.domain.records import ChartPoint, TimeBucket

logger = structlog.get_logger(__name__)


def series_to_points(buckets: Sequence[TimeBucket]) -> List[ChartPoint]:
    """Convert time buckets into chart points"""
    return [ChartPoint(x=bucket.timestamp, y=bucket.value) for bucket in buckets]


def downsample(points: Sequence[ChartPoint], max_points: int) -> List[ChartPoint]:
    """
    Reduce points to at most 4 representatives per chunk.

    Series of ``max_points`` or fewer are returned unchanged. Otherwise the
    series is cut into consecutive chunks of ``ceil(n / max_points)`` and
    each chunk contributes its first point, its minimum, its maximum and its
    last point, each chunk-local index at most once. Representatives are
    emitted in that role order, so a chunk's minimum precedes its maximum
    even when it occurs later in time.

    Args:
        points: Ordered series
        max_points: Target number of chunks

    Returns:
        Between 1 and 4 * max_points points

    Raises:
        ValueError: max_points is less than 1
    """
    if max_points < 1:
        raise ValueError(f"max_points must be at least 1, got {max_points}")

    total = len(points)
    if total <= max_points:
        return list(points)

    chunk_size = math.ceil(total / max_points)
    values = np.fromiter((p.y for p in points), dtype=np.float64, count=total)
    reduced: List[ChartPoint] = []

    for start in range(0, total, chunk_size):
        end = min(start + chunk_size, total)
        chunk_values = values[start:end]

        # dict keeps insertion order and drops repeated indices
        selected: Dict[int, None] = dict.fromkeys([
            0,
            int(np.argmin(chunk_values)),
            int(np.argmax(chunk_values)),
            end - start - 1,
        ])
        reduced.extend(points[start + index] for index in selected)

    logger.debug(
        "Series downsampled",
        input_points=total,
        output_points=len(reduced),
        chunk_size=chunk_size,
    )
    return reduced
