"""Tide curve math.

Provides:
- interpolate: cosine-eased height estimate at an arbitrary time
- forecast_series: fixed-cadence point queries over a forward window
- densify: extra eased points between anchors for charting

Tides are close to sinusoidal between a high and the following low, so
heights between two anchors follow half a cosine period instead of a
straight line:

    e(f) = (1 - cos(f * pi)) / 2
    h    = h1 + (h2 - h1) * e(f)
"""

from __future__ import annotations

import bisect
import logging
import math
from datetime import datetime, timedelta
from typing import List, Sequence, Tuple

from .data_schema import InterpolatedPoint, TidalSample
from .exceptions import InsufficientDataError

_LOGGER = logging.getLogger(__name__)


def ease(fraction: float) -> float:
    """Cosine easing on [0, 1]."""
    fraction = max(0.0, min(1.0, fraction))
    return (1.0 - math.cos(fraction * math.pi)) / 2.0


def _segment_rising(first: TidalSample, second: TidalSample) -> bool:
    return second.height > first.height


def interpolate(series: Sequence[TidalSample], query: datetime) -> InterpolatedPoint:
    """Estimate the tide height at `query` from an ordered series.

    Queries outside the series clamp to the nearest edge sample and take
    their direction from the edge segment. A query equal to a sample
    timestamp returns that sample's height.
    """
    if not series:
        raise InsufficientDataError("Cannot interpolate an empty tide series")

    if len(series) == 1:
        return InterpolatedPoint(timestamp=query, height=series[0].height, is_rising=True)

    first, last = series[0], series[-1]
    if query <= first.timestamp:
        return InterpolatedPoint(
            timestamp=query,
            height=first.height,
            is_rising=_segment_rising(series[0], series[1]),
        )
    if query >= last.timestamp:
        return InterpolatedPoint(
            timestamp=query,
            height=last.height,
            is_rising=_segment_rising(series[-2], series[-1]),
        )

    timestamps = [s.timestamp for s in series]
    idx = bisect.bisect_left(timestamps, query)

    # exact anchor: direction of the segment leaving it (idx < len - 1 here)
    if timestamps[idx] == query:
        return InterpolatedPoint(
            timestamp=query,
            height=series[idx].height,
            is_rising=_segment_rising(series[idx], series[idx + 1]),
        )

    before, after = series[idx - 1], series[idx]
    span = (after.timestamp - before.timestamp).total_seconds()
    fraction = (query - before.timestamp).total_seconds() / span
    height = before.height + (after.height - before.height) * ease(fraction)

    low, high = min(before.height, after.height), max(before.height, after.height)
    height = max(low, min(high, height))

    return InterpolatedPoint(
        timestamp=query,
        height=height,
        is_rising=_segment_rising(before, after),
    )


def forecast_series(
    series: Sequence[TidalSample],
    start: datetime,
    hours: int = 24,
    step: timedelta = timedelta(hours=1),
) -> Tuple[InterpolatedPoint, ...]:
    """Query the curve once per `step` for `hours` starting at `start`."""
    if step <= timedelta(0):
        raise ValueError("Forecast step must be positive")

    count = int(timedelta(hours=hours) / step)
    return tuple(interpolate(series, start + step * i) for i in range(count))


def densify(
    series: Sequence[TidalSample], points_per_hour: int = 4
) -> Tuple[InterpolatedPoint, ...]:
    """Insert eased points between consecutive anchors.

    Anchors are kept as they are; each gap gets roughly `points_per_hour`
    points per hour of its length.
    """
    if len(series) < 2:
        return tuple(
            InterpolatedPoint(timestamp=s.timestamp, height=s.height, is_rising=True)
            for s in series
        )

    points: List[InterpolatedPoint] = []
    for current, nxt in zip(series, series[1:]):
        rising = _segment_rising(current, nxt)
        points.append(
            InterpolatedPoint(timestamp=current.timestamp, height=current.height, is_rising=rising)
        )

        gap = nxt.timestamp - current.timestamp
        steps = int(gap.total_seconds() / 3600 * points_per_hour)
        for step in range(1, steps):
            fraction = step / steps
            points.append(
                InterpolatedPoint(
                    timestamp=current.timestamp + gap * fraction,
                    height=current.height + (nxt.height - current.height) * ease(fraction),
                    is_rising=rising,
                )
            )

    last = series[-1]
    points.append(
        InterpolatedPoint(
            timestamp=last.timestamp,
            height=last.height,
            is_rising=_segment_rising(series[-2], series[-1]),
        )
    )
    return tuple(points)
