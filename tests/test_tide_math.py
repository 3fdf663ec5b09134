"""Test tide curve interpolation."""
from __future__ import annotations

from datetime import timedelta

import pytest

from custom_components.tide_conditions.data_schema import TideKind
from custom_components.tide_conditions.exceptions import InsufficientDataError
from custom_components.tide_conditions.tide_math import (
    densify,
    ease,
    forecast_series,
    interpolate,
)

from .helpers import at, sample


def _scenario_series():
    return (
        sample(8, 3.5, TideKind.HIGH),
        sample(14, 0.5, TideKind.LOW),
    )


def test_ease_endpoints_and_midpoint():
    """Cosine easing starts at 0, ends at 1 and is half way at the middle."""
    assert ease(0.0) == pytest.approx(0.0)
    assert ease(1.0) == pytest.approx(1.0)
    assert ease(0.5) == pytest.approx(0.5)
    assert ease(0.25) < 0.25  # slower than linear near the turn


def test_midpoint_between_high_and_low():
    """Half way from a 3.5 ft high to a 0.5 ft low reads 2.0 ft, falling."""
    point = interpolate(_scenario_series(), at(11))

    assert point.height == pytest.approx(2.0)
    assert point.is_rising is False
    assert point.timestamp == at(11)


def test_exact_at_anchors():
    """Querying a sample's own timestamp returns its height."""
    series = (
        sample(2, 0.1, TideKind.LOW),
        sample(8, 4.9, TideKind.HIGH),
        sample(14, -0.6, TideKind.LOW),
        sample(20, 5.3, TideKind.HIGH),
    )
    for s in series:
        assert interpolate(series, s.timestamp).height == pytest.approx(s.height)


def test_bounded_by_bracketing_samples():
    """Every interpolated height stays inside the segment it comes from."""
    series = (
        sample(0, 1.0),
        sample(6, 5.5),
        sample(12, -1.2),
        sample(18, 4.0),
    )
    query = at(0)
    while query <= at(18):
        point = interpolate(series, query)
        assert -1.2 <= point.height <= 5.5
        query += timedelta(minutes=7)


def test_direction_follows_bracketing_segment():
    """is_rising reflects the segment, not the local slope."""
    series = (sample(0, 1.0), sample(6, 5.0), sample(12, 0.0))

    assert interpolate(series, at(1)).is_rising is True
    assert interpolate(series, at(5, 59)).is_rising is True
    assert interpolate(series, at(6, 1)).is_rising is False
    assert interpolate(series, at(11)).is_rising is False


def test_single_sample_is_constant():
    """A one-sample series answers its own height everywhere."""
    series = (sample(10, 2.7),)
    for hour in (0, 10, 23):
        point = interpolate(series, at(hour))
        assert point.height == 2.7
        assert point.is_rising is True


def test_empty_series_raises():
    """No samples means no curve."""
    with pytest.raises(InsufficientDataError):
        interpolate((), at(10))


def test_queries_outside_series_clamp_to_edges():
    """No extrapolation before the first or after the last sample."""
    series = _scenario_series()

    before = interpolate(series, at(2))
    after = interpolate(series, at(20))

    assert before.height == 3.5
    assert before.is_rising is False
    assert after.height == 0.5
    assert after.is_rising is False


def test_forecast_series_is_hourly_for_a_day():
    """Default forecast: 24 points one hour apart starting at the start time."""
    series = (sample(0, 1.0), sample(12, 5.0), sample(23, 0.0, day=2))

    points = forecast_series(series, at(1))

    assert len(points) == 24
    assert points[0].timestamp == at(1)
    assert points[-1].timestamp == at(0, day=2)
    assert all(b.timestamp - a.timestamp == timedelta(hours=1) for a, b in zip(points, points[1:]))


def test_forecast_series_custom_step():
    """A 30 minute step over 3 hours gives 6 points."""
    points = forecast_series(_scenario_series(), at(8), hours=3, step=timedelta(minutes=30))
    assert len(points) == 6


def test_densify_inserts_eased_points():
    """Four points per hour over a six hour gap, anchors kept in place."""
    series = _scenario_series()

    points = densify(series, points_per_hour=4)

    assert len(points) == 25
    assert points[0].height == 3.5
    assert points[-1].height == 0.5
    assert points[12].timestamp == at(11)
    assert points[12].height == pytest.approx(2.0)
    heights = [p.height for p in points]
    assert heights == sorted(heights, reverse=True)
