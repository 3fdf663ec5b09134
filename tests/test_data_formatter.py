"""Test display formatting of snapshot values."""
from __future__ import annotations

from dataclasses import replace

import pytest

from custom_components.tide_conditions.data_formatter import DataFormatter
from custom_components.tide_conditions.data_schema import (
    InterpolatedPoint,
    RatingReading,
    SpotReport,
    SurfCondition,
    SurfQuality,
    WaveReading,
    WindReading,
)
from custom_components.tide_conditions.snapshot import placeholder_snapshot

from .helpers import at, make_spot


@pytest.mark.parametrize(
    "degrees,expected",
    [(0, "N"), (11.2, "N"), (11.25, "NNE"), (90, "E"), (225, "SW"), (348.75, "N"), (359, "N")],
)
def test_compass_direction(degrees, expected):
    """Sixteen points, each 22.5 degrees wide and centred on its bearing."""
    assert DataFormatter.compass_direction(degrees) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, "FLAT"),
        (0.5, "VERY POOR"),
        (1.2, "POOR"),
        (1.5, "POOR to FAIR"),
        (2, "FAIR"),
        (3.5, "FAIR to GOOD"),
        (4, "GOOD"),
        (5, "EPIC"),
        (None, "UNKNOWN"),
    ],
)
def test_rating_text(value, expected):
    """Numeric surf ratings map onto the familiar labels."""
    assert DataFormatter.rating_text(value) == expected


def test_wave_height_label():
    """Ranges read 'min-maxft' unless both ends match."""
    assert DataFormatter.wave_height_label(WaveReading(min_height=2, max_height=3)) == "2-3ft"
    assert DataFormatter.wave_height_label(WaveReading(min_height=3, max_height=3.4)) == "3ft"
    assert DataFormatter.wave_height_label(None) == "0ft"


def test_offshore_wind():
    """Offshore means blowing from 45 to 135 degrees."""
    assert DataFormatter.is_offshore_wind(90) is True
    assert DataFormatter.is_offshore_wind(200) is False
    assert DataFormatter.is_offshore_wind(None) is False


def test_missing_wind_speed_displays_zero():
    """Absent readings become display defaults only at this layer."""
    attrs = DataFormatter.format_wind(WindReading(direction=100))
    assert attrs["wind_speed"] == 0
    assert attrs["offshore_wind"] is True
    assert DataFormatter.format_wind(None)["wind_direction"] == "N"


def test_surf_attributes_include_report():
    """Surf attributes combine the rule result with the spot report."""
    spot = make_spot("a")
    condition = SurfCondition(
        spot_id="a",
        spot_name="Spot a",
        quality=SurfQuality.EXCELLENT,
        tide_height=2.04,
        reason="Ideal tide for this spot",
        evaluated_at=at(9),
    )
    report = SpotReport(
        spot_id="a",
        fetched_at=at(9),
        wave=WaveReading(min_height=2, max_height=3, swell_direction=290),
        rating=RatingReading(value=3, key="FAIR_TO_GOOD"),
    )

    attrs = DataFormatter.format_surf_attributes(condition, spot, report)

    assert attrs["optimal_tide"] == "0.5-3.5 ft"
    assert attrs["wave_height"] == "2-3ft"
    assert attrs["swell_direction"] == "WNW"
    assert attrs["surf_rating_text"] == "FAIR to GOOD"
    assert attrs["wind_speed"] == 0
    assert attrs["tide_height"] == 2.04


def test_tide_attributes_from_placeholder():
    """Placeholder snapshots are flagged in the attributes."""
    attrs = DataFormatter.format_tide_attributes(placeholder_snapshot(at(9), ()), "9413745")

    assert attrs["is_placeholder"] is True
    assert attrs["source"] == "placeholder"
    assert attrs["upcoming"] == []
    assert attrs["station_id"] == "9413745"
    assert attrs["last_updated"] == at(9).isoformat()
    assert attrs["chart"] == []


def test_tide_pool_attributes_without_outlook():
    """The weekly outlook keys only appear when an outlook exists."""
    snapshot = placeholder_snapshot(at(9), ())
    attrs = DataFormatter.format_tide_pool_attributes(snapshot.tide_pools)

    assert "weekly_outlook" not in attrs
    assert attrs["next_low_tide"] is None


def test_chart_points_in_tide_attributes():
    """Chart points are exposed with rounded heights."""
    point = InterpolatedPoint(timestamp=at(9), height=1.234, is_rising=True)
    snapshot = replace(placeholder_snapshot(at(9), ()), chart=(point,))

    attrs = DataFormatter.format_tide_attributes(snapshot)

    assert attrs["chart"] == [{"time": at(9).isoformat(), "height": 1.23, "is_rising": True}]
