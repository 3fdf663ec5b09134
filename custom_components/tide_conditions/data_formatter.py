"""Display formatting for Tide Conditions.

Provides DataFormatter which turns snapshot values into the plain dicts used
as sensor attributes. Display defaults for missing upstream fields (for
example a missing wind speed shown as 0) live here and nowhere else; the
engine keeps them as None.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from .data_schema import (
    ConditionsSnapshot,
    InterpolatedPoint,
    RatingReading,
    SpotReport,
    SurfCondition,
    SurfSpotConfig,
    TideEvent,
    TidePoolAssessment,
    TidePoolDay,
    TidePoolOutlook,
    WaveReading,
    WindReading,
)

_LOGGER = logging.getLogger(__name__)

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]

# (upper bound exclusive, label)
RATING_BANDS = [
    (0.5, "FLAT"),
    (1.0, "VERY POOR"),
    (1.5, "POOR"),
    (2.0, "POOR to FAIR"),
    (3.0, "FAIR"),
    (4.0, "FAIR to GOOD"),
    (5.0, "GOOD"),
]

OFFSHORE_WIND_RANGE = (45.0, 135.0)


def _safe_float(val: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Convert val to float; NaN, blanks and junk give `default`."""
    if val is None or isinstance(val, bool):
        return default
    try:
        number = float(val)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return number


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class DataFormatter:
    """Converts snapshot values to sensor attribute dicts."""

    # -----------------
    # Derived labels
    # -----------------
    @staticmethod
    def compass_direction(degrees: Optional[float]) -> str:
        """16-point compass name for a bearing in degrees."""
        deg = _safe_float(degrees, 0.0) % 360
        return COMPASS_POINTS[int((deg + 11.25) / 22.5) % 16]

    @staticmethod
    def rating_text(value: Optional[float]) -> str:
        number = _safe_float(value, None)
        if number is None or number < 0:
            return "UNKNOWN"
        for upper, label in RATING_BANDS:
            if number < upper:
                return label
        return "EPIC"

    @staticmethod
    def wave_height_label(wave: Optional[WaveReading]) -> str:
        """'2-3ft', or '3ft' when both ends round to the same foot."""
        if wave is None:
            return "0ft"
        low = int(_safe_float(wave.min_height, 0.0))
        high = int(_safe_float(wave.max_height, 0.0))
        return f"{high}ft" if low == high else f"{low}-{high}ft"

    @staticmethod
    def is_offshore_wind(direction: Optional[float]) -> bool:
        deg = _safe_float(direction, None)
        if deg is None:
            return False
        lower, upper = OFFSHORE_WIND_RANGE
        return lower <= deg <= upper

    # -----------------
    # Tide
    # -----------------
    @staticmethod
    def format_point(point: InterpolatedPoint) -> Dict[str, Any]:
        return {
            "time": _iso(point.timestamp),
            "height": round(point.height, 2),
            "is_rising": point.is_rising,
        }

    @staticmethod
    def format_event(event: TideEvent) -> Dict[str, Any]:
        return {
            "time": _iso(event.timestamp),
            "height": round(event.height, 2),
            "type": event.kind.value,
            "is_rising": event.is_rising,
        }

    @staticmethod
    def format_tide_attributes(snapshot: ConditionsSnapshot, station_id: str = "") -> Dict[str, Any]:
        current = snapshot.current
        return {
            "station_id": station_id,
            "tide_type": current.tide_type.value,
            "is_rising": current.is_rising,
            "direction": "rising" if current.is_rising else "falling",
            "reference_time": _iso(current.timestamp),
            "upcoming": [DataFormatter.format_event(e) for e in snapshot.upcoming],
            "forecast": [DataFormatter.format_point(p) for p in snapshot.forecast],
            "source": snapshot.tide_source,
            "is_stale": snapshot.is_stale,
            "is_placeholder": snapshot.is_placeholder,
            "chart": [DataFormatter.format_point(p) for p in snapshot.chart],
            "last_updated": _iso(snapshot.generated_at),
        }

    # -----------------
    # Surf
    # -----------------
    @staticmethod
    def format_wave(wave: Optional[WaveReading]) -> Dict[str, Any]:
        wave = wave or WaveReading()
        return {
            "wave_height": DataFormatter.wave_height_label(wave),
            "wave_min": _safe_float(wave.min_height, 0.0),
            "wave_max": _safe_float(wave.max_height, 0.0),
            "wave_description": wave.human_relation or "",
            "swell_period": int(_safe_float(wave.swell_period, 0.0)),
            "swell_direction": DataFormatter.compass_direction(wave.swell_direction),
        }

    @staticmethod
    def format_wind(wind: Optional[WindReading]) -> Dict[str, Any]:
        wind = wind or WindReading()
        return {
            "wind_speed": int(_safe_float(wind.speed, 0.0)),
            "wind_gust": int(_safe_float(wind.gust, 0.0)),
            "wind_direction": DataFormatter.compass_direction(wind.direction),
            "wind_angle": _safe_float(wind.direction, 0.0),
            "offshore_wind": DataFormatter.is_offshore_wind(wind.direction),
        }

    @staticmethod
    def format_rating(rating: Optional[RatingReading]) -> Dict[str, Any]:
        rating = rating or RatingReading()
        return {
            "surf_rating": _safe_float(rating.value, 0.0),
            "surf_rating_text": DataFormatter.rating_text(rating.value),
        }

    @staticmethod
    def format_surf_attributes(
        condition: SurfCondition,
        spot: SurfSpotConfig,
        report: Optional[SpotReport] = None,
    ) -> Dict[str, Any]:
        lower, upper = spot.optimal_range
        attrs: Dict[str, Any] = {
            "spot_id": spot.spot_id,
            "spot_name": spot.name,
            "description": spot.description,
            "optimal_tide": f"{lower:.1f}-{upper:.1f} ft",
            "preferred_direction": spot.preferred_direction.value,
            "reason": condition.reason,
            "tide_height": round(condition.tide_height, 2),
            "evaluated_at": _iso(condition.evaluated_at),
        }
        report_data = report or SpotReport(spot_id=spot.spot_id, fetched_at=condition.evaluated_at)
        attrs.update(DataFormatter.format_wave(report_data.wave))
        attrs.update(DataFormatter.format_wind(report_data.wind))
        attrs.update(DataFormatter.format_rating(report_data.rating))
        return attrs

    # -----------------
    # Tide pools
    # -----------------
    @staticmethod
    def format_outlook_day(day: TidePoolDay) -> Dict[str, Any]:
        return {
            "date": day.date.isoformat(),
            "label": day.label,
            "rating": day.rating.value,
            "best_time": day.best_time_text,
            "height": round(day.best_low_tide.height, 2) if day.best_low_tide else None,
        }

    @staticmethod
    def format_tide_pool_attributes(
        assessment: TidePoolAssessment,
        outlook: Optional[TidePoolOutlook] = None,
    ) -> Dict[str, Any]:
        attrs: Dict[str, Any] = {
            "current_height": round(assessment.current_height, 2),
            "is_optimal_now": assessment.is_optimal_now,
            "best_window": assessment.recommended_window_text,
            "safety_warning": assessment.safety_warning,
            "alert": assessment.alert_message,
            "todays_lowest": (
                DataFormatter.format_point(assessment.todays_lowest)
                if assessment.todays_lowest
                else None
            ),
            "next_low_tide": (
                DataFormatter.format_point(assessment.next_low_tide)
                if assessment.next_low_tide
                else None
            ),
        }
        if outlook is not None:
            days: List[Dict[str, Any]] = [DataFormatter.format_outlook_day(d) for d in outlook.days]
            attrs["weekly_outlook"] = days
            attrs["best_days"] = [DataFormatter.format_outlook_day(d) for d in outlook.best_days]
        return attrs
