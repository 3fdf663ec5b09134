"""Data structure definitions for the Tide Conditions integration.

This module defines the immutable value types that flow through the
reconciliation engine (samples, interpolated points, states, assessments and
the published snapshot) plus TypedDict shapes of the raw upstream records
they are parsed from.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Optional, Tuple, TypedDict

from .const import (
    DEFAULT_CLOSEOUT_HEIGHT,
    DEFAULT_REQUEST_TIMEOUT,
    FORECAST_HOURS,
    RULE_STANDARD,
    TIDE_HIGH_THRESHOLD,
    TIDE_LOW_THRESHOLD,
    UPCOMING_EVENT_LIMIT,
)


# ============================================================================
# ENUMS
# ============================================================================


class TideKind(str, Enum):
    """Marker carried by a raw tide sample."""

    HIGH = "high"
    LOW = "low"
    UNSPECIFIED = "unspecified"


class TideType(str, Enum):
    """Instantaneous tide classification."""

    HIGH = "high"
    LOW = "low"
    RISING = "rising"
    FALLING = "falling"


class TideDirection(str, Enum):
    """Preferred tide direction of a surf spot."""

    RISING = "rising"
    FALLING = "falling"
    ANY = "any"


class SurfQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class TidePoolRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    DANGEROUS = "dangerous"  # reserved, no threshold produces it


# ============================================================================
# TIDE SERIES
# ============================================================================


@dataclass(frozen=True)
class TidalSample:
    """One predicted water level. Height is feet above MLLW and may be negative."""

    timestamp: datetime
    height: float
    kind: TideKind = TideKind.UNSPECIFIED


@dataclass(frozen=True)
class InterpolatedPoint:
    timestamp: datetime
    height: float
    is_rising: bool


@dataclass(frozen=True)
class TideEvent:
    """An upcoming high or low. A low is always followed by a rising tide."""

    timestamp: datetime
    height: float
    kind: TideKind
    is_rising: bool


@dataclass(frozen=True)
class CurrentTideState:
    height: float
    timestamp: datetime
    is_rising: bool
    tide_type: TideType


# ============================================================================
# SURF
# ============================================================================


@dataclass(frozen=True)
class SurfSpotConfig:
    """Static description of a surf spot and how it reacts to the tide."""

    spot_id: str
    name: str
    display_name: str
    optimal_range: Tuple[float, float]
    preferred_direction: TideDirection
    description: str = ""
    rule_variant: str = RULE_STANDARD
    closeout_height: float = DEFAULT_CLOSEOUT_HEIGHT

    def __post_init__(self) -> None:
        lower, upper = self.optimal_range
        if lower > upper:
            raise ValueError(
                f"Invalid optimal range for {self.spot_id}: {lower} > {upper}"
            )


@dataclass(frozen=True)
class SurfCondition:
    spot_id: str
    spot_name: str
    quality: SurfQuality
    tide_height: float
    reason: str
    evaluated_at: datetime


@dataclass(frozen=True)
class WaveReading:
    min_height: Optional[float] = None
    max_height: Optional[float] = None
    optimal_score: Optional[int] = None
    human_relation: Optional[str] = None
    swell_period: Optional[float] = None
    swell_direction: Optional[float] = None


@dataclass(frozen=True)
class WindReading:
    speed: Optional[float] = None
    direction: Optional[float] = None
    gust: Optional[float] = None


@dataclass(frozen=True)
class RatingReading:
    value: Optional[float] = None
    key: Optional[str] = None


@dataclass(frozen=True)
class SpotReport:
    """Everything the surf-report service returned for one spot this cycle."""

    spot_id: str
    fetched_at: datetime
    wave: Optional[WaveReading] = None
    wind: Optional[WindReading] = None
    rating: Optional[RatingReading] = None
    tides: Tuple[TidalSample, ...] = ()


# ============================================================================
# TIDE POOLS
# ============================================================================


@dataclass(frozen=True)
class TidePoolAssessment:
    current_height: float
    rating: TidePoolRating
    is_optimal_now: bool
    recommended_window_text: str
    todays_lowest: Optional[InterpolatedPoint] = None
    next_low_tide: Optional[InterpolatedPoint] = None
    safety_warning: Optional[str] = None
    alert_message: Optional[str] = None


@dataclass(frozen=True)
class TidePoolDay:
    date: date
    label: str
    rating: TidePoolRating
    best_time_text: str
    best_low_tide: Optional[InterpolatedPoint] = None


@dataclass(frozen=True)
class TidePoolOutlook:
    days: Tuple[TidePoolDay, ...] = ()
    best_days: Tuple[TidePoolDay, ...] = ()


# ============================================================================
# SNAPSHOT
# ============================================================================


@dataclass(frozen=True)
class ConditionsSnapshot:
    """The unit of publication. Never mutated, only replaced."""

    current: CurrentTideState
    upcoming: Tuple[TideEvent, ...]
    forecast: Tuple[InterpolatedPoint, ...]
    surf_conditions: Tuple[SurfCondition, ...]
    tide_pools: TidePoolAssessment
    generated_at: datetime
    tide_source: str
    spot_reports: Tuple[SpotReport, ...] = ()
    chart: Tuple[InterpolatedPoint, ...] = ()
    tide_pool_outlook: Optional[TidePoolOutlook] = None
    is_placeholder: bool = False
    is_stale: bool = False

    def as_stale(self) -> "ConditionsSnapshot":
        """Return a copy flagged as carried over from an earlier cycle."""
        return replace(self, is_stale=True)


# ============================================================================
# ENGINE CONFIGURATION
# ============================================================================


@dataclass(frozen=True)
class EngineConfig:
    station_id: str
    time_zone: tzinfo
    spots: Tuple[SurfSpotConfig, ...] = ()
    api_key: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    upcoming_limit: int = UPCOMING_EVENT_LIMIT
    forecast_hours: int = FORECAST_HOURS
    forecast_step_minutes: int = 60
    high_threshold: float = TIDE_HIGH_THRESHOLD
    low_threshold: float = TIDE_LOW_THRESHOLD
    include_outlook: bool = True
    station_name: str = ""


# ============================================================================
# RAW UPSTREAM RECORDS
# ============================================================================


class NoaaPrediction(TypedDict, total=False):
    """One entry of a NOAA CO-OPS `predictions` array."""
    t: str  # "YYYY-MM-DD HH:MM", station local time
    v: str  # height in feet, as a string
    type: str  # "H" or "L", hilo interval only


class SurflineTide(TypedDict, total=False):
    timestamp: int  # epoch seconds
    type: str  # HIGH, LOW or NORMAL
    height: float  # feet


class SurflineWave(TypedDict, total=False):
    timestamp: int
    surf: dict  # {"min", "max", "optimalScore", "humanRelation"}
    swells: list  # [{"height", "period", "direction"}, ...]


class SurflineWind(TypedDict, total=False):
    timestamp: int
    speed: float  # kts
    direction: float  # degrees
    gust: float


class SurflineRating(TypedDict, total=False):
    timestamp: int
    rating: dict  # {"key", "value"}
