"""Tide-pool viability for today and the week ahead.

Rating bands on the water level (feet, MLLW), upper edges exclusive:

    < -1.0  excellent
    <  0.5  good
    <  1.5  fair
    >= 1.5  poor   (and "pools submerged" from 3.0 up)

Below -1.0 ft a slippery-rocks warning is attached alongside the rating.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence

from .const import (
    OUTLOOK_BEST_DAYS,
    TIDE_POOL_DAYLIGHT_END,
    TIDE_POOL_DAYLIGHT_START,
    TIDE_POOL_EVENING_START,
    TIDE_POOL_EXCELLENT_BELOW,
    TIDE_POOL_FAIR_BELOW,
    TIDE_POOL_FAIR_WINDOW_BELOW,
    TIDE_POOL_GOOD_BELOW,
    TIDE_POOL_MORNING_END,
    TIDE_POOL_POOR_BELOW,
    TIDE_POOL_SLIPPERY_BELOW,
    WARNING_POOLS_SUBMERGED,
    WARNING_SLIPPERY_ROCKS,
)
from .data_schema import (
    CurrentTideState,
    InterpolatedPoint,
    TidalSample,
    TideEvent,
    TideKind,
    TidePoolAssessment,
    TidePoolDay,
    TidePoolOutlook,
    TidePoolRating,
)

_LOGGER = logging.getLogger(__name__)

OPTIMAL_RATINGS = (TidePoolRating.EXCELLENT, TidePoolRating.GOOD)


def rate_height(height: float) -> TidePoolRating:
    if height < TIDE_POOL_EXCELLENT_BELOW:
        return TidePoolRating.EXCELLENT
    if height < TIDE_POOL_GOOD_BELOW:
        return TidePoolRating.GOOD
    if height < TIDE_POOL_FAIR_BELOW:
        return TidePoolRating.FAIR
    return TidePoolRating.POOR


def safety_warning_for(height: float) -> Optional[str]:
    if height < TIDE_POOL_SLIPPERY_BELOW:
        return WARNING_SLIPPERY_ROCKS
    if height >= TIDE_POOL_POOR_BELOW:
        return WARNING_POOLS_SUBMERGED
    return None


def format_clock(moment: datetime, time_zone: tzinfo) -> str:
    """Short local clock time, e.g. '6:42 AM'."""
    return moment.astimezone(time_zone).strftime("%I:%M %p").lstrip("0")


def window_text(next_low: Optional[InterpolatedPoint], time_zone: tzinfo) -> str:
    if next_low is None:
        return "No low tide upcoming today"
    clock = format_clock(next_low.timestamp, time_zone)
    if next_low.height < 0:
        return f"Next window: {clock} ({next_low.height:.1f} ft)"
    if next_low.height < TIDE_POOL_FAIR_WINDOW_BELOW:
        return f"Fair conditions at {clock}"
    return f"Poor conditions at next low ({clock})"


def alert_message_for(
    next_low: Optional[InterpolatedPoint], time_zone: tzinfo
) -> Optional[str]:
    """Headline for a minus tide falling in daylight, otherwise None."""
    if next_low is None or next_low.height >= 0:
        return None
    hour = next_low.timestamp.astimezone(time_zone).hour
    if not TIDE_POOL_DAYLIGHT_START <= hour <= TIDE_POOL_DAYLIGHT_END:
        return None
    if hour <= TIDE_POOL_MORNING_END:
        return "Perfect morning tide pools!"
    if hour >= TIDE_POOL_EVENING_START:
        return "Great evening tide pools!"
    return "Excellent tide pool conditions!"


def evaluate_tide_pools(
    state: CurrentTideState,
    upcoming: Sequence[TideEvent],
    hourly: Sequence[InterpolatedPoint],
    now: datetime,
    time_zone: tzinfo,
) -> TidePoolAssessment:
    """Assess tide pooling from the current level and the next low."""
    height = state.height
    rating = rate_height(height)

    next_low: Optional[InterpolatedPoint] = None
    for event in upcoming:
        if event.kind == TideKind.LOW and event.timestamp > now:
            next_low = InterpolatedPoint(
                timestamp=event.timestamp, height=event.height, is_rising=True
            )
            break

    today = now.astimezone(time_zone).date()
    todays_points = [p for p in hourly if p.timestamp.astimezone(time_zone).date() == today]
    todays_lowest = min(todays_points, key=lambda p: p.height) if todays_points else None

    assessment = TidePoolAssessment(
        current_height=height,
        rating=rating,
        is_optimal_now=rating in OPTIMAL_RATINGS,
        recommended_window_text=window_text(next_low, time_zone),
        todays_lowest=todays_lowest,
        next_low_tide=next_low,
        safety_warning=safety_warning_for(height),
        alert_message=alert_message_for(next_low, time_zone),
    )
    _LOGGER.debug(
        "Tide pools at %.2f ft: %s (warning=%s)",
        height,
        rating.value,
        assessment.safety_warning,
    )
    return assessment


def day_label(day, today) -> str:
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return day.strftime("%a")


def build_weekly_outlook(
    predictions: Iterable[TidalSample],
    now: datetime,
    time_zone: tzinfo,
    days: int = 7,
    best: int = OUTLOOK_BEST_DAYS,
) -> TidePoolOutlook:
    """Pick each local day's lowest low and rate it.

    Days come out in chronological order starting today; `best_days` are the
    first `best` of them rated excellent or good.
    """
    today = now.astimezone(time_zone).date()

    lows_by_day: Dict = {}
    for sample in predictions:
        if sample.kind != TideKind.LOW:
            continue
        local_day = sample.timestamp.astimezone(time_zone).date()
        if local_day < today:
            continue
        lows_by_day.setdefault(local_day, []).append(sample)

    outlook_days: List[TidePoolDay] = []
    for local_day in sorted(lows_by_day)[:days]:
        lowest = min(lows_by_day[local_day], key=lambda s: s.height)
        outlook_days.append(
            TidePoolDay(
                date=local_day,
                label=day_label(local_day, today),
                rating=rate_height(lowest.height),
                best_time_text=f"{format_clock(lowest.timestamp, time_zone)} ({lowest.height:.1f} ft)",
                best_low_tide=InterpolatedPoint(
                    timestamp=lowest.timestamp, height=lowest.height, is_rising=True
                ),
            )
        )

    best_days = [d for d in outlook_days if d.rating in OPTIMAL_RATINGS][: max(best, 0)]
    _LOGGER.debug(
        "Tide pool outlook: %d days, %d good or better", len(outlook_days), len(best_days)
    )
    return TidePoolOutlook(days=tuple(outlook_days), best_days=tuple(best_days))
