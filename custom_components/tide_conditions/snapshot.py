"""Assembly of the published conditions snapshot."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from homeassistant.util import dt as dt_util

from .const import TIDE_SOURCE_PLACEHOLDER
from .data_schema import (
    ConditionsSnapshot,
    CurrentTideState,
    InterpolatedPoint,
    SpotReport,
    SurfCondition,
    SurfQuality,
    SurfSpotConfig,
    TideEvent,
    TidePoolAssessment,
    TidePoolOutlook,
    TidePoolRating,
    TideType,
)

_LOGGER = logging.getLogger(__name__)

PLACEHOLDER_HEIGHT = 3.0
PLACEHOLDER_REASON = "Tide data unavailable"


def assemble_snapshot(
    current: CurrentTideState,
    upcoming: Iterable[TideEvent],
    forecast: Iterable[InterpolatedPoint],
    surf_conditions: Iterable[SurfCondition],
    tide_pools: TidePoolAssessment,
    tide_source: str,
    spot_reports: Iterable[SpotReport] = (),
    chart: Iterable[InterpolatedPoint] = (),
    tide_pool_outlook: Optional[TidePoolOutlook] = None,
    generated_at: Optional[datetime] = None,
) -> ConditionsSnapshot:
    """Freeze one evaluation cycle into a snapshot stamped with its assembly time."""
    return ConditionsSnapshot(
        current=current,
        upcoming=tuple(upcoming),
        forecast=tuple(forecast),
        surf_conditions=tuple(surf_conditions),
        tide_pools=tide_pools,
        generated_at=generated_at or dt_util.utcnow(),
        tide_source=tide_source,
        spot_reports=tuple(spot_reports),
        chart=tuple(chart),
        tide_pool_outlook=tide_pool_outlook,
    )


def placeholder_snapshot(now: datetime, spots: Iterable[SurfSpotConfig]) -> ConditionsSnapshot:
    """A snapshot that is clearly marked as not backed by any tide data."""
    _LOGGER.debug("Building placeholder snapshot at %s", now)
    current = CurrentTideState(
        height=PLACEHOLDER_HEIGHT,
        timestamp=now,
        is_rising=True,
        tide_type=TideType.RISING,
    )
    conditions = tuple(
        SurfCondition(
            spot_id=spot.spot_id,
            spot_name=spot.display_name or spot.name,
            quality=SurfQuality.POOR,
            tide_height=PLACEHOLDER_HEIGHT,
            reason=PLACEHOLDER_REASON,
            evaluated_at=now,
        )
        for spot in spots
    )
    tide_pools = TidePoolAssessment(
        current_height=PLACEHOLDER_HEIGHT,
        rating=TidePoolRating.POOR,
        is_optimal_now=False,
        recommended_window_text=PLACEHOLDER_REASON,
    )
    return ConditionsSnapshot(
        current=current,
        upcoming=(),
        forecast=(),
        surf_conditions=conditions,
        tide_pools=tide_pools,
        generated_at=now,
        tide_source=TIDE_SOURCE_PLACEHOLDER,
        is_placeholder=True,
    )
