"""One evaluation cycle: fetch, reconcile, classify, rate and assemble.

Upstream calls run concurrently and each one is bounded by the request
timeout. A failed or slow call only removes its own contribution; the cycle
fails as a whole only when no tide series at all is left.

Current-height source precedence:
    1. Surfline tides of the first configured spot that returned any
    2. NOAA 6-minute predictions (continuous window + chart window)
    3. NOAA high/low predictions alone
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Awaitable, List, Optional, Sequence, Tuple

import aiohttp
from homeassistant.util import dt as dt_util

from .api import NoaaTidesClient, SurflineClient
from .const import (
    CHART_POINTS_PER_HOUR,
    TIDE_SOURCE_NOAA,
    TIDE_SOURCE_NOAA_HILO,
    TIDE_SOURCE_SURFLINE,
)
from .data_schema import (
    ConditionsSnapshot,
    EngineConfig,
    InterpolatedPoint,
    SpotReport,
    TidalSample,
)
from .exceptions import EvaluationError, InsufficientDataError, NetworkError, ParseError
from .snapshot import assemble_snapshot
from .surf_rules import evaluate_spot
from .tide_math import densify, forecast_series, interpolate
from .tide_pools import build_weekly_outlook, evaluate_tide_pools
from .tide_series import high_low_only, merge_series
from .tide_state import classify, upcoming_events

_LOGGER = logging.getLogger(__name__)


async def _unavailable() -> None:
    return None


def _chart(
    anchors: Sequence[TidalSample], start: datetime, hours: int
) -> Tuple[InterpolatedPoint, ...]:
    """Eased curve through the highs and lows, from `start` for `hours` hours."""
    if len(anchors) < 2:
        return ()
    end = start + timedelta(hours=hours)
    inside = [p for p in densify(anchors, CHART_POINTS_PER_HOUR) if start < p.timestamp <= end]
    return (interpolate(anchors, start), *inside)


class ConditionsEngine:
    """Runs evaluation cycles for one station and its configured spots."""

    def __init__(self, config: EngineConfig, tide_client, surf_client) -> None:
        self.config = config
        self._tides = tide_client
        self._surf = surf_client
        self._last_source: Optional[str] = None

    async def _guard(self, label: str, awaitable: Awaitable[Any]) -> Any:
        """Await one upstream call; failures and timeouts resolve to None."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.config.request_timeout)
        except TimeoutError:
            _LOGGER.debug("%s timed out after %ss", label, self.config.request_timeout)
        except (NetworkError, ParseError) as exc:
            _LOGGER.debug("%s unavailable: %s", label, exc, exc_info=True)
        return None

    async def _fetch_spot(self, spot_id: str, now: datetime) -> SpotReport:
        wave, wind, rating, tides = await asyncio.gather(
            self._guard(f"Surfline wave {spot_id}", self._surf.fetch_wave(spot_id)),
            self._guard(f"Surfline wind {spot_id}", self._surf.fetch_wind(spot_id)),
            self._guard(f"Surfline rating {spot_id}", self._surf.fetch_rating(spot_id)),
            self._guard(f"Surfline tides {spot_id}", self._surf.fetch_tides(spot_id)),
        )
        return SpotReport(
            spot_id=spot_id,
            fetched_at=now,
            wave=wave,
            wind=wind,
            rating=rating,
            tides=tuple(tides or ()),
        )

    def _select_series(
        self,
        reports: Sequence[SpotReport],
        high_low: Sequence[TidalSample],
        continuous: Sequence[TidalSample],
        chart: Sequence[TidalSample],
    ) -> Tuple[str, Tuple[TidalSample, ...], Tuple[TidalSample, ...]]:
        """Return (source, series to classify, series to draw the curve from)."""
        for report in reports:
            if report.tides:
                series = merge_series(report.tides)
                return TIDE_SOURCE_SURFLINE, series, series

        fine = merge_series(continuous, chart)
        if fine:
            return TIDE_SOURCE_NOAA, fine, merge_series(continuous, chart, high_low)

        if high_low:
            series = merge_series(high_low)
            return TIDE_SOURCE_NOAA_HILO, series, series

        raise InsufficientDataError("No tide samples from any source")

    async def async_evaluate(
        self,
        now: Optional[datetime] = None,
        previous_snapshot: Optional[ConditionsSnapshot] = None,
    ) -> ConditionsSnapshot:
        """Run one cycle and return a fresh snapshot.

        With no usable tide data the previous snapshot comes back marked as
        stale, or EvaluationError is raised when there is none.
        """
        config = self.config
        now = now or dt_util.now()

        weekly_call = (
            self._guard("NOAA weekly high/low", self._tides.fetch_weekly_high_low(now))
            if config.include_outlook
            else _unavailable()
        )
        high_low, continuous, chart, weekly, *reports = await asyncio.gather(
            self._guard("NOAA high/low", self._tides.fetch_high_low(now)),
            self._guard("NOAA continuous", self._tides.fetch_continuous(now)),
            self._guard("NOAA chart window", self._tides.fetch_chart_window(now)),
            weekly_call,
            *(self._fetch_spot(spot.spot_id, now) for spot in config.spots),
        )
        high_low = high_low or ()
        continuous = continuous or ()
        chart = chart or ()

        try:
            source, reference, curve = self._select_series(reports, high_low, continuous, chart)
        except InsufficientDataError as exc:
            if previous_snapshot is not None:
                _LOGGER.warning(
                    "No tide data for station %s, keeping snapshot from %s",
                    config.station_id,
                    previous_snapshot.generated_at,
                )
                return previous_snapshot.as_stale()
            raise EvaluationError(
                f"No tide data available for station {config.station_id}"
            ) from exc

        if source != self._last_source:
            _LOGGER.info(
                "Tide source for station %s is now %s (%d samples)",
                config.station_id,
                source,
                len(reference),
            )
            self._last_source = source

        current = classify(reference, now, config.high_threshold, config.low_threshold)
        forecast = forecast_series(
            curve,
            now,
            hours=config.forecast_hours,
            step=timedelta(minutes=config.forecast_step_minutes),
        )
        events_from = merge_series(high_low) if high_low else high_low_only(reference)
        upcoming = upcoming_events(events_from, now, config.upcoming_limit)
        chart_points = _chart(events_from, now, config.forecast_hours)

        surf_conditions = [
            evaluate_spot(current.height, current.is_rising, spot, now)
            for spot in config.spots
        ]
        tide_pools = evaluate_tide_pools(current, upcoming, forecast, now, config.time_zone)

        outlook = None
        if config.include_outlook:
            weekly_source: List[TidalSample] = list(weekly or high_low)
            if weekly_source:
                outlook = build_weekly_outlook(weekly_source, now, config.time_zone)

        return assemble_snapshot(
            current=current,
            upcoming=upcoming,
            forecast=forecast,
            surf_conditions=surf_conditions,
            tide_pools=tide_pools,
            tide_source=source,
            spot_reports=reports,
            chart=chart_points,
            tide_pool_outlook=outlook,
        )


async def evaluate(
    now: datetime,
    config: EngineConfig,
    session: aiohttp.ClientSession,
    previous_snapshot: Optional[ConditionsSnapshot] = None,
) -> ConditionsSnapshot:
    """Build clients for `config` and run a single evaluation cycle."""
    engine = ConditionsEngine(
        config,
        NoaaTidesClient(session, config.station_id, config.time_zone, config.request_timeout),
        SurflineClient(session, config.api_key, config.request_timeout),
    )
    return await engine.async_evaluate(now, previous_snapshot)
