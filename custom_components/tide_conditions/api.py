"""Upstream clients and response parsers for Tide Conditions.

Provides:
- NoaaTidesClient: async fetch of NOAA CO-OPS tide predictions (high/low and
  6-minute series) for one station
- SurflineClient: async fetch of Surfline kbyg spot forecasts (wave, wind,
  rating, tides)
- parse_* functions: pure conversion of decoded JSON bodies into samples and
  readings, usable without a network

Parsing contract:
- A missing, blank or NaN height means the sample is absent; it is skipped,
  never read as zero.
- NOAA is queried in GMT, so its "YYYY-MM-DD HH:MM" times are UTC and never
  repeat when daylight saving ends. Surfline times are epoch seconds and
  come out in UTC too; the station time zone only picks local day bounds.
- A body that is not the expected JSON object raises ParseError; HTTP and
  transport failures raise NetworkError.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from .const import (
    CHART_WINDOW_HOURS,
    CONTINUOUS_WINDOW_HOURS,
    DEFAULT_REQUEST_TIMEOUT,
    HILO_WINDOW_DAYS,
    NOAA_API_BASE,
    NOAA_APPLICATION,
    NOAA_DATUM,
    NOAA_INTERVAL_HILO,
    NOAA_INTERVAL_SIX_MINUTE,
    NOAA_TIME_ZONE,
    REQUEST_HEADERS,
    SURFLINE_API_BASE,
    SURFLINE_TIDE_DAYS,
    WEEKLY_WINDOW_DAYS,
)
from .data_schema import (
    NoaaPrediction,
    RatingReading,
    SurflineRating,
    SurflineTide,
    SurflineWave,
    SurflineWind,
    TidalSample,
    TideKind,
    WaveReading,
    WindReading,
)
from .exceptions import NetworkError, ParseError

_LOGGER = logging.getLogger(__name__)

SOURCE_NOAA = "noaa"
SOURCE_SURFLINE = "surfline"

NOAA_TIME_FORMAT = "%Y-%m-%d %H:%M"
NOAA_REQUEST_FORMAT = "%Y%m%d %H:%M"

NOAA_KIND = {"H": TideKind.HIGH, "L": TideKind.LOW}
SURFLINE_KIND = {"HIGH": TideKind.HIGH, "LOW": TideKind.LOW}


async def _get_json(
    session: aiohttp.ClientSession,
    source: str,
    url: str,
    params: Dict[str, Any],
    timeout: float,
) -> Any:
    """GET `url` and return the decoded JSON body."""
    _LOGGER.debug("%s request to %s params=%s", source, url, params)
    try:
        async with session.get(
            url,
            params=params,
            headers=REQUEST_HEADERS,
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as resp:
            if resp.status != 200:
                text = await resp.text()
                _LOGGER.debug(
                    "%s non-200 response: status=%s body=%s",
                    source,
                    resp.status,
                    (text or "")[:500],
                )
                raise NetworkError(source, f"returned status {resp.status}", resp.status)

            try:
                # tolerate content-types that are not exactly application/json
                return await resp.json(content_type=None)
            except ValueError as exc:
                raise ParseError(source, f"undecodable body: {exc}") from exc
    except aiohttp.ClientError as exc:
        raise NetworkError(source, f"request failed: {exc}") from exc
    except TimeoutError as exc:
        raise NetworkError(source, "request timed out") from exc


# -----------------------------
# Coercion helpers
# -----------------------------


def _coerce_numeric(value: Any) -> Optional[float]:
    """Convert a possibly string-typed number to float; blank and NaN give None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _coerce_int(value: Any) -> Optional[int]:
    number = _coerce_numeric(value)
    return int(number) if number is not None else None


def _first_entry(body: Any, source: str, key: str) -> Optional[Dict[str, Any]]:
    """Return body["data"][key][0] of a Surfline response, None when empty."""
    if not isinstance(body, dict):
        raise ParseError(source, f"expected a JSON object, got {type(body).__name__}")
    data = body.get("data")
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ParseError(source, "'data' is not an object")
    entries = data.get(key)
    if not entries:
        return None
    if not isinstance(entries, list):
        raise ParseError(source, f"'{key}' is not a list")
    first = entries[0]
    return first if isinstance(first, dict) else None


# -----------------------------
# Parsers
# -----------------------------


def _noaa_sample(item: NoaaPrediction) -> Optional[TidalSample]:
    height = _coerce_numeric(item.get("v"))
    raw_time = item.get("t")
    if height is None or not raw_time:
        return None
    try:
        gmt_time = datetime.strptime(str(raw_time).strip(), NOAA_TIME_FORMAT)
    except ValueError:
        return None
    return TidalSample(
        timestamp=gmt_time.replace(tzinfo=timezone.utc),
        height=height,
        kind=NOAA_KIND.get(str(item.get("type", "")).upper(), TideKind.UNSPECIFIED),
    )


def _surfline_sample(item: SurflineTide) -> Optional[TidalSample]:
    epoch = _coerce_numeric(item.get("timestamp"))
    height = _coerce_numeric(item.get("height"))
    if epoch is None or height is None:
        return None
    return TidalSample(
        timestamp=datetime.fromtimestamp(epoch, tz=timezone.utc),
        height=height,
        kind=SURFLINE_KIND.get(str(item.get("type", "")).upper(), TideKind.UNSPECIFIED),
    )


def parse_noaa_predictions(body: Any) -> Tuple[TidalSample, ...]:
    """Convert a NOAA `predictions` response (GMT times) into ordered tide samples."""
    if not isinstance(body, dict):
        raise ParseError(SOURCE_NOAA, f"expected a JSON object, got {type(body).__name__}")

    if "error" in body:
        error = body.get("error")
        message = error.get("message") if isinstance(error, dict) else error
        raise ParseError(SOURCE_NOAA, f"API error: {message}")

    predictions = body.get("predictions")
    if not isinstance(predictions, list):
        raise ParseError(SOURCE_NOAA, "missing 'predictions' list")

    samples: List[TidalSample] = []
    skipped = 0
    for item in predictions:
        parsed = _noaa_sample(item) if isinstance(item, dict) else None
        if parsed is None:
            skipped += 1
            continue
        samples.append(parsed)

    if skipped:
        _LOGGER.debug("Skipped %d unusable NOAA predictions", skipped)
    samples.sort(key=lambda s: s.timestamp)
    return tuple(samples)


def parse_surfline_tides(body: Any) -> Tuple[TidalSample, ...]:
    """Convert a Surfline `tides` response into ordered tide samples."""
    if not isinstance(body, dict):
        raise ParseError(SOURCE_SURFLINE, f"expected a JSON object, got {type(body).__name__}")
    data = body.get("data") or {}
    if not isinstance(data, dict):
        raise ParseError(SOURCE_SURFLINE, "'data' is not an object")
    tides = data.get("tides") or []
    if not isinstance(tides, list):
        raise ParseError(SOURCE_SURFLINE, "'tides' is not a list")

    samples = [s for s in (_surfline_sample(item) for item in tides if isinstance(item, dict)) if s]
    samples.sort(key=lambda s: s.timestamp)
    return tuple(samples)


def parse_surfline_wave(body: Any) -> Optional[WaveReading]:
    entry: Optional[SurflineWave] = _first_entry(body, SOURCE_SURFLINE, "wave")
    if entry is None:
        return None

    surf = entry.get("surf") if isinstance(entry.get("surf"), dict) else {}
    swells = entry.get("swells") if isinstance(entry.get("swells"), list) else []
    swell = swells[0] if swells and isinstance(swells[0], dict) else {}

    return WaveReading(
        min_height=_coerce_numeric(surf.get("min")),
        max_height=_coerce_numeric(surf.get("max")),
        optimal_score=_coerce_int(surf.get("optimalScore")),
        human_relation=surf.get("humanRelation") or None,
        swell_period=_coerce_numeric(swell.get("period")),
        swell_direction=_coerce_numeric(swell.get("direction")),
    )


def parse_surfline_wind(body: Any) -> Optional[WindReading]:
    entry: Optional[SurflineWind] = _first_entry(body, SOURCE_SURFLINE, "wind")
    if entry is None:
        return None
    return WindReading(
        speed=_coerce_numeric(entry.get("speed")),
        direction=_coerce_numeric(entry.get("direction")),
        gust=_coerce_numeric(entry.get("gust")),
    )


def parse_surfline_rating(body: Any) -> Optional[RatingReading]:
    entry: Optional[SurflineRating] = _first_entry(body, SOURCE_SURFLINE, "rating")
    if entry is None:
        return None
    rating = entry.get("rating") if isinstance(entry.get("rating"), dict) else {}
    return RatingReading(
        value=_coerce_numeric(rating.get("value")),
        key=rating.get("key") or None,
    )


# -----------------------------
# Clients
# -----------------------------


class NoaaTidesClient:
    """Async client for NOAA CO-OPS tide predictions at one station."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        station_id: str,
        time_zone: tzinfo,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._session = session
        self.station_id = station_id
        self.time_zone = time_zone
        self._timeout = timeout

    def _params(self, begin: datetime, end: datetime, interval: str) -> Dict[str, Any]:
        return {
            "begin_date": begin.astimezone(timezone.utc).strftime(NOAA_REQUEST_FORMAT),
            "end_date": end.astimezone(timezone.utc).strftime(NOAA_REQUEST_FORMAT),
            "station": self.station_id,
            "product": "predictions",
            "datum": NOAA_DATUM,
            "time_zone": NOAA_TIME_ZONE,
            "interval": interval,
            "units": "english",
            "format": "json",
            "application": NOAA_APPLICATION,
        }

    async def _fetch(self, begin: datetime, end: datetime, interval: str) -> Tuple[TidalSample, ...]:
        body = await _get_json(
            self._session,
            SOURCE_NOAA,
            NOAA_API_BASE,
            self._params(begin, end, interval),
            self._timeout,
        )
        samples = parse_noaa_predictions(body)
        _LOGGER.debug(
            "NOAA station %s interval=%s returned %d samples",
            self.station_id,
            interval,
            len(samples),
        )
        return samples

    async def fetch_high_low(self, now: datetime, days: int = HILO_WINDOW_DAYS) -> Tuple[TidalSample, ...]:
        """Highs and lows from the start of the local day for `days` days."""
        local_now = now.astimezone(self.time_zone)
        start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
        return await self._fetch(start, start + timedelta(days=days), NOAA_INTERVAL_HILO)

    async def fetch_continuous(
        self,
        now: datetime,
        before: timedelta = timedelta(hours=CONTINUOUS_WINDOW_HOURS),
        after: timedelta = timedelta(hours=CONTINUOUS_WINDOW_HOURS),
    ) -> Tuple[TidalSample, ...]:
        """6-minute predictions in a narrow window around `now`."""
        return await self._fetch(now - before, now + after, NOAA_INTERVAL_SIX_MINUTE)

    async def fetch_chart_window(self, now: datetime, hours: int = CHART_WINDOW_HOURS) -> Tuple[TidalSample, ...]:
        """6-minute predictions for the next `hours` hours."""
        return await self._fetch(now, now + timedelta(hours=hours), NOAA_INTERVAL_SIX_MINUTE)

    async def fetch_weekly_high_low(self, now: datetime, days: int = WEEKLY_WINDOW_DAYS) -> Tuple[TidalSample, ...]:
        return await self._fetch(now, now + timedelta(days=days), NOAA_INTERVAL_HILO)


class SurflineClient:
    """Async client for the Surfline kbyg spot forecast endpoints."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._session = session
        self._api_key = api_key
        self._timeout = timeout

    async def _fetch(self, endpoint: str, spot_id: str, days: int, interval_hours: Optional[int] = 1) -> Any:
        params: Dict[str, Any] = {"spotId": spot_id, "days": days}
        if interval_hours is not None:
            params["intervalHours"] = interval_hours
        if self._api_key:
            params["accessToken"] = self._api_key
        return await _get_json(
            self._session,
            SOURCE_SURFLINE,
            f"{SURFLINE_API_BASE}/{endpoint}",
            params,
            self._timeout,
        )

    async def fetch_wave(self, spot_id: str) -> Optional[WaveReading]:
        return parse_surfline_wave(await self._fetch("wave", spot_id, days=1))

    async def fetch_wind(self, spot_id: str) -> Optional[WindReading]:
        return parse_surfline_wind(await self._fetch("wind", spot_id, days=1))

    async def fetch_rating(self, spot_id: str) -> Optional[RatingReading]:
        return parse_surfline_rating(await self._fetch("rating", spot_id, days=1))

    async def fetch_tides(self, spot_id: str, days: int = SURFLINE_TIDE_DAYS) -> Tuple[TidalSample, ...]:
        samples = parse_surfline_tides(
            await self._fetch("tides", spot_id, days=days, interval_hours=None)
        )
        _LOGGER.debug("Surfline spot %s returned %d tide samples", spot_id, len(samples))
        return samples
