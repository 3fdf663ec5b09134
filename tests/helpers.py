"""Shared builders and fake upstream clients for the test suite."""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Sequence

from custom_components.tide_conditions.data_schema import (
    EngineConfig,
    SurfSpotConfig,
    TidalSample,
    TideDirection,
    TideKind,
)

UTC = timezone.utc
PDT = timezone(timedelta(hours=-7))


def at(hour: int, minute: int = 0, day: int = 1, tz=UTC) -> datetime:
    return datetime(2024, 6, day, hour, minute, tzinfo=tz)


def sample(hour: int, height: float, kind: TideKind = TideKind.UNSPECIFIED, day: int = 1, minute: int = 0, tz=UTC) -> TidalSample:
    return TidalSample(timestamp=at(hour, minute, day, tz), height=height, kind=kind)


def make_spot(
    spot_id: str = "spot-a",
    optimal_range=(0.5, 3.5),
    preferred: TideDirection = TideDirection.RISING,
    rule_variant: str = "standard",
    closeout_height: float = 4.5,
) -> SurfSpotConfig:
    return SurfSpotConfig(
        spot_id=spot_id,
        name=f"Spot {spot_id}",
        display_name=f"Spot {spot_id}",
        optimal_range=optimal_range,
        preferred_direction=preferred,
        description="test spot",
        rule_variant=rule_variant,
        closeout_height=closeout_height,
    )


def make_config(spots: Sequence[SurfSpotConfig] = (), **overrides) -> EngineConfig:
    params: Dict[str, Any] = {
        "station_id": "9413745",
        "time_zone": UTC,
        "spots": tuple(spots),
        "request_timeout": 0.5,
    }
    params.update(overrides)
    return EngineConfig(**params)


class FakeTideClient:
    """Stands in for NoaaTidesClient; each result may be a value, an exception or a delay."""

    def __init__(self, high_low=(), continuous=(), chart=(), weekly=(), delay: float = 0.0):
        self.results = {
            "high_low": high_low,
            "continuous": continuous,
            "chart": chart,
            "weekly": weekly,
        }
        self.delay = delay
        self.calls = []

    async def _answer(self, key: str):
        self.calls.append(key)
        if self.delay:
            await asyncio.sleep(self.delay)
        result = self.results[key]
        if isinstance(result, Exception):
            raise result
        return tuple(result)

    async def fetch_high_low(self, now, days=2):
        return await self._answer("high_low")

    async def fetch_continuous(self, now, before=None, after=None):
        return await self._answer("continuous")

    async def fetch_chart_window(self, now, hours=24):
        return await self._answer("chart")

    async def fetch_weekly_high_low(self, now, days=7):
        return await self._answer("weekly")


class FakeSurfClient:
    """Stands in for SurflineClient with per-spot tide answers."""

    def __init__(self, tides: Optional[Dict[str, Any]] = None, wave=None, wind=None, rating=None, slow_spots=()):
        self.tides = tides or {}
        self.wave = wave
        self.wind = wind
        self.rating = rating
        self.slow_spots = set(slow_spots)
        self.calls = []

    async def _maybe_stall(self, spot_id: str):
        if spot_id in self.slow_spots:
            await asyncio.sleep(10)

    async def fetch_wave(self, spot_id):
        self.calls.append(("wave", spot_id))
        await self._maybe_stall(spot_id)
        return self.wave

    async def fetch_wind(self, spot_id):
        self.calls.append(("wind", spot_id))
        await self._maybe_stall(spot_id)
        return self.wind

    async def fetch_rating(self, spot_id):
        self.calls.append(("rating", spot_id))
        await self._maybe_stall(spot_id)
        return self.rating

    async def fetch_tides(self, spot_id, days=3):
        self.calls.append(("tides", spot_id))
        await self._maybe_stall(spot_id)
        result = self.tides.get(spot_id, ())
        if isinstance(result, Exception):
            raise result
        return tuple(result)


class FakeResponse:
    def __init__(self, status: int = 200, body: Any = None, text: str = "", json_error: Optional[Exception] = None):
        self.status = status
        self._body = body
        self._text = text
        self._json_error = json_error

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def text(self):
        return self._text

    async def json(self, content_type=None):
        if self._json_error is not None:
            raise self._json_error
        return self._body


class FakeSession:
    """Minimal aiohttp.ClientSession replacement recording GET requests."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.requests.append((url, dict(params or {})))
        if self.error is not None:
            raise self.error
        return self.response
