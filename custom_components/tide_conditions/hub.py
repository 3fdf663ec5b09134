"""Per config entry owner of the engine and its snapshot cache.

Sensors ask the hub for a snapshot on every poll. The hub only runs a new
evaluation when the cached one has aged out, and a lock keeps concurrent
polls from starting more than one.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple

import aiohttp
from homeassistant.util import dt as dt_util

from .api import NoaaTidesClient, SurflineClient
from .const import (
    CONF_API_KEY,
    CONF_INCLUDE_OUTLOOK,
    CONF_NAME,
    CONF_REFRESH_MINUTES,
    CONF_SPOTS,
    CONF_STATION_ID,
    CONF_TIMEZONE,
    DEFAULT_REFRESH_MINUTES,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SPOTS,
    DEFAULT_STATION_ID,
    DEFAULT_TIMEZONE,
    SURF_SPOTS,
)
from .data_schema import ConditionsSnapshot, EngineConfig, SurfSpotConfig, TideDirection
from .engine import ConditionsEngine
from .exceptions import EvaluationError
from .snapshot import placeholder_snapshot
from .storage import SnapshotStore

_LOGGER = logging.getLogger(__name__)


def spot_config_from_catalogue(spot_id: str) -> SurfSpotConfig:
    """Build the immutable config of a spot known to SURF_SPOTS."""
    entry = SURF_SPOTS[spot_id]
    lower, upper = entry["optimal_range"]
    return SurfSpotConfig(
        spot_id=spot_id,
        name=entry["name"],
        display_name=entry.get("display_name", entry["name"]),
        optimal_range=(float(lower), float(upper)),
        preferred_direction=TideDirection(entry.get("preferred_direction", "any")),
        description=entry.get("description", ""),
        rule_variant=entry["rule_variant"],
        closeout_height=float(entry["closeout_height"]),
    )


def build_engine_config(data: Mapping[str, Any]) -> EngineConfig:
    """Translate config entry data into an EngineConfig."""
    tz_name = data.get(CONF_TIMEZONE) or DEFAULT_TIMEZONE
    time_zone = dt_util.get_time_zone(tz_name)
    if time_zone is None:
        _LOGGER.error("Unknown time zone in config entry: %s", tz_name)
        raise ValueError(f"Unknown time zone: {tz_name}")

    spots: List[SurfSpotConfig] = []
    for spot_id in data.get(CONF_SPOTS, DEFAULT_SPOTS):
        if spot_id not in SURF_SPOTS:
            _LOGGER.error("Configured surf spot is not in the catalogue: %s", spot_id)
            continue
        spots.append(spot_config_from_catalogue(spot_id))

    return EngineConfig(
        station_id=str(data.get(CONF_STATION_ID) or DEFAULT_STATION_ID),
        time_zone=time_zone,
        spots=tuple(spots),
        api_key=data.get(CONF_API_KEY) or None,
        request_timeout=DEFAULT_REQUEST_TIMEOUT,
        include_outlook=bool(data.get(CONF_INCLUDE_OUTLOOK, True)),
        station_name=data.get(CONF_NAME, ""),
    )


class TideConditionsHub:
    """Keeps the latest snapshot for one station and refreshes it on demand."""

    def __init__(
        self,
        engine: ConditionsEngine,
        store: Optional[SnapshotStore] = None,
        refresh_minutes: float = DEFAULT_REFRESH_MINUTES,
    ) -> None:
        self.engine = engine
        self.store = store or SnapshotStore()
        self.max_age_seconds = float(refresh_minutes) * 60
        self._lock = asyncio.Lock()

    @classmethod
    def from_entry_data(cls, data: Mapping[str, Any], session: aiohttp.ClientSession) -> "TideConditionsHub":
        config = build_engine_config(data)
        engine = ConditionsEngine(
            config,
            NoaaTidesClient(session, config.station_id, config.time_zone, config.request_timeout),
            SurflineClient(session, config.api_key, config.request_timeout),
        )
        return cls(engine, refresh_minutes=data.get(CONF_REFRESH_MINUTES, DEFAULT_REFRESH_MINUTES))

    @property
    def config(self) -> EngineConfig:
        return self.engine.config

    @property
    def spots(self) -> Tuple[SurfSpotConfig, ...]:
        return self.engine.config.spots

    @property
    def snapshot(self) -> Optional[ConditionsSnapshot]:
        return self.store.latest

    async def async_get_snapshot(self, now: Optional[datetime] = None) -> ConditionsSnapshot:
        """Return the cached snapshot, refreshing it first when it has aged out."""
        async with self._lock:
            latest = self.store.latest
            if latest is not None and self.store.is_fresh(self.max_age_seconds, now):
                return latest
            return await self._async_refresh(now)

    async def async_refresh(self, now: Optional[datetime] = None) -> ConditionsSnapshot:
        async with self._lock:
            return await self._async_refresh(now)

    async def _async_refresh(self, now: Optional[datetime]) -> ConditionsSnapshot:
        now = now or dt_util.now()
        previous = self.store.latest
        if previous is not None and previous.is_placeholder:
            previous = None

        try:
            snapshot = await self.engine.async_evaluate(now, previous_snapshot=previous)
        except EvaluationError as exc:
            _LOGGER.warning("Publishing placeholder tide conditions: %s", exc)
            snapshot = placeholder_snapshot(now, self.spots)

        self.store.publish(snapshot, now)
        return snapshot
