"""Sensor platform for Tide Conditions."""
from abc import ABC, abstractmethod
from homeassistant.core import HomeAssistant
from homeassistant.config_entries import ConfigEntry
from homeassistant.components.sensor import SensorEntity
import logging
from typing import Any, Dict, Optional

from .const import (
    DOMAIN,
    CONF_NAME,
    DEFAULT_NAME,
    SENSOR_SURF_SUFFIX,
    SENSOR_TIDE_LEVEL,
    SENSOR_TIDE_POOLS,
)
from .data_formatter import DataFormatter
from .data_schema import ConditionsSnapshot, SurfSpotConfig
from .hub import TideConditionsHub

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(hass: HomeAssistant, config_entry: ConfigEntry, async_add_entities):
    """Set up tide condition sensors from a config entry."""
    hub: TideConditionsHub = hass.data[DOMAIN][config_entry.entry_id]
    name = config_entry.data.get(CONF_NAME, DEFAULT_NAME)

    sensors = [
        TideLevelSensor(hub, name, config_entry.entry_id),
        TidePoolSensor(hub, name, config_entry.entry_id),
    ]
    for spot in hub.spots:
        sensors.append(SurfConditionSensor(hub, name, config_entry.entry_id, spot))

    _LOGGER.debug("Adding %d tide condition sensors for %s", len(sensors), name)
    async_add_entities(sensors, True)


class TideConditionsSensor(SensorEntity, ABC):
    """Shared plumbing: device info and snapshot refresh through the hub."""

    should_poll = True

    def __init__(self, hub: TideConditionsHub, location: str, config_entry_id: str, key: str):
        self._hub = hub
        self._location = location
        self._config_entry_id = config_entry_id
        self._unique_id = f"{config_entry_id}_{key}"
        self._state = None
        self._attrs: Dict[str, Any] = {}

    @property
    def unique_id(self):
        return self._unique_id

    @property
    def native_value(self):
        return self._state

    @property
    def extra_state_attributes(self):
        return self._attrs

    @property
    def device_info(self):
        return {
            "identifiers": {(DOMAIN, self._config_entry_id)},
            "name": self._location,
            "manufacturer": "Tide Conditions",
            "model": f"Station {self._hub.config.station_id}",
            "entry_type": "service",
        }

    @abstractmethod
    def _apply(self, snapshot: ConditionsSnapshot) -> None:
        """Copy this sensor's state and attributes out of a snapshot."""

    async def async_update(self):
        snapshot = await self._hub.async_get_snapshot()
        self._apply(snapshot)


class TideLevelSensor(TideConditionsSensor):
    """Current water level with direction and the upcoming highs and lows."""

    def __init__(self, hub, location, config_entry_id):
        super().__init__(hub, location, config_entry_id, SENSOR_TIDE_LEVEL)

    @property
    def name(self):
        return f"{self._location} Tide Level"

    @property
    def icon(self):
        if self._attrs.get("is_rising"):
            return "mdi:waves-arrow-up"
        return "mdi:waves-arrow-right"

    @property
    def native_unit_of_measurement(self):
        return "ft"

    def _apply(self, snapshot: ConditionsSnapshot) -> None:
        self._state = round(snapshot.current.height, 2)
        self._attrs = DataFormatter.format_tide_attributes(snapshot, self._hub.config.station_id)


class TidePoolSensor(TideConditionsSensor):
    """Tide-pool rating with today's window and the weekly outlook."""

    def __init__(self, hub, location, config_entry_id):
        super().__init__(hub, location, config_entry_id, SENSOR_TIDE_POOLS)

    @property
    def name(self):
        return f"{self._location} Tide Pools"

    @property
    def icon(self):
        return "mdi:jellyfish"

    def _apply(self, snapshot: ConditionsSnapshot) -> None:
        self._state = snapshot.tide_pools.rating.value
        self._attrs = DataFormatter.format_tide_pool_attributes(
            snapshot.tide_pools, snapshot.tide_pool_outlook
        )


class SurfConditionSensor(TideConditionsSensor):
    """Tide-driven surf quality for one spot, plus the latest surf report."""

    def __init__(self, hub, location, config_entry_id, spot: SurfSpotConfig):
        super().__init__(
            hub, location, config_entry_id, f"{spot.spot_id}_{SENSOR_SURF_SUFFIX}"
        )
        self._spot = spot

    @property
    def name(self):
        return f"{self._spot.display_name} Surf"

    @property
    def icon(self):
        return "mdi:surfing"

    def _apply(self, snapshot: ConditionsSnapshot) -> None:
        condition = next(
            (c for c in snapshot.surf_conditions if c.spot_id == self._spot.spot_id), None
        )
        if condition is None:
            _LOGGER.debug("No surf condition for %s in snapshot", self._spot.spot_id)
            self._state = None
            self._attrs = {}
            return

        report: Optional[Any] = next(
            (r for r in snapshot.spot_reports if r.spot_id == self._spot.spot_id), None
        )
        self._state = condition.quality.value
        self._attrs = DataFormatter.format_surf_attributes(condition, self._spot, report)
        self._attrs["is_stale"] = snapshot.is_stale
