import logging
from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.core import HomeAssistant
from .const import DOMAIN
from .hub import TideConditionsHub

_LOGGER = logging.getLogger(__name__)
PLATFORMS = ["sensor"]

CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)

async def async_setup(hass: HomeAssistant, config: dict) -> bool:
    """Set up Tide Conditions from YAML (not used)."""
    return True

async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Tide Conditions from a config entry."""
    _LOGGER.debug("Setting up entry: %s", entry.entry_id)
    settings = {**entry.data, **entry.options}

    try:
        hub = TideConditionsHub.from_entry_data(settings, async_get_clientsession(hass))
    except ValueError as exc:
        _LOGGER.error("Invalid tide conditions configuration: %s", exc)
        return False

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = hub
    _LOGGER.info(
        "Tide conditions for station %s with %d surf spots",
        hub.config.station_id,
        len(hub.spots),
    )

    entry.async_on_unload(entry.add_update_listener(_async_reload_entry))
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True

async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    _LOGGER.debug("Unloading entry: %s", entry.entry_id)
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id, None)

    return unload_ok

async def _async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Rebuild the hub after the options changed."""
    await hass.config_entries.async_reload(entry.entry_id)
