"""Config flow for Tide Conditions integration."""
from __future__ import annotations
import logging
from typing import Any
import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector
from homeassistant.util import dt as dt_util
from .const import (
    DOMAIN,
    CONF_NAME,
    CONF_STATION_ID,
    CONF_TIMEZONE,
    CONF_API_KEY,
    CONF_SPOTS,
    CONF_REFRESH_MINUTES,
    CONF_INCLUDE_OUTLOOK,
    DEFAULT_NAME,
    DEFAULT_STATION_ID,
    DEFAULT_TIMEZONE,
    DEFAULT_REFRESH_MINUTES,
    DEFAULT_SPOTS,
    SURF_SPOTS,
)

_LOGGER = logging.getLogger(__name__)


def _spot_options() -> list[dict[str, str]]:
    return [
        {"value": spot_id, "label": f"{spot['name']} ({spot['description']})"}
        for spot_id, spot in SURF_SPOTS.items()
    ]


def _validate(user_input: dict[str, Any]) -> dict[str, str]:
    """Return an errors dict for the settings shared by user and options steps."""
    errors: dict[str, str] = {}

    station = str(user_input.get(CONF_STATION_ID, "")).strip()
    if station and not station.isdigit():
        errors[CONF_STATION_ID] = "invalid_station"

    tz_name = user_input.get(CONF_TIMEZONE)
    if tz_name is not None and dt_util.get_time_zone(tz_name) is None:
        errors[CONF_TIMEZONE] = "invalid_timezone"

    spots = user_input.get(CONF_SPOTS)
    if spots is not None and any(spot_id not in SURF_SPOTS for spot_id in spots):
        errors[CONF_SPOTS] = "unknown_spot"

    return errors


def _settings_schema(defaults: dict[str, Any]) -> dict:
    return {
        vol.Required(
            CONF_TIMEZONE, default=defaults.get(CONF_TIMEZONE, DEFAULT_TIMEZONE)
        ): str,
        vol.Optional(
            CONF_API_KEY, default=defaults.get(CONF_API_KEY, "")
        ): str,
        vol.Required(
            CONF_SPOTS, default=defaults.get(CONF_SPOTS, DEFAULT_SPOTS)
        ): selector.SelectSelector(
            selector.SelectSelectorConfig(
                options=_spot_options(),
                multiple=True,
                mode="dropdown",
            )
        ),
        vol.Required(
            CONF_REFRESH_MINUTES,
            default=defaults.get(CONF_REFRESH_MINUTES, DEFAULT_REFRESH_MINUTES),
        ): vol.All(vol.Coerce(int), vol.Range(min=5, max=360)),
        vol.Required(
            CONF_INCLUDE_OUTLOOK, default=defaults.get(CONF_INCLUDE_OUTLOOK, True)
        ): selector.BooleanSelector(),
    }


class TideConditionsConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Tide Conditions."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        """Configure the tide station and surf spots."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = _validate(user_input)
            if not errors:
                station = str(user_input[CONF_STATION_ID]).strip()
                await self.async_set_unique_id(f"{DOMAIN}_{station}")
                self._abort_if_unique_id_configured()

                data = dict(user_input)
                data[CONF_STATION_ID] = station
                _LOGGER.debug("Creating tide conditions entry for station %s", station)
                return self.async_create_entry(title=data[CONF_NAME], data=data)

        defaults = user_input or {}
        schema = {
            vol.Required(CONF_NAME, default=defaults.get(CONF_NAME, DEFAULT_NAME)): str,
            vol.Required(
                CONF_STATION_ID, default=defaults.get(CONF_STATION_ID, DEFAULT_STATION_ID)
            ): str,
        }
        schema.update(_settings_schema(defaults))

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(schema),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: config_entries.ConfigEntry) -> config_entries.OptionsFlow:
        """Get the options flow for this handler."""
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Handle options flow for Tide Conditions."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        """Initialize options flow."""
        self._entry = config_entry

    async def async_step_init(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        """Manage spots, time zone, API key and refresh interval."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = _validate(user_input)
            if not errors:
                return self.async_create_entry(title="", data=user_input)

        defaults = {**self._entry.data, **self._entry.options}
        if user_input:
            defaults.update(user_input)

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(_settings_schema(defaults)),
            errors=errors,
        )
