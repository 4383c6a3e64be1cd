"""Config flow for the Counter Device integration."""
from __future__ import annotations

import logging
import voluptuous as vol
from typing import Any

from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResult
from homeassistant.exceptions import HomeAssistantError

from counter_devices import CounterClient

from .const import DOMAIN, CONF_ADDRESS

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_ADDRESS): str,
    }
)


async def validate_input(hass: HomeAssistant, data: dict[str, Any]) -> dict[str, Any]:
    """Validate the user input allows us to connect.

    Data has the keys from STEP_USER_DATA_SCHEMA with values provided by the user.
    """
    address = data[CONF_ADDRESS].strip()
    client = CounterClient(address)

    try:
        # Test the address by reading the counter once
        state = await hass.async_add_executor_job(client.refresh)
    finally:
        await hass.async_add_executor_job(client.close)

    if not state.ok:
        _LOGGER.warning("Cannot read counter at %s: %s", address, state.status)
        raise CannotConnect

    # Return info that you want to store in the config entry.
    return {"title": f"Counter ({address})", "address": address}


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Counter Device."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}

        if user_input is not None:
            try:
                info = await validate_input(self.hass, user_input)
            except CannotConnect:
                errors["base"] = "cannot_connect"
            except Exception:  # pylint: disable=broad-except
                _LOGGER.exception("Unexpected exception")
                errors["base"] = "unknown"
            else:
                await self.async_set_unique_id(info["address"])
                self._abort_if_unique_id_configured()
                return self.async_create_entry(
                    title=info["title"], data={CONF_ADDRESS: info["address"]}
                )

        return self.async_show_form(
            step_id="user", data_schema=STEP_USER_DATA_SCHEMA, errors=errors
        )


class CannotConnect(HomeAssistantError):
    """Error to indicate we cannot connect."""
