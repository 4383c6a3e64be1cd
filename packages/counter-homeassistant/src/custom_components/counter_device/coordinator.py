"""DataUpdateCoordinator for the Counter Device integration."""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Callable

from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from counter_devices import CounterClient, CounterState
from counter_core.errors import ProtocolError

from .const import DOMAIN, CONF_ADDRESS, UPDATE_INTERVAL

_LOGGER = logging.getLogger(__name__)


class CounterDataUpdateCoordinator(DataUpdateCoordinator[CounterState]):
    """Class to manage polling a counter device."""

    def __init__(self, hass: HomeAssistant, config: dict[str, Any]) -> None:
        """Initialize."""
        self.address = config[CONF_ADDRESS]
        self.client = CounterClient(self.address)

        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            update_interval=timedelta(seconds=UPDATE_INTERVAL),
        )

    async def _async_update_data(self) -> CounterState:
        """Read the counter from the device."""
        state = await self.hass.async_add_executor_job(self.client.refresh)
        if not state.ok:
            # Keep the failed snapshot so the status sensor shows the error; the value is unchanged.
            self.data = state
            raise UpdateFailed(f"Error communicating with counter device: {state.error}")

        _LOGGER.debug("Counter at %s reads %s", self.address, state.value)
        return state

    async def async_execute(self, operation: Callable[[], CounterState]) -> bool:
        """Run increment or decrement on the device and publish the confirmed state."""
        state = await self.hass.async_add_executor_job(operation)

        if not state.ok:
            _LOGGER.error("Error executing %s on %s: %s", operation.__name__, self.address, state.status)

        # The client kept its last confirmed value; publish it with the new status either way.
        self.async_set_updated_data(state)
        return state.ok

    async def async_increment(self) -> bool:
        return await self.async_execute(self.client.increment)

    async def async_decrement(self) -> bool:
        return await self.async_execute(self.client.decrement)

    def get_count(self) -> int | None:
        """Get the counter as an integer, or None if it cannot be parsed."""
        if not self.data:
            return None
        try:
            return self.data.count
        except ProtocolError as ex:
            _LOGGER.warning("Unreadable counter value from %s: %s", self.address, ex)
            return None

    def get_status(self) -> str | None:
        """Get the status of the last operation."""
        return self.data.status if self.data else None
