"""Support for counter device buttons."""
from __future__ import annotations

import logging

from homeassistant.components.button import ButtonEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, MANUFACTURER, MODEL
from .coordinator import CounterDataUpdateCoordinator

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up counter device button entities."""
    coordinator: CounterDataUpdateCoordinator = hass.data[DOMAIN][config_entry.entry_id]

    async_add_entities([
        CounterIncrementButton(coordinator, config_entry.entry_id),
        CounterDecrementButton(coordinator, config_entry.entry_id),
    ])


class CounterButtonBase(CoordinatorEntity, ButtonEntity):
    """Base class for counter device buttons."""

    def __init__(self, coordinator, device_id, button_type):
        """Initialize the button."""
        super().__init__(coordinator)
        self._device_id = device_id
        self._button_type = button_type
        self._attr_unique_id = f"{device_id}_{button_type}"
        self._attr_name = f"Counter {coordinator.address} {button_type.title()}"

    @property
    def device_info(self):
        """Return device information."""
        return {
            "identifiers": {(DOMAIN, self._device_id)},
            "name": f"Counter {self.coordinator.address}",
            "manufacturer": MANUFACTURER,
            "model": MODEL,
        }

    @property
    def available(self) -> bool:
        """Return True, presses are attempted even when the last poll failed."""
        return True


class CounterIncrementButton(CounterButtonBase):
    """Increment the counter on the device."""

    def __init__(self, coordinator, device_id):
        """Initialize the increment button."""
        super().__init__(coordinator, device_id, "increment")
        self._attr_icon = "mdi:plus"

    async def async_press(self) -> None:
        """Handle the button press."""
        await self.coordinator.async_increment()


class CounterDecrementButton(CounterButtonBase):
    """Decrement the counter on the device."""

    def __init__(self, coordinator, device_id):
        """Initialize the decrement button."""
        super().__init__(coordinator, device_id, "decrement")
        self._attr_icon = "mdi:minus"

    async def async_press(self) -> None:
        """Handle the button press."""
        await self.coordinator.async_decrement()
