"""Support for counter device sensors."""
from __future__ import annotations

import logging

from homeassistant.components.sensor import SensorEntity, SensorStateClass
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
    """Set up counter device sensor entities."""
    coordinator: CounterDataUpdateCoordinator = hass.data[DOMAIN][config_entry.entry_id]

    async_add_entities([
        CounterValueSensor(coordinator, config_entry.entry_id),
        CounterStatusSensor(coordinator, config_entry.entry_id),
    ])


class CounterSensorBase(CoordinatorEntity, SensorEntity):
    """Base class for counter device sensors."""

    def __init__(self, coordinator, device_id, sensor_type):
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._device_id = device_id
        self._sensor_type = sensor_type
        self._attr_unique_id = f"{device_id}_{sensor_type}"
        self._attr_name = f"Counter {coordinator.address} {sensor_type.title()}"

    @property
    def device_info(self):
        """Return device information."""
        return {
            "identifiers": {(DOMAIN, self._device_id)},
            "name": f"Counter {self.coordinator.address}",
            "manufacturer": MANUFACTURER,
            "model": MODEL,
        }


class CounterValueSensor(CounterSensorBase):
    """Counter value reported by the device."""

    def __init__(self, coordinator, device_id):
        """Initialize the counter sensor."""
        super().__init__(coordinator, device_id, "count")
        self._attr_state_class = SensorStateClass.MEASUREMENT
        self._attr_icon = "mdi:counter"

    @property
    def native_value(self) -> int | None:
        """Return the last confirmed counter value."""
        return self.coordinator.get_count()

    @property
    def extra_state_attributes(self):
        """Return the raw text read from the device."""
        if self.coordinator.data:
            return {"raw_value": self.coordinator.data.value}
        return {}


class CounterStatusSensor(CounterSensorBase):
    """Status of the last operation against the device."""

    def __init__(self, coordinator, device_id):
        """Initialize the status sensor."""
        super().__init__(coordinator, device_id, "status")
        self._attr_icon = "mdi:information-outline"

    @property
    def available(self) -> bool:
        """Return True once any operation has produced a status, including a failed poll."""
        return self.coordinator.data is not None

    @property
    def native_value(self) -> str | None:
        """Return the status message."""
        return self.coordinator.get_status()

    @property
    def extra_state_attributes(self):
        """Return the phase of the last operation."""
        if self.coordinator.data:
            return {"phase": self.coordinator.data.phase.value}
        return {}
