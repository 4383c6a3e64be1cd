"""Constants for the Counter Device integration."""

DOMAIN = "counter_device"

# Configuration keys
CONF_ADDRESS = "address"

# Update intervals
UPDATE_INTERVAL = 30  # seconds

# Device info
MANUFACTURER = "Counter Remote"
MODEL = "Networked Counter"
