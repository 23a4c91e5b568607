"""Diagnostics support for the Workout Reminders integration.

Returns the raw storage data (catalog, session log, streak records) plus the
notification service's pending items.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import WorkoutRemindersCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: WorkoutRemindersCoordinator = hass.data[const.DOMAIN][
        entry.entry_id
    ][const.COORDINATOR]

    return {
        "options": dict(entry.options),
        "storage": coordinator.storage_manager.data,
        "scheduled_notifications": (
            await coordinator.notification_service.async_list_scheduled()
        ),
    }
