# File: helpers/entry_helpers.py
"""Config entry and dispatcher helpers for Workout Reminders."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.exceptions import HomeAssistantError

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import WorkoutRemindersCoordinator


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build an instance-scoped dispatcher signal name.

    Example:
        >>> get_event_signal("abc123", const.SIGNAL_SUFFIX_CATALOG_CHANGED)
        'workout_reminders_abc123_catalog_changed'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


def get_first_workout_reminders_entry(hass: HomeAssistant) -> str | None:
    """Retrieve the first set-up Workout Reminders config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)


def get_coordinator(hass: HomeAssistant) -> WorkoutRemindersCoordinator:
    """Return the coordinator of the first entry.

    Raises:
        HomeAssistantError: no entry is set up.
    """
    entry_id = get_first_workout_reminders_entry(hass)
    if not entry_id:
        raise HomeAssistantError(const.MSG_NO_ENTRY_FOUND)
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]
