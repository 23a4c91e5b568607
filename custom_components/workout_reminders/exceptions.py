# File: exceptions.py
"""Exceptions raised by the Workout Reminders integration.

All errors derive from HomeAssistantError so service handlers surface them to
the caller with their message. None of them is fatal to Home Assistant: the
scheduler degrades to fewer reminders and the streak flow still returns the
computed state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.exceptions import HomeAssistantError

if TYPE_CHECKING:
    from .engines.streak_engine import StreakState


class WorkoutRemindersError(HomeAssistantError):
    """Base error for the integration."""


class CatalogUnavailableError(WorkoutRemindersError):
    """The workout catalog could not be read."""


class HistoryUnavailableError(WorkoutRemindersError):
    """The completed-session log could not be read."""


class NotificationCallError(WorkoutRemindersError):
    """A single schedule/cancel call on the notification service failed."""


class StorageWriteError(WorkoutRemindersError):
    """Persisting integration data failed."""


class WorkoutNotFoundError(WorkoutRemindersError):
    """No workout with the requested id or name exists."""


class StreakPersistenceError(StorageWriteError):
    """A streak update was computed but could not be stored.

    The computed state is attached so callers can still show it.
    """

    def __init__(self, message: str, state: StreakState) -> None:
        super().__init__(message)
        self.state = state
