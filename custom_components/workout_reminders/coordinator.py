# File: coordinator.py
"""Coordinator for the Workout Reminders integration.

Owns the storage manager, the local notification service and the managers,
and exposes the operations mirrored by the services:

- schedule all reminders (full resync)
- record a workout completion (session log + streak + resync)
- read a streak and the days left before it is lost
- sweep expired streaks
- catalog edits and the full data reset

There is no polling: work is triggered by setup, option changes, service calls
and catalog-changed signals.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator
from homeassistant.util import dt as dt_util

from . import const
from .engines.frequency import Frequency
from .engines.models import WorkoutDefinition
from .engines.reminder_engine import DEFAULT_REMINDER_TIME
from .engines.streak_engine import StreakState
from .exceptions import (
    CatalogUnavailableError,
    StreakPersistenceError,
    WorkoutNotFoundError,
)
from .helpers.message_helpers import ReminderMessageComposer
from .managers import CatalogManager, ReminderManager, ReminderSyncResult, StreakManager
from .notification_service import LocalNotificationService
from .storage_manager import WorkoutRemindersStorageManager
from .type_defs import CompletedSessionData
from .utils.dt_utils import parse_time_of_day
from .utils.ttl_cache import TTLCache


class WorkoutRemindersCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator for the Workout Reminders integration."""

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        storage_manager: WorkoutRemindersStorageManager,
        notification_service: LocalNotificationService,
    ) -> None:
        """Initialize the WorkoutRemindersCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=None,
        )
        self.storage_manager = storage_manager
        self.notification_service = notification_service

        self.message_cache: TTLCache[Any] = TTLCache(
            const.MESSAGE_CACHE_TTL_SECONDS, const.MESSAGE_CACHE_MAX_ENTRIES
        )
        self.composer = ReminderMessageComposer(
            hass, self.message_cache, language=hass.config.language
        )

        self.catalog_manager = CatalogManager(hass, self)
        self.streak_manager = StreakManager(hass, self)
        self.reminder_manager = ReminderManager(
            hass, self, notification_service, self.composer
        )

    async def _async_setup(self) -> None:
        """Set up managers once, before the first refresh."""
        await self.catalog_manager.async_setup()
        await self.streak_manager.async_setup()
        await self.reminder_manager.async_setup()

    async def _async_update_data(self) -> dict[str, Any]:
        return self.storage_manager.data

    # -------------------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------------------

    @property
    def reminders_enabled(self) -> bool:
        return bool(
            self.config_entry.options.get(
                const.CONF_REMINDERS_ENABLED, const.DEFAULT_REMINDERS_ENABLED
            )
        )

    @property
    def reminder_time(self) -> tuple[int, int]:
        """Configured local reminder time as (hour, minute)."""
        return (
            parse_time_of_day(
                self.config_entry.options.get(
                    const.CONF_REMINDER_TIME, const.DEFAULT_REMINDER_TIME
                )
            )
            or DEFAULT_REMINDER_TIME
        )

    @property
    def notify_service(self) -> str:
        return self.config_entry.options.get(
            const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
        )

    # -------------------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------------------

    def get_workout_id_by_name(self, name: str) -> str | None:
        return self.catalog_manager.get_workout_id_by_name(name)

    def get_workout(self, workout_id: str) -> WorkoutDefinition:
        return self.catalog_manager.get_workout(workout_id)

    async def async_add_workout(
        self, name: str, frequency: Frequency
    ) -> WorkoutDefinition:
        workout = await self.catalog_manager.async_add_workout(name, frequency)
        self.async_set_updated_data(self.storage_manager.data)
        return workout

    async def async_update_workout(
        self,
        workout_id: str,
        name: str | None = None,
        frequency: Frequency | None = None,
    ) -> WorkoutDefinition:
        workout = await self.catalog_manager.async_update_workout(
            workout_id, name=name, frequency=frequency
        )
        self.async_set_updated_data(self.storage_manager.data)
        return workout

    async def async_remove_workout(self, workout_id: str) -> None:
        await self.catalog_manager.async_remove_workout(workout_id)
        self.async_set_updated_data(self.storage_manager.data)

    # -------------------------------------------------------------------------------------
    # Reminders
    # -------------------------------------------------------------------------------------

    async def async_schedule_all_reminders(self) -> ReminderSyncResult:
        """Replace every owned reminder with the freshly calculated set."""
        return await self.reminder_manager.async_schedule_all_reminders()

    # -------------------------------------------------------------------------------------
    # Completion and Streaks
    # -------------------------------------------------------------------------------------

    async def async_record_workout_completion(
        self, workout_id: str, completed_on: date | None = None
    ) -> StreakState:
        """Log a completed session, update the streak and resync reminders.

        Raises:
            WorkoutNotFoundError: unknown workout.
            StreakPersistenceError: the streak could not be stored; reminders
                are still resynchronized and the computed state is attached.
        """
        workout = self.get_workout(workout_id)
        completed_on = completed_on or dt_util.now().date()

        self.storage_manager.append_session(
            CompletedSessionData(
                workout_id=workout_id, completed_at=completed_on.isoformat()
            )
        )

        try:
            outcome = await self.streak_manager.async_record_completion(
                workout, completed_on
            )
        except StreakPersistenceError:
            await self.async_schedule_all_reminders()
            raise

        await self.async_schedule_all_reminders()
        self.async_set_updated_data(self.storage_manager.data)
        return outcome.state

    def get_streak_state(self, workout_id: str) -> StreakState:
        return self.streak_manager.get_streak_state(workout_id)

    def get_days_until_streak_loss(
        self, workout_id: str, today: date | None = None
    ) -> int:
        """Days left before the streak is lost; 0 for unknown workouts."""
        try:
            workout = self.get_workout(workout_id)
        except WorkoutNotFoundError:
            return 0
        return self.streak_manager.get_days_until_loss(workout, today)

    async def async_sweep_expired_streaks(self, today: date | None = None) -> list[str]:
        """Clear live streaks whose grace window elapsed; returns reset ids."""
        try:
            workouts = self.storage_manager.load_workout_definitions()
        except CatalogUnavailableError as err:
            const.LOGGER.warning("WARNING: Streak sweep skipped: %s", err)
            return []

        reset_ids = await self.streak_manager.async_sweep_expired_streaks(
            workouts, today
        )
        if reset_ids:
            self.async_set_updated_data(self.storage_manager.data)
        return reset_ids

    # -------------------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------------------

    async def async_reset_all_data(self) -> None:
        """Cancel owned reminders and clear catalog, sessions and streaks."""
        await self.reminder_manager.async_cancel_all_reminders()
        await self.storage_manager.async_clear_data()
        self.async_set_updated_data(self.storage_manager.data)
