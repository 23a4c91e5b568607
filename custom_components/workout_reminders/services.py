# File: services.py
"""Defines custom services for the Workout Reminders integration.

These services allow direct actions through scripts or automations: catalog
edits, recording completions, reading streaks, and on-demand reminder
resynchronization and streak sweeps.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .engines.frequency import Frequency, frequency_from_dict
from .exceptions import StreakPersistenceError
from .helpers import entry_helpers as eh

if TYPE_CHECKING:
    from .coordinator import WorkoutRemindersCoordinator

# --- Service Schemas ---
ADD_WORKOUT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_WORKOUT_NAME): cv.string,
        vol.Optional(
            const.FIELD_FREQUENCY_TYPE, default=const.FREQUENCY_NONE
        ): vol.In(const.FREQUENCY_TYPES),
        vol.Optional(const.FIELD_FREQUENCY_VALUE): vol.Coerce(int),
    }
)

UPDATE_WORKOUT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_WORKOUT_NAME): cv.string,
        vol.Optional(const.FIELD_NEW_NAME): cv.string,
        vol.Optional(const.FIELD_FREQUENCY_TYPE): vol.In(const.FREQUENCY_TYPES),
        vol.Optional(const.FIELD_FREQUENCY_VALUE): vol.Coerce(int),
    }
)

WORKOUT_NAME_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_WORKOUT_NAME): cv.string,
    }
)

RECORD_WORKOUT_COMPLETION_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_WORKOUT_NAME): cv.string,
        vol.Optional(const.FIELD_COMPLETION_DATE): cv.date,
    }
)

EMPTY_SCHEMA = vol.Schema({})


def _frequency_from_call(data: dict[str, Any]) -> Frequency:
    """Build the frequency from service fields."""
    try:
        return frequency_from_dict(
            {
                const.DATA_FREQUENCY_TYPE: data[const.FIELD_FREQUENCY_TYPE],
                const.DATA_FREQUENCY_VALUE: data.get(const.FIELD_FREQUENCY_VALUE),
            }
        )
    except ValueError as err:
        raise HomeAssistantError(str(err)) from err


def _resolve_workout_id(
    coordinator: WorkoutRemindersCoordinator, workout_name: str
) -> str:
    workout_id = coordinator.get_workout_id_by_name(workout_name)
    if not workout_id:
        const.LOGGER.warning(
            "WARNING: %s", const.ERROR_WORKOUT_NOT_FOUND_FMT.format(workout_name)
        )
        raise HomeAssistantError(
            const.ERROR_WORKOUT_NOT_FOUND_FMT.format(workout_name)
        )
    return workout_id


def async_setup_services(hass: HomeAssistant) -> None:
    """Register Workout Reminders services."""

    async def handle_add_workout(call: ServiceCall) -> ServiceResponse:
        """Handle adding a workout to the catalog."""
        coordinator = eh.get_coordinator(hass)
        workout = await coordinator.async_add_workout(
            call.data[const.FIELD_WORKOUT_NAME], _frequency_from_call(call.data)
        )
        return {
            const.ATTR_WORKOUT_ID: workout.workout_id,
            const.ATTR_WORKOUT_NAME: workout.name,
        }

    async def handle_update_workout(call: ServiceCall) -> None:
        """Handle renaming a workout or changing its frequency."""
        coordinator = eh.get_coordinator(hass)
        workout_id = _resolve_workout_id(
            coordinator, call.data[const.FIELD_WORKOUT_NAME]
        )
        frequency = (
            _frequency_from_call(call.data)
            if const.FIELD_FREQUENCY_TYPE in call.data
            else None
        )
        await coordinator.async_update_workout(
            workout_id,
            name=call.data.get(const.FIELD_NEW_NAME),
            frequency=frequency,
        )

    async def handle_remove_workout(call: ServiceCall) -> None:
        """Handle removing a workout from the catalog."""
        coordinator = eh.get_coordinator(hass)
        workout_id = _resolve_workout_id(
            coordinator, call.data[const.FIELD_WORKOUT_NAME]
        )
        await coordinator.async_remove_workout(workout_id)

    async def handle_record_workout_completion(call: ServiceCall) -> ServiceResponse:
        """Handle recording a completed session."""
        coordinator = eh.get_coordinator(hass)
        workout_name = call.data[const.FIELD_WORKOUT_NAME]
        workout_id = _resolve_workout_id(coordinator, workout_name)

        persisted = True
        try:
            state = await coordinator.async_record_workout_completion(
                workout_id, call.data.get(const.FIELD_COMPLETION_DATE)
            )
        except StreakPersistenceError as err:
            const.LOGGER.error("ERROR: %s", err)
            state = err.state
            persisted = False

        const.LOGGER.info(
            "INFO: Completion of '%s' recorded, streak %s", workout_name, state.current
        )
        return {
            **state.as_dict(),
            const.ATTR_DAYS_UNTIL_LOSS: coordinator.get_days_until_streak_loss(
                workout_id
            ),
            const.ATTR_PERSISTED: persisted,
        }

    async def handle_get_streak_state(call: ServiceCall) -> ServiceResponse:
        """Handle reading the streak of a workout."""
        coordinator = eh.get_coordinator(hass)
        workout_id = _resolve_workout_id(
            coordinator, call.data[const.FIELD_WORKOUT_NAME]
        )
        return {
            **coordinator.get_streak_state(workout_id).as_dict(),
            const.ATTR_DAYS_UNTIL_LOSS: coordinator.get_days_until_streak_loss(
                workout_id
            ),
        }

    async def handle_schedule_all_reminders(call: ServiceCall) -> ServiceResponse:
        """Handle an on-demand reminder resynchronization."""
        coordinator = eh.get_coordinator(hass)
        result = await coordinator.async_schedule_all_reminders()
        return result.as_dict()

    async def handle_sweep_expired_streaks(call: ServiceCall) -> ServiceResponse:
        """Handle an on-demand expiry sweep."""
        coordinator = eh.get_coordinator(hass)
        reset_ids = await coordinator.async_sweep_expired_streaks()
        return {const.ATTR_RESET_WORKOUT_IDS: reset_ids}

    async def handle_reset_all_data(call: ServiceCall) -> None:
        """Handle clearing the catalog, the session log and all streaks."""
        coordinator = eh.get_coordinator(hass)
        await coordinator.async_reset_all_data()
        const.LOGGER.info("INFO: Manually reset all Workout Reminders data")

    services: list[tuple[str, Any, vol.Schema, SupportsResponse]] = [
        (
            const.SERVICE_ADD_WORKOUT,
            handle_add_workout,
            ADD_WORKOUT_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_UPDATE_WORKOUT,
            handle_update_workout,
            UPDATE_WORKOUT_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_REMOVE_WORKOUT,
            handle_remove_workout,
            WORKOUT_NAME_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_RECORD_WORKOUT_COMPLETION,
            handle_record_workout_completion,
            RECORD_WORKOUT_COMPLETION_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_GET_STREAK_STATE,
            handle_get_streak_state,
            WORKOUT_NAME_SCHEMA,
            SupportsResponse.ONLY,
        ),
        (
            const.SERVICE_SCHEDULE_ALL_REMINDERS,
            handle_schedule_all_reminders,
            EMPTY_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_SWEEP_EXPIRED_STREAKS,
            handle_sweep_expired_streaks,
            EMPTY_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_RESET_ALL_DATA,
            handle_reset_all_data,
            EMPTY_SCHEMA,
            SupportsResponse.NONE,
        ),
    ]

    for service, handler, schema, supports_response in services:
        if hass.services.has_service(const.DOMAIN, service):
            continue
        hass.services.async_register(
            const.DOMAIN,
            service,
            handler,
            schema=schema,
            supports_response=supports_response,
        )

    const.LOGGER.info("INFO: Workout Reminders services have been registered")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister Workout Reminders services when unloading the integration."""
    services = [
        const.SERVICE_ADD_WORKOUT,
        const.SERVICE_UPDATE_WORKOUT,
        const.SERVICE_REMOVE_WORKOUT,
        const.SERVICE_RECORD_WORKOUT_COMPLETION,
        const.SERVICE_GET_STREAK_STATE,
        const.SERVICE_SCHEDULE_ALL_REMINDERS,
        const.SERVICE_SWEEP_EXPIRED_STREAKS,
        const.SERVICE_RESET_ALL_DATA,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Workout Reminders services have been unregistered")
