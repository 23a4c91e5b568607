"""Catalog Manager - create, update and remove workouts.

Every successful change is persisted and announced with the catalog-changed
signal, which the reminder manager answers with a full resync.
"""

from __future__ import annotations

import uuid

from homeassistant.util import dt as dt_util

from .. import const
from ..engines.frequency import Frequency, frequency_to_dict
from ..engines.models import WorkoutDefinition
from ..exceptions import WorkoutNotFoundError, WorkoutRemindersError
from ..type_defs import WorkoutData
from .base_manager import BaseManager


class CatalogManager(BaseManager):
    """Edits the workout catalog."""

    async def async_setup(self) -> None:
        const.LOGGER.debug(
            "DEBUG: CatalogManager ready with %s workout(s)",
            len(self.storage_manager.get_workouts()),
        )

    def get_workout(self, workout_id: str) -> WorkoutDefinition:
        """Return one workout.

        Raises:
            WorkoutNotFoundError: unknown id or malformed record.
        """
        record = self.storage_manager.get_workouts().get(workout_id)
        if record is None:
            raise WorkoutNotFoundError(
                const.ERROR_WORKOUT_NOT_FOUND_FMT.format(workout_id)
            )
        try:
            return WorkoutDefinition.from_dict(workout_id, record)
        except ValueError as err:
            raise WorkoutNotFoundError(str(err)) from err

    def get_workout_id_by_name(self, name: str) -> str | None:
        """Retrieve the workout_id for a name (case-insensitive)."""
        wanted = name.strip().casefold()
        for workout_id, record in self.storage_manager.get_workouts().items():
            if str(record.get(const.DATA_WORKOUT_NAME, "")).casefold() == wanted:
                return workout_id
        return None

    async def async_add_workout(
        self, name: str, frequency: Frequency
    ) -> WorkoutDefinition:
        """Add a workout and return its definition."""
        name = name.strip()
        if self.get_workout_id_by_name(name):
            raise WorkoutRemindersError(const.ERROR_WORKOUT_EXISTS_FMT.format(name))

        workout_id = str(uuid.uuid4())
        now_iso = dt_util.utcnow().isoformat()
        self.storage_manager.upsert_workout(
            workout_id,
            WorkoutData(
                workout_id=workout_id,
                name=name,
                frequency=frequency_to_dict(frequency),
                created_at=now_iso,
                updated_at=now_iso,
            ),
        )
        await self.storage_manager.async_save()

        const.LOGGER.info("INFO: Added workout '%s' (%s)", name, frequency.kind)
        self.emit(const.SIGNAL_SUFFIX_CATALOG_CHANGED, workout_id=workout_id)
        return WorkoutDefinition(workout_id=workout_id, name=name, frequency=frequency)

    async def async_update_workout(
        self,
        workout_id: str,
        name: str | None = None,
        frequency: Frequency | None = None,
    ) -> WorkoutDefinition:
        """Rename a workout and/or change its frequency."""
        current = self.get_workout(workout_id)
        record = dict(self.storage_manager.get_workouts()[workout_id])

        if name is not None:
            name = name.strip()
            existing_id = self.get_workout_id_by_name(name)
            if existing_id and existing_id != workout_id:
                raise WorkoutRemindersError(
                    const.ERROR_WORKOUT_EXISTS_FMT.format(name)
                )
            record[const.DATA_WORKOUT_NAME] = name
        if frequency is not None:
            record[const.DATA_WORKOUT_FREQUENCY] = frequency_to_dict(frequency)
        record[const.DATA_WORKOUT_UPDATED_AT] = dt_util.utcnow().isoformat()

        self.storage_manager.upsert_workout(workout_id, record)
        await self.storage_manager.async_save()

        updated = WorkoutDefinition(
            workout_id=workout_id,
            name=record[const.DATA_WORKOUT_NAME],
            frequency=current.frequency if frequency is None else frequency,
        )
        const.LOGGER.info("INFO: Updated workout '%s'", updated.name)
        self.emit(const.SIGNAL_SUFFIX_CATALOG_CHANGED, workout_id=workout_id)
        return updated

    async def async_remove_workout(self, workout_id: str) -> None:
        """Remove a workout; its sessions and streak record are kept."""
        if not self.storage_manager.remove_workout(workout_id):
            raise WorkoutNotFoundError(
                const.ERROR_WORKOUT_NOT_FOUND_FMT.format(workout_id)
            )
        await self.storage_manager.async_save()

        const.LOGGER.info("INFO: Removed workout '%s'", workout_id)
        self.emit(const.SIGNAL_SUFFIX_CATALOG_CHANGED, workout_id=workout_id)
