"""Streak Manager - persistence around the pure streak engine.

Reads and writes one streak record per workout through the storage manager,
applies completions with `StreakEngine` and runs the expiry sweep.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import date
from typing import TYPE_CHECKING

from homeassistant.util import dt as dt_util

from .. import const
from ..engines.streak_engine import StreakEngine, StreakOutcome, StreakState
from ..exceptions import StorageWriteError, StreakPersistenceError
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import WorkoutRemindersCoordinator
    from ..engines.models import WorkoutDefinition


class StreakManager(BaseManager):
    """Owns the stored streak state of every workout."""

    def __init__(
        self, hass: HomeAssistant, coordinator: WorkoutRemindersCoordinator
    ) -> None:
        super().__init__(hass, coordinator)
        self._locks: dict[str, asyncio.Lock] = {}

    async def async_setup(self) -> None:
        const.LOGGER.debug(
            "DEBUG: StreakManager ready with %s stored streak(s)",
            len(self.storage_manager.get_streaks()),
        )

    def get_streak_state(self, workout_id: str) -> StreakState:
        """Return the stored state, or a fresh Empty state if none exists."""
        record = self.storage_manager.get_streak_record(workout_id)
        if not record:
            return StreakState(workout_id=workout_id)
        try:
            return StreakState.from_dict(workout_id, record)
        except (TypeError, ValueError) as err:
            const.LOGGER.warning(
                "WARNING: Stored streak for '%s' is malformed, starting over: %s",
                workout_id,
                err,
            )
            return StreakState(workout_id=workout_id)

    def get_days_until_loss(
        self, workout: WorkoutDefinition, today: date | None = None
    ) -> int:
        """Whole days left before the workout's streak would be lost."""
        return StreakEngine.days_until_loss(
            self.get_streak_state(workout.workout_id),
            workout.frequency,
            today or dt_util.now().date(),
        )

    async def async_record_completion(
        self, workout: WorkoutDefinition, completed_on: date
    ) -> StreakOutcome:
        """Apply one completion and persist the full new state.

        Raises:
            StreakPersistenceError: the state was computed but not stored; it is
                attached to the exception.
        """
        lock = self._locks.setdefault(workout.workout_id, asyncio.Lock())
        async with lock:
            outcome = StreakEngine.apply_completion(
                self.get_streak_state(workout.workout_id),
                workout.frequency,
                completed_on,
            )
            self.storage_manager.set_streak_record(
                workout.workout_id, dict(outcome.state.as_dict())
            )
            try:
                await self.storage_manager.async_save()
            except StorageWriteError as err:
                raise StreakPersistenceError(
                    f"Streak for '{workout.name}' could not be saved: {err}",
                    outcome.state,
                ) from err

        const.LOGGER.info(
            "INFO: Streak for '%s' %s: %s (longest %s)",
            workout.name,
            outcome.transition,
            outcome.state.current,
            outcome.state.longest,
        )
        return outcome

    async def async_sweep_expired_streaks(
        self, workouts: Sequence[WorkoutDefinition], today: date | None = None
    ) -> list[str]:
        """Clear every live streak whose grace window has elapsed.

        Only `current` is reset; history, longest and the last date stay.
        Returns the ids of the workouts that were reset.
        """
        today = today or dt_util.now().date()
        reset_ids: list[str] = []

        for workout in workouts:
            if self.storage_manager.get_streak_record(workout.workout_id) is None:
                continue
            state = self.get_streak_state(workout.workout_id)
            if not StreakEngine.is_expired(state, workout.frequency, today):
                continue
            cleared = StreakEngine.clear_current(state)
            self.storage_manager.set_streak_record(
                workout.workout_id, dict(cleared.as_dict())
            )
            reset_ids.append(workout.workout_id)
            const.LOGGER.debug(
                "DEBUG: Streak for '%s' expired (last completed %s)",
                workout.workout_id,
                state.last_completed_date,
            )

        if reset_ids:
            await self.storage_manager.async_save()
            const.LOGGER.info("INFO: Expired %s streak(s)", len(reset_ids))
        return reset_ids
