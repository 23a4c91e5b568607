"""Tests for streak persistence and the expiry sweep."""

# pylint: disable=redefined-outer-name,protected-access

from datetime import date
from unittest.mock import MagicMock, patch

from freezegun import freeze_time
from homeassistant.core import HomeAssistant
import pytest

from custom_components.workout_reminders import const
from custom_components.workout_reminders.engines.frequency import (
    FlexibleFrequency,
    IntervalFrequency,
    WeeklyFrequency,
)
from custom_components.workout_reminders.engines.models import WorkoutDefinition
from custom_components.workout_reminders.engines.streak_engine import (
    STREAK_TRANSITION_CONTINUED,
    STREAK_TRANSITION_STARTED,
    StreakState,
)
from custom_components.workout_reminders.exceptions import (
    StorageWriteError,
    StreakPersistenceError,
)
from custom_components.workout_reminders.managers import StreakManager

LEGS = WorkoutDefinition("w_legs", "Legs", WeeklyFrequency(3))
CARDIO = WorkoutDefinition("w_cardio", "Cardio", IntervalFrequency(2))
YOGA = WorkoutDefinition("w_yoga", "Yoga", FlexibleFrequency())


@pytest.fixture
def manager(hass: HomeAssistant, mock_coordinator: MagicMock) -> StreakManager:
    """Streak manager over an empty store."""
    return StreakManager(hass, mock_coordinator)


class TestReadState:
    """get_streak_state() and get_days_until_loss()."""

    def test_unknown_workout_is_empty(self, manager: StreakManager) -> None:
        state = manager.get_streak_state("w_legs")

        assert state == StreakState(workout_id="w_legs")
        assert manager.get_days_until_loss(LEGS, date(2024, 3, 4)) == 0

    def test_malformed_record_is_empty(
        self, manager: StreakManager, mock_coordinator: MagicMock
    ) -> None:
        mock_coordinator.storage_manager.set_streak_record(
            "w_legs", {const.DATA_STREAK_CURRENT: "lots"}
        )

        assert manager.get_streak_state("w_legs").current == 0


class TestRecordCompletion:
    """async_record_completion()."""

    async def test_completion_persisted(
        self, manager: StreakManager, mock_coordinator: MagicMock
    ) -> None:
        first = await manager.async_record_completion(CARDIO, date(2024, 1, 1))
        second = await manager.async_record_completion(CARDIO, date(2024, 1, 2))

        assert first.transition == STREAK_TRANSITION_STARTED
        assert second.transition == STREAK_TRANSITION_CONTINUED

        record = mock_coordinator.storage_manager.get_streak_record("w_cardio")
        assert record[const.DATA_STREAK_CURRENT] == 2
        assert record[const.DATA_STREAK_LAST_COMPLETED_DATE] == "2024-01-02"
        assert manager.get_streak_state("w_cardio") == second.state
        assert manager.get_days_until_loss(CARDIO, date(2024, 1, 3)) == 3

    async def test_save_failure_carries_state(
        self, manager: StreakManager, mock_coordinator: MagicMock
    ) -> None:
        with (
            patch.object(
                mock_coordinator.storage_manager,
                "async_save",
                side_effect=StorageWriteError("disk full"),
            ),
            pytest.raises(StreakPersistenceError) as err,
        ):
            await manager.async_record_completion(LEGS, date(2024, 3, 6))

        assert err.value.state.current == 1
        assert err.value.state.last_completed_date == date(2024, 3, 6)


class TestSweep:
    """async_sweep_expired_streaks()."""

    async def test_only_expired_live_streaks_cleared(
        self, manager: StreakManager, mock_coordinator: MagicMock
    ) -> None:
        await manager.async_record_completion(LEGS, date(2024, 3, 1))
        await manager.async_record_completion(CARDIO, date(2024, 3, 10))
        await manager.async_record_completion(YOGA, date(2024, 3, 1))

        # Legs window ends 03-15, Cardio 03-14, Yoga 03-15
        reset_ids = await manager.async_sweep_expired_streaks(
            [LEGS, CARDIO, YOGA], today=date(2024, 3, 15)
        )

        assert reset_ids == ["w_cardio"]
        cleared = manager.get_streak_state("w_cardio")
        assert cleared.current == 0
        assert cleared.longest == 1
        assert cleared.last_completed_date == date(2024, 3, 10)
        assert len(cleared.history) == 1
        assert manager.get_streak_state("w_legs").current == 1

    async def test_sweep_is_idempotent(self, manager: StreakManager) -> None:
        await manager.async_record_completion(LEGS, date(2024, 1, 1))

        first = await manager.async_sweep_expired_streaks([LEGS], date(2024, 3, 1))
        second = await manager.async_sweep_expired_streaks([LEGS], date(2024, 3, 1))

        assert first == ["w_legs"]
        assert second == []

    async def test_workouts_without_record_skipped(
        self, manager: StreakManager, mock_coordinator: MagicMock
    ) -> None:
        with patch.object(mock_coordinator.storage_manager, "async_save") as save:
            reset_ids = await manager.async_sweep_expired_streaks(
                [LEGS, CARDIO], date(2024, 3, 1)
            )

        assert reset_ids == []
        save.assert_not_called()
        assert mock_coordinator.storage_manager.get_streaks() == {}


@freeze_time("2024-03-10 12:00:00", tz_offset=0)
async def test_days_until_loss_uses_local_today(
    manager: StreakManager, mock_coordinator: MagicMock
) -> None:
    mock_coordinator.storage_manager.set_streak_record(
        "w_legs",
        StreakState(
            workout_id="w_legs",
            current=1,
            longest=1,
            last_completed_date=date(2024, 3, 6),
        ).as_dict(),
    )

    # Window ends 03-20
    assert manager.get_days_until_loss(LEGS) == 10
