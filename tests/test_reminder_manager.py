"""Tests for the full-replace reminder synchronization.

Catalog used throughout (reference Monday 2024-03-04 08:00 UTC, 30-day horizon):
- Legs: weekly on Wednesday -> 03-06, 03-13, 03-20, 03-27
- Core and Stretch: weekly on Friday -> 03-08, 03-15, 03-22, 03-29
"""

# pylint: disable=redefined-outer-name

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch
from zoneinfo import ZoneInfo

from homeassistant.core import HomeAssistant
import pytest

from custom_components.workout_reminders import const
from custom_components.workout_reminders.helpers.message_helpers import (
    ReminderContent,
)
from custom_components.workout_reminders.managers import ReminderManager
from tests.helpers import (
    FakeNotificationService,
    make_session_record,
    make_storage_data,
    make_workout_record,
)

NOW = datetime(2024, 3, 4, 8, 0, tzinfo=ZoneInfo("UTC"))

WEDNESDAYS = ["2024-03-06", "2024-03-13", "2024-03-20", "2024-03-27"]
FRIDAYS = ["2024-03-08", "2024-03-15", "2024-03-22", "2024-03-29"]
ALL_IDS = sorted(f"{const.REMINDER_ID_PREFIX}{day}" for day in WEDNESDAYS + FRIDAYS)

CATALOG = [
    make_workout_record("w_legs", "Legs", const.FREQUENCY_WEEKLY, 3),
    make_workout_record("w_core", "Core", const.FREQUENCY_WEEKLY, 5),
    make_workout_record("w_stretch", "Stretch", const.FREQUENCY_WEEKLY, 5),
]


@pytest.fixture
def composer() -> MagicMock:
    """Composer spy returning fixed content."""
    spy = MagicMock()
    spy.async_compose = AsyncMock(
        return_value=ReminderContent(title="Go!", message="Train today.")
    )
    return spy


@pytest.fixture
def manager(
    hass: HomeAssistant,
    mock_coordinator: MagicMock,
    fake_notification_service: FakeNotificationService,
    composer: MagicMock,
) -> ReminderManager:
    """Reminder manager over the standard catalog."""
    mock_coordinator.storage_manager.set_data(make_storage_data(CATALOG))
    return ReminderManager(
        hass, mock_coordinator, fake_notification_service, composer
    )


def _owned_ids(service: FakeNotificationService) -> list[str]:
    return sorted(
        item_id
        for item_id, item in service.items.items()
        if item["payload"].get(const.PAYLOAD_TYPE)
        == const.NOTIFICATION_TYPE_WORKOUT_REMINDER
    )


class TestSchedule:
    """A pass over a populated catalog."""

    async def test_one_reminder_per_day(
        self,
        manager: ReminderManager,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        result = await manager.async_schedule_all_reminders(NOW)

        assert result.as_dict() == {"scheduled": 8, "cancelled": 0, "failed": 0}
        assert _owned_ids(fake_notification_service) == ALL_IDS

        friday = fake_notification_service.items[
            f"{const.REMINDER_ID_PREFIX}2024-03-08"
        ]
        assert friday["fire_at"] == "2024-03-08T09:00:00+00:00"
        assert friday["payload"][const.PAYLOAD_WORKOUT_IDS] == ["w_core", "w_stretch"]
        assert friday["payload"][const.PAYLOAD_WORKOUT_NAMES] == ["Core", "Stretch"]
        assert friday["payload"][const.PAYLOAD_TITLE] == "Go!"

    async def test_content_composed_once_per_day(
        self, manager: ReminderManager, composer: MagicMock
    ) -> None:
        await manager.async_schedule_all_reminders(NOW)

        assert composer.async_compose.await_count == 8
        composer.async_compose.assert_any_await("2024-03-08", ["Core", "Stretch"])
        composer.async_compose.assert_any_await("2024-03-06", ["Legs"])

    async def test_second_pass_yields_same_set(
        self,
        manager: ReminderManager,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        await manager.async_schedule_all_reminders(NOW)
        first = dict(fake_notification_service.items)

        result = await manager.async_schedule_all_reminders(NOW)

        assert result.as_dict() == {"scheduled": 8, "cancelled": 8, "failed": 0}
        assert fake_notification_service.items == first

    async def test_foreign_items_untouched(
        self,
        manager: ReminderManager,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        fake_notification_service.add_foreign("rest_1", "2024-03-05T10:00:00+00:00")

        await manager.async_schedule_all_reminders(NOW)
        await manager.async_schedule_all_reminders(NOW)

        assert "rest_1" in fake_notification_service.items
        assert "rest_1" not in fake_notification_service.cancel_calls

    async def test_failing_call_counted_and_pass_continues(
        self,
        manager: ReminderManager,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        fake_notification_service.fail_ids.add(
            f"{const.REMINDER_ID_PREFIX}2024-03-08"
        )

        result = await manager.async_schedule_all_reminders(NOW)

        assert result.failed == 1
        assert result.scheduled == 7
        assert len(fake_notification_service.schedule_calls) == 8

    async def test_compose_failure_counted_and_other_days_scheduled(
        self,
        manager: ReminderManager,
        composer: MagicMock,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        await manager.async_schedule_all_reminders(NOW)

        def _compose(day_key: str, _names: list[str]) -> ReminderContent:
            if day_key == "2024-03-06":
                raise KeyError(day_key)
            return ReminderContent(title="Go!", message="Train today.")

        composer.async_compose.side_effect = _compose

        result = await manager.async_schedule_all_reminders(NOW)

        assert result.as_dict() == {"scheduled": 7, "cancelled": 8, "failed": 1}
        assert _owned_ids(fake_notification_service) == [
            item_id
            for item_id in ALL_IDS
            if item_id != f"{const.REMINDER_ID_PREFIX}2024-03-06"
        ]


class TestCallTimeouts:
    """Calls that never return are bounded."""

    async def test_hanging_schedule_counted_as_failed(
        self,
        manager: ReminderManager,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        fake_notification_service.hang_ids.add(
            f"{const.REMINDER_ID_PREFIX}2024-03-13"
        )

        with patch(
            "custom_components.workout_reminders.const.NOTIFICATION_CALL_TIMEOUT",
            0.05,
        ):
            result = await manager.async_schedule_all_reminders(NOW)

        assert result.as_dict() == {"scheduled": 7, "cancelled": 0, "failed": 1}
        assert len(_owned_ids(fake_notification_service)) == 7

    async def test_hanging_list_counted_and_schedule_continues(
        self,
        manager: ReminderManager,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        fake_notification_service.hang_list = True

        with patch(
            "custom_components.workout_reminders.const.NOTIFICATION_CALL_TIMEOUT",
            0.05,
        ):
            result = await manager.async_schedule_all_reminders(NOW)

        assert result.as_dict() == {"scheduled": 8, "cancelled": 0, "failed": 1}
        assert _owned_ids(fake_notification_service) == ALL_IDS


class TestCancelOnly:
    """Passes that end with no reminders."""

    async def test_disabled_cancels_owned(
        self,
        manager: ReminderManager,
        mock_coordinator: MagicMock,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        await manager.async_schedule_all_reminders(NOW)
        fake_notification_service.add_foreign("rest_1", "2024-03-05T10:00:00+00:00")
        mock_coordinator.reminders_enabled = False

        result = await manager.async_schedule_all_reminders(NOW)

        assert result.as_dict() == {"scheduled": 0, "cancelled": 8, "failed": 0}
        assert list(fake_notification_service.items) == ["rest_1"]

    async def test_empty_catalog_cancels_owned(
        self,
        manager: ReminderManager,
        mock_coordinator: MagicMock,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        await manager.async_schedule_all_reminders(NOW)
        mock_coordinator.storage_manager.set_data(make_storage_data())

        result = await manager.async_schedule_all_reminders(NOW)

        assert result.cancelled == 8
        assert _owned_ids(fake_notification_service) == []

    async def test_unavailable_catalog_cancels_owned(
        self,
        manager: ReminderManager,
        mock_coordinator: MagicMock,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        await manager.async_schedule_all_reminders(NOW)
        mock_coordinator.storage_manager.data[const.DATA_WORKOUTS] = "corrupt"

        result = await manager.async_schedule_all_reminders(NOW)

        assert result.cancelled == 8
        assert _owned_ids(fake_notification_service) == []

    async def test_cancel_all(
        self,
        manager: ReminderManager,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        await manager.async_schedule_all_reminders(NOW)

        result = await manager.async_cancel_all_reminders()

        assert result.cancelled == 8
        assert fake_notification_service.items == {}


class TestIntervalHistory:
    """Interval workouts depend on the session log."""

    async def test_interval_due_day_merges_with_weekly(
        self,
        manager: ReminderManager,
        mock_coordinator: MagicMock,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        mock_coordinator.storage_manager.set_data(
            make_storage_data(
                [
                    *CATALOG,
                    make_workout_record(
                        "w_cardio", "Cardio", const.FREQUENCY_INTERVAL, 2
                    ),
                ],
                [make_session_record("w_cardio", "2024-03-04")],
            )
        )

        result = await manager.async_schedule_all_reminders(NOW)

        assert result.scheduled == 8
        wednesday = fake_notification_service.items[
            f"{const.REMINDER_ID_PREFIX}2024-03-06"
        ]
        assert wednesday["payload"][const.PAYLOAD_WORKOUT_NAMES] == [
            "Legs",
            "Cardio",
        ]

    async def test_unavailable_history_keeps_weekly(
        self,
        manager: ReminderManager,
        mock_coordinator: MagicMock,
        fake_notification_service: FakeNotificationService,
    ) -> None:
        mock_coordinator.storage_manager.set_data(
            make_storage_data(
                [
                    *CATALOG,
                    make_workout_record(
                        "w_cardio", "Cardio", const.FREQUENCY_INTERVAL, 1
                    ),
                ]
            )
        )
        mock_coordinator.storage_manager.data[const.DATA_SESSIONS] = {"bad": True}

        result = await manager.async_schedule_all_reminders(NOW)

        assert result.scheduled == 8
        assert _owned_ids(fake_notification_service) == ALL_IDS
