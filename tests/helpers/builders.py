"""Builders and fakes shared by Workout Reminders tests."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any

from custom_components.workout_reminders import const


def make_workout_record(
    workout_id: str,
    name: str,
    frequency_type: str = const.FREQUENCY_NONE,
    frequency_value: int | None = None,
) -> dict[str, Any]:
    """Build a stored catalog record."""
    frequency: dict[str, Any] = {const.DATA_FREQUENCY_TYPE: frequency_type}
    if frequency_value is not None:
        frequency[const.DATA_FREQUENCY_VALUE] = frequency_value
    return {
        const.DATA_WORKOUT_ID: workout_id,
        const.DATA_WORKOUT_NAME: name,
        const.DATA_WORKOUT_FREQUENCY: frequency,
    }


def make_session_record(workout_id: str, completed_at: str) -> dict[str, Any]:
    """Build a stored completed-session record."""
    return {
        const.DATA_SESSION_WORKOUT_ID: workout_id,
        const.DATA_SESSION_COMPLETED_AT: completed_at,
    }


def make_storage_data(
    workouts: list[dict[str, Any]] | None = None,
    sessions: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a full storage structure."""
    return {
        const.DATA_META: {const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION},
        const.DATA_WORKOUTS: {
            record[const.DATA_WORKOUT_ID]: record for record in workouts or []
        },
        const.DATA_SESSIONS: list(sessions or []),
        const.DATA_STREAKS: {},
    }


class FakeNotificationService:
    """In-memory stand-in for LocalNotificationService."""

    def __init__(self) -> None:
        self.items: dict[str, dict[str, Any]] = {}
        self.schedule_calls: list[str] = []
        self.cancel_calls: list[str] = []
        self.fail_ids: set[str] = set()
        self.hang_ids: set[str] = set()
        self.hang_list = False

    async def async_schedule_at(
        self, notification_id: str, fire_at: datetime, payload: dict[str, Any]
    ) -> None:
        self.schedule_calls.append(notification_id)
        if notification_id in self.fail_ids:
            raise RuntimeError(f"schedule failed for {notification_id}")
        if notification_id in self.hang_ids:
            await asyncio.sleep(3600)
        self.items[notification_id] = {
            "id": notification_id,
            "fire_at": fire_at.isoformat(),
            "payload": dict(payload),
        }

    async def async_cancel(self, notification_id: str) -> bool:
        self.cancel_calls.append(notification_id)
        return self.items.pop(notification_id, None) is not None

    async def async_list_scheduled(self) -> list[dict[str, Any]]:
        if self.hang_list:
            await asyncio.sleep(3600)
        return [dict(item) for item in self.items.values()]

    def add_foreign(self, notification_id: str, fire_at: str) -> None:
        """Add an item owned by another feature."""
        self.items[notification_id] = {
            "id": notification_id,
            "fire_at": fire_at,
            "payload": {const.PAYLOAD_TYPE: "rest_timer"},
        }
