"""Reminder Manager - full-replace synchronization of scheduled reminders.

Every pass rebuilds the complete set of upcoming reminders from the catalog and
the completed-session log:

1. reminders disabled or no catalog -> cancel every owned reminder, stop
2. calculate triggers per workout and aggregate them per calendar day
3. cancel every scheduled item whose payload type marks it as ours
4. compose content per day and schedule one notification per day

Items owned by other features are never touched. Individual schedule/cancel
calls are gathered, each with its own timeout; a failing call is logged and
counted and the pass continues. Passes are serialized by a lock.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from homeassistant.util import dt as dt_util

from .. import const
from ..engines.reminder_engine import DailyReminderAggregate, build_daily_reminders
from ..exceptions import (
    CatalogUnavailableError,
    HistoryUnavailableError,
    NotificationCallError,
)
from ..type_defs import ReminderPayloadData
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import WorkoutRemindersCoordinator
    from ..helpers.message_helpers import ReminderMessageComposer
    from ..notification_service import LocalNotificationService


@dataclass(slots=True)
class ReminderSyncResult:
    """Counters of one synchronization pass."""

    scheduled: int = 0
    cancelled: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def is_owned_reminder(item: dict[str, Any]) -> bool:
    """True if a scheduled item carries this integration's payload type."""
    payload = item.get(const.DATA_NOTIFICATION_PAYLOAD) or {}
    return payload.get(const.PAYLOAD_TYPE) == const.NOTIFICATION_TYPE_WORKOUT_REMINDER


async def _async_bounded(call: Awaitable[Any]) -> Any:
    async with asyncio.timeout(const.NOTIFICATION_CALL_TIMEOUT):
        return await call


class ReminderManager(BaseManager):
    """Owns the device-side reminder set."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: WorkoutRemindersCoordinator,
        notification_service: LocalNotificationService,
        composer: ReminderMessageComposer,
    ) -> None:
        super().__init__(hass, coordinator)
        self.notification_service = notification_service
        self.composer = composer
        self._lock = asyncio.Lock()

    async def async_setup(self) -> None:
        """Resync whenever the catalog changes."""
        self.listen(const.SIGNAL_SUFFIX_CATALOG_CHANGED, self._on_catalog_changed)

    async def _on_catalog_changed(self, payload: dict[str, Any]) -> None:
        const.LOGGER.debug(
            "DEBUG: Catalog changed (%s), rescheduling reminders",
            payload.get(const.ATTR_WORKOUT_ID),
        )
        await self.async_schedule_all_reminders()

    # =========================================================================
    # Public API
    # =========================================================================

    async def async_schedule_all_reminders(
        self, now: datetime | None = None
    ) -> ReminderSyncResult:
        """Replace every owned reminder with the freshly calculated set."""
        async with self._lock:
            return await self._async_sync(now or dt_util.now())

    async def async_cancel_all_reminders(self) -> ReminderSyncResult:
        """Cancel every owned reminder."""
        async with self._lock:
            result = ReminderSyncResult()
            await self._async_cancel_owned(result)
            return result

    # =========================================================================
    # Pass
    # =========================================================================

    async def _async_sync(self, now: datetime) -> ReminderSyncResult:
        result = ReminderSyncResult()

        if not self.coordinator.reminders_enabled:
            const.LOGGER.debug("DEBUG: Reminders disabled, cancelling owned reminders")
            await self._async_cancel_owned(result)
            return result

        try:
            workouts = self.storage_manager.load_workout_definitions()
        except CatalogUnavailableError as err:
            const.LOGGER.warning(
                "WARNING: Workout catalog unavailable, clearing reminders: %s", err
            )
            workouts = []

        if not workouts:
            await self._async_cancel_owned(result)
            return result

        try:
            sessions = self.storage_manager.load_completed_sessions()
        except HistoryUnavailableError as err:
            # Weekly reminders do not depend on history
            const.LOGGER.warning(
                "WARNING: Session history unavailable, interval reminders skipped: %s",
                err,
            )
            sessions = []

        aggregates = build_daily_reminders(
            workouts,
            sessions,
            now,
            reminder_time=self.coordinator.reminder_time,
            horizon_days=const.REMINDER_HORIZON_DAYS,
        )

        await self._async_cancel_owned(result)
        await self._async_schedule_aggregates(aggregates, result)

        const.LOGGER.info(
            "INFO: Reminder sync: %s scheduled, %s cancelled, %s failed",
            result.scheduled,
            result.cancelled,
            result.failed,
        )
        return result

    async def _async_cancel_owned(self, result: ReminderSyncResult) -> None:
        try:
            scheduled = await _async_bounded(
                self.notification_service.async_list_scheduled()
            )
        except (NotificationCallError, TimeoutError) as err:
            result.failed += 1
            const.LOGGER.warning(
                "WARNING: Could not list scheduled notifications: %s", err
            )
            return

        owned_ids = [item["id"] for item in scheduled if is_owned_reminder(item)]
        if not owned_ids:
            return

        results = await asyncio.gather(
            *(
                _async_bounded(self.notification_service.async_cancel(notification_id))
                for notification_id in owned_ids
            ),
            return_exceptions=True,
        )
        for notification_id, outcome in zip(owned_ids, results, strict=True):
            if isinstance(outcome, Exception):
                result.failed += 1
                const.LOGGER.warning(
                    "WARNING: Failed to cancel reminder '%s': %s",
                    notification_id,
                    outcome,
                )
            else:
                result.cancelled += 1

    async def _async_schedule_aggregates(
        self,
        aggregates: dict[str, DailyReminderAggregate],
        result: ReminderSyncResult,
    ) -> None:
        if not aggregates:
            return

        days = list(aggregates.values())
        results = await asyncio.gather(
            *(
                _async_bounded(self._async_schedule_day(aggregate))
                for aggregate in days
            ),
            return_exceptions=True,
        )
        for aggregate, outcome in zip(days, results, strict=True):
            if isinstance(outcome, Exception):
                result.failed += 1
                const.LOGGER.warning(
                    "WARNING: Failed to schedule reminder '%s': %s",
                    aggregate.notification_id,
                    outcome,
                )
            else:
                result.scheduled += 1

    async def _async_schedule_day(self, aggregate: DailyReminderAggregate) -> None:
        """Compose one day's content and schedule its notification."""
        content = await self.composer.async_compose(
            aggregate.day_key, aggregate.workout_names
        )
        payload = ReminderPayloadData(
            type=const.NOTIFICATION_TYPE_WORKOUT_REMINDER,
            day=aggregate.day_key,
            workout_ids=[ref.workout_id for ref in aggregate.workouts],
            workout_names=aggregate.workout_names,
            title=content.title,
            message=content.message,
        )
        await self.notification_service.async_schedule_at(
            aggregate.notification_id, aggregate.fire_at, payload
        )
