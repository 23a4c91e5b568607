# File: notification_service.py
"""Local notification service for the Workout Reminders integration.

Holds notifications scheduled for an absolute instant, keyed by identifier,
each with a payload. Pending items are persisted in their own `Store` and armed
with `async_track_point_in_time`; on delivery the item is sent through the
configured notify service (or as a persistent notification when none is set)
and dropped.

On startup, items whose instant already passed are discarded and the rest are
re-armed.
"""

from __future__ import annotations

from datetime import datetime
from functools import partial
from typing import Any

from homeassistant.components import persistent_notification
from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers.event import async_track_point_in_time
from homeassistant.helpers.storage import Store
from homeassistant.util import dt as dt_util

from . import const
from .exceptions import NotificationCallError
from .type_defs import ScheduledNotificationData


async def async_send_notification(
    hass: HomeAssistant,
    notify_service: str,
    title: str,
    message: str,
    notification_id: str | None = None,
    extra_data: dict[str, Any] | None = None,
) -> None:
    """Deliver one notification now.

    An empty `notify_service` creates a persistent notification. A configured
    service that is not (yet) available is logged and skipped.
    """
    if not notify_service:
        persistent_notification.async_create(
            hass, message, title=title, notification_id=notification_id
        )
        const.LOGGER.debug(
            "DEBUG: Persistent notification created: %s", notification_id
        )
        return

    if "." in notify_service:
        domain, service = notify_service.split(".", 1)
    else:
        domain, service = const.NOTIFY_DOMAIN, notify_service

    if not hass.services.has_service(domain, service):
        const.LOGGER.warning(
            "WARNING: Notification service '%s.%s' not available - skipping "
            "notification '%s'",
            domain,
            service,
            notification_id,
        )
        return

    payload: dict[str, Any] = {const.NOTIFY_TITLE: title, const.NOTIFY_MESSAGE: message}
    data: dict[str, Any] = dict(extra_data or {})
    if notification_id:
        data.setdefault(const.NOTIFY_TAG, notification_id)
    if data:
        payload[const.NOTIFY_DATA] = data

    try:
        await hass.services.async_call(domain, service, payload, blocking=True)
        const.LOGGER.debug("DEBUG: Notification sent via '%s.%s'", domain, service)
    except Exception as err:  # pylint: disable=broad-exception-caught
        # Runs from a timer callback; nothing upstream can handle it
        const.LOGGER.error(
            "ERROR: Unexpected error sending notification via '%s.%s': %s",
            domain,
            service,
            err,
        )


class LocalNotificationService:
    """Schedule/cancel/list notifications delivered at an absolute instant."""

    def __init__(
        self,
        hass: HomeAssistant,
        notify_service: str = const.DEFAULT_NOTIFY_SERVICE,
        storage_key: str = const.NOTIFICATION_STORAGE_KEY,
    ) -> None:
        self.hass = hass
        self.notify_service = notify_service
        self._store: Store = Store(
            hass, const.NOTIFICATION_STORAGE_VERSION, storage_key
        )
        self._items: dict[str, ScheduledNotificationData] = {}
        self._unsubs: dict[str, CALLBACK_TYPE] = {}

    async def async_initialize(self) -> None:
        """Load pending items, drop expired ones and arm the rest."""
        stored = await self._store.async_load() or {}
        now = dt_util.utcnow()
        expired: list[str] = []

        for notification_id, item in stored.items():
            fire_at = dt_util.parse_datetime(item.get(const.DATA_NOTIFICATION_FIRE_AT, ""))
            if fire_at is None or fire_at <= now:
                expired.append(notification_id)
                continue
            self._items[notification_id] = item
            self._arm(notification_id, fire_at)

        if expired:
            const.LOGGER.info(
                "INFO: Dropped %s expired scheduled notification(s)", len(expired)
            )
            await self._async_save()

        const.LOGGER.debug(
            "DEBUG: Local notification service armed %s item(s)", len(self._items)
        )

    async def async_schedule_at(
        self, notification_id: str, fire_at: datetime, payload: dict[str, Any]
    ) -> None:
        """Schedule (or replace) one notification.

        Raises:
            NotificationCallError: naive or past instant, or storage failure.
        """
        if fire_at.tzinfo is None:
            raise NotificationCallError(
                f"Notification '{notification_id}' needs a timezone-aware instant"
            )
        if fire_at <= dt_util.utcnow():
            raise NotificationCallError(
                f"Notification '{notification_id}' instant {fire_at.isoformat()} "
                "is in the past"
            )

        self._disarm(notification_id)
        self._items[notification_id] = {
            "id": notification_id,
            "fire_at": fire_at.isoformat(),
            "payload": dict(payload),
        }
        self._arm(notification_id, fire_at)
        await self._async_save()

    async def async_cancel(self, notification_id: str) -> bool:
        """Cancel one notification. Returns False if it was not scheduled."""
        self._disarm(notification_id)
        if self._items.pop(notification_id, None) is None:
            return False
        await self._async_save()
        return True

    async def async_list_scheduled(self) -> list[ScheduledNotificationData]:
        """Return copies of all pending items, ordered by instant."""
        return sorted(
            (
                {
                    "id": item["id"],
                    "fire_at": item["fire_at"],
                    "payload": dict(item["payload"]),
                }
                for item in self._items.values()
            ),
            key=lambda item: item["fire_at"],
        )

    @callback
    def async_shutdown(self) -> None:
        """Release all timers; pending items stay persisted."""
        for unsub in self._unsubs.values():
            unsub()
        self._unsubs.clear()

    async def async_delete_storage(self) -> None:
        """Release timers and remove the pending-items file."""
        self.async_shutdown()
        self._items.clear()
        try:
            await self._store.async_remove()
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove notification storage %s: %s",
                self._store.path,
                err,
            )

    # -------------------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------------------

    @callback
    def _arm(self, notification_id: str, fire_at: datetime) -> None:
        self._unsubs[notification_id] = async_track_point_in_time(
            self.hass, partial(self._async_fire, notification_id), fire_at
        )

    @callback
    def _disarm(self, notification_id: str) -> None:
        if unsub := self._unsubs.pop(notification_id, None):
            unsub()

    async def _async_fire(self, notification_id: str, _now: datetime) -> None:
        """Deliver a due item and drop it."""
        self._unsubs.pop(notification_id, None)
        item = self._items.pop(notification_id, None)
        if item is None:
            return

        payload = item["payload"]
        await async_send_notification(
            self.hass,
            self.notify_service,
            payload.get(const.PAYLOAD_TITLE, const.FALLBACK_MESSAGE_TITLE),
            payload.get(const.PAYLOAD_MESSAGE, ""),
            notification_id=notification_id,
            extra_data={const.PAYLOAD_TYPE: payload.get(const.PAYLOAD_TYPE)},
        )

        try:
            await self._async_save()
        except NotificationCallError as err:
            const.LOGGER.error(
                "ERROR: Delivered notification '%s' could not be removed from "
                "storage: %s",
                notification_id,
                err,
            )

    async def _async_save(self) -> None:
        try:
            await self._store.async_save(dict(self._items))
        except (OSError, TypeError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to save scheduled notifications: %s", err
            )
            raise NotificationCallError(
                f"Failed to save scheduled notifications: {err}"
            ) from err
