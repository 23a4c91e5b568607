# File: __init__.py
"""Initialization file for the Workout Reminders integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage and the local notification service, and preparing
the coordinator.

Key Features:
- Config entry setup, reload on option changes, and unload support.
- Expired streaks are swept and reminders resynchronized on every setup.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EVENT_HOMEASSISTANT_STOP
from homeassistant.core import Event, HomeAssistant, callback
from homeassistant.exceptions import ConfigEntryNotReady

from . import const
from .coordinator import WorkoutRemindersCoordinator
from .exceptions import StorageWriteError
from .notification_service import LocalNotificationService
from .services import async_setup_services, async_unload_services
from .storage_manager import WorkoutRemindersStorageManager


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info(
        "INFO: Starting setup for Workout Reminders entry: %s", entry.entry_id
    )

    # Must happen before anything computes local dates
    const.set_default_timezone(hass)

    storage_manager = WorkoutRemindersStorageManager(hass, const.STORAGE_KEY)
    await storage_manager.async_initialize()

    notification_service = LocalNotificationService(
        hass,
        notify_service=entry.options.get(
            const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
        ),
    )
    await notification_service.async_initialize()

    coordinator = WorkoutRemindersCoordinator(
        hass, entry, storage_manager, notification_service
    )

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        notification_service.async_shutdown()
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORAGE_MANAGER: storage_manager,
        const.NOTIFICATION_SERVICE: notification_service,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    @callback
    def _async_release_timers(_event: Event) -> None:
        notification_service.async_shutdown()

    entry.async_on_unload(
        hass.bus.async_listen(EVENT_HOMEASSISTANT_STOP, _async_release_timers)
    )

    try:
        await coordinator.async_sweep_expired_streaks()
    except StorageWriteError as err:
        const.LOGGER.warning("WARNING: Expired streaks could not be saved: %s", err)
    await coordinator.async_schedule_all_reminders()

    const.LOGGER.info(
        "INFO: Workout Reminders setup complete for entry: %s", entry.entry_id
    )
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry after its options changed."""
    const.LOGGER.debug("DEBUG: Options changed, reloading entry %s", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Workout Reminders entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        entry_data = hass.data[const.DOMAIN].pop(entry.entry_id)
        notification_service: LocalNotificationService = entry_data[
            const.NOTIFICATION_SERVICE
        ]
        notification_service.async_shutdown()

        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing Workout Reminders entry: %s", entry.entry_id)

    # The entry is already unloaded here: open the store just to delete it
    storage_manager = WorkoutRemindersStorageManager(hass, const.STORAGE_KEY)
    await storage_manager.async_delete_storage()
    await LocalNotificationService(hass).async_delete_storage()

    const.LOGGER.info("INFO: Workout Reminders entry data cleared: %s", entry.entry_id)
