"""Base manager class for Workout Reminders managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const
from ..helpers.entry_helpers import get_event_signal

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import WorkoutRemindersCoordinator
    from ..storage_manager import WorkoutRemindersStorageManager


class BaseManager(ABC):
    """Base class for managers with instance-scoped dispatcher signals.

    Subscriptions made with `listen()` are released when the config entry
    unloads. Subclasses must implement `async_setup()`.
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: WorkoutRemindersCoordinator
    ) -> None:
        """Initialize manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator managing this integration instance
        """
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    @property
    def storage_manager(self) -> WorkoutRemindersStorageManager:
        """Storage manager shared through the coordinator."""
        return self.coordinator.storage_manager

    def emit(self, suffix: str, **payload: Any) -> None:
        """Emit an instance-scoped signal to other managers.

        Example:
            self.emit(const.SIGNAL_SUFFIX_CATALOG_CHANGED, workout_id=workout_id)
        """
        signal = get_event_signal(self.entry_id, suffix)
        const.LOGGER.debug(
            "DEBUG: Emitting '%s' for instance %s with payload keys: %s",
            suffix,
            self.entry_id,
            list(payload.keys()),
        )
        # Dispatcher only supports *args: pass the payload as one dict
        async_dispatcher_send(self.hass, signal, payload)

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Subscribe to an instance-scoped signal until the entry unloads.

        `callback` receives the payload dict and may be sync or async.
        """
        signal = get_event_signal(self.entry_id, suffix)
        unsub = async_dispatcher_connect(self.hass, signal, callback)
        self.coordinator.config_entry.async_on_unload(unsub)
        const.LOGGER.debug(
            "DEBUG: Manager %s listening to '%s' for instance %s",
            self.__class__.__name__,
            suffix,
            self.entry_id,
        )

    @abstractmethod
    async def async_setup(self) -> None:
        """Set up the manager (subscribe to signals, initialize state).

        Called once from the coordinator's setup.
        """
