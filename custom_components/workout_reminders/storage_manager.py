# File: storage_manager.py
"""Handles persistent data storage for the Workout Reminders integration.

Uses Home Assistant's Storage helper to keep the workout catalog, the
append-only completed-session log and the per-workout streak records across
restarts. Streak records live under namespaced keys (`streak_<workout_id>`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store
from homeassistant.util import dt as dt_util

from . import const
from .engines.models import CompletedSession, WorkoutDefinition
from .exceptions import (
    CatalogUnavailableError,
    HistoryUnavailableError,
    StorageWriteError,
)

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo


def streak_storage_key(workout_id: str) -> str:
    """Return the namespaced key of a workout's streak record."""
    return f"{const.STREAK_KEY_PREFIX}{workout_id}"


class WorkoutRemindersStorageManager:
    """Manages loading, saving, and accessing data from Home Assistant's storage.

    Workouts are keyed by workout_id; sessions are an ordered list.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the storage manager.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}

    def _get_default_structure(self) -> dict[str, Any]:
        """Get the default empty data structure."""
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION,
                const.DATA_META_CREATED_AT: dt_util.utcnow().isoformat(),
            },
            const.DATA_WORKOUTS: {},
            const.DATA_SESSIONS: [],
            const.DATA_STREAKS: {},
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure.
        """
        const.LOGGER.debug(
            "DEBUG: WorkoutRemindersStorageManager: Loading data from storage"
        )
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = self._get_default_structure()
            return

        self._data = existing_data
        # Sections added after the first release
        for key, default in self._get_default_structure().items():
            self._data.setdefault(key, default)

        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: %s",
            {
                "workouts": len(self.get_workouts()),
                "sessions": len(self.get_sessions()),
                "streaks": len(self.get_streaks()),
            },
        )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def get_storage_path(self) -> str:
        """Get the storage file path."""
        return self._store.path

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        self._data = new_data

    # -------------------------------------------------------------------------------------
    # Raw section access
    # -------------------------------------------------------------------------------------

    def get_workouts(self) -> dict[str, Any]:
        """Retrieve the workout catalog records."""
        return self._data.get(const.DATA_WORKOUTS, {})

    def get_sessions(self) -> list[dict[str, Any]]:
        """Retrieve the completed-session log records."""
        return self._data.get(const.DATA_SESSIONS, [])

    def get_streaks(self) -> dict[str, Any]:
        """Retrieve all stored streak records."""
        return self._data.get(const.DATA_STREAKS, {})

    # -------------------------------------------------------------------------------------
    # Catalog and session log
    # -------------------------------------------------------------------------------------

    def load_workout_definitions(self) -> list[WorkoutDefinition]:
        """Return the catalog in insertion order.

        Malformed records are skipped with a warning.

        Raises:
            CatalogUnavailableError: the catalog section is missing or corrupt.
        """
        workouts = self._data.get(const.DATA_WORKOUTS)
        if not isinstance(workouts, dict):
            raise CatalogUnavailableError("Workout catalog is not available")

        definitions: list[WorkoutDefinition] = []
        for workout_id, record in workouts.items():
            try:
                definitions.append(WorkoutDefinition.from_dict(workout_id, record))
            except (AttributeError, ValueError) as err:
                const.LOGGER.warning(
                    "WARNING: Skipping malformed workout '%s': %s", workout_id, err
                )
        return definitions

    def load_completed_sessions(
        self, tz: ZoneInfo | None = None
    ) -> list[CompletedSession]:
        """Return the completed-session log.

        Raises:
            HistoryUnavailableError: the session section is missing or corrupt.
        """
        sessions = self._data.get(const.DATA_SESSIONS)
        if not isinstance(sessions, list):
            raise HistoryUnavailableError("Completed-session log is not available")

        result: list[CompletedSession] = []
        for record in sessions:
            try:
                result.append(CompletedSession.from_dict(record, tz))
            except (AttributeError, ValueError) as err:
                const.LOGGER.warning("WARNING: Skipping malformed session: %s", err)
        return result

    def upsert_workout(self, workout_id: str, record: dict[str, Any]) -> None:
        """Insert or replace one catalog record (in memory)."""
        self._data.setdefault(const.DATA_WORKOUTS, {})[workout_id] = record

    def remove_workout(self, workout_id: str) -> bool:
        """Remove one catalog record (in memory). Returns False if absent."""
        return self.get_workouts().pop(workout_id, None) is not None

    def append_session(self, record: dict[str, Any]) -> None:
        """Append one completed session to the log (in memory)."""
        self._data.setdefault(const.DATA_SESSIONS, []).append(record)

    # -------------------------------------------------------------------------------------
    # Streak records
    # -------------------------------------------------------------------------------------

    def get_streak_record(self, workout_id: str) -> dict[str, Any] | None:
        """Return the stored streak record of a workout, if any."""
        return self.get_streaks().get(streak_storage_key(workout_id))

    def set_streak_record(self, workout_id: str, record: dict[str, Any]) -> None:
        """Replace the full streak record of a workout (in memory)."""
        self._data.setdefault(const.DATA_STREAKS, {})[
            streak_storage_key(workout_id)
        ] = record

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Raises:
            StorageWriteError: file system error or non-serializable data.
        """
        try:
            await self._store.async_save(self._data)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
            raise StorageWriteError(f"Failed to save storage: {err}") from err
        except (TypeError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data: %s", err
            )
            raise StorageWriteError(f"Failed to save storage: {err}") from err
        const.LOGGER.debug("DEBUG: Data saved successfully to storage")

    async def async_clear_data(self) -> None:
        """Clear catalog, sessions and streaks and persist the empty structure."""
        const.LOGGER.warning(
            "WARNING: Clearing all Workout Reminders data and resetting storage"
        )
        self._data = self._get_default_structure()
        await self.async_save()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = self._get_default_structure()

        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
