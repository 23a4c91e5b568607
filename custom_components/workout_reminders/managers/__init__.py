"""Manager modules for Workout Reminders.

Managers orchestrate workflows around the pure engines. They are stateful,
signal-aware, and own persistence and notification side effects.
"""

from .base_manager import BaseManager
from .catalog_manager import CatalogManager
from .reminder_manager import ReminderManager, ReminderSyncResult
from .streak_manager import StreakManager

__all__ = [
    "BaseManager",
    "CatalogManager",
    "ReminderManager",
    "ReminderSyncResult",
    "StreakManager",
]
