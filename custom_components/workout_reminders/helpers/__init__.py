# File: helpers/__init__.py
"""Home Assistant-bound helper functions for Workout Reminders.

NOTE: Functions that need `hass` object belong here, NOT in utils/.

Submodules:
    - entry_helpers: Config entry lookup and dispatcher signal names
    - message_helpers: Reminder message tables and composition
"""

from . import entry_helpers, message_helpers

__all__ = [
    "entry_helpers",
    "message_helpers",
]
