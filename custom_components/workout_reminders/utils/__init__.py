# File: utils/__init__.py
"""Pure Python utilities for Workout Reminders.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Date/time parsing, local-day anchoring, day keys
    - ttl_cache: Bounded TTL cache owned and injected by its users

Usage:
    from . import dt_utils
    from .ttl_cache import TTLCache
"""

from . import dt_utils
from .ttl_cache import TTLCache

__all__ = ["TTLCache", "dt_utils"]
