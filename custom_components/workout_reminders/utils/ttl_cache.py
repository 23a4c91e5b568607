# File: utils/ttl_cache.py
"""Small bounded TTL cache.

Pure Python, no Home Assistant imports. Instances are owned by whoever creates
them and passed to the components that need them; nothing here is module-level
shared state.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable
import time
from typing import Generic, TypeVar

_V = TypeVar("_V")


class TTLCache(Generic[_V]):
    """Key/value cache whose entries expire after `ttl` seconds.

    When `max_entries` is reached, the least recently stored entry is evicted.
    """

    def __init__(
        self,
        ttl: float,
        max_entries: int = 16,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl: Lifetime of an entry in seconds (must be positive).
            max_entries: Upper bound on stored entries (must be positive).
            clock: Monotonic time source, injectable for tests.
        """
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._ttl = ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, _V]] = OrderedDict()

    def get(self, key: str) -> _V | None:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: _V) -> None:
        """Store a value, evicting the oldest entry when full."""
        self._entries.pop(key, None)
        while len(self._entries) >= self._max_entries:
            self._entries.popitem(last=False)
        self._entries[key] = (self._clock() + self._ttl, value)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
