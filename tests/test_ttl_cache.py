"""Tests for the bounded TTL cache."""

import pytest

from custom_components.workout_reminders.utils.ttl_cache import TTLCache


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_entry_expires_after_ttl() -> None:
    clock = FakeClock()
    cache: TTLCache[str] = TTLCache(10, clock=clock)
    cache.set("en", "tables")

    clock.now = 9.9
    assert cache.get("en") == "tables"

    clock.now = 10.0
    assert cache.get("en") is None
    assert len(cache) == 0


def test_oldest_entry_evicted_when_full() -> None:
    cache: TTLCache[int] = TTLCache(60, max_entries=2, clock=FakeClock())
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)

    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3


def test_set_refreshes_existing_key() -> None:
    clock = FakeClock()
    cache: TTLCache[int] = TTLCache(10, clock=clock)
    cache.set("a", 1)
    clock.now = 8
    cache.set("a", 2)
    clock.now = 15

    assert cache.get("a") == 2


def test_clear() -> None:
    cache: TTLCache[int] = TTLCache(10)
    cache.set("a", 1)
    cache.clear()

    assert len(cache) == 0


@pytest.mark.parametrize(("ttl", "max_entries"), [(0, 4), (10, 0)])
def test_rejects_non_positive_bounds(ttl: float, max_entries: int) -> None:
    with pytest.raises(ValueError):
        TTLCache(ttl, max_entries=max_entries)
