"""Frequency model shared by reminder scheduling and streak tracking.

A workout's recurrence is a closed union of three kinds:
- FlexibleFrequency: no fixed schedule, never reminded, widest grace window
- WeeklyFrequency: once per week on a fixed weekday (0 = Sunday ... 6 = Saturday)
- IntervalFrequency: every N days since the last completion

The grace deadline rule lives here so the streak engine and the expiry sweep
use exactly the same window.

IMPORTANT: This module must NOT import from coordinator.py or managers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from .. import const
from ..type_defs import FrequencyData


@dataclass(frozen=True, slots=True)
class FlexibleFrequency:
    """No recurrence: excluded from reminders."""

    @property
    def kind(self) -> str:
        return const.FREQUENCY_NONE


@dataclass(frozen=True, slots=True)
class WeeklyFrequency:
    """Expected once per calendar week on `day_of_week` (0 = Sunday)."""

    day_of_week: int

    def __post_init__(self) -> None:
        if not const.DAY_OF_WEEK_MIN <= self.day_of_week <= const.DAY_OF_WEEK_MAX:
            raise ValueError(
                const.ERROR_INVALID_FREQUENCY_FMT.format(
                    f"day_of_week={self.day_of_week}"
                )
            )

    @property
    def kind(self) -> str:
        return const.FREQUENCY_WEEKLY

    @property
    def python_weekday(self) -> int:
        """Weekday in `date.weekday()` numbering (0 = Monday)."""
        return (self.day_of_week - 1) % 7


@dataclass(frozen=True, slots=True)
class IntervalFrequency:
    """Expected every `days` days since the last completion."""

    days: int

    def __post_init__(self) -> None:
        if self.days < 1:
            raise ValueError(
                const.ERROR_INVALID_FREQUENCY_FMT.format(f"days={self.days}")
            )

    @property
    def kind(self) -> str:
        return const.FREQUENCY_INTERVAL


Frequency = FlexibleFrequency | WeeklyFrequency | IntervalFrequency


def grace_deadline(frequency: Frequency, last_completed: date) -> date:
    """Return the last calendar day on which a streak is still alive.

    - flexible: last + 14 days
    - weekly:   last + 2 x 7 days
    - interval: last + 2 x N days
    """
    match frequency:
        case FlexibleFrequency():
            grace_days = const.FLEXIBLE_GRACE_DAYS
        case WeeklyFrequency():
            grace_days = const.STREAK_GRACE_MULTIPLIER * const.WEEK_LENGTH_DAYS
        case IntervalFrequency(days=days):
            grace_days = const.STREAK_GRACE_MULTIPLIER * days
    return last_completed + timedelta(days=grace_days)


def is_within_window(frequency: Frequency, last_completed: date, day: date) -> bool:
    """Return True if `day` is on or before the grace deadline (inclusive)."""
    return day <= grace_deadline(frequency, last_completed)


def frequency_from_dict(data: dict[str, Any] | None) -> Frequency:
    """Build a Frequency from its stored form.

    Stored form: {"type": "none" | "weekly" | "interval", "value": int}.
    A missing mapping means flexible.

    Raises:
        ValueError: unknown type or out-of-range value.
    """
    if not data:
        return FlexibleFrequency()

    freq_type = data.get(const.DATA_FREQUENCY_TYPE, const.FREQUENCY_NONE)
    value = data.get(const.DATA_FREQUENCY_VALUE)

    if freq_type == const.FREQUENCY_NONE:
        return FlexibleFrequency()
    if freq_type == const.FREQUENCY_WEEKLY:
        return WeeklyFrequency(day_of_week=_as_int(value, freq_type))
    if freq_type == const.FREQUENCY_INTERVAL:
        return IntervalFrequency(days=_as_int(value, freq_type))
    raise ValueError(const.ERROR_INVALID_FREQUENCY_FMT.format(freq_type))


def frequency_to_dict(frequency: Frequency) -> FrequencyData:
    """Serialize a Frequency to its stored form."""
    match frequency:
        case FlexibleFrequency():
            return FrequencyData(type=const.FREQUENCY_NONE)
        case WeeklyFrequency(day_of_week=day_of_week):
            return FrequencyData(type=const.FREQUENCY_WEEKLY, value=day_of_week)
        case IntervalFrequency(days=days):
            return FrequencyData(type=const.FREQUENCY_INTERVAL, value=days)


def _as_int(value: Any, freq_type: str) -> int:
    if isinstance(value, bool) or value is None:
        raise ValueError(const.ERROR_INVALID_FREQUENCY_FMT.format(freq_type))
    try:
        return int(value)
    except (TypeError, ValueError) as err:
        raise ValueError(
            const.ERROR_INVALID_FREQUENCY_FMT.format(f"{freq_type}={value}")
        ) from err
