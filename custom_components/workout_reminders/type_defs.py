"""Type definitions for Workout Reminders data structures.

TypedDicts describe the JSON shapes stored in Home Assistant's `Store`. The
engines work on frozen dataclasses; these types only cover the boundary where
records are read from or written to storage.

IMPORTANT: This file must NOT import from coordinator.py or managers.
TypedDict is STATIC ANALYSIS ONLY; runtime validation happens in the
dataclass `from_dict` constructors.
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

WorkoutId = str  # UUID string
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"
DayKey = str  # Calendar-day key "YYYY-MM-DD"

FrequencyType = Literal["none", "weekly", "interval"]


# =============================================================================
# Catalog and Session Log
# =============================================================================


class FrequencyData(TypedDict):
    """Stored frequency of a workout."""

    type: FrequencyType
    value: NotRequired[int]


class WorkoutData(TypedDict):
    """One workout catalog record, keyed by workout id."""

    workout_id: WorkoutId
    name: str
    frequency: FrequencyData
    created_at: NotRequired[ISODatetime]
    updated_at: NotRequired[ISODatetime]


class CompletedSessionData(TypedDict):
    """One completed session in the append-only log."""

    workout_id: WorkoutId
    completed_at: ISODate | ISODatetime


# =============================================================================
# Streaks
# =============================================================================


class StreakSegmentData(TypedDict):
    """One historical run of consecutive completions."""

    start_date: ISODate
    end_date: ISODate
    count: int


class StreakData(TypedDict):
    """Persisted streak state stored under `streak_<workout_id>`."""

    workout_id: WorkoutId
    current: int
    longest: int
    last_completed_date: ISODate | None
    history: list[StreakSegmentData]


# =============================================================================
# Notifications
# =============================================================================


class ReminderPayloadData(TypedDict):
    """Payload attached to every reminder owned by this integration."""

    type: Literal["workout_reminder"]
    day: DayKey
    workout_ids: list[WorkoutId]
    workout_names: list[str]
    title: str
    message: str


class ScheduledNotificationData(TypedDict):
    """One pending item held by the local notification service."""

    id: str
    fire_at: ISODatetime
    payload: dict[str, Any]
