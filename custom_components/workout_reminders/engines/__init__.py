"""Pure calculation engines for Workout Reminders.

Engines hold no Home Assistant state and perform no I/O; managers own the
persistence and the notification side effects.
"""

from .frequency import (
    FlexibleFrequency,
    Frequency,
    IntervalFrequency,
    WeeklyFrequency,
    frequency_from_dict,
    frequency_to_dict,
    grace_deadline,
    is_within_window,
)
from .models import CompletedSession, WorkoutDefinition
from .reminder_engine import (
    DailyReminderAggregate,
    ReminderTrigger,
    ReminderWorkoutRef,
    aggregate_daily_reminders,
    build_daily_reminders,
    calculate_reminder_triggers,
)
from .streak_engine import StreakEngine, StreakOutcome, StreakSegment, StreakState

__all__ = [
    "CompletedSession",
    "DailyReminderAggregate",
    "FlexibleFrequency",
    "Frequency",
    "IntervalFrequency",
    "ReminderTrigger",
    "ReminderWorkoutRef",
    "StreakEngine",
    "StreakOutcome",
    "StreakSegment",
    "StreakState",
    "WeeklyFrequency",
    "WorkoutDefinition",
    "aggregate_daily_reminders",
    "build_daily_reminders",
    "calculate_reminder_triggers",
    "frequency_from_dict",
    "frequency_to_dict",
    "grace_deadline",
    "is_within_window",
]
