"""Reminder Engine for Workout Reminders.

Pure calculation, no I/O:
- `calculate_reminder_triggers`: one workout + session history + now ->
  future trigger instants within the horizon
- `aggregate_daily_reminders`: per-workout triggers -> at most one aggregate
  per calendar day

Weekly enumeration uses `dateutil.rrule` on naive local calendar days; every
trigger instant is then rebuilt from the calendar day plus the fixed reminder
time, so DST changes never move a reminder onto another weekday.

IMPORTANT: This module must NOT import from coordinator.py or managers.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING

from dateutil.rrule import FR, MO, SA, SU, TH, TU, WE, WEEKLY, rrule

from .. import const
from ..utils.dt_utils import at_local_time, dt_day_key
from .frequency import FlexibleFrequency, IntervalFrequency, WeeklyFrequency

if TYPE_CHECKING:
    from datetime import tzinfo

    from .models import CompletedSession, WorkoutDefinition

# date.weekday() index -> rrule weekday
RRULE_WEEKDAYS = (MO, TU, WE, TH, FR, SA, SU)

DEFAULT_REMINDER_TIME = (9, 0)


@dataclass(frozen=True, slots=True)
class ReminderTrigger:
    """A single reminder instant for one workout."""

    workout_id: str
    fire_at: datetime

    @property
    def day_key(self) -> str:
        return dt_day_key(self.fire_at)


@dataclass(frozen=True, slots=True)
class ReminderWorkoutRef:
    """A workout contributing to a day's reminder."""

    workout_id: str
    workout_name: str
    frequency_kind: str


@dataclass(frozen=True, slots=True)
class DailyReminderAggregate:
    """All workouts wanting a reminder on one calendar day."""

    day_key: str
    fire_at: datetime
    workouts: tuple[ReminderWorkoutRef, ...]

    @property
    def notification_id(self) -> str:
        """Stable identifier derived from the calendar day."""
        return f"{const.REMINDER_ID_PREFIX}{self.day_key}"

    @property
    def workout_names(self) -> list[str]:
        return [ref.workout_name for ref in self.workouts]


def calculate_reminder_triggers(
    workout: WorkoutDefinition,
    sessions: Sequence[CompletedSession],
    now: datetime,
    reminder_time: tuple[int, int] = DEFAULT_REMINDER_TIME,
    horizon_days: int = const.REMINDER_HORIZON_DAYS,
    tz: tzinfo | None = None,
) -> list[ReminderTrigger]:
    """Calculate the future reminder instants for one workout.

    Args:
        workout: Workout definition.
        sessions: Full completed-session history (all workouts).
        now: Current instant (timezone-aware).
        reminder_time: Fixed (hour, minute) local time of every reminder.
        horizon_days: Only instants up to now + horizon are returned.
        tz: Local timezone; defaults to `now.tzinfo`.

    Returns:
        Ordered triggers, strictly after `now`, at most one per calendar day.
        Flexible workouts and interval workouts never completed yield [].
    """
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")

    tz_info = tz or now.tzinfo
    local_now = now.astimezone(tz_info)
    horizon_end = local_now + timedelta(days=horizon_days)

    match workout.frequency:
        case FlexibleFrequency():
            return []
        case WeeklyFrequency() as weekly:
            return _weekly_triggers(
                workout.workout_id,
                weekly,
                local_now,
                horizon_end,
                reminder_time,
                tz_info,
            )
        case IntervalFrequency(days=days):
            return _interval_triggers(
                workout.workout_id,
                days,
                sessions,
                local_now,
                horizon_end,
                reminder_time,
                tz_info,
            )


def _weekly_triggers(
    workout_id: str,
    weekly: WeeklyFrequency,
    local_now: datetime,
    horizon_end: datetime,
    reminder_time: tuple[int, int],
    tz_info: tzinfo,
) -> list[ReminderTrigger]:
    """Every occurrence of the weekday from the next one after now."""
    hour, minute = reminder_time
    today = local_now.date()

    # Today only qualifies while the reminder time is still ahead
    first_day = today
    if at_local_time(today, hour, minute, tz_info) <= local_now:
        first_day = today + timedelta(days=1)

    rule = rrule(
        WEEKLY,
        byweekday=RRULE_WEEKDAYS[weekly.python_weekday],
        dtstart=datetime.combine(first_day, time.min),
        until=datetime.combine(horizon_end.date(), time.min),
    )

    triggers: list[ReminderTrigger] = []
    for occurrence in rule:
        fire_at = at_local_time(occurrence.date(), hour, minute, tz_info)
        if fire_at > horizon_end:
            break
        if fire_at <= local_now:
            continue
        triggers.append(ReminderTrigger(workout_id=workout_id, fire_at=fire_at))

    const.LOGGER.debug(
        "DEBUG: Weekly workout '%s' (day %s): %s reminder(s)",
        workout_id,
        weekly.day_of_week,
        len(triggers),
    )
    return triggers


def _interval_triggers(
    workout_id: str,
    days: int,
    sessions: Sequence[CompletedSession],
    local_now: datetime,
    horizon_end: datetime,
    reminder_time: tuple[int, int],
    tz_info: tzinfo,
) -> list[ReminderTrigger]:
    """The single next due instant after the latest completion, if upcoming."""
    last_completed = latest_completion(workout_id, sessions)
    if last_completed is None:
        const.LOGGER.debug(
            "DEBUG: Interval workout '%s' never completed, no reminder", workout_id
        )
        return []

    hour, minute = reminder_time
    fire_at = at_local_time(
        last_completed + timedelta(days=days), hour, minute, tz_info
    )
    if local_now < fire_at <= horizon_end:
        return [ReminderTrigger(workout_id=workout_id, fire_at=fire_at)]

    const.LOGGER.debug(
        "DEBUG: Interval workout '%s' due %s is outside (now, horizon]",
        workout_id,
        fire_at.isoformat(),
    )
    return []


def latest_completion(
    workout_id: str, sessions: Iterable[CompletedSession]
) -> date | None:
    """Return the most recent completion date of a workout, or None."""
    return max(
        (s.completed_on for s in sessions if s.workout_id == workout_id),
        default=None,
    )


def aggregate_daily_reminders(
    workout_triggers: Iterable[tuple[WorkoutDefinition, Sequence[ReminderTrigger]]],
) -> dict[str, DailyReminderAggregate]:
    """Merge per-workout triggers into one aggregate per calendar day.

    Workouts are appended in the order they are processed. Days without a
    contributing workout never appear. The result is ordered by day key.
    """
    buckets: dict[str, tuple[datetime, list[ReminderWorkoutRef]]] = {}

    for workout, triggers in workout_triggers:
        if isinstance(workout.frequency, FlexibleFrequency):
            continue
        for trigger in triggers:
            _, refs = buckets.setdefault(trigger.day_key, (trigger.fire_at, []))
            refs.append(
                ReminderWorkoutRef(
                    workout_id=workout.workout_id,
                    workout_name=workout.name,
                    frequency_kind=workout.frequency.kind,
                )
            )

    return {
        day_key: DailyReminderAggregate(
            day_key=day_key, fire_at=fire_at, workouts=tuple(refs)
        )
        for day_key, (fire_at, refs) in sorted(buckets.items())
    }


def build_daily_reminders(
    workouts: Sequence[WorkoutDefinition],
    sessions: Sequence[CompletedSession],
    now: datetime,
    reminder_time: tuple[int, int] = DEFAULT_REMINDER_TIME,
    horizon_days: int = const.REMINDER_HORIZON_DAYS,
) -> dict[str, DailyReminderAggregate]:
    """Calculate and aggregate reminders for a whole catalog."""
    return aggregate_daily_reminders(
        (
            workout,
            calculate_reminder_triggers(
                workout, sessions, now, reminder_time, horizon_days
            ),
        )
        for workout in workouts
    )
