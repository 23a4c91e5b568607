"""Streak Engine for Workout Reminders.

Pure state machine for the per-workout consecutive-completion counter.

States:
- Empty: no completion recorded yet (current=0, no last date)
- Active: current >= 1
- Cleared: an expiry sweep set current=0; history and longest are kept

Transitions happen only through `StreakEngine.apply_completion()`:
- Empty -> Active (started): current=1, new history segment
- Active, completion within the grace window (continued): current+1, the last
  segment is extended
- Active outside the window, or Cleared (reset): current=1, new segment,
  longest untouched

IMPORTANT: This module must NOT import from coordinator.py or managers.
All methods return new state objects and never mutate their inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_parse_date
from .frequency import Frequency, grace_deadline, is_within_window

if TYPE_CHECKING:
    from ..type_defs import StreakData, StreakSegmentData

STREAK_TRANSITION_STARTED = "started"
STREAK_TRANSITION_CONTINUED = "continued"
STREAK_TRANSITION_RESET = "reset"


@dataclass(slots=True)
class StreakSegment:
    """One historical run of consecutive completions."""

    start_date: date
    end_date: date
    count: int

    def as_dict(self) -> StreakSegmentData:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "count": self.count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StreakSegment:
        start = dt_parse_date(data.get(const.DATA_STREAK_SEGMENT_START))
        end = dt_parse_date(data.get(const.DATA_STREAK_SEGMENT_END))
        if start is None or end is None:
            raise ValueError(f"Malformed streak segment: {data!r}")
        return cls(
            start_date=start,
            end_date=end,
            count=int(data.get(const.DATA_STREAK_SEGMENT_COUNT, 0)),
        )


@dataclass(slots=True)
class StreakState:
    """Persisted streak state of one workout."""

    workout_id: str
    current: int = 0
    longest: int = 0
    last_completed_date: date | None = None
    history: list[StreakSegment] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.current > 0

    def copy(self) -> StreakState:
        """Return a copy whose history can be mutated independently."""
        return replace(
            self,
            history=[replace(segment) for segment in self.history],
        )

    def as_dict(self) -> StreakData:
        return {
            "workout_id": self.workout_id,
            "current": self.current,
            "longest": self.longest,
            "last_completed_date": (
                self.last_completed_date.isoformat()
                if self.last_completed_date
                else None
            ),
            "history": [segment.as_dict() for segment in self.history],
        }

    @classmethod
    def from_dict(cls, workout_id: str, data: dict[str, Any]) -> StreakState:
        """Build from a stored record; missing fields fall back to Empty."""
        return cls(
            workout_id=data.get(const.DATA_STREAK_WORKOUT_ID) or workout_id,
            current=int(data.get(const.DATA_STREAK_CURRENT, 0)),
            longest=int(data.get(const.DATA_STREAK_LONGEST, 0)),
            last_completed_date=dt_parse_date(
                data.get(const.DATA_STREAK_LAST_COMPLETED_DATE)
            ),
            history=[
                StreakSegment.from_dict(segment)
                for segment in data.get(const.DATA_STREAK_HISTORY, [])
            ],
        )


@dataclass(frozen=True, slots=True)
class StreakOutcome:
    """Result of applying one completion."""

    state: StreakState
    transition: str


class StreakEngine:
    """Stateless streak rules shared by the streak manager and the sweep."""

    @staticmethod
    def apply_completion(
        state: StreakState, frequency: Frequency, completed_on: date
    ) -> StreakOutcome:
        """Apply a completion on `completed_on` and return the new state."""
        new_state = state.copy()
        last = state.last_completed_date

        if last is None:
            transition = STREAK_TRANSITION_STARTED
            new_state.current = 1
            new_state.history.append(
                StreakSegment(start_date=completed_on, end_date=completed_on, count=1)
            )
        elif (
            state.is_active
            and new_state.history
            and is_within_window(frequency, last, completed_on)
        ):
            transition = STREAK_TRANSITION_CONTINUED
            new_state.current += 1
            segment = new_state.history[-1]
            segment.end_date = completed_on
            segment.count = new_state.current
        else:
            # Window elapsed, or the run was already cleared by a sweep
            transition = STREAK_TRANSITION_RESET
            new_state.current = 1
            new_state.history.append(
                StreakSegment(start_date=completed_on, end_date=completed_on, count=1)
            )

        new_state.longest = max(new_state.longest, new_state.current)
        new_state.last_completed_date = completed_on

        const.LOGGER.debug(
            "DEBUG: Streak for '%s' %s on %s: current=%s longest=%s",
            state.workout_id,
            transition,
            completed_on.isoformat(),
            new_state.current,
            new_state.longest,
        )
        return StreakOutcome(state=new_state, transition=transition)

    @staticmethod
    def days_until_loss(state: StreakState, frequency: Frequency, today: date) -> int:
        """Whole days left before the grace deadline; 0 if none or passed."""
        if state.last_completed_date is None:
            return 0
        deadline = grace_deadline(frequency, state.last_completed_date)
        return max(0, (deadline - today).days)

    @staticmethod
    def is_expired(state: StreakState, frequency: Frequency, today: date) -> bool:
        """True if a live run's grace window has elapsed as of `today`."""
        if not state.is_active or state.last_completed_date is None:
            return False
        return not is_within_window(frequency, state.last_completed_date, today)

    @staticmethod
    def clear_current(state: StreakState) -> StreakState:
        """Return a copy with the live run cleared; history and longest kept."""
        cleared = state.copy()
        cleared.current = 0
        return cleared
