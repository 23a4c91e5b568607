"""Value types read from the workout catalog and the completed-session log."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_local_date
from .frequency import Frequency, frequency_from_dict

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo


@dataclass(frozen=True, slots=True)
class WorkoutDefinition:
    """A recurring workout from the catalog."""

    workout_id: str
    name: str
    frequency: Frequency

    @classmethod
    def from_dict(cls, workout_id: str, data: dict[str, Any]) -> WorkoutDefinition:
        """Build from a stored catalog record.

        Raises:
            ValueError: missing name or malformed frequency.
        """
        name = data.get(const.DATA_WORKOUT_NAME)
        if not name:
            raise ValueError(f"Workout '{workout_id}' has no name")
        return cls(
            workout_id=workout_id,
            name=name,
            frequency=frequency_from_dict(data.get(const.DATA_WORKOUT_FREQUENCY)),
        )


@dataclass(frozen=True, slots=True)
class CompletedSession:
    """One completed session; only the local calendar date matters here."""

    workout_id: str
    completed_on: date

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], tz: ZoneInfo | None = None
    ) -> CompletedSession:
        """Build from a stored session log record.

        Raises:
            ValueError: missing workout id or unparseable completion date.
        """
        workout_id = data.get(const.DATA_SESSION_WORKOUT_ID)
        completed_on = dt_local_date(data.get(const.DATA_SESSION_COMPLETED_AT), tz)
        if not workout_id or completed_on is None:
            raise ValueError(f"Malformed completed session: {data!r}")
        return cls(workout_id=workout_id, completed_on=completed_on)
