"""Test helpers for Workout Reminders tests.

    from tests.helpers import (
        FakeNotificationService,
        make_session_record,
        make_storage_data,
        make_workout_record,
    )
"""

from tests.helpers.builders import (
    FakeNotificationService,
    make_session_record,
    make_storage_data,
    make_workout_record,
)

__all__ = [
    "FakeNotificationService",
    "make_session_record",
    "make_storage_data",
    "make_workout_record",
]
