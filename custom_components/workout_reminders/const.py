# File: const.py
"""Constants for the Workout Reminders integration.

This file centralizes configuration keys, defaults, storage keys, service and
field names, and the scheduling/streak tuning values used across the
integration.
"""

import logging

import homeassistant.util.dt as dt_util

from .utils import dt_utils


def set_default_timezone(hass):
    """Set the default timezone based on the Home Assistant configuration."""
    global DEFAULT_TIME_ZONE
    DEFAULT_TIME_ZONE = dt_util.get_time_zone(hass.config.time_zone)
    if DEFAULT_TIME_ZONE is not None:
        dt_utils.set_default_timezone(DEFAULT_TIME_ZONE)


# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
WORKOUT_REMINDERS_TITLE = "Workout Reminders"

DOMAIN = "workout_reminders"

LOGGER = logging.getLogger(__package__)

# No entity platforms: the integration exposes services only
PLATFORMS: list = []

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORAGE_MANAGER = "storage_manager"
STORAGE_KEY = "workout_reminders_data"
STORAGE_VERSION = 1
NOTIFICATION_STORAGE_KEY = "workout_reminders_notifications"
NOTIFICATION_STORAGE_VERSION = 1
NOTIFICATION_SERVICE = "notification_service"

# Default timezone: initially None, to be set once hass is available.
DEFAULT_TIME_ZONE = None

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_REMINDERS_ENABLED = "reminders_enabled"
CONF_REMINDER_TIME = "reminder_time"
CONF_NOTIFY_SERVICE = "notify_service"

CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

DEFAULT_REMINDERS_ENABLED = True
DEFAULT_REMINDER_TIME = "09:00"
DEFAULT_NOTIFY_SERVICE = ""

# ------------------------------------------------------------------------------------------------
# Scheduling / Streak Tuning
# ------------------------------------------------------------------------------------------------
# Forward-looking span within which reminders are proactively scheduled
REMINDER_HORIZON_DAYS = 30

# Grace window = multiplier x period (weekly and interval workouts)
STREAK_GRACE_MULTIPLIER = 2

# Flexible (no frequency) workouts get the widest grace window
FLEXIBLE_GRACE_DAYS = 14

WEEK_LENGTH_DAYS = 7

# Seconds allowed for a single schedule/cancel call on the notification service
NOTIFICATION_CALL_TIMEOUT = 10

# Message table cache
MESSAGE_CACHE_TTL_SECONDS = 3600
MESSAGE_CACHE_MAX_ENTRIES = 8

# ------------------------------------------------------------------------------------------------
# Frequency
# ------------------------------------------------------------------------------------------------
FREQUENCY_NONE = "none"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_INTERVAL = "interval"
FREQUENCY_TYPES = [FREQUENCY_NONE, FREQUENCY_WEEKLY, FREQUENCY_INTERVAL]

# 0 = Sunday ... 6 = Saturday
DAY_OF_WEEK_MIN = 0
DAY_OF_WEEK_MAX = 6

# ------------------------------------------------------------------------------------------------
# Data Keys (storage layout)
# ------------------------------------------------------------------------------------------------
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"
DATA_META_CREATED_AT = "created_at"
SCHEMA_VERSION = 1

DATA_WORKOUTS = "workouts"
DATA_SESSIONS = "sessions"
DATA_STREAKS = "streaks"

DATA_WORKOUT_ID = "workout_id"
DATA_WORKOUT_NAME = "name"
DATA_WORKOUT_FREQUENCY = "frequency"
DATA_FREQUENCY_TYPE = "type"
DATA_FREQUENCY_VALUE = "value"
DATA_WORKOUT_UPDATED_AT = "updated_at"

DATA_SESSION_WORKOUT_ID = "workout_id"
DATA_SESSION_COMPLETED_AT = "completed_at"

# Namespaced key for one streak record per workout
STREAK_KEY_PREFIX = "streak_"

DATA_STREAK_WORKOUT_ID = "workout_id"
DATA_STREAK_CURRENT = "current"
DATA_STREAK_LONGEST = "longest"
DATA_STREAK_LAST_COMPLETED_DATE = "last_completed_date"
DATA_STREAK_HISTORY = "history"
DATA_STREAK_SEGMENT_START = "start_date"
DATA_STREAK_SEGMENT_END = "end_date"
DATA_STREAK_SEGMENT_COUNT = "count"

# ------------------------------------------------------------------------------------------------
# Notifications
# ------------------------------------------------------------------------------------------------
NOTIFY_DOMAIN = "notify"
NOTIFY_TITLE = "title"
NOTIFY_MESSAGE = "message"
NOTIFY_DATA = "data"
NOTIFY_TAG = "tag"

# Payload discriminator marking reminders owned by this integration
NOTIFICATION_TYPE_WORKOUT_REMINDER = "workout_reminder"
REMINDER_ID_PREFIX = "workout_reminder_"

DATA_NOTIFICATION_FIRE_AT = "fire_at"
DATA_NOTIFICATION_PAYLOAD = "payload"

PAYLOAD_TYPE = "type"
PAYLOAD_DAY = "day"
PAYLOAD_WORKOUT_IDS = "workout_ids"
PAYLOAD_WORKOUT_NAMES = "workout_names"
PAYLOAD_TITLE = "title"
PAYLOAD_MESSAGE = "message"

# Message tables
CUSTOM_TRANSLATIONS_DIR = "translations_custom"
REMINDER_TRANSLATIONS_SUFFIX = "_reminders"
DEFAULT_LANGUAGE = "en"
MESSAGES_SINGLE = "single_workout"
MESSAGES_MULTIPLE = "multiple_workouts"
MESSAGE_PLACEHOLDER_WORKOUT_NAME = "{workout_name}"
FALLBACK_MESSAGE_TITLE = "Time to train!"
FALLBACK_MESSAGE_SINGLE = "{workout_name} is scheduled today."
FALLBACK_MESSAGE_MULTIPLE = "You have several workouts planned today."

# ------------------------------------------------------------------------------------------------
# Dispatcher Signals
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_CATALOG_CHANGED = "catalog_changed"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_ADD_WORKOUT = "add_workout"
SERVICE_UPDATE_WORKOUT = "update_workout"
SERVICE_REMOVE_WORKOUT = "remove_workout"
SERVICE_RECORD_WORKOUT_COMPLETION = "record_workout_completion"
SERVICE_GET_STREAK_STATE = "get_streak_state"
SERVICE_SCHEDULE_ALL_REMINDERS = "schedule_all_reminders"
SERVICE_SWEEP_EXPIRED_STREAKS = "sweep_expired_streaks"
SERVICE_RESET_ALL_DATA = "reset_all_data"

FIELD_WORKOUT_NAME = "workout_name"
FIELD_NEW_NAME = "new_name"
FIELD_FREQUENCY_TYPE = "frequency_type"
FIELD_FREQUENCY_VALUE = "frequency_value"
FIELD_COMPLETION_DATE = "completion_date"

ATTR_WORKOUT_ID = "workout_id"
ATTR_WORKOUT_NAME = "workout_name"
ATTR_DAYS_UNTIL_LOSS = "days_until_loss"
ATTR_PERSISTED = "persisted"
ATTR_RESET_WORKOUT_IDS = "reset_workout_ids"

# ------------------------------------------------------------------------------------------------
# Error Messages
# ------------------------------------------------------------------------------------------------
MSG_NO_ENTRY_FOUND = "No Workout Reminders entry found"
ERROR_WORKOUT_NOT_FOUND_FMT = "Workout '{}' not found"
ERROR_WORKOUT_EXISTS_FMT = "A workout named '{}' already exists"
ERROR_INVALID_FREQUENCY_FMT = "Invalid frequency: {}"

TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_INVALID_TIME = "invalid_reminder_time"
TRANS_KEY_ERROR_INVALID_NOTIFY_SERVICE = "invalid_notify_service"
