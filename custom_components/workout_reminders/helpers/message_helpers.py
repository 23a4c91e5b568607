# File: helpers/message_helpers.py
"""Reminder message composition for Workout Reminders.

Message tables live in `translations_custom/<language>_reminders.json`:

    {
      "single_workout":    [{"title": ..., "message": "... {workout_name} ..."}],
      "multiple_workouts": [{"title": ..., "message": ...}]
    }

Tables are read through the executor and kept in a TTLCache owned by the
caller. The variant for a day is picked from a CRC32 of the day key, so
composing the same day twice returns the same content.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import json
import os
from typing import TYPE_CHECKING, Any
import zlib

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..utils.ttl_cache import TTLCache

MessageTables = dict[str, list[dict[str, str]]]


@dataclass(frozen=True, slots=True)
class ReminderContent:
    """Title and body of one reminder."""

    title: str
    message: str


def _read_json_file(file_path: str) -> dict[str, Any]:
    """Read and parse a JSON file. Synchronous helper for executor."""
    with open(file_path, encoding="utf-8") as f:
        return json.load(f)


def _get_translations_path() -> str:
    """Absolute path of the translations_custom directory."""
    return os.path.join(
        os.path.dirname(os.path.dirname(__file__)), const.CUSTOM_TRANSLATIONS_DIR
    )


def _table_file(language: str) -> str:
    return os.path.join(
        _get_translations_path(),
        f"{language}{const.REMINDER_TRANSLATIONS_SUFFIX}.json",
    )


def pick_variant(day_key: str, count: int) -> int:
    """Deterministic variant index for a calendar day."""
    return zlib.crc32(day_key.encode("utf-8")) % count


class ReminderMessageComposer:
    """Compose the title/body of a day's reminder."""

    def __init__(
        self,
        hass: HomeAssistant,
        cache: TTLCache[MessageTables],
        language: str = const.DEFAULT_LANGUAGE,
    ) -> None:
        self.hass = hass
        self.language = language
        self._cache = cache

    async def async_load_tables(self) -> MessageTables:
        """Return the message tables for the configured language.

        Falls back to English, then to empty tables (fixed fallback text).
        """
        if (cached := self._cache.get(self.language)) is not None:
            return cached

        tables: MessageTables = {}
        for language in dict.fromkeys((self.language, const.DEFAULT_LANGUAGE)):
            file_path = _table_file(language)
            try:
                tables = await self.hass.async_add_executor_job(
                    _read_json_file, file_path
                )
                break
            except FileNotFoundError:
                const.LOGGER.debug(
                    "DEBUG: No reminder messages for language '%s'", language
                )
            except (OSError, ValueError) as err:
                const.LOGGER.warning(
                    "WARNING: Could not read reminder messages %s: %s", file_path, err
                )

        self._cache.set(self.language, tables)
        return tables

    async def async_compose(
        self, day_key: str, workout_names: Sequence[str]
    ) -> ReminderContent:
        """Compose the content for one day.

        One workout uses the single-workout variants with its name; several
        use the multi-workout variants.
        """
        if not workout_names:
            raise ValueError(f"No workouts to compose a reminder for on {day_key}")

        tables = await self.async_load_tables()

        if len(workout_names) == 1:
            variants = tables.get(const.MESSAGES_SINGLE) or []
            fallback = ReminderContent(
                const.FALLBACK_MESSAGE_TITLE, const.FALLBACK_MESSAGE_SINGLE
            )
        else:
            variants = tables.get(const.MESSAGES_MULTIPLE) or []
            fallback = ReminderContent(
                const.FALLBACK_MESSAGE_TITLE, const.FALLBACK_MESSAGE_MULTIPLE
            )

        content = fallback
        if variants:
            variant = variants[pick_variant(day_key, len(variants))]
            content = ReminderContent(
                variant.get("title", fallback.title),
                variant.get("message", fallback.message),
            )

        return ReminderContent(
            title=content.title,
            message=content.message.replace(
                const.MESSAGE_PLACEHOLDER_WORKOUT_NAME, workout_names[0]
            ),
        )
