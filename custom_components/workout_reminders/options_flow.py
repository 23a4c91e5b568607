# File: options_flow.py
"""Options Flow for the Workout Reminders integration.

Saving new options triggers the entry's update listener, which reloads the
integration: streaks are swept and reminders resynchronized with the new
settings.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries

from . import const
from . import flow_helpers as fh


class WorkoutRemindersOptionsFlowHandler(config_entries.OptionsFlow):
    """Edit reminders_enabled, reminder_time and notify_service."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        errors: dict[str, str] = {}
        if user_input is not None:
            errors = fh.validate_settings(self.hass, user_input)
            if not errors:
                const.LOGGER.debug("DEBUG: Saving new options: %s", user_input)
                return self.async_create_entry(
                    title="", data=fh.normalize_settings(user_input)
                )

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=fh.build_settings_schema(
                user_input or dict(self.config_entry.options)
            ),
            errors=errors,
        )
