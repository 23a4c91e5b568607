# File: config_flow.py
"""Config flow for the Workout Reminders integration.

Single instance. The user step collects the reminder settings, which are
stored as entry options so the options flow can change them later.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from . import flow_helpers as fh
from .options_flow import WorkoutRemindersOptionsFlowHandler


class WorkoutRemindersConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Workout Reminders."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Collect the reminder settings."""
        if self._async_current_entries():
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            errors = fh.validate_settings(self.hass, user_input)
            if not errors:
                return self.async_create_entry(
                    title=const.WORKOUT_REMINDERS_TITLE,
                    data={},
                    options=fh.normalize_settings(user_input),
                )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=fh.build_settings_schema(user_input),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return WorkoutRemindersOptionsFlowHandler()
