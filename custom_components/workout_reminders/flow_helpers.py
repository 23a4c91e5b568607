# File: flow_helpers.py
"""Shared schema and validation for the config and options flows."""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import HomeAssistant
from homeassistant.helpers import selector

from . import const
from .utils.dt_utils import parse_time_of_day


def build_settings_schema(defaults: dict[str, Any] | None = None) -> vol.Schema:
    """Schema for the reminder settings, prefilled with `defaults`."""
    defaults = defaults or {}
    return vol.Schema(
        {
            vol.Required(
                const.CONF_REMINDERS_ENABLED,
                default=defaults.get(
                    const.CONF_REMINDERS_ENABLED, const.DEFAULT_REMINDERS_ENABLED
                ),
            ): selector.BooleanSelector(),
            vol.Required(
                const.CONF_REMINDER_TIME,
                default=defaults.get(
                    const.CONF_REMINDER_TIME, const.DEFAULT_REMINDER_TIME
                ),
            ): selector.TimeSelector(),
            vol.Optional(
                const.CONF_NOTIFY_SERVICE,
                default=defaults.get(
                    const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
                ),
            ): selector.TextSelector(),
        }
    )


def validate_settings(hass: HomeAssistant, user_input: dict[str, Any]) -> dict[str, str]:
    """Validate the reminder settings.

    Returns:
        Errors keyed by field; empty when valid.
    """
    errors: dict[str, str] = {}

    if parse_time_of_day(user_input.get(const.CONF_REMINDER_TIME)) is None:
        errors[const.CONF_REMINDER_TIME] = const.TRANS_KEY_ERROR_INVALID_TIME

    notify_service = (user_input.get(const.CONF_NOTIFY_SERVICE) or "").strip()
    if notify_service:
        domain, _, service = notify_service.partition(".")
        if (
            domain != const.NOTIFY_DOMAIN
            or not service
            or not hass.services.has_service(domain, service)
        ):
            errors[const.CONF_NOTIFY_SERVICE] = (
                const.TRANS_KEY_ERROR_INVALID_NOTIFY_SERVICE
            )

    return errors


def normalize_settings(user_input: dict[str, Any]) -> dict[str, Any]:
    """Return the options to store, with the time as HH:MM."""
    hour, minute = parse_time_of_day(user_input[const.CONF_REMINDER_TIME]) or (9, 0)
    return {
        const.CONF_REMINDERS_ENABLED: bool(
            user_input.get(
                const.CONF_REMINDERS_ENABLED, const.DEFAULT_REMINDERS_ENABLED
            )
        ),
        const.CONF_REMINDER_TIME: f"{hour:02d}:{minute:02d}",
        const.CONF_NOTIFY_SERVICE: (
            user_input.get(const.CONF_NOTIFY_SERVICE) or ""
        ).strip(),
    }
