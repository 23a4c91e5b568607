"""Tests for the Workout Reminders config and options flows."""

from unittest.mock import patch

from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_mock_service,
)

from custom_components.workout_reminders.const import (
    CONF_NOTIFY_SERVICE,
    CONF_REMINDER_TIME,
    CONF_REMINDERS_ENABLED,
    DOMAIN,
)
from custom_components.workout_reminders.flow_helpers import (
    normalize_settings,
    validate_settings,
)

SETUP_ENTRY = "custom_components.workout_reminders.async_setup_entry"


async def test_form_user_flow_success(hass: HomeAssistant) -> None:
    """Test successful user config flow."""
    async_mock_service(hass, "notify", "mobile_app_phone")

    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == "user"

    with patch(SETUP_ENTRY, return_value=True) as mock_setup_entry:
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"),
            user_input={
                CONF_REMINDERS_ENABLED: True,
                CONF_REMINDER_TIME: "07:30:00",
                CONF_NOTIFY_SERVICE: " notify.mobile_app_phone ",
            },
        )
        await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result.get("data") == {}
    assert result.get("options") == {
        CONF_REMINDERS_ENABLED: True,
        CONF_REMINDER_TIME: "07:30",
        CONF_NOTIFY_SERVICE: "notify.mobile_app_phone",
    }
    assert len(mock_setup_entry.mock_calls) == 1


async def test_form_user_flow_unknown_notify_service(hass: HomeAssistant) -> None:
    """An unknown notify service is reported on its field."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    result = await hass.config_entries.flow.async_configure(
        result.get("flow_id"),
        user_input={
            CONF_REMINDERS_ENABLED: True,
            CONF_REMINDER_TIME: "09:00:00",
            CONF_NOTIFY_SERVICE: "notify.nobody",
        },
    )

    assert result.get("type") == FlowResultType.FORM
    assert result.get("errors") == {CONF_NOTIFY_SERVICE: "invalid_notify_service"}


async def test_single_instance(hass: HomeAssistant) -> None:
    """A second entry is refused."""
    MockConfigEntry(domain=DOMAIN, data={}).add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result.get("type") == FlowResultType.ABORT
    assert result.get("reason") == "single_instance_allowed"


async def test_options_flow(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """Options are validated and normalized like the initial settings."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.options.async_init(mock_config_entry.entry_id)
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == "init"

    result = await hass.config_entries.options.async_configure(
        result.get("flow_id"),
        user_input={
            CONF_REMINDERS_ENABLED: True,
            CONF_REMINDER_TIME: "09:00:00",
            CONF_NOTIFY_SERVICE: "light.kitchen",
        },
    )
    assert result.get("type") == FlowResultType.FORM
    assert result.get("errors") == {CONF_NOTIFY_SERVICE: "invalid_notify_service"}

    with patch(SETUP_ENTRY, return_value=True):
        result = await hass.config_entries.options.async_configure(
            result.get("flow_id"),
            user_input={
                CONF_REMINDERS_ENABLED: False,
                CONF_REMINDER_TIME: "18:45:00",
                CONF_NOTIFY_SERVICE: "",
            },
        )
        await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert mock_config_entry.options == {
        CONF_REMINDERS_ENABLED: False,
        CONF_REMINDER_TIME: "18:45",
        CONF_NOTIFY_SERVICE: "",
    }


async def test_validate_settings(hass: HomeAssistant) -> None:
    """Settings validation independent of the selectors."""
    async_mock_service(hass, "notify", "family")

    assert validate_settings(
        hass, {CONF_REMINDER_TIME: "06:00", CONF_NOTIFY_SERVICE: "notify.family"}
    ) == {}
    assert validate_settings(
        hass, {CONF_REMINDER_TIME: "24:10", CONF_NOTIFY_SERVICE: "notify"}
    ) == {
        CONF_REMINDER_TIME: "invalid_reminder_time",
        CONF_NOTIFY_SERVICE: "invalid_notify_service",
    }
    assert normalize_settings({CONF_REMINDER_TIME: "6:05:00"}) == {
        CONF_REMINDERS_ENABLED: True,
        CONF_REMINDER_TIME: "06:05",
        CONF_NOTIFY_SERVICE: "",
    }
