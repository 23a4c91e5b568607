"""Shared fixtures for Workout Reminders tests."""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import MagicMock

import pytest
from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.workout_reminders import const
from custom_components.workout_reminders.storage_manager import (
    WorkoutRemindersStorageManager,
)
from tests.helpers import FakeNotificationService, make_storage_data

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.WORKOUT_REMINDERS_TITLE,
        data={},
        options={
            const.CONF_REMINDERS_ENABLED: True,
            const.CONF_REMINDER_TIME: "09:00",
            const.CONF_NOTIFY_SERVICE: "",
        },
        entry_id="test_entry_id",
    )


@pytest.fixture
def storage_manager(hass: HomeAssistant) -> WorkoutRemindersStorageManager:
    """Return a storage manager holding an empty default structure."""
    manager = WorkoutRemindersStorageManager(hass)
    manager.set_data(make_storage_data())
    return manager


@pytest.fixture
def fake_notification_service() -> FakeNotificationService:
    """Return an in-memory notification service."""
    return FakeNotificationService()


@pytest.fixture
def mock_coordinator(
    storage_manager: WorkoutRemindersStorageManager,  # pylint: disable=redefined-outer-name
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> MagicMock:
    """Return a coordinator stand-in carrying the real storage manager."""
    coordinator = MagicMock()
    coordinator.config_entry = mock_config_entry
    coordinator.storage_manager = storage_manager
    coordinator.reminders_enabled = True
    coordinator.reminder_time = (9, 0)
    return coordinator


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> AsyncGenerator[MockConfigEntry, None]:
    """Set up the integration, yield its entry and unload it afterwards."""
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()
    yield mock_config_entry
    if mock_config_entry.state is ConfigEntryState.LOADED:
        await hass.config_entries.async_unload(mock_config_entry.entry_id)
        await hass.async_block_till_done()
