"""Tests for the Pet Care config and options flows."""

# pylint: disable=redefined-outer-name

from __future__ import annotations

from unittest.mock import patch

from homeassistant import config_entries, data_entry_flow
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.petcare import const


@pytest.fixture
def bypass_setup():
    """Keep the created entry from setting up the whole integration."""
    with patch("custom_components.petcare.async_setup_entry", return_value=True):
        yield


# =============================================================================
# TEST: USER STEP
# =============================================================================


async def test_user_flow_creates_entry(hass: HomeAssistant, bypass_setup) -> None:
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result["type"] == FlowResultType.FORM
    assert result["step_id"] == const.CONFIG_FLOW_STEP_USER

    result = await hass.config_entries.flow.async_configure(
        result["flow_id"],
        {const.CONF_NOTIFY_SERVICE: "notify.mobile_app_phone", const.CONF_CURRENCY: "EUR"},
    )
    await hass.async_block_till_done()

    assert result["type"] == FlowResultType.CREATE_ENTRY
    assert result["title"] == const.PETCARE_TITLE
    assert result["data"] == {}
    options = result["options"]
    assert options[const.CONF_NOTIFY_SERVICE] == "notify.mobile_app_phone"
    assert options[const.CONF_CURRENCY] == "EUR"
    assert options[const.CONF_DEFAULT_REMINDER_TIME] == const.DEFAULT_REMINDER_TIME
    assert options[const.CONF_DISABLED_CATEGORIES] == []


async def test_single_instance(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    mock_config_entry.add_to_hass(hass)
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result["type"] == FlowResultType.ABORT
    assert result["reason"] == const.TRANS_KEY_ERROR_SINGLE_INSTANCE


# =============================================================================
# TEST: OPTIONS FLOW
# =============================================================================


class TestOptionsFlow:
    """The options form edits notification and reminder settings."""

    async def test_form_shows_current_values(
        self, hass: HomeAssistant, mock_config_entry: MockConfigEntry
    ) -> None:
        mock_config_entry.add_to_hass(hass)
        result = await hass.config_entries.options.async_init(mock_config_entry.entry_id)
        assert result["type"] == FlowResultType.FORM
        assert result["step_id"] == const.OPTIONS_FLOW_STEP_INIT
        assert result["errors"] == {}

    async def test_save_normalizes_times(
        self, hass: HomeAssistant, mock_config_entry: MockConfigEntry
    ) -> None:
        mock_config_entry.add_to_hass(hass)
        result = await hass.config_entries.options.async_init(mock_config_entry.entry_id)

        result = await hass.config_entries.options.async_configure(
            result["flow_id"],
            {
                const.CONF_NOTIFY_SERVICE: "notify.other",
                const.CONF_NOTIFICATIONS_ENABLED: True,
                const.CONF_QUIET_HOURS_ENABLED: True,
                const.CONF_QUIET_HOURS_START: "21:30:00",
                const.CONF_QUIET_HOURS_END: "06:45:00",
                const.CONF_DEFAULT_REMINDER_TIME: "08:00:00",
                const.CONF_CURRENCY: "GBP",
                const.CONF_DISABLED_CATEGORIES: [const.NOTIFICATION_CATEGORY_VACCINE],
            },
        )

        assert result["type"] == FlowResultType.CREATE_ENTRY
        options = mock_config_entry.options
        assert options[const.CONF_NOTIFY_SERVICE] == "notify.other"
        assert options[const.CONF_QUIET_HOURS_START] == "21:30"
        assert options[const.CONF_QUIET_HOURS_END] == "06:45"
        assert options[const.CONF_DEFAULT_REMINDER_TIME] == "08:00"
        assert options[const.CONF_CURRENCY] == "GBP"
        assert options[const.CONF_DISABLED_CATEGORIES] == [
            const.NOTIFICATION_CATEGORY_VACCINE
        ]

    async def test_invalid_time_rejected(
        self, hass: HomeAssistant, mock_config_entry: MockConfigEntry
    ) -> None:
        mock_config_entry.add_to_hass(hass)
        result = await hass.config_entries.options.async_init(mock_config_entry.entry_id)

        with pytest.raises(data_entry_flow.InvalidData):
            await hass.config_entries.options.async_configure(
                result["flow_id"],
                {
                    **mock_config_entry.options,
                    const.CONF_QUIET_HOURS_START: "25:00",
                },
            )
        assert mock_config_entry.options[const.CONF_QUIET_HOURS_START] == (
            const.DEFAULT_QUIET_HOURS_START
        )
