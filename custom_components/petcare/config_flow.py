# File: config_flow.py
"""Config flow for the Pet Care integration.

A single instance holds every pet. Setup only asks for the notification
target; everything else lives in the options flow.
"""

from typing import Any, Optional

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.helpers import selector

from . import const
from .options_flow import PetCareOptionsFlowHandler


class PetCareConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Pet Care."""

    VERSION = 1

    async def async_step_user(self, user_input: Optional[dict[str, Any]] = None):
        """Create the single Pet Care entry."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is not None:
            const.LOGGER.debug("DEBUG: Creating Pet Care entry with %s", user_input)
            return self.async_create_entry(
                title=const.PETCARE_TITLE,
                data={},
                options={
                    const.CONF_NOTIFY_SERVICE: user_input[const.CONF_NOTIFY_SERVICE],
                    const.CONF_NOTIFICATIONS_ENABLED: const.DEFAULT_NOTIFICATIONS_ENABLED,
                    const.CONF_QUIET_HOURS_ENABLED: const.DEFAULT_QUIET_HOURS_ENABLED,
                    const.CONF_QUIET_HOURS_START: const.DEFAULT_QUIET_HOURS_START,
                    const.CONF_QUIET_HOURS_END: const.DEFAULT_QUIET_HOURS_END,
                    const.CONF_DEFAULT_REMINDER_TIME: const.DEFAULT_REMINDER_TIME,
                    const.CONF_CURRENCY: user_input.get(
                        const.CONF_CURRENCY, const.DEFAULT_CURRENCY
                    ),
                    const.CONF_DISABLED_CATEGORIES: [],
                },
            )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=vol.Schema(
                {
                    vol.Required(
                        const.CONF_NOTIFY_SERVICE,
                        default=const.DEFAULT_NOTIFY_SERVICE,
                    ): selector.TextSelector(),
                    vol.Required(
                        const.CONF_CURRENCY, default=const.DEFAULT_CURRENCY
                    ): selector.SelectSelector(
                        selector.SelectSelectorConfig(
                            options=const.CURRENCIES,
                            mode=selector.SelectSelectorMode.DROPDOWN,
                        )
                    ),
                }
            ),
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return PetCareOptionsFlowHandler(config_entry)
