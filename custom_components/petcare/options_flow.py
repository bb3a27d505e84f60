# File: options_flow.py
"""Options Flow for the Pet Care integration.

Edits notification, quiet-hours, reminder and currency settings. Saving the
form updates the entry options, which reloads the integration so the
scheduler picks up the new notify target.
"""

from typing import Any, Optional

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.helpers import selector

from . import const
from .utils.dt_utils import dt_format_time, dt_parse_time


def _time_field(user_input: dict[str, Any], key: str) -> Optional[str]:
    """Normalize a selector time ("HH:MM:SS") to "HH:MM"."""
    parsed = dt_parse_time(user_input.get(key))
    return dt_format_time(parsed) if parsed is not None else None


class PetCareOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for Pet Care settings."""

    def __init__(self, _config_entry: config_entries.ConfigEntry):
        """Initialize the options flow."""
        self._entry_options: dict[str, Any] = {}

    async def async_step_init(self, user_input=None):
        """Show and save the settings form."""
        self._entry_options = dict(self.config_entry.options)
        errors: dict[str, str] = {}

        if user_input is not None:
            times = {
                key: _time_field(user_input, key)
                for key in (
                    const.CONF_QUIET_HOURS_START,
                    const.CONF_QUIET_HOURS_END,
                    const.CONF_DEFAULT_REMINDER_TIME,
                )
            }
            for key, value in times.items():
                if value is None:
                    errors[key] = const.TRANS_KEY_CFOF_INVALID_TIME

            if not errors:
                self._entry_options.update(user_input)
                self._entry_options.update(times)
                const.LOGGER.debug(
                    "DEBUG: Saving Pet Care options: %s", self._entry_options
                )
                return self.async_create_entry(title="", data=self._entry_options)

        options = self._entry_options
        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=vol.Schema(
                {
                    vol.Required(
                        const.CONF_NOTIFY_SERVICE,
                        default=options.get(
                            const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
                        ),
                    ): selector.TextSelector(),
                    vol.Required(
                        const.CONF_NOTIFICATIONS_ENABLED,
                        default=options.get(
                            const.CONF_NOTIFICATIONS_ENABLED,
                            const.DEFAULT_NOTIFICATIONS_ENABLED,
                        ),
                    ): selector.BooleanSelector(),
                    vol.Required(
                        const.CONF_QUIET_HOURS_ENABLED,
                        default=options.get(
                            const.CONF_QUIET_HOURS_ENABLED,
                            const.DEFAULT_QUIET_HOURS_ENABLED,
                        ),
                    ): selector.BooleanSelector(),
                    vol.Required(
                        const.CONF_QUIET_HOURS_START,
                        default=options.get(
                            const.CONF_QUIET_HOURS_START,
                            const.DEFAULT_QUIET_HOURS_START,
                        ),
                    ): selector.TimeSelector(),
                    vol.Required(
                        const.CONF_QUIET_HOURS_END,
                        default=options.get(
                            const.CONF_QUIET_HOURS_END, const.DEFAULT_QUIET_HOURS_END
                        ),
                    ): selector.TimeSelector(),
                    vol.Required(
                        const.CONF_DEFAULT_REMINDER_TIME,
                        default=options.get(
                            const.CONF_DEFAULT_REMINDER_TIME,
                            const.DEFAULT_REMINDER_TIME,
                        ),
                    ): selector.TimeSelector(),
                    vol.Required(
                        const.CONF_CURRENCY,
                        default=options.get(
                            const.CONF_CURRENCY, const.DEFAULT_CURRENCY
                        ),
                    ): selector.SelectSelector(
                        selector.SelectSelectorConfig(
                            options=const.CURRENCIES,
                            mode=selector.SelectSelectorMode.DROPDOWN,
                        )
                    ),
                    vol.Optional(
                        const.CONF_DISABLED_CATEGORIES,
                        default=options.get(const.CONF_DISABLED_CATEGORIES, []),
                    ): selector.SelectSelector(
                        selector.SelectSelectorConfig(
                            options=const.NOTIFICATION_CATEGORIES,
                            multiple=True,
                            mode=selector.SelectSelectorMode.LIST,
                            translation_key=const.TRANS_KEY_CFOF_CATEGORIES,
                        )
                    ),
                }
            ),
            errors=errors,
        )
