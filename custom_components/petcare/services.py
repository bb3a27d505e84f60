# File: services.py
"""Defines custom services for the Pet Care integration.

These services expose the record keeper to scripts, automations and
dashboards: CRUD for every collection, cascade deletion, orphan cleanup and
response-only statistics. Input is validated by the voluptuous schemas below
before any storage is touched.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers import config_validation as cv
import voluptuous as vol

from . import const
from .coordinator import PetCareDataCoordinator
from .data_builders import EntityValidationError

# --- Field Schemas ---
_AMOUNT = vol.All(vol.Coerce(float), vol.Range(min=0))
_POSITIVE = vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False))
_OPTIONAL_DATE = vol.Any(cv.date, None)
_OPTIONAL_STRING = vol.Any(cv.string, None)

EMERGENCY_CONTACT_SCHEMA = vol.Schema(
    {
        vol.Required("name"): cv.string,
        vol.Required("phone"): cv.string,
        vol.Optional("relationship"): cv.string,
    }
)

PET_FIELDS = {
    vol.Required(const.DATA_PET_NAME): cv.string,
    vol.Required(const.DATA_PET_SPECIES): vol.In(const.PET_SPECIES),
    vol.Optional(const.DATA_PET_BREED): _OPTIONAL_STRING,
    vol.Required(const.DATA_PET_DATE_OF_BIRTH): cv.date,
    vol.Optional(const.DATA_PET_SEX): vol.In(const.PET_SEXES),
    vol.Optional(const.DATA_PET_AVATAR_URI): _OPTIONAL_STRING,
    vol.Optional(const.DATA_NOTES): _OPTIONAL_STRING,
    vol.Optional(const.DATA_PET_MICROCHIP_NUMBER): _OPTIONAL_STRING,
    vol.Optional(const.DATA_PET_REGISTRATION_NUMBER): _OPTIONAL_STRING,
    vol.Optional(const.DATA_PET_INSURANCE_ID): _OPTIONAL_STRING,
    vol.Optional(const.DATA_PET_EMERGENCY_CONTACT): vol.Any(
        EMERGENCY_CONTACT_SCHEMA, None
    ),
    vol.Optional(const.DATA_PET_PREFERRED_VET_ID): _OPTIONAL_STRING,
}

VACCINE_FIELDS = {
    vol.Required(const.DATA_PET_ID): cv.string,
    vol.Required(const.DATA_VACCINE_NAME): cv.string,
    vol.Optional(const.DATA_VACCINE_DATE_ADMINISTERED): _OPTIONAL_DATE,
    vol.Required(const.DATA_VACCINE_NEXT_DUE_DATE): cv.date,
    vol.Optional(const.DATA_VACCINE_VET_CLINIC_NAME): _OPTIONAL_STRING,
    vol.Optional(const.DATA_NOTES): _OPTIONAL_STRING,
}

REMINDER_FIELDS = {
    vol.Required(const.DATA_PET_ID): cv.string,
    vol.Required(const.DATA_REMINDER_TYPE): vol.In(const.REMINDER_TYPES),
    vol.Required(const.DATA_REMINDER_TITLE): cv.string,
    vol.Optional(const.DATA_DESCRIPTION): _OPTIONAL_STRING,
    vol.Required(const.DATA_REMINDER_DATE): cv.date,
    vol.Optional(const.DATA_REMINDER_TIME): cv.time,
    vol.Optional(const.DATA_REMINDER_REPEAT): vol.In(const.REPEAT_OPTIONS),
}


def _all_optional(fields: dict[Any, Any]) -> dict[Any, Any]:
    """Turn every Required marker into Optional for update schemas."""
    return {vol.Optional(str(key)): value for key, value in fields.items()}


# --- Service Schemas ---
ADD_PET_SCHEMA = vol.Schema(PET_FIELDS)

UPDATE_PET_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_PET_ID): cv.string, **_all_optional(PET_FIELDS)}
)

PET_ID_SCHEMA = vol.Schema({vol.Required(const.FIELD_PET_ID): cv.string})

RECORD_ID_SCHEMA = vol.Schema({vol.Required(const.FIELD_RECORD_ID): cv.string})

ADD_VACCINE_SCHEMA = vol.Schema(VACCINE_FIELDS)

UPDATE_VACCINE_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_RECORD_ID): cv.string, **_all_optional(VACCINE_FIELDS)}
)

ADD_REMINDER_SCHEMA = vol.Schema(REMINDER_FIELDS)

UPDATE_REMINDER_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_RECORD_ID): cv.string, **_all_optional(REMINDER_FIELDS)}
)

ADD_EXPENSE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_PET_ID): cv.string,
        vol.Required(const.DATA_EXPENSE_CATEGORY): vol.In(const.EXPENSE_CATEGORIES),
        vol.Required(const.DATA_EXPENSE_AMOUNT): _AMOUNT,
        vol.Required(const.DATA_DATE): cv.date,
        vol.Optional(const.DATA_DESCRIPTION): _OPTIONAL_STRING,
        vol.Optional(const.DATA_EXPENSE_VENDOR): _OPTIONAL_STRING,
    }
)

ADD_WEIGHT_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_PET_ID): cv.string,
        vol.Required(const.DATA_WEIGHT_VALUE): _POSITIVE,
        vol.Required(const.DATA_DATE): cv.date,
        vol.Optional(const.DATA_NOTES): _OPTIONAL_STRING,
    }
)

ADD_RECORD_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_RECORD_TYPE): vol.In(const.RECORD_TYPES),
        vol.Required(const.FIELD_DATA): dict,
    }
)

UPDATE_RECORD_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_RECORD_TYPE): vol.In(const.RECORD_TYPES),
        vol.Required(const.FIELD_RECORD_ID): cv.string,
        vol.Required(const.FIELD_DATA): dict,
    }
)

DELETE_RECORD_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_RECORD_TYPE): vol.In(const.RECORD_TYPES),
        vol.Required(const.FIELD_RECORD_ID): cv.string,
    }
)

EMPTY_SCHEMA = vol.Schema({})

OPTIONAL_PET_ID_SCHEMA = vol.Schema({vol.Optional(const.FIELD_PET_ID): cv.string})


def _get_coordinator(hass: HomeAssistant) -> PetCareDataCoordinator:
    """Return the coordinator of the loaded Pet Care entry."""
    for entry_data in hass.data.get(const.DOMAIN, {}).values():
        return entry_data[const.COORDINATOR]
    raise HomeAssistantError(
        translation_domain=const.DOMAIN,
        translation_key=const.TRANS_KEY_ERROR_NOT_LOADED,
    )


def _payload(call: ServiceCall, *exclude: str) -> dict[str, Any]:
    return {key: value for key, value in call.data.items() if key not in exclude}


Handler = Callable[[ServiceCall], Awaitable[ServiceResponse]]


def _translate_validation(handler: Handler) -> Handler:
    """Surface record validation failures as ServiceValidationError."""

    async def _wrapped(call: ServiceCall) -> ServiceResponse:
        try:
            return await handler(call)
        except EntityValidationError as err:
            const.LOGGER.warning(
                "WARNING: %s rejected: %s (%s)",
                call.service,
                err.field,
                err.translation_key,
            )
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=err.translation_key,
                translation_placeholders={"field": err.field, **err.placeholders},
            ) from err

    return _wrapped


def async_setup_services(hass: HomeAssistant) -> None:
    """Register Pet Care services."""

    # --- Pets ---
    async def handle_add_pet(call: ServiceCall) -> ServiceResponse:
        """Handle adding a pet."""
        coordinator = _get_coordinator(hass)
        return await coordinator.pet_manager.async_add_pet(_payload(call))

    async def handle_update_pet(call: ServiceCall) -> ServiceResponse:
        """Handle updating a pet."""
        coordinator = _get_coordinator(hass)
        return await coordinator.pet_manager.async_update_pet(
            call.data[const.FIELD_PET_ID], _payload(call, const.FIELD_PET_ID)
        )

    async def handle_delete_pet(call: ServiceCall) -> ServiceResponse:
        """Handle cascade deletion of a pet."""
        coordinator = _get_coordinator(hass)
        removed = await coordinator.pet_manager.async_delete_pet(
            call.data[const.FIELD_PET_ID]
        )
        return {"removed": removed}

    # --- Vaccines ---
    async def handle_add_vaccine(call: ServiceCall) -> ServiceResponse:
        """Handle adding a vaccine."""
        coordinator = _get_coordinator(hass)
        return await coordinator.record_manager.async_add_vaccine(_payload(call))

    async def handle_update_vaccine(call: ServiceCall) -> ServiceResponse:
        """Handle updating a vaccine."""
        coordinator = _get_coordinator(hass)
        return await coordinator.record_manager.async_update_vaccine(
            call.data[const.FIELD_RECORD_ID], _payload(call, const.FIELD_RECORD_ID)
        )

    async def handle_delete_vaccine(call: ServiceCall) -> ServiceResponse:
        """Handle deleting a vaccine."""
        coordinator = _get_coordinator(hass)
        await coordinator.record_manager.async_delete_vaccine(
            call.data[const.FIELD_RECORD_ID]
        )
        return None

    # --- Reminders ---
    async def handle_add_reminder(call: ServiceCall) -> ServiceResponse:
        """Handle adding a reminder and scheduling its notifications."""
        coordinator = _get_coordinator(hass)
        return await coordinator.reminder_manager.async_add_reminder(_payload(call))

    async def handle_update_reminder(call: ServiceCall) -> ServiceResponse:
        """Handle updating a reminder and rescheduling its notifications."""
        coordinator = _get_coordinator(hass)
        return await coordinator.reminder_manager.async_update_reminder(
            call.data[const.FIELD_RECORD_ID], _payload(call, const.FIELD_RECORD_ID)
        )

    async def handle_delete_reminder(call: ServiceCall) -> ServiceResponse:
        """Handle deleting a reminder."""
        coordinator = _get_coordinator(hass)
        await coordinator.reminder_manager.async_delete_reminder(
            call.data[const.FIELD_RECORD_ID]
        )
        return None

    # --- Expenses & Weights ---
    async def handle_add_expense(call: ServiceCall) -> ServiceResponse:
        """Handle adding an expense."""
        coordinator = _get_coordinator(hass)
        return await coordinator.record_manager.async_add_expense(_payload(call))

    async def handle_delete_expense(call: ServiceCall) -> ServiceResponse:
        """Handle deleting an expense."""
        coordinator = _get_coordinator(hass)
        await coordinator.record_manager.async_delete_expense(
            call.data[const.FIELD_RECORD_ID]
        )
        return None

    async def handle_add_weight(call: ServiceCall) -> ServiceResponse:
        """Handle adding a weight record."""
        coordinator = _get_coordinator(hass)
        return await coordinator.record_manager.async_add_weight(_payload(call))

    async def handle_delete_weight(call: ServiceCall) -> ServiceResponse:
        """Handle deleting a weight record."""
        coordinator = _get_coordinator(hass)
        await coordinator.record_manager.async_delete_weight(
            call.data[const.FIELD_RECORD_ID]
        )
        return None

    # --- Ancillary Records ---
    async def handle_add_record(call: ServiceCall) -> ServiceResponse:
        """Handle adding a grooming/activity/insurance/medical/vet/recurring record."""
        coordinator = _get_coordinator(hass)
        return await coordinator.record_manager.async_add_record(
            call.data[const.FIELD_RECORD_TYPE], dict(call.data[const.FIELD_DATA])
        )

    async def handle_update_record(call: ServiceCall) -> ServiceResponse:
        """Handle updating an ancillary record."""
        coordinator = _get_coordinator(hass)
        return await coordinator.record_manager.async_update_record(
            call.data[const.FIELD_RECORD_TYPE],
            call.data[const.FIELD_RECORD_ID],
            dict(call.data[const.FIELD_DATA]),
        )

    async def handle_delete_record(call: ServiceCall) -> ServiceResponse:
        """Handle deleting an ancillary record."""
        coordinator = _get_coordinator(hass)
        await coordinator.record_manager.async_delete_record(
            call.data[const.FIELD_RECORD_TYPE], call.data[const.FIELD_RECORD_ID]
        )
        return None

    async def handle_purge_orphans(call: ServiceCall) -> ServiceResponse:
        """Handle removal of records whose owner no longer exists."""
        coordinator = _get_coordinator(hass)
        removed = await coordinator.pet_manager.async_purge_orphans()
        return {"removed": removed}

    # --- Statistics ---
    async def handle_get_pet_statistics(call: ServiceCall) -> ServiceResponse:
        """Return statistics for one pet."""
        coordinator = _get_coordinator(hass)
        return await coordinator.statistics_manager.async_get_pet_statistics(
            call.data[const.FIELD_PET_ID]
        )

    async def handle_get_overall_statistics(call: ServiceCall) -> ServiceResponse:
        """Return statistics across all pets."""
        coordinator = _get_coordinator(hass)
        return await coordinator.statistics_manager.async_get_overall_statistics()

    async def handle_get_health_dashboard(call: ServiceCall) -> ServiceResponse:
        """Return the health dashboard."""
        coordinator = _get_coordinator(hass)
        return await coordinator.statistics_manager.async_get_health_dashboard()

    async def handle_get_expense_summary(call: ServiceCall) -> ServiceResponse:
        """Return expense totals, optionally for one pet."""
        coordinator = _get_coordinator(hass)
        return await coordinator.statistics_manager.async_get_expense_summary(
            call.data.get(const.FIELD_PET_ID)
        )

    # --- Register Services ---
    registrations: dict[SupportsResponse, dict[str, tuple[Handler, vol.Schema]]] = {
        SupportsResponse.OPTIONAL: {
            const.SERVICE_ADD_PET: (handle_add_pet, ADD_PET_SCHEMA),
            const.SERVICE_UPDATE_PET: (handle_update_pet, UPDATE_PET_SCHEMA),
            const.SERVICE_DELETE_PET: (handle_delete_pet, PET_ID_SCHEMA),
            const.SERVICE_ADD_VACCINE: (handle_add_vaccine, ADD_VACCINE_SCHEMA),
            const.SERVICE_UPDATE_VACCINE: (handle_update_vaccine, UPDATE_VACCINE_SCHEMA),
            const.SERVICE_ADD_REMINDER: (handle_add_reminder, ADD_REMINDER_SCHEMA),
            const.SERVICE_UPDATE_REMINDER: (
                handle_update_reminder,
                UPDATE_REMINDER_SCHEMA,
            ),
            const.SERVICE_ADD_EXPENSE: (handle_add_expense, ADD_EXPENSE_SCHEMA),
            const.SERVICE_ADD_WEIGHT: (handle_add_weight, ADD_WEIGHT_SCHEMA),
            const.SERVICE_ADD_RECORD: (handle_add_record, ADD_RECORD_SCHEMA),
            const.SERVICE_UPDATE_RECORD: (handle_update_record, UPDATE_RECORD_SCHEMA),
            const.SERVICE_PURGE_ORPHANS: (handle_purge_orphans, EMPTY_SCHEMA),
        },
        SupportsResponse.NONE: {
            const.SERVICE_DELETE_VACCINE: (handle_delete_vaccine, RECORD_ID_SCHEMA),
            const.SERVICE_DELETE_REMINDER: (handle_delete_reminder, RECORD_ID_SCHEMA),
            const.SERVICE_DELETE_EXPENSE: (handle_delete_expense, RECORD_ID_SCHEMA),
            const.SERVICE_DELETE_WEIGHT: (handle_delete_weight, RECORD_ID_SCHEMA),
            const.SERVICE_DELETE_RECORD: (handle_delete_record, DELETE_RECORD_SCHEMA),
        },
        SupportsResponse.ONLY: {
            const.SERVICE_GET_PET_STATISTICS: (handle_get_pet_statistics, PET_ID_SCHEMA),
            const.SERVICE_GET_OVERALL_STATISTICS: (
                handle_get_overall_statistics,
                EMPTY_SCHEMA,
            ),
            const.SERVICE_GET_HEALTH_DASHBOARD: (
                handle_get_health_dashboard,
                EMPTY_SCHEMA,
            ),
            const.SERVICE_GET_EXPENSE_SUMMARY: (
                handle_get_expense_summary,
                OPTIONAL_PET_ID_SCHEMA,
            ),
        },
    }

    for supports_response, services in registrations.items():
        for service, (handler, schema) in services.items():
            hass.services.async_register(
                const.DOMAIN,
                service,
                _translate_validation(handler),
                schema=schema,
                supports_response=supports_response,
            )

    const.LOGGER.info("INFO: Pet Care services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister Pet Care services when unloading the integration."""
    for service in const.SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Pet Care services have been unregistered")
