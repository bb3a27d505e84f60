"""Record construction helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Record field defaults
- Business rule validation (required names, non-negative amounts, ...)
- Normalizing dates to ISO strings and times to "HH:MM"

### Build Functions
Each record type has a `build_<record>()` function that:
- Takes user_input with DATA_* keys (may have missing fields on update)
- Merges over `existing` for updates: user_input > existing > default
- Returns a dict ready for a repository `async_save()`

Ids and created_at/updated_at stamps are assigned by the repositories, not
here, so every write path shares the same upsert rules.

Consumers:
- services.py (service call payloads)
- managers (updates and recurring expense materialization)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, cast

from . import const
from .type_defs import ExpenseData, PetData, ReminderData, VaccineData, WeightData
from .utils.dt_utils import dt_format_time, dt_parse_date, dt_parse_time

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class EntityValidationError(Exception):
    """Validation error with field-specific information.

    Attributes:
        field: The DATA_* constant identifying the field that failed
        translation_key: The TRANS_KEY_* constant for the error message
        placeholders: Optional dict for translation string placeholders

    Example:
        raise EntityValidationError(
            field=const.DATA_EXPENSE_AMOUNT,
            translation_key="invalid_number",
            placeholders={"value": str(amount)},
        )
    """

    def __init__(
        self,
        field: str,
        translation_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize EntityValidationError."""
        super().__init__(f"{field}: {translation_key}")
        self.field = field
        self.translation_key = translation_key
        self.placeholders = placeholders or {}


# ==============================================================================
# FIELD NORMALIZATION
# ==============================================================================


def _iso_date(field: str, value: Any) -> str | None:
    if value is None or value == "":
        return None
    parsed = dt_parse_date(value)
    if parsed is None:
        raise EntityValidationError(field, "invalid_date", {"value": str(value)})
    return parsed.isoformat()


def _wall_time(field: str, value: Any) -> str | None:
    if value is None or value == "":
        return None
    parsed = dt_parse_time(value)
    if parsed is None:
        raise EntityValidationError(field, "invalid_time", {"value": str(value)})
    return dt_format_time(parsed)


def _number(field: str, value: Any, *, positive: bool = False) -> float | None:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError) as err:
        raise EntityValidationError(
            field, "invalid_number", {"value": str(value)}
        ) from err
    if number < 0 or (positive and number == 0):
        raise EntityValidationError(field, "invalid_number", {"value": str(value)})
    return number


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _choice(field: str, value: Any, options: list[str]) -> str:
    if value not in options:
        raise EntityValidationError(field, "invalid_choice", {"value": str(value)})
    return value


def _merge(
    user_input: dict[str, Any], existing: dict[str, Any] | None
) -> Callable[[str, Any], Any]:
    def get_field(data_key: str, default: Any = None) -> Any:
        """Get field value: user_input > existing > default."""
        if data_key in user_input:
            return user_input[data_key]
        if existing is not None:
            return existing.get(data_key, default)
        return default

    return get_field


def _require(field: str, value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise EntityValidationError(field, "required")
    return value


def _base(existing: dict[str, Any] | None) -> dict[str, Any]:
    """Carry identity and stamps across an update."""
    if existing is None:
        return {}
    return {
        key: existing[key]
        for key in (const.DATA_ID, const.DATA_CREATED_AT, const.DATA_UPDATED_AT)
        if key in existing
    }


# ==============================================================================
# CORE RECORDS
# ==============================================================================


def build_pet(
    user_input: dict[str, Any], existing: dict[str, Any] | None = None
) -> PetData:
    """Build pet data for create or update operations.

    Raises:
        EntityValidationError: Missing name or date of birth, unknown species/sex.
    """
    get_field = _merge(user_input, existing)
    contact = get_field(const.DATA_PET_EMERGENCY_CONTACT)
    if contact is not None:
        contact = {
            "name": _require("emergency_contact.name", _text(contact.get("name"))),
            "phone": _require("emergency_contact.phone", _text(contact.get("phone"))),
            "relationship": _text(contact.get("relationship")),
        }

    pet_data = {
        **_base(existing),
        const.DATA_PET_NAME: _require(
            const.DATA_PET_NAME, _text(get_field(const.DATA_PET_NAME))
        ),
        const.DATA_PET_SPECIES: _choice(
            const.DATA_PET_SPECIES,
            get_field(const.DATA_PET_SPECIES, const.SPECIES_OTHER),
            const.PET_SPECIES,
        ),
        const.DATA_PET_BREED: _text(get_field(const.DATA_PET_BREED)),
        const.DATA_PET_DATE_OF_BIRTH: _require(
            const.DATA_PET_DATE_OF_BIRTH,
            _iso_date(
                const.DATA_PET_DATE_OF_BIRTH, get_field(const.DATA_PET_DATE_OF_BIRTH)
            ),
        ),
        const.DATA_PET_SEX: _choice(
            const.DATA_PET_SEX,
            get_field(const.DATA_PET_SEX, const.SEX_UNKNOWN),
            const.PET_SEXES,
        ),
        const.DATA_PET_AVATAR_URI: _text(get_field(const.DATA_PET_AVATAR_URI)),
        const.DATA_NOTES: _text(get_field(const.DATA_NOTES)),
        const.DATA_PET_MICROCHIP_NUMBER: _text(
            get_field(const.DATA_PET_MICROCHIP_NUMBER)
        ),
        const.DATA_PET_REGISTRATION_NUMBER: _text(
            get_field(const.DATA_PET_REGISTRATION_NUMBER)
        ),
        const.DATA_PET_INSURANCE_ID: get_field(const.DATA_PET_INSURANCE_ID),
        const.DATA_PET_EMERGENCY_CONTACT: contact,
        const.DATA_PET_PREFERRED_VET_ID: get_field(const.DATA_PET_PREFERRED_VET_ID),
    }
    return cast("PetData", pet_data)


def build_vaccine(
    user_input: dict[str, Any], existing: dict[str, Any] | None = None
) -> VaccineData:
    """Build vaccine data. Any incoming `status` is dropped; it is always derived."""
    get_field = _merge(user_input, existing)
    vaccine_data = {
        **_base(existing),
        const.DATA_PET_ID: _require(const.DATA_PET_ID, get_field(const.DATA_PET_ID)),
        const.DATA_VACCINE_NAME: _require(
            const.DATA_VACCINE_NAME, _text(get_field(const.DATA_VACCINE_NAME))
        ),
        const.DATA_VACCINE_DATE_ADMINISTERED: _iso_date(
            const.DATA_VACCINE_DATE_ADMINISTERED,
            get_field(const.DATA_VACCINE_DATE_ADMINISTERED),
        ),
        const.DATA_VACCINE_NEXT_DUE_DATE: _require(
            const.DATA_VACCINE_NEXT_DUE_DATE,
            _iso_date(
                const.DATA_VACCINE_NEXT_DUE_DATE,
                get_field(const.DATA_VACCINE_NEXT_DUE_DATE),
            ),
        ),
        const.DATA_VACCINE_VET_CLINIC_NAME: _text(
            get_field(const.DATA_VACCINE_VET_CLINIC_NAME)
        ),
        const.DATA_NOTES: _text(get_field(const.DATA_NOTES)),
    }
    return cast("VaccineData", vaccine_data)


def build_reminder(
    user_input: dict[str, Any],
    existing: dict[str, Any] | None = None,
    default_time: str = const.DEFAULT_REMINDER_TIME,
) -> ReminderData:
    """Build reminder data.

    A missing time falls back to `default_time`. Notification handles are
    carried over from `existing`; the reminder manager replaces them after
    rescheduling.
    """
    get_field = _merge(user_input, existing)
    record = {
        **_base(existing),
        const.DATA_PET_ID: _require(const.DATA_PET_ID, get_field(const.DATA_PET_ID)),
        const.DATA_REMINDER_TYPE: _choice(
            const.DATA_REMINDER_TYPE,
            get_field(const.DATA_REMINDER_TYPE, const.REMINDER_TYPE_CUSTOM),
            const.REMINDER_TYPES,
        ),
        const.DATA_REMINDER_TITLE: _require(
            const.DATA_REMINDER_TITLE, _text(get_field(const.DATA_REMINDER_TITLE))
        ),
        const.DATA_DESCRIPTION: _text(get_field(const.DATA_DESCRIPTION)),
        const.DATA_REMINDER_DATE: _require(
            const.DATA_REMINDER_DATE,
            _iso_date(const.DATA_REMINDER_DATE, get_field(const.DATA_REMINDER_DATE)),
        ),
        const.DATA_REMINDER_TIME: _wall_time(
            const.DATA_REMINDER_TIME,
            get_field(const.DATA_REMINDER_TIME) or default_time,
        ),
        const.DATA_REMINDER_REPEAT: _choice(
            const.DATA_REMINDER_REPEAT,
            get_field(const.DATA_REMINDER_REPEAT, const.REPEAT_NONE),
            const.REPEAT_OPTIONS,
        ),
        const.DATA_REMINDER_NOTIFICATION_ID: get_field(
            const.DATA_REMINDER_NOTIFICATION_ID
        ),
        const.DATA_REMINDER_NOTIFICATION_IDS: list(
            get_field(const.DATA_REMINDER_NOTIFICATION_IDS) or []
        ),
    }
    return cast("ReminderData", record)


def build_expense(
    user_input: dict[str, Any], existing: dict[str, Any] | None = None
) -> ExpenseData:
    """Build expense data. Amounts must be non-negative."""
    get_field = _merge(user_input, existing)
    expense_data = {
        **_base(existing),
        const.DATA_PET_ID: _require(const.DATA_PET_ID, get_field(const.DATA_PET_ID)),
        const.DATA_EXPENSE_CATEGORY: _choice(
            const.DATA_EXPENSE_CATEGORY,
            get_field(const.DATA_EXPENSE_CATEGORY, "other"),
            const.EXPENSE_CATEGORIES,
        ),
        const.DATA_EXPENSE_AMOUNT: _require(
            const.DATA_EXPENSE_AMOUNT,
            _number(const.DATA_EXPENSE_AMOUNT, get_field(const.DATA_EXPENSE_AMOUNT)),
        ),
        const.DATA_DATE: _require(
            const.DATA_DATE, _iso_date(const.DATA_DATE, get_field(const.DATA_DATE))
        ),
        const.DATA_DESCRIPTION: _text(get_field(const.DATA_DESCRIPTION)),
        const.DATA_EXPENSE_VENDOR: _text(get_field(const.DATA_EXPENSE_VENDOR)),
        const.DATA_EXPENSE_RECURRING_ID: get_field(const.DATA_EXPENSE_RECURRING_ID),
    }
    return cast("ExpenseData", expense_data)


def build_weight(
    user_input: dict[str, Any], existing: dict[str, Any] | None = None
) -> WeightData:
    """Build weight data. Weights must be positive."""
    get_field = _merge(user_input, existing)
    weight_data = {
        **_base(existing),
        const.DATA_PET_ID: _require(const.DATA_PET_ID, get_field(const.DATA_PET_ID)),
        const.DATA_WEIGHT_VALUE: _require(
            const.DATA_WEIGHT_VALUE,
            _number(
                const.DATA_WEIGHT_VALUE,
                get_field(const.DATA_WEIGHT_VALUE),
                positive=True,
            ),
        ),
        const.DATA_DATE: _require(
            const.DATA_DATE, _iso_date(const.DATA_DATE, get_field(const.DATA_DATE))
        ),
        const.DATA_NOTES: _text(get_field(const.DATA_NOTES)),
    }
    return cast("WeightData", weight_data)


# ==============================================================================
# ANCILLARY RECORDS
# ==============================================================================

# Field kinds per ancillary collection. "choice" entries carry their options.
_TEXT = "text"
_DATE = "date"
_TIME = "time"
_AMOUNT = "amount"
_INT = "int"
_BOOL = "bool"
_REF = "ref"

_RECORD_LAYOUTS: dict[str, dict[str, tuple[str, bool, list[str] | None]]] = {
    const.COLLECTION_GROOMING: {
        const.DATA_PET_ID: (_REF, True, None),
        const.DATA_GROOMING_SERVICE_TYPE: (_TEXT, True, const.GROOMING_SERVICE_TYPES),
        const.DATA_DATE: (_DATE, True, None),
        const.DATA_GROOMING_NEXT_DATE: (_DATE, False, None),
        const.DATA_GROOMING_GROOMER_NAME: (_TEXT, False, None),
        const.DATA_GROOMING_GROOMER_PHONE: (_TEXT, False, None),
        const.DATA_GROOMING_GROOMER_EMAIL: (_TEXT, False, None),
        const.DATA_GROOMING_COST: (_AMOUNT, False, None),
        const.DATA_NOTES: (_TEXT, False, None),
    },
    const.COLLECTION_ACTIVITIES: {
        const.DATA_PET_ID: (_REF, True, None),
        const.DATA_ACTIVITY_TYPE: (_TEXT, True, const.ACTIVITY_TYPES),
        const.DATA_DATE: (_DATE, True, None),
        const.DATA_ACTIVITY_TIME: (_TIME, False, None),
        const.DATA_ACTIVITY_DURATION: (_INT, False, None),
        const.DATA_ACTIVITY_MOOD: (_TEXT, False, const.MOOD_TYPES),
        const.DATA_ACTIVITY_BEHAVIOR_NOTES: (_TEXT, False, None),
        const.DATA_NOTES: (_TEXT, False, None),
    },
    const.COLLECTION_INSURANCE: {
        const.DATA_PET_ID: (_REF, True, None),
        const.DATA_INSURANCE_PROVIDER_NAME: (_TEXT, True, None),
        const.DATA_INSURANCE_POLICY_NUMBER: (_TEXT, True, None),
        const.DATA_INSURANCE_START_DATE: (_DATE, True, None),
        const.DATA_INSURANCE_RENEWAL_DATE: (_DATE, False, None),
        const.DATA_INSURANCE_MONTHLY_PREMIUM: (_AMOUNT, False, None),
        const.DATA_INSURANCE_COVERAGE_DETAILS: (_TEXT, False, None),
    },
    const.COLLECTION_INSURANCE_CLAIMS: {
        const.DATA_CLAIM_INSURANCE_ID: (_REF, True, None),
        const.DATA_CLAIM_NUMBER: (_TEXT, False, None),
        const.DATA_DATE: (_DATE, True, None),
        const.DATA_CLAIM_AMOUNT: (_AMOUNT, True, None),
        const.DATA_CLAIM_STATUS: (_TEXT, True, const.CLAIM_STATUSES),
        const.DATA_DESCRIPTION: (_TEXT, False, None),
    },
    const.COLLECTION_MEDICAL_RECORDS: {
        const.DATA_PET_ID: (_REF, True, None),
        const.DATA_MEDICAL_TYPE: (_TEXT, True, const.MEDICAL_RECORD_TYPES),
        const.DATA_MEDICAL_TITLE: (_TEXT, True, None),
        const.DATA_DATE: (_DATE, True, None),
        const.DATA_MEDICAL_VET_ID: (_REF, False, None),
        const.DATA_DESCRIPTION: (_TEXT, False, None),
        const.DATA_NOTES: (_TEXT, False, None),
    },
    const.COLLECTION_VETS: {
        const.DATA_VET_NAME: (_TEXT, True, None),
        const.DATA_VET_CLINIC_NAME: (_TEXT, False, None),
        const.DATA_VET_PHONE: (_TEXT, False, None),
        const.DATA_VET_EMAIL: (_TEXT, False, None),
        const.DATA_VET_ADDRESS: (_TEXT, False, None),
        const.DATA_NOTES: (_TEXT, False, None),
    },
    const.COLLECTION_RECURRING_EXPENSES: {
        const.DATA_PET_ID: (_REF, True, None),
        const.DATA_RECURRING_CATEGORY: (_TEXT, True, const.EXPENSE_CATEGORIES),
        const.DATA_RECURRING_AMOUNT: (_AMOUNT, True, None),
        const.DATA_RECURRING_FREQUENCY: (_TEXT, True, const.RECURRING_FREQUENCIES),
        const.DATA_RECURRING_START_DATE: (_DATE, True, None),
        const.DATA_RECURRING_END_DATE: (_DATE, False, None),
        const.DATA_RECURRING_NEXT_DUE_DATE: (_DATE, False, None),
        const.DATA_RECURRING_IS_ACTIVE: (_BOOL, False, None),
        const.DATA_DESCRIPTION: (_TEXT, False, None),
        const.DATA_RECURRING_VENDOR: (_TEXT, False, None),
    },
}


def _normalize(field: str, kind: str, value: Any) -> Any:
    if kind == _DATE:
        return _iso_date(field, value)
    if kind == _TIME:
        return _wall_time(field, value)
    if kind == _AMOUNT:
        return _number(field, value)
    if kind == _INT:
        number = _number(field, value)
        return int(number) if number is not None else None
    if kind == _BOOL:
        return None if value is None else bool(value)
    if kind == _TEXT:
        return _text(value)
    return value


def build_record(
    record_type: str,
    user_input: dict[str, Any],
    existing: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build an ancillary record (grooming, activity, insurance, ...).

    Raises:
        EntityValidationError: Unknown record type, missing required field,
            invalid choice, date, time or amount.
    """
    layout = _RECORD_LAYOUTS.get(record_type)
    if layout is None:
        raise EntityValidationError(
            const.FIELD_RECORD_TYPE, "invalid_choice", {"value": record_type}
        )

    get_field = _merge(user_input, existing)
    record = _base(existing)
    for field, (kind, required, options) in layout.items():
        value = _normalize(field, kind, get_field(field))
        if required:
            _require(field, value)
        if options is not None and value is not None:
            _choice(field, value, options)
        record[field] = value

    if record_type == const.COLLECTION_RECURRING_EXPENSES:
        if record[const.DATA_RECURRING_NEXT_DUE_DATE] is None:
            record[const.DATA_RECURRING_NEXT_DUE_DATE] = record[
                const.DATA_RECURRING_START_DATE
            ]
        if record[const.DATA_RECURRING_IS_ACTIVE] is None:
            record[const.DATA_RECURRING_IS_ACTIVE] = True

    return record
