"""Type definitions for Pet Care data structures.

Records are stored as plain dicts; the TypedDicts below document the fixed
keys of each collection for static analysis. TypedDict does NOT enforce
types at runtime, so repository and manager code keeps its `.get()` defaults.

IMPORTANT: This file must NOT import from coordinator.py or managers.
Only import from typing (type machinery).
"""

from typing import Any, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

PetId = str  # uuid4 hex
RecordId = str  # uuid4 hex
NotificationHandle = str  # uuid4 hex issued by the notification scheduler
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"
WallTime = str  # 24h "HH:MM"


class _Timestamps(TypedDict):
    id: RecordId
    created_at: ISODatetime
    updated_at: ISODatetime


# =============================================================================
# Core Entities
# =============================================================================


class EmergencyContact(TypedDict):
    """Emergency contact attached to a pet."""

    name: str
    phone: str
    relationship: NotRequired[str]


class PetData(_Timestamps):
    """Type definition for a pet."""

    name: str
    species: str  # const.PET_SPECIES
    breed: NotRequired[str | None]
    date_of_birth: ISODate
    sex: str  # const.PET_SEXES
    avatar_uri: NotRequired[str | None]
    notes: NotRequired[str | None]
    microchip_number: NotRequired[str | None]
    registration_number: NotRequired[str | None]
    insurance_id: NotRequired[RecordId | None]
    emergency_contact: NotRequired[EmergencyContact | None]
    preferred_vet_id: NotRequired[RecordId | None]


class VaccineData(_Timestamps):
    """Type definition for a vaccine.

    `status` is derived on read and never written to storage.
    """

    pet_id: PetId
    name: str
    date_administered: NotRequired[ISODate | None]
    next_due_date: ISODate
    vet_clinic_name: NotRequired[str | None]
    notes: NotRequired[str | None]
    status: NotRequired[str]


class ReminderData(_Timestamps):
    """Type definition for a reminder.

    notification_id is the first handle of the scheduled series;
    notification_ids holds every handle so each can be cancelled.
    """

    pet_id: PetId
    type: str  # const.REMINDER_TYPES
    title: str
    description: NotRequired[str | None]
    reminder_date: ISODate
    reminder_time: WallTime
    repeat: str  # const.REPEAT_OPTIONS
    notification_id: NotRequired[NotificationHandle | None]
    notification_ids: NotRequired[list[NotificationHandle]]


class ExpenseData(_Timestamps):
    """Type definition for an expense."""

    pet_id: PetId
    category: str  # const.EXPENSE_CATEGORIES
    amount: float
    date: ISODate
    description: NotRequired[str | None]
    vendor: NotRequired[str | None]
    recurring_expense_id: NotRequired[RecordId | None]


class WeightData(_Timestamps):
    """Type definition for a weight record."""

    pet_id: PetId
    weight: float
    date: ISODate
    notes: NotRequired[str | None]


# =============================================================================
# Ancillary Records
# =============================================================================


class GroomingData(_Timestamps):
    """Type definition for a grooming record."""

    pet_id: PetId
    service_type: str
    date: ISODate
    next_grooming_date: NotRequired[ISODate | None]
    groomer_name: NotRequired[str | None]
    groomer_phone: NotRequired[str | None]
    groomer_email: NotRequired[str | None]
    cost: NotRequired[float | None]
    notes: NotRequired[str | None]


class ActivityData(_Timestamps):
    """Type definition for an activity log entry."""

    pet_id: PetId
    type: str
    date: ISODate
    time: NotRequired[WallTime | None]
    duration: NotRequired[int | None]  # minutes
    mood: NotRequired[str | None]
    behavior_notes: NotRequired[str | None]
    notes: NotRequired[str | None]


class InsuranceData(_Timestamps):
    """Type definition for an insurance policy."""

    pet_id: PetId
    provider_name: str
    policy_number: str
    start_date: ISODate
    renewal_date: NotRequired[ISODate | None]
    monthly_premium: NotRequired[float | None]
    coverage_details: NotRequired[str | None]


class InsuranceClaimData(_Timestamps):
    """Type definition for an insurance claim; owned by a policy, not a pet."""

    insurance_id: RecordId
    claim_number: NotRequired[str | None]
    date: ISODate
    amount: float
    status: str  # const.CLAIM_STATUSES
    description: NotRequired[str | None]


class MedicalRecordData(_Timestamps):
    """Type definition for a medical record."""

    pet_id: PetId
    type: str  # const.MEDICAL_RECORD_TYPES
    title: str
    date: ISODate
    vet_id: NotRequired[RecordId | None]
    description: NotRequired[str | None]
    notes: NotRequired[str | None]


class VetData(_Timestamps):
    """Type definition for a veterinarian; shared across pets."""

    name: str
    clinic_name: NotRequired[str | None]
    phone: NotRequired[str | None]
    email: NotRequired[str | None]
    address: NotRequired[str | None]
    notes: NotRequired[str | None]


class RecurringExpenseData(_Timestamps):
    """Type definition for a recurring expense template."""

    pet_id: PetId
    category: str
    amount: float
    frequency: str  # const.RECURRING_FREQUENCIES
    start_date: ISODate
    end_date: NotRequired[ISODate | None]
    next_due_date: ISODate
    is_active: bool
    description: NotRequired[str | None]
    vendor: NotRequired[str | None]


# =============================================================================
# Notification Payload
# =============================================================================


class NotificationPayload(TypedDict):
    """Content submitted with each scheduled notification."""

    title: str
    message: str
    data: dict[str, Any]
