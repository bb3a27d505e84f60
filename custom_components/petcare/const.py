# File: const.py
"""Constants for the Pet Care integration.

This file centralizes configuration keys, defaults, storage keys, field names,
service names and enum values for consistency across the integration.
"""

import logging

import homeassistant.util.dt as dt_util

from .utils import dt_utils


def set_default_timezone(hass):
    """Set the default timezone based on the Home Assistant configuration."""
    global DEFAULT_TIME_ZONE
    DEFAULT_TIME_ZONE = dt_util.get_time_zone(hass.config.time_zone)
    if DEFAULT_TIME_ZONE is not None:
        dt_utils.set_default_timezone(DEFAULT_TIME_ZONE)


# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
PETCARE_TITLE = "Pet Care"

DOMAIN = "petcare"

LOGGER = logging.getLogger(__package__)

# No entity platforms; everything is exposed through services.
PLATFORMS: list = []

COORDINATOR = "coordinator"
STORE = "store"
COORDINATOR_SUFFIX = "_coordinator"

# Default timezone: initially None, to be set once hass is available.
DEFAULT_TIME_ZONE = None

# Derived statuses are refreshed on this cadence (minutes)
DEFAULT_UPDATE_INTERVAL = 30

# ------------------------------------------------------------------------------------------------
# Storage
# ------------------------------------------------------------------------------------------------
STORAGE_VERSION = 1
STORAGE_KEY_PREFIX = "petcare"

COLLECTION_PETS = "pets"
COLLECTION_VACCINES = "vaccines"
COLLECTION_REMINDERS = "reminders"
COLLECTION_EXPENSES = "expenses"
COLLECTION_WEIGHTS = "weights"
COLLECTION_GROOMING = "grooming"
COLLECTION_ACTIVITIES = "activities"
COLLECTION_INSURANCE = "insurance"
COLLECTION_INSURANCE_CLAIMS = "insurance_claims"
COLLECTION_MEDICAL_RECORDS = "medical_records"
COLLECTION_VETS = "vets"
COLLECTION_RECURRING_EXPENSES = "recurring_expenses"

ALL_COLLECTIONS = [
    COLLECTION_PETS,
    COLLECTION_VACCINES,
    COLLECTION_REMINDERS,
    COLLECTION_EXPENSES,
    COLLECTION_WEIGHTS,
    COLLECTION_GROOMING,
    COLLECTION_ACTIVITIES,
    COLLECTION_INSURANCE,
    COLLECTION_INSURANCE_CLAIMS,
    COLLECTION_MEDICAL_RECORDS,
    COLLECTION_VETS,
    COLLECTION_RECURRING_EXPENSES,
]

# Pet-owned collections purged by the cascade, in purge order.
# Insurance claims hang off insurance policies and are handled separately.
PET_OWNED_COLLECTIONS = [
    COLLECTION_VACCINES,
    COLLECTION_REMINDERS,
    COLLECTION_EXPENSES,
    COLLECTION_WEIGHTS,
    COLLECTION_GROOMING,
    COLLECTION_ACTIVITIES,
    COLLECTION_MEDICAL_RECORDS,
    COLLECTION_RECURRING_EXPENSES,
    COLLECTION_INSURANCE,
]

# ------------------------------------------------------------------------------------------------
# Configuration Keys (options flow)
# ------------------------------------------------------------------------------------------------
CONF_NOTIFY_SERVICE = "notify_service"
CONF_NOTIFICATIONS_ENABLED = "notifications_enabled"
CONF_QUIET_HOURS_ENABLED = "quiet_hours_enabled"
CONF_QUIET_HOURS_START = "quiet_hours_start"
CONF_QUIET_HOURS_END = "quiet_hours_end"
CONF_DEFAULT_REMINDER_TIME = "default_reminder_time"
CONF_CURRENCY = "currency"
CONF_DISABLED_CATEGORIES = "disabled_categories"

DEFAULT_NOTIFY_SERVICE = "notify.notify"
DEFAULT_NOTIFICATIONS_ENABLED = True
DEFAULT_QUIET_HOURS_ENABLED = False
DEFAULT_QUIET_HOURS_START = "22:00"
DEFAULT_QUIET_HOURS_END = "07:00"
DEFAULT_REMINDER_TIME = "09:00"
DEFAULT_CURRENCY = "USD"

CURRENCIES = ["USD", "EUR", "GBP", "JPY", "CAD", "AUD"]
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
}

# ------------------------------------------------------------------------------------------------
# Common Record Fields
# ------------------------------------------------------------------------------------------------
DATA_ID = "id"
DATA_PET_ID = "pet_id"
DATA_CREATED_AT = "created_at"
DATA_UPDATED_AT = "updated_at"
DATA_NOTES = "notes"
DATA_DATE = "date"
DATA_DESCRIPTION = "description"

# Pet
DATA_PET_NAME = "name"
DATA_PET_SPECIES = "species"
DATA_PET_BREED = "breed"
DATA_PET_DATE_OF_BIRTH = "date_of_birth"
DATA_PET_SEX = "sex"
DATA_PET_AVATAR_URI = "avatar_uri"
DATA_PET_MICROCHIP_NUMBER = "microchip_number"
DATA_PET_REGISTRATION_NUMBER = "registration_number"
DATA_PET_INSURANCE_ID = "insurance_id"
DATA_PET_EMERGENCY_CONTACT = "emergency_contact"
DATA_PET_PREFERRED_VET_ID = "preferred_vet_id"

# Vaccine
DATA_VACCINE_NAME = "name"
DATA_VACCINE_DATE_ADMINISTERED = "date_administered"
DATA_VACCINE_NEXT_DUE_DATE = "next_due_date"
DATA_VACCINE_VET_CLINIC_NAME = "vet_clinic_name"
DATA_VACCINE_STATUS = "status"

# Reminder
DATA_REMINDER_TYPE = "type"
DATA_REMINDER_TITLE = "title"
DATA_REMINDER_DATE = "reminder_date"
DATA_REMINDER_TIME = "reminder_time"
DATA_REMINDER_REPEAT = "repeat"
DATA_REMINDER_NOTIFICATION_ID = "notification_id"
DATA_REMINDER_NOTIFICATION_IDS = "notification_ids"
DATA_REMINDER_STATUS = "status"

# Expense
DATA_EXPENSE_CATEGORY = "category"
DATA_EXPENSE_AMOUNT = "amount"
DATA_EXPENSE_VENDOR = "vendor"
DATA_EXPENSE_RECURRING_ID = "recurring_expense_id"

# Weight
DATA_WEIGHT_VALUE = "weight"

# Grooming
DATA_GROOMING_SERVICE_TYPE = "service_type"
DATA_GROOMING_NEXT_DATE = "next_grooming_date"
DATA_GROOMING_GROOMER_NAME = "groomer_name"
DATA_GROOMING_GROOMER_PHONE = "groomer_phone"
DATA_GROOMING_GROOMER_EMAIL = "groomer_email"
DATA_GROOMING_COST = "cost"

# Activity
DATA_ACTIVITY_TYPE = "type"
DATA_ACTIVITY_TIME = "time"
DATA_ACTIVITY_DURATION = "duration"
DATA_ACTIVITY_MOOD = "mood"
DATA_ACTIVITY_BEHAVIOR_NOTES = "behavior_notes"

# Insurance
DATA_INSURANCE_PROVIDER_NAME = "provider_name"
DATA_INSURANCE_POLICY_NUMBER = "policy_number"
DATA_INSURANCE_START_DATE = "start_date"
DATA_INSURANCE_RENEWAL_DATE = "renewal_date"
DATA_INSURANCE_MONTHLY_PREMIUM = "monthly_premium"
DATA_INSURANCE_COVERAGE_DETAILS = "coverage_details"

# Insurance claim
DATA_CLAIM_INSURANCE_ID = "insurance_id"
DATA_CLAIM_NUMBER = "claim_number"
DATA_CLAIM_AMOUNT = "amount"
DATA_CLAIM_STATUS = "status"

# Medical record
DATA_MEDICAL_TYPE = "type"
DATA_MEDICAL_TITLE = "title"
DATA_MEDICAL_VET_ID = "vet_id"

# Vet
DATA_VET_NAME = "name"
DATA_VET_CLINIC_NAME = "clinic_name"
DATA_VET_PHONE = "phone"
DATA_VET_EMAIL = "email"
DATA_VET_ADDRESS = "address"

# Recurring expense
DATA_RECURRING_CATEGORY = "category"
DATA_RECURRING_AMOUNT = "amount"
DATA_RECURRING_FREQUENCY = "frequency"
DATA_RECURRING_START_DATE = "start_date"
DATA_RECURRING_END_DATE = "end_date"
DATA_RECURRING_NEXT_DUE_DATE = "next_due_date"
DATA_RECURRING_IS_ACTIVE = "is_active"
DATA_RECURRING_VENDOR = "vendor"

# ------------------------------------------------------------------------------------------------
# Enumerations
# ------------------------------------------------------------------------------------------------
SPECIES_DOG = "dog"
SPECIES_CAT = "cat"
SPECIES_BIRD = "bird"
SPECIES_RABBIT = "rabbit"
SPECIES_OTHER = "other"
PET_SPECIES = [SPECIES_DOG, SPECIES_CAT, SPECIES_BIRD, SPECIES_RABBIT, SPECIES_OTHER]

SEX_MALE = "male"
SEX_FEMALE = "female"
SEX_UNKNOWN = "unknown"
PET_SEXES = [SEX_MALE, SEX_FEMALE, SEX_UNKNOWN]

VACCINE_STATUS_UPCOMING = "upcoming"
VACCINE_STATUS_OVERDUE = "overdue"
VACCINE_STATUS_COMPLETED = "completed"

REMINDER_STATUS_PAST = "past"
REMINDER_STATUS_TODAY = "today"
REMINDER_STATUS_UPCOMING = "upcoming"

REMINDER_TYPE_VET_VISIT = "vet_visit"
REMINDER_TYPE_MEDICINE = "medicine"
REMINDER_TYPE_GROOMING = "grooming"
REMINDER_TYPE_CUSTOM = "custom"
REMINDER_TYPES = [
    REMINDER_TYPE_VET_VISIT,
    REMINDER_TYPE_MEDICINE,
    REMINDER_TYPE_GROOMING,
    REMINDER_TYPE_CUSTOM,
]

REPEAT_NONE = "none"
REPEAT_WEEKLY = "weekly"
REPEAT_MONTHLY = "monthly"
REPEAT_OPTIONS = [REPEAT_NONE, REPEAT_WEEKLY, REPEAT_MONTHLY]

# Bounded series length per repeat policy
MAX_OCCURRENCES = {
    REPEAT_WEEKLY: 52,
    REPEAT_MONTHLY: 12,
}

EXPENSE_CATEGORIES = ["vet", "food", "grooming", "toys", "medicine", "other"]

RECURRING_FREQUENCY_WEEKLY = "weekly"
RECURRING_FREQUENCY_MONTHLY = "monthly"
RECURRING_FREQUENCY_YEARLY = "yearly"
RECURRING_FREQUENCIES = [
    RECURRING_FREQUENCY_WEEKLY,
    RECURRING_FREQUENCY_MONTHLY,
    RECURRING_FREQUENCY_YEARLY,
]

GROOMING_SERVICE_TYPES = [
    "full_groom",
    "bath",
    "nail_trim",
    "haircut",
    "teeth_cleaning",
    "other",
]
ACTIVITY_TYPES = ["exercise", "play", "feeding", "training", "social", "other"]
MOOD_TYPES = ["happy", "calm", "energetic", "anxious", "sick", "tired", "other"]
MEDICAL_RECORD_TYPES = ["vet_visit", "medication", "lab_result", "surgery", "condition"]
CLAIM_STATUSES = ["pending", "approved", "rejected", "paid"]

# Health dashboard scoring
HEALTH_SCORE_MAX = 100
HEALTH_SCORE_OVERDUE_PENALTY = 20
HEALTH_SCORE_UPCOMING_PENALTY = 5
HEALTH_STATUS_EXCELLENT = "excellent"
HEALTH_STATUS_GOOD = "good"
HEALTH_STATUS_FAIR = "fair"
HEALTH_STATUS_POOR = "poor"
HEALTH_STATUS_THRESHOLDS = [
    (90, HEALTH_STATUS_EXCELLENT),
    (70, HEALTH_STATUS_GOOD),
    (50, HEALTH_STATUS_FAIR),
]

# Trailing window for average monthly spend
STATS_TRAILING_MONTHS = 12
STATS_FULL_COMPLIANCE = 100.0

# ------------------------------------------------------------------------------------------------
# Notifications
# ------------------------------------------------------------------------------------------------
NOTIFY_DOMAIN = "notify"
NOTIFY_TITLE = "title"
NOTIFY_MESSAGE = "message"
NOTIFY_DATA = "data"
NOTIFY_TAG = "tag"
NOTIFY_TAG_PREFIX = "petcare"

NOTIFY_DATA_REMINDER_ID = "reminder_id"
NOTIFY_DATA_PET_ID = "pet_id"
NOTIFY_DATA_OCCURRENCE = "occurrence"
NOTIFY_DATA_CATEGORY = "category"

NOTIFICATION_CATEGORY_REMINDER = "reminder"
NOTIFICATION_CATEGORY_VACCINE = "vaccine"
NOTIFICATION_CATEGORY_HEALTH = "health"
NOTIFICATION_CATEGORY_EXPENSE = "expense"
NOTIFICATION_CATEGORY_GENERAL = "general"
NOTIFICATION_CATEGORIES = [
    NOTIFICATION_CATEGORY_REMINDER,
    NOTIFICATION_CATEGORY_VACCINE,
    NOTIFICATION_CATEGORY_HEALTH,
    NOTIFICATION_CATEGORY_EXPENSE,
    NOTIFICATION_CATEGORY_GENERAL,
]

# ------------------------------------------------------------------------------------------------
# Signals (instance-scoped via managers.base_manager)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_PET_UPDATED = "pet_updated"
SIGNAL_SUFFIX_PET_DELETED = "pet_deleted"
SIGNAL_SUFFIX_REMINDER_UPDATED = "reminder_updated"
SIGNAL_SUFFIX_REMINDER_DELETED = "reminder_deleted"
SIGNAL_SUFFIX_RECORD_UPDATED = "record_updated"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_ADD_PET = "add_pet"
SERVICE_UPDATE_PET = "update_pet"
SERVICE_DELETE_PET = "delete_pet"
SERVICE_ADD_VACCINE = "add_vaccine"
SERVICE_UPDATE_VACCINE = "update_vaccine"
SERVICE_DELETE_VACCINE = "delete_vaccine"
SERVICE_ADD_REMINDER = "add_reminder"
SERVICE_UPDATE_REMINDER = "update_reminder"
SERVICE_DELETE_REMINDER = "delete_reminder"
SERVICE_ADD_EXPENSE = "add_expense"
SERVICE_DELETE_EXPENSE = "delete_expense"
SERVICE_ADD_WEIGHT = "add_weight"
SERVICE_DELETE_WEIGHT = "delete_weight"
SERVICE_ADD_RECORD = "add_record"
SERVICE_UPDATE_RECORD = "update_record"
SERVICE_DELETE_RECORD = "delete_record"
SERVICE_PURGE_ORPHANS = "purge_orphans"
SERVICE_GET_PET_STATISTICS = "get_pet_statistics"
SERVICE_GET_OVERALL_STATISTICS = "get_overall_statistics"
SERVICE_GET_HEALTH_DASHBOARD = "get_health_dashboard"
SERVICE_GET_EXPENSE_SUMMARY = "get_expense_summary"

SERVICES = [
    SERVICE_ADD_PET,
    SERVICE_UPDATE_PET,
    SERVICE_DELETE_PET,
    SERVICE_ADD_VACCINE,
    SERVICE_UPDATE_VACCINE,
    SERVICE_DELETE_VACCINE,
    SERVICE_ADD_REMINDER,
    SERVICE_UPDATE_REMINDER,
    SERVICE_DELETE_REMINDER,
    SERVICE_ADD_EXPENSE,
    SERVICE_DELETE_EXPENSE,
    SERVICE_ADD_WEIGHT,
    SERVICE_DELETE_WEIGHT,
    SERVICE_ADD_RECORD,
    SERVICE_UPDATE_RECORD,
    SERVICE_DELETE_RECORD,
    SERVICE_PURGE_ORPHANS,
    SERVICE_GET_PET_STATISTICS,
    SERVICE_GET_OVERALL_STATISTICS,
    SERVICE_GET_HEALTH_DASHBOARD,
    SERVICE_GET_EXPENSE_SUMMARY,
]

# Service fields
FIELD_PET_ID = "pet_id"
FIELD_RECORD_ID = "record_id"
FIELD_RECORD_TYPE = "record_type"
FIELD_DATA = "data"

# Ancillary collections accepted by add_record / delete_record
RECORD_TYPES = [
    COLLECTION_GROOMING,
    COLLECTION_ACTIVITIES,
    COLLECTION_INSURANCE,
    COLLECTION_INSURANCE_CLAIMS,
    COLLECTION_MEDICAL_RECORDS,
    COLLECTION_VETS,
    COLLECTION_RECURRING_EXPENSES,
]

# ------------------------------------------------------------------------------------------------
# Translation keys (errors)
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_NOT_FOUND = "not_found"
TRANS_KEY_ERROR_STORAGE = "storage_failed"
TRANS_KEY_ERROR_CASCADE = "cascade_failed"
TRANS_KEY_ERROR_UNKNOWN_PET = "unknown_pet"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_NOT_LOADED = "not_loaded"

LABEL_PET = "pet"
LABEL_VACCINE = "vaccine"
LABEL_REMINDER = "reminder"
LABEL_EXPENSE = "expense"
LABEL_WEIGHT = "weight"
LABEL_RECORD = "record"

# ------------------------------------------------------------------------------------------------
# Config / Options Flow
# ------------------------------------------------------------------------------------------------
CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

TRANS_KEY_CFOF_INVALID_TIME = "invalid_time"
TRANS_KEY_CFOF_CATEGORIES = "notification_categories"
