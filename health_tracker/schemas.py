"""
Defines Pydantic schemas for API data validation and serialization.

These models act as the data contract for the API. Python code works with
snake_case attributes while the JSON on the wire is camelCase
(``timeBlock``, ``scheduledTimeBlock``, ``healthProfileStatus``...).
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, accepts either spelling on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        use_enum_values = True
        validate_default = True


# --- Enums ---
class TimeBlock(str, Enum):
    """Coarse parts of the day used to group pill scheduling."""
    MORNING = "morning"
    MIDDAY = "midday"
    EVENING = "evening"
    BEDTIME = "bedtime"


class FoodRule(str, Enum):
    WITH_FOOD = "with_food"
    EMPTY_STOMACH = "empty_stomach"
    EITHER = "either"


class PillType(str, Enum):
    MEDICATION = "medication"
    SUPPLEMENT = "supplement"


class ReminderType(str, Enum):
    MEDICATION = "medication"
    SUPPLEMENT = "supplement"
    ACTIVITY = "activity"


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


# --- Schemas for Lab Results ---
class LabResultCreate(CamelModel):
    """Submits lab report text directly instead of uploading a file."""
    file_name: str = Field(..., min_length=1)
    raw_text: str


class LabResultUpdate(CamelModel):
    """Only the file name of a lab result may change after upload."""
    file_name: Optional[str] = Field(None, min_length=1)


class LabResult(CamelModel):
    id: int
    file_name: str
    upload_date: dt.datetime
    raw_text: Optional[str] = None
    status: str


class HealthMarker(CamelModel):
    id: int
    lab_result_id: Optional[int] = None
    name: str
    value: Optional[Decimal] = None
    unit: Optional[str] = None
    normal_min: Optional[Decimal] = None
    normal_max: Optional[Decimal] = None
    status: str
    category: str


class Recommendation(CamelModel):
    id: int
    lab_result_id: Optional[int] = None
    type: str
    title: str
    description: str
    priority: str
    related_marker: Optional[str] = None
    action_items: Optional[List[str]] = []
    created_at: dt.datetime


class LabResultDetail(LabResult):
    """A lab result together with everything extracted from it."""
    markers: List[HealthMarker] = []
    recommendations: List[Recommendation] = []


# --- Schemas for Medications and Supplements ---
class SeparationRule(CamelModel):
    """Minimum time gap required between this pill and another one."""
    pill_id: int
    pill_type: PillType
    pill_name: str
    minutes_apart: int = Field(..., ge=0)
    reason: str


class PillBase(CamelModel):
    """Fields shared by medications and supplements."""
    name: str = Field(..., min_length=1)
    dosage: str
    frequency: str
    time_of_day: Optional[str] = None
    with_food: bool = False
    time_block: Optional[TimeBlock] = TimeBlock.MORNING
    scheduled_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    food_rule: FoodRule = FoodRule.EITHER
    separation_rules: List[SeparationRule] = []
    allowed_together_with: List[int] = []
    user_override: bool = False
    stack_id: Optional[int] = None
    why_taking: Optional[str] = None
    active: bool = True


class PillUpdate(CamelModel):
    """Partial update for a medication or supplement; only sent fields change. Null never clears a flag."""
    name: Optional[str] = Field(None, min_length=1)
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    time_of_day: Optional[str] = None
    with_food: Optional[bool] = None
    time_block: Optional[TimeBlock] = None
    scheduled_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    food_rule: Optional[FoodRule] = None
    separation_rules: Optional[List[SeparationRule]] = None
    allowed_together_with: Optional[List[int]] = None
    user_override: Optional[bool] = None
    stack_id: Optional[int] = None
    why_taking: Optional[str] = None
    active: Optional[bool] = None


class MedicationCreate(PillBase):
    notes: Optional[str] = None


class MedicationUpdate(PillUpdate):
    notes: Optional[str] = None


class Medication(MedicationCreate):
    id: int
    created_at: dt.datetime


class SupplementCreate(PillBase):
    reason: Optional[str] = None
    source: Optional[str] = None


class SupplementUpdate(PillUpdate):
    reason: Optional[str] = None
    source: Optional[str] = None


class Supplement(SupplementCreate):
    id: int
    created_at: dt.datetime


# --- Schemas for Pill Stacks ---
class PillStackCreate(CamelModel):
    name: str = Field(..., min_length=1)
    time_block: TimeBlock
    scheduled_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    description: Optional[str] = None


class PillStackUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    time_block: Optional[TimeBlock] = None
    scheduled_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    description: Optional[str] = None


class PillStack(PillStackCreate):
    id: int
    created_at: dt.datetime


# --- Schemas for Pill Doses ---
class PillDoseCreate(CamelModel):
    pill_type: PillType
    pill_id: int
    scheduled_date: dt.date
    scheduled_time_block: TimeBlock
    status: str = "pending"
    taken_at: Optional[dt.datetime] = None
    snoozed_until: Optional[dt.datetime] = None


class PillDoseUpdate(CamelModel):
    """
    Status change for a dose. The status is free-form: pending, taken,
    skipped and snoozed are the values the client uses.
    """
    status: Optional[str] = None
    taken_at: Optional[dt.datetime] = None
    snoozed_until: Optional[dt.datetime] = None


class PillDose(PillDoseCreate):
    id: int
    created_at: dt.datetime


class GenerateDosesRequest(CamelModel):
    scheduled_date: Optional[dt.date] = Field(None, alias="date")


# --- Schemas for Interactions ---
class Interaction(CamelModel):
    id: int
    medication_id: Optional[int] = None
    supplement_id: Optional[int] = None
    severity: str
    description: str
    recommendation: str
    separation_minutes: Optional[int] = None
    created_at: dt.datetime


# --- Schemas for Reminders ---
class ReminderCreate(CamelModel):
    title: str = Field(..., min_length=1)
    time: str = Field(..., pattern=HHMM_PATTERN)
    days: List[Weekday] = []
    type: ReminderType
    related_id: Optional[int] = None
    enabled: bool = True


class ReminderUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    days: Optional[List[Weekday]] = None
    type: Optional[ReminderType] = None
    related_id: Optional[int] = None
    enabled: Optional[bool] = None


class Reminder(ReminderCreate):
    id: int
    created_at: dt.datetime


# --- Schemas for Users and the Health Profile ---
class UserCreate(CamelModel):
    """Schema for validating new user registration data."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class HealthProfile(CamelModel):
    """
    Optional personal details. Used both as the PATCH body (every field
    independently optional) and as the response representation.
    """
    age: Optional[int] = Field(None, ge=1, le=150)
    sex: Optional[Sex] = None
    height_cm: Optional[float] = Field(None, ge=50, le=300)
    weight_kg: Optional[float] = Field(None, ge=10, le=500)
    allergies: Optional[List[str]] = None
    conditions: Optional[List[str]] = None
    current_medications: Optional[List[str]] = None
    activity_level: Optional[ActivityLevel] = None


class HealthProfileStatus(CamelModel):
    is_complete: bool = False
    skipped_at: Optional[dt.datetime] = None
    last_updated: Optional[dt.datetime] = None


class UserResponse(CamelModel):
    """Schema for formatting user data in API responses (excludes the password)."""
    id: int
    username: str
    health_profile: HealthProfile = Field(default_factory=HealthProfile)
    health_profile_status: HealthProfileStatus = Field(default_factory=HealthProfileStatus)
    show_onboarding: bool = False


class HealthProfileResponse(CamelModel):
    health_profile: HealthProfile
    health_profile_status: HealthProfileStatus


class HealthProfileStatusResponse(CamelModel):
    health_profile_status: HealthProfileStatus


# --- Schemas for Notifications ---
class SnoozeRequest(CamelModel):
    time_block: TimeBlock


class SnoozeResponse(CamelModel):
    """The re-armed pill notification and when it will fire again."""
    time_block: TimeBlock
    due_at: dt.datetime
    title: str
    body: str
