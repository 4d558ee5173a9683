"""Shared Pydantic data models for sevalink."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class Language(str, Enum):
    ENGLISH = "en"
    HINDI = "hi"
    TELUGU = "te"
    AUTO = "auto"


class InputMethod(str, Enum):
    TEXT = "text"
    VOICE = "voice"


class Category(str, Enum):
    BLOOD_REQUEST = "blood_request"
    ELDER_SUPPORT = "elder_support"
    COMPLAINT = "complaint"
    EMERGENCY = "emergency"
    GENERAL_INQUIRY = "general_inquiry"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class RequestType(str, Enum):
    BLOOD = "blood"
    ELDER_SUPPORT = "elder_support"
    COMPLAINT = "complaint"


class ComplaintCategory(str, Enum):
    ROAD_MAINTENANCE = "Road Maintenance"
    WATER_SUPPLY = "Water Supply"
    SANITATION = "Sanitation"
    ELECTRICITY = "Electricity"
    WASTE_MANAGEMENT = "Waste Management"
    PUBLIC_SAFETY = "Public Safety"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    TRANSPORTATION = "Transportation"
    OTHER = "Other"


class ServiceType(str, Enum):
    MEDICINE_DELIVERY = "Medicine Delivery"
    GROCERY_SHOPPING = "Grocery Shopping"
    MEDICAL_APPOINTMENT = "Medical Appointment"
    HOUSEHOLD_HELP = "Household Help"
    COMPANIONSHIP = "Companionship"
    OTHER = "Other"


class AuditEventType(str, Enum):
    MESSAGE_CLASSIFIED = "message_classified"
    UPSTREAM_FALLBACK = "upstream_fallback"
    QUOTA_TRIPPED = "quota_tripped"
    QUOTA_RESET = "quota_reset"
    RATE_LIMITED = "rate_limited"
    REQUEST_CREATED = "request_created"
    PERSISTENCE_FAILED = "persistence_failed"


# Sentinel stored when no blood group could be read from the message.
UNSPECIFIED_BLOOD_TYPE = "unspecified"

BLOOD_TYPES = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")

REQUEST_CATEGORIES = frozenset({
    Category.BLOOD_REQUEST,
    Category.ELDER_SUPPORT,
    Category.COMPLAINT,
})


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


# --- Pipeline Models ---


class InboundMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    language: Language = Language.AUTO
    input_method: InputMethod = InputMethod.TEXT
    user_id: str
    message_id: str = Field(default_factory=_new_id)
    received_at: str = Field(default_factory=_now_iso)


class ClassificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: Category
    priority: Priority
    reply: str
    using_fallback: bool
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class ExtractedEntities(BaseModel):
    model_config = ConfigDict(frozen=True)

    blood_type: str | None = None
    location_hint: str | None = None
    complaint_category: ComplaintCategory | None = None
    service_type: ServiceType | None = None


class RequestLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = "manual"
    address: str
    city: str
    state: str
    pincode: str
    country: str = "India"
    lat: float
    lng: float


class SynthesizedRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    type: RequestType
    title: str = Field(max_length=200)
    description: str
    priority: Priority
    user_id: str
    source: str  # "text_chat" or "voice_chat"
    source_message_id: str
    location: RequestLocation
    location_hint: str | None = None
    english_text: str
    status: str = "pending"
    created_at: str = Field(default_factory=_now_iso)
    # Blood
    blood_type: str | None = None
    urgency_level: Priority | None = None
    units_needed: int | None = None
    hospital_name: str | None = None
    # Elder support
    service_type: ServiceType | None = None
    due_date: str | None = None
    # Complaint
    complaint_category: ComplaintCategory | None = None
    severity: str | None = None
    voice_data: dict[str, object] | None = None


class ChatRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    message: str
    reply: str
    category: Category
    priority: Priority
    language: Language
    input_method: InputMethod
    using_fallback: bool
    request_id: str | None = None
    created_at: str = Field(default_factory=_now_iso)


class QuotaState(BaseModel):
    """Snapshot of the upstream quota breaker."""

    model_config = ConfigDict(frozen=True)

    exceeded: bool
    exceeded_at: float | None = None
    reset_at: float | None = None
    seconds_until_reset: float | None = None


# --- Audit Models ---


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    user_id: str | None = None
    action: str
    result: str  # "success" | "failure" | "fallback" | "blocked"
    details: dict[str, object] | None = None
