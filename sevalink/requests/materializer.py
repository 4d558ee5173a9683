"""Turns a classified message into a service-request record."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sevalink.models import (
    Category,
    ClassificationResult,
    ComplaintCategory,
    ExtractedEntities,
    InboundMessage,
    InputMethod,
    Priority,
    REQUEST_CATEGORIES,
    RequestLocation,
    RequestType,
    ServiceType,
    SynthesizedRequest,
    UNSPECIFIED_BLOOD_TYPE,
)
from sevalink.synth.synthesizer import title_and_description

# Used until the client supplies a real location.
PLACEHOLDER_LOCATION = RequestLocation(
    address="Potti Sriramulu College Road, Vinchipeta",
    city="Vijayawada",
    state="Andhra Pradesh",
    pincode="520001",
    lat=16.523699,
    lng=80.61359225,
)

_REQUEST_TYPES = {
    Category.BLOOD_REQUEST: RequestType.BLOOD,
    Category.ELDER_SUPPORT: RequestType.ELDER_SUPPORT,
    Category.COMPLAINT: RequestType.COMPLAINT,
}


def should_create_request(category: Category) -> bool:
    return category in REQUEST_CATEGORIES


def stored_priority(priority: Priority) -> Priority:
    """Requests are stored as urgent, high or medium only."""
    if priority in (Priority.URGENT, Priority.HIGH):
        return priority
    return Priority.MEDIUM


def build_request(
    message: InboundMessage,
    classification: ClassificationResult,
    entities: ExtractedEntities,
    english_text: str,
    now: datetime | None = None,
) -> SynthesizedRequest | None:
    """Build the request for *message*, or None when the category does not qualify."""
    category = classification.category
    if not should_create_request(category):
        return None

    now = now or datetime.now(UTC)
    priority = stored_priority(classification.priority)
    card = title_and_description(category, priority, entities, english_text)
    if card is None:
        return None
    title, description = card

    fields: dict[str, object] = {}
    if category == Category.BLOOD_REQUEST:
        fields = {
            "blood_type": entities.blood_type or UNSPECIFIED_BLOOD_TYPE,
            "urgency_level": Priority.URGENT if priority == Priority.URGENT else Priority.HIGH,
            "units_needed": 1,
            "hospital_name": "To be specified",
        }
    elif category == Category.ELDER_SUPPORT:
        fields = {
            "service_type": entities.service_type or ServiceType.OTHER,
            "due_date": (now + timedelta(days=1)).isoformat(),
        }
    elif category == Category.COMPLAINT:
        fields = {
            "complaint_category": entities.complaint_category or ComplaintCategory.OTHER,
            "severity": "high" if priority == Priority.URGENT else "medium",
        }

    voice = message.input_method == InputMethod.VOICE
    return SynthesizedRequest(
        type=_REQUEST_TYPES[category],
        title=title,
        description=description,
        priority=priority,
        user_id=message.user_id,
        source="voice_chat" if voice else "text_chat",
        source_message_id=message.message_id,
        location=PLACEHOLDER_LOCATION,
        location_hint=entities.location_hint,
        english_text=english_text,
        created_at=now.isoformat(),
        voice_data={"transcript": message.text, "language": message.language.value} if voice else None,
        **fields,
    )
