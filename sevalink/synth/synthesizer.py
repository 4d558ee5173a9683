"""Response synthesizer: localized replies and request titles/descriptions."""

from __future__ import annotations

import math
import operator
import re
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from sevalink.models import (
    Category,
    ComplaintCategory,
    ExtractedEntities,
    Language,
    Priority,
    REQUEST_CATEGORIES,
    ServiceType,
)
from sevalink.synth import templates

_MAX_TITLE_CHARS = 200

_ARITHMETIC = re.compile(
    r"^\s*(-?\d+(?:\.\d+)?)\s*([-+*/])\s*(-?\d+(?:\.\d+)?)\s*[=?]?\s*$"
)
_OPERATORS: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}
_GREETING = re.compile(
    r"^(hi|hello|hey|good (morning|afternoon|evening)|namaste|namaskar"
    r"|नमस्ते|नमस्कार|నమస్కారం|నమస్తే|హలో)[\s!.]*$",
    re.IGNORECASE,
)
_THANKS = re.compile(r"thank|thanks|धन्यवाद|शुक्रिया|ధన్యవాదాలు", re.IGNORECASE)
_CAPABILITIES = re.compile(
    r"what can you do|how can you help|who are you|what do you do|your services",
    re.IGNORECASE,
)
_HEALTH = re.compile(
    r"fever|temperature|cold|cough|headache|sick|illness|disease|symptoms", re.IGNORECASE
)
_FEVER = re.compile(r"fever", re.IGNORECASE)

_ELDER_KINDS = {
    ServiceType.MEDICINE_DELIVERY: "Medicine delivery needed",
    ServiceType.GROCERY_SHOPPING: "Grocery help needed",
    ServiceType.MEDICAL_APPOINTMENT: "Medical appointment help",
    ServiceType.HOUSEHOLD_HELP: "Household help needed",
    ServiceType.COMPANIONSHIP: "Companionship needed",
    ServiceType.OTHER: "Elder support needed",
}

# Checked in order; first hit overrides the per-category title.
_COMPLAINT_TITLES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"street\s*lights?", re.IGNORECASE), "Street lights not working"),
    (re.compile(r"pothole|holes?\s+in\s+(the\s+)?road", re.IGNORECASE), "Potholes on road"),
    (re.compile(r"garbage|trash|waste", re.IGNORECASE), "Garbage accumulation issue"),
    (re.compile(r"water\s*leak|no\s*water", re.IGNORECASE), "Water supply problem"),
    (
        re.compile(r"power\s*cut|electricity\s*outage|transformer", re.IGNORECASE),
        "Electricity outage issue",
    ),
]
_COMPLAINT_BASE_TITLES = {
    ComplaintCategory.ROAD_MAINTENANCE: "Road maintenance issue",
    ComplaintCategory.WATER_SUPPLY: "Water supply issue",
    ComplaintCategory.SANITATION: "Sanitation issue",
    ComplaintCategory.ELECTRICITY: "Electricity issue",
    ComplaintCategory.WASTE_MANAGEMENT: "Waste management issue",
    ComplaintCategory.PUBLIC_SAFETY: "Public safety issue",
    ComplaintCategory.HEALTHCARE: "Healthcare issue",
    ComplaintCategory.EDUCATION: "Education issue",
    ComplaintCategory.TRANSPORTATION: "Transportation issue",
    ComplaintCategory.OTHER: "Community issue",
}


class Synthesis(BaseModel):
    model_config = ConfigDict(frozen=True)

    reply: str
    title: str | None = None
    description: str | None = None


def _localized(table: dict[Language, str], language: Language) -> str:
    return table.get(language) or table[Language.ENGLISH]


def priority_label(priority: Priority, language: Language) -> str:
    labels = templates.PRIORITY_LABELS.get(language, templates.PRIORITY_LABELS[Language.ENGLISH])
    return labels[priority]


def _format_number(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return f"{value:.6g}"


def answer_arithmetic(text: str) -> str | None:
    """Answer ``"a op b"`` questions without evaluating arbitrary input."""
    match = _ARITHMETIC.match(text)
    if not match:
        return None
    left, op, right = match.groups()
    try:
        result = _OPERATORS[op](float(left), float(right))
    except (ZeroDivisionError, OverflowError):
        return templates.MATH_UNSUPPORTED
    if not math.isfinite(result):
        return templates.MATH_UNSUPPORTED
    return f"{left} {op} {right} = {_format_number(result)}"


def general_reply(text: str, language: Language) -> str:
    stripped = text.strip()
    arithmetic = answer_arithmetic(stripped)
    if arithmetic is not None:
        return arithmetic
    if _GREETING.match(stripped):
        return _localized(templates.GREETING, language)
    if _THANKS.search(stripped):
        return _localized(templates.THANKS, language)
    if _CAPABILITIES.search(stripped):
        return _localized(templates.CAPABILITIES, language)
    if _HEALTH.search(stripped):
        caution = _localized(templates.HEALTH_CAUTION, language)
        if _FEVER.search(stripped) and language == Language.ENGLISH:
            return f"{templates.FEVER_INFO} {caution}"
        return caution
    return _localized(templates.REPLIES[Category.GENERAL_INQUIRY], language).format(detail="")


def _detail(
    category: Category,
    priority: Priority,
    language: Language,
    entities: ExtractedEntities,
) -> str:
    if category == Category.BLOOD_REQUEST:
        detail = ""
        if entities.blood_type:
            detail += _localized(templates.BLOOD_TYPE_DETAIL, language).format(
                blood_type=entities.blood_type,
            )
        if priority == Priority.URGENT:
            detail += _localized(templates.URGENT_DETAIL, language)
        return detail
    if category == Category.ELDER_SUPPORT and entities.service_type:
        return templates.SERVICE_DETAIL.get(language, {}).get(entities.service_type, "")
    if category == Category.COMPLAINT and entities.complaint_category:
        if entities.complaint_category == ComplaintCategory.OTHER:
            return ""
        template = templates.COMPLAINT_DETAIL.get(language)
        if template:
            return template.format(complaint_category=entities.complaint_category.value.lower())
    return ""


def compose_reply(
    category: Category,
    priority: Priority,
    language: Language,
    entities: ExtractedEntities,
    text: str = "",
) -> str:
    """Render the reply for *category* in *language*, falling back to English."""
    if category == Category.GENERAL_INQUIRY:
        return general_reply(text, language)
    template = _localized(templates.REPLIES[category], language)
    return template.format(
        detail=_detail(category, priority, language, entities),
        priority=priority_label(priority, language),
    )


def _truncate_title(title: str) -> str:
    if len(title) <= _MAX_TITLE_CHARS:
        return title
    return title[: _MAX_TITLE_CHARS - 3].rstrip() + "..."


def title_and_description(
    category: Category,
    priority: Priority,
    entities: ExtractedEntities,
    english_text: str,
) -> tuple[str, str] | None:
    """Build the request card title and description; None for non-request categories."""
    if category not in REQUEST_CATEGORIES:
        return None
    location = entities.location_hint
    priority_tag = priority.value.upper()

    if category == Category.BLOOD_REQUEST:
        blood = f"{entities.blood_type} blood" if entities.blood_type else "blood"
        where = f" in {location}" if location else ""
        urgent = " (URGENT)" if priority == Priority.URGENT else ""
        title = f"Need {blood}{where}{urgent}"
        description = f"Request for {blood}{where}. Priority: {priority_tag}."
    elif category == Category.ELDER_SUPPORT:
        kind = _ELDER_KINDS[entities.service_type or ServiceType.OTHER]
        title = f"{kind} - {location}" if location else kind
        where = f" in {location}" if location else ""
        description = f"Elder support request: {kind}{where}. Priority: {priority_tag}."
    else:
        complaint = entities.complaint_category or ComplaintCategory.OTHER
        title = _COMPLAINT_BASE_TITLES[complaint]
        for pattern, canned in _COMPLAINT_TITLES:
            if pattern.search(english_text):
                title = canned
                break
        if location:
            title = f"{title} - {location}"
        description = f"{title}. Category: {complaint.value}."

    return _truncate_title(title), description


def synthesize(
    category: Category,
    priority: Priority,
    language: Language,
    entities: ExtractedEntities,
    text: str = "",
    english_text: str | None = None,
) -> Synthesis:
    reply = compose_reply(category, priority, language, entities, text)
    card = title_and_description(category, priority, entities, english_text or text)
    if card is None:
        return Synthesis(reply=reply)
    title, description = card
    return Synthesis(reply=reply, title=title, description=description)
