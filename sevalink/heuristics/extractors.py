"""Entity extractors for blood type, location hints and request sub-types."""

from __future__ import annotations

import re

from sevalink.models import ComplaintCategory, ServiceType

# --- Blood type ---

_LATIN_BLOOD = re.compile(
    r"(?<![a-z])(ab|a|b|o)\s*"
    r"(positive|negative|pos|neg|\+\s*ve|-\s*ve|\+|-|−)"
    r"(?![a-z0-9])",
    re.IGNORECASE,
)
_HINDI_BLOOD = re.compile(r"(एबी|ए|बी|ओ)\s*(पॉजिटिव|पॉज़िटिव|नेगेटिव|\+|-)")
_TELUGU_BLOOD = re.compile(r"(ఎబి|ఏబీ|ఎ|ఏ|బి|బీ|ఓ|ఒ)\s*(పాజిటివ్|నెగటివ్|నెగెటివ్|\+|-)")

_HINDI_GROUPS = {"एबी": "AB", "ए": "A", "बी": "B", "ओ": "O"}
_TELUGU_GROUPS = {
    "ఎబి": "AB", "ఏబీ": "AB",
    "ఎ": "A", "ఏ": "A",
    "బి": "B", "బీ": "B",
    "ఓ": "O", "ఒ": "O",
}
_POSITIVE_TOKENS = {"positive", "pos", "+", "+ve", "पॉजिटिव", "पॉज़िटिव", "పాజిటివ్"}


def _rh_sign(token: str) -> str:
    normalized = re.sub(r"\s+", "", token.lower())
    return "+" if normalized in _POSITIVE_TOKENS else "-"


def extract_blood_type(text: str) -> str | None:
    """Return the canonical blood group ("O+", "AB-", ...) or None.

    Never guesses: if no pattern matches the caller gets None.
    """
    if not text:
        return None
    for pattern, groups in (
        (_LATIN_BLOOD, None),
        (_HINDI_BLOOD, _HINDI_GROUPS),
        (_TELUGU_BLOOD, _TELUGU_GROUPS),
    ):
        match = pattern.search(text)
        if match:
            group = match.group(1)
            letter = group.upper() if groups is None else groups[group]
            return letter + _rh_sign(match.group(2))
    return None


# --- Location hint ---

_MAX_LOCATION_CHARS = 40

_EN_LOCATION = re.compile(r"\b(?:in|at|near)\s+([A-Za-z][A-Za-z\s]{2,60})", re.IGNORECASE)
_HI_LOCATION = re.compile(r"(\S+(?:\s\S+)?)\s+(?:में|के पास|के नज़दीक)")
_TE_LOCATION = re.compile(r"(\S{2,}?)(?:లో|\s+దగ్గర)(?=\s|$|[.,!?])")

# Leading words after "in"/"at"/"near" that do not start a place name.
_ARTICLES = {"a", "an", "the"}
_NON_PLACE_WORDS = {
    "need", "urgent", "urgently", "emergency", "pain", "trouble", "danger", "case",
    "morning", "evening", "night", "time", "once", "all", "moment", "advance", "person",
}


def _names_place(hint: str) -> bool:
    words = hint.lower().split(" ")
    if words[0] in _ARTICLES:
        words = words[1:]
    return bool(words) and words[0] not in _NON_PLACE_WORDS


def extract_location(text: str) -> str | None:
    """Return a rough place phrase, at most 40 characters, or None."""
    if not text:
        return None
    for pattern in (_EN_LOCATION, _HI_LOCATION, _TE_LOCATION):
        match = pattern.search(text)
        if not match:
            continue
        hint = re.sub(r"\s+", " ", match.group(1)).strip()
        if not hint or not _names_place(hint):
            continue
        if len(hint) > _MAX_LOCATION_CHARS:
            cut = hint[:_MAX_LOCATION_CHARS]
            hint = cut.rsplit(" ", 1)[0] if " " in cut else cut
        return hint or None
    return None


# --- Complaint category ---

_COMPLAINT_KEYWORDS: list[tuple[ComplaintCategory, re.Pattern[str]]] = [
    (ComplaintCategory.ROAD_MAINTENANCE,
     re.compile(r"street|light|road|pothole|footpath|sidewalk", re.IGNORECASE)),
    (ComplaintCategory.WATER_SUPPLY,
     re.compile(r"water|drainage|sewage|pipeline", re.IGNORECASE)),
    (ComplaintCategory.SANITATION,
     re.compile(r"sanitation|toilet|cleanliness", re.IGNORECASE)),
    (ComplaintCategory.ELECTRICITY,
     re.compile(r"electricity|power|current|transformer|wire", re.IGNORECASE)),
    (ComplaintCategory.WASTE_MANAGEMENT,
     re.compile(r"garbage|waste|cleaning|trash|dump", re.IGNORECASE)),
    (ComplaintCategory.PUBLIC_SAFETY,
     re.compile(r"safety|theft|crime|harassment|accident|violence|danger", re.IGNORECASE)),
    (ComplaintCategory.HEALTHCARE,
     re.compile(r"hospital|clinic|doctor|medical", re.IGNORECASE)),
    (ComplaintCategory.EDUCATION,
     re.compile(r"school|college|education", re.IGNORECASE)),
    (ComplaintCategory.TRANSPORTATION,
     re.compile(r"\bbus\b|train|transport|traffic", re.IGNORECASE)),
]


def classify_complaint(english_text: str) -> ComplaintCategory:
    """Map English-normalized complaint text to a complaint bucket."""
    for category, pattern in _COMPLAINT_KEYWORDS:
        if pattern.search(english_text):
            return category
    return ComplaintCategory.OTHER


# --- Elder support service ---

_SERVICE_KEYWORDS: list[tuple[ServiceType, re.Pattern[str]]] = [
    (ServiceType.MEDICINE_DELIVERY,
     re.compile(r"medicine|medication|tablet|pills?|paracetamol|prescription", re.IGNORECASE)),
    (ServiceType.GROCERY_SHOPPING,
     re.compile(r"grocery|groceries|vegetable|milk|shopping|food", re.IGNORECASE)),
    (ServiceType.MEDICAL_APPOINTMENT,
     re.compile(r"appointment|hospital|clinic|checkup|check-up", re.IGNORECASE)),
    (ServiceType.HOUSEHOLD_HELP,
     re.compile(r"house|clean|cook|laundry|household", re.IGNORECASE)),
    (ServiceType.COMPANIONSHIP,
     re.compile(r"lonely|alone|company|companion|talk to", re.IGNORECASE)),
]


def classify_service(english_text: str) -> ServiceType:
    """Map English-normalized elder-support text to a service type."""
    for service, pattern in _SERVICE_KEYWORDS:
        if pattern.search(english_text):
            return service
    return ServiceType.OTHER
