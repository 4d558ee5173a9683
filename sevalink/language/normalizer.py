"""Best-effort Hindi/Telugu to English word substitution.

Applied before storing descriptions so downstream consumers see
English-normalized text. This is a fixed dictionary pass, not a translator:
unknown words are kept as-is.
"""

from __future__ import annotations

import re

_INDIC_SCRIPT = re.compile(r"[\u0900-\u097F\u0C00-\u0C7F]")

HINDI_TO_ENGLISH: dict[str, str] = {
    # Blood groups
    "एबी पॉजिटिव": "AB positive",
    "एबी नेगेटिव": "AB negative",
    "ए पॉजिटिव": "A positive",
    "ए नेगेटिव": "A negative",
    "बी पॉजिटिव": "B positive",
    "बी नेगेटिव": "B negative",
    "ओ पॉजिटिव": "O positive",
    "ओ नेगेटिव": "O negative",
    # Services
    "रक्तदान": "blood donation",
    "रक्त": "blood",
    "खून": "blood",
    "चाहिए": "need",
    "आवश्यक": "need",
    "जरूरत": "need",
    "तुरंत": "urgent",
    "तत्काल": "urgent",
    "आपातकाल": "emergency",
    "बुजुर्ग": "elderly",
    "दवाई": "medicine",
    "दवा": "medicine",
    "किराना": "grocery",
    "देखभाल": "care",
    "शिकायत": "complaint",
    "समस्या": "problem",
    "सड़क": "road",
    "बत्ती": "light",
    "लाइट": "light",
    "पानी": "water",
    "बिजली": "electricity",
    "कचरा": "garbage",
    "अस्पताल": "hospital",
    "मरीज": "patient",
    "रोगी": "patient",
    "सर्जरी": "surgery",
    "ऑपरेशन": "surgery",
    "मदद": "help",
    "सहायता": "assistance",
}

TELUGU_TO_ENGLISH: dict[str, str] = {
    "ఎబి పాజిటివ్": "AB positive",
    "ఎబి నెగటివ్": "AB negative",
    "ఎ పాజిటివ్": "A positive",
    "ఎ నెగటివ్": "A negative",
    "బి పాజిటివ్": "B positive",
    "బి నెగటివ్": "B negative",
    "ఓ పాజిటివ్": "O positive",
    "ఓ నెగటివ్": "O negative",
    "రక్తదానం": "blood donation",
    "రక్తం": "blood",
    "కావాలి": "need",
    "అవసరం": "need",
    "అత్యవసరం": "urgent",
    "తక్షణం": "urgent",
    "వృద్ధులు": "elderly",
    "పెద్దలు": "elderly",
    "మందులు": "medicine",
    "మందు": "medicine",
    "కిరాణా": "grocery",
    "సంరక్షణ": "care",
    "ఫిర్యాదు": "complaint",
    "సమస్య": "problem",
    "రోడ్డు": "road",
    "లైట్": "light",
    "నీరు": "water",
    "కరెంట్": "electricity",
    "చెత్త": "garbage",
    "ఆసుపత్రి": "hospital",
    "రోగి": "patient",
    "శస్త్రచికిత్స": "surgery",
    "సహాయం": "help",
}


def _compile(dictionary: dict[str, str]) -> list[tuple[re.Pattern[str], str]]:
    # Longest phrases first so "रक्तदान" is not split by "रक्त".
    ordered = sorted(dictionary.items(), key=lambda kv: len(kv[0]), reverse=True)
    return [(re.compile(re.escape(src)), dst) for src, dst in ordered]


_SUBSTITUTIONS = _compile(HINDI_TO_ENGLISH) + _compile(TELUGU_TO_ENGLISH)


def has_indic_script(text: str) -> bool:
    return bool(_INDIC_SCRIPT.search(text))


def to_english(text: str) -> str:
    """Replace known Hindi/Telugu terms with English equivalents."""
    if not has_indic_script(text):
        return text
    translated = text
    for pattern, replacement in _SUBSTITUTIONS:
        translated = pattern.sub(replacement, translated)
    return translated
