"""Script and lexicon based language detection for en/hi/te input."""

from __future__ import annotations

import re

from sevalink.models import Language

_DEVANAGARI = (0x0900, 0x097F)
_TELUGU = (0x0C00, 0x0C7F)

# Common transliterations seen in Romanized chat input.
_ROMANIZED_TELUGU = re.compile(
    r"\b(raktham|rakthamu|kavali|kaavali|avasaram|athyavasaram|thvaraga|tvaraga"
    r"|naaku|naku|dayachesi|neeru|neellu|chetta|ledu|undi|ekkada)\b",
    re.IGNORECASE,
)
_ROMANIZED_HINDI = re.compile(
    r"\b(khoon|rakt|chahiye|chaiye|aavashyak|turant|aapatkaal|jaldi|madad"
    r"|mujhe|kripya|bijli|paani|sadak|kachra|dawai|nahi|hai)\b",
    re.IGNORECASE,
)


def _script_counts(text: str) -> tuple[int, int]:
    hindi = telugu = 0
    for ch in text:
        code = ord(ch)
        if _DEVANAGARI[0] <= code <= _DEVANAGARI[1]:
            hindi += 1
        elif _TELUGU[0] <= code <= _TELUGU[1]:
            telugu += 1
    return hindi, telugu


def detect(text: str) -> Language:
    """Guess the language of *text*; never raises and never returns AUTO."""
    if not text:
        return Language.ENGLISH

    hindi, telugu = _script_counts(text)
    if hindi or telugu:
        return Language.TELUGU if telugu > hindi else Language.HINDI

    if _ROMANIZED_TELUGU.search(text):
        return Language.TELUGU
    if _ROMANIZED_HINDI.search(text):
        return Language.HINDI
    return Language.ENGLISH


def resolve(language: Language | str | None, text: str) -> Language:
    """Return a concrete language, detecting from *text* for auto/missing."""
    if language is None:
        return detect(text)
    try:
        lang = Language(language)
    except ValueError:
        return detect(text)
    if lang == Language.AUTO:
        return detect(text)
    return lang
