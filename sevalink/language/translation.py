"""Optional phrase translation with a remote service and a local dictionary.

The remote service is an enhancement: any failure falls through to the
dictionary, and classification never waits on this module failing.
"""

from __future__ import annotations

import logging
import os
import re

import httpx
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

_GOOGLE_TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"

FALLBACK_DICTIONARIES: dict[str, dict[str, str]] = {
    "hi-en": {
        "शिकायत": "complaint",
        "मदद": "help",
        "सहायता": "assistance",
        "रक्तदान": "blood donation",
        "बुजुर्ग": "elderly",
        "देखभाल": "care",
        "सेवा": "service",
        "सरकार": "government",
        "समस्या": "problem",
        "जरूरत": "need",
        "आवश्यकता": "requirement",
        "अनुरोध": "request",
    },
    "te-en": {
        "ఫిర్యాదు": "complaint",
        "సహాయం": "help",
        "రక్తదానం": "blood donation",
        "వృద్ధులు": "elderly",
        "సంరక్షణ": "care",
        "సేవ": "service",
        "ప్రభుత్వం": "government",
        "సమస్య": "problem",
        "అవసరం": "need",
        "అభ్యర్థన": "request",
    },
    "en-hi": {
        "blood donation": "रक्तदान",
        "complaint": "शिकायत",
        "help": "मदद",
        "assistance": "सहायता",
        "elderly": "बुजुर्ग",
        "care": "देखभाल",
        "service": "सेवा",
        "government": "सरकार",
        "problem": "समस्या",
        "need": "जरूरत",
        "request": "अनुरोध",
    },
    "en-te": {
        "blood donation": "రక్తదానం",
        "complaint": "ఫిర్యాదు",
        "help": "సహాయం",
        "elderly": "వృద్ధులు",
        "care": "సంరక్షణ",
        "service": "సేవ",
        "government": "ప్రభుత్వం",
        "problem": "సమస్య",
        "need": "అవసరం",
        "request": "అభ్యర్థన",
    },
}


class TranslationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    original_text: str
    translated_text: str | None = None
    from_language: str
    to_language: str
    confidence: float = 0.0
    method: str
    translations_found: int | None = None
    error: str | None = None


def _term_pattern(term: str) -> re.Pattern[str]:
    # \b only works against Latin word characters; Indic terms match as substrings.
    if term.isascii():
        return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)
    return re.compile(re.escape(term))


class TranslationService:
    """Translate short phrases, preferring Google Translate when configured."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_env(cls) -> TranslationService:
        return cls(api_key=os.environ.get("GOOGLE_TRANSLATE_API_KEY") or None)

    def is_supported(self, from_lang: str, to_lang: str) -> bool:
        if from_lang == to_lang:
            return True
        return f"{from_lang}-{to_lang}" in FALLBACK_DICTIONARIES or bool(self._api_key)

    async def translate(self, text: str, from_lang: str, to_lang: str) -> TranslationResult:
        if from_lang == to_lang:
            return TranslationResult(
                success=True,
                original_text=text,
                translated_text=text,
                from_language=from_lang,
                to_language=to_lang,
                confidence=1.0,
                method="no_translation_needed",
            )

        if self._api_key:
            try:
                return await self._translate_remote(text, from_lang, to_lang)
            except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as exc:
                logger.warning("Remote translation failed, using dictionary: %s", exc)

        return self.translate_with_dictionary(text, from_lang, to_lang)

    async def _translate_remote(
        self, text: str, from_lang: str, to_lang: str,
    ) -> TranslationResult:
        params = {
            "key": self._api_key or "",
            "q": text,
            "source": from_lang,
            "target": to_lang,
            "format": "text",
        }
        async with httpx.AsyncClient(transport=self._transport, verify=True) as client:
            resp = await client.post(_GOOGLE_TRANSLATE_URL, params=params, timeout=self._timeout)
            resp.raise_for_status()
            translation = resp.json()["data"]["translations"][0]

        return TranslationResult(
            success=True,
            original_text=text,
            translated_text=translation["translatedText"],
            from_language=translation.get("detectedSourceLanguage", from_lang),
            to_language=to_lang,
            confidence=0.95,
            method="google_translate",
        )

    def translate_with_dictionary(
        self, text: str, from_lang: str, to_lang: str,
    ) -> TranslationResult:
        dictionary = FALLBACK_DICTIONARIES.get(f"{from_lang}-{to_lang}")
        if dictionary is None:
            return TranslationResult(
                success=False,
                original_text=text,
                from_language=from_lang,
                to_language=to_lang,
                method="fallback_dictionary",
                error=f"Translation not supported from {from_lang} to {to_lang}",
            )

        translated = text
        found = 0
        for term, replacement in dictionary.items():
            pattern = _term_pattern(term)
            if pattern.search(translated):
                translated = pattern.sub(replacement, translated)
                found += 1

        return TranslationResult(
            success=True,
            original_text=text,
            translated_text=translated,
            from_language=from_lang,
            to_language=to_lang,
            confidence=0.7 if found else 0.3,
            method="fallback_dictionary",
            translations_found=found,
        )
