"""Request bodies for the chatbot HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sevalink.models import Language

MAX_MESSAGE_CHARS = 2000


class TextChatRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(min_length=1, max_length=MAX_MESSAGE_CHARS)
    language: Language = Language.ENGLISH

    @field_validator("language")
    @classmethod
    def _concrete_language(cls, value: Language) -> Language:
        if value == Language.AUTO:
            raise ValueError("language must be one of en, hi, te")
        return value


class VoiceTextRequest(BaseModel):
    """Already-transcribed voice input; transcription happens client-side."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    message: str = Field(min_length=1, max_length=MAX_MESSAGE_CHARS)
    language: Language = Language.AUTO
    transcription_confidence: float | None = Field(
        default=None, ge=0.0, le=1.0, alias="transcriptionConfidence",
    )


class DetectLanguageRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(min_length=1, max_length=MAX_MESSAGE_CHARS)


class TranslateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    text: str = Field(min_length=1, max_length=MAX_MESSAGE_CHARS)
    from_lang: str = Field(alias="fromLang", pattern=r"^(en|hi|te)$")
    to_lang: str = Field(alias="toLang", pattern=r"^(en|hi|te)$")
