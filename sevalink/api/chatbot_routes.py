"""Chatbot API endpoints.

Provides endpoints for:
- Classifying typed and voice-transcribed messages
- Detecting the language of a text
- Translating short phrases
- Inspecting and resetting the upstream quota breaker
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from sevalink.api.models import (
    DetectLanguageRequest,
    TextChatRequest,
    TranslateRequest,
    VoiceTextRequest,
)
from sevalink.language import detector
from sevalink.models import AuditEvent, AuditEventType, InboundMessage, InputMethod

if TYPE_CHECKING:
    from sevalink.ai.breaker import QuotaBreaker
    from sevalink.audit.logger import AuditLogger
    from sevalink.language.translation import TranslationService
    from sevalink.pipeline import MessagePipeline, PipelineOutcome
    from sevalink.ratelimit.limiter import RateLimiter

logger = logging.getLogger(__name__)

_ANONYMOUS = "anonymous"


def _user_id(request: Request) -> str:
    return request.headers.get("x-user-id") or _ANONYMOUS


def _outcome_body(outcome: PipelineOutcome) -> dict[str, object]:
    result = outcome.classification
    return {
        "success": True,
        "category": result.category.value,
        "priority": result.priority.value,
        "reply": result.reply,
        "createdRequestId": outcome.created_request_id,
        "usingFallback": result.using_fallback,
        "language": outcome.language.value,
    }


def create_chatbot_router(
    pipeline: MessagePipeline,
    limiter: RateLimiter,
    breaker: QuotaBreaker,
    translator: TranslationService,
    audit_logger: AuditLogger | None = None,
) -> APIRouter:
    """Create the chatbot API router."""
    router = APIRouter(prefix="/api/chatbot")

    @router.post("/text")
    async def text_message(body: TextChatRequest, request: Request) -> JSONResponse:
        """Classify a typed message and reply in its language."""
        message = InboundMessage(
            text=body.message,
            language=body.language,
            input_method=InputMethod.TEXT,
            user_id=_user_id(request),
        )
        outcome = await pipeline.process(message)
        return JSONResponse(_outcome_body(outcome))

    @router.post("/voice-text")
    async def voice_text(body: VoiceTextRequest, request: Request) -> JSONResponse:
        """Classify voice-transcribed text; rate limited per user."""
        user_id = _user_id(request)
        limiter_key = user_id
        if user_id == _ANONYMOUS and request.client is not None:
            limiter_key = request.client.host

        if not limiter.admit(limiter_key):
            retry_after = limiter.retry_after(limiter_key)
            if audit_logger:
                audit_logger.log(AuditEvent(
                    event_type=AuditEventType.RATE_LIMITED,
                    user_id=user_id,
                    action="voice_text",
                    result="blocked",
                    details={"key": limiter_key, "retry_after": retry_after},
                ))
            return JSONResponse(
                {
                    "success": False,
                    "error": "RATE_LIMIT_EXCEEDED",
                    "message": "Too many voice requests. Please try again later.",
                    "retryAfter": retry_after,
                },
                status_code=429,
                headers={"Retry-After": str(retry_after)},
            )

        message = InboundMessage(
            text=body.message,
            language=body.language,
            input_method=InputMethod.VOICE,
            user_id=user_id,
        )
        outcome = await pipeline.process(message)
        return JSONResponse(_outcome_body(outcome))

    @router.post("/detect-language")
    async def detect_language(body: DetectLanguageRequest) -> JSONResponse:
        return JSONResponse({"success": True, "language": detector.detect(body.text).value})

    @router.post("/translate")
    async def translate(body: TranslateRequest) -> JSONResponse:
        if not translator.is_supported(body.from_lang, body.to_lang):
            return JSONResponse(
                {
                    "success": False,
                    "message": f"Translation not supported from {body.from_lang} to {body.to_lang}",
                },
                status_code=400,
            )
        result = await translator.translate(body.text, body.from_lang, body.to_lang)
        return JSONResponse({
            "success": result.success,
            "originalText": result.original_text,
            "translatedText": result.translated_text,
            "fromLanguage": result.from_language,
            "toLanguage": result.to_language,
            "confidence": result.confidence,
            "method": result.method,
        })

    @router.get("/quota")
    async def quota_status() -> JSONResponse:
        state = breaker.status()
        return JSONResponse({
            "success": True,
            "quotaExceeded": state.exceeded,
            "exceededAt": state.exceeded_at,
            "resetAt": state.reset_at,
            "secondsUntilReset": state.seconds_until_reset,
        })

    @router.post("/quota/reset")
    async def quota_reset(request: Request) -> JSONResponse:
        breaker.reset()
        logger.info("Quota breaker reset manually")
        if audit_logger:
            audit_logger.log(AuditEvent(
                event_type=AuditEventType.QUOTA_RESET,
                user_id=_user_id(request),
                action="quota_reset",
                result="success",
            ))
        return JSONResponse({"success": True, "quotaExceeded": False})

    return router
