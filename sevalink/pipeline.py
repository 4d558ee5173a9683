"""Message pipeline: detect, classify, extract, synthesize, materialize.

Stages:
1. Language resolution (explicit tag or detection)
2. AI classification behind the quota breaker, heuristic fallback
3. Entity extraction on the original and English-normalized text
4. Reply synthesis (fallback path and generic-AI alignment)
5. Request materialization with a pre-assigned id
6. Background persistence and audit
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from sevalink.ai.adapter import UpstreamError, UpstreamQuotaOpen, UpstreamRateLimited
from sevalink.heuristics import extractors
from sevalink.language import detector, normalizer
from sevalink.models import (
    AuditEvent,
    AuditEventType,
    Category,
    ChatRecord,
    ClassificationResult,
    ExtractedEntities,
    InboundMessage,
    Language,
    SynthesizedRequest,
)
from sevalink.requests.materializer import build_request
from sevalink.synth.synthesizer import compose_reply

if TYPE_CHECKING:
    from sevalink.ai.adapter import GeminiAdapter
    from sevalink.audit.logger import AuditLogger
    from sevalink.heuristics.classifier import HeuristicClassifier
    from sevalink.language.translation import TranslationService
    from sevalink.requests.worker import BackgroundWorker
    from sevalink.storage.db import SevaLinkStore

logger = logging.getLogger(__name__)


class PipelineOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    message_id: str
    language: Language
    classification: ClassificationResult
    entities: ExtractedEntities
    english_text: str
    request: SynthesizedRequest | None = None

    @property
    def created_request_id(self) -> str | None:
        return self.request.id if self.request else None


class MessagePipeline:
    """Runs one inbound message through every stage; never raises on content."""

    def __init__(
        self,
        classifier: HeuristicClassifier,
        adapter: GeminiAdapter | None = None,
        store: SevaLinkStore | None = None,
        worker: BackgroundWorker | None = None,
        translator: TranslationService | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._classifier = classifier
        self._adapter = adapter
        self._store = store
        self._worker = worker
        self._translator = translator
        self._audit = audit_logger

    async def process(self, message: InboundMessage) -> PipelineOutcome:
        text = message.text
        language = detector.resolve(message.language, text)

        english_text = await self._to_english(text, language)
        heuristic_category, heuristic_priority = self._classifier.classify(text)
        if heuristic_category == Category.GENERAL_INQUIRY and english_text != text:
            heuristic_category, heuristic_priority = self._classifier.classify(english_text)

        ai_result = await self._classify_upstream(message, language)

        if ai_result is None:
            category, priority = heuristic_category, heuristic_priority
            using_fallback = True
        elif (
            ai_result.category == Category.GENERAL_INQUIRY
            and heuristic_category != Category.GENERAL_INQUIRY
        ):
            logger.info(
                "AI answered general_inquiry, heuristic found %s; using heuristic",
                heuristic_category.value,
            )
            category, priority = heuristic_category, heuristic_priority
            using_fallback = True
        else:
            category, priority = ai_result.category, ai_result.priority
            using_fallback = False

        entities = self._extract(text, english_text, category)

        if using_fallback or ai_result is None:
            reply = compose_reply(category, priority, language, entities, text)
        else:
            reply = ai_result.reply

        classification = ClassificationResult(
            category=category,
            priority=priority,
            reply=reply,
            using_fallback=using_fallback,
            confidence=ai_result.confidence if ai_result and not using_fallback else None,
        )

        request = build_request(message, classification, entities, english_text)
        self._persist(message, language, classification, request)

        if self._audit:
            self._audit.log(AuditEvent(
                event_type=AuditEventType.MESSAGE_CLASSIFIED,
                user_id=message.user_id,
                action="classify",
                result="fallback" if using_fallback else "success",
                details={
                    "message_id": message.message_id,
                    "language": language.value,
                    "category": category.value,
                    "priority": priority.value,
                    "request_id": request.id if request else None,
                },
            ))

        return PipelineOutcome(
            message_id=message.message_id,
            language=language,
            classification=classification,
            entities=entities,
            english_text=english_text,
            request=request,
        )

    async def _classify_upstream(
        self, message: InboundMessage, language: Language,
    ) -> ClassificationResult | None:
        if self._adapter is None:
            return None
        try:
            return await self._adapter.classify(message.text, language)
        except UpstreamQuotaOpen:
            return None
        except UpstreamRateLimited as exc:
            self._audit_fallback(message, AuditEventType.QUOTA_TRIPPED, exc)
            return None
        except UpstreamError as exc:
            logger.warning("Upstream classification failed, using heuristics: %s", exc)
            self._audit_fallback(message, AuditEventType.UPSTREAM_FALLBACK, exc)
            return None
        except Exception as exc:
            logger.exception("Unexpected error from AI adapter")
            self._audit_fallback(message, AuditEventType.UPSTREAM_FALLBACK, exc)
            return None

    async def _to_english(self, text: str, language: Language) -> str:
        if language == Language.ENGLISH:
            return text
        if self._translator is not None:
            try:
                result = await self._translator.translate(text, language.value, "en")
            except Exception:
                logger.exception("Translation failed, using keyword normalizer")
            else:
                if (
                    result.success
                    and result.translated_text
                    and result.method == "google_translate"
                ):
                    return result.translated_text
        return normalizer.to_english(text)

    def _extract(self, text: str, english_text: str, category: Category) -> ExtractedEntities:
        blood_type = None
        complaint_category = None
        service_type = None
        if category == Category.BLOOD_REQUEST:
            blood_type = extractors.extract_blood_type(text) or extractors.extract_blood_type(
                english_text,
            )
        elif category == Category.COMPLAINT:
            complaint_category = extractors.classify_complaint(english_text)
        elif category == Category.ELDER_SUPPORT:
            service_type = extractors.classify_service(english_text)
        return ExtractedEntities(
            blood_type=blood_type,
            location_hint=extractors.extract_location(text),
            complaint_category=complaint_category,
            service_type=service_type,
        )

    def _persist(
        self,
        message: InboundMessage,
        language: Language,
        classification: ClassificationResult,
        request: SynthesizedRequest | None,
    ) -> None:
        if self._store is None or self._worker is None:
            return
        store = self._store
        record = ChatRecord(
            id=message.message_id,
            user_id=message.user_id,
            message=message.text,
            reply=classification.reply,
            category=classification.category,
            priority=classification.priority,
            language=language,
            input_method=message.input_method,
            using_fallback=classification.using_fallback,
            request_id=request.id if request else None,
        )
        if request is not None:
            self._worker.submit(f"request:{request.id}", lambda: store.save(request))
            if self._audit:
                self._audit.log(AuditEvent(
                    event_type=AuditEventType.REQUEST_CREATED,
                    user_id=message.user_id,
                    action="materialize",
                    result="success",
                    details={
                        "request_id": request.id,
                        "type": request.type.value,
                        "title": request.title,
                    },
                ))
        self._worker.submit(f"chat:{record.id}", lambda: store.save(record))

    def _audit_fallback(
        self, message: InboundMessage, event_type: AuditEventType, exc: Exception,
    ) -> None:
        if self._audit:
            self._audit.log(AuditEvent(
                event_type=event_type,
                user_id=message.user_id,
                action="upstream_classify",
                result="fallback",
                details={"message_id": message.message_id, "error": str(exc)},
            ))
