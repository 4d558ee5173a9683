"""FastAPI application for the SevaLink chat assistant."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sevalink.ai.adapter import GeminiAdapter
from sevalink.ai.breaker import QuotaBreaker
from sevalink.api.chatbot_routes import create_chatbot_router
from sevalink.audit.logger import AuditLogger
from sevalink.heuristics.classifier import HeuristicClassifier
from sevalink.language.translation import TranslationService
from sevalink.models import AuditEvent, AuditEventType
from sevalink.pipeline import MessagePipeline
from sevalink.ratelimit.limiter import RateLimiter
from sevalink.requests.worker import BackgroundWorker
from sevalink.storage.db import SevaLinkStore

logger = logging.getLogger(__name__)


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

    rules_path = os.environ.get("CLASSIFIER_RULES_PATH", "config/classifier-rules.json")
    db_path = os.environ.get("SEVALINK_DB_PATH", "data/sevalink.db")

    audit_logger = AuditLogger.from_env()
    breaker = QuotaBreaker()
    adapter = GeminiAdapter.from_env(breaker)
    limiter = RateLimiter(
        max_requests=int(os.environ.get("VOICE_RATE_LIMIT_MAX", "10")),
        window_seconds=float(os.environ.get("VOICE_RATE_LIMIT_WINDOW", "60")),
    )
    return create_app(
        classifier=HeuristicClassifier(rules_path),
        breaker=breaker,
        limiter=limiter,
        adapter=adapter,
        store=SevaLinkStore(db_path),
        translator=TranslationService.from_env(),
        audit_logger=audit_logger,
    )


def _persistence_failure_hook(
    audit_logger: AuditLogger | None,
) -> Callable[[str, Exception], None] | None:
    if audit_logger is None:
        return None

    def _on_failure(label: str, exc: Exception) -> None:
        audit_logger.log(AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            action="persist",
            result="failure",
            details={"job": label, "error": str(exc)},
        ))

    return _on_failure


def create_app(
    classifier: HeuristicClassifier,
    breaker: QuotaBreaker | None = None,
    limiter: RateLimiter | None = None,
    adapter: GeminiAdapter | None = None,
    store: SevaLinkStore | None = None,
    translator: TranslationService | None = None,
    audit_logger: AuditLogger | None = None,
    worker: BackgroundWorker | None = None,
) -> FastAPI:
    """Create the chatbot FastAPI app."""
    breaker = breaker or (adapter.breaker if adapter else QuotaBreaker())
    limiter = limiter or RateLimiter()
    translator = translator or TranslationService()
    worker = worker or BackgroundWorker(on_failure=_persistence_failure_hook(audit_logger))

    pipeline = MessagePipeline(
        classifier=classifier,
        adapter=adapter,
        store=store,
        worker=worker,
        translator=translator,
        audit_logger=audit_logger,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await worker.stop()
        if store is not None:
            store.close()

    app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)
    app.state.pipeline = pipeline
    app.state.worker = worker

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {
                "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            {"success": False, "message": "Validation failed", "errors": errors},
            status_code=400,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(create_chatbot_router(
        pipeline=pipeline,
        limiter=limiter,
        breaker=breaker,
        translator=translator,
        audit_logger=audit_logger,
    ))
    return app
