"""Shared test fixtures for sevalink."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from sevalink.audit.logger import AuditLogger
from sevalink.heuristics.classifier import HeuristicClassifier
from sevalink.models import (
    Category,
    ClassificationResult,
    ExtractedEntities,
    InboundMessage,
    Priority,
)

CONFIG_DIR = Path(__file__).parent.parent / "config"
RULES_PATH = str(CONFIG_DIR / "classifier-rules.json")


@pytest.fixture
def config_dir() -> Path:
    return CONFIG_DIR


@pytest.fixture
def rules_path() -> str:
    return RULES_PATH


@pytest.fixture(scope="session")
def classifier() -> HeuristicClassifier:
    return HeuristicClassifier(RULES_PATH)


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)


class FakeClock:
    """Manually advanced clock for breaker and limiter tests."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# --- Factory functions for test data ---


def make_message(**kwargs: Any) -> InboundMessage:
    """Factory for InboundMessage with sensible defaults."""
    defaults: dict[str, Any] = {
        "text": "I need O+ blood urgently",
        "user_id": "user-1",
        "message_id": "msg-1",
    }
    defaults.update(kwargs)
    return InboundMessage(**defaults)


def make_classification(**kwargs: Any) -> ClassificationResult:
    defaults: dict[str, Any] = {
        "category": Category.COMPLAINT,
        "priority": Priority.MEDIUM,
        "reply": "Registered.",
        "using_fallback": True,
    }
    defaults.update(kwargs)
    return ClassificationResult(**defaults)


def make_entities(**kwargs: Any) -> ExtractedEntities:
    return ExtractedEntities(**kwargs)


# --- Upstream (Gemini) response helpers ---


def gemini_text_response(text: str, status_code: int = 200) -> httpx.Response:
    """Wrap *text* in a generateContent response body."""
    body = {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}
    return httpx.Response(status_code, json=body)


def gemini_reply(
    category: str = "general_inquiry",
    priority: str = "low",
    response: str = "Hello from the model",
) -> httpx.Response:
    payload = {"response": response, "category": category, "priority": priority, "nextSteps": []}
    return gemini_text_response("Sure!\n```json\n" + json.dumps(payload) + "\n```")


def gemini_quota_error(retry_delay: str | None = "30s") -> httpx.Response:
    details: list[dict[str, Any]] = []
    if retry_delay is not None:
        details.append({
            "@type": "type.googleapis.com/google.rpc.RetryInfo",
            "retryDelay": retry_delay,
        })
    body = {
        "error": {
            "code": 429,
            "message": "You exceeded your current quota",
            "status": "RESOURCE_EXHAUSTED",
            "details": details,
        },
    }
    return httpx.Response(429, json=body)


def static_transport(make_response: Callable[[], httpx.Response]) -> httpx.MockTransport:
    """Transport that answers every request with a fresh response, counting calls."""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return make_response()

    transport = httpx.MockTransport(handler)
    transport.calls = calls  # type: ignore[attr-defined]
    return transport
