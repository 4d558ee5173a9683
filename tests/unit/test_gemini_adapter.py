"""Tests for the Gemini adapter, its error taxonomy and reply parsing."""

from __future__ import annotations

import httpx
import pytest

from sevalink.ai.adapter import (
    GeminiAdapter,
    UpstreamMalformedResponse,
    UpstreamQuotaOpen,
    UpstreamRateLimited,
    UpstreamTimeout,
    UpstreamUnreachable,
    build_prompt,
    parse_structured_reply,
)
from sevalink.ai.breaker import QuotaBreaker
from sevalink.models import Category, Language, Priority
from tests.conftest import (
    FakeClock,
    gemini_quota_error,
    gemini_reply,
    gemini_text_response,
    static_transport,
)


class TestParseStructuredReply:
    def test_json_embedded_in_prose(self) -> None:
        raw = (
            'Here you go:\n{"response": "Help is on the way", "category": "blood_request",'
            ' "priority": "urgent", "nextSteps": ["Request saved"]}\nThanks!'
        )
        reply = parse_structured_reply(raw)
        assert reply.category == Category.BLOOD_REQUEST
        assert reply.priority == Priority.URGENT
        assert reply.next_steps == ["Request saved"]

    def test_braces_in_trailing_prose(self) -> None:
        raw = (
            '{"response": "Logged", "category": "complaint", "priority": "medium"}'
            " see {note} for details"
        )
        reply = parse_structured_reply(raw)
        assert reply.category == Category.COMPLAINT
        assert reply.response == "Logged"

    def test_braces_in_leading_prose(self) -> None:
        raw = (
            "Using template {reply}:\n"
            '{"response": "Hi", "category": "general_inquiry", "priority": "low"}'
        )
        assert parse_structured_reply(raw).response == "Hi"

    def test_no_json(self) -> None:
        with pytest.raises(UpstreamMalformedResponse, match="No JSON"):
            parse_structured_reply("I cannot help with that.")

    def test_invalid_json(self) -> None:
        with pytest.raises(UpstreamMalformedResponse, match="Invalid JSON"):
            parse_structured_reply("{response: nope}")

    def test_unknown_category(self) -> None:
        raw = '{"response": "x", "category": "weather", "priority": "low"}'
        with pytest.raises(UpstreamMalformedResponse, match="validation"):
            parse_structured_reply(raw)

    def test_missing_response(self) -> None:
        raw = '{"category": "complaint", "priority": "low"}'
        with pytest.raises(UpstreamMalformedResponse):
            parse_structured_reply(raw)


def test_prompt_names_language_and_categories() -> None:
    prompt = build_prompt("नमस्ते", Language.HINDI)
    assert "Respond in Hindi" in prompt
    assert "blood_request" in prompt
    assert '"nextSteps"' in prompt


def _adapter(transport: httpx.MockTransport, breaker: QuotaBreaker | None = None) -> GeminiAdapter:
    return GeminiAdapter(
        api_key="test-key",
        breaker=breaker or QuotaBreaker(),
        transport=transport,
    )


class TestGeminiAdapter:
    @pytest.mark.asyncio
    async def test_successful_classification(self) -> None:
        transport = static_transport(lambda: gemini_reply("complaint", "high", "Noted."))
        result = await _adapter(transport).classify("road broken", Language.ENGLISH)
        assert result.category == Category.COMPLAINT
        assert result.priority == Priority.HIGH
        assert result.reply == "Noted."
        assert result.using_fallback is False

    @pytest.mark.asyncio
    async def test_request_shape(self) -> None:
        transport = static_transport(lambda: gemini_reply())
        await _adapter(transport).classify("hello", Language.ENGLISH)
        sent = transport.calls[0]  # type: ignore[attr-defined]
        assert sent.url.path == "/v1beta/models/gemini-1.5-flash:generateContent"
        assert sent.url.params["key"] == "test-key"

    @pytest.mark.asyncio
    async def test_quota_error_trips_breaker(self, clock: FakeClock) -> None:
        breaker = QuotaBreaker(clock=clock)
        transport = static_transport(lambda: gemini_quota_error("30s"))
        with pytest.raises(UpstreamRateLimited) as exc_info:
            await _adapter(transport, breaker).classify("hello", Language.ENGLISH)
        assert exc_info.value.retry_delay == "30s"
        assert breaker.is_open() is True
        clock.advance(30)
        assert breaker.is_open() is False

    @pytest.mark.asyncio
    async def test_open_breaker_skips_network(self, clock: FakeClock) -> None:
        breaker = QuotaBreaker(clock=clock)
        breaker.trip("1h")
        transport = static_transport(lambda: gemini_reply())
        with pytest.raises(UpstreamQuotaOpen):
            await _adapter(transport, breaker).classify("hello", Language.ENGLISH)
        assert transport.calls == []  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_quota_without_retry_info_uses_default(self, clock: FakeClock) -> None:
        breaker = QuotaBreaker(clock=clock)
        transport = static_transport(lambda: gemini_quota_error(None))
        with pytest.raises(UpstreamRateLimited):
            await _adapter(transport, breaker).classify("hello", Language.ENGLISH)
        clock.advance(23 * 3600)
        assert breaker.is_open() is True

    @pytest.mark.asyncio
    async def test_malformed_reply_does_not_trip(self) -> None:
        breaker = QuotaBreaker()
        transport = static_transport(lambda: gemini_text_response("just prose"))
        with pytest.raises(UpstreamMalformedResponse):
            await _adapter(transport, breaker).classify("hello", Language.ENGLISH)
        assert breaker.is_open() is False

    @pytest.mark.asyncio
    async def test_unexpected_body_shape(self) -> None:
        transport = static_transport(lambda: httpx.Response(200, json={"candidates": []}))
        with pytest.raises(UpstreamMalformedResponse):
            await _adapter(transport).classify("hello", Language.ENGLISH)

    @pytest.mark.asyncio
    async def test_server_error_is_unreachable(self) -> None:
        breaker = QuotaBreaker()
        transport = static_transport(lambda: httpx.Response(500, json={"error": {"code": 500}}))
        with pytest.raises(UpstreamUnreachable):
            await _adapter(transport, breaker).classify("hello", Language.ENGLISH)
        assert breaker.is_open() is False

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(UpstreamTimeout):
            await _adapter(httpx.MockTransport(handler)).classify("hi", Language.ENGLISH)

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamUnreachable):
            await _adapter(httpx.MockTransport(handler)).classify("hi", Language.ENGLISH)


class TestFromEnv:
    def test_disabled_without_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        assert GeminiAdapter.from_env(QuotaBreaker()) is None

    def test_disabled_by_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        monkeypatch.setenv("USE_GEMINI_API", "false")
        assert GeminiAdapter.from_env(QuotaBreaker()) is None

    def test_enabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        monkeypatch.delenv("USE_GEMINI_API", raising=False)
        breaker = QuotaBreaker()
        adapter = GeminiAdapter.from_env(breaker)
        assert adapter is not None
        assert adapter.breaker is breaker
