"""Gemini adapter: category, priority and reply from the generative-AI service.

Every failure surfaces as an ``UpstreamError`` subclass so the pipeline can
fall back to the heuristic classifier with a single ``except`` clause.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from sevalink.ai.breaker import QuotaBreaker
from sevalink.models import Category, ClassificationResult, Language, Priority

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
_DEFAULT_MODEL = "gemini-1.5-flash"
_RETRY_INFO_TYPE = "type.googleapis.com/google.rpc.RetryInfo"
_JSON_DECODER = json.JSONDecoder()

_LANGUAGE_INSTRUCTIONS = {
    Language.ENGLISH: "Respond in English",
    Language.HINDI: "Respond in Hindi (हिंदी)",
    Language.TELUGU: "Respond in Telugu (తెలుగు)",
}


class UpstreamError(Exception):
    """Base for every failure of the upstream AI call."""


class UpstreamRateLimited(UpstreamError):
    """Provider returned a quota / rate-limit error."""

    def __init__(self, retry_delay: str | None = None) -> None:
        self.retry_delay = retry_delay
        super().__init__(f"Upstream quota exceeded (retry delay: {retry_delay or 'unknown'})")


class UpstreamQuotaOpen(UpstreamError):
    """Call skipped because the quota breaker is open."""


class UpstreamMalformedResponse(UpstreamError):
    """Reply could not be parsed into the expected structure."""


class UpstreamTimeout(UpstreamError):
    """Provider did not answer within the configured timeout."""


class UpstreamUnreachable(UpstreamError):
    """Connection failure or unexpected HTTP status."""


class UpstreamReply(BaseModel):
    response: str = Field(min_length=1)
    category: Category
    priority: Priority
    next_steps: list[str] = Field(default_factory=list, alias="nextSteps")


def parse_structured_reply(raw: str) -> UpstreamReply:
    """Extract the ``{response, category, priority}`` object embedded in *raw*.

    Decodes from each ``{`` in turn and keeps the first complete object, so
    prose before and after the JSON is tolerated.

    Raises:
        UpstreamMalformedResponse: No JSON object, invalid JSON, or the
            object does not match the reply schema.
    """
    text = raw or ""
    start = text.find("{")
    if start < 0:
        raise UpstreamMalformedResponse("No JSON object in upstream reply")
    first_error: json.JSONDecodeError | None = None
    data: Any = None
    while start >= 0:
        try:
            data, _ = _JSON_DECODER.raw_decode(text, start)
            break
        except json.JSONDecodeError as e:
            first_error = first_error or e
            start = text.find("{", start + 1)
    else:
        raise UpstreamMalformedResponse(
            f"Invalid JSON in upstream reply: {first_error}",
        ) from first_error
    try:
        return UpstreamReply.model_validate(data)
    except ValidationError as e:
        raise UpstreamMalformedResponse(f"Upstream reply failed validation: {e}") from e


def build_prompt(text: str, language: Language) -> str:
    instruction = _LANGUAGE_INSTRUCTIONS.get(language, "Respond in English")
    return f"""You are SevaLink AI Assistant, a helpful community-services assistant.

User Input: "{text}"
User Language: {language.value}
Response Language: {instruction}

Instructions:
1. Answer the user's question directly and helpfully.
2. If it is a service request (blood, elder care, civic complaint), categorize it.
3. Be brief, natural and friendly.

Categories:
- blood_request: blood donation needs, transfusion requests
- elder_support: help for elderly citizens, medicine, groceries, care
- complaint: infrastructure issues, broken services, civic problems
- emergency: urgent situations requiring immediate help
- general_inquiry: everything else

Priority levels: urgent, high, medium, low

Reply with JSON only:
{{"response": "...", "category": "...", "priority": "...", "nextSteps": []}}
"""


def _retry_delay(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    details = body.get("error", {}).get("details", [])
    for detail in details if isinstance(details, list) else []:
        if isinstance(detail, dict) and (
            detail.get("@type") == _RETRY_INFO_TYPE or "retryDelay" in detail
        ):
            delay = detail.get("retryDelay")
            return str(delay) if delay else None
    return None


def _is_quota_error(resp: httpx.Response, body: Any) -> bool:
    if resp.status_code == 429:
        return True
    if isinstance(body, dict):
        error = body.get("error", {})
        if isinstance(error, dict):
            status = str(error.get("status", ""))
            message = str(error.get("message", "")).lower()
            return status == "RESOURCE_EXHAUSTED" or "quota" in message
    return False


class GeminiAdapter:
    """Calls the Gemini ``generateContent`` REST endpoint behind a quota breaker."""

    def __init__(
        self,
        api_key: str,
        breaker: QuotaBreaker,
        model: str = _DEFAULT_MODEL,
        base_url: str = _DEFAULT_BASE_URL,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._breaker = breaker
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_env(cls, breaker: QuotaBreaker) -> GeminiAdapter | None:
        """Build an adapter from the environment, or None when disabled."""
        api_key = os.environ.get("GEMINI_API_KEY", "")
        enabled = os.environ.get("USE_GEMINI_API", "true").lower() != "false"
        if not api_key or not enabled:
            logger.info("Gemini adapter disabled; heuristic classification only")
            return None
        return cls(
            api_key=api_key,
            breaker=breaker,
            model=os.environ.get("GEMINI_MODEL", _DEFAULT_MODEL),
            base_url=os.environ.get("GEMINI_BASE_URL", _DEFAULT_BASE_URL),
            timeout=float(os.environ.get("GEMINI_TIMEOUT_SECONDS", "15")),
        )

    @property
    def breaker(self) -> QuotaBreaker:
        return self._breaker

    async def classify(self, text: str, language: Language) -> ClassificationResult:
        """Classify *text* upstream.

        Raises:
            UpstreamQuotaOpen: Breaker is open; no network call was made.
            UpstreamRateLimited: Provider rejected the call for quota.
            UpstreamTimeout: No answer within the timeout.
            UpstreamUnreachable: Connection failure or unexpected status.
            UpstreamMalformedResponse: Reply could not be parsed.
        """
        if self._breaker.is_open():
            raise UpstreamQuotaOpen("Quota breaker open, skipping upstream call")

        raw = await self._generate(build_prompt(text, language))
        reply = parse_structured_reply(raw)
        return ClassificationResult(
            category=reply.category,
            priority=reply.priority,
            reply=reply.response,
            using_fallback=False,
        )

    async def _generate(self, prompt: str) -> str:
        url = f"{self._base_url}/v1beta/models/{self._model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            async with httpx.AsyncClient(transport=self._transport, verify=True) as client:
                resp = await client.post(
                    url,
                    params={"key": self._api_key},
                    json=payload,
                    timeout=self._timeout,
                )
        except httpx.TimeoutException as e:
            raise UpstreamTimeout(f"Gemini call timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise UpstreamUnreachable(f"Gemini unreachable: {e}") from e

        try:
            body: Any = resp.json()
        except json.JSONDecodeError:
            body = None

        if resp.status_code >= 400:
            if _is_quota_error(resp, body):
                delay = _retry_delay(body)
                self._breaker.trip(delay)
                raise UpstreamRateLimited(delay)
            raise UpstreamUnreachable(f"Gemini returned HTTP {resp.status_code}")

        try:
            parts = body["candidates"][0]["content"]["parts"]
            return "".join(str(part.get("text", "")) for part in parts)
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamMalformedResponse(f"Unexpected Gemini response shape: {e}") from e
