"""
Client for the hosted LLM chat-completion gateway.
Maps gateway failures onto the request-scoped error taxonomy and parses the
JSON object the model is asked to return. No retries.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx
from pydantic import ValidationError

from .config import get_settings
from .errors import PaymentRequiredError, RateLimitError, UpstreamError
from .models import AIVerification, ViralityAssessment
from .prompts import VIRALITY_SYSTEM_PROMPT, build_virality_prompt

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_BARE_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def extract_json(text: str) -> dict[str, Any]:
    """Parse a JSON object from model output, optionally wrapped in a fenced block or prose."""
    if not text or not text.strip():
        raise UpstreamError("Empty response from AI gateway")
    candidates = [text.strip()]
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    bare = _BARE_OBJECT.search(text)
    if bare:
        candidates.append(bare.group(0))
    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    logger.error("Failed to parse AI response: %s", text[:200])
    raise UpstreamError("Invalid JSON response from AI")


class LLMGateway:
    """OpenAI-compatible chat-completion client."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._endpoint = settings.llm_gateway_url
        self._api_key = settings.llm_api_key
        self._model = settings.llm_model
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    async def complete(self, messages: list[dict[str, str]], *, json_mode: bool = False) -> str:
        if not self._api_key:
            raise UpstreamError("LLM gateway API key is not configured")
        payload: dict[str, Any] = {"model": self._model, "messages": messages}
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        headers = {"Authorization": f"Bearer {self._api_key}"}
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(self._endpoint, json=payload, headers=headers)
            except httpx.HTTPError as exc:
                logger.error("AI gateway unreachable: %s", exc)
                raise UpstreamError(f"AI gateway unreachable: {exc}") from exc

        if response.status_code == 429:
            logger.warning("AI gateway rate limit exceeded")
            raise RateLimitError("Rate limits exceeded, please try again later.", status_code=429)
        if response.status_code == 402:
            logger.warning("AI gateway payment required")
            raise PaymentRequiredError("Payment required, please add funds to your workspace.", status_code=402)
        if response.is_error:
            logger.error("AI gateway error: %s %s", response.status_code, response.text[:200])
            raise UpstreamError(f"AI gateway error: {response.status_code}", status_code=response.status_code)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise UpstreamError("No content in AI response") from exc
        if not isinstance(content, str) or not content.strip():
            raise UpstreamError("No content in AI response")
        logger.debug("AI response: %s", content[:200])
        return content

    async def verify(self, prompt: str) -> AIVerification:
        content = await self.complete([{"role": "user", "content": prompt}])
        payload = extract_json(content)
        verification = AIVerification.model_validate(payload)
        logger.info(
            "AI verification parsed: bbc=%s cnn=%s abc=%s guardian=%s red_flags=%d",
            verification.bbc_verified,
            verification.cnn_verified,
            verification.abc_verified,
            verification.guardian_verified,
            len(verification.red_flags),
        )
        return verification

    async def assess_virality(self, headline: str, content: str) -> ViralityAssessment:
        messages = [
            {"role": "system", "content": VIRALITY_SYSTEM_PROMPT},
            {"role": "user", "content": build_virality_prompt(headline, content)},
        ]
        raw = await self.complete(messages, json_mode=True)
        try:
            payload = extract_json(raw)
            return ViralityAssessment(
                is_viral_worthy=payload.get("isViralWorthy", False),
                reason=payload.get("reason") or ViralityAssessment().reason,
                confidence=payload.get("confidence", 0.5),
                category=payload.get("category") or "Other",
                sentiment=payload.get("sentiment") or "Neutral",
            )
        except (UpstreamError, ValidationError) as exc:
            logger.warning("Virality response format unexpected, using default: %s", exc)
            return ViralityAssessment()
