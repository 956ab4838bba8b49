"""
AI gateway: OpenAI-compatible chat-completions client helpers.

Used endpoint:
- POST {AI_API_ENDPOINT}/v1/chat/completions
    -> {"choices": [{"message": {"role": "assistant", "content": "..."}}]}

Model output is free-form text; `parse_json` turns it into a dict on a
best-effort basis and never raises.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Literal

import httpx

from . import settings

logger = logging.getLogger(__name__)

ResponseFormat = Literal["json", "text"]

_REFUSAL_MARKERS = ("unable to fulfill", "I cannot")


# AI failures are explicit and separable from other runtime errors.
class AIServiceError(RuntimeError):
    pass


@dataclass
class AIRequest:
    model: str
    prompt: str
    images: list[str] = field(default_factory=list)
    response_format: ResponseFormat = "text"
    thinking_budget: int | None = None


@dataclass
class AIResponse:
    text: str


def _normalize_endpoint(endpoint: str) -> str:
    endpoint = (endpoint or "").strip()
    if not endpoint:
        raise AIServiceError("AI_API_ENDPOINT is empty.")
    return endpoint.rstrip("/")


def _reasoning_effort(thinking_budget: int) -> str:
    if thinking_budget <= 1024:
        return "low"
    if thinking_budget <= 8192:
        return "medium"
    return "high"


def build_payload(request: AIRequest) -> dict[str, Any]:
    content: list[dict[str, Any]] = [{"type": "text", "text": request.prompt}]
    for image in request.images:
        # Only inline data URIs are forwarded; anything else is dropped silently.
        if image and image.startswith("data:image"):
            content.append({"type": "image_url", "image_url": {"url": image}})

    payload: dict[str, Any] = {
        "model": request.model,
        "messages": [{"role": "user", "content": content}],
        "temperature": 0.7,
        "max_tokens": 8000,
    }
    if request.response_format == "json":
        payload["response_format"] = {"type": "json_object"}
    if request.thinking_budget is not None:
        payload["reasoning_effort"] = _reasoning_effort(int(request.thinking_budget))
    return payload


async def call_ai(
    request: AIRequest,
    *,
    endpoint: str | None = None,
    api_key: str | None = None,
    timeout_s: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AIResponse:
    """
    Send one prompt (plus optional images) and return the assistant text.
    """
    base_url = _normalize_endpoint(endpoint if endpoint is not None else settings.ai_api_endpoint())
    key = (api_key if api_key is not None else settings.ai_api_key()).strip()
    if not key:
        raise AIServiceError("API key is missing. Please check your configuration.")
    model = (request.model or "").strip()
    if not model:
        raise AIServiceError("AI model name is empty.")

    payload = build_payload(request)
    timeout = timeout_s if timeout_s is not None else settings.ai_timeout_s()

    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport) as client:
            resp = await client.post(
                "/v1/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {key}"},
            )
    except httpx.HTTPError as exc:
        logger.error("AI API call failed: %s", exc, extra={"model": model})
        raise AIServiceError(f"AI API request failed: {exc}") from exc

    if resp.status_code < 200 or resp.status_code >= 300:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:500]
        logger.error("AI API returned %s", resp.status_code, extra={"model": model})
        raise AIServiceError(f"AI API Error ({resp.status_code}): {body}")

    try:
        data: dict[str, Any] = resp.json()
    except ValueError as exc:
        raise AIServiceError("AI API returned a non-JSON body.") from exc

    text = ""
    choices = data.get("choices")
    if isinstance(choices, list) and choices:
        message = (choices[0] or {}).get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            text = message["content"]
    return AIResponse(text=text)


def _strip_fences(text: str) -> str:
    clean = text.replace("```json", "")
    if clean.rstrip().endswith("```"):
        clean = clean.rstrip()[:-3]
    return clean.strip()


def _loads_object(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(_strip_fences(text))
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def is_refusal(text: str) -> bool:
    stripped = text.strip()
    return stripped.startswith("I am unable") or any(marker in text for marker in _REFUSAL_MARKERS)


def parse_json(text: str | None) -> dict[str, Any]:
    """
    Best-effort extraction of a JSON object from model output.

    Tolerates markdown fences and prose around the payload. Returns `{}` when
    nothing usable is found.
    """
    if not text:
        return {}

    if is_refusal(text):
        logger.warning("AI refusal detected: %s", text[:200])
        return {}

    data = _loads_object(text)
    if data is not None:
        return data

    first_open = text.find("{")
    last_close = text.rfind("}")
    if first_open != -1 and last_close > first_open:
        data = _loads_object(text[first_open : last_close + 1])
        if data is not None:
            return data

    logger.warning("Failed to parse JSON from AI response: %s", text[:500])
    return {}
