"""AI gateway tests: payload shape, HTTP handling, tolerant JSON parsing."""

import json

import httpx
import pytest

from core import ai_client
from core.ai_client import AIRequest, AIServiceError, build_payload, call_ai, parse_json

PNG_URI = "data:image/png;base64,iVBORw0KGgo="


# --- parse_json ---------------------------------------------------------------

def test_parses_plain_json():
    assert parse_json('{"type": "CHAT"}') == {"type": "CHAT"}


def test_parses_json_embedded_in_prose():
    text = 'Sure! Here is the analysis you asked for:\n{"mbti": "INFJ", "tags": ["#calm"]}\nHope this helps.'
    assert parse_json(text) == {"mbti": "INFJ", "tags": ["#calm"]}


def test_parses_fenced_json():
    text = '```json\n{"reply": "hey", "insight": "good opener"}\n```'
    assert parse_json(text) == {"reply": "hey", "insight": "good opener"}


@pytest.mark.parametrize(
    "text",
    [
        "",
        None,
        "no structured output here at all",
        "{ this is not json }",
        "[1, 2, 3]",
        "} backwards {",
    ],
)
def test_unparseable_text_returns_empty_record(text):
    assert parse_json(text) == {}


@pytest.mark.parametrize(
    "text",
    [
        "I am unable to analyze these images.",
        'Sorry, I cannot help with that. {"a": 1}',
        "This request is something I'm unable to fulfill.",
    ],
)
def test_refusals_return_empty_record(text):
    assert parse_json(text) == {}


# --- build_payload ------------------------------------------------------------

def test_payload_keeps_only_data_uri_images():
    payload = build_payload(AIRequest(model="m", prompt="p", images=[PNG_URI, "https://x/y.png", ""]))
    content = payload["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "p"}
    assert content[1:] == [{"type": "image_url", "image_url": {"url": PNG_URI}}]
    assert payload["temperature"] == 0.7
    assert payload["max_tokens"] == 8000
    assert "response_format" not in payload


def test_payload_requests_json_mode():
    payload = build_payload(AIRequest(model="m", prompt="p", response_format="json"))
    assert payload["response_format"] == {"type": "json_object"}


@pytest.mark.parametrize("budget, effort", [(0, "low"), (1024, "low"), (4096, "medium"), (32768, "high")])
def test_thinking_budget_maps_to_reasoning_effort(budget, effort):
    payload = build_payload(AIRequest(model="m", prompt="p", thinking_budget=budget))
    assert payload["reasoning_effort"] == effort


# --- call_ai ------------------------------------------------------------------

def _transport(handler):
    return httpx.MockTransport(handler)


async def test_call_ai_posts_chat_completion():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": "hello"}}]})

    resp = await call_ai(
        AIRequest(model="gemini-test", prompt="hi", response_format="json"),
        endpoint="https://ai.test/",
        api_key="sk-abc",
        transport=_transport(handler),
    )

    assert resp.text == "hello"
    assert seen["url"] == "https://ai.test/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-abc"
    assert seen["body"]["model"] == "gemini-test"
    assert seen["body"]["response_format"] == {"type": "json_object"}


async def test_call_ai_uses_environment_defaults(monkeypatch):
    monkeypatch.setenv("AI_API_ENDPOINT", "https://gateway.example/")
    monkeypatch.setenv("AI_API_KEY", "sk-env")
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

    await call_ai(AIRequest(model="m", prompt="p"), transport=_transport(handler))
    assert seen == {"url": "https://gateway.example/v1/chat/completions", "auth": "Bearer sk-env"}


async def test_call_ai_returns_empty_text_without_choices():
    transport = _transport(lambda request: httpx.Response(200, json={"choices": []}))
    resp = await call_ai(AIRequest(model="m", prompt="p"), transport=transport)
    assert resp.text == ""


async def test_call_ai_raises_on_error_status():
    transport = _transport(lambda request: httpx.Response(429, text="quota exceeded"))
    with pytest.raises(AIServiceError, match=r"AI API Error \(429\): quota exceeded"):
        await call_ai(AIRequest(model="m", prompt="p"), transport=transport)


async def test_call_ai_wraps_transport_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AIServiceError, match="connection refused"):
        await call_ai(AIRequest(model="m", prompt="p"), transport=_transport(handler))


async def test_call_ai_requires_api_key(monkeypatch):
    monkeypatch.delenv("AI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(AIServiceError, match="API key is missing"):
        await call_ai(AIRequest(model="m", prompt="p"))


async def test_call_ai_requires_model():
    with pytest.raises(AIServiceError, match="model"):
        await call_ai(AIRequest(model=" ", prompt="p"), api_key="sk")


def test_gemini_key_is_accepted_as_fallback(monkeypatch):
    monkeypatch.delenv("AI_API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "sk-gemini")
    assert ai_client.settings.ai_api_key() == "sk-gemini"
