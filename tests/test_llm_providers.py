from types import SimpleNamespace

import pytest
import requests
from openai import OpenAIError

from strategy_engine.llm.providers.gemini_provider import GeminiProvider
from strategy_engine.llm.providers.openai_provider import OpenAIProvider
from strategy_engine.llm.types import LLMRequest, ProviderError, QualityMode
from strategy_engine.shapes import NUMBER, obj


def _request(**kwargs):
    defaults = dict(
        prompt="Find the gap",
        shape=obj(a=NUMBER),
        quality_mode=QualityMode.FAST,
        model="gemini-3-flash-preview",
        timeout_seconds=30,
    )
    defaults.update(kwargs)
    return LLMRequest(**defaults)


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


GEMINI_OK = {
    "candidates": [
        {
            "content": {"parts": [{"text": "reasoning", "thought": True}, {"text": '{"a": 1}'}]},
            "finishReason": "STOP",
            "groundingMetadata": {
                "groundingChunks": [
                    {"web": {"uri": "https://example.com/a", "title": "Example A"}},
                    {"retrievedContext": {"uri": "ignored"}},
                ]
            },
        }
    ],
    "usageMetadata": {"promptTokenCount": 11, "candidatesTokenCount": 7},
    "modelVersion": "gemini-3-flash-preview",
}


def test_gemini_payload_requests_json_with_schema():
    payload = GeminiProvider(session=FakeSession()).build_payload(
        _request(use_search=True, temperature=0.2, max_tokens=100)
    )

    config = payload["generationConfig"]
    assert config["responseMimeType"] == "application/json"
    assert config["responseSchema"] == {"type": "OBJECT", "properties": {"a": {"type": "NUMBER"}}}
    assert config["temperature"] == 0.2
    assert config["maxOutputTokens"] == 100
    assert payload["tools"] == [{"google_search": {}}]
    assert payload["contents"][0]["parts"][0]["text"] == "Find the gap"


def test_gemini_payload_without_search_has_no_tools():
    payload = GeminiProvider(session=FakeSession()).build_payload(_request())
    assert "tools" not in payload
    assert "temperature" not in payload["generationConfig"]


def test_gemini_generate_extracts_text_usage_and_sources():
    session = FakeSession(FakeResponse(200, GEMINI_OK))
    result = GeminiProvider(session=session).generate(_request(), "secret-key")

    assert result.text == '{"a": 1}'
    assert result.tokens_in == 11
    assert result.tokens_out == 7
    assert result.sources == [{"title": "Example A", "uri": "https://example.com/a"}]
    assert result.raw["finishReason"] == "STOP"

    call = session.calls[0]
    assert call["url"].endswith("/models/gemini-3-flash-preview:generateContent")
    assert call["headers"]["x-goog-api-key"] == "secret-key"
    assert "secret-key" not in call["url"]
    assert call["timeout"] == 30


def test_gemini_blocked_prompt_returns_empty_text():
    payload = {"promptFeedback": {"blockReason": "SAFETY"}}
    result = GeminiProvider(session=FakeSession(FakeResponse(200, payload))).generate(_request(), "k")

    assert result.text == ""
    assert result.raw["blockReason"] == "SAFETY"


def test_gemini_http_error_surfaces_api_message():
    response = FakeResponse(429, {"error": {"code": 429, "message": "Quota exceeded"}})
    with pytest.raises(ProviderError) as exc_info:
        GeminiProvider(session=FakeSession(response)).generate(_request(), "secret-key")

    assert "Quota exceeded" in str(exc_info.value)
    assert "429" in str(exc_info.value)
    assert "secret-key" not in str(exc_info.value)


def test_gemini_transport_error_becomes_provider_error():
    session = FakeSession(error=requests.ConnectionError("connection refused"))
    with pytest.raises(ProviderError):
        GeminiProvider(session=session).generate(_request(), "k")


class FakeOpenAIClient:
    instances = []

    def __init__(self, api_key):
        self.api_key = api_key
        self.params = None
        self.error = None
        self.responses = self
        FakeOpenAIClient.instances.append(self)

    def create(self, **params):
        self.params = params
        return SimpleNamespace(
            id="resp_1",
            model="gpt-4.1-mini",
            output_text='{"a": 1}',
            usage=SimpleNamespace(input_tokens=3, output_tokens=4),
        )


def test_openai_params_use_json_schema_format():
    provider = OpenAIProvider(client_factory=FakeOpenAIClient)
    params = provider.build_params(_request(model="gpt-4.1-mini", use_search=True, max_tokens=50))

    fmt = params["text"]["format"]
    assert fmt["type"] == "json_schema"
    assert fmt["schema"] == {"type": "object", "properties": {"a": {"type": "number"}}}
    assert params["tools"] == [{"type": "web_search"}]
    assert params["max_output_tokens"] == 50


def test_openai_generate_reads_output_text():
    FakeOpenAIClient.instances.clear()
    provider = OpenAIProvider(client_factory=FakeOpenAIClient)
    result = provider.generate(_request(model="gpt-4.1-mini"), "sk-test")

    assert result.text == '{"a": 1}'
    assert result.tokens_in == 3
    assert result.tokens_out == 4
    assert FakeOpenAIClient.instances[0].api_key == "sk-test"


def test_openai_sdk_error_becomes_provider_error():
    class FailingClient(FakeOpenAIClient):
        def create(self, **params):
            raise OpenAIError("invalid schema")

    with pytest.raises(ProviderError) as exc_info:
        OpenAIProvider(client_factory=FailingClient).generate(_request(model="gpt-4.1"), "sk-test")

    assert str(exc_info.value) == "invalid schema"
