"""Google Gemini REST provider with schema-constrained JSON output."""

from __future__ import annotations

import time
from typing import Any, Dict, List

import requests

from ..types import LLMRequest, LLMResult, ProviderError

API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProvider:
    name = "gemini"
    credential_env = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")

    def __init__(self, base_url: str = API_BASE, session: requests.Session | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()

    def build_payload(self, request: LLMRequest) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {
            "responseMimeType": "application/json",
            "responseSchema": request.shape.to_gemini(),
        }
        if request.temperature is not None:
            generation_config["temperature"] = request.temperature
        if request.max_tokens:
            generation_config["maxOutputTokens"] = request.max_tokens

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
            "generationConfig": generation_config,
        }
        if request.use_search:
            payload["tools"] = [{"google_search": {}}]
        return payload

    def generate(self, request: LLMRequest, api_key: str) -> LLMResult:
        url = f"{self._base_url}/models/{request.model}:generateContent"
        headers = {
            "x-goog-api-key": api_key,
            "content-type": "application/json",
        }

        start = time.perf_counter()
        try:
            res = self._session.post(
                url,
                headers=headers,
                json=self.build_payload(request),
                timeout=request.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ProviderError(f"Gemini request failed: {exc}") from exc

        if res.status_code >= 400:
            raise ProviderError(_error_message(res))
        try:
            data = res.json()
        except ValueError as exc:
            raise ProviderError("Gemini returned a non-JSON envelope") from exc

        latency_ms = int((time.perf_counter() - start) * 1000)
        candidates = data.get("candidates") or []
        first = (candidates[0] if candidates else None) or {}
        text = ""
        sources: List[Dict[str, str]] = []
        if first:
            parts = (first.get("content") or {}).get("parts") or []
            text = "".join(
                part.get("text", "")
                for part in parts
                if isinstance(part, dict) and not part.get("thought")
            )
            sources = _grounding_sources(first.get("groundingMetadata") or {})

        usage = data.get("usageMetadata", {})
        tokens_in = int(usage.get("promptTokenCount", 0) or 0)
        tokens_out = int(usage.get("candidatesTokenCount", 0) or 0)

        return LLMResult(
            text=text.strip(),
            provider=self.name,
            model=data.get("modelVersion") or request.model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            latency_ms=latency_ms,
            sources=sources,
            raw={
                "responseId": data.get("responseId"),
                "finishReason": first.get("finishReason"),
                "blockReason": (data.get("promptFeedback") or {}).get("blockReason"),
            },
        )


def _grounding_sources(metadata: Dict[str, Any]) -> List[Dict[str, str]]:
    sources: List[Dict[str, str]] = []
    for chunk in metadata.get("groundingChunks") or []:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if web and web.get("uri"):
            sources.append({"title": web.get("title") or web["uri"], "uri": web["uri"]})
    return sources


def _error_message(res: requests.Response) -> str:
    try:
        body = res.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return f"Gemini API error (HTTP {res.status_code}): {error['message']}"
    return f"Gemini API error (HTTP {res.status_code})"
