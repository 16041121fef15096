"""OpenAI Responses API provider."""

from __future__ import annotations

import time
from typing import Any, Dict

from openai import OpenAI, OpenAIError

from ..types import LLMRequest, LLMResult, ProviderError


class OpenAIProvider:
    name = "openai"
    credential_env = ("OPENAI_API_KEY",)

    def __init__(self, client_factory=OpenAI) -> None:
        self._client_factory = client_factory

    def build_params(self, request: LLMRequest) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": request.model,
            "input": [{"role": "user", "content": request.prompt}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "report",
                    "schema": request.shape.to_json_schema(),
                    "strict": False,
                }
            },
            "timeout": request.timeout_seconds,
        }
        if request.temperature is not None:
            params["temperature"] = request.temperature
        if request.max_tokens:
            params["max_output_tokens"] = request.max_tokens
        if request.use_search:
            params["tools"] = [{"type": "web_search"}]
        return params

    def generate(self, request: LLMRequest, api_key: str) -> LLMResult:
        client = self._client_factory(api_key=api_key)

        start = time.perf_counter()
        try:
            response = client.responses.create(**self.build_params(request))
        except OpenAIError as exc:
            raise ProviderError(str(exc)) from exc

        latency_ms = int((time.perf_counter() - start) * 1000)
        text = getattr(response, "output_text", "") or ""
        usage = getattr(response, "usage", None)

        tokens_in = int(getattr(usage, "input_tokens", 0) or 0)
        tokens_out = int(getattr(usage, "output_tokens", 0) or 0)

        return LLMResult(
            text=text.strip(),
            provider=self.name,
            model=getattr(response, "model", None) or request.model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            latency_ms=latency_ms,
            raw={"id": getattr(response, "id", None)},
        )
