"""LLM provider interface."""

from __future__ import annotations

from typing import Protocol, Tuple

from ..types import LLMRequest, LLMResult


class LLMProvider(Protocol):
    name: str
    credential_env: Tuple[str, ...]

    def generate(self, request: LLMRequest, api_key: str) -> LLMResult:
        ...
