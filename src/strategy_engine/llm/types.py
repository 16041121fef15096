"""Shared LLM data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from ..shapes import ShapeDescriptor


class QualityMode(str, Enum):
    """Latency/cost versus fidelity trade-off for one call."""

    FAST = "fast"
    THOROUGH = "thorough"

    @classmethod
    def from_turbo(cls, turbo: bool) -> "QualityMode":
        return cls.THOROUGH if turbo else cls.FAST


class ErrorKind(str, Enum):
    MISSING_CREDENTIAL = "missing_credential"
    TIMEOUT = "timeout"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_RESPONSE = "malformed_response"
    SCHEMA_MISMATCH = "schema_mismatch"
    PROVIDER_ERROR = "provider_error"


USER_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.MISSING_CREDENTIAL: "Deployment Error: API Key is missing",
    ErrorKind.TIMEOUT: "Request Timed Out",
    ErrorKind.EMPTY_RESPONSE: "AI returned an empty response.",
    ErrorKind.MALFORMED_RESPONSE: "AI returned a response that could not be read as JSON.",
    ErrorKind.SCHEMA_MISMATCH: "AI response did not match the expected report structure.",
    ErrorKind.PROVIDER_ERROR: "AI provider request failed.",
}


@dataclass
class LLMRequest:
    prompt: str
    shape: ShapeDescriptor
    quality_mode: QualityMode
    model: str
    use_search: bool = False
    temperature: float | None = None
    max_tokens: int | None = None
    timeout_seconds: float = 60
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LLMResult:
    text: str
    provider: str
    model: str
    tokens_in: int = 0
    tokens_out: int = 0
    latency_ms: int = 0
    sources: List[Dict[str, str]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class StructuredResult:
    data: Any
    result: LLMResult

    @property
    def sources(self) -> List[Dict[str, str]]:
        return self.result.sources


class ProviderError(RuntimeError):
    """Provider failed to return a generation."""


class GenerationError(RuntimeError):
    """Classified, user-presentable failure of one generation call.

    ``str(error)`` is safe to show to a person. ``detail`` holds the
    underlying diagnostic (parser message, conformance issues) for logs.
    """

    def __init__(self, kind: ErrorKind, message: str | None = None, detail: str | None = None) -> None:
        super().__init__(message or USER_MESSAGES[kind])
        self.kind = kind
        self.detail = detail
