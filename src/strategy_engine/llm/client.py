"""
Structured generation client.

Turns (prompt, response shape, quality mode) into a decoded JSON value or a
classified GenerationError. One request per call, raced against a wall-clock
timeout; no retries. Callers decide whether to retry or surface the message.
"""

from __future__ import annotations

import os
import sqlite3
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Dict, Mapping

from ..config import model_pair
from ..logger import get_logger
from ..models import log_llm_call
from ..shapes import ShapeDescriptor
from .providers.base import LLMProvider
from .providers.gemini_provider import GeminiProvider
from .providers.openai_provider import OpenAIProvider
from .recovery import decode_json
from .types import (
    ErrorKind,
    GenerationError,
    LLMRequest,
    LLMResult,
    ProviderError,
    QualityMode,
    StructuredResult,
)

logger = get_logger(__name__)

PROVIDER_FACTORIES: Dict[str, Callable[[], Any]] = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
}

DEFAULT_TIMEOUT_SECONDS = 60.0


class StructuredGenerationClient:
    def __init__(
        self,
        provider: LLMProvider,
        models: Mapping[str, str],
        *,
        api_key: str | None = None,
        environ: Mapping[str, str] | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        temperature: float | None = None,
        max_tokens: int | None = None,
        validate_shapes: bool = False,
        conn=None,
        pricing: Mapping[str, Any] | None = None,
    ) -> None:
        if not models.get("fast") or not models.get("thorough"):
            raise ValueError("Both 'fast' and 'thorough' model identifiers are required")
        self.provider = provider
        self.models = {"fast": models["fast"], "thorough": models["thorough"]}
        self.timeout_seconds = float(timeout_seconds)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.validate_shapes = validate_shapes
        self.conn = conn
        self.pricing = dict(pricing or {})
        self._api_key = api_key
        self._environ = environ
        self._inflight: set[ThreadPoolExecutor] = set()
        self._inflight_lock = threading.Lock()
        self._ledger_lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Dict[str, Any],
        conn=None,
        providers: Mapping[str, Any] | None = None,
        api_key: str | None = None,
    ) -> "StructuredGenerationClient":
        llm_cfg = settings.get("llm", {})
        provider_name = str(llm_cfg.get("provider", "gemini"))
        if providers and provider_name in providers:
            provider = providers[provider_name]
        elif provider_name in PROVIDER_FACTORIES:
            provider = PROVIDER_FACTORIES[provider_name]()
        else:
            available = ", ".join(sorted(set(PROVIDER_FACTORIES) | set(providers or {})))
            raise ValueError(f"Unknown LLM provider '{provider_name}'. Available: {available}")

        max_tokens = llm_cfg.get("max_tokens")
        temperature = llm_cfg.get("temperature")
        return cls(
            provider,
            model_pair(settings, provider_name),
            api_key=api_key,
            timeout_seconds=float(llm_cfg.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
            temperature=float(temperature) if temperature is not None else None,
            max_tokens=int(max_tokens) if max_tokens else None,
            validate_shapes=bool(llm_cfg.get("validate_shapes", False)),
            conn=conn,
            pricing=settings.get("pricing", {}),
        )

    def resolve_model(self, quality_mode: QualityMode) -> str:
        if quality_mode is QualityMode.FAST:
            return self.models["fast"]
        if quality_mode is QualityMode.THOROUGH:
            return self.models["thorough"]
        raise ValueError(f"Unknown quality mode: {quality_mode!r}")

    def _resolve_credential(self) -> str | None:
        if self._api_key:
            return self._api_key
        env = self._environ if self._environ is not None else os.environ
        for name in getattr(self.provider, "credential_env", ()):
            value = env.get(name)
            if value:
                return value
        return None

    def generate(
        self,
        prompt: str,
        shape: ShapeDescriptor,
        quality_mode: QualityMode,
        *,
        use_search: bool = False,
        validate: bool | None = None,
        meta: Dict[str, Any] | None = None,
    ) -> Any:
        """Returns the decoded JSON value; raises GenerationError on any failure."""
        return self.generate_detailed(
            prompt,
            shape,
            quality_mode,
            use_search=use_search,
            validate=validate,
            meta=meta,
        ).data

    def generate_detailed(
        self,
        prompt: str,
        shape: ShapeDescriptor,
        quality_mode: QualityMode,
        *,
        use_search: bool = False,
        validate: bool | None = None,
        meta: Dict[str, Any] | None = None,
    ) -> StructuredResult:
        meta = dict(meta or {})
        provider_name = getattr(self.provider, "name", type(self.provider).__name__)

        api_key = self._resolve_credential()
        if not api_key:
            logger.error(
                "llm.generate.error",
                extra={
                    "event": "llm.generate.error",
                    "provider": provider_name,
                    "error_kind": ErrorKind.MISSING_CREDENTIAL.value,
                    "credential_env": list(getattr(self.provider, "credential_env", ())),
                },
            )
            raise GenerationError(ErrorKind.MISSING_CREDENTIAL)

        request = LLMRequest(
            prompt=prompt,
            shape=shape,
            quality_mode=quality_mode,
            model=self.resolve_model(quality_mode),
            use_search=use_search,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout_seconds=self.timeout_seconds,
            meta=meta,
        )
        logger.info(
            "llm.generate.start",
            extra={
                "event": "llm.generate.start",
                "provider": provider_name,
                "model": request.model,
                "quality_mode": quality_mode.value,
                "use_search": use_search,
                "meta": meta,
            },
        )

        start = time.perf_counter()
        try:
            result = self._dispatch(request, api_key)
            if not result.text or not result.text.strip():
                raise GenerationError(ErrorKind.EMPTY_RESPONSE, detail=_describe_empty(result))
            data = decode_json(result.text)
            should_validate = self.validate_shapes if validate is None else validate
            if should_validate:
                issues = shape.conformance_issues(data)
                if issues:
                    raise GenerationError(ErrorKind.SCHEMA_MISMATCH, detail="; ".join(issues[:25]))
        except GenerationError as exc:
            logger.error(
                "llm.generate.error",
                extra={
                    "event": "llm.generate.error",
                    "provider": provider_name,
                    "model": request.model,
                    "error_kind": exc.kind.value,
                    "error_message": str(exc),
                    "error_detail": exc.detail,
                    "elapsed_ms": int((time.perf_counter() - start) * 1000),
                    "meta": meta,
                },
            )
            raise

        logger.info(
            "llm.generate.success",
            extra={
                "event": "llm.generate.success",
                "provider": result.provider,
                "model": result.model,
                "tokens_in": result.tokens_in,
                "tokens_out": result.tokens_out,
                "latency_ms": result.latency_ms,
                "sources": len(result.sources),
                "meta": meta,
            },
        )
        self._record_usage(result, quality_mode, meta)
        return StructuredResult(data=data, result=result)

    def _dispatch(self, request: LLMRequest, api_key: str) -> LLMResult:
        # One worker per request: an abandoned call never holds a slot another call needs.
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="llm-generate")
        with self._inflight_lock:
            self._inflight.add(executor)
        future = executor.submit(self.provider.generate, request, api_key)
        future.add_done_callback(lambda _: self._release(executor))
        try:
            return future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError as exc:
            # The worker keeps running until the provider returns; nobody waits for it.
            raise GenerationError(
                ErrorKind.TIMEOUT,
                detail=f"No response from {request.model} after {self.timeout_seconds:g}s",
            ) from exc
        except ProviderError as exc:
            raise GenerationError(ErrorKind.PROVIDER_ERROR, str(exc) or None, detail=repr(exc)) from exc
        except Exception as exc:
            raise GenerationError(ErrorKind.PROVIDER_ERROR, detail=repr(exc)) from exc
        finally:
            executor.shutdown(wait=False)

    def _release(self, executor: ThreadPoolExecutor) -> None:
        with self._inflight_lock:
            self._inflight.discard(executor)

    def _estimate_cost(self, provider: str, model: str, tokens_in: int, tokens_out: int) -> float:
        pricing = self.pricing.get(f"{provider}:{model}")
        if not pricing:
            return 0.0
        in_price = float(pricing.get("input_per_1k", 0.0))
        out_price = float(pricing.get("output_per_1k", 0.0))
        return ((tokens_in / 1000.0) * in_price) + ((tokens_out / 1000.0) * out_price)

    def _record_usage(self, result: LLMResult, quality_mode: QualityMode, meta: Dict[str, Any]) -> None:
        """Best-effort ledger write; a failed write never costs the caller a good result."""
        if self.conn is None:
            return
        try:
            with self._ledger_lock:
                log_llm_call(
                    self.conn,
                    report_kind=str(meta.get("report_kind", "adhoc")),
                    provider=result.provider,
                    model=result.model,
                    quality_mode=quality_mode.value,
                    tokens_in=result.tokens_in,
                    tokens_out=result.tokens_out,
                    cost_usd=self._estimate_cost(result.provider, result.model, result.tokens_in, result.tokens_out),
                    latency_ms=result.latency_ms,
                    meta=meta,
                )
        except sqlite3.Error as exc:
            logger.warning(
                "llm.usage.write_failed",
                extra={"event": "llm.usage.write_failed", "error": repr(exc), "meta": meta},
            )

    def close(self) -> None:
        """Drops any abandoned requests still running; they are not waited for."""
        with self._inflight_lock:
            pending = list(self._inflight)
            self._inflight.clear()
        for executor in pending:
            executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "StructuredGenerationClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _describe_empty(result: LLMResult) -> str:
    reasons = {k: v for k, v in result.raw.items() if k in ("finishReason", "blockReason") and v}
    if reasons:
        return ", ".join(f"{k}={v}" for k, v in reasons.items())
    return f"{result.provider}:{result.model} returned no text"
