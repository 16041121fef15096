"""Configuration loading and defaults."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_SETTINGS: Dict[str, Any] = {
    "database": {
        "path": "data/strategy_engine.db",
    },
    "llm": {
        "provider": "gemini",
        "temperature": None,
        "max_tokens": 8192,
        "timeout_seconds": 60,
        "validate_shapes": False,
    },
    "models": {
        "gemini": {
            "fast": "gemini-3-flash-preview",
            "thorough": "gemini-3-pro-preview",
        },
        "openai": {
            "fast": "gpt-4.1-mini",
            "thorough": "gpt-4.1",
        },
    },
    "pricing": {
        "gemini:gemini-3-flash-preview": {"input_per_1k": 0.0005, "output_per_1k": 0.003},
        "gemini:gemini-3-pro-preview": {"input_per_1k": 0.002, "output_per_1k": 0.012},
        "openai:gpt-4.1-mini": {"input_per_1k": 0.0004, "output_per_1k": 0.0016},
        "openai:gpt-4.1": {"input_per_1k": 0.002, "output_per_1k": 0.008},
    },
    "logging": {
        "level": "INFO",
        "json": True,
    },
    "storage": {
        "guest_user": "guest",
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(settings_path: str = "config/settings.yaml") -> Dict[str, Any]:
    """Loads settings.yaml and merges it onto defaults."""
    merged = deepcopy(DEFAULT_SETTINGS)
    config_path = Path(settings_path)
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            user_cfg = yaml.safe_load(f) or {}
        if not isinstance(user_cfg, dict):
            raise ValueError(f"Settings file must contain a mapping: {settings_path}")
        merged = _deep_merge(merged, user_cfg)
    return merged


def model_pair(settings: Dict[str, Any], provider: str) -> Dict[str, str]:
    """Returns the {fast, thorough} model identifiers configured for a provider."""
    models = settings.get("models", {}).get(provider)
    if not isinstance(models, dict) or not models.get("fast") or not models.get("thorough"):
        raise ValueError(f"Models for provider '{provider}' must define both 'fast' and 'thorough'")
    return {"fast": str(models["fast"]), "thorough": str(models["thorough"])}
