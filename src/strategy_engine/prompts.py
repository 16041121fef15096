"""Prompt builders."""

from __future__ import annotations

import json
import string
from typing import Any

ENHANCEMENT_INSTRUCTION = (
    "CRITICAL INSTRUCTION FOR COMPETITIVE ADVANTAGE:\n"
    "You MUST generate a high-level 'aiEnhancement' object.\n"
    "1. 'the10xIdea': A strategy to make this tool 10x better using predictive AI, "
    "real-time intent decoding, or automated asymmetric data fusion.\n"
    "2. 'competitiveAdvantage': Why this idea creates an UNFAIR advantage that a "
    "competitor using basic automation cannot replicate.\n"
    "3. 'godTierPrompt': A massive (500+ words) prompt that the user can paste into "
    "an AI to build the actual code or system for this 10x enhancement."
)


class _SafeDict(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def template_fields(template: str) -> list[str]:
    names = [name for _, name, _, _ in string.Formatter().parse(template) if name]
    return list(dict.fromkeys(names))


def render_input(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def build_report_prompt(template: str, enhance: bool = True, **inputs: Any) -> str:
    missing = [name for name in template_fields(template) if inputs.get(name) is None]
    if missing:
        raise ValueError(f"Missing prompt inputs: {', '.join(missing)}")
    vars_map = _SafeDict({name: render_input(value) for name, value in inputs.items()})
    prompt = template.format_map(vars_map)
    if not enhance:
        return prompt
    return f"{prompt}\n\n{ENHANCEMENT_INSTRUCTION}"
