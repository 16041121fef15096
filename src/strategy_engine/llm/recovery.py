"""
JSON recovery for model output.

Providers sometimes wrap structured output in markdown fences or prose even
when asked for JSON only. These helpers isolate the JSON payload before it is
parsed.
"""

from __future__ import annotations

import json
import re
from typing import Any

from .types import ErrorKind, GenerationError

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)

_CLOSERS = {"{": "}", "[": "]"}


def strip_code_fences(text: str) -> str:
    """
    Remove ```json / ``` markers anywhere in the text.

    Example: "```json\\n{\\"a\\": 1}\\n```" -> "{\\"a\\": 1}"
    """
    return _FENCE_RE.sub("", text).strip()


def is_array_payload(text: str) -> bool:
    """True when the first '[' comes before the first '{' (or there is no '{')."""
    first_bracket = text.find("[")
    if first_bracket == -1:
        return False
    first_brace = text.find("{")
    return first_brace == -1 or first_bracket < first_brace


def find_value_end(text: str, start: int) -> int | None:
    """
    Walk from the bracket at ``start`` to the bracket that closes it.

    Tracks nesting and string/escape state so braces inside string literals
    are ignored. Returns the index of the closing bracket, or None when the
    value is truncated or the brackets do not pair up.
    """
    stack: list[str] = []
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in ("}", "]"):
            if not stack or stack.pop() != ch:
                return None
            if not stack:
                return idx
    return None


def recover_json(text: str) -> str:
    """
    Best-effort extraction of a JSON object or array from model text.

    Strategy:
    1. Strip code fences.
    2. Decide array vs object from whichever opening bracket comes first.
    3. Take the first complete top-level value starting at the first opening
       bracket of that kind.
    4. If that value never closes, fall back to first-open through last-close.
    5. If no bracket pair exists, return the fence-stripped text as-is; the
       caller's parse step reports the failure.
    """
    cleaned = strip_code_fences(text)
    open_char = "[" if is_array_payload(cleaned) else "{"
    close_char = _CLOSERS[open_char]

    start = cleaned.find(open_char)
    last = cleaned.rfind(close_char)
    if start == -1 or last < start:
        return cleaned

    end = find_value_end(cleaned, start)
    if end is None:
        end = last
    return cleaned[start:end + 1]


def decode_json(text: str) -> Any:
    """Recover and parse JSON, raising a MALFORMED_RESPONSE GenerationError on failure."""
    recovered = recover_json(text)
    try:
        return json.loads(recovered)
    except json.JSONDecodeError as exc:
        raise GenerationError(ErrorKind.MALFORMED_RESPONSE, detail=str(exc)) from exc
