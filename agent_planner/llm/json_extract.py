from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def extract_json_block(text: str) -> str | None:
    """Return the greedy outermost ``{...}`` span of a model reply, or None."""
    text = text.strip()
    fence_match = _FENCE_RE.search(text)
    if fence_match:
        text = fence_match.group(1).strip()
    if text.startswith("{") and text.endswith("}"):
        return text
    json_match = _OBJECT_RE.search(text)
    if json_match:
        return json_match.group(0)
    return None


def extract_json_object(text: str | None) -> dict[str, Any]:
    """Parse the JSON object embedded in ``text``.

    Raises ValueError when there is no object or it does not decode; callers
    at the planning boundary turn that into a fallback.
    """
    if text is None:
        raise ValueError("empty model response")
    if not isinstance(text, str):
        text = str(text)
    candidate = extract_json_block(text)
    if not candidate:
        raise ValueError("no JSON object in model response")
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ValueError(f"model response JSON did not decode: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValueError("model response JSON is not an object")
    return parsed
