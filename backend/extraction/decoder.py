"""Best-effort decoding of the model's answer into a job-info object.

The upstream payload is not under our control, so nothing here indexes
into it directly.  :func:`dig` walks a path through nested dicts/lists and
returns :data:`MISSING` instead of raising when any level is absent or of
the wrong type.

Fallback chain in :func:`decode_response`
-----------------------------------------
1. ``candidates[0].content.parts[0].text`` via :func:`dig`.
2. With text: parse the first fenced code block (```` ```json ... ``` ````).
3. With text but no fence: parse the whole text as JSON.  An object
   embedded in surrounding prose is not searched for.
4. Without text: return the raw payload itself so the caller can see what
   the model sent back.

Any parse failure, or JSON that is not an object, raises
:class:`DecodeError` with the raw payload as ``detail``.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any

from backend.extraction.errors import DecodeError


class _Missing:
    """Absence marker returned by :func:`dig`."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()

_TEXT_PATH = ("candidates", 0, "content", "parts", 0, "text")

# Optional language tag after the opening fence (```json, ```JSON, ```)
_FENCE = re.compile(r"```[\w-]*[ \t]*\r?\n?(.*?)```", re.DOTALL)


def dig(obj: Any, *path: Any) -> Any:
    """Follow *path* into *obj*, returning :data:`MISSING` on any miss.

    String steps index mappings; integer steps index sequences (but never
    strings).  Negative indices are not supported.

    >>> dig({"a": [{"b": 1}]}, "a", 0, "b")
    1
    >>> dig({"a": []}, "a", 0, "b")
    MISSING
    """
    current = obj
    for step in path:
        if isinstance(step, int):
            if (
                isinstance(current, Sequence)
                and not isinstance(current, (str, bytes))
                and 0 <= step < len(current)
            ):
                current = current[step]
                continue
            return MISSING
        if isinstance(current, Mapping) and step in current:
            current = current[step]
            continue
        return MISSING
    return current


def response_text(raw: Any) -> Any:
    """Return the model's answer text, or :data:`MISSING` if there is none."""
    text = dig(raw, *_TEXT_PATH)
    if not isinstance(text, str) or not text.strip():
        return MISSING
    return text


def _parse_object(candidate: str, raw: Any) -> dict[str, Any]:
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Could not parse the model response as JSON: {exc.msg}", detail=raw) from exc
    if not isinstance(value, dict):
        raise DecodeError(
            f"Expected a JSON object from the model, got {type(value).__name__}.",
            detail=raw,
        )
    return value


def decode_text(text: str, raw: Any) -> dict[str, Any]:
    """Decode answer *text*; *raw* is only used as error detail."""
    match = _FENCE.search(text)
    if match:
        return _parse_object(match.group(1).strip(), raw)
    # Unfenced text must be a bare object; prose around it is not scanned for braces.
    return _parse_object(text.strip(), raw)


def decode_response(raw: Any) -> dict[str, Any]:
    """Recover ``{company, jobTitle, location}`` from a raw model payload.

    Keys are not validated: missing ones stay missing and extra ones pass
    through.
    """
    text = response_text(raw)
    if text is MISSING:
        if isinstance(raw, dict):
            return raw
        raise DecodeError("The model response carried no text and is not a JSON object.", detail=raw)
    return decode_text(text, raw)
