"""
Helpers for pulling structured JSON out of free-form LLM replies.

Models often wrap the JSON we asked for in prose or code fences, so instead
of ``json.loads`` on the whole reply we scan for the first position where a
JSON array (or object) decodes cleanly and validate it against a schema.
"""
from __future__ import annotations

import json
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from .result import StageResult

T = TypeVar("T")

_decoder = json.JSONDecoder()


def _first_json_value(text: str, opener: str, expected: type) -> StageResult[Any]:
    start = text.find(opener)
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, expected):
                return StageResult.success(value)
        start = text.find(opener, start + 1)
    kind = "array" if expected is list else "object"
    return StageResult.failure("parse", f"no JSON {kind} found in model output")


def extract_json_array(text: str) -> StageResult[list[Any]]:
    """Return the first decodable JSON array embedded in ``text``."""
    return _first_json_value(text or "", "[", list)


def extract_json_object(text: str) -> StageResult[dict[str, Any]]:
    """Return the first decodable JSON object embedded in ``text``."""
    return _first_json_value(text or "", "{", dict)


def validate_payload(payload: Any, schema: type[T] | Any) -> StageResult[T]:
    """Validate an already-decoded payload against a pydantic-compatible type."""
    try:
        return StageResult.success(TypeAdapter(schema).validate_python(payload))
    except ValidationError as exc:
        return StageResult.failure("validate", f"{exc.error_count()} schema error(s): {exc.errors()[0]['msg']}")
