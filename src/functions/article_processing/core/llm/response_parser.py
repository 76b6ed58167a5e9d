"""Parsing of the summarization model's JSON reply."""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from ..contracts.summary import AISummary
from ..errors import SummaryParseError

_FENCE_PATTERN = re.compile(r"^```(?:json|JSON)?\s*\n?(.*?)\n?```$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if present."""

    stripped = text.strip()
    match = _FENCE_PATTERN.match(stripped)
    return match.group(1).strip() if match else stripped


def parse_summary(text: str | None) -> AISummary:
    """Validate the model reply against ``AISummary``.

    Raises:
        SummaryParseError: For empty replies, invalid JSON, or a payload that
            is missing required fields or has out of range values.
    """

    if not text or not text.strip():
        raise SummaryParseError("Empty response from summarization model")

    body = strip_code_fence(text)
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise SummaryParseError(f"Response is not valid JSON: {exc.msg}") from exc

    if not isinstance(payload, dict):
        raise SummaryParseError("Response JSON must be an object")

    try:
        return AISummary.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in error["loc"]) or "<root>" for error in exc.errors())
        raise SummaryParseError(f"Invalid summary fields: {fields}") from exc
