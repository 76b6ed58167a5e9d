"""Data contracts for article content extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

# Method labels reported back to callers and persisted in logs
METHOD_JSON_LD = "json-ld"
METHOD_READABILITY = "readability"
METHOD_DOM = "dom"
METHOD_NOT_FOUND = "not_found"
METHOD_HTTP_ERROR = "http_error"
METHOD_TIMEOUT = "timeout"
METHOD_PARSE_FAILED = "parse_failed"
METHOD_ERROR = "error"

MIN_CONTENT_CHARS = 200


class ExtractionOptions(BaseModel):
    """Runtime options for a single extraction."""

    timeout_seconds: float = 25.0
    min_content_chars: int = MIN_CONTENT_CHARS

    model_config = ConfigDict(frozen=True)

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            msg = "timeout_seconds must be positive"
            raise ValueError(msg)
        return min(value, 60.0)

    @field_validator("min_content_chars")
    @classmethod
    def _validate_min_chars(cls, value: int) -> int:
        # Anything shorter than the floor is never an article body
        return max(value, MIN_CONTENT_CHARS)


@dataclass(slots=True)
class PageDocument:
    """A fetched HTML page handed to every extraction strategy."""

    url: str
    html: str
    soup: BeautifulSoup = field(repr=False)

    @classmethod
    def parse(cls, url: str, html: str) -> "PageDocument":
        return cls(url=url, html=html, soup=BeautifulSoup(html, "lxml"))


@dataclass(slots=True)
class ExtractionResult:
    """Outcome of an extraction attempt.

    ``content`` is ``None`` whenever no strategy produced acceptable text;
    ``method`` then explains why (``not_found``, ``http_error`` ...).
    """

    content: Optional[str]
    quality: float
    method: str
    error: Optional[str] = None

    @property
    def length(self) -> int:
        return len(self.content) if self.content else 0

    @property
    def succeeded(self) -> bool:
        return bool(self.content)

    @classmethod
    def empty(cls, method: str, error: Optional[str] = None) -> "ExtractionResult":
        return cls(content=None, quality=0.0, method=method, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "quality": round(self.quality, 3),
            "method": self.method,
            "length": self.length,
        }


def parse_options(raw_options: dict | ExtractionOptions | None) -> ExtractionOptions:
    """Create validated extraction options from raw input."""

    if isinstance(raw_options, ExtractionOptions):
        return raw_options
    try:
        return ExtractionOptions(**(raw_options or {}))
    except ValidationError as exc:
        msg = ", ".join(error["msg"] for error in exc.errors())
        raise ValueError(f"Invalid extraction options: {msg}") from exc
