# -*- coding: utf-8 -*-
"""
extraction.normalizer

Turns the model's free-text reply into exactly one ExtractionResult.

1. strip surrounding whitespace
2. drop one leading ``` fence (optionally ```json) and one trailing fence
3. strict json.loads
4. parsed  -> StructuredResult(value), no schema check
   failed  -> RawFallbackResult(reply as received)

A reply that is not JSON is still a success for the caller: the raw text is
returned so a human can read it. Only one parse attempt is made, there is
no repair beyond fence stripping.
"""

import json
import re
from typing import Any, Optional

from .schemas import (
    EMPTY_REPLY_MESSAGE,
    FALLBACK_MESSAGE,
    ExtractionResult,
    RawFallbackResult,
    StructuredResult,
)

FENCE = "```"
LEADING_FENCE_RE = re.compile(r"^```(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
TRAILING_FENCE_RE = re.compile(r"\r?\n?```\s*$")


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"invalid JSON constant: {name}")


def strip_fences(text: str) -> str:
    """Remove a single wrapping code fence; other text is left alone."""
    text = text.strip()
    if not text.startswith(FENCE):
        return text
    text = LEADING_FENCE_RE.sub("", text, count=1)
    text = TRAILING_FENCE_RE.sub("", text, count=1)
    return text.strip()


def normalize(raw_text: Optional[str]) -> ExtractionResult:
    raw_text = raw_text or ""
    if not raw_text.strip():
        return RawFallbackResult(text=raw_text, message=EMPTY_REPLY_MESSAGE)

    candidate = strip_fences(raw_text)
    try:
        value = json.loads(candidate, parse_constant=_reject_constant)
    except ValueError:
        return RawFallbackResult(text=raw_text, message=FALLBACK_MESSAGE)

    return StructuredResult(value=value)
