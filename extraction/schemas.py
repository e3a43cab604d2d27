# -*- coding: utf-8 -*-
"""
extraction.schemas

Types that flow through the pipeline.

- ParseMode            : closed set of parse modes (email / message / tally)
- TextPayload          : plain text to analyse
- ImagePayload         : base64 image + media type (+ optional caption text)
- AnalyzeRequest       : body of POST /api/analyze
- DailyTallyRequest    : body of POST /api/analyze-tally
- StructuredResult / RawFallbackResult / FailureResult
                       : the three ExtractionResult variants, each knows its
                         own HTTP status and JSON body
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidModeError, MissingContentError

DEFAULT_MEDIA_TYPE = "image/jpeg"
FALLBACK_MESSAGE = "Could not parse as JSON, returning raw analysis"
EMPTY_REPLY_MESSAGE = "Empty response from model"


# ============================================================
# Parse mode
# ============================================================

class ParseMode(str, Enum):
    EMAIL = "email"
    MESSAGE = "message"
    TALLY = "tally"

    @classmethod
    def parse(cls, value: Any) -> "ParseMode":
        """Exact-match lookup; anything unrecognised is InvalidModeError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise InvalidModeError() from None

    @property
    def is_message(self) -> bool:
        """email and message share one schema."""
        return self in (ParseMode.EMAIL, ParseMode.MESSAGE)


# ============================================================
# Payload variants
# ============================================================

class TextPayload(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class ImagePayload(BaseModel):
    kind: Literal["image"] = "image"
    data: str                                   # base64, never decoded here
    media_type: str = DEFAULT_MEDIA_TYPE
    text: Optional[str] = None                  # caption sent next to the image


Payload = Union[TextPayload, ImagePayload]


def _present(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value if value.strip() else None


def make_payload(
    content: Optional[str] = None,
    image_base64: Optional[str] = None,
    mime_type: Optional[str] = None,
) -> Payload:
    """
    Pick the payload variant. Image wins when both are given, the text then
    rides along as the image caption.
    """
    content = _present(content)
    image_base64 = _present(image_base64)

    if image_base64:
        return ImagePayload(
            data=image_base64,
            media_type=_present(mime_type) or DEFAULT_MEDIA_TYPE,
            text=content,
        )
    if content:
        return TextPayload(text=content)
    raise MissingContentError()


# ============================================================
# Request bodies
# ============================================================

class AnalyzeRequest(BaseModel):
    """
    Body of POST /api/analyze.
    - parseType     : "email" | "message" | "tally"
    - content       : raw text (email body, WhatsApp message, tally report)
    - imageBase64   : screenshot / scan, base64 without data: prefix
    - mimeType      : media type of the image (default image/jpeg)
    - existingShips : vessel names already known to the caller
    - currentYear   : reference year for dates written without a year
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    parse_type: Optional[Any] = Field(
        default=None,
        alias="parseType",
        examples=["email"],
    )
    content: Optional[str] = Field(
        default=None,
        examples=["MV OCEAN STAR ETA Ashdod 9th Jan 0700lt, 3,200 MT steel coils"],
    )
    image_base64: Optional[str] = Field(default=None, alias="imageBase64")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    existing_ships: Optional[List[str]] = Field(default=None, alias="existingShips")
    current_year: Optional[int] = Field(default=None, alias="currentYear")

    def payload(self) -> Payload:
        return make_payload(self.content, self.image_base64, self.mime_type)

    def mode(self) -> ParseMode:
        return ParseMode.parse(self.parse_type)


class DailyTallyRequest(BaseModel):
    """Body of the legacy POST /api/analyze-tally endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Optional[str] = Field(default=None, examples=["text"])
    content: Optional[str] = None
    image_base64: Optional[str] = Field(default=None, alias="imageBase64")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")

    def payload(self) -> Payload:
        # the legacy contract is strict: the declared type must match the field
        if self.type == "image" and _present(self.image_base64):
            return make_payload(image_base64=self.image_base64, mime_type=self.mime_type)
        if self.type == "text" and _present(self.content):
            return make_payload(content=self.content)
        raise MissingContentError("Invalid request: provide either text content or image")


# ============================================================
# ExtractionResult variants
# ============================================================

class StructuredResult(BaseModel):
    kind: Literal["structured"] = "structured"
    value: Any

    def to_response(self) -> Tuple[int, Dict[str, Any]]:
        return 200, {"success": True, "parsed": self.value}


class RawFallbackResult(BaseModel):
    kind: Literal["raw_fallback"] = "raw_fallback"
    text: str
    message: str = FALLBACK_MESSAGE

    def to_response(self) -> Tuple[int, Dict[str, Any]]:
        return 200, {
            "success": True,
            "raw": self.text,
            "parsed": None,
            "message": self.message,
        }


class FailureResult(BaseModel):
    kind: Literal["failure"] = "failure"
    status_code: int
    error: str
    details: Optional[str] = None

    def to_response(self) -> Tuple[int, Dict[str, Any]]:
        body: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return self.status_code, body


ExtractionResult = Union[StructuredResult, RawFallbackResult, FailureResult]
