# -*- coding: utf-8 -*-
"""
extraction.errors

Failure taxonomy of the extraction pipeline.

Every error carries the HTTP status and the `error` string that the gateway
returns, so converting an exception into a response is a plain attribute
read (see extraction_engine.failure_from_error).

An unparsable model reply is *not* an error: the normalizer turns it into a
RawFallbackResult instead.
"""

from typing import Optional


class ExtractionError(Exception):
    """Base class: status_code + error message + optional diagnostic details."""

    status_code: int = 500
    error: str = "Server error"

    def __init__(
        self,
        error: Optional[str] = None,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.error)


class InvalidModeError(ExtractionError):
    status_code = 400
    error = 'Invalid parseType. Use "email", "message", or "tally"'


class MissingContentError(ExtractionError):
    status_code = 400
    error = "Provide either text content or image"


class MalformedRequestError(ExtractionError):
    status_code = 400
    error = "Invalid request body"


class MissingCredentialError(ExtractionError):
    status_code = 500
    error = "API key not configured"


class UpstreamError(ExtractionError):
    """Non-success reply, timeout or network failure talking to the provider."""

    status_code = 502
    error = "API error"


class NoTextReplyError(ExtractionError):
    status_code = 500
    error = "No text response"
