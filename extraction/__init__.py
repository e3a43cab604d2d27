# -*- coding: utf-8 -*-
"""
extraction package

Turns shipping emails, WhatsApp messages and tally/discharge reports (text
or image) into structured JSON with the help of an external LLM.

Callers (routers, main.py) normally only use:

- run_extraction(req, api_key):
    validates the request, builds the prompts, calls the model once and
    normalises the reply into one ExtractionResult.
- run_daily_tally(req, api_key):
    same pipeline for the legacy per-shift tally format.

Modules:

- schemas           : ParseMode, payloads, request bodies, result variants
- errors            : failure taxonomy with HTTP status codes
- prompts           : schema texts, synonym tables, worked examples
- prompt_builder    : (mode, payload) -> (system, user) instructions
- llm_client        : Anthropic / OpenAI call wrappers
- normalizer        : model reply -> StructuredResult / RawFallbackResult
- extraction_engine : the pipeline and its error boundary
"""

from .extraction_engine import run_daily_tally, run_extraction

__all__ = ["run_extraction", "run_daily_tally"]
