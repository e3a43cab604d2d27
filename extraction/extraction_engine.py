# -*- coding: utf-8 -*-
"""
extraction.extraction_engine

The whole request pipeline in one place:

    payload check -> mode check -> prompt_builder -> llm_client -> normalizer

run_extraction() / run_daily_tally() always return exactly one
ExtractionResult. Known failures (ExtractionError) become FailureResult with
their own status; anything unexpected becomes a 500 FailureResult. Nothing
is raised to the caller.

The model call and the audit sink are parameters so routers and tests can
swap them.
"""

import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from core.logging import log_event, logger

from . import prompt_builder
from .errors import ExtractionError
from .llm_client import call_model
from .normalizer import normalize
from .prompt_builder import PromptPair
from .schemas import (
    AnalyzeRequest,
    DailyTallyRequest,
    ExtractionResult,
    FailureResult,
    ImagePayload,
    Payload,
)

ModelCall = Callable[..., Awaitable[str]]
AuditSink = Callable[[str, Dict[str, Any]], None]


def failure_from_error(err: ExtractionError) -> FailureResult:
    return FailureResult(status_code=err.status_code, error=err.error, details=err.details)


def _describe_payload(payload: Payload) -> Dict[str, Any]:
    """Metadata only, the payload itself is never logged."""
    info: Dict[str, Any] = {
        "payload_kind": payload.kind,
        "text_chars": len(payload.text or ""),
    }
    if isinstance(payload, ImagePayload):
        info["media_type"] = payload.media_type
        info["image_b64_chars"] = len(payload.data)
    return info


async def _complete(
    prompts: PromptPair,
    payload: Payload,
    api_key: str,
    call: ModelCall,
) -> ExtractionResult:
    reply = await call(prompts, payload, api_key=api_key)
    return normalize(reply)


async def _run(
    route: str,
    prepare: Callable[[Dict[str, Any]], Tuple[Payload, PromptPair]],
    api_key: str,
    call: Optional[ModelCall],
    audit: Optional[AuditSink],
    request_id: Optional[str],
) -> ExtractionResult:
    call = call or call_model
    audit = audit or log_event
    request_id = request_id or str(uuid.uuid4())
    started = time.monotonic()
    record: Dict[str, Any] = {"route": route}

    try:
        payload, prompts = prepare(record)
        result = await _complete(prompts, payload, api_key, call)
    except ExtractionError as e:
        logger.warning(f"[{route}] {request_id} failed: {e.status_code} {e.error}")
        result = failure_from_error(e)
    except Exception as e:
        logger.exception(f"[{route}] {request_id} unexpected error")
        result = FailureResult(status_code=500, error="Server error", details=str(e))

    record["outcome"] = result.kind
    record["status_code"] = result.to_response()[0]
    record["latency_ms"] = int((time.monotonic() - started) * 1000)
    try:
        audit(request_id, record)
    except OSError as e:
        # the audit trail must not turn a finished extraction into a 500
        logger.warning(f"audit log write failed: {e}")

    logger.info(f"[{route}] {request_id} -> {result.kind} ({record['latency_ms']} ms)")
    return result


# ============================================================
# /api/analyze
# ============================================================

async def run_extraction(
    req: AnalyzeRequest,
    api_key: str,
    call: Optional[ModelCall] = None,
    audit: Optional[AuditSink] = None,
    request_id: Optional[str] = None,
) -> ExtractionResult:
    def prepare(record: Dict[str, Any]):
        # content is checked before the mode, so an empty body is MissingContent
        payload = req.payload()
        record.update(_describe_payload(payload))
        mode = req.mode()
        record["mode"] = mode.value
        prompts = prompt_builder.build(
            mode,
            payload,
            reference_year=req.current_year,
            existing_ships=req.existing_ships,
        )
        return payload, prompts

    return await _run("analyze", prepare, api_key, call, audit, request_id)


# ============================================================
# /api/analyze-tally (legacy)
# ============================================================

async def run_daily_tally(
    req: DailyTallyRequest,
    api_key: str,
    call: Optional[ModelCall] = None,
    audit: Optional[AuditSink] = None,
    request_id: Optional[str] = None,
) -> ExtractionResult:
    def prepare(record: Dict[str, Any]):
        payload = req.payload()
        record.update(_describe_payload(payload))
        record["mode"] = "daily_tally"
        return payload, prompt_builder.build_daily_tally(payload)

    return await _run("analyze_tally", prepare, api_key, call, audit, request_id)
