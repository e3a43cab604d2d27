# core/logging.py
# -*- coding: utf-8 -*-

import sys
import json
import logging
from datetime import datetime
from typing import Any, Dict

from .config import AUDIT_LOG_ENABLED, LOG_DIR

# ------------------------------------------------
# Terminal logger
# ------------------------------------------------
logger = logging.getLogger("shipping_extraction")
logger.setLevel(logging.DEBUG)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

# keys that must never reach a log file
REDACTED_KEYS = {
    "api_key",
    "content",
    "text",
    "imageBase64",
    "image_base64",
    "raw",
    "reply",
    "parsed",
}


def redact(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Drop credential / user-content fields from a log record."""
    return {k: v for k, v in payload.items() if k not in REDACTED_KEYS}


def log_event(request_id: str, payload: Dict[str, Any]) -> None:
    """
    Append one JSONL audit record for a request.
    One file per UTC day, one line per request.
    """
    if not AUDIT_LOG_ENABLED:
        return

    now = datetime.utcnow()
    log_path = LOG_DIR / f"{now.strftime('%Y-%m-%d')}.jsonl"

    record = {
        "timestamp": now.isoformat(),
        "request_id": request_id,
        **redact(payload),
    }

    with log_path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(record, ensure_ascii=False) + "\n")
