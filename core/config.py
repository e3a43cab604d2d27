# core/config.py
# -*- coding: utf-8 -*-

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# .env is loaded first, before anything reads the environment
load_dotenv()

# --------------------------------
# Paths / log directory
# --------------------------------

# project root directory
BASE_DIR = Path(__file__).resolve().parent.parent

# audit log directory (JSONL, one file per day)
LOG_DIR = Path(os.getenv("EXTRACTION_LOG_DIR", str(BASE_DIR / "data" / "logs")))
LOG_DIR.mkdir(parents=True, exist_ok=True)

AUDIT_LOG_ENABLED = os.getenv("AUDIT_LOG_ENABLED", "true").lower() == "true"

# --------------------------------
# Model provider settings
# --------------------------------

# 1) Anthropic Messages API (default provider)
ANTHROPIC_API_URL = os.getenv("ANTHROPIC_API_URL", "https://api.anthropic.com/v1/messages")
ANTHROPIC_VERSION = "2023-06-01"
CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-20250514")

# 2) OpenAI chat completions
OPENAI_CHAT_MODEL = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o")

# shared limits
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "4096"))
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))

PROVIDERS = ("anthropic", "openai")
DEFAULT_PROVIDER = "anthropic"


def get_provider() -> str:
    """Provider name from LLM_PROVIDER, read on every call."""
    provider = (os.getenv("LLM_PROVIDER") or DEFAULT_PROVIDER).strip().lower()
    if provider not in PROVIDERS:
        return DEFAULT_PROVIDER
    return provider


def get_api_key(provider: Optional[str] = None) -> Optional[str]:
    """
    Credential for the given provider, read from the process environment.

    Not cached at import time: a key removed from the environment is
    reported as missing on the very next request.
    CLAUDE_API_KEY is still accepted for older deployments.
    """
    provider = provider or get_provider()
    if provider == "openai":
        key = os.getenv("OPENAI_API_KEY")
    else:
        key = os.getenv("ANTHROPIC_API_KEY") or os.getenv("CLAUDE_API_KEY")
    key = (key or "").strip()
    return key or None
