"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

# Make the flat-layout packages importable without an install
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import core.logging as core_logging  # noqa: E402
import extraction.extraction_engine as engine  # noqa: E402
from app_fastapi import app  # noqa: E402

TEST_API_KEY = "test-key-do-not-log"


@pytest.fixture(autouse=True)
def provider_env(monkeypatch, tmp_path):
    """Known provider + credential, audit log redirected to a temp dir."""
    monkeypatch.setenv("LLM_PROVIDER", "anthropic")
    monkeypatch.setenv("ANTHROPIC_API_KEY", TEST_API_KEY)
    monkeypatch.delenv("CLAUDE_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(core_logging, "LOG_DIR", tmp_path)
    monkeypatch.setattr(core_logging, "AUDIT_LOG_ENABLED", True)
    return tmp_path


class FakeModel:
    """Stands in for llm_client.call_model; records every call."""

    def __init__(self):
        self.reply = '{"ok": true}'
        self.error = None
        self.calls: List[Dict[str, Any]] = []

    async def __call__(self, prompts, payload, api_key):
        self.calls.append({"prompts": prompts, "payload": payload, "api_key": api_key})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_model(monkeypatch) -> FakeModel:
    model = FakeModel()
    monkeypatch.setattr(engine, "call_model", model)
    return model


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)
