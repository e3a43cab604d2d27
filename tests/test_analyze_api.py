"""
Tests for POST /api/analyze
"""
import json

import pytest

import extraction.prompt_builder as prompt_builder
from extraction.errors import UpstreamError
from extraction.schemas import ImagePayload, TextPayload

from conftest import TEST_API_KEY

URL = "/api/analyze"


def test_structured_reply(client, fake_model):
    fake_model.reply = '{"vesselName": "OCEAN STAR", "messageType": "ETA_UPDATE"}'

    res = client.post(URL, json={"parseType": "email", "content": "MV OCEAN STAR ETA 9th Jan"})

    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "parsed": {"vesselName": "OCEAN STAR", "messageType": "ETA_UPDATE"},
    }
    call = fake_model.calls[0]
    assert call["api_key"] == TEST_API_KEY
    assert call["payload"] == TextPayload(text="MV OCEAN STAR ETA 9th Jan")
    assert call["prompts"].user == "MV OCEAN STAR ETA 9th Jan"


def test_fenced_reply(client, fake_model):
    fake_model.reply = '```json\n{"dailyTotals": {"quantity": 785, "weight": 2072.544}}\n```'

    res = client.post(URL, json={"parseType": "tally", "content": "| Total Day | 785 |"})

    assert res.status_code == 200
    assert res.json()["parsed"] == {"dailyTotals": {"quantity": 785, "weight": 2072.544}}


def test_prose_reply_is_raw_fallback(client, fake_model):
    fake_model.reply = "Sorry, I cannot process this."

    res = client.post(URL, json={"parseType": "message", "content": "hello"})

    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "raw": "Sorry, I cannot process this.",
        "parsed": None,
        "message": "Could not parse as JSON, returning raw analysis",
    }


def test_empty_reply_is_raw_fallback(client, fake_model):
    fake_model.reply = ""

    res = client.post(URL, json={"parseType": "message", "content": "hello"})

    assert res.status_code == 200
    body = res.json()
    assert body["raw"] == ""
    assert body["parsed"] is None
    assert body["message"] == "Empty response from model"


def test_image_request(client, fake_model):
    res = client.post(
        URL,
        json={"parseType": "tally", "imageBase64": "aGVsbG8=", "mimeType": "image/png"},
    )

    assert res.status_code == 200
    payload = fake_model.calls[0]["payload"]
    assert payload == ImagePayload(data="aGVsbG8=", media_type="image/png")


def test_existing_ships_and_year_reach_the_prompt(client, fake_model):
    client.post(
        URL,
        json={
            "parseType": "email",
            "content": "ETA 9th Jan",
            "existingShips": ["OCEAN STAR", "BALTIC TRADER"],
            "currentYear": 2027,
        },
    )

    system = fake_model.calls[0]["prompts"].system
    assert "Current year is 2027" in system
    assert "OCEAN STAR, BALTIC TRADER" in system


@pytest.mark.parametrize("body", [{}, {"parseType": "email"}, {"parseType": "email", "content": "  "}])
def test_missing_content(client, fake_model, monkeypatch, body):
    def must_not_build(*args, **kwargs):
        raise AssertionError("prompt builder invoked")

    monkeypatch.setattr(prompt_builder, "build", must_not_build)

    res = client.post(URL, json=body)

    assert res.status_code == 400
    assert res.json() == {"error": "Provide either text content or image"}
    assert fake_model.calls == []


def test_empty_body_is_missing_content(client, fake_model):
    res = client.post(URL, content=b"", headers={"Content-Type": "application/json"})

    assert res.status_code == 400
    assert res.json()["error"] == "Provide either text content or image"


@pytest.mark.parametrize("parse_type", ["invoice", "EMAIL", "", None, 5, ["email"], {"x": 1}])
def test_invalid_mode(client, fake_model, parse_type):
    res = client.post(URL, json={"parseType": parse_type, "content": "hello"})

    assert res.status_code == 400
    assert res.json() == {"error": 'Invalid parseType. Use "email", "message", or "tally"'}
    assert fake_model.calls == []


@pytest.mark.parametrize(
    "body",
    [{}, {"parseType": "invoice"}, {"parseType": "email", "content": "hello"}],
)
def test_missing_credential_wins_over_everything(client, fake_model, monkeypatch, body):
    monkeypatch.delenv("ANTHROPIC_API_KEY")

    res = client.post(URL, json=body)

    assert res.status_code == 500
    assert res.json() == {"error": "API key not configured"}
    assert fake_model.calls == []


def test_missing_credential_with_broken_body(client, fake_model, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY")

    res = client.post(URL, content=b"{not json", headers={"Content-Type": "application/json"})

    assert res.status_code == 500


def test_legacy_claude_key_is_accepted(client, fake_model, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY")
    monkeypatch.setenv("CLAUDE_API_KEY", "legacy-key")

    res = client.post(URL, json={"parseType": "email", "content": "hello"})

    assert res.status_code == 200
    assert fake_model.calls[0]["api_key"] == "legacy-key"


def test_openai_provider_uses_its_own_key(client, fake_model, monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "openai")

    res = client.post(URL, json={"parseType": "email", "content": "hello"})
    assert res.status_code == 500

    monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
    res = client.post(URL, json={"parseType": "email", "content": "hello"})
    assert res.status_code == 200
    assert fake_model.calls[0]["api_key"] == "sk-openai"


def test_malformed_json_body(client, fake_model):
    res = client.post(URL, content=b"{not json", headers={"Content-Type": "application/json"})

    assert res.status_code == 400
    assert res.json()["error"] == "Invalid request body"


def test_non_object_body(client, fake_model):
    res = client.post(URL, json=["email", "hello"])

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid request body", "details": "Body must be a JSON object"}


def test_wrongly_typed_field(client, fake_model):
    res = client.post(URL, json={"parseType": "email", "content": "x", "currentYear": "next"})

    assert res.status_code == 400
    assert "currentYear" in res.json()["details"]


def test_upstream_error_is_surfaced(client, fake_model):
    fake_model.error = UpstreamError(status_code=401, details='{"error": "invalid x-api-key"}')

    res = client.post(URL, json={"parseType": "email", "content": "hello"})

    assert res.status_code == 401
    assert res.json() == {"error": "API error", "details": '{"error": "invalid x-api-key"}'}


def test_unexpected_error_is_500_not_crash(client, fake_model):
    fake_model.error = KeyError("content")

    res = client.post(URL, json={"parseType": "email", "content": "hello"})

    assert res.status_code == 500
    assert res.json()["error"] == "Server error"


def test_options_preflight(client):
    res = client.options(URL)

    assert res.status_code == 200
    assert res.content == b""


def test_cors_preflight(client):
    res = client.options(
        URL,
        headers={"Origin": "https://dashboard.example", "Access-Control-Request-Method": "POST"},
    )

    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == "*"


def test_other_methods_not_allowed(client):
    for method in ("get", "put", "delete"):
        res = getattr(client, method)(URL)
        assert res.status_code == 405
        assert "error" in res.json()


def test_audit_log_has_no_secrets_or_content(client, fake_model, provider_env):
    fake_model.reply = '{"vesselName": "SECRET VESSEL"}'

    client.post(URL, json={"parseType": "email", "content": "confidential cargo text"})

    lines = []
    for path in provider_env.glob("*.jsonl"):
        lines.extend(path.read_text(encoding="utf-8").splitlines())
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["route"] == "analyze"
    assert record["mode"] == "email"
    assert record["outcome"] == "structured"
    assert record["status_code"] == 200
    assert record["text_chars"] == len("confidential cargo text")
    assert TEST_API_KEY not in lines[0]
    assert "confidential cargo text" not in lines[0]
    assert "SECRET VESSEL" not in lines[0]


def test_health(client):
    res = client.get("/")

    assert res.status_code == 200
    assert res.json()["provider"] == "anthropic"
