# -*- coding: utf-8 -*-
"""
extraction.llm_client

Thin wrappers around the model providers. The pipeline only talks to the
model through call_model().

- anthropic (default): Messages API over httpx
- openai              : chat completions through the openai SDK

One request per call, no retries: a failure is raised as UpstreamError /
NoTextReplyError and surfaced to the caller immediately.
"""

from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI

from core.config import (
    ANTHROPIC_API_URL,
    ANTHROPIC_VERSION,
    CLAUDE_MODEL,
    LLM_MAX_TOKENS,
    LLM_TIMEOUT,
    OPENAI_CHAT_MODEL,
    get_provider,
)
from core.logging import logger

from .errors import NoTextReplyError, UpstreamError
from .prompt_builder import PromptPair
from .schemas import ImagePayload, Payload

# upstream error bodies can be long HTML pages
LOG_BODY_LIMIT = 200


# -------------------- Anthropic --------------------
def build_anthropic_messages(prompts: PromptPair, payload: Payload) -> List[Dict[str, Any]]:
    if isinstance(payload, ImagePayload):
        return [
            {
                "role": "user",
                "content": [
                    {
                        "type": "image",
                        "source": {
                            "type": "base64",
                            "media_type": payload.media_type,
                            "data": payload.data,
                        },
                    },
                    {"type": "text", "text": prompts.user},
                ],
            }
        ]
    return [{"role": "user", "content": prompts.user}]


def first_text_block(data: Dict[str, Any]) -> str:
    """Text of the first `text` block of a Messages API reply."""
    for block in data.get("content") or []:
        if isinstance(block, dict) and block.get("type") == "text":
            return block.get("text") or ""
    raise NoTextReplyError()


async def call_anthropic(
    prompts: PromptPair,
    payload: Payload,
    api_key: str,
    model: str = CLAUDE_MODEL,
    max_tokens: int = LLM_MAX_TOKENS,
    timeout: float = LLM_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    headers = {
        "Content-Type": "application/json",
        "x-api-key": api_key,
        "anthropic-version": ANTHROPIC_VERSION,
    }
    body = {
        "model": model,
        "max_tokens": max_tokens,
        "system": prompts.system,
        "messages": build_anthropic_messages(prompts, payload),
    }

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            res = await client.post(ANTHROPIC_API_URL, headers=headers, json=body)
    except httpx.TimeoutException as e:
        logger.warning(f"[Anthropic] timeout after {timeout}s")
        raise UpstreamError(status_code=504, details=f"Upstream timeout: {e}") from e
    except httpx.HTTPError as e:
        logger.warning(f"[Anthropic] network error: {type(e).__name__}")
        raise UpstreamError(status_code=502, details=str(e)) from e

    if res.status_code >= 300:
        logger.error(f"[Anthropic] API error {res.status_code}: {res.text[:LOG_BODY_LIMIT]}")
        raise UpstreamError(status_code=res.status_code, details=res.text)

    try:
        data = res.json()
    except ValueError as e:
        raise UpstreamError(details="Upstream reply is not JSON") from e

    return first_text_block(data)


# -------------------- OpenAI --------------------
def build_openai_messages(prompts: PromptPair, payload: Payload) -> List[Dict[str, Any]]:
    if isinstance(payload, ImagePayload):
        user_content: Any = [
            {
                "type": "image_url",
                "image_url": {"url": f"data:{payload.media_type};base64,{payload.data}"},
            },
            {"type": "text", "text": prompts.user},
        ]
    else:
        user_content = prompts.user
    return [
        {"role": "system", "content": prompts.system},
        {"role": "user", "content": user_content},
    ]


async def call_openai(
    prompts: PromptPair,
    payload: Payload,
    api_key: str,
    model: str = OPENAI_CHAT_MODEL,
    max_tokens: int = LLM_MAX_TOKENS,
    timeout: float = LLM_TIMEOUT,
    client: Optional[AsyncOpenAI] = None,
) -> str:
    """
    OpenAI chat wrapper. SDK retries are disabled, one request per call.
    A client built here is closed before returning; an injected one is left open.
    """
    if client is None:
        async with AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0) as owned:
            return await _openai_chat(owned, prompts, payload, model, max_tokens, timeout)
    return await _openai_chat(client, prompts, payload, model, max_tokens, timeout)


async def _openai_chat(
    client: AsyncOpenAI,
    prompts: PromptPair,
    payload: Payload,
    model: str,
    max_tokens: int,
    timeout: float,
) -> str:
    try:
        resp = await client.chat.completions.create(
            model=model,
            messages=build_openai_messages(prompts, payload),
            max_tokens=max_tokens,
        )
    except openai.APITimeoutError as e:
        logger.warning(f"[OpenAI] timeout after {timeout}s")
        raise UpstreamError(status_code=504, details=f"Upstream timeout: {e}") from e
    except openai.APIStatusError as e:
        logger.error(f"[OpenAI] API error {e.status_code}: {e.response.text[:LOG_BODY_LIMIT]}")
        raise UpstreamError(status_code=e.status_code, details=e.response.text) from e
    except openai.APIConnectionError as e:
        logger.warning(f"[OpenAI] network error: {type(e).__name__}")
        raise UpstreamError(status_code=502, details=str(e)) from e

    if not resp.choices or resp.choices[0].message.content is None:
        raise NoTextReplyError()
    return resp.choices[0].message.content


# -------------------- dispatch --------------------
async def call_model(
    prompts: PromptPair,
    payload: Payload,
    api_key: str,
    provider: Optional[str] = None,
) -> str:
    provider = provider or get_provider()
    if provider == "openai":
        return await call_openai(prompts, payload, api_key=api_key)
    return await call_anthropic(prompts, payload, api_key=api_key)
