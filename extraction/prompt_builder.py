# -*- coding: utf-8 -*-
"""
extraction.prompt_builder

Turns (parse mode, payload) into the pair of instructions sent to the model.

- build(mode, payload, reference_year, existing_ships)
    -> PromptPair(system, user) for /api/analyze
- build_daily_tally(payload)
    -> PromptPair(system, user) for the legacy /api/analyze-tally

Pure functions: no I/O, no logging. Image bytes are not embedded here; the
LLM client puts them in their own content block and uses `user` as the
text part next to the image.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, NamedTuple, Optional, Union

from . import prompts
from .errors import MissingContentError
from .schemas import ImagePayload, ParseMode, Payload


class PromptPair(NamedTuple):
    system: str
    user: str


def _payload_text(payload: Optional[Payload]) -> Optional[str]:
    if payload is None:
        raise MissingContentError()
    return payload.text


def build(
    mode: Union[ParseMode, str],
    payload: Optional[Payload],
    reference_year: Optional[int] = None,
    existing_ships: Optional[Iterable[str]] = None,
) -> PromptPair:
    """
    System instruction = schema + normalisation tables for the mode.
    User instruction   = the literal text (message mode) or a lead-in plus
                         the text (tally mode); a generic per-mode
                         instruction when an image arrives without text.
    """
    mode = ParseMode.parse(mode)
    text = _payload_text(payload)
    year = reference_year or date.today().year

    if mode.is_message:
        system = prompts.message_system_prompt(year, existing_ships)
        user = text if text else prompts.MESSAGE_IMAGE_INSTRUCTION
    else:
        system = prompts.tally_system_prompt()
        if text:
            user = f"{prompts.TALLY_USER_LEAD}\n\n{text}"
        else:
            user = prompts.TALLY_IMAGE_INSTRUCTION

    return PromptPair(system=system, user=user)


def build_daily_tally(payload: Optional[Payload]) -> PromptPair:
    text = _payload_text(payload)
    if isinstance(payload, ImagePayload) and not text:
        user = prompts.DAILY_TALLY_IMAGE_INSTRUCTION
    else:
        user = f"{prompts.DAILY_TALLY_TEXT_LEAD}\n\n{text}"
    return PromptPair(system=prompts.DAILY_TALLY_SYSTEM, user=user)
