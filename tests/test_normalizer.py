"""
Tests for the model-reply normalizer
"""
import pytest

from extraction.normalizer import normalize, strip_fences
from extraction.schemas import (
    EMPTY_REPLY_MESSAGE,
    FALLBACK_MESSAGE,
    RawFallbackResult,
    StructuredResult,
)


def test_plain_json_is_structured():
    reply = '{"vesselName": "OCEAN STAR", "dates": {"eta": {"iso": "2025-01-09T07:00:00"}}}'
    result = normalize(reply)

    assert isinstance(result, StructuredResult)
    assert result.value == {
        "vesselName": "OCEAN STAR",
        "dates": {"eta": {"iso": "2025-01-09T07:00:00"}},
    }


def test_json_tagged_fence_is_stripped():
    result = normalize('```json\n{"a":1}\n```')

    assert isinstance(result, StructuredResult)
    assert result.value == {"a": 1}


def test_untagged_fence_is_stripped():
    result = normalize('```\n{"remarks": ["Rain stopped operations 14:30-15:15"]}\n```')

    assert isinstance(result, StructuredResult)
    assert result.value == {"remarks": ["Rain stopped operations 14:30-15:15"]}


def test_fence_with_surrounding_whitespace():
    result = normalize('\n\n  ```JSON\n{"totalWeight": 5340}\n```  \n')

    assert isinstance(result, StructuredResult)
    assert result.value == {"totalWeight": 5340}


def test_prose_reply_falls_back_verbatim():
    reply = "Sorry, I cannot process this."
    result = normalize(reply)

    assert isinstance(result, RawFallbackResult)
    assert result.text == reply
    assert result.message == FALLBACK_MESSAGE


def test_fallback_keeps_original_reply_not_stripped_text():
    reply = '```json\n{"a": 1,,}\n```\n'
    result = normalize(reply)

    assert isinstance(result, RawFallbackResult)
    assert result.text == reply


@pytest.mark.parametrize("reply", ["", "   \n\t"])
def test_empty_reply_is_fallback_not_failure(reply):
    result = normalize(reply)

    assert isinstance(result, RawFallbackResult)
    assert result.text == reply
    assert result.message == EMPTY_REPLY_MESSAGE


def test_none_reply_is_treated_as_empty():
    result = normalize(None)

    assert isinstance(result, RawFallbackResult)
    assert result.text == ""


def test_multiple_json_fragments_are_not_repaired():
    reply = '{"a": 1}\n{"b": 2}'
    result = normalize(reply)

    assert isinstance(result, RawFallbackResult)
    assert result.text == reply


def test_json_embedded_in_prose_is_not_extracted():
    reply = 'Here is the data: {"a": 1}'

    assert isinstance(normalize(reply), RawFallbackResult)


def test_nan_is_not_valid_json():
    assert isinstance(normalize('{"weight": NaN}'), RawFallbackResult)


def test_non_object_json_is_still_structured():
    result = normalize("[1, 2, 3]")

    assert isinstance(result, StructuredResult)
    assert result.value == [1, 2, 3]


def test_strip_fences_leaves_unfenced_text_alone():
    assert strip_fences('  {"a": 1}  ') == '{"a": 1}'


def test_strip_fences_removes_only_one_pair():
    text = '```json\n```json\n{"a": 1}\n```\n```'
    assert strip_fences(text) == '```json\n{"a": 1}\n```'


def test_to_response_shapes():
    assert normalize('{"a": 1}').to_response() == (200, {"success": True, "parsed": {"a": 1}})
    assert normalize("nope").to_response() == (
        200,
        {"success": True, "raw": "nope", "parsed": None, "message": FALLBACK_MESSAGE},
    )
