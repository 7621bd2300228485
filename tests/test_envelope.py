from __future__ import annotations

from json_salvage.extraction import extract_json
from json_salvage.extraction.envelope import Unwrapped, envelope_text, unwrap_envelope


def _completion(message: dict) -> dict:
    return {"id": "chatcmpl-1", "choices": [{"index": 0, "message": message}]}


def test_envelope_message_content_is_unwrapped() -> None:
    assert extract_json({"choices": [{"message": {"content": '{"ok":true}'}}]}, False) == {"ok": True}


def test_envelope_reasoning_content_used_when_content_missing() -> None:
    env = _completion({"content": None, "reasoning_content": 'thinking... {"r": 1}'})
    assert extract_json(env) == {"r": 1}


def test_envelope_content_has_priority_over_reasoning() -> None:
    env = _completion({"content": '{"c": 1}', "reasoning_content": '{"r": 1}'})
    assert extract_json(env) == {"c": 1}


def test_top_level_content_fields() -> None:
    assert extract_json({"content": 'text {"k": 2}'}) == {"k": 2}
    assert extract_json({"reasoning_content": '{"k": 3}'}) == {"k": 3}


def test_structured_content_is_serialized_before_scanning() -> None:
    assert envelope_text({"content": {"a": 1}}) == '{"a": 1}'
    assert extract_json({"content": {"a": 1}}) == {"a": 1}


def test_plain_object_passes_through() -> None:
    obj = {"ok": True}
    assert extract_json(obj, False) is obj


def test_empty_dict_passes_through() -> None:
    assert extract_json({}) == {}


def test_envelope_without_usable_text_is_a_miss() -> None:
    assert extract_json({"choices": []}) is None
    assert extract_json(_completion({"content": "no json in this reply"})) is None


def test_array_input() -> None:
    assert extract_json([1, 2], True) == [1, 2]
    assert extract_json((1, 2), True) == [1, 2]
    assert extract_json([1, 2], False) is None
    assert extract_json({"content": "[1]"}, True) is None


def test_unwrap_envelope_kinds() -> None:
    assert unwrap_envelope({"content": " {} "}, False) == Unwrapped("text", "{}")
    assert unwrap_envelope({"a": 1}, False) == Unwrapped("value", {"a": 1})
    assert unwrap_envelope({"choices": None}, False) == Unwrapped("miss")
    assert unwrap_envelope({"a": 1}, True) == Unwrapped("miss")


def test_content_parts_are_joined_not_serialized() -> None:
    env = _completion({"content": [{"type": "text", "text": '{"a": 1}'}]})
    assert envelope_text(env) == '{"a": 1}'
    assert extract_json(env) == {"a": 1}


def test_content_parts_with_non_text_parts() -> None:
    parts = [{"type": "image_url", "image_url": {"url": "https://x.test/a.png"}}, {"type": "text", "text": "[1, 2]"}]
    assert extract_json(envelope_text({"content": parts}), True) == [1, 2]


def test_array_input_returned_as_is() -> None:
    arr = [{"a": 1}]
    assert extract_json(arr, True) is arr
