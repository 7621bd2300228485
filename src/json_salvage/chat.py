from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from json_salvage.extraction.envelope import join_content_parts
from json_salvage.extraction.extractor import extract_json

_SKIPPED_ROLES = {"user", "system"}


def _is_model_message(msg: Mapping[str, Any]) -> bool:
    if msg.get("is_user"):
        return False
    return msg.get("role") not in _SKIPPED_ROLES


def message_text(msg: Mapping[str, Any]) -> str:
    """
    Text of a chat message in either host format ({"mes": ...}) or
    chat-completion format ({"content": ...}, possibly a list of parts).
    """
    raw = msg.get("mes")
    if raw is None:
        raw = msg.get("content")
    if isinstance(raw, str):
        return raw
    return join_content_parts(raw) or ""


def extract_from_chat(messages: Iterable[Mapping[str, Any]], expect_array: bool = False) -> Any | None:
    """
    Walk the chat newest first and return the JSON found in the latest model
    message that contains any. User and system messages are skipped.
    """
    for msg in reversed(list(messages)):
        if not isinstance(msg, Mapping) or not _is_model_message(msg):
            continue
        text = message_text(msg)
        if not text.strip():
            continue
        found = extract_json(text, expect_array)
        if found is not None:
            return found
    return None
