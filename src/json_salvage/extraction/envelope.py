from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

# Where chat-completion style responses keep the model text, in priority order.
ENVELOPE_TEXT_PATHS: tuple[tuple[str | int, ...], ...] = (
    ("choices", 0, "message", "content"),
    ("choices", 0, "message", "reasoning_content"),
    ("content",),
    ("reasoning_content",),
)

UnwrapKind = Literal["text", "value", "miss"]


@dataclass(frozen=True)
class Unwrapped:
    kind: UnwrapKind
    payload: Any = None


def _dig(obj: Any, path: tuple[str | int, ...]) -> Any:
    cur = obj
    for key in path:
        if isinstance(key, int):
            if not isinstance(cur, (list, tuple)) or len(cur) <= key:
                return None
            cur = cur[key]
        else:
            if not isinstance(cur, Mapping):
                return None
            cur = cur.get(key)
        if cur is None:
            return None
    return cur


def join_content_parts(value: Any) -> str | None:
    """
    Text of chat-completion content parts (`[{"type": "text", "text": ...}]`,
    bare strings allowed), or None when `value` is not such a list.
    """
    if not isinstance(value, (list, tuple)) or not value:
        return None
    parts: list[str] = []
    for part in value:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, Mapping) and isinstance(part.get("text"), str):
            parts.append(part["text"])
        elif not (isinstance(part, Mapping) and "type" in part):
            return None
    return "\n".join(parts)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    joined = join_content_parts(value)
    if joined is not None:
        return joined.strip()
    if isinstance(value, (dict, list, tuple)):
        # Already structured: serialize so the text path can validate its shape.
        return json.dumps(value, ensure_ascii=False)
    return str(value).strip()


def envelope_text(envelope: Mapping[str, Any]) -> str | None:
    for path in ENVELOPE_TEXT_PATHS:
        found = _dig(envelope, path)
        if found is not None:
            return _as_text(found)
    return None


def unwrap_envelope(value: Mapping[str, Any] | list[Any] | tuple[Any, ...], expect_array: bool) -> Unwrapped:
    """
    Decide what to do with structured (non-text) input.

    - arrays pass through when an array is expected
    - objects yield their nested model text when one of ENVELOPE_TEXT_PATHS is set
    - objects with none of those and no `choices` key pass through as already parsed
    - anything else is a miss
    """
    if isinstance(value, (list, tuple)):
        if expect_array:
            return Unwrapped("value", value if isinstance(value, list) else list(value))
        return Unwrapped("miss")
    if expect_array or not isinstance(value, Mapping):
        return Unwrapped("miss")
    text = envelope_text(value)
    if text is not None:
        return Unwrapped("text", text)
    if "choices" not in value:
        return Unwrapped("value", value)
    return Unwrapped("miss")
