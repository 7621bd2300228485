from __future__ import annotations

import re
from typing import Any

from json_salvage.utils.strict_json import strict_loads

_SMART_DOUBLE_QUOTES_RE = re.compile("[\u201c\u201d]")
_SMART_SINGLE_QUOTES_RE = re.compile("[\u2018\u2019]")

# "key': / 'key": / 'key':
_KEY_DOUBLE_SINGLE_RE = re.compile(r"\"([^\"']+)'\s*:")
_KEY_SINGLE_DOUBLE_RE = re.compile(r"'([^\"']+)\"\s*:")
_KEY_SINGLE_RE = re.compile(r"([{,]\s*)'([^\"']+)'\s*:")

_SINGLE_QUOTED_VALUE_RE = re.compile(r":\s*'([^']*)'\s*([,}\]])")
_SINGLE_QUOTED_ITEM_RE = re.compile(r"([\[,]\s*)'([^'\"]*)'(?=\s*[,\]])")
_BARE_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_$][A-Za-z0-9_$]*)\s*:")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_UNDEFINED_VALUE_RE = re.compile(r":\s*(?:undefined|NaN)\b")

_CLOSER_FOR = {"{": "}", "[": "]"}
_OPENER_FOR = {"}": "{", "]": "["}


def _rewrite(text: str) -> str:
    s = _SMART_DOUBLE_QUOTES_RE.sub('"', text)
    s = _SMART_SINGLE_QUOTES_RE.sub("'", s)
    s = _KEY_DOUBLE_SINGLE_RE.sub(r'"\1":', s)
    s = _KEY_SINGLE_DOUBLE_RE.sub(r'"\1":', s)
    s = _KEY_SINGLE_RE.sub(r'\1"\2":', s)
    # Lossy for apostrophes and escaped quotes inside the value.
    s = _SINGLE_QUOTED_VALUE_RE.sub(r':"\1"\2', s)
    s = _SINGLE_QUOTED_ITEM_RE.sub(r'\1"\2"', s)
    s = _BARE_KEY_RE.sub(r'\1"\2":', s)
    s = _TRAILING_COMMA_RE.sub(r"\1", s)
    return _UNDEFINED_VALUE_RE.sub(": null", s)


def close_unbalanced(text: str) -> str:
    """
    Append the closers needed to balance every `{` and `[` found outside
    double-quoted strings.

    Openers are tracked on a stack so the appended closers follow the nesting
    of the text; a closer cancels the nearest opener of its own type. A closer
    with no opener to cancel offsets the outermost later opener of its type, so
    exactly max(0, opens - closes) closers are appended per type. An
    unterminated string is closed first, and a dangling comma before the
    appended closers is dropped.
    """
    stack: list[str] = []
    stray = {"{": 0, "[": 0}
    in_string = False
    escaped = False
    for ch in text:
        if escaped:
            escaped = False
            continue
        if ch == "\\" and in_string:
            escaped = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch in _CLOSER_FOR:
            stack.append(ch)
        elif ch in _OPENER_FOR:
            opener = _OPENER_FOR[ch]
            for idx in range(len(stack) - 1, -1, -1):
                if stack[idx] == opener:
                    del stack[idx]
                    break
            else:
                stray[opener] += 1

    for opener, count in stray.items():
        while count and opener in stack:
            stack.remove(opener)
            count -= 1

    if not stack and not in_string:
        return text

    out = text
    if in_string:
        if escaped:
            out = out[:-1]
        out += '"'
    elif stack:
        body = out.rstrip()
        if body.endswith(","):
            out = body[:-1]
    return out + "".join(_CLOSER_FOR[o] for o in reversed(stack))


def repair_json(text: Any) -> Any:
    """
    Best-effort textual repair of near-miss JSON produced by a language model.

    Handles smart quotes, single-quoted keys and values, bare keys, trailing
    commas, `undefined`/`NaN` values and unclosed brackets. The result is not
    guaranteed to parse; callers must attempt a parse afterwards. Never raises.
    Text that already parses is returned trimmed and otherwise unchanged.
    """
    if not isinstance(text, str):
        return text
    s = text.strip()
    try:
        strict_loads(s)
        return s
    except (ValueError, RecursionError):
        pass
    return close_unbalanced(_rewrite(s))
