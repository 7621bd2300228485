from __future__ import annotations

import re
from dataclasses import dataclass

# Only these characters can change bracket depth or string state.
_STRUCTURAL_RE = re.compile(r'[\[\]{}"\\]')


@dataclass(frozen=True)
class Candidate:
    start: int
    end: int  # inclusive
    text: str
    # False for the tail of an opener that never balanced.
    closed: bool = True


def match_balanced(text: str, start: int) -> int | None:
    """
    Return the index of the closer that balances the bracket at `start`, or None.

    `{` and `[` share one depth counter. Brackets inside double-quoted strings
    are ignored and backslash escapes inside strings are honored.
    """
    depth = 0
    in_string = False
    skip_at = -1
    for m in _STRUCTURAL_RE.finditer(text, start):
        pos = m.start()
        if pos == skip_at:
            continue
        ch = m.group()
        if ch == "\\":
            if in_string:
                skip_at = pos + 1
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "{" or ch == "[":
            depth += 1
        else:
            depth -= 1
        if depth == 0:
            return pos
    return None


def scan_candidates(text: str, expect_array: bool = False) -> list[Candidate]:
    """
    Find top-level balanced `{...}` (or `[...]`) spans, left to right.

    After a match the scan resumes past its closer, so nested spans are not
    reported separately but later siblings are. The first opener that never
    balances also contributes one unclosed candidate running to the end of the
    text, which is what lets truncated output be repaired. The tail is only
    kept when no complete span precedes it; a complete earlier answer beats a
    truncated later one.
    """
    opener = "[" if expect_array else "{"
    candidates: list[Candidate] = []
    i = text.find(opener)
    while i != -1:
        end = match_balanced(text, i)
        if end is None:
            if not candidates:
                candidates.append(Candidate(start=i, end=len(text) - 1, text=text[i:], closed=False))
            i = text.find(opener, i + 1)
            continue
        candidates.append(Candidate(start=i, end=end, text=text[i : end + 1]))
        i = text.find(opener, end + 1)
    return candidates


def rank_candidates(candidates: list[Candidate]) -> list[Candidate]:
    # Longest first: small JSON-looking fragments in prose are rarely the payload.
    return sorted(candidates, key=lambda c: len(c.text), reverse=True)
