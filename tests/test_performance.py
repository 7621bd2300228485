from __future__ import annotations

import time

from json_salvage.extraction import extract_json

# Generous bound: the scan is quadratic on purpose-built input, this only
# guards against accidental blowups (e.g. exponential regex backtracking).
_BUDGET_SECONDS = 10.0


def _timed(text: str, expect_array: bool = False) -> tuple[object, float]:
    t0 = time.perf_counter()
    result = extract_json(text, expect_array)
    return result, time.perf_counter() - t0


def test_many_unbalanced_openers() -> None:
    result, elapsed = _timed("{" * 2000)
    assert result is None
    assert elapsed < _BUDGET_SECONDS


def test_alternating_braces() -> None:
    result, elapsed = _timed("{}" * 5000)
    assert result == {}
    assert elapsed < _BUDGET_SECONDS


def test_deeply_nested_unclosed_object() -> None:
    result, elapsed = _timed('{"a": [' * 1000)
    # Past the parser's nesting limit the repaired tail may be rejected; either way no exception escapes.
    assert result is None or isinstance(result, dict)
    assert elapsed < _BUDGET_SECONDS


def test_long_prose_with_scattered_brackets() -> None:
    noise = "some text ] with } stray [ brackets { and quotes \" " * 400
    result, elapsed = _timed(noise + '{"answer": 42}' + noise, False)
    assert elapsed < _BUDGET_SECONDS
    assert result is None or isinstance(result, dict)
