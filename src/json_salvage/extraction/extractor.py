from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from json_salvage.extraction.envelope import unwrap_envelope
from json_salvage.extraction.repair import repair_json
from json_salvage.extraction.scanner import rank_candidates, scan_candidates
from json_salvage.utils.strict_json import try_loads

logger = logging.getLogger(__name__)


class JSONExtractError(ValueError):
    pass


# C0 controls except \t \n \r, plus DEL.
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_LINE_ENDINGS_RE = re.compile(r"\r\n?")


def normalize_text(text: str) -> str:
    s = text.lstrip("\ufeff").strip()
    s = _CONTROL_CHARS_RE.sub("", s)
    return _LINE_ENDINGS_RE.sub("\n", s).strip()


def _matches_shape(value: Any, expect_array: bool) -> bool:
    if expect_array:
        return isinstance(value, list)
    return isinstance(value, dict)


def _parse_raw_or_repaired(chunk: str, expect_array: bool) -> tuple[Any, bool] | None:
    parsed = try_loads(chunk)
    if _matches_shape(parsed, expect_array):
        return parsed, False
    parsed = try_loads(repair_json(chunk))
    if _matches_shape(parsed, expect_array):
        return parsed, True
    return None


def _extract_from_text(raw: str, expect_array: bool) -> Any | None:
    text = normalize_text(raw)
    if not text:
        return None

    parsed = try_loads(text)
    if _matches_shape(parsed, expect_array):
        logger.debug("json_extract stage=direct")
        return parsed

    candidates = rank_candidates(scan_candidates(text, expect_array))
    for idx, cand in enumerate(candidates):
        hit = _parse_raw_or_repaired(cand.text, expect_array)
        if hit is not None:
            logger.debug(
                "json_extract stage=candidate rank=%s/%s span=%s-%s closed=%s repaired=%s",
                idx + 1,
                len(candidates),
                cand.start,
                cand.end,
                cand.closed,
                hit[1],
            )
            return hit[0]

    if not expect_array:
        first = text.find("{")
        last = text.rfind("}")
        if first != -1 and last > first:
            hit = _parse_raw_or_repaired(text[first : last + 1], expect_array)
            if hit is not None:
                logger.debug("json_extract stage=outer_braces span=%s-%s repaired=%s", first, last, hit[1])
                return hit[0]

    logger.debug("json_extract miss candidates=%s expect_array=%s", len(candidates), expect_array)
    return None


def extract_json(value: Any, expect_array: bool = False) -> Any | None:
    """
    Best-effort extraction of a JSON object (or array) from LLM output.

    `value` may be raw text, bytes, a chat-completion style envelope, or an
    already parsed value. Returns a dict (or a list when `expect_array`), or
    None when nothing of that shape can be found or repaired. Never raises.
    """
    if value is None or value is False:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, str):
        return _extract_from_text(value, expect_array)
    if isinstance(value, (Mapping, list, tuple)):
        unwrapped = unwrap_envelope(value, expect_array)
        if unwrapped.kind == "text":
            return _extract_from_text(unwrapped.payload, expect_array)
        if unwrapped.kind == "value":
            return unwrapped.payload
        return None
    return _extract_from_text(str(value), expect_array)


def require_json(value: Any, expect_array: bool = False) -> Any:
    """Like extract_json, but raises JSONExtractError on a miss."""
    result = extract_json(value, expect_array)
    if result is None:
        raise JSONExtractError("No JSON array found" if expect_array else "No JSON object found")
    return result
