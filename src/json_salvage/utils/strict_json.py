from __future__ import annotations

import json
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def strict_loads(text: str) -> Any:
    """
    json.loads without the NaN / Infinity / -Infinity extensions.

    Model output containing those literals must go through repair instead of
    silently turning into floats.
    """
    return json.loads(text, parse_constant=_reject_constant)


def try_loads(text: str) -> Any:
    """Parse strict JSON, returning None on any failure (including excessive nesting)."""
    try:
        return strict_loads(text)
    except (ValueError, RecursionError):
        return None
