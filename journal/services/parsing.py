"""Explicit numeric parsing for user-entered fields.

Form values arrive as text, numbers or nothing at all. ``parse_number``
reports what went wrong instead of guessing; callers that are allowed to
degrade to zero go through ``number_or_zero``.
"""

import math
from dataclasses import dataclass

MISSING = "missing"


@dataclass(frozen=True)
class Ok:
    value: float


@dataclass(frozen=True)
class Err:
    reason: str


def parse_number(raw) -> Ok | Err:
    """Parse ``raw`` into a finite float."""
    if raw is None:
        return Err(MISSING)
    if isinstance(raw, bool):
        return Err("not a number")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return Err(MISSING)
        try:
            value = float(text)
        except ValueError:
            return Err(f"not a number: {raw!r}")
    else:
        return Err(f"unsupported type: {type(raw).__name__}")

    if not math.isfinite(value):
        return Err("not finite")
    return Ok(value)


def is_missing(raw) -> bool:
    parsed = parse_number(raw)
    return isinstance(parsed, Err) and parsed.reason == MISSING


def number_or_zero(raw) -> float:
    """Parse ``raw``, degrading anything unusable to 0.0."""
    parsed = parse_number(raw)
    if isinstance(parsed, Ok):
        return parsed.value
    return 0.0
