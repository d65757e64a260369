from __future__ import annotations

import math
from enum import Enum
from numbers import Real

MIN_SCORE = 0.0
MAX_SCORE = 20.0


class ScoreCheck(str, Enum):
    VALID = "valid"
    ABSENT = "absent"
    INVALID = "invalid"


def is_score(value: object) -> bool:
    """True for a real number inside the 0-20 grading scale."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    number = float(value)
    if math.isnan(number):
        return False
    return MIN_SCORE <= number <= MAX_SCORE


def check_score(value: object, required: bool) -> ScoreCheck:
    """
    ABSENT is only returned for a missing score that is not required.
    A present score is judged on its own, whatever the requirement flag.
    """
    if value is None:
        return ScoreCheck.INVALID if required else ScoreCheck.ABSENT
    return ScoreCheck.VALID if is_score(value) else ScoreCheck.INVALID


def parse_number(text: str | None) -> float | None:
    """Read a typed number, accepting a decimal comma. Blank or non-finite input is None."""
    cleaned = (text or "").strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_coefficient(text: str | None) -> float:
    """Unreadable coefficients become NaN so every average above them is Incomplete."""
    number = parse_number(text)
    return math.nan if number is None else number
