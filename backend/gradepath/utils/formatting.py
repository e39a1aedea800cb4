"""
Number and text formatting helpers shared by the scoring and dashboard services.
"""

import math
from datetime import datetime
from typing import Union

COMMON_ENTRANCE_LEVEL = 7
COMMON_ENTRANCE_LABEL = "Common Entrance"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3).

    Python's round() uses banker's rounding, which would report 12.5% as 12.
    """
    return int(math.floor(value + 0.5))


def percentage(part: Union[int, float], whole: Union[int, float]) -> int:
    """Whole-number percentage of part over whole; 0 when whole is 0."""
    if not whole:
        return 0
    return round_half_up(100 * part / whole)


def grade_label(level: int) -> str:
    """Catalog label for a grade level: 1 -> "Grade 1", 7 -> "Common Entrance"."""
    if level == COMMON_ENTRANCE_LEVEL:
        return COMMON_ENTRANCE_LABEL
    return f"Grade {level}"


def normalize_grade_label(label: str) -> str:
    """Canonical catalog label for a user-supplied one ("grade 3" -> "Grade 3")."""
    return grade_label(parse_grade_label(label))


def parse_grade_label(label: str) -> int:
    """Inverse of grade_label. Raises ValueError for unknown labels."""
    cleaned = label.strip()
    if cleaned.lower() == COMMON_ENTRANCE_LABEL.lower():
        return COMMON_ENTRANCE_LEVEL

    prefix, _, number = cleaned.partition(" ")
    if prefix.lower() != "grade" or not number.isdigit():
        raise ValueError(f"Unknown grade label: {label!r}")

    level = int(number)
    if not 1 <= level < COMMON_ENTRANCE_LEVEL:
        raise ValueError(f"Grade level out of range: {label!r}")
    return level


def format_time_ago(moment: datetime, now: datetime) -> str:
    """Human relative time: "42s ago", "5m ago", "3h ago", "Yesterday", "4d ago"."""
    diff = max(0.0, (now - moment).total_seconds())

    seconds = int(diff)
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return f"{seconds}s ago"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days == 1:
        return "Yesterday"
    return f"{days}d ago"
