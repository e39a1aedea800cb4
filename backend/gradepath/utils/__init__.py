"""
GradePath Utilities Package

Contains:
- cache: Redis / in-memory cache for lesson catalog aggregates
- formatting: Rounding, percentages, grade labels and relative time labels
"""

from gradepath.utils.cache import catalog_cache, HybridCache, TTLCache
from gradepath.utils.formatting import (
    round_half_up,
    percentage,
    grade_label,
    parse_grade_label,
    normalize_grade_label,
    format_time_ago,
)

__all__ = [
    "catalog_cache",
    "HybridCache",
    "TTLCache",
    "round_half_up",
    "percentage",
    "grade_label",
    "parse_grade_label",
    "normalize_grade_label",
    "format_time_ago",
]
