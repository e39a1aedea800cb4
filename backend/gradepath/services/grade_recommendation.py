"""
Grade Recommendation Resolver.

Turns per-level placement accuracy into a single recommended grade level:
the highest level the learner cleared at 70%, nudged one level up for an
excellent overall score or one level down for a weak one.
"""

from typing import Mapping

from gradepath.utils.formatting import COMMON_ENTRANCE_LEVEL, grade_label

LOWEST_LEVEL = 1
HIGHEST_LEVEL = COMMON_ENTRANCE_LEVEL

MASTERY_THRESHOLD = 70
PROMOTION_THRESHOLD = 85
DEMOTION_THRESHOLD = 40


def recommend(per_grade_accuracy: Mapping[int, float], overall_percentage: float) -> int:
    """
    Recommend a grade level from placement accuracy.

    Args:
        per_grade_accuracy: Accuracy percent keyed by grade level (1-7);
            levels absent from the mapping are skipped
        overall_percentage: Accuracy percent across the whole assessment

    Returns:
        Grade level in [1, 7]
    """
    last_high_performance = LOWEST_LEVEL
    for level in range(LOWEST_LEVEL, HIGHEST_LEVEL + 1):
        accuracy = per_grade_accuracy.get(level)
        if accuracy is not None and accuracy >= MASTERY_THRESHOLD:
            last_high_performance = level

    recommended = last_high_performance

    # The two ranges are disjoint, so at most one nudge applies
    if overall_percentage >= PROMOTION_THRESHOLD and recommended < HIGHEST_LEVEL:
        recommended += 1
    if overall_percentage < DEMOTION_THRESHOLD and recommended > LOWEST_LEVEL:
        recommended -= 1

    return recommended


def recommendation_message(level: int) -> str:
    """Placement summary shown alongside the recommended grade."""
    if level == COMMON_ENTRANCE_LEVEL:
        return (
            "Excellent! You've demonstrated strong mastery across all levels. "
            "You're ready for Common Entrance preparation courses that will help "
            "you excel in entrance examinations."
        )
    if level == 6:
        return (
            "Great performance! You've shown strong understanding of upper primary "
            f"concepts. {grade_label(level)} will provide the perfect foundation to "
            "continue building advanced skills."
        )
    if level >= 4:
        return (
            "Good work! You've demonstrated solid understanding at this level. "
            f"{grade_label(level)} courses will help you strengthen your foundation "
            "and progress confidently."
        )
    if level >= 2:
        return (
            f"Starting at {grade_label(level)} will ensure you build a strong foundation. "
            "This level is perfect for developing core skills that will support your "
            "learning journey."
        )
    return (
        f"We recommend starting with {grade_label(level)} to build fundamental skills. "
        "This will give you a solid foundation for your educational journey."
    )
