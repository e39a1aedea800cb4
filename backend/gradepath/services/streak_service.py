"""
Daily Streak Service.
Derives consecutive study-day streaks from progress activity timestamps.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Dict, Any, List

logger = logging.getLogger(__name__)

STREAK_MILESTONES = [3, 7, 14, 30, 60, 100, 150, 200, 365]


@dataclass(frozen=True)
class StreakResult:
    current: int
    longest: int
    last_activity_day: Optional[date] = None


class StreakService:
    """
    Service for computing learner study streaks.

    A streak is defined as consecutive calendar days with at least one lesson
    touched. The current streak is dead once a full calendar day is skipped:
    it only counts if the latest activity was today or yesterday.
    """

    def activity_days(self, timestamps: Iterable[datetime]) -> List[date]:
        """Distinct calendar days with activity, ascending."""
        return sorted({ts.date() for ts in timestamps})

    def calculate(self, timestamps: Iterable[datetime], now: datetime) -> StreakResult:
        """
        Compute current and longest streaks.

        Args:
            timestamps: Activity times (e.g. progress last_accessed_at values)
            now: Reference time; its calendar day is "today"

        Returns:
            StreakResult with current and longest run lengths
        """
        days = self.activity_days(timestamps)
        if not days:
            return StreakResult(current=0, longest=0)

        longest = 0
        current = 0
        previous: Optional[date] = None

        for day in days:
            if previous is None or (day - previous).days == 1:
                current += 1
            else:
                current = 1
            longest = max(longest, current)
            previous = day

        today = now.date()
        last_day = days[-1]
        if last_day not in (today, today - timedelta(days=1)):
            current = 0

        return StreakResult(current=current, longest=longest, last_activity_day=last_day)

    def get_streak_milestones(self, current_streak: int) -> Dict[str, Any]:
        """Get streak milestone information."""
        current_milestone = None
        next_milestone = None

        for m in STREAK_MILESTONES:
            if current_streak >= m:
                current_milestone = m
            elif next_milestone is None:
                next_milestone = m

        days_to_next = next_milestone - current_streak if next_milestone else None

        return {
            "current_milestone": current_milestone,
            "next_milestone": next_milestone,
            "days_to_next_milestone": days_to_next
        }


# Singleton instance
_streak_service: Optional[StreakService] = None


def get_streak_service() -> StreakService:
    """Get the singleton StreakService instance."""
    global _streak_service
    if _streak_service is None:
        _streak_service = StreakService()
    return _streak_service
