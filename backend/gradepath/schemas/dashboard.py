"""
Learner dashboard response schemas.

Field names mirror the aggregator's view models so a DashboardSnapshot can
be validated directly with from_attributes.
"""

from datetime import datetime
from typing import List, Optional

from gradepath.schemas.base import CamelModel
from gradepath.schemas.lesson import LessonSummary


class LearningStatsResponse(CamelModel):
    total_lessons_completed: int
    total_quizzes_taken: int
    average_score: int
    current_streak: int
    longest_streak: int
    weekly_progress_percent: int
    points_earned: int
    rank: str


class ContinueLearningResponse(CamelModel):
    lesson: LessonSummary
    last_accessed_at: datetime
    progress: int


class TermProgressResponse(CamelModel):
    name: str
    progress: int
    lessons_completed: int
    total_lessons: int


class RecommendationResponse(CamelModel):
    lesson: LessonSummary
    reason: str


class RecentActivityResponse(CamelModel):
    id: str
    type: str
    title: str
    subject: str
    time: str
    score: Optional[float] = None


class AchievementResponse(CamelModel):
    id: str
    title: str
    description: str
    icon: str
    progress: int
    unlocked: bool
    points: int


class StreakMilestones(CamelModel):
    current_milestone: Optional[int] = None
    next_milestone: Optional[int] = None
    days_to_next_milestone: Optional[int] = None


class DashboardResponse(CamelModel):
    stats: LearningStatsResponse
    weekly_series: List[int]
    continue_pointer: Optional[ContinueLearningResponse] = None
    term_progress: List[TermProgressResponse]
    recommendations: List[RecommendationResponse]
    recent_activities: List[RecentActivityResponse]
    achievements: List[AchievementResponse]
    level: int
    streak_milestones: StreakMilestones
