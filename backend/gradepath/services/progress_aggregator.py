"""
Dashboard Progress Aggregator.

Derives everything the learner dashboard shows from two snapshots: the
learner's progress records and the lesson catalog of the selected grade.

Computes:
- Learning stats (completions, quiz average, streaks, weekly goal, points, rank)
- Seven-day activity series for the sparkline
- Continue-learning pointer (most recently touched incomplete lesson)
- Per-term completion
- Up to three next-lesson recommendations, weakest subject first
- Recent activity feed, achievements and level

Everything here is a pure function of its inputs and the supplied `now`.
"""

import functools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Union

from gradepath.models.models import TERM_NAMES
from gradepath.services.achievements import Achievement, evaluate_achievements, learner_level
from gradepath.services.streak_service import get_streak_service
from gradepath.utils.formatting import format_time_ago, percentage, round_half_up

logger = logging.getLogger(__name__)

WEEKLY_GOAL_ACTIVITIES = 10
SERIES_DAYS = 7
POINTS_PER_LESSON = 20
POINTS_PER_QUIZ_TENTH = 5
GOLD_MIN_AVERAGE = 85
GOLD_MIN_LESSONS = 20
SILVER_MIN_AVERAGE = 70
LOW_SCORE_THRESHOLD = 70
MAX_RECOMMENDATIONS = 3
MAX_RECENT_ACTIVITIES = 6


# ============================================================================
# INPUT SNAPSHOTS
# ============================================================================

@dataclass(frozen=True)
class ProgressRecord:
    user_id: str
    lesson_id: str
    completed: bool
    last_accessed_at: datetime
    quiz_score: Optional[float] = None
    time_spent: int = 0
    completed_at: Optional[datetime] = None

    @property
    def has_quiz_score(self) -> bool:
        return isinstance(self.quiz_score, (int, float)) and not isinstance(self.quiz_score, bool)

    @classmethod
    def from_model(cls, row: Any) -> "ProgressRecord":
        return cls(
            user_id=row.user_id,
            lesson_id=row.lesson_id,
            completed=bool(row.completed),
            last_accessed_at=row.last_accessed_at,
            quiz_score=row.quiz_score,
            time_spent=row.time_spent or 0,
            completed_at=row.completed_at,
        )


@dataclass(frozen=True)
class CatalogLesson:
    id: str
    subject: str
    grade: str
    term: str
    title: str
    description: str = ""
    difficulty: str = "beginner"
    order: Optional[int] = None
    duration: Optional[int] = None
    price: Optional[float] = None
    created_at: datetime = datetime.min

    @classmethod
    def from_model(cls, row: Any) -> "CatalogLesson":
        return cls(
            id=row.id,
            subject=row.subject,
            grade=row.grade,
            term=row.term,
            title=row.title,
            description=row.description or "",
            difficulty=row.difficulty or "beginner",
            order=row.order,
            duration=row.duration,
            price=row.price,
            created_at=row.created_at or datetime.min,
        )


# ============================================================================
# SUBJECT SCORE VARIANT
# ============================================================================

@dataclass(frozen=True)
class NoScore:
    """Subject has no quiz results yet."""

    @property
    def is_low(self) -> bool:
        return False


@dataclass(frozen=True)
class Score:
    value: float

    @property
    def is_low(self) -> bool:
        return self.value < LOW_SCORE_THRESHOLD


SubjectScore = Union[NoScore, Score]


# ============================================================================
# OUTPUT VIEW MODELS
# ============================================================================

@dataclass(frozen=True)
class LearningStats:
    total_lessons_completed: int = 0
    total_quizzes_taken: int = 0
    average_score: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    weekly_progress_percent: int = 0
    points_earned: int = 0
    rank: str = "Bronze"


@dataclass(frozen=True)
class ContinueLearningPointer:
    lesson: CatalogLesson
    last_accessed_at: datetime
    progress: int


@dataclass(frozen=True)
class TermProgress:
    name: str
    progress: int
    lessons_completed: int
    total_lessons: int


@dataclass(frozen=True)
class Recommendation:
    lesson: CatalogLesson
    reason: str


@dataclass(frozen=True)
class RecentActivity:
    id: str
    type: str  # "quiz" or "lesson"
    title: str
    subject: str
    time: str
    score: Optional[float] = None


@dataclass
class DashboardSnapshot:
    stats: LearningStats
    weekly_series: List[int]
    continue_pointer: Optional[ContinueLearningPointer]
    term_progress: List[TermProgress]
    recommendations: List[Recommendation]
    recent_activities: List[RecentActivity]
    achievements: List[Achievement] = field(default_factory=list)
    level: int = 1
    streak_milestones: Dict[str, Optional[int]] = field(default_factory=dict)


# ============================================================================
# STATS
# ============================================================================

def _quiz_entries(progress: Sequence[ProgressRecord]) -> List[ProgressRecord]:
    return [p for p in progress if p.has_quiz_score]


def calculate_average_score(progress: Sequence[ProgressRecord]) -> int:
    entries = _quiz_entries(progress)
    if not entries:
        return 0
    return round_half_up(sum(p.quiz_score for p in entries) / len(entries))


def calculate_weekly_progress(progress: Sequence[ProgressRecord], now: datetime) -> int:
    """Share of the weekly activity goal reached over the trailing seven days."""
    week_ago = now - timedelta(days=7)
    weekly = sum(1 for p in progress if p.last_accessed_at >= week_ago)
    return min(100, percentage(weekly, WEEKLY_GOAL_ACTIVITIES))


def calculate_weekly_series(progress: Sequence[ProgressRecord], now: datetime) -> List[int]:
    """Activity counts for the last seven calendar days, oldest first."""
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    series = []

    for days_back in range(SERIES_DAYS - 1, -1, -1):
        day_start = today_start - timedelta(days=days_back)
        day_end = day_start + timedelta(days=1)
        series.append(sum(1 for p in progress if day_start <= p.last_accessed_at < day_end))

    return series


def calculate_points(progress: Sequence[ProgressRecord]) -> int:
    completed = sum(1 for p in progress if p.completed)
    quiz_points = sum(p.quiz_score / 10 * POINTS_PER_QUIZ_TENTH for p in _quiz_entries(progress))
    return completed * POINTS_PER_LESSON + round_half_up(quiz_points)


def calculate_rank(average_score: int, total_completed: int) -> str:
    if average_score >= GOLD_MIN_AVERAGE and total_completed >= GOLD_MIN_LESSONS:
        return "Gold"
    if average_score >= SILVER_MIN_AVERAGE:
        return "Silver"
    return "Bronze"


def calculate_stats(progress: Sequence[ProgressRecord], now: datetime) -> LearningStats:
    total_completed = sum(1 for p in progress if p.completed)
    average_score = calculate_average_score(progress)
    streak = get_streak_service().calculate((p.last_accessed_at for p in progress), now)

    return LearningStats(
        total_lessons_completed=total_completed,
        total_quizzes_taken=len(_quiz_entries(progress)),
        average_score=average_score,
        current_streak=streak.current,
        longest_streak=streak.longest,
        weekly_progress_percent=calculate_weekly_progress(progress, now),
        points_earned=calculate_points(progress),
        rank=calculate_rank(average_score, total_completed),
    )


# ============================================================================
# CATALOG-RELATIVE VIEWS
# ============================================================================

def _completed_lesson_ids(progress: Sequence[ProgressRecord]) -> set:
    return {p.lesson_id for p in progress if p.completed}


def find_continue_pointer(
    progress: Sequence[ProgressRecord],
    lessons: Sequence[CatalogLesson]
) -> Optional[ContinueLearningPointer]:
    """Most recently touched incomplete lesson that belongs to this catalog."""
    lesson_map = {lesson.id: lesson for lesson in lessons}
    incomplete = sorted(
        (p for p in progress if not p.completed),
        key=lambda p: p.last_accessed_at,
        reverse=True,
    )

    for record in incomplete:
        lesson = lesson_map.get(record.lesson_id)
        if lesson is None:
            continue

        if record.quiz_score:
            progress_pct = record.quiz_score
        elif record.time_spent:
            progress_pct = min(record.time_spent / 30, 100)
        else:
            progress_pct = 0

        return ContinueLearningPointer(
            lesson=lesson,
            last_accessed_at=record.last_accessed_at,
            progress=round_half_up(progress_pct),
        )

    return None


def calculate_term_progress(
    progress: Sequence[ProgressRecord],
    lessons: Sequence[CatalogLesson]
) -> List[TermProgress]:
    completed_ids = _completed_lesson_ids(progress)
    terms = []

    for term_name in TERM_NAMES:
        in_term = [lesson for lesson in lessons if lesson.term == term_name]
        done = sum(1 for lesson in in_term if lesson.id in completed_ids)
        terms.append(TermProgress(
            name=term_name,
            progress=percentage(done, len(in_term)),
            lessons_completed=done,
            total_lessons=len(in_term),
        ))

    return terms


def find_next_lesson(
    lessons: Sequence[CatalogLesson],
    completed_ids: set
) -> Optional[CatalogLesson]:
    """First incomplete lesson by explicit order (unset last), then creation time."""
    ordered = sorted(
        lessons,
        key=lambda l: (
            l.order if l.order is not None else float("inf"),
            l.created_at,
        ),
    )
    for lesson in ordered:
        if lesson.id not in completed_ids:
            return lesson
    return None


@dataclass
class _SubjectSummary:
    subject: str
    lessons: List[CatalogLesson] = field(default_factory=list)
    completed_count: int = 0
    scores: List[float] = field(default_factory=list)

    @property
    def completion_rate(self) -> float:
        return self.completed_count / len(self.lessons) if self.lessons else 0.0

    @property
    def score(self) -> SubjectScore:
        if not self.scores:
            return NoScore()
        return Score(sum(self.scores) / len(self.scores))


def _compare_subjects(a: _SubjectSummary, b: _SubjectSummary) -> int:
    """
    Weakest subject first.

    A low quiz average outranks everything else; between two low averages the
    lower one wins. When neither subject has a low average (including subjects
    without scores) the lower completion rate wins.
    """
    a_score, b_score = a.score, b.score

    if a_score.is_low and b_score.is_low:
        return (a_score.value > b_score.value) - (a_score.value < b_score.value)
    if a_score.is_low:
        return -1
    if b_score.is_low:
        return 1

    return (a.completion_rate > b.completion_rate) - (a.completion_rate < b.completion_rate)


def rank_subjects(
    progress: Sequence[ProgressRecord],
    lessons: Sequence[CatalogLesson]
) -> List[_SubjectSummary]:
    completed_ids = _completed_lesson_ids(progress)
    scores_by_lesson: Dict[str, float] = {}
    for record in progress:
        if record.has_quiz_score:
            scores_by_lesson.setdefault(record.lesson_id, record.quiz_score)

    by_subject: Dict[str, _SubjectSummary] = {}
    for lesson in lessons:
        summary = by_subject.setdefault(lesson.subject, _SubjectSummary(lesson.subject))
        summary.lessons.append(lesson)
        if lesson.id in completed_ids:
            summary.completed_count += 1
        if lesson.id in scores_by_lesson:
            summary.scores.append(scores_by_lesson[lesson.id])

    return sorted(by_subject.values(), key=functools.cmp_to_key(_compare_subjects))


def build_recommendations(
    progress: Sequence[ProgressRecord],
    lessons: Sequence[CatalogLesson],
    continue_lesson: Optional[CatalogLesson] = None
) -> List[Recommendation]:
    completed_ids = _completed_lesson_ids(progress)
    recommendations: List[Recommendation] = []

    for summary in rank_subjects(progress, lessons):
        next_lesson = find_next_lesson(summary.lessons, completed_ids)

        if next_lesson is not None:
            subject_score = summary.score
            if subject_score.is_low:
                reason = f"Low quiz score: {round_half_up(subject_score.value)}%"
            else:
                reason = f"Low completion: {round_half_up(summary.completion_rate * 100)}% done"

            if continue_lesson is None or continue_lesson.id != next_lesson.id:
                recommendations.append(Recommendation(lesson=next_lesson, reason=reason))

        if len(recommendations) >= MAX_RECOMMENDATIONS:
            break

    return recommendations


def build_recent_activities(
    progress: Sequence[ProgressRecord],
    lessons: Sequence[CatalogLesson],
    now: datetime
) -> List[RecentActivity]:
    lesson_map = {lesson.id: lesson for lesson in lessons}
    latest = sorted(progress, key=lambda p: p.last_accessed_at, reverse=True)[:MAX_RECENT_ACTIVITIES]

    activities = []
    for idx, record in enumerate(latest):
        lesson = lesson_map.get(record.lesson_id)
        is_quiz = record.has_quiz_score
        activities.append(RecentActivity(
            id=f"{idx}-{record.lesson_id}",
            type="quiz" if is_quiz else "lesson",
            title=lesson.title if lesson else ("Quiz" if is_quiz else "Lesson"),
            subject=lesson.subject if lesson else "",
            time=format_time_ago(record.last_accessed_at, now),
            score=record.quiz_score if is_quiz else None,
        ))

    return activities


# ============================================================================
# ENTRY POINT
# ============================================================================

def aggregate(
    progress: Sequence[ProgressRecord],
    lessons: Sequence[CatalogLesson],
    now: Optional[datetime] = None
) -> DashboardSnapshot:
    """
    Build the dashboard snapshot.

    Args:
        progress: All of the learner's progress records
        lessons: Lesson catalog of the selected grade
        now: Reference time (defaults to utcnow)

    Returns:
        DashboardSnapshot; an empty catalog yields zeroed term progress and
        no pointer, recommendations or activities
    """
    now = now or datetime.utcnow()

    stats = calculate_stats(progress, now)
    term_progress = calculate_term_progress(progress, lessons)

    if lessons:
        continue_pointer = find_continue_pointer(progress, lessons)
        recommendations = build_recommendations(
            progress, lessons, continue_pointer.lesson if continue_pointer else None
        )
        recent_activities = build_recent_activities(progress, lessons, now)
    else:
        continue_pointer = None
        recommendations = []
        recent_activities = []

    logger.debug(
        "Aggregated %d progress records over %d lessons (%d recommendations)",
        len(progress), len(lessons), len(recommendations)
    )

    return DashboardSnapshot(
        stats=stats,
        weekly_series=calculate_weekly_series(progress, now),
        continue_pointer=continue_pointer,
        term_progress=term_progress,
        recommendations=recommendations,
        recent_activities=recent_activities,
        achievements=evaluate_achievements(stats),
        level=learner_level(stats.points_earned),
        streak_milestones=get_streak_service().get_streak_milestones(stats.current_streak),
    )
