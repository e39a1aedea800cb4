"""
Dashboard Achievement Service.
Defines the learner achievements and evaluates progress toward each one
from the derived learning stats.
"""

from dataclasses import dataclass
from typing import Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from gradepath.services.progress_aggregator import LearningStats

POINTS_PER_LEVEL = 100


@dataclass(frozen=True)
class AchievementDefinition:
    """Definition of an achievement that can be unlocked."""
    id: str
    title: str
    description: str
    icon: str
    metric: str  # Attribute of LearningStats the target applies to
    target: int
    points: int


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    progress: int  # 0-100
    unlocked: bool
    points: int


ACHIEVEMENT_DEFINITIONS: Dict[str, AchievementDefinition] = {
    "first-lesson": AchievementDefinition(
        id="first-lesson",
        title="First Steps",
        description="Complete your first lesson",
        icon="book-open",
        metric="total_lessons_completed",
        target=1,
        points=50,
    ),
    "streak-3": AchievementDefinition(
        id="streak-3",
        title="On Fire!",
        description="Maintain a 3-day streak",
        icon="flame",
        metric="current_streak",
        target=3,
        points=100,
    ),
    "lessons-10": AchievementDefinition(
        id="lessons-10",
        title="Dedicated Learner",
        description="Complete 10 lessons",
        icon="award",
        metric="total_lessons_completed",
        target=10,
        points=200,
    ),
    "score-90": AchievementDefinition(
        id="score-90",
        title="Excellence",
        description="Score 90% or above",
        icon="star",
        metric="average_score",
        target=90,
        points=150,
    ),
    "streak-7": AchievementDefinition(
        id="streak-7",
        title="Week Warrior",
        description="Maintain a 7-day streak",
        icon="zap",
        metric="current_streak",
        target=7,
        points=300,
    ),
    "points-1000": AchievementDefinition(
        id="points-1000",
        title="Point Master",
        description="Earn 1000 points",
        icon="crown",
        metric="points_earned",
        target=1000,
        points=500,
    ),
}


def evaluate_achievements(stats: "LearningStats") -> List[Achievement]:
    """Progress toward every achievement, in definition order."""
    achievements = []
    for definition in ACHIEVEMENT_DEFINITIONS.values():
        value = getattr(stats, definition.metric)
        unlocked = value >= definition.target
        achievements.append(Achievement(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            icon=definition.icon,
            progress=100 if unlocked else int(100 * value / definition.target),
            unlocked=unlocked,
            points=definition.points,
        ))
    return achievements


def learner_level(points_earned: int) -> int:
    """Level shown on the dashboard: one level per 100 points, starting at 1."""
    return points_earned // POINTS_PER_LEVEL + 1
