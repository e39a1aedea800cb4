# Services module

# Placement assessment
from gradepath.services.scoring import (
    Question,
    AnswerSubmission,
    GradeAccuracy,
    RecommendationResult,
    AssessmentError,
    IncompleteAssessmentError,
    InvalidAnswerError,
    score,
)
from gradepath.services.grade_recommendation import recommend, recommendation_message
from gradepath.services.placement_catalog import PLACEMENT_QUESTIONS

# Dashboard
from gradepath.services.progress_aggregator import (
    ProgressRecord,
    CatalogLesson,
    DashboardSnapshot,
    LearningStats,
    aggregate,
)
from gradepath.services.streak_service import StreakService, get_streak_service

# Question bank assessment
from gradepath.services.assessment_evaluator import BankAnswer, EvaluationResult, evaluate
