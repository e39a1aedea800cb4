"""
GradePath Schemas Package

Pydantic models for request/response validation. JSON field names are
camelCase (lessonId, quizScore, lastAccessedAt) to match the web client.
"""

from gradepath.schemas.base import CamelModel
from gradepath.schemas.lesson import (
    LessonCreate,
    LessonUpdate,
    LessonResponse,
    LessonSummary,
    TermSummary,
    SubjectSummary,
)
from gradepath.schemas.progress import ProgressUpsert, ProgressResponse
from gradepath.schemas.quiz import QuizEntry, QuizQuestionEntry
from gradepath.schemas.dashboard import DashboardResponse
from gradepath.schemas.assessment import (
    PlacementQuestionResponse,
    PlacementSubmission,
    PlacementResultResponse,
    AssessmentQuestionsResponse,
    EvaluateRequest,
    AssessmentEvaluationResponse,
)

__all__ = [
    "CamelModel",
    "LessonCreate",
    "LessonUpdate",
    "LessonResponse",
    "LessonSummary",
    "TermSummary",
    "SubjectSummary",
    "ProgressUpsert",
    "ProgressResponse",
    "QuizEntry",
    "QuizQuestionEntry",
    "DashboardResponse",
    "PlacementQuestionResponse",
    "PlacementSubmission",
    "PlacementResultResponse",
    "AssessmentQuestionsResponse",
    "EvaluateRequest",
    "AssessmentEvaluationResponse",
]
