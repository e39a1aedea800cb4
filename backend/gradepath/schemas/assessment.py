"""
Assessment schemas: the static placement test and the quiz-bank evaluation.
"""

from typing import Dict, List, Optional

from pydantic import Field

from gradepath.schemas.base import CamelModel


# =============================================================================
# PLACEMENT TEST
# =============================================================================

class PlacementQuestionResponse(CamelModel):
    index: int
    id: int
    subject: str
    prompt_text: str
    options: List[str]
    grade_level: int
    grade_label: str
    subject_icon: str


class PlacementAnswer(CamelModel):
    question_index: int = Field(..., ge=0)
    selected_option_index: int


class PlacementSubmission(CamelModel):
    answers: List[PlacementAnswer]


class GradeAccuracyResponse(CamelModel):
    grade_level: int
    grade_label: str
    correct_count: int
    total_count: int
    percentage: int


class PlacementResultResponse(CamelModel):
    recommended_grade: int
    grade_label: str
    overall_percentage: int
    total_correct: int
    total_questions: int
    per_grade_accuracy: List[GradeAccuracyResponse]
    message: str


# =============================================================================
# QUESTION BANK
# =============================================================================

class BankQuestionResponse(CamelModel):
    question: str
    options: List[str]
    correct_answer: int
    explanation: Optional[str] = None
    subject: str
    grade: str
    difficulty: str
    lesson_id: str


class AssessmentQuestionsResponse(CamelModel):
    questions: List[BankQuestionResponse]
    total_questions: int
    grades: List[str]


class EvaluateAnswer(CamelModel):
    question_index: int
    selected_answer: Optional[int] = None
    correct_answer: int
    grade: str
    subject: str = "General"


class EvaluateRequest(CamelModel):
    answers: List[EvaluateAnswer]


class ScoreSummary(CamelModel):
    correct: int
    total: int
    percentage: float


class SubjectTally(CamelModel):
    correct: int
    total: int


class GradePerformanceResponse(CamelModel):
    grade: str
    correct: int
    total: int
    percentage: float
    subjects: Dict[str, SubjectTally]


class SubjectBreakdownResponse(CamelModel):
    subject: str
    correct: int
    total: int
    percentage: float


class GuidanceCardResponse(CamelModel):
    type: str
    icon: str
    title: str
    message: str


class AssessmentEvaluationResponse(CamelModel):
    recommended_grade: str
    confidence: str
    reason: str
    overall_score: ScoreSummary
    grade_performance: List[GradePerformanceResponse]
    subject_breakdown: List[SubjectBreakdownResponse]
    weak_subjects: List[str]
    strong_subjects: List[str]
    recommendations: List[GuidanceCardResponse]
