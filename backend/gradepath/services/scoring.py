"""
Placement Assessment Scoring Engine.

Scores a finished placement assessment: accuracy per grade level and overall,
then hands the per-level accuracy to the grade recommendation resolver.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from gradepath.services.grade_recommendation import recommend
from gradepath.utils.formatting import percentage

logger = logging.getLogger(__name__)

OPTIONS_PER_QUESTION = 4


class AssessmentError(ValueError):
    """Base error for answer sets that cannot be scored."""


class IncompleteAssessmentError(AssessmentError):
    """Raised when the answer set does not cover every question."""


class InvalidAnswerError(AssessmentError):
    """Raised when an answer refers to an unknown question or option."""


@dataclass(frozen=True)
class Question:
    id: int
    subject: str
    prompt_text: str
    options: Tuple[str, ...]
    correct_option_index: int
    grade_level: int  # 1-6 school grades, 7 = Common Entrance
    subject_icon: str = "book-open"


@dataclass(frozen=True)
class AnswerSubmission:
    question_index: int
    selected_option_index: int


@dataclass
class GradeAccuracy:
    grade_level: int
    correct_count: int = 0
    total_count: int = 0

    @property
    def ratio(self) -> float:
        """Unrounded accuracy in percent; 0 for a level without questions."""
        if self.total_count == 0:
            return 0.0
        return 100 * self.correct_count / self.total_count

    @property
    def percentage(self) -> int:
        return percentage(self.correct_count, self.total_count)


@dataclass
class RecommendationResult:
    recommended_grade: int
    overall_percentage: int
    total_correct: int
    total_questions: int
    per_grade_accuracy: List[GradeAccuracy] = field(default_factory=list)

    def accuracy_for(self, grade_level: int) -> GradeAccuracy:
        for accuracy in self.per_grade_accuracy:
            if accuracy.grade_level == grade_level:
                return accuracy
        raise KeyError(grade_level)


def _order_answers(
    questions: Sequence[Question],
    answers: Sequence[AnswerSubmission]
) -> List[AnswerSubmission]:
    """Validate the answer set and return it indexed by question position."""
    if len(answers) < len(questions):
        raise IncompleteAssessmentError(
            f"Assessment incomplete: {len(answers)} of {len(questions)} questions answered"
        )
    if len(answers) > len(questions):
        raise InvalidAnswerError(
            f"Received {len(answers)} answers for {len(questions)} questions"
        )

    ordered: Dict[int, AnswerSubmission] = {}
    for answer in answers:
        if not 0 <= answer.question_index < len(questions):
            raise InvalidAnswerError(f"Unknown question index {answer.question_index}")
        if answer.question_index in ordered:
            raise InvalidAnswerError(f"Question {answer.question_index} answered twice")
        if not 0 <= answer.selected_option_index < OPTIONS_PER_QUESTION:
            raise InvalidAnswerError(
                f"Option {answer.selected_option_index} out of range for question {answer.question_index}"
            )
        ordered[answer.question_index] = answer

    return [ordered[i] for i in range(len(questions))]


def score(
    questions: Sequence[Question],
    answers: Sequence[AnswerSubmission]
) -> RecommendationResult:
    """
    Score a completed placement assessment.

    Args:
        questions: The ordered question catalog the learner was shown
        answers: One submission per question, in any order

    Returns:
        RecommendationResult with per-level accuracy (ascending grade level),
        overall percentage and the recommended grade level

    Raises:
        IncompleteAssessmentError: if any question is unanswered
        InvalidAnswerError: if an answer references an unknown question or option
    """
    ordered_answers = _order_answers(questions, answers)

    by_grade: Dict[int, GradeAccuracy] = {}
    total_correct = 0

    for question, answer in zip(questions, ordered_answers):
        accuracy = by_grade.setdefault(question.grade_level, GradeAccuracy(question.grade_level))
        accuracy.total_count += 1
        if answer.selected_option_index == question.correct_option_index:
            accuracy.correct_count += 1
            total_correct += 1

    per_grade = [by_grade[level] for level in sorted(by_grade)]
    overall = percentage(total_correct, len(questions))

    # Thresholds are checked against unrounded accuracy so 69.5% stays below 70%
    recommended = recommend(
        {a.grade_level: a.ratio for a in per_grade},
        100 * total_correct / len(questions) if questions else 0.0,
    )

    logger.debug(
        "Scored assessment: %d/%d correct, recommended level %d",
        total_correct, len(questions), recommended
    )

    return RecommendationResult(
        recommended_grade=recommended,
        overall_percentage=overall,
        total_correct=total_correct,
        total_questions=len(questions),
        per_grade_accuracy=per_grade,
    )
