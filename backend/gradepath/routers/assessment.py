"""
Assessment API Router.

Two assessments feed grade placement:
- The placement test: a fixed 15-question catalog scored in-process
- The question-bank assessment: randomized questions drawn from lesson quizzes
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from gradepath.database import get_db
from gradepath.schemas.assessment import (
    PlacementQuestionResponse,
    PlacementSubmission,
    PlacementResultResponse,
    GradeAccuracyResponse,
    AssessmentQuestionsResponse,
    EvaluateRequest,
    AssessmentEvaluationResponse,
    GradePerformanceResponse,
    SubjectBreakdownResponse,
    GuidanceCardResponse,
    ScoreSummary,
    SubjectTally,
)
from gradepath.services.assessment_bank import select_assessment_questions
from gradepath.services.assessment_evaluator import BankAnswer, GRADE_LABELS, evaluate
from gradepath.services.grade_recommendation import recommendation_message
from gradepath.services.placement_catalog import PLACEMENT_QUESTIONS
from gradepath.services.scoring import AnswerSubmission, AssessmentError, score
from gradepath.utils.formatting import grade_label

router = APIRouter(prefix="/api/assessment", tags=["assessment"])


# ============================================================================
# PLACEMENT TEST
# ============================================================================

@router.get("/placement", response_model=List[PlacementQuestionResponse])
def get_placement_questions():
    """The placement catalog in presentation order, without answer keys."""
    return [
        PlacementQuestionResponse(
            index=i,
            id=q.id,
            subject=q.subject,
            prompt_text=q.prompt_text,
            options=list(q.options),
            grade_level=q.grade_level,
            grade_label=grade_label(q.grade_level),
            subject_icon=q.subject_icon,
        )
        for i, q in enumerate(PLACEMENT_QUESTIONS)
    ]


@router.post("/placement/score", response_model=PlacementResultResponse)
def score_placement(submission: PlacementSubmission):
    """Score a completed placement test and recommend a starting grade."""
    answers = [
        AnswerSubmission(a.question_index, a.selected_option_index)
        for a in submission.answers
    ]
    try:
        result = score(PLACEMENT_QUESTIONS, answers)
    except AssessmentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PlacementResultResponse(
        recommended_grade=result.recommended_grade,
        grade_label=grade_label(result.recommended_grade),
        overall_percentage=result.overall_percentage,
        total_correct=result.total_correct,
        total_questions=result.total_questions,
        per_grade_accuracy=[
            GradeAccuracyResponse(
                grade_level=a.grade_level,
                grade_label=grade_label(a.grade_level),
                correct_count=a.correct_count,
                total_count=a.total_count,
                percentage=a.percentage,
            )
            for a in result.per_grade_accuracy
        ],
        message=recommendation_message(result.recommended_grade),
    )


# ============================================================================
# QUESTION BANK ASSESSMENT
# ============================================================================

@router.get("/questions", response_model=AssessmentQuestionsResponse)
def get_assessment_questions(db: Session = Depends(get_db)):
    """Randomized questions spanning Grade 1 through Common Entrance."""
    questions = select_assessment_questions(db)
    if not questions:
        raise HTTPException(
            status_code=404,
            detail="No assessment questions available. Please add quizzes to lessons first."
        )

    return AssessmentQuestionsResponse(
        questions=questions,
        total_questions=len(questions),
        grades=GRADE_LABELS,
    )


@router.post("/evaluate", response_model=AssessmentEvaluationResponse)
def evaluate_assessment(request: EvaluateRequest):
    """Evaluate question-bank answers and recommend a grade with study guidance."""
    answers = [
        BankAnswer(
            question_index=a.question_index,
            selected_answer=a.selected_answer,
            correct_answer=a.correct_answer,
            grade=a.grade,
            subject=a.subject,
        )
        for a in request.answers
    ]
    try:
        result = evaluate(answers)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return AssessmentEvaluationResponse(
        recommended_grade=result.recommended_grade,
        confidence=result.confidence,
        reason=result.reason,
        overall_score=ScoreSummary(
            correct=result.overall.correct,
            total=result.overall.total,
            percentage=result.overall.percentage,
        ),
        grade_performance=[
            GradePerformanceResponse(
                grade=perf.grade,
                correct=perf.tally.correct,
                total=perf.tally.total,
                percentage=perf.tally.percentage,
                subjects={
                    subject: SubjectTally(correct=t.correct, total=t.total)
                    for subject, t in perf.subjects.items()
                },
            )
            for perf in result.grade_performance
        ],
        subject_breakdown=[
            SubjectBreakdownResponse(
                subject=subject, correct=t.correct, total=t.total, percentage=t.percentage
            )
            for subject, t in result.subject_breakdown.items()
        ],
        weak_subjects=result.weak_subjects,
        strong_subjects=result.strong_subjects,
        recommendations=[
            GuidanceCardResponse(type=c.type, icon=c.icon, title=c.title, message=c.message)
            for c in result.recommendations
        ],
    )
