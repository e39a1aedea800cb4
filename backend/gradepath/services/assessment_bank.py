"""
Assessment Question Bank.
Draws a randomized grade-spanning assessment from the lesson quiz bank.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from gradepath.models.models import Lesson, Quiz
from gradepath.services.assessment_evaluator import SCHOOL_GRADES
from gradepath.utils.formatting import COMMON_ENTRANCE_LABEL

logger = logging.getLogger(__name__)

QUESTIONS_PER_GRADE = 3
COMMON_ENTRANCE_QUESTIONS = 3
COMMON_ENTRANCE_SOURCE_GRADE = "Grade 6"
COMMON_ENTRANCE_DIFFICULTIES = ("advanced", "hard")


def _bank_questions(db: Session, lessons: List[Lesson], grade_override: Optional[str] = None) -> List[Dict[str, Any]]:
    """Flatten every quiz question attached to the given lessons."""
    if not lessons:
        return []

    by_id = {lesson.id: lesson for lesson in lessons}
    quizzes = db.query(Quiz).filter(Quiz.lesson_id.in_(list(by_id))).all()

    questions = []
    for quiz in quizzes:
        lesson = by_id[quiz.lesson_id]
        for q in quiz.questions or []:
            questions.append({
                "question": q["question"],
                "options": q["options"],
                "correctAnswer": q["correctAnswer"],
                "explanation": q.get("explanation"),
                "subject": lesson.subject or "General",
                "grade": grade_override or lesson.grade,
                "difficulty": "advanced" if grade_override else (lesson.difficulty or "medium"),
                "lessonId": lesson.id,
            })
    return questions


def select_assessment_questions(db: Session, rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    """
    Pick up to three random questions per school grade plus up to three
    Common Entrance questions (from advanced Grade 6 lessons), shuffled.
    """
    rng = rng or random.Random()
    selected: List[Dict[str, Any]] = []

    for grade in SCHOOL_GRADES:
        lessons = db.query(Lesson).filter(Lesson.grade == grade).all()
        pool = _bank_questions(db, lessons)
        if not pool:
            logger.info("No quiz questions found for %s", grade)
            continue
        selected.extend(rng.sample(pool, min(QUESTIONS_PER_GRADE, len(pool))))

    advanced = db.query(Lesson).filter(
        Lesson.grade == COMMON_ENTRANCE_SOURCE_GRADE,
        Lesson.difficulty.in_(COMMON_ENTRANCE_DIFFICULTIES)
    ).all()
    ce_pool = _bank_questions(db, advanced, grade_override=COMMON_ENTRANCE_LABEL)
    selected.extend(rng.sample(ce_pool, min(COMMON_ENTRANCE_QUESTIONS, len(ce_pool))))

    rng.shuffle(selected)
    return selected
