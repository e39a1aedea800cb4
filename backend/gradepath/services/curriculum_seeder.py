"""
Curriculum Seeder.
Loads lessons (with nested quizzes) from a JSON curriculum file.

File format: a list of lesson objects using the lesson create fields
(camelCase or snake_case), each with an optional "quizzes" list of
{"title", "description", "questions": [{"question", "options",
"correctAnswer", "explanation"}], "passingScore", "timeLimit"}.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError
from sqlalchemy.orm import Session

from gradepath.models.models import Lesson, Quiz, UserProgress
from gradepath.schemas.lesson import LessonCreate
from gradepath.schemas.quiz import QuizEntry
from gradepath.utils.cache import catalog_cache

logger = logging.getLogger(__name__)


class CurriculumFormatError(ValueError):
    """Raised when a curriculum file entry cannot be loaded."""


def load_curriculum(path: Path) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise CurriculumFormatError(f"{path}: invalid JSON: {e}") from e

    if isinstance(data, dict) and "lessons" in data:
        data = data["lessons"]
    if not isinstance(data, list):
        raise CurriculumFormatError(f"{path}: expected a list of lessons")
    return data


def _validate_quiz(raw: Any, lesson_title: str, index: int) -> Dict[str, Any]:
    try:
        quiz = QuizEntry.model_validate(raw)
    except ValidationError as e:
        raise CurriculumFormatError(f"Lesson {lesson_title!r} quiz {index}: {e}") from e

    return {
        "title": quiz.title or f"{lesson_title} Quiz",
        "description": quiz.description or f"Check your understanding of {lesson_title}",
        "questions": [q.model_dump(by_alias=True) for q in quiz.questions],
        "passing_score": quiz.passing_score,
        "time_limit": quiz.time_limit,
    }


def seed_curriculum(db: Session, entries: List[Dict[str, Any]], clear: bool = False) -> Dict[str, int]:
    """
    Insert every lesson and quiz from the curriculum entries.

    Args:
        db: Database session
        entries: Parsed curriculum entries
        clear: Delete existing lessons, quizzes and progress first

    Returns:
        {"lessons": n, "quizzes": n}

    Raises:
        CurriculumFormatError: if an entry is invalid; nothing is committed
    """
    if clear:
        db.query(UserProgress).delete()
        db.query(Quiz).delete()
        db.query(Lesson).delete()
        logger.info("Cleared existing lessons, quizzes and progress")

    lesson_count = 0
    quiz_count = 0

    try:
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise CurriculumFormatError(f"Lesson entry {i}: expected an object")
            quizzes = entry.get("quizzes") or []
            if not isinstance(quizzes, list):
                raise CurriculumFormatError(f"Lesson entry {i}: quizzes must be a list")
            fields = {k: v for k, v in entry.items() if k != "quizzes"}
            try:
                lesson_data = LessonCreate.model_validate(fields).model_dump()
            except ValidationError as e:
                raise CurriculumFormatError(f"Lesson entry {i}: {e}") from e

            lesson = Lesson(**lesson_data)
            db.add(lesson)
            db.flush()
            lesson_count += 1

            for q, raw_quiz in enumerate(quizzes):
                db.add(Quiz(lesson_id=lesson.id, **_validate_quiz(raw_quiz, lesson.title, q)))
                quiz_count += 1

        db.commit()
    except Exception:
        db.rollback()
        raise

    catalog_cache.invalidate()
    logger.info("Seeded %d lessons and %d quizzes", lesson_count, quiz_count)
    return {"lessons": lesson_count, "quizzes": quiz_count}
