"""
Lesson Catalog Service.
Lesson queries, per-grade aggregates (cached) and lesson writes.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, distinct
from sqlalchemy.orm import Session

from gradepath.models.models import Lesson, TERM_NAMES
from gradepath.utils.cache import catalog_cache

logger = logging.getLogger(__name__)


class LessonNotFoundError(LookupError):
    """Raised when a lesson id does not exist."""


def list_lessons(
    db: Session,
    subject: Optional[str] = None,
    grade: Optional[str] = None,
    term: Optional[str] = None
) -> List[Lesson]:
    """Lessons matching the optional filters, sorted by grade, term, title."""
    query = db.query(Lesson)
    if subject:
        query = query.filter(Lesson.subject == subject)
    if grade:
        query = query.filter(Lesson.grade == grade)
    if term:
        query = query.filter(Lesson.term == term)
    return query.order_by(Lesson.grade, Lesson.term, Lesson.title).all()


def get_lesson(db: Session, lesson_id: str) -> Lesson:
    lesson = db.query(Lesson).filter(Lesson.id == lesson_id).first()
    if not lesson:
        raise LessonNotFoundError(lesson_id)
    return lesson


def get_terms_by_grade(db: Session, grade: str) -> List[Dict[str, Any]]:
    """
    Terms offered for a grade with subject and lesson counts.

    Returns:
        [{"name", "subjectCount", "lessonCount"}] in term order
    """
    cache_key = f"terms:{grade}"
    cached = catalog_cache.get(cache_key)
    if cached is not None:
        return cached

    rows = db.query(
        Lesson.term,
        func.count(distinct(Lesson.subject)),
        func.count(Lesson.id)
    ).filter(
        Lesson.grade == grade
    ).group_by(Lesson.term).all()

    term_rank = {name: i for i, name in enumerate(TERM_NAMES)}
    terms = sorted(
        (
            {"name": term, "subjectCount": subject_count, "lessonCount": lesson_count}
            for term, subject_count, lesson_count in rows
        ),
        key=lambda t: term_rank.get(t["name"], len(TERM_NAMES)),
    )

    catalog_cache.set(cache_key, terms)
    return terms


def get_subjects_by_grade(db: Session, grade: str, term: Optional[str] = None) -> List[Dict[str, Any]]:
    """Per-subject lesson counts, average price and total duration for a grade."""
    cache_key = f"subjects:{grade}:{term or 'all'}"
    cached = catalog_cache.get(cache_key)
    if cached is not None:
        return cached

    query = db.query(
        Lesson.subject,
        func.count(Lesson.id),
        func.avg(func.coalesce(Lesson.price, 0)),
        func.sum(func.coalesce(Lesson.duration, 0)),
        func.min(Lesson.difficulty)
    ).filter(Lesson.grade == grade)
    if term:
        query = query.filter(Lesson.term == term)

    rows = query.group_by(Lesson.subject).order_by(Lesson.subject).all()
    subjects = [
        {
            "name": subject,
            "lessonCount": lesson_count,
            "price": round(float(avg_price or 0)),
            "duration": int(total_duration or 0),
            "difficulty": difficulty,
        }
        for subject, lesson_count, avg_price, total_duration, difficulty in rows
    ]

    catalog_cache.set(cache_key, subjects)
    return subjects


def create_lesson(db: Session, data: Dict[str, Any]) -> Lesson:
    lesson = Lesson(**data)
    db.add(lesson)
    db.commit()
    db.refresh(lesson)

    catalog_cache.invalidate()
    logger.info("Created lesson %s (%s, %s, %s)", lesson.id, lesson.grade, lesson.term, lesson.subject)
    return lesson


def update_lesson(db: Session, lesson_id: str, changes: Dict[str, Any]) -> Lesson:
    lesson = get_lesson(db, lesson_id)
    for key, value in changes.items():
        setattr(lesson, key, value)
    db.commit()
    db.refresh(lesson)

    catalog_cache.invalidate()
    logger.info("Updated lesson %s: %s", lesson_id, sorted(changes))
    return lesson


def delete_lesson(db: Session, lesson_id: str) -> None:
    lesson = get_lesson(db, lesson_id)
    db.delete(lesson)
    db.commit()

    catalog_cache.invalidate()
    logger.info("Deleted lesson %s", lesson_id)
