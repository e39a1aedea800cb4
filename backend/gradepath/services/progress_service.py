"""
Learner Progress Service.
Reads and upserts progress records and builds dashboard snapshots.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gradepath.models.models import Lesson, UserProgress
from gradepath.services.lesson_catalog import get_lesson
from gradepath.services.progress_aggregator import (
    CatalogLesson, DashboardSnapshot, ProgressRecord, aggregate
)

logger = logging.getLogger(__name__)


def get_user_progress(db: Session, user_id: str) -> List[UserProgress]:
    return db.query(UserProgress).filter(
        UserProgress.user_id == user_id
    ).order_by(UserProgress.last_accessed_at.desc()).all()


def _find_progress(db: Session, user_id: str, lesson_id: str) -> Optional[UserProgress]:
    return db.query(UserProgress).filter(
        UserProgress.user_id == user_id,
        UserProgress.lesson_id == lesson_id
    ).first()


def _insert_progress(db: Session, user_id: str, lesson_id: str) -> UserProgress:
    """
    Insert an empty (user, lesson) record inside a savepoint.

    A concurrent request may insert the same pair between our lookup and
    flush; the unique constraint rejects ours and the winner's row is used.
    """
    try:
        with db.begin_nested():
            progress = UserProgress(user_id=user_id, lesson_id=lesson_id, time_spent=0)
            db.add(progress)
        return progress
    except IntegrityError:
        logger.info("Progress for user %s lesson %s created concurrently, updating it", user_id, lesson_id)
        return _find_progress(db, user_id, lesson_id)


def upsert_progress(
    db: Session,
    user_id: str,
    lesson_id: str,
    completed: bool,
    quiz_score: Optional[float] = None,
    time_spent: Optional[int] = None,
    now: Optional[datetime] = None
) -> UserProgress:
    """
    Create or update the (user, lesson) progress record.

    Touching a record always refreshes last_accessed_at. completed_at is set
    when the lesson is completed and cleared when it is marked incomplete.

    Raises:
        LessonNotFoundError: if the lesson does not exist
    """
    get_lesson(db, lesson_id)
    now = now or datetime.utcnow()

    progress = _find_progress(db, user_id, lesson_id)
    if progress is None:
        progress = _insert_progress(db, user_id, lesson_id)

    progress.completed = completed
    progress.completed_at = now if completed else None
    progress.last_accessed_at = now
    if quiz_score is not None:
        progress.quiz_score = quiz_score
    if time_spent is not None:
        progress.time_spent = time_spent

    db.commit()
    db.refresh(progress)

    logger.info(
        "Progress saved for user %s lesson %s (completed=%s, score=%s)",
        user_id, lesson_id, completed, progress.quiz_score
    )
    return progress


def build_dashboard(
    db: Session,
    user_id: str,
    grade: str,
    now: Optional[datetime] = None
) -> DashboardSnapshot:
    """Aggregate the user's progress against the lesson catalog of one grade."""
    records = [ProgressRecord.from_model(p) for p in get_user_progress(db, user_id)]
    lessons = [
        CatalogLesson.from_model(l)
        for l in db.query(Lesson).filter(Lesson.grade == grade).all()
    ]
    return aggregate(records, lessons, now)
