"""
Learner Progress API Router.
Progress records and the derived learner dashboard.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from gradepath.database import get_db
from gradepath.schemas.dashboard import DashboardResponse
from gradepath.schemas.progress import ProgressUpsert, ProgressResponse
from gradepath.services.lesson_catalog import LessonNotFoundError
from gradepath.services.progress_service import build_dashboard, get_user_progress, upsert_progress
from gradepath.utils.formatting import normalize_grade_label

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("/{user_id}", response_model=List[ProgressResponse])
def list_progress(user_id: str, db: Session = Depends(get_db)):
    """All progress records for a user, most recently touched first."""
    return get_user_progress(db, user_id)


@router.post("", response_model=ProgressResponse)
def save_progress(payload: ProgressUpsert, db: Session = Depends(get_db)):
    """Create or update the progress record for (userId, lessonId)."""
    try:
        return upsert_progress(
            db,
            user_id=payload.user_id,
            lesson_id=payload.lesson_id,
            completed=payload.completed,
            quiz_score=payload.quiz_score,
            time_spent=payload.time_spent,
        )
    except LessonNotFoundError:
        raise HTTPException(status_code=404, detail="Lesson not found")


@router.get("/{user_id}/dashboard", response_model=DashboardResponse)
def get_dashboard(
    user_id: str,
    grade: str = Query(..., description='Catalog grade, e.g. "Grade 3" or "Common Entrance"'),
    db: Session = Depends(get_db)
):
    """Learning stats, streaks, term progress and recommendations for one grade."""
    try:
        canonical_grade = normalize_grade_label(grade)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    snapshot = build_dashboard(db, user_id, canonical_grade)
    return DashboardResponse.model_validate(snapshot)
