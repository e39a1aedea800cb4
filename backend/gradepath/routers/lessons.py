"""
Lesson Catalog API Router.
Lesson listing, per-grade term and subject summaries, and lesson management.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from gradepath.database import get_db
from gradepath.schemas.lesson import (
    LessonCreate, LessonUpdate, LessonResponse, TermSummary, SubjectSummary
)
from gradepath.services import lesson_catalog
from gradepath.services.lesson_catalog import LessonNotFoundError
from gradepath.utils.formatting import normalize_grade_label

router = APIRouter(prefix="/api/lessons", tags=["lessons"])


def _canonical_grade(grade: str) -> str:
    try:
        return normalize_grade_label(grade)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[LessonResponse])
def list_lessons(
    subject: Optional[str] = None,
    grade: Optional[str] = None,
    term: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List lessons, optionally filtered by subject, grade and term."""
    if grade:
        grade = _canonical_grade(grade)
    return lesson_catalog.list_lessons(db, subject=subject, grade=grade, term=term)


@router.get("/terms-by-grade/{grade}", response_model=List[TermSummary])
def get_terms_by_grade(grade: str, db: Session = Depends(get_db)):
    """Terms available for a grade with subject and lesson counts."""
    return lesson_catalog.get_terms_by_grade(db, _canonical_grade(grade))


@router.get("/subjects-by-grade/{grade}", response_model=List[SubjectSummary])
def get_subjects_by_grade(grade: str, term: Optional[str] = None, db: Session = Depends(get_db)):
    """Subjects available for a grade (optionally one term) with lesson counts and pricing."""
    return lesson_catalog.get_subjects_by_grade(db, _canonical_grade(grade), term=term)


@router.get("/{lesson_id}", response_model=LessonResponse)
def get_lesson(lesson_id: str, db: Session = Depends(get_db)):
    try:
        return lesson_catalog.get_lesson(db, lesson_id)
    except LessonNotFoundError:
        raise HTTPException(status_code=404, detail="Lesson not found")


@router.post("", response_model=LessonResponse, status_code=201)
def create_lesson(payload: LessonCreate, db: Session = Depends(get_db)):
    return lesson_catalog.create_lesson(db, payload.model_dump())


@router.put("/{lesson_id}", response_model=LessonResponse)
def update_lesson(lesson_id: str, payload: LessonUpdate, db: Session = Depends(get_db)):
    try:
        return lesson_catalog.update_lesson(db, lesson_id, payload.model_dump(exclude_unset=True))
    except LessonNotFoundError:
        raise HTTPException(status_code=404, detail="Lesson not found")


@router.delete("/{lesson_id}", status_code=204)
def delete_lesson(lesson_id: str, db: Session = Depends(get_db)):
    try:
        lesson_catalog.delete_lesson(db, lesson_id)
    except LessonNotFoundError:
        raise HTTPException(status_code=404, detail="Lesson not found")
    return Response(status_code=204)
