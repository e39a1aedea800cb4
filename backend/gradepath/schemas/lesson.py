"""
Lesson catalog schemas.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from gradepath.schemas.base import CamelModel
from gradepath.utils.formatting import normalize_grade_label

TermName = Literal["First Term", "Second Term", "Third Term"]
Difficulty = Literal["beginner", "intermediate", "advanced", "easy", "medium", "hard"]


class LessonCreate(CamelModel):
    title: str = Field(..., min_length=1)
    subtitle: Optional[str] = None
    description: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    grade: str
    term: TermName
    order: Optional[int] = None
    difficulty: Difficulty = "beginner"
    duration: int = Field(default=30, ge=0)
    price: float = Field(default=0, ge=0)

    @field_validator("grade")
    @classmethod
    def validate_grade(cls, v: str) -> str:
        return normalize_grade_label(v)


class LessonUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    subtitle: Optional[str] = None
    description: Optional[str] = Field(default=None, min_length=1)
    subject: Optional[str] = Field(default=None, min_length=1)
    grade: Optional[str] = None
    term: Optional[TermName] = None
    order: Optional[int] = None
    difficulty: Optional[Difficulty] = None
    duration: Optional[int] = Field(default=None, ge=0)
    price: Optional[float] = Field(default=None, ge=0)

    @field_validator("title", "description", "subject", "grade", "term", "difficulty", "price", mode="before")
    @classmethod
    def reject_null(cls, v):
        # Omit a field to leave it unchanged; these columns are NOT NULL
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("grade")
    @classmethod
    def validate_grade(cls, v: Optional[str]) -> Optional[str]:
        return normalize_grade_label(v) if v is not None else v


class LessonSummary(CamelModel):
    """Lesson fields embedded in dashboard cards."""
    id: str
    subject: str
    grade: str
    term: str
    title: str
    description: str
    difficulty: str
    order: Optional[int] = None
    duration: Optional[int] = None
    price: Optional[float] = None


class LessonResponse(LessonSummary):
    subtitle: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class TermSummary(CamelModel):
    name: str
    subject_count: int
    lesson_count: int


class SubjectSummary(CamelModel):
    name: str
    lesson_count: int
    price: int
    duration: int
    difficulty: Optional[str] = None
