from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, JSON, ForeignKey, Text, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from gradepath.database import Base

TERM_NAMES = ("First Term", "Second Term", "Third Term")

LESSON_DIFFICULTIES = ("beginner", "intermediate", "advanced", "easy", "medium", "hard")


def generate_uuid():
    return str(uuid.uuid4())


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(String, primary_key=True, default=generate_uuid)
    title = Column(String, nullable=False)
    subtitle = Column(String, nullable=True)
    description = Column(Text, nullable=False)
    subject = Column(String, nullable=False, index=True)
    grade = Column(String, nullable=False, index=True)  # "Grade 1".."Grade 6", "Common Entrance"
    term = Column(String, nullable=False)  # One of TERM_NAMES
    order = Column(Integer, nullable=True)  # Position within subject; unset sorts last
    difficulty = Column(String, default="beginner", index=True)
    duration = Column(Integer, default=30)  # Minutes
    price = Column(Float, nullable=False, default=0)  # Naira

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    quizzes = relationship("Quiz", back_populates="lesson", cascade="all, delete-orphan")
    progress = relationship("UserProgress", back_populates="lesson", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_lessons_subject_grade_term", "subject", "grade", "term"),
        Index("ix_lessons_grade_term", "grade", "term"),
    )


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(String, primary_key=True, default=generate_uuid)
    lesson_id = Column(String, ForeignKey("lessons.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    # List of {"question", "options", "correctAnswer", "explanation"}
    questions = Column(JSON, nullable=False, default=list)
    passing_score = Column(Integer, default=70)
    time_limit = Column(Integer, nullable=True)  # Minutes

    created_at = Column(DateTime, default=datetime.utcnow)

    lesson = relationship("Lesson", back_populates="quizzes")


class UserProgress(Base):
    __tablename__ = "user_progress"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    lesson_id = Column(String, ForeignKey("lessons.id"), nullable=False, index=True)
    completed = Column(Boolean, default=False)
    quiz_score = Column(Float, nullable=True)  # 0-100
    time_spent = Column(Integer, default=0)  # Seconds
    last_accessed_at = Column(DateTime, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    lesson = relationship("Lesson", back_populates="progress")

    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_user_progress_user_lesson"),
    )
