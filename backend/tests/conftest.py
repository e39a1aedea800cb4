"""
Pytest configuration and fixtures for GradePath backend tests.

Provides:
- Test database setup/teardown
- FastAPI test client
- Lesson, quiz and progress fixtures
"""

import pytest
import os
from typing import Generator, List
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test_gradepath.db"
os.environ.pop("REDIS_URL", None)

from gradepath.main import app
from gradepath.database import Base, get_db
from gradepath.models.models import Lesson, Quiz, UserProgress
from gradepath.utils.cache import catalog_cache


# Test database setup
TEST_DATABASE_URL = "sqlite:///./test_gradepath.db"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

TEST_USER_ID = "test-user-123"


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database tables once per test session"""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()
    if os.path.exists("./test_gradepath.db"):
        os.remove("./test_gradepath.db")


@pytest.fixture(autouse=True)
def clear_catalog_cache():
    """Catalog aggregates must not leak between rolled-back tests"""
    catalog_cache.invalidate()
    yield
    catalog_cache.invalidate()


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Provide a database session for each test, with rollback after"""
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    if transaction.is_active:
        transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Provide FastAPI test client with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =========================================================================
# Lesson Fixtures
# =========================================================================

def _make_lesson(db: Session, **overrides) -> Lesson:
    fields = dict(
        title="Untitled Lesson",
        description="Lesson description",
        subject="Mathematics",
        grade="Grade 3",
        term="First Term",
        difficulty="medium",
        duration=30,
        price=1200,
    )
    fields.update(overrides)
    lesson = Lesson(**fields)
    db.add(lesson)
    db.commit()
    db.refresh(lesson)
    return lesson


@pytest.fixture
def grade3_lessons(db: Session) -> List[Lesson]:
    """Six Grade 3 lessons: three Mathematics, two English, one Science"""
    created = datetime(2024, 1, 1)
    specs = [
        ("Place Value", "Mathematics", "First Term", 1),
        ("Multiplication", "Mathematics", "First Term", 2),
        ("Fractions", "Mathematics", "Second Term", 3),
        ("Nouns", "English", "First Term", 1),
        ("Verbs", "English", "Second Term", 2),
        ("Living Things", "Science", "Third Term", None),
    ]
    lessons = []
    for i, (title, subject, term, order) in enumerate(specs):
        lessons.append(_make_lesson(
            db,
            title=title,
            subject=subject,
            term=term,
            order=order,
            created_at=created + timedelta(days=i),
        ))
    return lessons


@pytest.fixture
def grade6_lesson(db: Session) -> Lesson:
    return _make_lesson(
        db,
        title="Linear Equations",
        subject="Mathematics",
        grade="Grade 6",
        term="Third Term",
        difficulty="advanced",
    )


@pytest.fixture
def quiz_bank(db: Session, grade3_lessons: List[Lesson], grade6_lesson: Lesson) -> List[Quiz]:
    """One four-question quiz for the first Grade 3 lesson and one for the Grade 6 lesson"""
    quizzes = []
    for lesson in (grade3_lessons[0], grade6_lesson):
        quiz = Quiz(
            lesson_id=lesson.id,
            title=f"{lesson.title} Quiz",
            description="Check your understanding",
            questions=[
                {
                    "question": f"{lesson.title} question {i}",
                    "options": ["A", "B", "C", "D"],
                    "correctAnswer": i % 4,
                    "explanation": "Because",
                }
                for i in range(4)
            ],
        )
        db.add(quiz)
        quizzes.append(quiz)
    db.commit()
    return quizzes


# =========================================================================
# Progress Fixtures
# =========================================================================

def _make_progress(
    db: Session,
    lesson: Lesson,
    last_accessed_at: datetime,
    completed: bool = False,
    quiz_score: float = None,
    user_id: str = TEST_USER_ID,
    time_spent: int = 0
) -> UserProgress:
    progress = UserProgress(
        user_id=user_id,
        lesson_id=lesson.id,
        completed=completed,
        quiz_score=quiz_score,
        time_spent=time_spent,
        last_accessed_at=last_accessed_at,
        completed_at=last_accessed_at if completed else None,
    )
    db.add(progress)
    db.commit()
    db.refresh(progress)
    return progress


@pytest.fixture
def test_user_id() -> str:
    return TEST_USER_ID


@pytest.fixture
def lesson_factory(db: Session):
    """Create lessons with overridable defaults"""
    return lambda **overrides: _make_lesson(db, **overrides)


@pytest.fixture
def progress_factory(db: Session):
    """Create progress records for a lesson"""
    return lambda lesson, last_accessed_at, **kwargs: _make_progress(db, lesson, last_accessed_at, **kwargs)
