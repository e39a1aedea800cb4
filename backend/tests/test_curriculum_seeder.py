"""
Tests for loading the lesson curriculum from JSON.
"""

import json
import pytest
from pathlib import Path
from sqlalchemy.orm import Session

from gradepath.models.models import Lesson, Quiz
from gradepath.services.curriculum_seeder import (
    CurriculumFormatError,
    load_curriculum,
    seed_curriculum,
)

SAMPLE_CURRICULUM = Path(__file__).resolve().parent.parent / "scripts" / "data" / "sample_curriculum.json"


def lesson_entry(**overrides):
    entry = {
        "title": "Telling Time",
        "description": "Read an analogue clock",
        "subject": "Mathematics",
        "grade": "Grade 2",
        "term": "Third Term",
        "quizzes": [{
            "questions": [
                {"question": "Minutes in an hour?", "options": ["30", "60", "90", "100"], "correctAnswer": 1},
            ],
        }],
    }
    entry.update(overrides)
    return entry


class TestLoadCurriculum:
    """Test reading curriculum files"""

    @pytest.mark.unit
    def test_sample_file(self):
        entries = load_curriculum(SAMPLE_CURRICULUM)
        assert len(entries) == 4
        assert all("quizzes" in e for e in entries)

    @pytest.mark.unit
    def test_wrapped_in_lessons_key(self, tmp_path: Path):
        path = tmp_path / "curriculum.json"
        path.write_text(json.dumps({"lessons": [lesson_entry()]}))
        assert len(load_curriculum(path)) == 1

    @pytest.mark.unit
    def test_not_a_list(self, tmp_path: Path):
        path = tmp_path / "curriculum.json"
        path.write_text(json.dumps({"title": "lonely"}))
        with pytest.raises(CurriculumFormatError):
            load_curriculum(path)


class TestSeedCurriculum:
    """Integration tests for inserting lessons and quizzes"""

    @pytest.mark.integration
    def test_seed_sample(self, db: Session):
        counts = seed_curriculum(db, load_curriculum(SAMPLE_CURRICULUM))

        assert counts == {"lessons": 4, "quizzes": 4}
        assert db.query(Lesson).count() == 4
        assert db.query(Quiz).count() == 4

    @pytest.mark.integration
    def test_quiz_defaults(self, db: Session):
        seed_curriculum(db, [lesson_entry()])

        quiz = db.query(Quiz).one()
        assert quiz.title == "Telling Time Quiz"
        assert quiz.passing_score == 70
        assert quiz.lesson.grade == "Grade 2"

    @pytest.mark.integration
    def test_grade_normalized(self, db: Session):
        seed_curriculum(db, [lesson_entry(grade="common entrance")])
        assert db.query(Lesson).one().grade == "Common Entrance"

    @pytest.mark.integration
    def test_clear_replaces_existing(self, db: Session, grade3_lessons):
        seed_curriculum(db, [lesson_entry()], clear=True)
        assert [l.title for l in db.query(Lesson).all()] == ["Telling Time"]

    @pytest.mark.integration
    def test_invalid_lesson(self, db: Session):
        with pytest.raises(CurriculumFormatError, match="Lesson entry 1"):
            seed_curriculum(db, [lesson_entry(), lesson_entry(term="Summer")])

    @pytest.mark.integration
    def test_answer_out_of_range(self, db: Session):
        entry = lesson_entry()
        entry["quizzes"][0]["questions"][0]["correctAnswer"] = 4
        with pytest.raises(CurriculumFormatError, match="out of range"):
            seed_curriculum(db, [entry])

    @pytest.mark.integration
    def test_question_missing_fields(self, db: Session):
        entry = lesson_entry()
        del entry["quizzes"][0]["questions"][0]["options"]
        with pytest.raises(CurriculumFormatError, match="missing"):
            seed_curriculum(db, [entry])

    @pytest.mark.integration
    def test_stored_questions_keep_camel_case(self, db: Session):
        seed_curriculum(db, [lesson_entry()])
        question = db.query(Quiz).one().questions[0]
        assert question["correctAnswer"] == 1
        assert question["options"] == ["30", "60", "90", "100"]


class TestMalformedQuizzes:
    """Wrongly typed curriculum entries are reported, not crashed on"""

    @pytest.mark.integration
    @pytest.mark.parametrize("question", [
        {"question": "q", "options": ["a", "b"], "correctAnswer": "1"},
        {"question": "q", "options": ["a", "b"], "correctAnswer": 1.0},
        {"question": "q", "options": ["a", "b"], "correctAnswer": True},
        {"question": "q", "options": "ab", "correctAnswer": 0},
        {"question": "q", "options": None, "correctAnswer": 0},
        {"question": "q", "options": ["only"], "correctAnswer": 0},
        {"question": "", "options": ["a", "b"], "correctAnswer": 0},
        "What is 2 + 2?",
        ["q", ["a", "b"], 0],
    ])
    def test_bad_question(self, db: Session, question):
        entry = lesson_entry(quizzes=[{"questions": [question]}])
        with pytest.raises(CurriculumFormatError, match="quiz 0"):
            seed_curriculum(db, [entry])
        assert db.query(Lesson).count() == 0

    @pytest.mark.integration
    @pytest.mark.parametrize("quiz", [
        "quiz",
        {"questions": "none"},
        {"questions": [], "passingScore": 150},
    ])
    def test_bad_quiz(self, db: Session, quiz):
        with pytest.raises(CurriculumFormatError, match="quiz 0"):
            seed_curriculum(db, [lesson_entry(quizzes=[quiz])])

    @pytest.mark.integration
    def test_quizzes_not_a_list(self, db: Session):
        with pytest.raises(CurriculumFormatError, match="quizzes must be a list"):
            seed_curriculum(db, [lesson_entry(quizzes={"questions": []})])

    @pytest.mark.integration
    def test_lesson_entry_not_an_object(self, db: Session):
        with pytest.raises(CurriculumFormatError, match="Lesson entry 1"):
            seed_curriculum(db, [lesson_entry(), "Telling Time"])

    @pytest.mark.unit
    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "curriculum.json"
        path.write_text('[{"title": "unterminated"')
        with pytest.raises(CurriculumFormatError, match="invalid JSON"):
            load_curriculum(path)
