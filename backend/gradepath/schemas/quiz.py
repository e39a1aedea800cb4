"""
Quiz schemas used when loading curriculum files.
"""

from typing import List, Optional

from pydantic import Field, StrictInt, model_validator

from gradepath.schemas.base import CamelModel


class QuizQuestionEntry(CamelModel):
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    correct_answer: StrictInt
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def check_answer_in_range(self) -> "QuizQuestionEntry":
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError(
                f"correctAnswer {self.correct_answer} out of range for {len(self.options)} options"
            )
        return self


class QuizEntry(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    questions: List[QuizQuestionEntry] = Field(default_factory=list)
    passing_score: int = Field(default=70, ge=0, le=100)
    time_limit: Optional[int] = Field(default=None, ge=0)  # Minutes
