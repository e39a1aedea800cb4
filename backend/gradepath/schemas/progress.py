from datetime import datetime
from typing import Optional

from pydantic import Field

from gradepath.schemas.base import CamelModel


class ProgressUpsert(CamelModel):
    user_id: str = Field(..., min_length=1)
    lesson_id: str = Field(..., min_length=1)
    completed: bool = False
    quiz_score: Optional[float] = Field(default=None, ge=0, le=100)
    time_spent: Optional[int] = Field(default=None, ge=0)  # Seconds


class ProgressResponse(CamelModel):
    id: str
    user_id: str
    lesson_id: str
    completed: bool
    quiz_score: Optional[float] = None
    time_spent: int = 0
    last_accessed_at: datetime
    completed_at: Optional[datetime] = None
