from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from app.core.constants import QuizStatusEnum

class QuizBase(BaseModel):
    title: str
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, description="Time limit of one attempt in minutes")
    passing_score: int = Field(default=0, ge=0)
    max_score: Optional[int] = Field(None, ge=0)

class QuizCreate(QuizBase):
    course_id: int

class QuizUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    passing_score: Optional[int] = Field(None, ge=0)
    max_score: Optional[int] = Field(None, ge=0)

class QuizStatusUpdate(BaseModel):
    status: QuizStatusEnum

class Quiz(QuizBase):
    id: int
    course_id: int
    status: QuizStatusEnum
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
