from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from app.core.constants import AttemptStatusEnum
from app.schemas.answer import Answer

class AttemptStart(BaseModel):
    quiz_id: int
    student_id: Optional[int] = None # falls back to the acting user

class AttemptGrade(BaseModel):
    score: int = Field(..., ge=0)
    is_passed: Optional[bool] = None # derived from the quiz passing score when omitted

class AttemptCreate(BaseModel):
    quiz_id: int
    student_id: int
    attempt_number: int
    status: AttemptStatusEnum = AttemptStatusEnum.IN_PROGRESS
    start_at: datetime
    ends_at: Optional[datetime] = None

class AttemptUpdate(BaseModel):
    status: Optional[AttemptStatusEnum] = None
    score: Optional[int] = None
    is_passed: Optional[bool] = None

class Attempt(BaseModel):
    id: int
    quiz_id: int
    student_id: int
    attempt_number: int
    status: AttemptStatusEnum
    score: int
    is_passed: bool
    start_at: datetime
    ends_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    time_spent_seconds: Optional[int] = None
    graded_at: Optional[datetime] = None
    graded_by: Optional[int] = None
    remaining_seconds: Optional[int] = None
    is_time_up: bool = False

    model_config = ConfigDict(from_attributes=True)

class AttemptDetail(Attempt):
    answers: List[Answer] = []
