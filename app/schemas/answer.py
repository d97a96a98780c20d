from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class AnswerBase(BaseModel):
    selected_option: Optional[int] = None
    answer_text: Optional[str] = None
    boolean_answer: Optional[bool] = None

class AnswerCreate(AnswerBase):
    attempt_id: int
    question_id: int

class AnswerUpdate(AnswerBase):
    pass

class Answer(AnswerBase):
    id: int
    attempt_id: int
    question_id: int
    is_correct: Optional[bool] = None
    question_score: Optional[int] = None
    graded_by: Optional[int] = None
    graded_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class AnswerGrade(BaseModel):
    is_correct: bool
