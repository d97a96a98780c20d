from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

from app.core.constants import QuestionTypeEnum

class QuestionOptionBase(BaseModel):
    option_text: str
    is_correct: bool = False

class QuestionOptionCreate(QuestionOptionBase):
    question_id: Optional[int] = None

class QuestionOptionUpdate(BaseModel):
    option_text: Optional[str] = None
    is_correct: Optional[bool] = None

class QuestionOption(QuestionOptionBase):
    id: int
    question_id: int

    model_config = ConfigDict(from_attributes=True)

class QuestionBase(BaseModel):
    question_type: QuestionTypeEnum
    question_text: str
    score: int = Field(default=1, ge=0)
    correct_boolean: Optional[bool] = None
    order_index: int = Field(default=0, ge=0)

class QuestionCreate(QuestionBase):
    quiz_id: int
    options: List[QuestionOptionBase] = []

class QuestionUpdate(BaseModel):
    question_text: Optional[str] = None
    score: Optional[int] = Field(None, ge=0)
    correct_boolean: Optional[bool] = None
    order_index: Optional[int] = Field(None, ge=0)

class Question(QuestionBase):
    id: int
    quiz_id: int
    options: List[QuestionOption] = []

    model_config = ConfigDict(from_attributes=True)
