from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from app.core.constants import LessonTypeEnum

class LessonBase(BaseModel):
    title: str
    content: Optional[str] = None
    lesson_type: LessonTypeEnum = Field(default=LessonTypeEnum.TEXT)
    is_required: bool = True
    duration_minutes: int = Field(default=0, ge=0)

class LessonCreate(LessonBase):
    unit_id: int
    lesson_order: Optional[int] = Field(None, ge=1)

class LessonUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    lesson_type: Optional[LessonTypeEnum] = None
    is_required: Optional[bool] = None
    duration_minutes: Optional[int] = Field(None, ge=0)
    lesson_order: Optional[int] = Field(None, ge=1)

class Lesson(LessonBase):
    id: int
    unit_id: int
    lesson_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
