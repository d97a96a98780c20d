from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class LessonProgressBase(BaseModel):
    enrollment_id: int
    lesson_id: int

class LessonProgressCreate(LessonProgressBase):
    is_completed: bool = False
    completed_at: Optional[datetime] = None

class LessonProgressUpdate(BaseModel):
    is_completed: Optional[bool] = None
    completed_at: Optional[datetime] = None

class LessonProgress(LessonProgressBase):
    id: int
    is_completed: bool
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
