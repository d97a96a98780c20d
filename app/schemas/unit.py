from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from app.schemas.lesson import Lesson

class UnitBase(BaseModel):
    title: str
    description: Optional[str] = None
    duration_minutes: int = Field(default=0, ge=0)

class UnitCreate(UnitBase):
    course_id: int
    unit_order: Optional[int] = Field(None, ge=1) # next free position when omitted

class UnitUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=0)
    unit_order: Optional[int] = Field(None, ge=1)

class Unit(UnitBase):
    id: int
    course_id: int
    unit_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class UnitWithLessons(Unit):
    lessons: List[Lesson] = []
