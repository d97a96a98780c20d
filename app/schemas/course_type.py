from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class CourseTypeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    is_active: bool = True

class CourseTypeCreate(CourseTypeBase):
    pass

class CourseTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None

class CourseType(CourseTypeBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
