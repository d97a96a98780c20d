from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from app.core.constants import CourseStatusEnum

class CourseInstructorBase(BaseModel):
    instructor_id: int
    is_primary: bool = False

class CourseInstructorCreate(CourseInstructorBase):
    assigned_by: Optional[int] = None

class CourseInstructorUpdate(BaseModel):
    is_primary: Optional[bool] = None

class CourseInstructor(CourseInstructorBase):
    id: int
    course_id: int
    assigned_by: Optional[int] = None
    assigned_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class CourseBase(BaseModel):
    title: str
    description: Optional[str] = None
    course_type_id: int

class CourseCreate(CourseBase):
    created_by: Optional[int] = None

class CourseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    course_type_id: Optional[int] = None

class CourseStatusUpdate(BaseModel):
    status: CourseStatusEnum

class Course(CourseBase):
    id: int
    status: CourseStatusEnum
    published_at: Optional[datetime] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    instructors: List[CourseInstructor] = []

    model_config = ConfigDict(from_attributes=True)

class CoursePublishability(BaseModel):
    course_id: int
    is_publishable: bool
    reasons: List[str] = Field(default_factory=list)
