from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from app.core.constants import EnrollmentStatusEnum, EnrollmentTypeEnum

class EnrollmentBase(BaseModel):
    course_id: int
    learner_id: int
    enrollment_type: EnrollmentTypeEnum = Field(default=EnrollmentTypeEnum.SELF)

class EnrollmentCreate(EnrollmentBase):
    enrolled_by: Optional[int] = None # required for assigned enrollments

class EnrollmentUpdate(BaseModel):
    status: Optional[EnrollmentStatusEnum] = None
    progress_percentage: Optional[float] = Field(None, ge=0, le=100)
    final_grade: Optional[float] = None

class EnrollmentStatusUpdate(BaseModel):
    status: EnrollmentStatusEnum

class Enrollment(EnrollmentBase):
    id: int
    status: EnrollmentStatusEnum
    enrolled_at: datetime
    enrolled_by: Optional[int] = None
    completed_at: Optional[datetime] = None
    progress_percentage: float = 0
    final_grade: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class EnrollmentProgress(BaseModel):
    enrollment_id: int
    course_id: int
    learner_id: int
    status: EnrollmentStatusEnum
    progress_percentage: float
    total_units: int
    total_lessons: int
    completed_lessons: int
    remaining_lessons: int
    is_completed: bool
    completed_at: Optional[datetime] = None
