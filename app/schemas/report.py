from pydantic import BaseModel
from typing import Dict, List, Optional

class CourseReport(BaseModel):
    course_id: int
    title: str
    total_enrollments: int
    enrollments_by_status: Dict[str, int]
    completion_rate: float
    average_progress: float

class QuizReport(BaseModel):
    quiz_id: int
    title: str
    total_attempts: int
    attempts_by_status: Dict[str, int]
    graded_attempts: int
    pass_rate: float
    average_score: float

class LearnerEnrollmentSummary(BaseModel):
    enrollment_id: int
    course_id: int
    course_title: Optional[str] = None
    status: str
    progress_percentage: float
    completed_at: Optional[str] = None
    attempts_count: int

class LearnerReport(BaseModel):
    learner_id: int
    total_enrollments: int
    completed_enrollments: int
    total_attempts: int
    enrollments: List[LearnerEnrollmentSummary]
