from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.report import CourseReport, QuizReport, LearnerReport
from app.services.report import report_service

router = APIRouter()

@router.get("/courses/{course_id}", response_model=APIResponse[CourseReport])
def get_course_report(
    course_id: int,
    db: Session = Depends(deps.get_db),
):
    report = report_service.get_course_report(db, course_id=course_id)
    return APIResponse(message="Course report retrieved successfully", data=report)

@router.get("/quizzes/{quiz_id}", response_model=APIResponse[QuizReport])
def get_quiz_report(
    quiz_id: int,
    db: Session = Depends(deps.get_db),
):
    report = report_service.get_quiz_report(db, quiz_id=quiz_id)
    return APIResponse(message="Quiz report retrieved successfully", data=report)

@router.get("/learners/{learner_id}", response_model=APIResponse[LearnerReport])
def get_learner_report(
    learner_id: int,
    db: Session = Depends(deps.get_db),
):
    report = report_service.get_learner_report(db, learner_id=learner_id)
    return APIResponse(message="Learner report retrieved successfully", data=report)
