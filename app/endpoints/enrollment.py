from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.constants import EnrollmentStatusEnum
from app.crud.base import PaginatedResponse
from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.enrollment import Enrollment, EnrollmentCreate, EnrollmentStatusUpdate, EnrollmentProgress
from app.services.enrollment import enrollment_service

router = APIRouter()

@router.post("/", response_model=APIResponse[Enrollment], status_code=status.HTTP_201_CREATED)
def enroll(
    enrollment_in: EnrollmentCreate,
    db: Session = Depends(deps.get_db),
    actor_id: Optional[int] = Depends(deps.get_actor_id),
):
    enrollment = enrollment_service.enroll(db, enrollment_in=enrollment_in, actor_id=actor_id)
    return APIResponse(message="Enrolled successfully", data=Enrollment.model_validate(enrollment), code=201)

@router.get("/course/{course_id}", response_model=APIResponse[PaginatedResponse[Enrollment]])
def get_course_enrollments(
    course_id: int,
    enrollment_status: Optional[EnrollmentStatusEnum] = Query(None, alias="status"),
    pagination: deps.PaginationParams = Depends(),
    db: Session = Depends(deps.get_db),
):
    enrollments, total = enrollment_service.get_enrollments_by_course(
        db, course_id, status=enrollment_status, skip=pagination.skip, limit=pagination.size
    )
    page = PaginatedResponse[Enrollment].build(
        items=[Enrollment.model_validate(e) for e in enrollments], total=total, page=pagination.page, size=pagination.size
    )
    return APIResponse(message="Enrollments retrieved successfully", data=page)

@router.get("/learner/{learner_id}", response_model=APIResponse[PaginatedResponse[Enrollment]])
def get_learner_enrollments(
    learner_id: int,
    enrollment_status: Optional[EnrollmentStatusEnum] = Query(None, alias="status"),
    pagination: deps.PaginationParams = Depends(),
    db: Session = Depends(deps.get_db),
):
    enrollments, total = enrollment_service.get_enrollments_by_learner(
        db, learner_id, status=enrollment_status, skip=pagination.skip, limit=pagination.size
    )
    page = PaginatedResponse[Enrollment].build(
        items=[Enrollment.model_validate(e) for e in enrollments], total=total, page=pagination.page, size=pagination.size
    )
    return APIResponse(message="Enrollments retrieved successfully", data=page)

@router.get("/check", response_model=APIResponse[bool])
def check_enrollment(
    course_id: int,
    learner_id: int,
    db: Session = Depends(deps.get_db),
):
    enrolled = enrollment_service.is_enrolled(db, course_id=course_id, learner_id=learner_id)
    return APIResponse(message="Enrollment checked", data=enrolled)

@router.get("/{enrollment_id}", response_model=APIResponse[Enrollment])
def get_enrollment(
    enrollment_id: int,
    db: Session = Depends(deps.get_db),
):
    enrollment = enrollment_service.get_enrollment(db, enrollment_id=enrollment_id)
    return APIResponse(message="Enrollment retrieved successfully", data=Enrollment.model_validate(enrollment))

@router.put("/{enrollment_id}/status", response_model=APIResponse[Enrollment])
def update_enrollment_status(
    enrollment_id: int,
    status_in: EnrollmentStatusUpdate,
    db: Session = Depends(deps.get_db),
):
    enrollment = enrollment_service.update_status(db, enrollment_id=enrollment_id, new_status=status_in.status)
    return APIResponse(message="Enrollment status updated successfully", data=Enrollment.model_validate(enrollment))

@router.put("/{enrollment_id}/drop", response_model=APIResponse[Enrollment])
def drop_enrollment(
    enrollment_id: int,
    db: Session = Depends(deps.get_db),
):
    enrollment = enrollment_service.drop(db, enrollment_id=enrollment_id)
    return APIResponse(message="Enrollment dropped successfully", data=Enrollment.model_validate(enrollment))

@router.post("/{enrollment_id}/lessons/{lesson_id}/complete", response_model=APIResponse[Enrollment])
def complete_lesson(
    enrollment_id: int,
    lesson_id: int,
    db: Session = Depends(deps.get_db),
):
    enrollment = enrollment_service.complete_lesson(db, enrollment_id=enrollment_id, lesson_id=lesson_id)
    return APIResponse(message="Lesson marked as completed", data=Enrollment.model_validate(enrollment))

@router.put("/{enrollment_id}/progress", response_model=APIResponse[Enrollment])
def recalculate_progress(
    enrollment_id: int,
    db: Session = Depends(deps.get_db),
):
    enrollment = enrollment_service.update_progress(db, enrollment_id=enrollment_id)
    return APIResponse(message="Enrollment progress updated", data=Enrollment.model_validate(enrollment))

@router.get("/{enrollment_id}/progress", response_model=APIResponse[EnrollmentProgress])
def get_enrollment_progress(
    enrollment_id: int,
    db: Session = Depends(deps.get_db),
):
    details = enrollment_service.get_progress_details(db, enrollment_id=enrollment_id)
    return APIResponse(message="Enrollment progress retrieved successfully", data=details)
