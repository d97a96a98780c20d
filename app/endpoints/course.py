from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.constants import CourseStatusEnum
from app.crud.base import PaginatedResponse
from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.course import (
    Course, CourseCreate, CourseUpdate, CourseStatusUpdate, CoursePublishability,
    CourseInstructor, CourseInstructorCreate,
)
from app.services.course import course_service
from app.services.course_instructor import course_instructor_service

router = APIRouter()

@router.post("/", response_model=APIResponse[Course], status_code=status.HTTP_201_CREATED)
def create_course(
    course_in: CourseCreate,
    db: Session = Depends(deps.get_db),
    actor_id: Optional[int] = Depends(deps.get_actor_id),
):
    if course_in.created_by is None:
        course_in.created_by = actor_id
    course = course_service.create_course(db, course_in=course_in)
    return APIResponse(message="Course created successfully", data=Course.model_validate(course), code=201)

@router.get("/", response_model=APIResponse[PaginatedResponse[Course]])
def get_courses(
    course_status: Optional[CourseStatusEnum] = Query(None, alias="status"),
    course_type_id: Optional[int] = None,
    pagination: deps.PaginationParams = Depends(),
    db: Session = Depends(deps.get_db),
):
    courses, total = course_service.get_courses(
        db, status=course_status, course_type_id=course_type_id, skip=pagination.skip, limit=pagination.size
    )
    page = PaginatedResponse[Course].build(
        items=[Course.model_validate(c) for c in courses], total=total, page=pagination.page, size=pagination.size
    )
    return APIResponse(message="Courses retrieved successfully", data=page)

@router.get("/{course_id}", response_model=APIResponse[Course])
def get_course(
    course_id: int,
    db: Session = Depends(deps.get_db),
):
    course = course_service.get_course(db, course_id=course_id)
    return APIResponse(message="Course retrieved successfully", data=Course.model_validate(course))

@router.put("/{course_id}", response_model=APIResponse[Course])
def update_course(
    course_id: int,
    course_in: CourseUpdate,
    db: Session = Depends(deps.get_db),
):
    course = course_service.update_course(db, course_id=course_id, course_in=course_in)
    return APIResponse(message="Course updated successfully", data=Course.model_validate(course))

@router.get("/{course_id}/publishability", response_model=APIResponse[CoursePublishability])
def get_course_publishability(
    course_id: int,
    db: Session = Depends(deps.get_db),
):
    course = course_service.get_course(db, course_id=course_id)
    reasons = course_service.get_unpublishability_reasons(db, course)
    return APIResponse(
        message="Course publishability checked",
        data=CoursePublishability(course_id=course.id, is_publishable=not reasons, reasons=reasons),
    )

@router.put("/{course_id}/publish", response_model=APIResponse[Course])
def publish_course(
    course_id: int,
    db: Session = Depends(deps.get_db),
):
    course = course_service.publish(db, course_id=course_id)
    return APIResponse(message="Course published successfully", data=Course.model_validate(course))

@router.put("/{course_id}/unpublish", response_model=APIResponse[Course])
def unpublish_course(
    course_id: int,
    db: Session = Depends(deps.get_db),
):
    course = course_service.unpublish(db, course_id=course_id)
    return APIResponse(message="Course unpublished successfully", data=Course.model_validate(course))

@router.put("/{course_id}/status", response_model=APIResponse[Course])
def change_course_status(
    course_id: int,
    status_in: CourseStatusUpdate,
    db: Session = Depends(deps.get_db),
):
    course = course_service.change_status(db, course_id=course_id, new_status=status_in.status)
    return APIResponse(message="Course status updated successfully", data=Course.model_validate(course))

@router.delete("/{course_id}", response_model=APIResponse)
def delete_course(
    course_id: int,
    db: Session = Depends(deps.get_db),
):
    course_service.delete_course(db, course_id=course_id)
    return APIResponse(message="Course deleted successfully")

@router.get("/{course_id}/instructors", response_model=APIResponse[List[CourseInstructor]])
def get_course_instructors(
    course_id: int,
    db: Session = Depends(deps.get_db),
):
    instructors = course_instructor_service.get_instructors(db, course_id=course_id)
    return APIResponse(message="Instructors retrieved successfully", data=[CourseInstructor.model_validate(i) for i in instructors])

@router.post("/{course_id}/instructors", response_model=APIResponse[CourseInstructor], status_code=status.HTTP_201_CREATED)
def assign_course_instructor(
    course_id: int,
    assignment_in: CourseInstructorCreate,
    db: Session = Depends(deps.get_db),
    actor_id: Optional[int] = Depends(deps.get_actor_id),
):
    assignment = course_instructor_service.assign(db, course_id=course_id, assignment_in=assignment_in, assigned_by=actor_id)
    return APIResponse(message="Instructor assigned successfully", data=CourseInstructor.model_validate(assignment), code=201)

@router.put("/{course_id}/instructors/{instructor_id}/primary", response_model=APIResponse[CourseInstructor])
def set_primary_instructor(
    course_id: int,
    instructor_id: int,
    db: Session = Depends(deps.get_db),
):
    assignment = course_instructor_service.set_primary(db, course_id=course_id, instructor_id=instructor_id)
    return APIResponse(message="Primary instructor updated successfully", data=CourseInstructor.model_validate(assignment))

@router.delete("/{course_id}/instructors/{instructor_id}", response_model=APIResponse)
def remove_course_instructor(
    course_id: int,
    instructor_id: int,
    db: Session = Depends(deps.get_db),
):
    course_instructor_service.remove(db, course_id=course_id, instructor_id=instructor_id)
    return APIResponse(message="Instructor removed successfully")
