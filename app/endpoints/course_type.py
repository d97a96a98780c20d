from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.course_type import CourseType, CourseTypeCreate, CourseTypeUpdate
from app.services.course_type import course_type_service

router = APIRouter()

@router.post("/", response_model=APIResponse[CourseType], status_code=status.HTTP_201_CREATED)
def create_course_type(
    course_type_in: CourseTypeCreate,
    db: Session = Depends(deps.get_db),
):
    course_type = course_type_service.create_course_type(db, course_type_in=course_type_in)
    return APIResponse(message="Course type created successfully", data=CourseType.model_validate(course_type), code=201)

@router.get("/", response_model=APIResponse[List[CourseType]])
def get_course_types(
    active_only: bool = False,
    db: Session = Depends(deps.get_db),
):
    course_types = course_type_service.get_course_types(db, active_only=active_only)
    return APIResponse(message="Course types retrieved successfully", data=[CourseType.model_validate(c) for c in course_types])

@router.get("/{course_type_id}", response_model=APIResponse[CourseType])
def get_course_type(
    course_type_id: int,
    db: Session = Depends(deps.get_db),
):
    course_type = course_type_service.get_course_type(db, course_type_id=course_type_id)
    return APIResponse(message="Course type retrieved successfully", data=CourseType.model_validate(course_type))

@router.put("/{course_type_id}", response_model=APIResponse[CourseType])
def update_course_type(
    course_type_id: int,
    course_type_in: CourseTypeUpdate,
    db: Session = Depends(deps.get_db),
):
    course_type = course_type_service.update_course_type(db, course_type_id=course_type_id, course_type_in=course_type_in)
    return APIResponse(message="Course type updated successfully", data=CourseType.model_validate(course_type))

@router.put("/{course_type_id}/activate", response_model=APIResponse[CourseType])
def activate_course_type(
    course_type_id: int,
    db: Session = Depends(deps.get_db),
):
    course_type = course_type_service.activate(db, course_type_id=course_type_id)
    return APIResponse(message="Course type activated successfully", data=CourseType.model_validate(course_type))

@router.put("/{course_type_id}/deactivate", response_model=APIResponse[CourseType])
def deactivate_course_type(
    course_type_id: int,
    db: Session = Depends(deps.get_db),
):
    course_type = course_type_service.deactivate(db, course_type_id=course_type_id)
    return APIResponse(message="Course type deactivated successfully", data=CourseType.model_validate(course_type))

@router.delete("/{course_type_id}", response_model=APIResponse)
def delete_course_type(
    course_type_id: int,
    db: Session = Depends(deps.get_db),
):
    course_type_service.delete_course_type(db, course_type_id=course_type_id)
    return APIResponse(message="Course type deleted successfully")
