from typing import Dict, List
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.ordering import PositionUpdate
from app.schemas.lesson import Lesson, LessonCreate, LessonUpdate
from app.services.lesson import lesson_service

router = APIRouter()

@router.post("/", response_model=APIResponse[Lesson], status_code=status.HTTP_201_CREATED)
def create_lesson(
    lesson_in: LessonCreate,
    db: Session = Depends(deps.get_db),
):
    lesson = lesson_service.create_lesson(db, lesson_in=lesson_in)
    return APIResponse(message="Lesson created successfully", data=Lesson.model_validate(lesson), code=201)

@router.get("/unit/{unit_id}", response_model=APIResponse[List[Lesson]])
def get_lessons_by_unit(
    unit_id: int,
    db: Session = Depends(deps.get_db),
):
    lessons = lesson_service.get_lessons_by_unit(db, unit_id=unit_id)
    return APIResponse(message="Lessons retrieved successfully", data=[Lesson.model_validate(l) for l in lessons])

@router.get("/{lesson_id}", response_model=APIResponse[Lesson])
def get_lesson(
    lesson_id: int,
    db: Session = Depends(deps.get_db),
):
    lesson = lesson_service.get_lesson(db, lesson_id=lesson_id)
    return APIResponse(message="Lesson retrieved successfully", data=Lesson.model_validate(lesson))

@router.put("/{lesson_id}", response_model=APIResponse[Lesson])
def update_lesson(
    lesson_id: int,
    lesson_in: LessonUpdate,
    db: Session = Depends(deps.get_db),
):
    lesson = lesson_service.update_lesson(db, lesson_id=lesson_id, lesson_in=lesson_in)
    return APIResponse(message="Lesson updated successfully", data=Lesson.model_validate(lesson))

@router.put("/{lesson_id}/move", response_model=APIResponse[Lesson])
def move_lesson(
    lesson_id: int,
    position: PositionUpdate,
    db: Session = Depends(deps.get_db),
):
    lesson = lesson_service.move_to_position(db, lesson_id=lesson_id, new_order=position.order)
    return APIResponse(message="Lesson moved successfully", data=Lesson.model_validate(lesson))

@router.post("/{unit_id}/reorder", response_model=APIResponse[List[Lesson]])
def reorder_lessons(
    unit_id: int,
    lesson_orders: Dict[int, int] = Body(..., examples=[{"7": 1, "5": 2}]),
    db: Session = Depends(deps.get_db),
):
    lessons = lesson_service.reorder(db, unit_id=unit_id, lesson_orders=lesson_orders)
    return APIResponse(message="Lessons reordered successfully", data=[Lesson.model_validate(l) for l in lessons])

@router.delete("/{lesson_id}", response_model=APIResponse)
def delete_lesson(
    lesson_id: int,
    db: Session = Depends(deps.get_db),
):
    lesson_service.delete_lesson(db, lesson_id=lesson_id)
    return APIResponse(message="Lesson deleted successfully")
