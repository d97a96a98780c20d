from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.crud.base import PaginatedResponse
from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.attempt import Attempt
from app.schemas.quiz import Quiz, QuizCreate, QuizUpdate, QuizStatusUpdate
from app.services.attempt import attempt_service
from app.services.quiz import quiz_service

router = APIRouter()

@router.post("/", response_model=APIResponse[Quiz], status_code=status.HTTP_201_CREATED)
def create_quiz(
    quiz_in: QuizCreate,
    db: Session = Depends(deps.get_db),
):
    quiz = quiz_service.create_quiz(db, quiz_in=quiz_in)
    return APIResponse(message="Quiz created successfully", data=Quiz.model_validate(quiz), code=201)

@router.get("/course/{course_id}", response_model=APIResponse[List[Quiz]])
def get_quizzes_by_course(
    course_id: int,
    db: Session = Depends(deps.get_db),
):
    quizzes = quiz_service.get_quizzes_by_course(db, course_id=course_id)
    return APIResponse(message="Quizzes retrieved successfully", data=[Quiz.model_validate(q) for q in quizzes])

@router.get("/{quiz_id}", response_model=APIResponse[Quiz])
def get_quiz(
    quiz_id: int,
    db: Session = Depends(deps.get_db),
):
    quiz = quiz_service.get_quiz(db, quiz_id=quiz_id)
    return APIResponse(message="Quiz retrieved successfully", data=Quiz.model_validate(quiz))

@router.put("/{quiz_id}", response_model=APIResponse[Quiz])
def update_quiz(
    quiz_id: int,
    quiz_in: QuizUpdate,
    db: Session = Depends(deps.get_db),
):
    quiz = quiz_service.update_quiz(db, quiz_id=quiz_id, quiz_in=quiz_in)
    return APIResponse(message="Quiz updated successfully", data=Quiz.model_validate(quiz))

@router.put("/{quiz_id}/publish", response_model=APIResponse[Quiz])
def publish_quiz(
    quiz_id: int,
    db: Session = Depends(deps.get_db),
):
    quiz = quiz_service.publish(db, quiz_id=quiz_id)
    return APIResponse(message="Quiz published successfully", data=Quiz.model_validate(quiz))

@router.put("/{quiz_id}/unpublish", response_model=APIResponse[Quiz])
def unpublish_quiz(
    quiz_id: int,
    db: Session = Depends(deps.get_db),
):
    quiz = quiz_service.unpublish(db, quiz_id=quiz_id)
    return APIResponse(message="Quiz unpublished successfully", data=Quiz.model_validate(quiz))

@router.put("/{quiz_id}/status", response_model=APIResponse[Quiz])
def change_quiz_status(
    quiz_id: int,
    status_in: QuizStatusUpdate,
    db: Session = Depends(deps.get_db),
):
    quiz = quiz_service.change_status(db, quiz_id=quiz_id, new_status=status_in.status)
    return APIResponse(message="Quiz status updated successfully", data=Quiz.model_validate(quiz))

@router.delete("/{quiz_id}", response_model=APIResponse)
def delete_quiz(
    quiz_id: int,
    db: Session = Depends(deps.get_db),
):
    quiz_service.delete_quiz(db, quiz_id=quiz_id)
    return APIResponse(message="Quiz deleted successfully")

@router.get("/{quiz_id}/attempts", response_model=APIResponse[PaginatedResponse[Attempt]])
def get_quiz_attempts(
    quiz_id: int,
    student_id: Optional[int] = None,
    pagination: deps.PaginationParams = Depends(),
    db: Session = Depends(deps.get_db),
):
    attempts, total = attempt_service.get_attempts_by_quiz(
        db, quiz_id, student_id=student_id, skip=pagination.skip, limit=pagination.size
    )
    page = PaginatedResponse[Attempt].build(
        items=[Attempt.model_validate(a) for a in attempts], total=total, page=pagination.page, size=pagination.size
    )
    return APIResponse(message="Attempts retrieved successfully", data=page)
