from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.exceptions import BusinessRuleError
from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.answer import Answer
from app.schemas.attempt import Attempt, AttemptDetail, AttemptStart, AttemptGrade
from app.services.answer import answer_service
from app.services.attempt import attempt_service

router = APIRouter()

@router.post("/start", response_model=APIResponse[Attempt], status_code=status.HTTP_201_CREATED)
def start_attempt(
    attempt_in: AttemptStart,
    db: Session = Depends(deps.get_db),
    actor_id: Optional[int] = Depends(deps.get_actor_id),
):
    student_id = attempt_in.student_id if attempt_in.student_id is not None else actor_id
    if student_id is None:
        raise BusinessRuleError("student_id is required.", hint="Send student_id or the X-Actor-Id header.")
    attempt = attempt_service.start(db, quiz_id=attempt_in.quiz_id, student_id=student_id)
    return APIResponse(message="Attempt started successfully.", data=Attempt.model_validate(attempt), code=201)

@router.get("/{attempt_id}", response_model=APIResponse[AttemptDetail])
def get_attempt(
    attempt_id: int,
    db: Session = Depends(deps.get_db),
):
    attempt = attempt_service.get_attempt(db, attempt_id=attempt_id)
    return APIResponse(message="Attempt retrieved successfully", data=AttemptDetail.model_validate(attempt))

@router.put("/{attempt_id}/submit", response_model=APIResponse[Attempt])
def submit_attempt(
    attempt_id: int,
    db: Session = Depends(deps.get_db),
):
    result = attempt_service.submit(db, attempt_id=attempt_id)
    return APIResponse(message=result.message, data=Attempt.model_validate(result.attempt))

@router.put("/{attempt_id}/grade", response_model=APIResponse[Attempt])
def grade_attempt(
    attempt_id: int,
    grade_in: AttemptGrade,
    db: Session = Depends(deps.get_db),
    actor_id: Optional[int] = Depends(deps.get_actor_id),
):
    result = attempt_service.grade(
        db, attempt_id=attempt_id, score=grade_in.score, is_passed=grade_in.is_passed, grader_id=actor_id
    )
    return APIResponse(message=result.message, data=Attempt.model_validate(result.attempt))

@router.put("/{attempt_id}/auto-grade", response_model=APIResponse[Attempt])
def auto_grade_attempt(
    attempt_id: int,
    db: Session = Depends(deps.get_db),
    actor_id: Optional[int] = Depends(deps.get_actor_id),
):
    result = attempt_service.auto_grade(db, attempt_id=attempt_id, grader_id=actor_id)
    return APIResponse(message=result.message, data=Attempt.model_validate(result.attempt))

@router.get("/{attempt_id}/answers", response_model=APIResponse[List[Answer]])
def get_attempt_answers(
    attempt_id: int,
    db: Session = Depends(deps.get_db),
):
    answers = answer_service.get_answers_by_attempt(db, attempt_id=attempt_id)
    return APIResponse(message="Answers retrieved successfully", data=[Answer.model_validate(a) for a in answers])
