from typing import Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.answer import Answer, AnswerCreate, AnswerUpdate, AnswerGrade
from app.services.answer import answer_service

router = APIRouter()

@router.post("/", response_model=APIResponse[Answer], status_code=status.HTTP_201_CREATED)
def save_answer(
    answer_in: AnswerCreate,
    response: Response,
    db: Session = Depends(deps.get_db),
):
    answer, created = answer_service.save_answer(db, answer_in=answer_in)
    if not created:
        response.status_code = status.HTTP_200_OK
        return APIResponse(message="Answer updated successfully", data=Answer.model_validate(answer))
    return APIResponse(message="Answer saved successfully", data=Answer.model_validate(answer), code=201)

@router.get("/{answer_id}", response_model=APIResponse[Answer])
def get_answer(
    answer_id: int,
    db: Session = Depends(deps.get_db),
):
    answer = answer_service.get_answer(db, answer_id=answer_id)
    return APIResponse(message="Answer retrieved successfully", data=Answer.model_validate(answer))

@router.put("/{answer_id}", response_model=APIResponse[Answer])
def update_answer(
    answer_id: int,
    answer_in: AnswerUpdate,
    db: Session = Depends(deps.get_db),
):
    answer = answer_service.update_answer(db, answer_id=answer_id, answer_in=answer_in)
    return APIResponse(message="Answer updated successfully", data=Answer.model_validate(answer))

@router.put("/{answer_id}/grade", response_model=APIResponse[Answer])
def grade_answer(
    answer_id: int,
    grade_in: AnswerGrade,
    db: Session = Depends(deps.get_db),
    actor_id: Optional[int] = Depends(deps.get_actor_id),
):
    answer = answer_service.grade_answer(db, answer_id=answer_id, is_correct=grade_in.is_correct, grader_id=actor_id)
    return APIResponse(message="Answer graded successfully", data=Answer.model_validate(answer))
