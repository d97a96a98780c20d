from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.question import (
    Question, QuestionCreate, QuestionUpdate, QuestionOption, QuestionOptionBase, QuestionOptionUpdate,
)
from app.services.question import question_service

router = APIRouter()

@router.post("/", response_model=APIResponse[Question], status_code=status.HTTP_201_CREATED)
def create_question(
    question_in: QuestionCreate,
    db: Session = Depends(deps.get_db),
):
    question = question_service.create_question(db, question_in=question_in)
    return APIResponse(message="Question created successfully", data=Question.model_validate(question), code=201)

@router.get("/quiz/{quiz_id}", response_model=APIResponse[List[Question]])
def get_questions_by_quiz(
    quiz_id: int,
    db: Session = Depends(deps.get_db),
):
    questions = question_service.get_questions_by_quiz(db, quiz_id=quiz_id)
    return APIResponse(message="Questions retrieved successfully", data=[Question.model_validate(q) for q in questions])

@router.get("/{question_id}", response_model=APIResponse[Question])
def get_question(
    question_id: int,
    db: Session = Depends(deps.get_db),
):
    question = question_service.get_question(db, question_id=question_id)
    return APIResponse(message="Question retrieved successfully", data=Question.model_validate(question))

@router.put("/{question_id}", response_model=APIResponse[Question])
def update_question(
    question_id: int,
    question_in: QuestionUpdate,
    db: Session = Depends(deps.get_db),
):
    question = question_service.update_question(db, question_id=question_id, question_in=question_in)
    return APIResponse(message="Question updated successfully", data=Question.model_validate(question))

@router.delete("/{question_id}", response_model=APIResponse)
def delete_question(
    question_id: int,
    db: Session = Depends(deps.get_db),
):
    question_service.delete_question(db, question_id=question_id)
    return APIResponse(message="Question deleted successfully")

@router.post("/{question_id}/options", response_model=APIResponse[QuestionOption], status_code=status.HTTP_201_CREATED)
def add_question_option(
    question_id: int,
    option_in: QuestionOptionBase,
    db: Session = Depends(deps.get_db),
):
    option = question_service.add_option(db, question_id=question_id, option_in=option_in)
    return APIResponse(message="Option added successfully", data=QuestionOption.model_validate(option), code=201)

@router.put("/options/{option_id}", response_model=APIResponse[QuestionOption])
def update_question_option(
    option_id: int,
    option_in: QuestionOptionUpdate,
    db: Session = Depends(deps.get_db),
):
    option = question_service.update_option(db, option_id=option_id, option_in=option_in)
    return APIResponse(message="Option updated successfully", data=QuestionOption.model_validate(option))

@router.delete("/options/{option_id}", response_model=APIResponse)
def delete_question_option(
    option_id: int,
    db: Session = Depends(deps.get_db),
):
    question_service.delete_option(db, option_id=option_id)
    return APIResponse(message="Option deleted successfully")
