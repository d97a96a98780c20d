import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.constants import QuestionTypeEnum
from app.core.database import transaction
from app.core.exceptions import BusinessRuleError, NotFoundError
from app.crud.question import question as crud_question, question_option as crud_question_option
from app.models.question import Question, QuestionOption
from app.schemas.question import QuestionCreate, QuestionUpdate, QuestionOptionBase, QuestionOptionUpdate
from app.services.quiz import quiz_service

logger = logging.getLogger(__name__)

class QuestionService:
    def get_question(self, db: Session, question_id: int) -> Question:
        question = crud_question.get(db, id=question_id)
        if not question:
            raise NotFoundError("Question", question_id)
        return question

    def get_questions_by_quiz(self, db: Session, quiz_id: int) -> List[Question]:
        quiz_service.get_quiz(db, quiz_id)
        return crud_question.get_by_quiz(db, quiz_id=quiz_id)

    def _validate_shape(self, question_type: QuestionTypeEnum, correct_boolean, options) -> None:
        if question_type == QuestionTypeEnum.TRUE_FALSE and correct_boolean is None:
            raise BusinessRuleError("True/false questions need correct_boolean.")
        if question_type == QuestionTypeEnum.MULTIPLE_CHOICE and options and not any(o.is_correct for o in options):
            raise BusinessRuleError("Multiple choice questions need at least one correct option.")

    def create_question(self, db: Session, question_in: QuestionCreate) -> Question:
        quiz_service.get_quiz(db, question_in.quiz_id)
        self._validate_shape(question_in.question_type, question_in.correct_boolean, question_in.options)
        with transaction(db, "create question", quiz_id=question_in.quiz_id):
            question = crud_question.create(db, obj_in=question_in.model_dump(exclude={"options"}))
            for option_in in question_in.options:
                crud_question_option.create(db, obj_in={**option_in.model_dump(), "question_id": question.id})
            db.refresh(question)
        logger.info(f"Question {question.id} created for quiz {question.quiz_id}", extra={"question_id": question.id})
        return question

    def update_question(self, db: Session, question_id: int, question_in: QuestionUpdate) -> Question:
        question = self.get_question(db, question_id)
        with transaction(db, "update question", question_id=question_id):
            crud_question.update(db, db_obj=question, obj_in=question_in)
        return question

    def delete_question(self, db: Session, question_id: int) -> None:
        self.get_question(db, question_id)
        with transaction(db, "delete question", question_id=question_id):
            crud_question.delete(db, id=question_id)
        logger.info(f"Question {question_id} deleted", extra={"question_id": question_id})

    def add_option(self, db: Session, question_id: int, option_in: QuestionOptionBase) -> QuestionOption:
        question = self.get_question(db, question_id)
        if question.question_type != QuestionTypeEnum.MULTIPLE_CHOICE:
            raise BusinessRuleError("Options can only be added to multiple choice questions.")
        with transaction(db, "add question option", question_id=question_id):
            option = crud_question_option.create(db, obj_in={**option_in.model_dump(), "question_id": question_id})
        return option

    def update_option(self, db: Session, option_id: int, option_in: QuestionOptionUpdate) -> QuestionOption:
        option = crud_question_option.get(db, id=option_id)
        if not option:
            raise NotFoundError("Question option", option_id)
        with transaction(db, "update question option", option_id=option_id):
            crud_question_option.update(db, db_obj=option, obj_in=option_in)
        return option

    def delete_option(self, db: Session, option_id: int) -> None:
        if not crud_question_option.get(db, id=option_id):
            raise NotFoundError("Question option", option_id)
        with transaction(db, "delete question option", option_id=option_id):
            crud_question_option.delete(db, id=option_id)

question_service = QuestionService()
