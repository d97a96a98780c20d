import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import AttemptStatusEnum
from app.core.database import transaction
from app.core.exceptions import AttemptTimeOverError, InvalidAnswerError, NotFoundError
from app.crud.answer import answer as crud_answer
from app.crud.question import question as crud_question, question_option as crud_question_option
from app.models.answer import Answer
from app.models.attempt import Attempt
from app.models.question import Question
from app.schemas.answer import AnswerCreate, AnswerUpdate
from app.services.attempt import attempt_service
from app.utils import timeutils

logger = logging.getLogger(__name__)

class AnswerService:
    def get_answer(self, db: Session, answer_id: int) -> Answer:
        answer = crud_answer.get(db, id=answer_id)
        if not answer:
            raise NotFoundError("Answer", answer_id)
        return answer

    def get_answers_by_attempt(self, db: Session, attempt_id: int) -> List[Answer]:
        attempt_service.get_attempt(db, attempt_id)
        return crud_answer.get_by_attempt(db, attempt_id)

    def _ensure_writable(self, attempt: Attempt) -> None:
        if attempt.status != AttemptStatusEnum.IN_PROGRESS:
            raise InvalidAnswerError("Answers can only be changed while the attempt is in progress.")
        if settings.ATTEMPT_ENFORCE_DEADLINE and attempt.is_time_up:
            raise AttemptTimeOverError()

    def score(
        self, db: Session, question: Question, selected_option: Optional[int], boolean_answer: Optional[bool]
    ) -> Tuple[Optional[bool], int]:
        """Derive ``(is_correct, question_score)``; a selected option wins over a boolean answer."""
        is_correct = None
        if selected_option is not None:
            option = crud_question_option.get(db, id=selected_option)
            if not option or option.question_id != question.id:
                raise InvalidAnswerError("Selected option does not belong to this question.")
            is_correct = bool(option.is_correct)
        elif boolean_answer is not None and question.correct_boolean is not None:
            is_correct = boolean_answer == question.correct_boolean
        return is_correct, (question.score if is_correct else 0)

    def save_answer(self, db: Session, answer_in: AnswerCreate) -> Tuple[Answer, bool]:
        """Create the answer for (attempt, question) or overwrite the existing one.

        Returns the answer and whether it was newly created.
        """
        attempt = attempt_service.get_attempt(db, answer_in.attempt_id)
        self._ensure_writable(attempt)
        question = crud_question.get(db, id=answer_in.question_id)
        if not question:
            raise NotFoundError("Question", answer_in.question_id)
        if question.quiz_id != attempt.quiz_id:
            raise InvalidAnswerError("Question does not belong to this attempt's quiz.")

        is_correct, question_score = self.score(db, question, answer_in.selected_option, answer_in.boolean_answer)
        values = {
            "selected_option": answer_in.selected_option,
            "answer_text": answer_in.answer_text,
            "boolean_answer": answer_in.boolean_answer,
            "is_correct": is_correct,
            "question_score": question_score,
        }
        with transaction(db, "save answer", attempt_id=attempt.id, question_id=question.id):
            answer = crud_answer.get_by_attempt_and_question(db, attempt.id, question.id)
            created = answer is None
            if created:
                answer = crud_answer.create(db, obj_in={**values, "attempt_id": attempt.id, "question_id": question.id})
            else:
                crud_answer.update(db, db_obj=answer, obj_in=values)
        logger.info(
            f"Answer {answer.id} saved for attempt {attempt.id}, question {question.id} (correct={is_correct})",
            extra={"answer_id": answer.id, "attempt_id": attempt.id, "question_id": question.id},
        )
        return answer, created

    def update_answer(self, db: Session, answer_id: int, answer_in: AnswerUpdate) -> Answer:
        answer = self.get_answer(db, answer_id)
        merged = AnswerCreate(
            attempt_id=answer.attempt_id,
            question_id=answer.question_id,
            **answer_in.model_dump(),
        )
        updated, _ = self.save_answer(db, merged)
        return updated

    def grade_answer(self, db: Session, answer_id: int, is_correct: bool, grader_id: Optional[int] = None) -> Answer:
        """Manual marking of an answer on a submitted attempt, e.g. a free-text one."""
        answer = self.get_answer(db, answer_id)
        if answer.attempt.status != AttemptStatusEnum.SUBMITTED:
            raise InvalidAnswerError("Answers can only be marked once the attempt is submitted.")
        with transaction(db, "grade answer", answer_id=answer_id):
            answer.is_correct = is_correct
            answer.question_score = answer.question.score if is_correct else 0
            answer.graded_by = grader_id
            answer.graded_at = timeutils.utcnow()
        return answer

answer_service = AnswerService()
