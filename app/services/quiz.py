import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.constants import QuizStatusEnum, AttemptStatusEnum
from app.core.database import transaction
from app.core.exceptions import ActiveAttemptInProgressError, NotFoundError
from app.crud.quiz import quiz as crud_quiz
from app.models.attempt import Attempt
from app.models.quiz import Quiz
from app.schemas.quiz import QuizCreate, QuizUpdate
from app.services.cache_service import cache_service
from app.services.course import course_service

logger = logging.getLogger(__name__)

class QuizService:
    def get_quiz(self, db: Session, quiz_id: int) -> Quiz:
        quiz = crud_quiz.get(db, id=quiz_id)
        if not quiz:
            raise NotFoundError("Quiz", quiz_id)
        return quiz

    def get_quizzes_by_course(self, db: Session, course_id: int) -> List[Quiz]:
        course_service.get_course(db, course_id)
        return crud_quiz.get_by_course(db, course_id=course_id)

    def create_quiz(self, db: Session, quiz_in: QuizCreate) -> Quiz:
        course_service.get_course(db, quiz_in.course_id)
        with transaction(db, "create quiz", course_id=quiz_in.course_id):
            quiz = crud_quiz.create(db, obj_in={**quiz_in.model_dump(), "status": QuizStatusEnum.DRAFT})
        logger.info(f"Quiz {quiz.id} created for course {quiz.course_id}", extra={"quiz_id": quiz.id})
        return quiz

    def update_quiz(self, db: Session, quiz_id: int, quiz_in: QuizUpdate) -> Quiz:
        quiz = self.get_quiz(db, quiz_id)
        with transaction(db, "update quiz", quiz_id=quiz_id):
            crud_quiz.update(db, db_obj=quiz, obj_in=quiz_in)
        cache_service.invalidate_quiz_cache(quiz_id)
        return quiz

    def _ensure_no_attempt_in_progress(self, db: Session, quiz: Quiz, action: str) -> None:
        in_progress = (
            db.query(Attempt)
            .filter(Attempt.quiz_id == quiz.id, Attempt.status == AttemptStatusEnum.IN_PROGRESS)
            .count()
        )
        if in_progress:
            logger.warning(
                f"Refused to {action} quiz {quiz.id} with {in_progress} attempt(s) in progress",
                extra={"quiz_id": quiz.id},
            )
            raise ActiveAttemptInProgressError(f"Cannot {action} quiz because an attempt is currently in progress.")

    def change_status(self, db: Session, quiz_id: int, new_status: QuizStatusEnum) -> Quiz:
        quiz = self.get_quiz(db, quiz_id)
        old_status = quiz.status
        if old_status == new_status:
            return quiz
        if old_status == QuizStatusEnum.PUBLISHED:
            self._ensure_no_attempt_in_progress(db, quiz, "unpublish")
        with transaction(db, "change quiz status", quiz_id=quiz_id):
            quiz.status = new_status
        cache_service.invalidate_quiz_cache(quiz_id)
        logger.info(
            f"Quiz {quiz_id} status changed from {old_status.value} to {new_status.value}",
            extra={"quiz_id": quiz_id, "old_status": old_status.value, "new_status": new_status.value},
        )
        return quiz

    def publish(self, db: Session, quiz_id: int) -> Quiz:
        return self.change_status(db, quiz_id, QuizStatusEnum.PUBLISHED)

    def unpublish(self, db: Session, quiz_id: int) -> Quiz:
        return self.change_status(db, quiz_id, QuizStatusEnum.DRAFT)

    def delete_quiz(self, db: Session, quiz_id: int) -> None:
        quiz = self.get_quiz(db, quiz_id)
        self._ensure_no_attempt_in_progress(db, quiz, "delete")
        with transaction(db, "delete quiz", quiz_id=quiz_id):
            crud_quiz.delete(db, id=quiz_id)
        cache_service.invalidate_quiz_cache(quiz_id)
        logger.info(f"Quiz {quiz_id} deleted", extra={"quiz_id": quiz_id})

quiz_service = QuizService()
