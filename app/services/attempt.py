import logging
from datetime import timedelta
from typing import List, NamedTuple, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import AttemptStatusEnum, QuizStatusEnum
from app.core.database import transaction
from app.core.exceptions import AttemptTimeOverError, BusinessRuleError, NotFoundError, QuizNotStartableError
from app.crud.answer import answer as crud_answer
from app.crud.attempt import attempt as crud_attempt
from app.crud.quiz import quiz as crud_quiz
from app.models.attempt import Attempt
from app.services.cache_service import cache_service
from app.utils import timeutils

logger = logging.getLogger(__name__)


class AttemptTransition(NamedTuple):
    """Outcome of submit/grade: ``applied`` is False when the attempt was left untouched."""
    attempt: Attempt
    applied: bool
    message: str


class AttemptService:
    def get_attempt(self, db: Session, attempt_id: int) -> Attempt:
        attempt = crud_attempt.get(db, id=attempt_id)
        if not attempt:
            raise NotFoundError("Attempt", attempt_id)
        return attempt

    def get_attempts_by_quiz(
        self, db: Session, quiz_id: int, *, student_id: Optional[int] = None, skip: int = 0, limit: int = 100
    ) -> Tuple[List[Attempt], int]:
        if not crud_quiz.get(db, id=quiz_id):
            raise NotFoundError("Quiz", quiz_id)
        return crud_attempt.get_by_quiz(db, quiz_id, student_id=student_id, skip=skip, limit=limit)

    def start(self, db: Session, quiz_id: int, student_id: int) -> Attempt:
        """Open the next numbered attempt of ``student_id`` on a published quiz.

        The quiz row stays locked until commit, so concurrent starts for the
        same quiz serialise on it and each one sees the previous attempt number.
        """
        with transaction(db, "start attempt", quiz_id=quiz_id, student_id=student_id):
            quiz = crud_quiz.get_for_update(db, quiz_id)
            if not quiz:
                raise NotFoundError("Quiz", quiz_id)
            if quiz.status != QuizStatusEnum.PUBLISHED:
                logger.warning(f"Quiz {quiz_id} is not published", extra={"quiz_id": quiz_id, "student_id": student_id})
                raise QuizNotStartableError("Quiz is not published.")
            duration = quiz.duration_minutes or 0
            if duration <= 0:
                logger.warning(f"Quiz {quiz_id} has invalid duration {duration}", extra={"quiz_id": quiz_id})
                raise QuizNotStartableError("Quiz duration is invalid.")

            attempt_number = crud_attempt.get_max_attempt_number(db, quiz_id, student_id) + 1
            start_at = timeutils.utcnow()
            attempt = crud_attempt.create(db, obj_in={
                "quiz_id": quiz_id,
                "student_id": student_id,
                "attempt_number": attempt_number,
                "status": AttemptStatusEnum.IN_PROGRESS,
                "score": 0,
                "is_passed": False,
                "start_at": start_at,
                "ends_at": start_at + timedelta(minutes=duration),
            })
        cache_service.invalidate_attempt_cache(quiz_id, student_id)
        logger.info(
            f"Attempt {attempt.id} (#{attempt_number}) started on quiz {quiz_id} by student {student_id}",
            extra={"attempt_id": attempt.id, "quiz_id": quiz_id, "student_id": student_id, "attempt_number": attempt_number},
        )
        return attempt

    def submit(self, db: Session, attempt_id: int) -> AttemptTransition:
        attempt = self.get_attempt(db, attempt_id)
        if attempt.status != AttemptStatusEnum.IN_PROGRESS:
            logger.warning(
                f"Attempt {attempt_id} is {attempt.status.value}, submit ignored",
                extra={"attempt_id": attempt_id, "status": attempt.status.value},
            )
            return AttemptTransition(attempt, False, "Attempt is not in progress.")

        submitted_at = timeutils.utcnow()
        if settings.ATTEMPT_ENFORCE_DEADLINE and attempt.ends_at and submitted_at > attempt.ends_at:
            logger.warning(f"Attempt {attempt_id} submitted after its deadline", extra={"attempt_id": attempt_id})
            raise AttemptTimeOverError()

        with transaction(db, "submit attempt", attempt_id=attempt_id):
            attempt.status = AttemptStatusEnum.SUBMITTED
            attempt.submitted_at = submitted_at
            attempt.time_spent_seconds = max(0, int((submitted_at - attempt.start_at).total_seconds()))
        cache_service.invalidate_attempt_cache(attempt.quiz_id, attempt.student_id)
        logger.info(
            f"Attempt {attempt_id} submitted after {attempt.time_spent_seconds}s",
            extra={"attempt_id": attempt_id, "old_status": "in_progress", "new_status": "submitted"},
        )
        return AttemptTransition(attempt, True, "Attempt submitted successfully.")

    def grade(
        self, db: Session, attempt_id: int, score: int, is_passed: Optional[bool] = None, grader_id: Optional[int] = None
    ) -> AttemptTransition:
        attempt = self.get_attempt(db, attempt_id)
        if attempt.status != AttemptStatusEnum.SUBMITTED:
            message = (
                "Attempt has already been graded."
                if attempt.status == AttemptStatusEnum.GRADED
                else "Attempt is not submitted yet."
            )
            logger.warning(
                f"Attempt {attempt_id} is {attempt.status.value}, grade ignored",
                extra={"attempt_id": attempt_id, "status": attempt.status.value},
            )
            return AttemptTransition(attempt, False, message)

        quiz = attempt.quiz
        if quiz.max_score is not None and score > quiz.max_score:
            raise BusinessRuleError(f"Score {score} exceeds the quiz maximum of {quiz.max_score}.")
        if is_passed is None:
            is_passed = score >= (quiz.passing_score or 0)

        with transaction(db, "grade attempt", attempt_id=attempt_id):
            attempt.score = score
            attempt.is_passed = is_passed
            attempt.graded_at = timeutils.utcnow()
            attempt.graded_by = grader_id
            attempt.status = AttemptStatusEnum.GRADED
            if attempt.time_spent_seconds is None and attempt.submitted_at:
                attempt.time_spent_seconds = max(0, int((attempt.submitted_at - attempt.start_at).total_seconds()))
        cache_service.invalidate_attempt_cache(attempt.quiz_id, attempt.student_id)
        logger.info(
            f"Attempt {attempt_id} graded with score {score} (passed={is_passed})",
            extra={"attempt_id": attempt_id, "score": score, "grader_id": grader_id},
        )
        return AttemptTransition(attempt, True, "Attempt graded successfully.")

    def auto_grade(self, db: Session, attempt_id: int, grader_id: Optional[int] = None) -> AttemptTransition:
        """Grade a submitted attempt with the sum of its scored answers."""
        self.get_attempt(db, attempt_id)
        score = crud_answer.total_score(db, attempt_id)
        return self.grade(db, attempt_id, score=score, is_passed=None, grader_id=grader_id)

attempt_service = AttemptService()
