from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.attempt import Attempt
from app.models.quiz import Quiz
from app.core.constants import AttemptStatusEnum
from app.schemas.attempt import AttemptCreate, AttemptUpdate

class CRUDAttempt(CRUDBase[Attempt, AttemptCreate, AttemptUpdate]):

    def get_max_attempt_number(self, db: Session, quiz_id: int, student_id: int) -> int:
        value = (
            db.query(func.max(Attempt.attempt_number))
            .filter(Attempt.quiz_id == quiz_id, Attempt.student_id == student_id)
            .scalar()
        )
        return value or 0

    def get_by_quiz(
        self, db: Session, quiz_id: int, *, student_id: Optional[int] = None, skip: int = 0, limit: int = 100
    ) -> Tuple[List[Attempt], int]:
        query = db.query(Attempt).filter(Attempt.quiz_id == quiz_id)
        if student_id is not None:
            query = query.filter(Attempt.student_id == student_id)
        total = query.count()
        return query.order_by(Attempt.student_id, Attempt.attempt_number).offset(skip).limit(limit).all(), total

    def get_by_student(self, db: Session, student_id: int) -> List[Attempt]:
        return db.query(Attempt).filter(Attempt.student_id == student_id).order_by(Attempt.id).all()

    def count_by_student_and_course(self, db: Session, student_id: int, course_id: int) -> int:
        return (
            db.query(Attempt)
            .join(Quiz, Quiz.id == Attempt.quiz_id)
            .filter(Attempt.student_id == student_id, Quiz.course_id == course_id)
            .count()
        )

    def count_by_status(self, db: Session, quiz_id: int) -> Dict[str, int]:
        rows = (
            db.query(Attempt.status, func.count(Attempt.id))
            .filter(Attempt.quiz_id == quiz_id)
            .group_by(Attempt.status)
            .all()
        )
        return {AttemptStatusEnum(status).value: count for status, count in rows}

    def graded_stats(self, db: Session, quiz_id: int) -> Tuple[int, int, float]:
        """(graded count, passed count, average score) over graded attempts."""
        graded = (
            db.query(Attempt)
            .filter(Attempt.quiz_id == quiz_id, Attempt.status == AttemptStatusEnum.GRADED)
        )
        graded_count = graded.count()
        passed_count = graded.filter(Attempt.is_passed == True).count()
        average = (
            db.query(func.avg(Attempt.score))
            .filter(Attempt.quiz_id == quiz_id, Attempt.status == AttemptStatusEnum.GRADED)
            .scalar()
        )
        return graded_count, passed_count, round(float(average), 2) if average is not None else 0.0

attempt = CRUDAttempt(Attempt)
