from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.answer import Answer
from app.schemas.answer import AnswerCreate, AnswerUpdate

class CRUDAnswer(CRUDBase[Answer, AnswerCreate, AnswerUpdate]):
    def get_by_attempt_and_question(self, db: Session, attempt_id: int, question_id: int) -> Optional[Answer]:
        return (
            db.query(Answer)
            .filter(Answer.attempt_id == attempt_id, Answer.question_id == question_id)
            .first()
        )

    def get_by_attempt(self, db: Session, attempt_id: int) -> List[Answer]:
        return db.query(Answer).filter(Answer.attempt_id == attempt_id).order_by(Answer.id).all()

    def total_score(self, db: Session, attempt_id: int) -> int:
        value = db.query(func.sum(Answer.question_score)).filter(Answer.attempt_id == attempt_id).scalar()
        return int(value or 0)

answer = CRUDAnswer(Answer)
