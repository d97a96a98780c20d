from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.question import Question, QuestionOption
from app.schemas.question import QuestionCreate, QuestionUpdate, QuestionOptionCreate, QuestionOptionUpdate

class CRUDQuestion(CRUDBase[Question, QuestionCreate, QuestionUpdate]):
    def get(self, db: Session, id: int) -> Optional[Question]:
        return self._query_active(db).options(selectinload(Question.options)).filter(Question.id == id).first()

    def get_by_quiz(self, db: Session, quiz_id: int) -> List[Question]:
        return (
            self._query_active(db)
            .options(selectinload(Question.options))
            .filter(Question.quiz_id == quiz_id)
            .order_by(Question.order_index, Question.id)
            .all()
        )

    def total_score(self, db: Session, quiz_id: int) -> int:
        value = (
            db.query(func.sum(Question.score))
            .filter(Question.quiz_id == quiz_id, Question.deleted_at == None)
            .scalar()
        )
        return int(value or 0)

class CRUDQuestionOption(CRUDBase[QuestionOption, QuestionOptionCreate, QuestionOptionUpdate]):
    pass

question = CRUDQuestion(Question)
question_option = CRUDQuestionOption(QuestionOption)
