from typing import List, Optional
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.quiz import Quiz
from app.schemas.quiz import QuizCreate, QuizUpdate

class CRUDQuiz(CRUDBase[Quiz, QuizCreate, QuizUpdate]):
    def get_for_update(self, db: Session, id: int) -> Optional[Quiz]:
        """Load the quiz holding a row lock until the transaction ends."""
        return (
            self._query_active(db)
            .filter(Quiz.id == id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def get_by_course(self, db: Session, course_id: int) -> List[Quiz]:
        return self._query_active(db).filter(Quiz.course_id == course_id).order_by(Quiz.id).all()

quiz = CRUDQuiz(Quiz)
