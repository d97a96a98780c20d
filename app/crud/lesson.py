from typing import List
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.lesson import Lesson
from app.models.unit import Unit
from app.schemas.lesson import LessonCreate, LessonUpdate

class CRUDLesson(CRUDBase[Lesson, LessonCreate, LessonUpdate]):
    def get_by_unit(self, db: Session, unit_id: int) -> List[Lesson]:
        return (
            self._query_active(db)
            .filter(Lesson.unit_id == unit_id)
            .order_by(Lesson.lesson_order)
            .all()
        )

    def _query_course_lessons(self, db: Session, course_id: int):
        return (
            self._query_active(db)
            .join(Unit, Unit.id == Lesson.unit_id)
            .filter(Unit.course_id == course_id, Unit.deleted_at == None)
        )

    def get_by_course(self, db: Session, course_id: int) -> List[Lesson]:
        return self._query_course_lessons(db, course_id).order_by(Unit.unit_order, Lesson.lesson_order).all()

    def count_by_course(self, db: Session, course_id: int) -> int:
        return self._query_course_lessons(db, course_id).count()

    def belongs_to_course(self, db: Session, lesson_id: int, course_id: int) -> bool:
        return self._query_course_lessons(db, course_id).filter(Lesson.id == lesson_id).count() > 0

lesson = CRUDLesson(Lesson)
