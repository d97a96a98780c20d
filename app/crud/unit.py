from typing import List
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.unit import Unit
from app.models.lesson import Lesson
from app.schemas.unit import UnitCreate, UnitUpdate

class CRUDUnit(CRUDBase[Unit, UnitCreate, UnitUpdate]):
    def get_by_course(self, db: Session, course_id: int) -> List[Unit]:
        return (
            self._query_active(db)
            .options(selectinload(Unit.lessons))
            .filter(Unit.course_id == course_id)
            .order_by(Unit.unit_order)
            .all()
        )

    def count_lessons(self, db: Session, unit_id: int) -> int:
        return db.query(Lesson).filter(Lesson.unit_id == unit_id, Lesson.deleted_at == None).count()

unit = CRUDUnit(Unit)
