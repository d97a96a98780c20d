import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.exceptions import NotFoundError
from app.crud.lesson import lesson as crud_lesson
from app.models.lesson import Lesson
from app.schemas.lesson import LessonCreate, LessonUpdate
from app.services.cache_service import cache_service
from app.services.ordering import ordering_service, lesson_scope
from app.services.unit import unit_service

logger = logging.getLogger(__name__)

class LessonService:
    def get_lesson(self, db: Session, lesson_id: int) -> Lesson:
        lesson = crud_lesson.get(db, id=lesson_id)
        if not lesson:
            raise NotFoundError("Lesson", lesson_id)
        return lesson

    def get_lessons_by_unit(self, db: Session, unit_id: int) -> List[Lesson]:
        unit_service.get_unit(db, unit_id)
        return crud_lesson.get_by_unit(db, unit_id=unit_id)

    def create_lesson(self, db: Session, lesson_in: LessonCreate) -> Lesson:
        unit = unit_service.get_unit(db, lesson_in.unit_id)
        scope = lesson_scope(lesson_in.unit_id)
        with transaction(db, "create lesson", unit_id=lesson_in.unit_id):
            next_position = ordering_service.next_order(db, scope)
            if lesson_in.lesson_order is None:
                lesson_in.lesson_order = next_position
            else:
                ordering_service.validate_order(db, scope, lesson_in.lesson_order)
                lesson_in.lesson_order = min(lesson_in.lesson_order, next_position)
            lesson = crud_lesson.create(db, obj_in=lesson_in)
        cache_service.invalidate_course_cache(unit.course_id)
        logger.info(
            f"Lesson {lesson.id} created in unit {lesson.unit_id} at position {lesson.lesson_order}",
            extra={"lesson_id": lesson.id, "unit_id": lesson.unit_id},
        )
        return lesson

    def update_lesson(self, db: Session, lesson_id: int, lesson_in: LessonUpdate) -> Lesson:
        lesson = self.get_lesson(db, lesson_id)
        changes = lesson_in.model_dump(exclude_unset=True)
        new_order = changes.pop("lesson_order", None)
        with transaction(db, "update lesson", lesson_id=lesson_id):
            crud_lesson.update(db, db_obj=lesson, obj_in=changes)
            if new_order is not None:
                ordering_service.move_to_position(db, lesson_scope(lesson.unit_id), lesson, new_order)
        cache_service.invalidate_course_cache(lesson.unit.course_id)
        return lesson

    def delete_lesson(self, db: Session, lesson_id: int) -> None:
        lesson = self.get_lesson(db, lesson_id)
        unit_id = lesson.unit_id
        course_id = lesson.unit.course_id
        with transaction(db, "delete lesson", lesson_id=lesson_id):
            crud_lesson.delete(db, id=lesson_id)
            ordering_service.compact(db, lesson_scope(unit_id))
        cache_service.invalidate_course_cache(course_id)
        logger.info(f"Lesson {lesson_id} deleted", extra={"lesson_id": lesson_id, "unit_id": unit_id})

    def reorder(self, db: Session, unit_id: int, lesson_orders: Dict[int, int]) -> List[Lesson]:
        unit = unit_service.get_unit(db, unit_id)
        with transaction(db, "reorder lessons", unit_id=unit_id):
            lessons = ordering_service.reorder(db, lesson_scope(unit_id), lesson_orders)
        cache_service.invalidate_course_cache(unit.course_id)
        logger.info(f"Lessons of unit {unit_id} reordered", extra={"unit_id": unit_id, "lessons_count": len(lesson_orders)})
        return lessons

    def move_to_position(self, db: Session, lesson_id: int, new_order: int) -> Lesson:
        lesson = self.get_lesson(db, lesson_id)
        with transaction(db, "move lesson", lesson_id=lesson_id, new_order=new_order):
            ordering_service.move_to_position(db, lesson_scope(lesson.unit_id), lesson, new_order)
        cache_service.invalidate_course_cache(lesson.unit.course_id)
        return lesson

lesson_service = LessonService()
