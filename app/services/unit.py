import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.exceptions import DeletionBlockedError, NotFoundError
from app.crud.unit import unit as crud_unit
from app.models.unit import Unit
from app.schemas.unit import UnitCreate, UnitUpdate
from app.services.cache_service import cache_service
from app.services.course import course_service
from app.services.ordering import ordering_service, unit_scope

logger = logging.getLogger(__name__)

class UnitService:
    def get_unit(self, db: Session, unit_id: int) -> Unit:
        unit = crud_unit.get(db, id=unit_id)
        if not unit:
            raise NotFoundError("Unit", unit_id)
        return unit

    def get_units_by_course(self, db: Session, course_id: int) -> List[Unit]:
        course_service.get_course(db, course_id)
        return crud_unit.get_by_course(db, course_id=course_id)

    def create_unit(self, db: Session, unit_in: UnitCreate) -> Unit:
        course_service.get_course(db, unit_in.course_id)
        scope = unit_scope(unit_in.course_id)
        with transaction(db, "create unit", course_id=unit_in.course_id):
            next_position = ordering_service.next_order(db, scope)
            if unit_in.unit_order is None:
                unit_in.unit_order = next_position
            else:
                ordering_service.validate_order(db, scope, unit_in.unit_order)
                unit_in.unit_order = min(unit_in.unit_order, next_position)
            unit = crud_unit.create(db, obj_in=unit_in)
        cache_service.invalidate_course_cache(unit.course_id)
        logger.info(
            f"Unit {unit.id} created in course {unit.course_id} at position {unit.unit_order}",
            extra={"unit_id": unit.id, "course_id": unit.course_id},
        )
        return unit

    def update_unit(self, db: Session, unit_id: int, unit_in: UnitUpdate) -> Unit:
        unit = self.get_unit(db, unit_id)
        changes = unit_in.model_dump(exclude_unset=True)
        new_order = changes.pop("unit_order", None)
        with transaction(db, "update unit", unit_id=unit_id):
            crud_unit.update(db, db_obj=unit, obj_in=changes)
            if new_order is not None:
                ordering_service.move_to_position(db, unit_scope(unit.course_id), unit, new_order)
        cache_service.invalidate_course_cache(unit.course_id)
        return unit

    def delete_unit(self, db: Session, unit_id: int) -> None:
        unit = self.get_unit(db, unit_id)
        lessons_count = crud_unit.count_lessons(db, unit_id)
        if lessons_count > 0:
            logger.warning(
                f"Refused to delete unit {unit_id} with {lessons_count} lesson(s)",
                extra={"unit_id": unit_id, "lessons_count": lessons_count},
            )
            raise DeletionBlockedError(
                f"Unit has {lessons_count} lesson(s). Delete or move them first.",
                data={"lessons_count": lessons_count},
            )

        course_id = unit.course_id
        with transaction(db, "delete unit", unit_id=unit_id):
            crud_unit.delete(db, id=unit_id)
            ordering_service.compact(db, unit_scope(course_id))
        cache_service.invalidate_course_cache(course_id)
        logger.info(f"Unit {unit_id} deleted", extra={"unit_id": unit_id, "course_id": course_id})

    def reorder(self, db: Session, course_id: int, unit_orders: Dict[int, int]) -> List[Unit]:
        course_service.get_course(db, course_id)
        with transaction(db, "reorder units", course_id=course_id):
            units = ordering_service.reorder(db, unit_scope(course_id), unit_orders)
        cache_service.invalidate_course_cache(course_id)
        logger.info(f"Units of course {course_id} reordered", extra={"course_id": course_id, "units_count": len(unit_orders)})
        return units

    def move_to_position(self, db: Session, unit_id: int, new_order: int) -> Unit:
        unit = self.get_unit(db, unit_id)
        with transaction(db, "move unit", unit_id=unit_id, new_order=new_order):
            ordering_service.move_to_position(db, unit_scope(unit.course_id), unit, new_order)
        cache_service.invalidate_course_cache(unit.course_id)
        return unit

unit_service = UnitService()
