import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.exceptions import BusinessRuleError, DeletionBlockedError, NotFoundError
from app.crud.course_type import course_type as crud_course_type
from app.models.course_type import CourseType
from app.schemas.course_type import CourseTypeCreate, CourseTypeUpdate

logger = logging.getLogger(__name__)

class CourseTypeService:
    def get_course_type(self, db: Session, course_type_id: int) -> CourseType:
        course_type = crud_course_type.get(db, id=course_type_id)
        if not course_type:
            raise NotFoundError("Course type", course_type_id)
        return course_type

    def get_course_types(self, db: Session, active_only: bool = False) -> List[CourseType]:
        if active_only:
            return crud_course_type.get_active(db)
        return crud_course_type.get_multi(db)

    def create_course_type(self, db: Session, course_type_in: CourseTypeCreate) -> CourseType:
        if crud_course_type.get_by_name(db, name=course_type_in.name):
            raise BusinessRuleError(f"Course type '{course_type_in.name}' already exists.")
        with transaction(db, "create course type", course_type_name=course_type_in.name):
            course_type = crud_course_type.create(db, obj_in=course_type_in)
        logger.info(f"Course type {course_type.id} created", extra={"course_type_id": course_type.id})
        return course_type

    def update_course_type(self, db: Session, course_type_id: int, course_type_in: CourseTypeUpdate) -> CourseType:
        course_type = self.get_course_type(db, course_type_id)
        if course_type_in.name and course_type_in.name != course_type.name:
            if crud_course_type.get_by_name(db, name=course_type_in.name):
                raise BusinessRuleError(f"Course type '{course_type_in.name}' already exists.")
        with transaction(db, "update course type", course_type_id=course_type_id):
            crud_course_type.update(db, db_obj=course_type, obj_in=course_type_in)
        return course_type

    def activate(self, db: Session, course_type_id: int) -> CourseType:
        course_type = self.get_course_type(db, course_type_id)
        if course_type.is_active:
            return course_type
        with transaction(db, "activate course type", course_type_id=course_type_id):
            course_type.is_active = True
        logger.info(f"Course type {course_type_id} activated", extra={"course_type_id": course_type_id})
        return course_type

    def deactivate(self, db: Session, course_type_id: int) -> CourseType:
        course_type = self.get_course_type(db, course_type_id)
        if not course_type.is_active:
            return course_type
        published = crud_course_type.count_published_courses(db, course_type_id)
        if published:
            logger.warning(
                f"Refused to deactivate course type {course_type_id} with {published} published course(s)",
                extra={"course_type_id": course_type_id},
            )
            raise DeletionBlockedError(
                f"Course type has {published} published course(s).",
                hint="Unpublish or move those courses before deactivating the course type.",
            )
        with transaction(db, "deactivate course type", course_type_id=course_type_id):
            course_type.is_active = False
        logger.info(f"Course type {course_type_id} deactivated", extra={"course_type_id": course_type_id})
        return course_type

    def delete_course_type(self, db: Session, course_type_id: int) -> None:
        course_type = self.get_course_type(db, course_type_id)
        courses = crud_course_type.count_courses(db, course_type_id)
        if courses:
            logger.warning(
                f"Refused to delete course type {course_type_id} with {courses} course(s)",
                extra={"course_type_id": course_type_id},
            )
            raise DeletionBlockedError(
                f"Course type has {courses} course(s).",
                hint="Delete or move its courses first.",
            )
        with transaction(db, "delete course type", course_type_id=course_type_id):
            crud_course_type.delete(db, id=course_type.id)
        logger.info(f"Course type {course_type_id} deleted", extra={"course_type_id": course_type_id})

course_type_service = CourseTypeService()
