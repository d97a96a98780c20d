import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.constants import CourseStatusEnum
from app.core.database import transaction
from app.core.exceptions import (
    ActiveAttemptInProgressError,
    BusinessRuleError,
    CourseNotPublishableError,
    DeletionBlockedError,
    NotFoundError,
)
from app.crud.course import course as crud_course
from app.crud.course_type import course_type as crud_course_type
from app.models.course import Course
from app.schemas.course import CourseCreate, CourseUpdate
from app.services.cache_service import cache_service
from app.utils import timeutils

logger = logging.getLogger(__name__)

class CourseService:
    def get_course(self, db: Session, course_id: int) -> Course:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise NotFoundError("Course", course_id)
        return course

    def get_courses(
        self, db: Session, *, status: Optional[CourseStatusEnum] = None, course_type_id: Optional[int] = None,
        skip: int = 0, limit: int = 100
    ) -> Tuple[List[Course], int]:
        return crud_course.get_filtered(db, status=status, course_type_id=course_type_id, skip=skip, limit=limit)

    def _require_course_type(self, db: Session, course_type_id: int) -> None:
        if not crud_course_type.get(db, id=course_type_id):
            logger.warning(f"Course type {course_type_id} does not exist", extra={"course_type_id": course_type_id})
            raise BusinessRuleError(f"Course type with ID {course_type_id} does not exist.")

    def create_course(self, db: Session, course_in: CourseCreate) -> Course:
        self._require_course_type(db, course_in.course_type_id)
        with transaction(db, "create course", course_type_id=course_in.course_type_id):
            course = crud_course.create(db, obj_in={**course_in.model_dump(), "status": CourseStatusEnum.DRAFT})
        logger.info(f"Course {course.id} created", extra={"course_id": course.id})
        return course

    def update_course(self, db: Session, course_id: int, course_in: CourseUpdate) -> Course:
        course = self.get_course(db, course_id)
        if course_in.course_type_id and course_in.course_type_id != course.course_type_id:
            self._require_course_type(db, course_in.course_type_id)
        with transaction(db, "update course", course_id=course_id):
            crud_course.update(db, db_obj=course, obj_in=course_in)
        cache_service.invalidate_course_cache(course_id)
        return course

    def get_unpublishability_reasons(self, db: Session, course: Course) -> List[str]:
        reasons = []
        if crud_course.count_instructors(db, course.id) == 0:
            reasons.append("Course must have at least one instructor")
        if crud_course.count_units(db, course.id) == 0:
            reasons.append("Course must have at least one unit")
        course_type = course.course_type
        if not course_type or course_type.deleted_at is not None or not course_type.is_active:
            reasons.append("Course type must be active")
        if not (course.title or "").strip():
            reasons.append("Course title is required")
        if not (course.description or "").strip():
            reasons.append("Course description is required")
        return reasons

    def is_publishable(self, db: Session, course: Course) -> bool:
        return not self.get_unpublishability_reasons(db, course)

    def publish(self, db: Session, course_id: int) -> Course:
        course = self.get_course(db, course_id)
        reasons = self.get_unpublishability_reasons(db, course)
        if reasons:
            logger.warning(
                f"Course {course_id} cannot be published: {reasons}",
                extra={"course_id": course_id},
            )
            raise CourseNotPublishableError(reasons)
        if course.is_published:
            return course

        old_status = course.status
        with transaction(db, "publish course", course_id=course_id):
            course.status = CourseStatusEnum.PUBLISHED
            course.published_at = timeutils.utcnow()
        cache_service.invalidate_course_cache(course_id)
        logger.info(
            f"Course {course_id} published",
            extra={"course_id": course_id, "old_status": old_status.value, "new_status": course.status.value},
        )
        return course

    def unpublish(self, db: Session, course_id: int) -> Course:
        course = self.get_course(db, course_id)
        in_progress = crud_course.count_in_progress_attempts(db, course_id)
        if in_progress:
            logger.warning(
                f"Refused to unpublish course {course_id} with {in_progress} attempt(s) in progress",
                extra={"course_id": course_id},
            )
            raise ActiveAttemptInProgressError(
                f"Course has {in_progress} quiz attempt(s) in progress.",
                hint="Wait until the attempts are submitted before unpublishing.",
            )
        with transaction(db, "unpublish course", course_id=course_id):
            course.status = CourseStatusEnum.DRAFT
            course.published_at = None
        cache_service.invalidate_course_cache(course_id)
        logger.info(f"Course {course_id} unpublished", extra={"course_id": course_id})
        return course

    def change_status(self, db: Session, course_id: int, new_status: CourseStatusEnum) -> Course:
        course = self.get_course(db, course_id)
        if new_status == CourseStatusEnum.PUBLISHED:
            return self.publish(db, course_id)
        if course.status == CourseStatusEnum.PUBLISHED and new_status == CourseStatusEnum.DRAFT:
            return self.unpublish(db, course_id)

        old_status = course.status
        with transaction(db, "change course status", course_id=course_id):
            course.status = new_status
            course.published_at = None
        cache_service.invalidate_course_cache(course_id)
        logger.info(
            f"Course {course_id} status changed from {old_status.value} to {new_status.value}",
            extra={"course_id": course_id, "old_status": old_status.value, "new_status": new_status.value},
        )
        return course

    def is_available_for_enrollment(self, course: Optional[Course]) -> bool:
        if course is None or course.deleted_at is not None:
            return False
        if not course.is_published:
            return False
        course_type = course.course_type
        if course_type is not None and (course_type.deleted_at is not None or not course_type.is_active):
            return False
        return True

    def delete_course(self, db: Session, course_id: int) -> None:
        course = self.get_course(db, course_id)
        active = crud_course.count_active_enrollments(db, course_id)
        if active:
            logger.warning(
                f"Refused to delete course {course_id} with {active} active enrollment(s)",
                extra={"course_id": course_id},
            )
            raise DeletionBlockedError(
                f"Course has {active} active enrollment(s).",
                hint="Drop or complete the enrollments before deleting the course.",
            )
        with transaction(db, "delete course", course_id=course_id):
            crud_course.delete(db, id=course.id)
        cache_service.invalidate_course_cache(course_id)
        logger.info(f"Course {course_id} deleted", extra={"course_id": course_id})

course_service = CourseService()
