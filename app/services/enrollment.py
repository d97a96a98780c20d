import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.constants import ENROLLMENT_TRANSITIONS, EnrollmentStatusEnum, EnrollmentTypeEnum
from app.core.database import transaction
from app.core.exceptions import (
    AlreadyEnrolledError,
    BusinessRuleError,
    CourseNotEnrollableError,
    InvalidStatusTransitionError,
    NotFoundError,
)
from app.crud.course import course as crud_course
from app.crud.enrollment import enrollment as crud_enrollment
from app.crud.lesson import lesson as crud_lesson
from app.crud.lesson_progress import lesson_progress as crud_lesson_progress
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.schemas.enrollment import EnrollmentCreate, EnrollmentProgress
from app.services.cache_service import cache_service
from app.services.course import course_service
from app.utils import timeutils

logger = logging.getLogger(__name__)

class EnrollmentService:
    def get_enrollment(self, db: Session, enrollment_id: int) -> Enrollment:
        enrollment = crud_enrollment.get(db, id=enrollment_id)
        if not enrollment:
            raise NotFoundError("Enrollment", enrollment_id)
        return enrollment

    def get_enrollments_by_course(
        self, db: Session, course_id: int, *, status: Optional[EnrollmentStatusEnum] = None, skip: int = 0, limit: int = 100
    ) -> Tuple[List[Enrollment], int]:
        course_service.get_course(db, course_id)
        return crud_enrollment.get_by_course(db, course_id, status=status, skip=skip, limit=limit)

    def get_enrollments_by_learner(
        self, db: Session, learner_id: int, *, status: Optional[EnrollmentStatusEnum] = None, skip: int = 0, limit: int = 100
    ) -> Tuple[List[Enrollment], int]:
        return crud_enrollment.get_by_learner(db, learner_id, status=status, skip=skip, limit=limit)

    def is_enrolled(self, db: Session, course_id: int, learner_id: int) -> bool:
        enrollment = crud_enrollment.get_by_learner_and_course(db, learner_id, course_id)
        return bool(
            enrollment
            and enrollment.deleted_at is None
            and enrollment.status in (EnrollmentStatusEnum.ACTIVE, EnrollmentStatusEnum.COMPLETED)
        )

    def enroll(self, db: Session, enrollment_in: EnrollmentCreate, actor_id: Optional[int] = None) -> Enrollment:
        """Enroll a learner, reactivating a dropped or suspended enrollment instead of duplicating it."""
        course = db.get(Course, enrollment_in.course_id)
        if not course:
            raise NotFoundError("Course", enrollment_in.course_id)
        learner_id = enrollment_in.learner_id

        if not course_service.is_available_for_enrollment(course):
            logger.warning(
                f"Course {course.id} is not available for enrollment",
                extra={"course_id": course.id, "learner_id": learner_id},
            )
            raise CourseNotEnrollableError(course.id)

        existing = crud_enrollment.get_by_learner_and_course(db, learner_id, course.id)
        if existing and existing.deleted_at is None and existing.status in (
            EnrollmentStatusEnum.ACTIVE, EnrollmentStatusEnum.COMPLETED
        ):
            logger.warning(
                f"Learner {learner_id} is already enrolled in course {course.id}",
                extra={"course_id": course.id, "learner_id": learner_id},
            )
            raise AlreadyEnrolledError(learner_id, course.id)

        if enrollment_in.enrollment_type == EnrollmentTypeEnum.SELF:
            enrolled_by = learner_id
        else:
            enrolled_by = enrollment_in.enrolled_by if enrollment_in.enrolled_by is not None else actor_id

        with transaction(
            db, "enroll learner",
            on_conflict=lambda: AlreadyEnrolledError(learner_id, course.id),
            course_id=course.id, learner_id=learner_id,
        ):
            if existing:
                existing.deleted_at = None
                self._apply_status(existing, EnrollmentStatusEnum.ACTIVE)
                enrollment = existing
                db.flush()
            else:
                enrollment = crud_enrollment.create(db, obj_in={
                    "learner_id": learner_id,
                    "course_id": course.id,
                    "enrollment_type": enrollment_in.enrollment_type,
                    "status": EnrollmentStatusEnum.ACTIVE,
                    "enrolled_by": enrolled_by,
                    "enrolled_at": timeutils.utcnow(),
                    "progress_percentage": 0,
                })
        cache_service.invalidate_enrollment_cache(course.id, learner_id)
        logger.info(
            f"Learner {learner_id} enrolled in course {course.id}",
            extra={
                "enrollment_id": enrollment.id,
                "course_id": course.id,
                "learner_id": learner_id,
                "enrollment_type": enrollment_in.enrollment_type.value,
                "enrolled_by": enrolled_by,
                "reactivated": existing is not None,
            },
        )
        return enrollment

    def _apply_status(self, enrollment: Enrollment, new_status: EnrollmentStatusEnum) -> None:
        old_status = enrollment.status
        enrollment.status = new_status
        if new_status == EnrollmentStatusEnum.COMPLETED and not enrollment.completed_at:
            enrollment.completed_at = timeutils.utcnow()
        if old_status == EnrollmentStatusEnum.COMPLETED and new_status != EnrollmentStatusEnum.COMPLETED:
            enrollment.completed_at = None

    def update_status(self, db: Session, enrollment_id: int, new_status: EnrollmentStatusEnum) -> Enrollment:
        enrollment = self.get_enrollment(db, enrollment_id)
        old_status = enrollment.status
        if new_status == old_status:
            return enrollment

        allowed = ENROLLMENT_TRANSITIONS.get(old_status, set())
        # completed is only ever reached through completion detection
        if new_status == EnrollmentStatusEnum.COMPLETED or new_status not in allowed:
            logger.warning(
                f"Rejected enrollment {enrollment_id} transition {old_status.value} -> {new_status.value}",
                extra={"enrollment_id": enrollment_id, "old_status": old_status.value, "new_status": new_status.value},
            )
            raise InvalidStatusTransitionError(
                old_status.value,
                new_status.value,
                sorted(status.value for status in allowed if status != EnrollmentStatusEnum.COMPLETED),
            )

        with transaction(db, "update enrollment status", enrollment_id=enrollment_id):
            self._apply_status(enrollment, new_status)
        cache_service.invalidate_enrollment_cache(enrollment.course_id, enrollment.learner_id)
        logger.info(
            f"Enrollment {enrollment_id} status changed from {old_status.value} to {new_status.value}",
            extra={"enrollment_id": enrollment_id, "old_status": old_status.value, "new_status": new_status.value},
        )
        return enrollment

    def drop(self, db: Session, enrollment_id: int) -> Enrollment:
        return self.update_status(db, enrollment_id, EnrollmentStatusEnum.DROPPED)

    def calculate_progress(self, db: Session, enrollment: Enrollment) -> float:
        total_lessons = crud_lesson.count_by_course(db, enrollment.course_id)
        if total_lessons == 0:
            return 0.0
        completed_lessons = crud_lesson_progress.count_completed_lessons(db, enrollment)
        return round(completed_lessons / total_lessons * 100, 2)

    def _update_progress(self, db: Session, enrollment: Enrollment) -> None:
        total_lessons = crud_lesson.count_by_course(db, enrollment.course_id)
        completed_lessons = crud_lesson_progress.count_completed_lessons(db, enrollment) if total_lessons else 0
        enrollment.progress_percentage = self.calculate_progress(db, enrollment)

        if total_lessons > 0 and completed_lessons == total_lessons:
            enrollment.progress_percentage = 100.0
            if not enrollment.completed_at:
                enrollment.completed_at = timeutils.utcnow()
            if enrollment.status != EnrollmentStatusEnum.COMPLETED:
                self._apply_status(enrollment, EnrollmentStatusEnum.COMPLETED)
                logger.info(
                    f"Enrollment {enrollment.id} completed",
                    extra={"enrollment_id": enrollment.id, "course_id": enrollment.course_id, "total_lessons": total_lessons},
                )
        db.flush()

    def update_progress(self, db: Session, enrollment_id: int) -> Enrollment:
        enrollment = self.get_enrollment(db, enrollment_id)
        with transaction(db, "update enrollment progress", enrollment_id=enrollment_id):
            self._update_progress(db, enrollment)
        cache_service.invalidate_enrollment_cache(enrollment.course_id, enrollment.learner_id)
        return enrollment

    def complete_lesson(self, db: Session, enrollment_id: int, lesson_id: int) -> Enrollment:
        enrollment = self.get_enrollment(db, enrollment_id)
        if enrollment.status != EnrollmentStatusEnum.ACTIVE:
            raise BusinessRuleError(
                f"Enrollment is {enrollment.status.value}; only active enrollments can complete lessons.",
            )
        if not crud_lesson.belongs_to_course(db, lesson_id, enrollment.course_id):
            raise NotFoundError("Lesson", lesson_id)

        with transaction(db, "complete lesson", enrollment_id=enrollment_id, lesson_id=lesson_id):
            progress = crud_lesson_progress.get_by_enrollment_and_lesson(db, enrollment_id, lesson_id)
            if progress is None:
                crud_lesson_progress.create(db, obj_in={
                    "enrollment_id": enrollment_id,
                    "lesson_id": lesson_id,
                    "is_completed": True,
                    "completed_at": timeutils.utcnow(),
                })
            elif not progress.is_completed:
                progress.is_completed = True
                progress.completed_at = timeutils.utcnow()
                db.flush()
            self._update_progress(db, enrollment)
        cache_service.invalidate_enrollment_cache(enrollment.course_id, enrollment.learner_id)
        logger.info(
            f"Lesson {lesson_id} completed for enrollment {enrollment_id}",
            extra={"enrollment_id": enrollment_id, "lesson_id": lesson_id},
        )
        return enrollment

    def get_progress_details(self, db: Session, enrollment_id: int) -> EnrollmentProgress:
        enrollment = self.get_enrollment(db, enrollment_id)
        total_units = crud_course.count_units(db, enrollment.course_id)
        total_lessons = crud_lesson.count_by_course(db, enrollment.course_id)
        completed_lessons = crud_lesson_progress.count_completed_lessons(db, enrollment)
        return EnrollmentProgress(
            enrollment_id=enrollment.id,
            course_id=enrollment.course_id,
            learner_id=enrollment.learner_id,
            status=enrollment.status,
            progress_percentage=float(enrollment.progress_percentage or 0),
            total_units=total_units,
            total_lessons=total_lessons,
            completed_lessons=completed_lessons,
            remaining_lessons=max(0, total_lessons - completed_lessons),
            is_completed=enrollment.status == EnrollmentStatusEnum.COMPLETED,
            completed_at=enrollment.completed_at,
        )

enrollment_service = EnrollmentService()
