import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.exceptions import BusinessRuleError, DeletionBlockedError, NotFoundError
from app.crud.course_instructor import course_instructor as crud_course_instructor
from app.models.course import CourseInstructor
from app.schemas.course import CourseInstructorCreate
from app.services.cache_service import cache_service
from app.services.course import course_service
from app.utils import timeutils

logger = logging.getLogger(__name__)

class CourseInstructorService:
    def get_instructors(self, db: Session, course_id: int) -> List[CourseInstructor]:
        course_service.get_course(db, course_id)
        return crud_course_instructor.get_by_course(db, course_id=course_id)

    def _get_assignment(self, db: Session, course_id: int, instructor_id: int) -> CourseInstructor:
        assignment = crud_course_instructor.get_by_course_and_instructor(db, course_id, instructor_id)
        if not assignment:
            raise NotFoundError("Instructor assignment", instructor_id)
        return assignment

    def assign(
        self, db: Session, course_id: int, assignment_in: CourseInstructorCreate, assigned_by: Optional[int] = None
    ) -> CourseInstructor:
        course_service.get_course(db, course_id)
        if crud_course_instructor.get_by_course_and_instructor(db, course_id, assignment_in.instructor_id):
            logger.warning(
                f"Instructor {assignment_in.instructor_id} is already assigned to course {course_id}",
                extra={"course_id": course_id, "instructor_id": assignment_in.instructor_id},
            )
            raise BusinessRuleError("Instructor is already assigned to this course.")

        # the first instructor of a course becomes its primary
        is_primary = assignment_in.is_primary or not crud_course_instructor.get_by_course(db, course_id)
        with transaction(db, "assign instructor", course_id=course_id, instructor_id=assignment_in.instructor_id):
            if is_primary:
                crud_course_instructor.clear_primary(db, course_id)
            assignment = crud_course_instructor.create(db, obj_in={
                "course_id": course_id,
                "instructor_id": assignment_in.instructor_id,
                "is_primary": is_primary,
                "assigned_by": assignment_in.assigned_by or assigned_by,
                "assigned_at": timeutils.utcnow(),
            })
        cache_service.invalidate_course_cache(course_id)
        logger.info(
            f"Instructor {assignment.instructor_id} assigned to course {course_id}",
            extra={"course_id": course_id, "instructor_id": assignment.instructor_id, "is_primary": is_primary},
        )
        return assignment

    def remove(self, db: Session, course_id: int, instructor_id: int) -> None:
        course_service.get_course(db, course_id)
        assignment = self._get_assignment(db, course_id, instructor_id)
        instructors = crud_course_instructor.get_by_course(db, course_id)
        if len(instructors) <= 1:
            logger.warning(
                f"Refused to remove the last instructor of course {course_id}",
                extra={"course_id": course_id, "instructor_id": instructor_id},
            )
            raise DeletionBlockedError(
                "Cannot remove the last instructor of a course.",
                hint="Assign another instructor first.",
            )

        with transaction(db, "remove instructor", course_id=course_id, instructor_id=instructor_id):
            was_primary = assignment.is_primary
            db.delete(assignment)
            db.flush()
            if was_primary:
                successor = next(item for item in instructors if item.id != assignment.id)
                successor.is_primary = True
        cache_service.invalidate_course_cache(course_id)
        logger.info(
            f"Instructor {instructor_id} removed from course {course_id}",
            extra={"course_id": course_id, "instructor_id": instructor_id},
        )

    def set_primary(self, db: Session, course_id: int, instructor_id: int) -> CourseInstructor:
        assignment = self._get_assignment(db, course_id, instructor_id)
        if assignment.is_primary:
            return assignment
        with transaction(db, "set primary instructor", course_id=course_id, instructor_id=instructor_id):
            crud_course_instructor.clear_primary(db, course_id)
            assignment.is_primary = True
        logger.info(
            f"Instructor {instructor_id} set as primary of course {course_id}",
            extra={"course_id": course_id, "instructor_id": instructor_id},
        )
        return assignment

course_instructor_service = CourseInstructorService()
