from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.course import Course, CourseInstructor
from app.models.unit import Unit
from app.models.enrollment import Enrollment
from app.models.quiz import Quiz
from app.models.attempt import Attempt
from app.core.constants import CourseStatusEnum, EnrollmentStatusEnum, AttemptStatusEnum
from app.schemas.course import CourseCreate, CourseUpdate

class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):

    def _query_with_relationships(self, db: Session):
        return self._query_active(db).options(
            selectinload(Course.course_type),
            selectinload(Course.instructors),
        )

    def get(self, db: Session, id: int) -> Optional[Course]:
        return self._query_with_relationships(db).filter(Course.id == id).first()

    def get_filtered(
        self,
        db: Session,
        *,
        status: Optional[CourseStatusEnum] = None,
        course_type_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[List[Course], int]:
        query = self._query_with_relationships(db)
        if status:
            query = query.filter(Course.status == status)
        if course_type_id:
            query = query.filter(Course.course_type_id == course_type_id)
        total = query.count()
        return query.order_by(Course.id).offset(skip).limit(limit).all(), total

    def count_instructors(self, db: Session, course_id: int) -> int:
        return db.query(CourseInstructor).filter(CourseInstructor.course_id == course_id).count()

    def count_units(self, db: Session, course_id: int) -> int:
        return db.query(Unit).filter(Unit.course_id == course_id, Unit.deleted_at == None).count()

    def count_active_enrollments(self, db: Session, course_id: int) -> int:
        return (
            db.query(Enrollment)
            .filter(
                Enrollment.course_id == course_id,
                Enrollment.deleted_at == None,
                Enrollment.status == EnrollmentStatusEnum.ACTIVE,
            )
            .count()
        )

    def count_in_progress_attempts(self, db: Session, course_id: int) -> int:
        return (
            db.query(Attempt)
            .join(Quiz, Quiz.id == Attempt.quiz_id)
            .filter(Quiz.course_id == course_id, Attempt.status == AttemptStatusEnum.IN_PROGRESS)
            .count()
        )

course = CRUDCourse(Course)
