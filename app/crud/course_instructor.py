from typing import List, Optional
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.course import CourseInstructor
from app.schemas.course import CourseInstructorCreate, CourseInstructorUpdate

class CRUDCourseInstructor(CRUDBase[CourseInstructor, CourseInstructorCreate, CourseInstructorUpdate]):
    def get_by_course_and_instructor(self, db: Session, course_id: int, instructor_id: int) -> Optional[CourseInstructor]:
        return (
            db.query(CourseInstructor)
            .filter(CourseInstructor.course_id == course_id, CourseInstructor.instructor_id == instructor_id)
            .first()
        )

    def get_by_course(self, db: Session, course_id: int) -> List[CourseInstructor]:
        return (
            db.query(CourseInstructor)
            .filter(CourseInstructor.course_id == course_id)
            .order_by(CourseInstructor.is_primary.desc(), CourseInstructor.id)
            .all()
        )

    def clear_primary(self, db: Session, course_id: int) -> None:
        (
            db.query(CourseInstructor)
            .filter(CourseInstructor.course_id == course_id, CourseInstructor.is_primary == True)
            .update({CourseInstructor.is_primary: False}, synchronize_session="fetch")
        )

course_instructor = CRUDCourseInstructor(CourseInstructor)
