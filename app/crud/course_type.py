from typing import List, Optional
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.course_type import CourseType
from app.models.course import Course
from app.core.constants import CourseStatusEnum
from app.schemas.course_type import CourseTypeCreate, CourseTypeUpdate

class CRUDCourseType(CRUDBase[CourseType, CourseTypeCreate, CourseTypeUpdate]):
    def get_by_name(self, db: Session, name: str) -> Optional[CourseType]:
        return self._query_active(db).filter(CourseType.name == name).first()

    def get_active(self, db: Session) -> List[CourseType]:
        return self._query_active(db).filter(CourseType.is_active == True).order_by(CourseType.name).all()

    def count_courses(self, db: Session, course_type_id: int) -> int:
        return (
            db.query(Course)
            .filter(Course.course_type_id == course_type_id, Course.deleted_at == None)
            .count()
        )

    def count_published_courses(self, db: Session, course_type_id: int) -> int:
        return (
            db.query(Course)
            .filter(
                Course.course_type_id == course_type_id,
                Course.deleted_at == None,
                Course.status == CourseStatusEnum.PUBLISHED,
            )
            .count()
        )

course_type = CRUDCourseType(CourseType)
