from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.enrollment import Enrollment
from app.core.constants import EnrollmentStatusEnum
from app.schemas.enrollment import EnrollmentCreate, EnrollmentUpdate

class CRUDEnrollment(CRUDBase[Enrollment, EnrollmentCreate, EnrollmentUpdate]):

    def get_by_learner_and_course(self, db: Session, learner_id: int, course_id: int) -> Optional[Enrollment]:
        # one row per (learner, course) ever exists, soft-deleted or not
        return (
            db.query(Enrollment)
            .filter(Enrollment.learner_id == learner_id, Enrollment.course_id == course_id)
            .first()
        )

    def _filtered(self, db: Session, status: Optional[EnrollmentStatusEnum]):
        query = self._query_active(db)
        if status:
            query = query.filter(Enrollment.status == status)
        return query

    def get_by_course(
        self, db: Session, course_id: int, *, status: Optional[EnrollmentStatusEnum] = None,
        skip: int = 0, limit: int = 100
    ) -> Tuple[List[Enrollment], int]:
        query = self._filtered(db, status).filter(Enrollment.course_id == course_id)
        total = query.count()
        return query.order_by(Enrollment.id).offset(skip).limit(limit).all(), total

    def get_by_learner(
        self, db: Session, learner_id: int, *, status: Optional[EnrollmentStatusEnum] = None,
        skip: int = 0, limit: int = 100
    ) -> Tuple[List[Enrollment], int]:
        query = self._filtered(db, status).filter(Enrollment.learner_id == learner_id)
        total = query.count()
        return query.order_by(Enrollment.id).offset(skip).limit(limit).all(), total

    def count_by_status(self, db: Session, course_id: int) -> Dict[str, int]:
        rows = (
            db.query(Enrollment.status, func.count(Enrollment.id))
            .filter(Enrollment.course_id == course_id, Enrollment.deleted_at == None)
            .group_by(Enrollment.status)
            .all()
        )
        return {EnrollmentStatusEnum(status).value: count for status, count in rows}

    def average_progress(self, db: Session, course_id: int) -> float:
        value = (
            db.query(func.avg(Enrollment.progress_percentage))
            .filter(Enrollment.course_id == course_id, Enrollment.deleted_at == None)
            .scalar()
        )
        return round(float(value), 2) if value is not None else 0.0

enrollment = CRUDEnrollment(Enrollment)
