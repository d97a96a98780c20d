from typing import Optional
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.lesson_progress import LessonProgress
from app.models.lesson import Lesson
from app.models.unit import Unit
from app.models.enrollment import Enrollment
from app.schemas.lesson_progress import LessonProgressCreate, LessonProgressUpdate

class CRUDLessonProgress(CRUDBase[LessonProgress, LessonProgressCreate, LessonProgressUpdate]):
    def get_by_enrollment_and_lesson(self, db: Session, enrollment_id: int, lesson_id: int) -> Optional[LessonProgress]:
        return (
            db.query(LessonProgress)
            .filter(LessonProgress.enrollment_id == enrollment_id, LessonProgress.lesson_id == lesson_id)
            .first()
        )

    def count_completed_lessons(self, db: Session, enrollment: Enrollment) -> int:
        """Completed lessons that are still part of the enrollment's course."""
        return (
            db.query(LessonProgress)
            .join(Lesson, Lesson.id == LessonProgress.lesson_id)
            .join(Unit, Unit.id == Lesson.unit_id)
            .filter(
                LessonProgress.enrollment_id == enrollment.id,
                LessonProgress.is_completed == True,
                Lesson.deleted_at == None,
                Unit.deleted_at == None,
                Unit.course_id == enrollment.course_id,
            )
            .count()
        )

lesson_progress = CRUDLessonProgress(LessonProgress)
