"""Read-only projections over enrollments and attempts.

Reports are cached under the tags of the entities they read, so every write
that goes through ``cache_service`` drops the affected reports at once.
"""
import logging

from sqlalchemy.orm import Session

from app.core.cache import cache
from app.core.config import settings
from app.core.constants import EnrollmentStatusEnum, AttemptStatusEnum
from app.crud.attempt import attempt as crud_attempt
from app.crud.enrollment import enrollment as crud_enrollment
from app.schemas.report import CourseReport, QuizReport, LearnerReport, LearnerEnrollmentSummary
from app.services.cache_service import course_tag, quiz_tag, learner_tag
from app.services.course import course_service
from app.services.quiz import quiz_service

logger = logging.getLogger(__name__)

class ReportService:
    def get_course_report(self, db: Session, course_id: int) -> CourseReport:
        course = course_service.get_course(db, course_id)

        def load():
            by_status = {status.value: 0 for status in EnrollmentStatusEnum}
            by_status.update(crud_enrollment.count_by_status(db, course_id))
            total = sum(by_status.values())
            completed = by_status[EnrollmentStatusEnum.COMPLETED.value]
            return CourseReport(
                course_id=course.id,
                title=course.title,
                total_enrollments=total,
                enrollments_by_status=by_status,
                completion_rate=round(completed / total * 100, 2) if total else 0.0,
                average_progress=crud_enrollment.average_progress(db, course_id),
            ).model_dump(mode="json")

        key = cache.generate_key("report:course", course_id)
        return CourseReport(**cache.remember(key, settings.CACHE_TTL, [course_tag(course_id)], load))

    def get_quiz_report(self, db: Session, quiz_id: int) -> QuizReport:
        quiz = quiz_service.get_quiz(db, quiz_id)

        def load():
            by_status = {status.value: 0 for status in AttemptStatusEnum}
            by_status.update(crud_attempt.count_by_status(db, quiz_id))
            graded, passed, average_score = crud_attempt.graded_stats(db, quiz_id)
            return QuizReport(
                quiz_id=quiz.id,
                title=quiz.title,
                total_attempts=sum(by_status.values()),
                attempts_by_status=by_status,
                graded_attempts=graded,
                pass_rate=round(passed / graded * 100, 2) if graded else 0.0,
                average_score=average_score,
            ).model_dump(mode="json")

        key = cache.generate_key("report:quiz", quiz_id)
        return QuizReport(**cache.remember(key, settings.CACHE_TTL, [quiz_tag(quiz_id)], load))

    def get_learner_report(self, db: Session, learner_id: int) -> LearnerReport:
        def load():
            enrollments, total = crud_enrollment.get_by_learner(db, learner_id, limit=1000)
            summaries = [
                LearnerEnrollmentSummary(
                    enrollment_id=enrollment.id,
                    course_id=enrollment.course_id,
                    course_title=enrollment.course.title if enrollment.course else None,
                    status=enrollment.status.value,
                    progress_percentage=float(enrollment.progress_percentage or 0),
                    completed_at=enrollment.completed_at.isoformat() if enrollment.completed_at else None,
                    attempts_count=crud_attempt.count_by_student_and_course(db, learner_id, enrollment.course_id),
                )
                for enrollment in enrollments
            ]
            return LearnerReport(
                learner_id=learner_id,
                total_enrollments=total,
                completed_enrollments=sum(1 for s in summaries if s.status == EnrollmentStatusEnum.COMPLETED.value),
                total_attempts=len(crud_attempt.get_by_student(db, learner_id)),
                enrollments=summaries,
            ).model_dump(mode="json")

        key = cache.generate_key("report:learner", learner_id)
        return LearnerReport(**cache.remember(key, settings.CACHE_TTL, [learner_tag(learner_id)], load))

report_service = ReportService()
