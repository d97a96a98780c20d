from sqlalchemy.orm import Session

from app.core.cache import cache
from app.crud.lesson import lesson as crud_lesson
from app.schemas.enrollment import EnrollmentCreate
from app.services.attempt import attempt_service
from app.services.cache_service import cache_service, course_tag
from app.services.enrollment import enrollment_service
from app.services.report import report_service


def test_course_report_is_cached_and_invalidated(db_session: Session, published_course):
    print("\n[TEST] Course report caching")
    course = published_course(lessons=2)
    lessons = crud_lesson.get_by_course(db_session, course.id)
    first = enrollment_service.enroll(db_session, EnrollmentCreate(course_id=course.id, learner_id=1))
    enrollment_service.enroll(db_session, EnrollmentCreate(course_id=course.id, learner_id=2))

    report = report_service.get_course_report(db_session, course.id)
    assert report.total_enrollments == 2
    assert report.enrollments_by_status["active"] == 2
    assert report.completion_rate == 0.0

    key = cache.generate_key("report:course", course.id)
    assert cache.get(key) is not None

    for lesson in lessons:
        enrollment_service.complete_lesson(db_session, first.id, lesson.id)
    assert cache.get(key) is None

    report = report_service.get_course_report(db_session, course.id)
    assert report.enrollments_by_status["completed"] == 1
    assert report.completion_rate == 50.0
    assert report.average_progress == 50.0
    print("[OK] Report refreshed after completion")


def test_quiz_report_tracks_grading(db_session: Session, quiz_factory):
    quiz = quiz_factory(passing_score=50, max_score=100)
    passed = attempt_service.start(db_session, quiz.id, 1)
    failed = attempt_service.start(db_session, quiz.id, 2)
    attempt_service.start(db_session, quiz.id, 3)

    report = report_service.get_quiz_report(db_session, quiz.id)
    assert report.total_attempts == 3
    assert report.attempts_by_status["in_progress"] == 3
    assert report.graded_attempts == 0

    for attempt, score in ((passed, 80), (failed, 20)):
        attempt_service.submit(db_session, attempt.id)
        attempt_service.grade(db_session, attempt.id, score=score)

    report = report_service.get_quiz_report(db_session, quiz.id)
    assert report.attempts_by_status == {"in_progress": 1, "submitted": 0, "graded": 2}
    assert report.graded_attempts == 2
    assert report.pass_rate == 50.0
    assert report.average_score == 50.0


def test_learner_report(db_session: Session, published_course, quiz_factory):
    course = published_course()
    other = published_course()
    quiz = quiz_factory(course=course)
    enrollment_service.enroll(db_session, EnrollmentCreate(course_id=course.id, learner_id=7))
    enrollment_service.enroll(db_session, EnrollmentCreate(course_id=other.id, learner_id=7))
    attempt_service.start(db_session, quiz.id, 7)

    report = report_service.get_learner_report(db_session, 7)
    assert report.total_enrollments == 2
    assert report.completed_enrollments == 0
    assert report.total_attempts == 1
    attempts_by_course = {s.course_id: s.attempts_count for s in report.enrollments}
    assert attempts_by_course == {course.id: 1, other.id: 0}


def test_invalidation_by_tag_and_health(db_session: Session):
    key = cache.generate_key("report:course", 1)
    cache.set(key, {"course_id": 1}, ttl=60, tags=[course_tag(1)])
    other_key = cache.generate_key("report:course", 2)
    cache.set(other_key, {"course_id": 2}, ttl=60, tags=[course_tag(2)])

    cache_service.invalidate_course_cache(1)

    assert cache.get(key) is None
    assert cache.get(other_key) == {"course_id": 2}
    assert cache_service.health_check() is True
    assert cache_service.get_cache_stats()["backend"] == "Memory"
