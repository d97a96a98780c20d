from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import AttemptStatusEnum, QuizStatusEnum
from app.core.exceptions import (
    ActiveAttemptInProgressError,
    AttemptTimeOverError,
    BusinessRuleError,
    QuizNotStartableError,
)
from app.services.attempt import attempt_service
from app.services.course import course_service
from app.services.quiz import quiz_service
from app.utils import timeutils

STUDENT_ID = 777
START = datetime(2026, 3, 2, 9, 0, 0)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock(monkeypatch):
    frozen = FrozenClock(START)
    monkeypatch.setattr(timeutils, "utcnow", frozen)
    return frozen


def test_start_sets_window_and_numbers(db_session: Session, quiz_factory, clock):
    print("\n[TEST] Attempt start")
    quiz = quiz_factory(duration_minutes=30)

    first = attempt_service.start(db_session, quiz.id, STUDENT_ID)
    assert first.status == AttemptStatusEnum.IN_PROGRESS
    assert first.attempt_number == 1
    assert first.start_at == START
    assert first.ends_at == START + timedelta(minutes=30)
    assert first.score == 0 and first.is_passed is False

    clock.advance(minutes=10)
    assert first.remaining_seconds == 20 * 60
    assert first.is_time_up is False

    second = attempt_service.start(db_session, quiz.id, STUDENT_ID)
    other_student = attempt_service.start(db_session, quiz.id, STUDENT_ID + 1)
    assert second.attempt_number == 2
    assert other_student.attempt_number == 1
    print("[OK] Attempt numbers increase per student")


def test_unpublished_quiz_cannot_be_started(db_session: Session, quiz_factory):
    quiz = quiz_factory(status=QuizStatusEnum.DRAFT)
    with pytest.raises(QuizNotStartableError) as exc:
        attempt_service.start(db_session, quiz.id, STUDENT_ID)
    assert exc.value.message == "Quiz is not published."


@pytest.mark.parametrize("duration", [0, None])
def test_quiz_without_duration_cannot_be_started(db_session: Session, quiz_factory, duration):
    quiz = quiz_factory(duration_minutes=duration)
    with pytest.raises(QuizNotStartableError) as exc:
        attempt_service.start(db_session, quiz.id, STUDENT_ID)
    assert exc.value.message == "Quiz duration is invalid."


def test_submit_records_time_spent_once(db_session: Session, quiz_factory, clock):
    print("\n[TEST] Attempt submit")
    quiz = quiz_factory(duration_minutes=30)
    attempt = attempt_service.start(db_session, quiz.id, STUDENT_ID)

    clock.advance(seconds=600)
    result = attempt_service.submit(db_session, attempt.id)
    assert result.applied
    assert result.attempt.status == AttemptStatusEnum.SUBMITTED
    assert result.attempt.submitted_at == START + timedelta(seconds=600)
    assert result.attempt.time_spent_seconds == 600

    clock.advance(seconds=60)
    again = attempt_service.submit(db_session, attempt.id)
    assert not again.applied
    assert again.message == "Attempt is not in progress."
    assert again.attempt.time_spent_seconds == 600
    print("[OK] Second submit left the attempt untouched")


def test_late_submit_is_rejected_when_deadline_enforced(db_session: Session, quiz_factory, clock, monkeypatch):
    monkeypatch.setattr(settings, "ATTEMPT_ENFORCE_DEADLINE", True)
    quiz = quiz_factory(duration_minutes=5)
    attempt = attempt_service.start(db_session, quiz.id, STUDENT_ID)

    clock.advance(minutes=6)
    with pytest.raises(AttemptTimeOverError):
        attempt_service.submit(db_session, attempt.id)
    assert attempt_service.get_attempt(db_session, attempt.id).status == AttemptStatusEnum.IN_PROGRESS


def test_late_submit_is_accepted_by_default(db_session: Session, quiz_factory, clock):
    quiz = quiz_factory(duration_minutes=5)
    attempt = attempt_service.start(db_session, quiz.id, STUDENT_ID)

    clock.advance(minutes=6)
    result = attempt_service.submit(db_session, attempt.id)
    assert result.applied
    assert result.attempt.time_spent_seconds == 360


def test_grade_happens_exactly_once(db_session: Session, quiz_factory, clock):
    print("\n[TEST] Attempt grading")
    quiz = quiz_factory(passing_score=50, max_score=100)
    attempt = attempt_service.start(db_session, quiz.id, STUDENT_ID)

    early = attempt_service.grade(db_session, attempt.id, score=80)
    assert not early.applied
    assert early.message == "Attempt is not submitted yet."

    attempt_service.submit(db_session, attempt.id)
    result = attempt_service.grade(db_session, attempt.id, score=70, grader_id=9)
    assert result.applied
    assert result.attempt.status == AttemptStatusEnum.GRADED
    assert result.attempt.score == 70
    assert result.attempt.is_passed is True
    assert result.attempt.graded_by == 9
    assert result.attempt.graded_at is not None

    again = attempt_service.grade(db_session, attempt.id, score=10)
    assert not again.applied
    assert again.message == "Attempt has already been graded."
    assert again.attempt.score == 70
    print("[OK] Regrade was a no-op")


def test_grade_derives_failure_and_honours_override(db_session: Session, quiz_factory):
    quiz = quiz_factory(passing_score=50, max_score=100)
    failed = attempt_service.start(db_session, quiz.id, STUDENT_ID)
    attempt_service.submit(db_session, failed.id)
    assert attempt_service.grade(db_session, failed.id, score=20).attempt.is_passed is False

    overridden = attempt_service.start(db_session, quiz.id, STUDENT_ID)
    attempt_service.submit(db_session, overridden.id)
    assert attempt_service.grade(db_session, overridden.id, score=20, is_passed=True).attempt.is_passed is True


def test_grade_above_maximum_is_rejected(db_session: Session, quiz_factory):
    quiz = quiz_factory(max_score=10)
    attempt = attempt_service.start(db_session, quiz.id, STUDENT_ID)
    attempt_service.submit(db_session, attempt.id)

    with pytest.raises(BusinessRuleError):
        attempt_service.grade(db_session, attempt.id, score=11)
    assert attempt_service.get_attempt(db_session, attempt.id).status == AttemptStatusEnum.SUBMITTED


def test_in_progress_attempt_blocks_unpublishing(db_session: Session, published_course, quiz_factory):
    print("\n[TEST] Unpublish guards")
    course = published_course()
    quiz = quiz_factory(course=course)
    attempt = attempt_service.start(db_session, quiz.id, STUDENT_ID)

    with pytest.raises(ActiveAttemptInProgressError):
        quiz_service.unpublish(db_session, quiz.id)
    with pytest.raises(ActiveAttemptInProgressError):
        quiz_service.delete_quiz(db_session, quiz.id)
    with pytest.raises(ActiveAttemptInProgressError):
        course_service.unpublish(db_session, course.id)

    attempt_service.submit(db_session, attempt.id)
    assert quiz_service.unpublish(db_session, quiz.id).status == QuizStatusEnum.DRAFT
    assert not course_service.unpublish(db_session, course.id).is_published
    print("[OK] Unpublish allowed once the attempt was submitted")
