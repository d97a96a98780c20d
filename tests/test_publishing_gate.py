import pytest
from sqlalchemy.orm import Session

from app.core.constants import CourseStatusEnum
from app.core.exceptions import BusinessRuleError, CourseNotPublishableError, DeletionBlockedError
from app.crud.course import course as crud_course
from app.schemas.course import CourseCreate, CourseInstructorCreate
from app.schemas.course_type import CourseTypeCreate
from app.schemas.enrollment import EnrollmentCreate
from app.services.course import course_service
from app.services.course_instructor import course_instructor_service
from app.services.course_type import course_type_service
from app.services.enrollment import enrollment_service


def test_new_course_starts_as_draft(db_session: Session, course_type_factory):
    course_type = course_type_factory()
    course = course_service.create_course(db_session, CourseCreate(title="Options 101", course_type_id=course_type.id))
    assert course.status == CourseStatusEnum.DRAFT
    assert course.published_at is None

    with pytest.raises(BusinessRuleError):
        course_service.create_course(db_session, CourseCreate(title="Orphan", course_type_id=9999))


def test_empty_course_lists_every_missing_requirement(db_session: Session, course_factory):
    print("\n[TEST] Publishability reasons")
    course = course_factory(description="")

    reasons = course_service.get_unpublishability_reasons(db_session, course)
    assert reasons == [
        "Course must have at least one instructor",
        "Course must have at least one unit",
        "Course description is required",
    ]
    with pytest.raises(CourseNotPublishableError) as exc:
        course_service.publish(db_session, course.id)
    assert exc.value.reasons == reasons
    assert course_service.get_course(db_session, course.id).status == CourseStatusEnum.DRAFT
    print("[OK] Publish refused with reasons")


def test_course_without_instructor_is_not_publishable(db_session: Session, course_factory, unit_factory):
    course = course_factory()
    unit_factory(course, 1)
    assert course_service.get_unpublishability_reasons(db_session, course) == ["Course must have at least one instructor"]
    assert not course_service.is_publishable(db_session, course)


def test_publish_and_status_changes(db_session: Session, course_factory, instructor_factory, unit_factory):
    print("\n[TEST] Publish lifecycle")
    course = course_factory()
    instructor_factory(course)
    unit_factory(course, 1)

    course = course_service.change_status(db_session, course.id, CourseStatusEnum.PUBLISHED)
    assert course.status == CourseStatusEnum.PUBLISHED
    assert course.is_published
    assert course.published_at is not None

    course = course_service.change_status(db_session, course.id, CourseStatusEnum.DRAFT)
    assert course.status == CourseStatusEnum.DRAFT
    assert course.published_at is None

    course = course_service.change_status(db_session, course.id, CourseStatusEnum.ARCHIVED)
    assert course.status == CourseStatusEnum.ARCHIVED
    assert not course_service.is_available_for_enrollment(course)
    print("[OK] Status changes applied")


def test_course_with_active_enrollment_cannot_be_deleted(db_session: Session, published_course):
    course = published_course()
    enrollment = enrollment_service.enroll(db_session, EnrollmentCreate(course_id=course.id, learner_id=1))

    with pytest.raises(DeletionBlockedError):
        course_service.delete_course(db_session, course.id)

    enrollment_service.drop(db_session, enrollment.id)
    course_service.delete_course(db_session, course.id)
    assert crud_course.get(db_session, id=course.id) is None


def test_instructor_assignment_keeps_one_primary(db_session: Session, course_factory):
    print("\n[TEST] Instructor assignment")
    course = course_factory()
    first = course_instructor_service.assign(db_session, course.id, CourseInstructorCreate(instructor_id=10))
    second = course_instructor_service.assign(db_session, course.id, CourseInstructorCreate(instructor_id=11))
    assert first.is_primary and not second.is_primary

    with pytest.raises(BusinessRuleError):
        course_instructor_service.assign(db_session, course.id, CourseInstructorCreate(instructor_id=10))

    course_instructor_service.set_primary(db_session, course.id, 11)
    primaries = [i.instructor_id for i in course_instructor_service.get_instructors(db_session, course.id) if i.is_primary]
    assert primaries == [11]

    course_instructor_service.remove(db_session, course.id, 11)
    remaining = course_instructor_service.get_instructors(db_session, course.id)
    assert [(i.instructor_id, i.is_primary) for i in remaining] == [(10, True)]

    with pytest.raises(DeletionBlockedError):
        course_instructor_service.remove(db_session, course.id, 10)
    print("[OK] Single primary, last instructor kept")


def test_course_type_guards(db_session: Session, course_type_factory, published_course):
    print("\n[TEST] Course type guards")
    course_type_service.create_course_type(db_session, CourseTypeCreate(name="Workshop"))
    with pytest.raises(BusinessRuleError):
        course_type_service.create_course_type(db_session, CourseTypeCreate(name="Workshop"))

    course = published_course()
    with pytest.raises(DeletionBlockedError):
        course_type_service.deactivate(db_session, course.course_type_id)
    with pytest.raises(DeletionBlockedError):
        course_type_service.delete_course_type(db_session, course.course_type_id)

    course_service.unpublish(db_session, course.id)
    assert course_type_service.deactivate(db_session, course.course_type_id).is_active is False
    assert course_type_service.activate(db_session, course.course_type_id).is_active is True

    empty_type = course_type_factory()
    course_type_service.delete_course_type(db_session, empty_type.id)
    assert empty_type.id not in [t.id for t in course_type_service.get_course_types(db_session)]
    print("[OK] Course types guarded")
