import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import BusinessRuleError, DeletionBlockedError, DuplicateOrderError, NotFoundError
from app.crud.lesson import lesson as crud_lesson
from app.crud.unit import unit as crud_unit
from app.models.unit import Unit
from app.schemas.lesson import LessonCreate, LessonUpdate
from app.schemas.unit import UnitCreate, UnitUpdate
from app.services.lesson import lesson_service
from app.services.ordering import ordering_service, unit_scope
from app.services.unit import unit_service
from tests.helpers.asserts import assert_dense


def _units(db: Session, course_id: int):
    return crud_unit.get_by_course(db, course_id=course_id)


def test_units_get_next_free_position(db_session: Session, course_factory):
    print("\n[TEST] Units appended at the next position")
    course = course_factory()
    created = [unit_service.create_unit(db_session, UnitCreate(course_id=course.id, title=f"U{i}")) for i in range(3)]

    assert [u.unit_order for u in created] == [1, 2, 3]
    assert ordering_service.next_order(db_session, unit_scope(course.id)) == 4
    print("[OK] Positions 1..3 assigned")


def test_explicit_duplicate_position_is_rejected(db_session: Session, course_factory, unit_factory):
    print("\n[TEST] Duplicate unit position")
    course = course_factory()
    unit_factory(course, 1)
    unit_factory(course, 2)

    with pytest.raises(DuplicateOrderError) as exc:
        unit_service.create_unit(db_session, UnitCreate(course_id=course.id, title="Clash", unit_order=2))
    assert exc.value.message == "Unit order 2 already exists."
    assert len(_units(db_session, course.id)) == 2
    print("[OK] Duplicate rejected, nothing written")


def test_reorder_fills_unmapped_siblings(db_session: Session, course_factory, unit_factory):
    print("\n[TEST] Partial reorder keeps orders dense")
    course = course_factory()
    u1, u2, u3 = (unit_factory(course, i) for i in (1, 2, 3))

    result = unit_service.reorder(db_session, course.id, {u3.id: 1, u1.id: 2})

    assert [u.id for u in result] == [u3.id, u1.id, u2.id]
    units = _units(db_session, course.id)
    assert {u.id: u.unit_order for u in units} == {u3.id: 1, u1.id: 2, u2.id: 3}
    assert_dense(units, "unit_order")
    print("[OK] Reorder applied")


def test_reorder_rejects_duplicates_and_leaves_orders_untouched(db_session: Session, course_factory, unit_factory):
    course = course_factory()
    u1, u2 = unit_factory(course, 1), unit_factory(course, 2)

    with pytest.raises(DuplicateOrderError) as exc:
        unit_service.reorder(db_session, course.id, {u1.id: 1, u2.id: 1})
    assert exc.value.message == "Duplicate orders found."

    db_session.expire_all()
    assert {u.id: u.unit_order for u in _units(db_session, course.id)} == {u1.id: 1, u2.id: 2}


def test_reorder_rejects_out_of_range_and_unknown_ids(db_session: Session, course_factory, unit_factory):
    course = course_factory()
    u1, _ = unit_factory(course, 1), unit_factory(course, 2)

    with pytest.raises(BusinessRuleError):
        unit_service.reorder(db_session, course.id, {u1.id: 5})
    with pytest.raises(NotFoundError):
        unit_service.reorder(db_session, course.id, {9999: 1})


def test_move_shifts_siblings_and_clamps(db_session: Session, course_factory, unit_factory):
    print("\n[TEST] Move to position")
    course = course_factory()
    u1, u2, u3 = (unit_factory(course, i) for i in (1, 2, 3))

    unit_service.move_to_position(db_session, u1.id, 3)
    db_session.expire_all()
    assert {u.id: u.unit_order for u in _units(db_session, course.id)} == {u2.id: 1, u3.id: 2, u1.id: 3}

    unit_service.move_to_position(db_session, u1.id, 1)
    db_session.expire_all()
    assert {u.id: u.unit_order for u in _units(db_session, course.id)} == {u1.id: 1, u2.id: 2, u3.id: 3}

    unit_service.move_to_position(db_session, u2.id, 99)
    db_session.expire_all()
    units = _units(db_session, course.id)
    assert {u.id: u.unit_order for u in units} == {u1.id: 1, u3.id: 2, u2.id: 3}
    assert_dense(units, "unit_order")
    print("[OK] Moves kept positions unique and dense")


def test_unit_with_lessons_cannot_be_deleted(db_session: Session, course_factory, unit_factory, lesson_factory):
    print("\n[TEST] Unit deletion guard")
    course = course_factory()
    unit = unit_factory(course, 1)
    lesson_factory(unit, 1)
    lesson_factory(unit, 2)

    with pytest.raises(DeletionBlockedError) as exc:
        unit_service.delete_unit(db_session, unit.id)
    assert exc.value.message == "Unit has 2 lesson(s). Delete or move them first."
    assert exc.value.data == {"lessons_count": 2}
    assert crud_unit.get(db_session, id=unit.id) is not None
    print("[OK] Unit kept")

    for lesson in crud_lesson.get_by_unit(db_session, unit_id=unit.id):
        lesson_service.delete_lesson(db_session, lesson.id)
    unit_service.delete_unit(db_session, unit.id)

    db_session.expire_all()
    assert crud_unit.get(db_session, id=unit.id) is None
    assert db_session.get(Unit, unit.id).deleted_at is not None
    print("[OK] Empty unit deleted")


def test_deleting_unit_compacts_remaining_positions(db_session: Session, course_factory, unit_factory):
    course = course_factory()
    u1, u2, u3 = (unit_factory(course, i) for i in (1, 2, 3))

    unit_service.delete_unit(db_session, u2.id)

    db_session.expire_all()
    units = _units(db_session, course.id)
    assert [(u.id, u.unit_order) for u in units] == [(u1.id, 1), (u3.id, 2)]


def test_lesson_ordering_within_unit(db_session: Session, course_factory, unit_factory):
    print("\n[TEST] Lesson ordering")
    course = course_factory()
    unit = unit_factory(course, 1)
    other_unit = unit_factory(course, 2)
    lessons = [lesson_service.create_lesson(db_session, LessonCreate(unit_id=unit.id, title=f"L{i}")) for i in range(3)]
    other = lesson_service.create_lesson(db_session, LessonCreate(unit_id=other_unit.id, title="Elsewhere"))

    assert [l.lesson_order for l in lessons] == [1, 2, 3]
    assert other.lesson_order == 1

    lesson_service.reorder(db_session, unit.id, {lessons[2].id: 1})
    db_session.expire_all()
    ordered = crud_lesson.get_by_unit(db_session, unit_id=unit.id)
    assert [l.id for l in ordered] == [lessons[2].id, lessons[0].id, lessons[1].id]

    lesson_service.delete_lesson(db_session, lessons[0].id)
    db_session.expire_all()
    ordered = crud_lesson.get_by_unit(db_session, unit_id=unit.id)
    assert [(l.id, l.lesson_order) for l in ordered] == [(lessons[2].id, 1), (lessons[1].id, 2)]
    assert crud_lesson.get(db_session, id=other.id).lesson_order == 1
    print("[OK] Lesson positions scoped to their unit")


def test_update_order_moves_instead_of_leaving_gaps(db_session: Session, course_factory, unit_factory):
    print("\n[TEST] Order change through update")
    course = course_factory()
    u1, u2, u3 = (unit_factory(course, i) for i in (1, 2, 3))

    unit_service.update_unit(db_session, u3.id, UnitUpdate(unit_order=10, title="Wrap-up"))
    db_session.expire_all()
    units = _units(db_session, course.id)
    assert {u.id: u.unit_order for u in units} == {u1.id: 1, u2.id: 2, u3.id: 3}
    assert crud_unit.get(db_session, id=u3.id).title == "Wrap-up"

    unit_service.update_unit(db_session, u3.id, UnitUpdate(unit_order=1))
    db_session.expire_all()
    units = _units(db_session, course.id)
    assert {u.id: u.unit_order for u in units} == {u3.id: 1, u1.id: 2, u2.id: 3}
    assert_dense(units, "unit_order")
    print("[OK] Update kept positions dense")


def test_explicit_position_past_the_end_is_clamped(db_session: Session, course_factory):
    course = course_factory()
    first = unit_service.create_unit(db_session, UnitCreate(course_id=course.id, title="Intro", unit_order=7))
    second = unit_service.create_unit(db_session, UnitCreate(course_id=course.id, title="Next", unit_order=9))

    assert (first.unit_order, second.unit_order) == (1, 2)


def test_move_closes_existing_gaps(db_session: Session, course_factory, unit_factory):
    course = course_factory()
    u1, u2, u3 = unit_factory(course, 1), unit_factory(course, 2), unit_factory(course, 10)

    unit_service.move_to_position(db_session, u1.id, 3)

    db_session.expire_all()
    units = _units(db_session, course.id)
    assert {u.id: u.unit_order for u in units} == {u2.id: 1, u3.id: 2, u1.id: 3}
    assert_dense(units, "unit_order")


def test_database_rejects_duplicate_live_positions(db_session: Session, course_factory, unit_factory):
    print("\n[TEST] Unique position index")
    course = course_factory()
    unit = unit_factory(course, 1)

    db_session.add(Unit(course_id=course.id, unit_order=1, title="Copy"))
    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()

    unit_service.delete_unit(db_session, unit.id)
    replacement = unit_factory(course, 1)
    assert replacement.unit_order == 1
    print("[OK] Only live rows hold a position")


def test_lesson_update_order_stays_dense(db_session: Session, course_factory, unit_factory, lesson_factory):
    course = course_factory()
    unit = unit_factory(course, 1)
    l1, l2, l3 = (lesson_factory(unit, i) for i in (1, 2, 3))

    lesson_service.update_lesson(db_session, l1.id, LessonUpdate(lesson_order=5))

    db_session.expire_all()
    ordered = crud_lesson.get_by_unit(db_session, unit_id=unit.id)
    assert [(l.id, l.lesson_order) for l in ordered] == [(l2.id, 1), (l3.id, 2), (l1.id, 3)]
