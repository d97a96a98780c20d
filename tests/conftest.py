import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import uuid
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

import main
from app.core.cache import cache
from app.core.config import settings
from app.core.constants import QuizStatusEnum
from app.core.database import Base, get_db
from app.utils import deps as deps_utils
from app.models.course import Course, CourseInstructor
from app.models.course_type import CourseType
from app.models.lesson import Lesson
from app.models.quiz import Quiz
from app.models.unit import Unit
from app.services.course import course_service

test_db_url = settings.TEST_DATABASE_URL or "sqlite://"

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        engine = create_engine(test_db_url)
    yield engine
    engine.dispose()

@pytest.fixture(scope="function")
def db_session(database_engine):
    Base.metadata.create_all(bind=database_engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=database_engine)

@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()

@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture
def course_type_factory(db_session):
    def _course_type_factory(name=None, is_active=True):
        course_type = CourseType(name=name or f"Type {uuid.uuid4().hex[:6]}", is_active=is_active)
        db_session.add(course_type)
        db_session.commit()
        db_session.refresh(course_type)
        return course_type
    return _course_type_factory

@pytest.fixture
def course_factory(db_session, course_type_factory):
    def _course_factory(course_type=None, title="Intro to Markets", description="Basics of trading"):
        course_type = course_type or course_type_factory()
        course = Course(title=title, description=description, course_type_id=course_type.id)
        db_session.add(course)
        db_session.commit()
        db_session.refresh(course)
        return course
    return _course_factory

@pytest.fixture
def instructor_factory(db_session):
    def _instructor_factory(course, instructor_id=None, is_primary=True):
        assignment = CourseInstructor(
            course_id=course.id,
            instructor_id=instructor_id or 100 + len(course.instructors),
            is_primary=is_primary,
        )
        db_session.add(assignment)
        db_session.commit()
        db_session.refresh(course)
        return assignment
    return _instructor_factory

@pytest.fixture
def unit_factory(db_session):
    def _unit_factory(course, unit_order, title=None):
        unit = Unit(course_id=course.id, unit_order=unit_order, title=title or f"Unit {unit_order}")
        db_session.add(unit)
        db_session.commit()
        db_session.refresh(unit)
        return unit
    return _unit_factory

@pytest.fixture
def lesson_factory(db_session):
    def _lesson_factory(unit, lesson_order, title=None):
        lesson = Lesson(unit_id=unit.id, lesson_order=lesson_order, title=title or f"Lesson {lesson_order}")
        db_session.add(lesson)
        db_session.commit()
        db_session.refresh(lesson)
        return lesson
    return _lesson_factory

@pytest.fixture
def published_course(db_session, course_factory, instructor_factory, unit_factory, lesson_factory):
    """A published course with one instructor, one unit and two lessons."""
    def _published_course(lessons=2):
        course = course_factory()
        instructor_factory(course)
        unit = unit_factory(course, 1)
        for position in range(1, lessons + 1):
            lesson_factory(unit, position)
        return course_service.publish(db_session, course.id)
    return _published_course

@pytest.fixture
def quiz_factory(db_session, course_factory):
    def _quiz_factory(course=None, duration_minutes=30, passing_score=50, max_score=100, status=QuizStatusEnum.PUBLISHED):
        course = course or course_factory()
        quiz = Quiz(
            course_id=course.id,
            title=f"Quiz {uuid.uuid4().hex[:6]}",
            duration_minutes=duration_minutes,
            passing_score=passing_score,
            max_score=max_score,
            status=status,
        )
        db_session.add(quiz)
        db_session.commit()
        db_session.refresh(quiz)
        return quiz
    return _quiz_factory
