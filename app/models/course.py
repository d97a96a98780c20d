from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import CourseStatusEnum


class CourseInstructor(Base):
    __tablename__ = "course_instructors"
    __table_args__ = (UniqueConstraint("course_id", "instructor_id", name="uq_course_instructor"),)

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    instructor_id = Column(Integer, nullable=False, index=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    assigned_by = Column(Integer, nullable=True)
    assigned_at = Column(DateTime, server_default=func.now())

    course = relationship("Course", back_populates="instructors")


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    course_type_id = Column(Integer, ForeignKey("course_types.id"), nullable=False)
    status = Column(Enum(CourseStatusEnum), nullable=False, default=CourseStatusEnum.DRAFT)
    published_at = Column(DateTime, nullable=True)
    created_by = Column(Integer, nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    course_type = relationship("CourseType", back_populates="courses")
    instructors = relationship("CourseInstructor", back_populates="course", cascade="all, delete-orphan")
    units = relationship("Unit", primaryjoin="and_(Course.id == Unit.course_id, Unit.deleted_at == None)", back_populates="course", order_by="Unit.unit_order")
    enrollments = relationship("Enrollment", primaryjoin="and_(Course.id == Enrollment.course_id, Enrollment.deleted_at == None)", back_populates="course")
    quizzes = relationship("Quiz", primaryjoin="and_(Course.id == Quiz.course_id, Quiz.deleted_at == None)", back_populates="course")

    @property
    def is_published(self) -> bool:
        return self.status == CourseStatusEnum.PUBLISHED and self.published_at is not None
