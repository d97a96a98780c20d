from sqlalchemy import Column, Integer, ForeignKey, DateTime, Numeric, Enum as SQLEnum, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import EnrollmentStatusEnum, EnrollmentTypeEnum

class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("learner_id", "course_id", name="uq_enrollment_learner_course"),)

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    enrollment_type = Column(SQLEnum(EnrollmentTypeEnum), nullable=False, default=EnrollmentTypeEnum.SELF)
    status = Column(SQLEnum(EnrollmentStatusEnum), nullable=False, default=EnrollmentStatusEnum.ACTIVE)
    enrolled_at = Column(DateTime, nullable=False)
    enrolled_by = Column(Integer, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    progress_percentage = Column(Numeric(5, 2, asdecimal=False), nullable=False, default=0)
    final_grade = Column(Numeric(5, 2, asdecimal=False), nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=True)

    course = relationship("Course", back_populates="enrollments")
    lesson_progress = relationship("LessonProgress", back_populates="enrollment", cascade="all, delete-orphan")
