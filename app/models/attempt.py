from sqlalchemy import Column, Integer, DateTime, ForeignKey, Boolean, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import AttemptStatusEnum
from app.utils import timeutils

class Attempt(Base):
    __tablename__ = "attempts"
    __table_args__ = (UniqueConstraint("quiz_id", "student_id", "attempt_number", name="uq_attempt_quiz_student_number"),)

    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)
    student_id = Column(Integer, nullable=False, index=True)
    attempt_number = Column(Integer, nullable=False)
    status = Column(Enum(AttemptStatusEnum), nullable=False, default=AttemptStatusEnum.IN_PROGRESS)
    score = Column(Integer, nullable=False, default=0)
    is_passed = Column(Boolean, nullable=False, default=False)
    start_at = Column(DateTime, nullable=False)
    ends_at = Column(DateTime, nullable=True)
    submitted_at = Column(DateTime, nullable=True)
    time_spent_seconds = Column(Integer, nullable=True)
    graded_at = Column(DateTime, nullable=True)
    graded_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    quiz = relationship("Quiz", back_populates="attempts")
    answers = relationship("Answer", back_populates="attempt", cascade="all, delete-orphan")

    @property
    def remaining_seconds(self):
        if not self.ends_at:
            return None
        return max(0, int((self.ends_at - timeutils.utcnow()).total_seconds()))

    @property
    def is_time_up(self) -> bool:
        return bool(self.ends_at) and timeutils.utcnow() >= self.ends_at
