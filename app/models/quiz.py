from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import QuizStatusEnum

class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    status = Column(Enum(QuizStatusEnum), nullable=False, default=QuizStatusEnum.DRAFT)
    duration_minutes = Column(Integer, nullable=True)
    passing_score = Column(Integer, nullable=False, default=0)
    max_score = Column(Integer, nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    course = relationship("Course", back_populates="quizzes")
    questions = relationship("Question", primaryjoin="and_(Quiz.id == Question.quiz_id, Question.deleted_at == None)", back_populates="quiz", order_by="Question.order_index")
    attempts = relationship("Attempt", back_populates="quiz")
