from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base

class Answer(Base):
    __tablename__ = "answers"
    __table_args__ = (UniqueConstraint("attempt_id", "question_id", name="uq_answer_attempt_question"),)

    id = Column(Integer, primary_key=True, index=True)
    attempt_id = Column(Integer, ForeignKey("attempts.id"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
    selected_option = Column(Integer, ForeignKey("question_options.id"), nullable=True)
    answer_text = Column(String, nullable=True)
    boolean_answer = Column(Boolean, nullable=True)
    is_correct = Column(Boolean, nullable=True) # derived, never taken from input
    question_score = Column(Integer, nullable=True)
    graded_by = Column(Integer, nullable=True)
    graded_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    attempt = relationship("Attempt", back_populates="answers")
    question = relationship("Question", back_populates="answers")
