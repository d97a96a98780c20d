from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import LessonTypeEnum

class Lesson(Base):
    __tablename__ = "lessons"
    __table_args__ = (
        Index(
            "uq_lessons_unit_order", "unit_id", "lesson_order", unique=True,
            postgresql_where=text("deleted_at IS NULL"), sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    unit_id = Column(Integer, ForeignKey("units.id"), nullable=False, index=True)
    lesson_order = Column(Integer, nullable=False)
    title = Column(String, index=True, nullable=False)
    content = Column(String, nullable=True)
    lesson_type = Column(Enum(LessonTypeEnum), nullable=False, default=LessonTypeEnum.TEXT)
    is_required = Column(Boolean, nullable=False, default=True)
    duration_minutes = Column(Integer, nullable=False, default=0)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    unit = relationship("Unit", back_populates="lessons")
    progress_records = relationship("LessonProgress", back_populates="lesson")
