from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base

class Unit(Base):
    __tablename__ = "units"
    __table_args__ = (
        Index(
            "uq_units_course_order", "course_id", "unit_order", unique=True,
            postgresql_where=text("deleted_at IS NULL"), sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    unit_order = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    duration_minutes = Column(Integer, nullable=False, default=0)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    course = relationship("Course", back_populates="units")
    lessons = relationship("Lesson", primaryjoin="and_(Unit.id == Lesson.unit_id, Lesson.deleted_at == None)", back_populates="unit", order_by="Lesson.lesson_order")
