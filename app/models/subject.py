"""
Subject model for CodeZetta
"""

from sqlalchemy import Column, String, DateTime, Text, Enum
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.enums import SubjectName, enum_values
from app.utils.dates import utcnow
from app.utils.ids import generate_id


class Subject(Base):
    """Subject model"""
    __tablename__ = "subjects"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(
        Enum(SubjectName, values_callable=enum_values, name="subject_name"),
        unique=True,
        nullable=False,
    )
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    quizzes = relationship("Quiz", back_populates="subject")
