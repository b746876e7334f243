"""
Quiz models for CodeZetta
"""

from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, Text, ForeignKey, Enum, JSON, Index, text
)
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.enums import QuizLevel, QuestionType, QuizSessionStatus, enum_values
from app.utils.dates import utcnow
from app.utils.ids import generate_id


class Quiz(Base):
    """Quiz model"""
    __tablename__ = "quizzes"

    id = Column(String(32), primary_key=True, default=generate_id)
    subject_id = Column(String(32), ForeignKey("subjects.id"), nullable=False, index=True)
    level = Column(
        Enum(QuizLevel, values_callable=enum_values, name="quiz_level"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    created_by_id = Column(String(32), ForeignKey("users.id"), nullable=True)
    timer_minutes = Column(Integer, nullable=False, default=20)

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    subject = relationship("Subject", back_populates="quizzes")
    questions = relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="Question.position",
    )
    # Attempts outlive their quiz; the ORM nulls quiz_id on delete
    attempts = relationship("QuizAttempt", back_populates="quiz")
    sessions = relationship("QuizSession", back_populates="quiz", cascade="all, delete-orphan")


class Question(Base):
    """Question model"""
    __tablename__ = "questions"

    id = Column(String(32), primary_key=True, default=generate_id)
    quiz_id = Column(String(32), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    text = Column(Text, nullable=False)
    type = Column(
        Enum(QuestionType, values_callable=enum_values, name="question_type"),
        nullable=False,
        default=QuestionType.MCQ,
    )
    topic_slug = Column(String(100), nullable=True)
    learning_resources = Column(JSON, nullable=True)

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")
    options = relationship(
        "AnswerOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="AnswerOption.position",
    )


class AnswerOption(Base):
    """Answer option for a question"""
    __tablename__ = "answer_options"

    id = Column(String(32), primary_key=True, default=generate_id)
    question_id = Column(
        String(32), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)

    question = relationship("Question", back_populates="options")


class QuizAttempt(Base):
    """One graded quiz submission"""
    __tablename__ = "quiz_attempts"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    quiz_id = Column(String(32), ForeignKey("quizzes.id", ondelete="SET NULL"), nullable=True, index=True)

    score = Column(Integer, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False, default=0)
    correct_answers_count = Column(Integer, nullable=False, default=0)
    points_earned = Column(Integer, nullable=False, default=0)

    # [{"questionId", "selectedOptionId", "isCorrect"}] for submitted answers only
    answers = Column(JSON, nullable=False, default=list)

    public_slug = Column(String(32), unique=True, nullable=True)

    started_at = Column(DateTime, nullable=False, default=utcnow)
    finished_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    # Relationships
    user = relationship("User", back_populates="attempts")
    quiz = relationship("Quiz", back_populates="attempts")


class QuizSession(Base):
    """In-progress quiz tracker, swept to abandoned when idle or expired"""
    __tablename__ = "quiz_sessions"
    __table_args__ = (
        Index(
            "uq_quiz_sessions_active_user",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
        Index("ix_quiz_sessions_status_last_seen", "status", "last_seen_at"),
        Index("ix_quiz_sessions_status_expires", "status", "expires_at"),
    )

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False)
    quiz_id = Column(String(32), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False)
    status = Column(
        Enum(QuizSessionStatus, values_callable=enum_values, name="quiz_session_status"),
        nullable=False,
        default=QuizSessionStatus.ACTIVE,
    )

    started_at = Column(DateTime, nullable=False, default=utcnow)
    last_seen_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False)
    attempt_id = Column(String(32), ForeignKey("quiz_attempts.id"), nullable=True)

    quiz = relationship("Quiz", back_populates="sessions")
