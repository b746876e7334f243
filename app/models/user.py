"""
User and linked social identity models for CodeZetta
"""

from sqlalchemy import Column, String, DateTime, Text, Integer, Enum, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.enums import UserRole, SocialProvider, enum_values
from app.utils.dates import utcnow
from app.utils.ids import generate_id


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    password_hash = Column(String(255), nullable=True)  # NULL for social-only accounts

    role = Column(
        Enum(UserRole, values_callable=enum_values, name="user_role"),
        nullable=False,
        default=UserRole.STUDENT,
    )

    avatar_url = Column(String(1024), nullable=True)
    bio = Column(Text, nullable=True)

    total_points = Column(Integer, nullable=False, default=0, index=True)
    preferences = Column(JSON, nullable=True)
    selected_subjects = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    attempts = relationship("QuizAttempt", back_populates="user")

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)


class SocialAccount(Base):
    """Link between a provider identity and a local user"""
    __tablename__ = "social_accounts"
    __table_args__ = (
        UniqueConstraint("provider", "provider_user_id", name="uq_social_accounts_provider_user"),
    )

    id = Column(String(32), primary_key=True, default=generate_id)
    # No FK cascade: a dangling link is detected and removed at the next login
    user_id = Column(String(32), nullable=False, index=True)
    provider = Column(
        Enum(SocialProvider, values_callable=enum_values, name="social_provider"),
        nullable=False,
    )
    provider_user_id = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
