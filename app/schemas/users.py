"""
User schemas for CodeZetta
"""

import enum
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from app.core.config import settings
from app.models.enums import SubjectName, UserRole
from app.schemas.common import CamelModel


class Theme(str, enum.Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class Language(str, enum.Enum):
    EN = "en"
    AR = "ar"


class PreferredLevel(str, enum.Enum):
    BEGINNER = "beginner"
    MIDDLE = "middle"
    INTERMEDIATE = "intermediate"
    MIXED = "mixed"


DEFAULT_PREFERENCES = {
    "theme": Theme.SYSTEM.value,
    "language": Language.EN.value,
    "emailNotifications": True,
    "pushNotifications": True,
}


class UserPreferences(CamelModel):
    """User preference bag; every field optional so updates can be partial"""
    theme: Optional[Theme] = None
    language: Optional[Language] = None
    primary_subject: Optional[SubjectName] = None
    preferred_level: Optional[PreferredLevel] = None
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None


class UserPublic(CamelModel):
    """User without credentials"""
    id: str
    name: str
    email: Optional[str] = None
    role: UserRole
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    total_points: int = 0
    selected_subjects: List[SubjectName] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserMe(UserPublic):
    """Current user including preferences"""
    preferences: dict = Field(default_factory=lambda: dict(DEFAULT_PREFERENCES))


class UpdateMeRequest(CamelModel):
    name: Optional[str] = Field(default=None, max_length=100)
    avatar_url: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    preferences: Optional[UserPreferences] = None


class UpdateProfileRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None


class UpdatePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)


class UpdateSelectedSubjectsRequest(CamelModel):
    selected_subjects: List[SubjectName]


class PointsResponse(CamelModel):
    total_points: int


class SyncPointsResponse(CamelModel):
    previous_points: int
    calculated_points: int
    attempts_count: int


class PerSubjectStats(CamelModel):
    subject: str
    quizzes_taken: int
    average_score: int
    total_points: int


class UserStats(CamelModel):
    total_quizzes_taken: int
    total_correct_answers: int
    total_questions_answered: int
    streak_days: int
    per_subject_stats: List[PerSubjectStats]


class LeaderboardEntry(CamelModel):
    rank: int
    user_id: str
    name: str
    avatar_url: Optional[str] = None
    total_points: int


class LeaderboardPosition(CamelModel):
    position: int
    total_users: int
    percentile: int
    total_points: int
