"""
Authentication schemas for CodeZetta
"""

from typing import List, Optional

from pydantic import EmailStr, Field

from app.core.config import settings
from app.models.enums import SocialProvider, SubjectName
from app.schemas.common import CamelModel
from app.schemas.users import UserPublic


class RegisterRequest(CamelModel):
    """User registration schema"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)
    selected_subjects: List[SubjectName] = Field(default_factory=list)


class LoginRequest(CamelModel):
    """User login schema"""
    email: EmailStr
    password: str


class AuthResponse(CamelModel):
    """Token plus the sanitized user"""
    access_token: str
    user: UserPublic
    new_user: bool = False


class SocialProfile(CamelModel):
    """Identity returned by a social provider"""
    provider: SocialProvider
    provider_user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
