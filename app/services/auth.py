"""
Authentication service for CodeZetta
Password registration/login and the social-login account linking flow
"""

import logging
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationException, BadRequestException
from app.core.logging import LoggerFactory
from app.core.security import SecurityUtils
from app.models.enums import UserRole
from app.models.user import SocialAccount, User
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, SocialProfile
from app.services.users import to_public, user_service

logger = logging.getLogger(__name__)
security_logger = LoggerFactory.get_security_logger()

GENERIC_NAMES = ("New User", "User")


def email_local_part(email: Optional[str]) -> str:
    return email.split("@")[0] if email else ""


def display_name_for(profile: SocialProfile) -> str:
    """Profile name, else the capitalized email local part, else "User" """
    if profile.name:
        return profile.name
    local = email_local_part(profile.email)
    if local:
        return local[0].upper() + local[1:]
    return "User"


def should_update_name(current: Optional[str], incoming: Optional[str], email: Optional[str]) -> bool:
    if not incoming or not incoming.strip():
        return False

    current_name = (current or "").strip()
    new_name = incoming.strip()
    if new_name == current_name:
        return False

    is_generic = current_name in GENERIC_NAMES or (
        bool(email) and current_name == email_local_part(email)
    )
    return is_generic or not current_name or len(new_name) > len(current_name)


class AuthService:
    """Authentication service"""

    @staticmethod
    def build_auth_response(user: User, new_user: bool = False) -> AuthResponse:
        return AuthResponse(
            access_token=SecurityUtils.create_user_token(user),
            user=to_public(user),
            new_user=new_user,
        )

    @staticmethod
    def register(db: Session, data: RegisterRequest) -> AuthResponse:
        if user_service.find_by_email(db, data.email):
            raise BadRequestException("Email already in use")

        user = User(
            name=data.name,
            email=data.email,
            password_hash=SecurityUtils.get_password_hash(data.password),
            role=UserRole.STUDENT,
            selected_subjects=[subject.value for subject in data.selected_subjects],
            total_points=0,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info("User registered", extra={"user_id": user.id})
        return AuthService.build_auth_response(user)

    @staticmethod
    def login(db: Session, data: LoginRequest) -> AuthResponse:
        user = user_service.find_by_email(db, data.email)

        # Social-only accounts have no password and cannot log in this way
        if not user or not SecurityUtils.verify_password(data.password, user.password_hash):
            security_logger.warning("Failed login", extra={"email": data.email})
            raise AuthenticationException("Invalid credentials")

        security_logger.info("User logged in", extra={"user_id": user.id})
        return AuthService.build_auth_response(user)

    @staticmethod
    def _find_linked_user(db: Session, profile: SocialProfile) -> Optional[User]:
        account = db.scalar(
            select(SocialAccount).where(
                SocialAccount.provider == profile.provider,
                SocialAccount.provider_user_id == profile.provider_user_id,
            )
        )
        if account is None:
            return None

        user = db.get(User, account.user_id)
        if user is None:
            security_logger.warning(
                "Removing orphaned social account",
                extra={
                    "provider": profile.provider.value,
                    "provider_user_id": profile.provider_user_id,
                },
            )
            db.delete(account)
            db.commit()
        return user

    @staticmethod
    def _link_account(db: Session, user: User, profile: SocialProfile) -> None:
        db.add(
            SocialAccount(
                user_id=user.id,
                provider=profile.provider,
                provider_user_id=profile.provider_user_id,
                email=profile.email,
            )
        )

    @staticmethod
    def _link_by_email(db: Session, profile: SocialProfile) -> Optional[User]:
        if not profile.email:
            return None

        user = user_service.find_by_email(db, profile.email)
        if user is None:
            return None

        if not settings.SOCIAL_LINK_BY_EMAIL:
            security_logger.warning(
                "Social login rejected: email belongs to an existing account",
                extra={"provider": profile.provider.value, "user_id": user.id},
            )
            raise BadRequestException("An account with this email already exists")

        AuthService._link_account(db, user, profile)
        security_logger.warning(
            "Linked social account to existing user by email",
            extra={
                "provider": profile.provider.value,
                "provider_user_id": profile.provider_user_id,
                "user_id": user.id,
            },
        )
        return user

    @staticmethod
    def _create_social_user(db: Session, profile: SocialProfile) -> User:
        user = User(
            name=display_name_for(profile),
            email=profile.email or None,
            password_hash=None,
            role=UserRole.STUDENT,
            avatar_url=profile.avatar_url or None,
            total_points=0,
            selected_subjects=[],
        )
        db.add(user)
        db.flush()
        AuthService._link_account(db, user, profile)
        security_logger.info(
            "Created user from social login",
            extra={"provider": profile.provider.value, "user_id": user.id},
        )
        return user

    @staticmethod
    def _refresh_returning_user(user: User, profile: SocialProfile) -> None:
        if profile.avatar_url and not user.avatar_url:
            user.avatar_url = profile.avatar_url
        if should_update_name(user.name, profile.name, profile.email):
            user.name = profile.name.strip()

    @staticmethod
    def resolve_social_user(db: Session, profile: SocialProfile) -> Tuple[User, bool]:
        """
        Find or create the local user for a provider identity

        Order: linked account, email match (policy controlled), new user.
        A link whose user no longer exists is removed first.
        """
        user = AuthService._find_linked_user(db, profile)
        if user is None:
            user = AuthService._link_by_email(db, profile)

        if user is None:
            user = AuthService._create_social_user(db, profile)
            db.commit()
            return user, True

        AuthService._refresh_returning_user(user, profile)
        db.commit()
        return user, False

    @staticmethod
    def social_login(db: Session, profile: SocialProfile) -> AuthResponse:
        user, new_user = AuthService.resolve_social_user(db, profile)
        db.refresh(user)
        return AuthService.build_auth_response(user, new_user)


auth_service = AuthService()
