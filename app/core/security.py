"""
Security utilities for authentication and authorization
Handles JWT tokens, password hashing, and permission checks
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationException, AuthorizationException, NotFoundException
from app.models.enums import UserRole

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

# HTTP Bearer scheme; missing credentials are reported as 401 by the dependencies below
security = HTTPBearer(auto_error=False)


class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
        """Verify a plain password against hashed password"""
        if not hashed_password:
            return False
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # Malformed hash in storage
            return False

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password using bcrypt"""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Create JWT access token

        Args:
            data: Data to encode in token
            expires_delta: Token expiration time

        Returns:
            Encoded JWT token
        """
        to_encode = data.copy()

        if expires_delta:
            expire = datetime.now(timezone.utc) + expires_delta
        else:
            expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        to_encode.update({"exp": expire})

        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def create_user_token(user) -> str:
        """Access token carrying the user's id, email and role"""
        return SecurityUtils.create_access_token(
            {"sub": user.id, "email": user.email, "role": _role_value(user.role)}
        )

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode JWT token

        Args:
            token: JWT token to decode

        Returns:
            Decoded token data

        Raises:
            AuthenticationException: If token is invalid or expired
        """
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise AuthenticationException("Could not validate credentials")


def _role_value(role) -> str:
    return role.value if isinstance(role, UserRole) else str(role)


class TokenData:
    """Token data model"""

    def __init__(self, user_id: str, email: Optional[str], role: str):
        self.user_id = user_id
        self.email = email
        self.role = role

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def _token_data_from_credentials(credentials: HTTPAuthorizationCredentials) -> TokenData:
    payload = SecurityUtils.decode_token(credentials.credentials)

    user_id = payload.get("sub")
    if user_id is None:
        raise AuthenticationException("Invalid authentication credentials")

    return TokenData(user_id=str(user_id), email=payload.get("email"), role=payload.get("role"))


def get_current_user_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> TokenData:
    """
    Get current user from JWT token

    Args:
        credentials: HTTP Bearer credentials

    Returns:
        TokenData object with user information

    Raises:
        AuthenticationException: If token is missing or invalid
    """
    if credentials is None:
        raise AuthenticationException("Not authenticated")
    return _token_data_from_credentials(credentials)


def get_optional_user_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> Optional[TokenData]:
    """Token data when a valid bearer token is present, otherwise None"""
    if credentials is None:
        return None
    try:
        return _token_data_from_credentials(credentials)
    except AuthenticationException:
        return None


def get_current_active_user(
    token_data: TokenData = Depends(get_current_user_token), db: Session = Depends(get_db)
):
    """
    Get current user from database

    Args:
        token_data: Token data from JWT
        db: Database session

    Returns:
        User object from database

    Raises:
        NotFoundException: If the token's user no longer exists
    """
    from app.models.user import User

    user = db.get(User, token_data.user_id)

    if not user:
        raise NotFoundException("User")

    return user


def require_admin(token_data: TokenData = Depends(get_current_user_token)) -> TokenData:
    """Dependency to require admin role"""
    if not token_data.is_admin:
        raise AuthorizationException("Admin access required")
    return token_data
