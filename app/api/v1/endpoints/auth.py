"""
Authentication endpoints
Password auth plus Google and LinkedIn sign-in
"""

import logging
import secrets
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationException, CodeZettaException
from app.core.security import get_current_active_user
from app.models.user import User
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from app.schemas.users import UserPublic
from app.services.auth import auth_service
from app.services.oauth import OAuthProvider, get_google_provider, get_linkedin_provider
from app.services.users import to_public

router = APIRouter()
logger = logging.getLogger(__name__)

STATE_COOKIE_MAX_AGE = 600


def _state_cookie(provider: OAuthProvider) -> str:
    return f"oauth_state_{provider.provider.value}"


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Register a password account"""
    return auth_service.register(db, data)


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Login with email and password"""
    return auth_service.login(db, data)


@router.get("/me", response_model=UserPublic)
async def get_me(user: User = Depends(get_current_active_user)):
    """Get current user"""
    return to_public(user)


def _start_oauth(provider: OAuthProvider) -> RedirectResponse:
    state = secrets.token_urlsafe(24)
    response = RedirectResponse(provider.get_authorization_url(state), status_code=302)
    response.set_cookie(
        _state_cookie(provider),
        state,
        max_age=STATE_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=settings.is_production(),
    )
    return response


def _failure_redirect(provider: OAuthProvider) -> RedirectResponse:
    query = urlencode({"error": "social_login_failed"})
    response = RedirectResponse(f"{settings.FRONTEND_FAILURE_REDIRECT}?{query}", status_code=302)
    response.delete_cookie(_state_cookie(provider))
    return response


async def _finish_oauth(
    request: Request,
    provider: OAuthProvider,
    db: Session,
    code: Optional[str],
    state: Optional[str],
    error: Optional[str],
) -> RedirectResponse:
    expected_state = request.cookies.get(_state_cookie(provider))
    try:
        if error:
            raise AuthenticationException(f"Provider returned error: {error}")
        if not state or not expected_state or not secrets.compare_digest(state, expected_state):
            raise AuthenticationException("Invalid OAuth state")
        if not code:
            raise AuthenticationException("Missing authorization code")

        profile = await provider.authenticate(code)
        result = auth_service.social_login(db, profile)
    except CodeZettaException as e:
        logger.error(f"{provider.provider.value} OAuth error: {e.message}")
        db.rollback()
        return _failure_redirect(provider)
    except Exception:
        logger.exception(f"{provider.provider.value} OAuth callback failed")
        db.rollback()
        return _failure_redirect(provider)

    query = urlencode({"token": result.access_token, "newUser": str(result.new_user).lower()})
    response = RedirectResponse(f"{settings.FRONTEND_SUCCESS_REDIRECT}?{query}", status_code=302)
    response.delete_cookie(_state_cookie(provider))
    return response


@router.get("/google")
async def google_login(provider: OAuthProvider = Depends(get_google_provider)):
    """Redirect to Google's consent screen"""
    return _start_oauth(provider)


@router.get("/google/callback")
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    provider: OAuthProvider = Depends(get_google_provider),
    db: Session = Depends(get_db),
):
    """Complete Google sign-in and redirect to the frontend"""
    return await _finish_oauth(request, provider, db, code, state, error)


@router.get("/linkedin")
async def linkedin_login(provider: OAuthProvider = Depends(get_linkedin_provider)):
    """Redirect to LinkedIn's consent screen"""
    return _start_oauth(provider)


@router.get("/linkedin/callback")
async def linkedin_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    provider: OAuthProvider = Depends(get_linkedin_provider),
    db: Session = Depends(get_db),
):
    """Complete LinkedIn sign-in and redirect to the frontend"""
    return await _finish_oauth(request, provider, db, code, state, error)
