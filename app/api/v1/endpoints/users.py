"""
User endpoints
Profile, preferences, points and stats for the current user
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.cache import cache_manager
from app.core.database import get_db
from app.core.security import TokenData, get_current_user_token
from app.schemas.common import MessageResponse
from app.schemas.users import (
    LeaderboardPosition,
    PointsResponse,
    SyncPointsResponse,
    UpdateMeRequest,
    UpdatePasswordRequest,
    UpdateProfileRequest,
    UpdateSelectedSubjectsRequest,
    UserMe,
    UserPublic,
    UserStats,
)
from app.services.users import to_public, user_service

router = APIRouter()


@router.get("/me", response_model=UserMe)
async def get_me(token: TokenData = Depends(get_current_user_token), db: Session = Depends(get_db)):
    """Current user with preferences"""
    return user_service.get_me(db, token.user_id)


@router.patch("/me", response_model=UserMe)
async def update_me(
    data: UpdateMeRequest,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    """Update name, avatar, bio and preferences"""
    return user_service.update_me(db, token.user_id, data)


@router.patch("/me/password", response_model=MessageResponse)
async def update_password(
    data: UpdatePasswordRequest,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    return user_service.update_password(db, token.user_id, data)


@router.put("/me/profile", response_model=UserPublic)
async def update_profile(
    data: UpdateProfileRequest,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    return user_service.update_profile(db, token.user_id, data)


@router.patch("/me/subjects", response_model=UserPublic)
async def update_selected_subjects(
    data: UpdateSelectedSubjectsRequest,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    return user_service.update_selected_subjects(db, token.user_id, data.selected_subjects)


@router.get("/me/stats", response_model=UserStats)
async def get_my_stats(token: TokenData = Depends(get_current_user_token), db: Session = Depends(get_db)):
    """Quiz totals, streak and per-subject breakdown"""
    return user_service.get_user_stats(db, token.user_id)


@router.get("/me/points", response_model=PointsResponse)
async def get_my_points(token: TokenData = Depends(get_current_user_token), db: Session = Depends(get_db)):
    return PointsResponse(total_points=user_service.get_points(db, token.user_id))


@router.get("/me/leaderboard-position", response_model=LeaderboardPosition)
async def get_my_leaderboard_position(
    token: TokenData = Depends(get_current_user_token), db: Session = Depends(get_db)
):
    return user_service.get_leaderboard_position(db, token.user_id)


@router.post("/me/sync-points", response_model=SyncPointsResponse)
async def sync_points(token: TokenData = Depends(get_current_user_token), db: Session = Depends(get_db)):
    """Recompute total points from the attempt history"""
    result = user_service.sync_points_from_attempts(db, token.user_id)
    await cache_manager.clear_pattern("leaderboard:*")
    return result


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(
    user_id: str,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    return to_public(user_service.get_user(db, user_id))
