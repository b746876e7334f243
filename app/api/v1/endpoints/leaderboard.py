"""
Leaderboard endpoints
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.cache import cache_key, cache_manager
from app.core.config import settings
from app.core.database import get_db
from app.schemas.users import LeaderboardEntry
from app.services.users import MAX_LEADERBOARD_LIMIT, user_service

router = APIRouter()


@router.get("", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    limit: int = Query(20, ge=1, le=MAX_LEADERBOARD_LIMIT),
    db: Session = Depends(get_db),
):
    """Top users by total points"""
    key = cache_key("leaderboard", limit=limit)
    cached = await cache_manager.get(key)
    if cached is not None:
        return cached

    entries = user_service.get_leaderboard(db, limit)
    await cache_manager.set(
        key,
        [entry.model_dump(by_alias=True, mode="json") for entry in entries],
        expire=settings.LEADERBOARD_CACHE_TTL,
    )
    return entries
