"""
Attempt endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import TokenData, get_current_user_token
from app.schemas.quizzes import AttemptDetail
from app.services.quizzes import quiz_service

router = APIRouter()


@router.get("/{attempt_id}", response_model=AttemptDetail)
async def get_attempt(
    attempt_id: str,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    """Attempt detail for its owner"""
    return quiz_service.get_attempt_detail(db, attempt_id, token.user_id)
