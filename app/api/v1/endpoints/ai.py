"""
AI endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import TokenData, get_current_user_token
from app.schemas.ai import QuizGenerationRequest
from app.schemas.quizzes import QuizResponse
from app.services.ai import ai_service

router = APIRouter()


@router.post("/generate-quiz", response_model=QuizResponse, status_code=201)
async def generate_quiz(
    data: QuizGenerationRequest,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    """Generate a placeholder quiz for a subject and level"""
    return ai_service.generate_quiz(db, data.subject, data.level, data.count, token.user_id)
