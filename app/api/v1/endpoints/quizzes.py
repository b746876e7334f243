"""
Quiz endpoints
Catalog, submission, sessions, level gate and attempt history
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.cache import cache_manager
from app.core.database import get_db
from app.core.security import TokenData, get_current_user_token, get_optional_user_token, require_admin
from app.models.enums import QuizLevel
from app.schemas.common import DeletedResponse
from app.schemas.quizzes import (
    AttemptDetail,
    AttemptSummary,
    GenerateRandomQuestionsRequest,
    GenerateRandomQuestionsResponse,
    LevelCompletion,
    QuizCreate,
    QuizResponse,
    QuizSessionResponse,
    QuizUpdate,
    SubmitQuizRequest,
    SubmitQuizResponse,
)
from app.services.articles import ArticleSuggestionService, get_article_service
from app.services.quizzes import quiz_service
from app.services.random_questions import RandomQuestionGenerator, get_random_question_generator
from app.services.sessions import session_service

router = APIRouter()


@router.get("", response_model=List[QuizResponse])
async def list_quizzes(
    subject_id: Optional[str] = Query(None, alias="subjectId"),
    level: Optional[QuizLevel] = None,
    token: Optional[TokenData] = Depends(get_optional_user_token),
    db: Session = Depends(get_db),
):
    """Quizzes newest first, without answers"""
    return quiz_service.list_quizzes(
        db, subject_id=subject_id, level=level, user_id=token.user_id if token else None
    )


@router.post("", response_model=QuizResponse, status_code=201)
async def create_quiz(
    data: QuizCreate,
    admin: TokenData = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create quiz (admins only)"""
    return quiz_service.create_quiz(db, data, creator_id=admin.user_id)


@router.get("/attempts/my", response_model=List[AttemptSummary])
async def get_my_attempts(token: TokenData = Depends(get_current_user_token), db: Session = Depends(get_db)):
    """Caller's attempts, newest first"""
    return quiz_service.get_user_attempts(db, token.user_id)


@router.get("/attempts/{attempt_id}", response_model=AttemptDetail)
async def get_attempt(
    attempt_id: str,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    return quiz_service.get_attempt_detail(db, attempt_id, token.user_id)


@router.get("/level/{level}/completion", response_model=LevelCompletion)
async def get_level_completion(
    level: QuizLevel,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    return quiz_service.check_level_completion(db, level, token.user_id)


@router.post("/generate-random-questions", response_model=GenerateRandomQuestionsResponse)
async def generate_random_questions(
    data: GenerateRandomQuestionsRequest,
    token: TokenData = Depends(get_current_user_token),
    generator: RandomQuestionGenerator = Depends(get_random_question_generator),
    db: Session = Depends(get_db),
):
    """Practice questions for a level the caller has completed"""
    return quiz_service.generate_random_questions(db, data.level, data.count, token.user_id, generator)


@router.post("/sessions/{session_id}/heartbeat", response_model=QuizSessionResponse)
async def session_heartbeat(
    session_id: str,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    return session_service.heartbeat(db, session_id, token.user_id)


@router.get("/{quiz_id}", response_model=QuizResponse)
async def get_quiz(quiz_id: str, db: Session = Depends(get_db)):
    """Quiz without answers"""
    return quiz_service.get_quiz(db, quiz_id)


@router.put("/{quiz_id}", response_model=QuizResponse)
async def update_quiz(
    quiz_id: str,
    data: QuizUpdate,
    admin: TokenData = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Replace quiz content (admins only)"""
    return quiz_service.update_quiz(db, quiz_id, data)


@router.delete("/{quiz_id}", response_model=DeletedResponse)
async def delete_quiz(
    quiz_id: str,
    admin: TokenData = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return quiz_service.delete_quiz(db, quiz_id)


@router.post("/{quiz_id}/submit", response_model=SubmitQuizResponse)
async def submit_quiz(
    quiz_id: str,
    data: SubmitQuizRequest,
    token: TokenData = Depends(get_current_user_token),
    suggestions: ArticleSuggestionService = Depends(get_article_service),
    db: Session = Depends(get_db),
):
    """Grade answers, record the attempt and award points"""
    result = quiz_service.submit_quiz(db, quiz_id, data.answers, token.user_id, suggestions)
    await cache_manager.clear_pattern("leaderboard:*")
    return result


@router.post("/{quiz_id}/sessions", response_model=QuizSessionResponse, status_code=201)
async def start_session(
    quiz_id: str,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    """Start or resume the caller's timed session for a quiz"""
    return session_service.start_session(db, quiz_id, token.user_id)
