"""
Share endpoints
Public result pages for quiz attempts
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import NotFoundException
from app.core.security import TokenData, get_current_user_token
from app.schemas.share import CreateShareLinkRequest, LinkedInPostRequest, ShareLinkResponse
from app.services.share import SHARE_NOT_FOUND_PAGE, share_service

router = APIRouter()


@router.post("/share/quiz-attempt", response_model=ShareLinkResponse)
async def create_share_link(
    data: CreateShareLinkRequest,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    """Public link for one of the caller's attempts"""
    return share_service.create_share_link(db, data.attempt_id, token.user_id)


@router.get("/share/attempt/{slug}", response_class=HTMLResponse)
async def get_share_page(slug: str, db: Session = Depends(get_db)):
    """Result page with Open Graph tags for link previews"""
    try:
        shared = share_service.get_attempt_by_slug(db, slug)
    except NotFoundException:
        return HTMLResponse(SHARE_NOT_FOUND_PAGE, status_code=404)
    return HTMLResponse(share_service.render_share_page(shared, slug))


@router.post("/social/linkedin/post")
async def post_to_linkedin(
    data: LinkedInPostRequest,
    token: TokenData = Depends(get_current_user_token),
    db: Session = Depends(get_db),
):
    share_service.post_to_linkedin(db, data.attempt_id)
