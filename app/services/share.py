"""
Public share links for quiz attempts
"""

import base64
import html
import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.core.config import settings
from app.core.exceptions import BadRequestException, NotFoundException
from app.models.quiz import Quiz, QuizAttempt
from app.models.subject import Subject
from app.models.user import User
from app.schemas.share import ShareLinkResponse
from app.utils.numbers import score_percentage

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 10


def generate_public_slug() -> str:
    """Base64url of 8 random bytes, unpadded"""
    return base64.urlsafe_b64encode(secrets.token_bytes(8)).rstrip(b"=").decode("ascii")


@dataclass(frozen=True)
class SharedAttempt:
    attempt: QuizAttempt
    quiz: Optional[Quiz]
    subject: Optional[Subject]
    user: Optional[User]

    @property
    def percentage(self) -> int:
        return score_percentage(self.attempt.correct_answers_count, self.attempt.total_questions)

    @property
    def subject_name(self) -> Optional[str]:
        return self.subject.name.value if self.subject is not None else None


def share_title(shared: SharedAttempt) -> str:
    attempt = shared.attempt
    return (
        f"I scored {attempt.correct_answers_count}/{attempt.total_questions} "
        f"({shared.percentage}%) on {shared.subject_name or 'Quiz'}!"
    )


class ShareService:
    """Share link generation and the public result page"""

    def __init__(self, slug_factory: Callable[[], str] = generate_public_slug):
        self.slug_factory = slug_factory

    def _load(self, db: Session, *criteria) -> Optional[SharedAttempt]:
        attempt = db.scalar(
            select(QuizAttempt)
            .options(
                selectinload(QuizAttempt.quiz).selectinload(Quiz.subject),
                selectinload(QuizAttempt.user),
            )
            .where(*criteria)
        )
        if attempt is None:
            return None
        quiz = attempt.quiz
        return SharedAttempt(
            attempt=attempt,
            quiz=quiz,
            subject=quiz.subject if quiz is not None else None,
            user=attempt.user,
        )

    def _unique_slug(self, db: Session) -> str:
        for _ in range(MAX_SLUG_ATTEMPTS):
            slug = self.slug_factory()
            taken = db.scalar(select(QuizAttempt.id).where(QuizAttempt.public_slug == slug))
            if taken is None:
                return slug
        raise BadRequestException("Failed to generate unique share link")

    @staticmethod
    def share_url(slug: str) -> str:
        return f"{settings.FRONTEND_BASE_URL.rstrip('/')}/share/attempt/{slug}"

    def create_share_link(self, db: Session, attempt_id: str, user_id: str) -> ShareLinkResponse:
        """Create, or reuse, the public slug of the caller's attempt"""
        shared = self._load(db, QuizAttempt.id == attempt_id, QuizAttempt.user_id == user_id)
        if shared is None:
            raise NotFoundException("Quiz attempt")

        attempt = shared.attempt
        if not attempt.public_slug:
            attempt.public_slug = self._unique_slug(db)
            db.commit()
            logger.info("Share link created", extra={"attempt_id": attempt.id})

        return ShareLinkResponse(
            slug=attempt.public_slug,
            url=self.share_url(attempt.public_slug),
            og_title=share_title(shared),
            og_description=(
                f"Check out my quiz result on CodeZetta! {attempt.points_earned} points earned 🏆"
            ),
        )

    def get_attempt_by_slug(self, db: Session, slug: str) -> SharedAttempt:
        shared = self._load(db, QuizAttempt.public_slug == slug)
        if shared is None:
            raise NotFoundException("Share link")
        return shared

    def post_to_linkedin(self, db: Session, attempt_id: str) -> None:
        if db.get(QuizAttempt, attempt_id) is None:
            raise NotFoundException("Quiz attempt")
        raise BadRequestException(
            "LinkedIn posting is not yet implemented. Please use the share link feature instead."
        )

    def render_share_page(self, shared: SharedAttempt, slug: str) -> str:
        attempt = shared.attempt
        page_url = self.share_url(slug)
        base_url = settings.FRONTEND_BASE_URL.rstrip("/")
        user_name = shared.user.name if shared.user is not None else "Someone"

        title = html.escape(share_title(shared))
        description = html.escape(
            f"{user_name} scored {shared.percentage}% on {shared.subject_name or 'a quiz'}! "
            f"{attempt.points_earned} points earned 🏆"
        )
        image = html.escape(f"{base_url}/assets/quiz-share-preview.png")
        url = html.escape(page_url)
        level = (
            f"<p>Level: <strong>{html.escape(shared.quiz.level.value)}</strong></p>"
            if shared.quiz is not None
            else ""
        )

        return SHARE_PAGE_TEMPLATE.format(
            title=title,
            description=description,
            image=image,
            url=url,
            home=html.escape(base_url),
            percentage=shared.percentage,
            correct=attempt.correct_answers_count,
            total=attempt.total_questions,
            subject=html.escape(shared.subject_name or "Unknown"),
            level=level,
            points=attempt.points_earned,
        )


SHARE_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>

  <meta property="og:type" content="website">
  <meta property="og:url" content="{url}">
  <meta property="og:title" content="{title}">
  <meta property="og:description" content="{description}">
  <meta property="og:image" content="{image}">

  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:url" content="{url}">
  <meta name="twitter:title" content="{title}">
  <meta name="twitter:description" content="{description}">
  <meta name="twitter:image" content="{image}">

  <style>
    body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
           background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); min-height: 100vh;
           display: flex; align-items: center; justify-content: center; margin: 0; padding: 20px; }}
    .container {{ background: white; border-radius: 16px; padding: 40px; max-width: 600px;
                 width: 100%; box-shadow: 0 20px 60px rgba(0, 0, 0, 0.3); text-align: center; }}
    .score {{ font-size: 72px; font-weight: bold; color: #667eea; margin: 20px 0; }}
    .details {{ color: #666; font-size: 18px; }}
    .points {{ background: #f0f4ff; padding: 15px; border-radius: 8px; margin: 20px 0;
              font-size: 20px; color: #667eea; font-weight: 600; }}
    .button {{ display: inline-block; margin-top: 30px; padding: 15px 30px; background: #667eea;
              color: white; text-decoration: none; border-radius: 8px; font-weight: 600; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>🎯 Quiz Result</h1>
    <div class="score">{percentage}%</div>
    <div class="details">
      <p><strong>{correct}</strong> out of <strong>{total}</strong> correct</p>
      <p>Subject: <strong>{subject}</strong></p>
      {level}
    </div>
    <div class="points">🏆 {points} points earned!</div>
    <a href="{home}" class="button">Take a Quiz</a>
  </div>
</body>
</html>
"""

SHARE_NOT_FOUND_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Share Link Not Found</title>
  <style>
    body { font-family: sans-serif; display: flex; align-items: center;
           justify-content: center; min-height: 100vh; margin: 0; }
  </style>
</head>
<body>
  <h1>Share link not found</h1>
</body>
</html>
"""


share_service = ShareService()
