"""
Quiz session tracking and the periodic abandoned-session sweep
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

import sentry_sdk
from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db_session
from app.core.exceptions import BadRequestException, NotFoundException
from app.models.enums import QuizSessionStatus
from app.models.quiz import Quiz, QuizSession
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


class SessionService:
    """One active quiz session per user"""

    @staticmethod
    def find_active(db: Session, user_id: str, quiz_id: Optional[str] = None) -> Optional[QuizSession]:
        query = select(QuizSession).where(
            QuizSession.user_id == user_id, QuizSession.status == QuizSessionStatus.ACTIVE
        )
        if quiz_id is not None:
            query = query.where(QuizSession.quiz_id == quiz_id)
        return db.scalar(query)

    @staticmethod
    def start_session(db: Session, quiz_id: str, user_id: str) -> QuizSession:
        """Resume the active session for this quiz, or abandon any other and open a new one"""
        quiz = db.get(Quiz, quiz_id)
        if not quiz:
            raise NotFoundException("Quiz")

        now = utcnow()
        current = SessionService.find_active(db, user_id)
        if current is not None:
            if current.quiz_id == quiz_id and current.expires_at > now:
                current.last_seen_at = now
                db.commit()
                return current
            current.status = QuizSessionStatus.ABANDONED
            db.flush()

        session = QuizSession(
            user_id=user_id,
            quiz_id=quiz_id,
            status=QuizSessionStatus.ACTIVE,
            started_at=now,
            last_seen_at=now,
            expires_at=now + timedelta(minutes=quiz.timer_minutes),
        )
        db.add(session)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise BadRequestException("Another quiz session is already active")

        logger.info(
            "Quiz session started",
            extra={"session_id": session.id, "quiz_id": quiz_id, "user_id": user_id},
        )
        return session

    @staticmethod
    def heartbeat(db: Session, session_id: str, user_id: str) -> QuizSession:
        session = db.scalar(
            select(QuizSession).where(QuizSession.id == session_id, QuizSession.user_id == user_id)
        )
        if not session:
            raise NotFoundException("Quiz session")
        if session.status != QuizSessionStatus.ACTIVE:
            raise BadRequestException(f"Quiz session is {session.status.value}")

        now = utcnow()
        if session.expires_at <= now:
            session.status = QuizSessionStatus.ABANDONED
            db.commit()
            raise BadRequestException("Quiz session has expired")

        session.last_seen_at = now
        db.commit()
        return session

    @staticmethod
    def mark_submitted(db: Session, session: QuizSession, attempt_id: str) -> None:
        """Close a session in the caller's transaction"""
        session.status = QuizSessionStatus.SUBMITTED
        session.attempt_id = attempt_id
        session.last_seen_at = utcnow()

    @staticmethod
    def abandon_stale_sessions(
        db: Session, now: Optional[datetime] = None, inactive_timeout: Optional[timedelta] = None
    ) -> int:
        """Mark active sessions past expiry or idle past the timeout as abandoned"""
        now = now or utcnow()
        if inactive_timeout is None:
            inactive_timeout = timedelta(seconds=settings.SESSION_INACTIVE_TIMEOUT_SECONDS)

        result = db.execute(
            update(QuizSession)
            .where(
                QuizSession.status == QuizSessionStatus.ACTIVE,
                or_(
                    QuizSession.expires_at <= now,
                    QuizSession.last_seen_at <= now - inactive_timeout,
                ),
            )
            .values(status=QuizSessionStatus.ABANDONED)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0


session_service = SessionService()


def sweep_stale_sessions() -> int:
    """One sweep in its own database session"""
    with get_db_session() as db:
        count = session_service.abandon_stale_sessions(db)
    if count:
        logger.info("Abandoned stale quiz sessions", extra={"count": count})
    return count


class SessionSweeper:
    """Runs the stale-session sweep on a fixed interval inside the event loop"""

    def __init__(self, interval_seconds: Optional[int] = None):
        self.interval_seconds = interval_seconds or settings.SESSION_CLEANUP_INTERVAL_SECONDS
        self._task: Optional[asyncio.Task] = None

    async def _run(self):
        while True:
            try:
                await asyncio.to_thread(sweep_stale_sessions)
            except SQLAlchemyError as e:
                sentry_sdk.capture_exception(e)
                logger.error(f"Quiz session sweep failed: {e}")
            await asyncio.sleep(self.interval_seconds)

    def start(self):
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info("Quiz session sweeper started", extra={"interval": self.interval_seconds})

    async def stop(self):
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Quiz session sweeper stopped")
