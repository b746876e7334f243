"""
User account, points and leaderboard service for CodeZetta
"""

import logging
from collections import OrderedDict
from datetime import date, timedelta
from typing import Iterable, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import BadRequestException, NotFoundException
from app.core.logging import LoggerFactory
from app.core.security import SecurityUtils
from app.models.quiz import Quiz, QuizAttempt
from app.models.user import User
from app.schemas.users import (
    DEFAULT_PREFERENCES,
    LeaderboardEntry,
    LeaderboardPosition,
    PerSubjectStats,
    SyncPointsResponse,
    UpdateMeRequest,
    UpdatePasswordRequest,
    UpdateProfileRequest,
    UserMe,
    UserPublic,
    UserStats,
)
from app.utils.numbers import round_half_up
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)
security_logger = LoggerFactory.get_security_logger()

MAX_LEADERBOARD_LIMIT = 100


def to_public(user: User) -> UserPublic:
    return UserPublic.model_validate(user)


def to_me(user: User) -> UserMe:
    preferences = dict(DEFAULT_PREFERENCES)
    preferences.update(user.preferences or {})
    return UserMe(**to_public(user).model_dump(), preferences=preferences)


def calculate_streak_days(activity_days: Iterable[date], today: date) -> int:
    """Consecutive days with activity counting back from today"""
    days = set(activity_days)
    streak = 0
    current = today
    while current in days:
        streak += 1
        current -= timedelta(days=1)
    return streak


class UserService:
    """User accounts"""

    @staticmethod
    def get_user(db: Session, user_id: str) -> User:
        user = db.get(User, user_id)
        if not user:
            raise NotFoundException("User")
        return user

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[User]:
        return db.scalar(select(User).where(User.email == email))

    @staticmethod
    def get_me(db: Session, user_id: str) -> UserMe:
        return to_me(UserService.get_user(db, user_id))

    @staticmethod
    def update_me(db: Session, user_id: str, data: UpdateMeRequest) -> UserMe:
        user = UserService.get_user(db, user_id)
        fields = data.model_fields_set

        if "name" in fields and data.name is not None:
            user.name = data.name
        if "avatar_url" in fields:
            user.avatar_url = data.avatar_url or None
        if "bio" in fields:
            user.bio = data.bio or None
        if "preferences" in fields and data.preferences is not None:
            merged = dict(user.preferences or {})
            merged.update(data.preferences.model_dump(by_alias=True, exclude_unset=True, mode="json"))
            user.preferences = merged

        db.commit()
        return to_me(user)

    @staticmethod
    def update_profile(db: Session, user_id: str, data: UpdateProfileRequest) -> UserPublic:
        user = UserService.get_user(db, user_id)

        if data.email and data.email != user.email:
            existing = UserService.find_by_email(db, data.email)
            if existing and existing.id != user_id:
                raise BadRequestException("Email already in use")

        if data.name:
            user.name = data.name
        if data.email:
            user.email = data.email

        db.commit()
        return to_public(user)

    @staticmethod
    def update_password(db: Session, user_id: str, data: UpdatePasswordRequest) -> dict:
        user = UserService.get_user(db, user_id)

        if not user.password_hash:
            raise BadRequestException("Password change not available for social-only accounts")

        if not SecurityUtils.verify_password(data.current_password, user.password_hash):
            security_logger.warning("Password change rejected", extra={"user_id": user_id})
            raise BadRequestException("Current password is incorrect")

        user.password_hash = SecurityUtils.get_password_hash(data.new_password)
        db.commit()
        security_logger.info("Password changed", extra={"user_id": user_id})
        return {"message": "Password updated successfully"}

    @staticmethod
    def update_selected_subjects(db: Session, user_id: str, subjects) -> UserPublic:
        user = UserService.get_user(db, user_id)
        user.selected_subjects = [getattr(subject, "value", subject) for subject in subjects]
        db.commit()
        return to_public(user)

    # Points

    @staticmethod
    def increment_points(db: Session, user_id: str, amount: int) -> None:
        """Atomic increment; committed by the caller's transaction"""
        db.execute(
            update(User)
            .where(User.id == user_id)
            .values(total_points=User.total_points + amount)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    def get_points(db: Session, user_id: str) -> int:
        user = UserService.get_user(db, user_id)
        db.refresh(user, ["total_points"])
        return user.total_points

    @staticmethod
    def sync_points_from_attempts(db: Session, user_id: str) -> SyncPointsResponse:
        """Recompute total points as the sum of points earned over the user's attempts"""
        user = UserService.get_user(db, user_id)
        db.refresh(user, ["total_points"])
        previous = user.total_points

        calculated, count = db.execute(
            select(func.coalesce(func.sum(QuizAttempt.points_earned), 0), func.count(QuizAttempt.id))
            .where(QuizAttempt.user_id == user_id)
        ).one()

        user.total_points = int(calculated)
        db.commit()

        if previous != user.total_points:
            logger.warning(
                "User points reconciled",
                extra={"user_id": user_id, "previous": previous, "calculated": int(calculated)},
            )

        return SyncPointsResponse(
            previous_points=previous, calculated_points=int(calculated), attempts_count=count
        )

    # Stats

    @staticmethod
    def get_user_stats(db: Session, user_id: str, today: Optional[date] = None) -> UserStats:
        attempts = db.scalars(
            select(QuizAttempt)
            .options(selectinload(QuizAttempt.quiz).selectinload(Quiz.subject))
            .where(QuizAttempt.user_id == user_id)
        ).all()

        streak = calculate_streak_days(
            [(attempt.finished_at or attempt.started_at).date() for attempt in attempts],
            today or utcnow().date(),
        )

        per_subject: "OrderedDict[str, dict]" = OrderedDict()
        for attempt in attempts:
            if attempt.quiz is None:
                continue
            subject = attempt.quiz.subject
            name = subject.name.value if subject is not None else "Unknown"
            stat = per_subject.setdefault(name, {"quizzes": 0, "percent": 0.0, "points": 0})
            stat["quizzes"] += 1
            if attempt.total_questions > 0:
                stat["percent"] += attempt.correct_answers_count * 100 / attempt.total_questions
            stat["points"] += attempt.points_earned or 0

        per_subject_stats = sorted(
            (
                PerSubjectStats(
                    subject=name,
                    quizzes_taken=stat["quizzes"],
                    average_score=round_half_up(stat["percent"] / stat["quizzes"]),
                    total_points=stat["points"],
                )
                for name, stat in per_subject.items()
            ),
            key=lambda s: s.total_points,
            reverse=True,
        )

        return UserStats(
            total_quizzes_taken=len(attempts),
            total_correct_answers=sum(a.correct_answers_count or 0 for a in attempts),
            total_questions_answered=sum(a.total_questions or 0 for a in attempts),
            streak_days=streak,
            per_subject_stats=per_subject_stats,
        )

    # Leaderboard

    @staticmethod
    def get_leaderboard(db: Session, limit: int = 20) -> List[LeaderboardEntry]:
        limit = max(1, min(limit, MAX_LEADERBOARD_LIMIT))
        users = db.scalars(
            select(User).order_by(User.total_points.desc(), User.created_at).limit(limit)
        ).all()
        return [
            LeaderboardEntry(
                rank=index + 1,
                user_id=user.id,
                name=user.name,
                avatar_url=user.avatar_url,
                total_points=user.total_points,
            )
            for index, user in enumerate(users)
        ]

    @staticmethod
    def get_leaderboard_position(db: Session, user_id: str) -> LeaderboardPosition:
        user = UserService.get_user(db, user_id)
        above = db.scalar(
            select(func.count(User.id)).where(User.total_points > user.total_points)
        ) or 0
        total = db.scalar(select(func.count(User.id))) or 0
        percentile = round_half_up((total - above) * 100 / total) if total else 100
        return LeaderboardPosition(
            position=above + 1,
            total_users=total,
            percentile=percentile,
            total_points=user.total_points,
        )


user_service = UserService()
