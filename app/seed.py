"""
Database seed: admin account, subject catalog and template quizzes

    python -m app.seed [--reset] [--quizzes-per-level N]
"""

import argparse
import logging
import random
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.database import get_db_session, init_db
from app.core.logging import setup_logging
from app.core.security import SecurityUtils
from app.data.question_templates import load_question_templates
from app.models.enums import QuestionType, QuizLevel, SubjectName, UserRole
from app.models.quiz import Quiz
from app.models.user import User
from app.schemas.quizzes import AnswerOptionCreate, QuestionCreate, QuizCreate
from app.services.quizzes import quiz_service
from app.services.subjects import subject_service
from app.services.users import user_service

logger = logging.getLogger("app.seed")

ADMIN_EMAIL = "admin@quiz.com"
ADMIN_PASSWORD = "admin123"
QUESTIONS_PER_QUIZ = 20
SEED_TIMER_MINUTES = 20


def ensure_admin(db: Session) -> User:
    admin = user_service.find_by_email(db, ADMIN_EMAIL)
    if admin is not None:
        logger.info("Admin user already exists")
        return admin

    admin = User(
        name="Admin User",
        email=ADMIN_EMAIL,
        password_hash=SecurityUtils.get_password_hash(ADMIN_PASSWORD),
        role=UserRole.ADMIN,
        total_points=0,
        selected_subjects=[],
    )
    db.add(admin)
    db.commit()
    logger.info("Created admin user")
    return admin


def seed_questions(
    subject: SubjectName, level: QuizLevel, count: int, rng: random.Random
) -> List[QuestionCreate]:
    """Shuffled level templates, repeated until `count` questions exist"""
    templates = list(load_question_templates()[level])
    rng.shuffle(templates)

    questions = []
    for i in range(count):
        template = templates[i % len(templates)]
        questions.append(
            QuestionCreate(
                text=f"{template.text.format(subject=subject.value)} (Quiz Question {i + 1})",
                type=QuestionType.MCQ,
                options=[
                    AnswerOptionCreate(text=option, is_correct=idx == template.correct_index)
                    for idx, option in enumerate(template.options)
                ],
            )
        )
    return questions


def seed(db: Session, reset: bool = False, quizzes_per_level: int = 5, rng: Optional[random.Random] = None) -> int:
    """Seed the database; returns the number of quizzes created"""
    rng = rng or random.Random()
    admin = ensure_admin(db)
    subject_service.list_subjects(db)

    if reset:
        # Attempts keep their history with a NULL quiz reference
        for quiz in db.scalars(select(Quiz)).all():
            db.delete(quiz)
        db.commit()
        logger.info("Cleared existing quizzes")

    created = 0
    for subject_name in SubjectName:
        subject = subject_service.find_by_name(db, subject_name)
        for level in QuizLevel:
            for number in range(1, quizzes_per_level + 1):
                title = f"{subject_name.value} {level.value.capitalize()} Quiz {number}"
                quiz_service.create_quiz(
                    db,
                    QuizCreate(
                        subject_id=subject.id,
                        level=level,
                        title=title,
                        timer_minutes=SEED_TIMER_MINUTES,
                        questions=seed_questions(subject_name, level, QUESTIONS_PER_QUIZ, rng),
                    ),
                    creator_id=admin.id,
                )
                created += 1

    logger.info(
        "Seed completed",
        extra={
            "quizzes": created,
            "questions": created * QUESTIONS_PER_QUIZ,
            "subjects": len(SubjectName),
            "levels": len(QuizLevel),
        },
    )
    return created


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the CodeZetta database")
    parser.add_argument("--reset", action="store_true", help="delete existing quizzes first")
    parser.add_argument("--quizzes-per-level", type=int, default=5)
    args = parser.parse_args(argv)

    setup_logging()
    init_db()
    with get_db_session() as db:
        seed(db, reset=args.reset, quizzes_per_level=args.quizzes_per_level)


if __name__ == "__main__":
    main()
