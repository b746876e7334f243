import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SESSION_CLEANUP_ENABLED", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["REDIS_URL"] = ""

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, SessionLocal, engine
from app.core.security import SecurityUtils
from app.main import app
from app.models.enums import QuizLevel, SubjectName, UserRole
from app.models.user import User
from app.schemas.quizzes import AnswerOptionCreate, QuestionCreate, QuizCreate
from app.services.quizzes import quiz_service
from app.services.subjects import subject_service


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make_user(
        name="Student",
        email="student@example.com",
        password="secret123",
        role=UserRole.STUDENT,
        total_points=0,
    ):
        user = User(
            name=name,
            email=email,
            password_hash=SecurityUtils.get_password_hash(password) if password else None,
            role=role,
            total_points=total_points,
            selected_subjects=[],
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


def auth_headers(user):
    return {"Authorization": f"Bearer {SecurityUtils.create_user_token(user)}"}


@pytest.fixture
def student(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin User", email="admin@quiz.com", password="admin123", role=UserRole.ADMIN)


@pytest.fixture
def make_quiz(db, admin):
    def _make_quiz(
        subject=SubjectName.HTML,
        level=QuizLevel.BEGINNER,
        title="HTML Basics",
        questions=3,
        topic_slug=None,
    ):
        subject_row = subject_service.get_or_create(db, subject)
        db.commit()
        return quiz_service.create_quiz(
            db,
            QuizCreate(
                subject_id=subject_row.id,
                level=level,
                title=title,
                questions=[
                    QuestionCreate(
                        text=f"Question {i + 1}",
                        topic_slug=topic_slug,
                        options=[
                            AnswerOptionCreate(text="Right", is_correct=True),
                            AnswerOptionCreate(text="Wrong", is_correct=False),
                        ],
                    )
                    for i in range(questions)
                ],
            ),
            creator_id=admin.id,
        )

    return _make_quiz


def correct_answers(quiz, count=None):
    """Submission body answering the first `count` questions correctly"""
    questions = quiz.questions if count is None else quiz.questions[:count]
    return [
        {"questionId": question.id, "selectedOptionId": question.options[0].id}
        for question in questions
    ]


def wrong_answers(quiz):
    return [
        {"questionId": question.id, "selectedOptionId": question.options[1].id}
        for question in quiz.questions
    ]
