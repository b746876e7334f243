"""
CodeZetta Models Package
"""

from app.models.enums import (
    UserRole, SocialProvider, SubjectName, QuizLevel,
    QuestionType, QuizSessionStatus, ArticleProvider
)
from app.models.user import User, SocialAccount
from app.models.subject import Subject
from app.models.quiz import Quiz, Question, AnswerOption, QuizAttempt, QuizSession

__all__ = [
    "UserRole", "SocialProvider", "SubjectName", "QuizLevel",
    "QuestionType", "QuizSessionStatus", "ArticleProvider",
    "User", "SocialAccount",
    "Subject",
    "Quiz", "Question", "AnswerOption", "QuizAttempt", "QuizSession",
]
