"""
Quiz, attempt and session schemas for CodeZetta
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.enums import ArticleProvider, QuestionType, QuizLevel, QuizSessionStatus
from app.schemas.common import CamelModel
from app.schemas.subjects import SubjectResponse


# Authoring

class LearningResource(CamelModel):
    """Pre-computed reading suggestion stored on a question"""
    id: Optional[str] = None
    title: str
    url: str
    provider: Optional[ArticleProvider] = None
    estimated_reading_time_minutes: Optional[int] = None
    subject: Optional[str] = None
    level: Optional[QuizLevel] = None


class AnswerOptionCreate(CamelModel):
    text: str = Field(..., min_length=1)
    is_correct: bool = False


class QuestionCreate(CamelModel):
    text: str = Field(..., min_length=1)
    type: QuestionType = QuestionType.MCQ
    topic_slug: Optional[str] = None
    learning_resources: Optional[List[LearningResource]] = None
    options: List[AnswerOptionCreate] = Field(..., min_length=2)


class QuizCreate(CamelModel):
    subject_id: str
    level: QuizLevel
    title: str = Field(..., min_length=1)
    timer_minutes: Optional[int] = Field(default=None, ge=1)
    questions: List[QuestionCreate] = Field(..., min_length=1)


class QuizUpdate(QuizCreate):
    """Full replacement of a quiz and its question set"""


# Public (answers stripped)

class PublicOption(CamelModel):
    id: str
    text: str


class PublicQuestion(CamelModel):
    id: str
    text: str
    type: QuestionType
    options: List[PublicOption]


class QuizResponse(CamelModel):
    id: str
    title: str
    level: QuizLevel
    timer_minutes: int
    subject: Optional[SubjectResponse] = None
    created_by_id: Optional[str] = None
    questions: List[PublicQuestion]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    has_taken: Optional[bool] = None


# Submission and grading

class SubmittedAnswer(CamelModel):
    question_id: str = Field(..., min_length=1)
    selected_option_id: str = Field(..., min_length=1)


class SubmitQuizRequest(CamelModel):
    answers: List[SubmittedAnswer] = Field(default_factory=list)


class ArticleRecommendation(CamelModel):
    id: str
    title: str
    url: str
    provider: ArticleProvider
    estimated_reading_time_minutes: Optional[int] = None
    subject: Optional[str] = None
    level: Optional[str] = None


class WrongAnswerFeedback(CamelModel):
    question_id: str
    question_text: str
    selected_option_id: str
    correct_option_id: str
    explanation: Optional[str] = None
    suggested_articles: List[ArticleRecommendation]


class SubmitQuizResponse(CamelModel):
    attempt_id: str
    score: int
    total_questions: int
    correct_answers_count: int
    points_earned: int
    updated_user_total_points: int
    wrong_answers: List[WrongAnswerFeedback]


# Level gate and random practice questions

class LevelCompletion(CamelModel):
    level: QuizLevel
    total_quizzes: int
    completed_quizzes: int
    is_completed: bool
    can_generate_random: bool


class GenerateRandomQuestionsRequest(CamelModel):
    level: QuizLevel
    count: int = Field(default=20, ge=1, le=100)


class RandomOption(CamelModel):
    text: str
    is_correct: bool


class RandomQuestion(CamelModel):
    text: str
    type: QuestionType
    options: List[RandomOption]


class GenerateRandomQuestionsResponse(CamelModel):
    questions: List[RandomQuestion]
    level: QuizLevel
    count: int


# Attempt history

class AttemptQuizSummary(CamelModel):
    id: Optional[str] = None
    title: str
    subject: Optional[SubjectResponse] = None
    level: Optional[QuizLevel] = None


class AttemptSummary(CamelModel):
    id: str
    quiz: AttemptQuizSummary
    score: int
    total_questions: int
    correct_answers_count: int
    points_earned: int
    started_at: datetime
    finished_at: datetime


class DetailedOption(CamelModel):
    id: str
    text: str
    is_correct: bool


class UserAnswer(CamelModel):
    selected_option_id: str
    is_correct: bool


class DetailedQuestion(CamelModel):
    id: str
    text: str
    type: QuestionType
    options: List[DetailedOption]
    user_answer: Optional[UserAnswer] = None


class AttemptDetail(AttemptSummary):
    questions: List[DetailedQuestion]


# Sessions

class QuizSessionResponse(CamelModel):
    id: str
    quiz_id: str
    status: QuizSessionStatus
    started_at: datetime
    last_seen_at: datetime
    expires_at: datetime
    attempt_id: Optional[str] = None
