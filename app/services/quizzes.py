"""
Quiz catalog, submission and attempt history service for CodeZetta
"""

import logging
from typing import List, Optional, Set

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import NotFoundException
from app.models.enums import QuizLevel
from app.models.quiz import AnswerOption, Question, Quiz, QuizAttempt
from app.models.user import User
from app.schemas.quizzes import (
    AttemptDetail,
    AttemptQuizSummary,
    AttemptSummary,
    DetailedOption,
    DetailedQuestion,
    GenerateRandomQuestionsResponse,
    LevelCompletion,
    PublicOption,
    PublicQuestion,
    QuestionCreate,
    QuizCreate,
    QuizResponse,
    SubmitQuizResponse,
    SubmittedAnswer,
    UserAnswer,
    WrongAnswerFeedback,
)
from app.schemas.subjects import SubjectResponse
from app.services.articles import ArticleSuggestionService
from app.services.grading import grade_submission, resolve_quiz
from app.services.random_questions import RandomQuestionGenerator
from app.services.sessions import session_service
from app.services.subjects import subject_service
from app.services.users import user_service
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)

UNKNOWN_QUIZ_TITLE = "Unknown Quiz"


def _quiz_query():
    return select(Quiz).options(
        selectinload(Quiz.subject),
        selectinload(Quiz.questions).selectinload(Question.options),
    )


def _subject_response(subject) -> Optional[SubjectResponse]:
    return SubjectResponse.model_validate(subject) if subject is not None else None


def _public_quiz(quiz: Quiz, has_taken: Optional[bool] = None) -> QuizResponse:
    """Quiz with correct-answer flags removed"""
    return QuizResponse(
        id=quiz.id,
        title=quiz.title,
        level=quiz.level,
        timer_minutes=quiz.timer_minutes,
        subject=_subject_response(quiz.subject),
        created_by_id=quiz.created_by_id,
        questions=[
            PublicQuestion(
                id=question.id,
                text=question.text,
                type=question.type,
                options=[PublicOption(id=option.id, text=option.text) for option in question.options],
            )
            for question in quiz.questions
        ],
        created_at=quiz.created_at,
        updated_at=quiz.updated_at,
        has_taken=has_taken,
    )


def _build_questions(questions: List[QuestionCreate]) -> List[Question]:
    built = []
    for position, data in enumerate(questions):
        resources = None
        if data.learning_resources:
            resources = [
                resource.model_dump(by_alias=True, exclude_none=True, mode="json")
                for resource in data.learning_resources
            ]
        built.append(
            Question(
                position=position,
                text=data.text,
                type=data.type,
                topic_slug=data.topic_slug,
                learning_resources=resources,
                options=[
                    AnswerOption(position=idx, text=option.text, is_correct=option.is_correct)
                    for idx, option in enumerate(data.options)
                ],
            )
        )
    return built


def _attempt_quiz_summary(quiz: Optional[Quiz]) -> AttemptQuizSummary:
    if quiz is None:
        return AttemptQuizSummary(title=UNKNOWN_QUIZ_TITLE)
    return AttemptQuizSummary(
        id=quiz.id,
        title=quiz.title,
        subject=_subject_response(quiz.subject),
        level=quiz.level,
    )


class QuizService:
    """Quiz catalog and grading"""

    # Catalog

    @staticmethod
    def load_quiz(db: Session, quiz_id: str) -> Quiz:
        """Quiz with subject, questions and options eagerly loaded"""
        quiz = db.scalar(_quiz_query().where(Quiz.id == quiz_id))
        if not quiz:
            raise NotFoundException("Quiz")
        return quiz

    @staticmethod
    def attempted_quiz_ids(db: Session, user_id: str) -> Set[str]:
        rows = db.scalars(
            select(QuizAttempt.quiz_id).distinct().where(
                QuizAttempt.user_id == user_id, QuizAttempt.quiz_id.is_not(None)
            )
        )
        return set(rows)

    @staticmethod
    def list_quizzes(
        db: Session,
        subject_id: Optional[str] = None,
        level: Optional[QuizLevel] = None,
        user_id: Optional[str] = None,
    ) -> List[QuizResponse]:
        """Newest first, answers stripped; hasTaken is set when a caller is known"""
        query = _quiz_query()
        if subject_id:
            query = query.where(Quiz.subject_id == subject_id)
        if level:
            query = query.where(Quiz.level == level)
        quizzes = db.scalars(query.order_by(Quiz.created_at.desc())).all()

        if user_id is None:
            return [_public_quiz(quiz) for quiz in quizzes]

        taken = QuizService.attempted_quiz_ids(db, user_id)
        return [_public_quiz(quiz, has_taken=quiz.id in taken) for quiz in quizzes]

    @staticmethod
    def get_quiz(db: Session, quiz_id: str) -> QuizResponse:
        return _public_quiz(QuizService.load_quiz(db, quiz_id))

    @staticmethod
    def create_quiz(db: Session, data: QuizCreate, creator_id: Optional[str]) -> QuizResponse:
        subject = subject_service.get_subject(db, data.subject_id)

        quiz = Quiz(
            subject_id=subject.id,
            level=data.level,
            title=data.title,
            created_by_id=creator_id,
            timer_minutes=data.timer_minutes or 20,
            questions=_build_questions(data.questions),
        )
        db.add(quiz)
        db.commit()

        logger.info(
            "Quiz created",
            extra={"quiz_id": quiz.id, "questions": len(data.questions), "created_by": creator_id},
        )
        return QuizService.get_quiz(db, quiz.id)

    @staticmethod
    def update_quiz(db: Session, quiz_id: str, data: QuizCreate) -> QuizResponse:
        """Replace the quiz fields and its whole question set in one transaction"""
        quiz = QuizService.load_quiz(db, quiz_id)
        subject = subject_service.get_subject(db, data.subject_id)

        quiz.title = data.title
        quiz.level = data.level
        quiz.subject_id = subject.id
        if data.timer_minutes:
            quiz.timer_minutes = data.timer_minutes
        # delete-orphan removes the previous questions and their options
        quiz.questions = _build_questions(data.questions)
        db.commit()

        logger.info("Quiz updated", extra={"quiz_id": quiz.id, "questions": len(data.questions)})
        db.expire(quiz)
        return QuizService.get_quiz(db, quiz.id)

    @staticmethod
    def delete_quiz(db: Session, quiz_id: str) -> dict:
        """Delete a quiz with its questions, options and sessions; attempts are kept"""
        quiz = QuizService.load_quiz(db, quiz_id)
        db.delete(quiz)
        db.commit()
        logger.info("Quiz deleted", extra={"quiz_id": quiz_id})
        return {"deleted": True}

    # Submission

    @staticmethod
    def submit_quiz(
        db: Session,
        quiz_id: str,
        answers: List[SubmittedAnswer],
        user_id: str,
        suggestions: ArticleSuggestionService,
    ) -> SubmitQuizResponse:
        """
        Grade a submission, persist the attempt and award points.

        The attempt insert and the point increment commit together. Every call
        creates a new attempt.
        """
        quiz = QuizService.load_quiz(db, quiz_id)
        if not quiz.questions:
            raise NotFoundException(message="Quiz has no questions")

        resolved = resolve_quiz(quiz)
        result = grade_submission(
            resolved,
            ((answer.question_id, answer.selected_option_id) for answer in answers),
            suggestions.suggest,
        )

        now = utcnow()
        session = session_service.find_active(db, user_id, quiz.id)

        attempt = QuizAttempt(
            user_id=user_id,
            quiz_id=quiz.id,
            score=result.score,
            total_questions=result.total_questions,
            correct_answers_count=result.correct_answers_count,
            points_earned=result.points_earned,
            answers=result.answers,
            started_at=session.started_at if session else now,
            finished_at=now,
        )
        db.add(attempt)
        db.flush()

        user_service.increment_points(db, user_id, result.points_earned)
        if session:
            session_service.mark_submitted(db, session, attempt.id)
        db.commit()

        total_points = db.scalar(select(User.total_points).where(User.id == user_id)) or 0

        logger.info(
            "Quiz submitted",
            extra={
                "quiz_id": quiz.id,
                "attempt_id": attempt.id,
                "user_id": user_id,
                "score": result.score,
                "total_questions": result.total_questions,
                "points_earned": result.points_earned,
            },
        )

        return SubmitQuizResponse(
            attempt_id=attempt.id,
            score=result.score,
            total_questions=result.total_questions,
            correct_answers_count=result.correct_answers_count,
            points_earned=result.points_earned,
            updated_user_total_points=total_points,
            wrong_answers=[WrongAnswerFeedback.model_validate(wrong) for wrong in result.wrong_answers],
        )

    # Level gate

    @staticmethod
    def check_level_completion(db: Session, level: QuizLevel, user_id: str) -> LevelCompletion:
        total = db.scalar(select(func.count(Quiz.id)).where(Quiz.level == level)) or 0
        if total == 0:
            return LevelCompletion(
                level=level,
                total_quizzes=0,
                completed_quizzes=0,
                is_completed=False,
                can_generate_random=False,
            )

        completed = db.scalar(
            select(func.count(distinct(QuizAttempt.quiz_id)))
            .join(Quiz, Quiz.id == QuizAttempt.quiz_id)
            .where(QuizAttempt.user_id == user_id, Quiz.level == level)
        ) or 0

        is_completed = completed >= total
        return LevelCompletion(
            level=level,
            total_quizzes=total,
            completed_quizzes=completed,
            is_completed=is_completed,
            can_generate_random=is_completed,
        )

    @staticmethod
    def generate_random_questions(
        db: Session,
        level: QuizLevel,
        count: int,
        user_id: str,
        generator: RandomQuestionGenerator,
    ) -> GenerateRandomQuestionsResponse:
        status = QuizService.check_level_completion(db, level, user_id)
        if not status.is_completed:
            raise NotFoundException(
                message=(
                    f"You must complete all {status.total_quizzes} quizzes for {level.value} level "
                    f"before generating random questions. You have completed {status.completed_quizzes}."
                ),
                details={
                    "totalQuizzes": status.total_quizzes,
                    "completedQuizzes": status.completed_quizzes,
                    "remaining": max(status.total_quizzes - status.completed_quizzes, 0),
                },
            )

        return GenerateRandomQuestionsResponse(
            questions=generator.generate(level, count),
            level=level,
            count=count,
        )

    # Attempt history

    @staticmethod
    def get_user_attempts(db: Session, user_id: str) -> List[AttemptSummary]:
        attempts = db.scalars(
            select(QuizAttempt)
            .options(selectinload(QuizAttempt.quiz).selectinload(Quiz.subject))
            .where(QuizAttempt.user_id == user_id)
            .order_by(QuizAttempt.finished_at.desc())
        ).all()

        return [
            AttemptSummary(
                id=attempt.id,
                quiz=_attempt_quiz_summary(attempt.quiz),
                score=attempt.score,
                total_questions=attempt.total_questions,
                correct_answers_count=attempt.correct_answers_count,
                points_earned=attempt.points_earned,
                started_at=attempt.started_at,
                finished_at=attempt.finished_at,
            )
            for attempt in attempts
        ]

    @staticmethod
    def get_attempt_detail(db: Session, attempt_id: str, user_id: str) -> AttemptDetail:
        """Owner-only view of an attempt with correct answers and the recorded choices"""
        attempt = db.scalar(
            select(QuizAttempt).where(QuizAttempt.id == attempt_id, QuizAttempt.user_id == user_id)
        )
        if not attempt:
            raise NotFoundException("Quiz attempt")

        quiz = None
        questions: List[DetailedQuestion] = []
        if attempt.quiz_id:
            quiz = db.scalar(_quiz_query().where(Quiz.id == attempt.quiz_id))

        if quiz is not None:
            recorded = {answer["questionId"]: answer for answer in attempt.answers or []}
            for question in quiz.questions:
                answer = recorded.get(question.id)
                questions.append(
                    DetailedQuestion(
                        id=question.id,
                        text=question.text,
                        type=question.type,
                        options=[
                            DetailedOption(id=option.id, text=option.text, is_correct=option.is_correct)
                            for option in question.options
                        ],
                        user_answer=UserAnswer(
                            selected_option_id=answer["selectedOptionId"],
                            is_correct=bool(answer["isCorrect"]),
                        )
                        if answer
                        else None,
                    )
                )

        return AttemptDetail(
            id=attempt.id,
            quiz=_attempt_quiz_summary(quiz),
            score=attempt.score,
            total_questions=attempt.total_questions,
            correct_answers_count=attempt.correct_answers_count,
            points_earned=attempt.points_earned,
            started_at=attempt.started_at,
            finished_at=attempt.finished_at,
            questions=questions,
        )


quiz_service = QuizService()
