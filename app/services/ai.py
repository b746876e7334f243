"""AI quiz generation service"""

import logging
from typing import List

from sqlalchemy.orm import Session

from app.models.enums import QuestionType, QuizLevel, SubjectName
from app.schemas.quizzes import AnswerOptionCreate, QuestionCreate, QuizCreate, QuizResponse
from app.services.quizzes import quiz_service
from app.services.subjects import subject_service

logger = logging.getLogger(__name__)

OPTION_LABELS = ("A", "B", "C", "D")


class AIService:
    @staticmethod
    def generate_questions(subject: SubjectName, level: QuizLevel, count: int) -> List[QuestionCreate]:
        """Placeholder multiple-choice questions; the correct option rotates with the question number"""
        return [
            QuestionCreate(
                text=f"({level.value}) {subject.value} question #{i}",
                type=QuestionType.MCQ,
                options=[
                    AnswerOptionCreate(text=f"Option {label}", is_correct=i % 4 == idx)
                    for idx, label in enumerate(OPTION_LABELS)
                ],
            )
            for i in range(1, count + 1)
        ]

    @staticmethod
    def generate_quiz(
        db: Session, subject: SubjectName, level: QuizLevel, count: int, user_id: str
    ) -> QuizResponse:
        """Generate a quiz for a subject, creating the subject when missing"""
        subject_row = subject_service.get_or_create(
            db, subject, description=f"{subject.value} subject auto-created"
        )

        logger.info(
            "Generating AI quiz",
            extra={"subject": subject.value, "level": level.value, "count": count, "user_id": user_id},
        )
        return quiz_service.create_quiz(
            db,
            QuizCreate(
                subject_id=subject_row.id,
                level=level,
                title=f"AI {subject.value} {level.value} quiz",
                questions=AIService.generate_questions(subject, level, count),
            ),
            creator_id=user_id,
        )


ai_service = AIService()
