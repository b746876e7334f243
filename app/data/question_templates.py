"""
Template banks for randomly generated practice questions
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from app.models.enums import QuizLevel


@dataclass(frozen=True)
class QuestionTemplate:
    text: str  # contains a {subject} placeholder
    options: Tuple[str, str, str, str]
    correct_index: int


# Subjects a random question may be about
RANDOM_QUESTION_SUBJECTS: Tuple[str, ...] = (
    "HTML", "CSS", "JavaScript", "React", "Angular", "NodeJS",
)


QUESTION_TEMPLATES = {
    QuizLevel.BEGINNER: (
        QuestionTemplate(
            "What is a basic concept in {subject}?",
            ("Option A", "Option B", "Option C", "Option D"),
            0,
        ),
        QuestionTemplate(
            "Which is the correct syntax for {subject} level?",
            ("Syntax A", "Syntax B", "Syntax C", "Syntax D"),
            1,
        ),
        QuestionTemplate(
            "What does this {subject} code do?",
            ("Action A", "Action B", "Action C", "Action D"),
            2,
        ),
    ),
    QuizLevel.MIDDLE: (
        QuestionTemplate(
            "What is an intermediate concept in {subject}?",
            ("Concept A", "Concept B", "Concept C", "Concept D"),
            1,
        ),
        QuestionTemplate(
            "How do you implement {subject} patterns?",
            ("Pattern A", "Pattern B", "Pattern C", "Pattern D"),
            2,
        ),
    ),
    QuizLevel.INTERMEDIATE: (
        QuestionTemplate(
            "What is an advanced concept in {subject}?",
            ("Advanced A", "Advanced B", "Advanced C", "Advanced D"),
            2,
        ),
        QuestionTemplate(
            "How do you optimize {subject} code?",
            ("Optimization A", "Optimization B", "Optimization C", "Optimization D"),
            3,
        ),
    ),
}


def load_question_templates() -> Mapping[QuizLevel, Tuple[QuestionTemplate, ...]]:
    return MappingProxyType(dict(QUESTION_TEMPLATES))
