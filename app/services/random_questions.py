"""
Random practice question generator for levels a user has completed
"""

import random
from functools import lru_cache
from typing import List, Mapping, Optional, Sequence, Tuple

from app.data.question_templates import (
    RANDOM_QUESTION_SUBJECTS,
    QuestionTemplate,
    load_question_templates,
)
from app.models.enums import QuestionType, QuizLevel
from app.schemas.quizzes import RandomOption, RandomQuestion


class RandomQuestionGenerator:
    """Cycles a level's templates, picking a random subject for each question"""

    def __init__(
        self,
        templates: Mapping[QuizLevel, Tuple[QuestionTemplate, ...]],
        subjects: Sequence[str] = RANDOM_QUESTION_SUBJECTS,
        rng: Optional[random.Random] = None,
    ):
        self.templates = templates
        self.subjects = tuple(subjects)
        self.rng = rng or random.Random()

    def generate(self, level: QuizLevel, count: int) -> List[RandomQuestion]:
        bank = self.templates.get(level) or self.templates[QuizLevel.BEGINNER]
        questions = []
        for i in range(count):
            template = bank[i % len(bank)]
            subject = self.rng.choice(self.subjects)
            questions.append(
                RandomQuestion(
                    text=f"{template.text.format(subject=subject)} (Random Question {i + 1})",
                    type=QuestionType.MCQ,
                    options=[
                        RandomOption(text=option, is_correct=idx == template.correct_index)
                        for idx, option in enumerate(template.options)
                    ],
                )
            )
        return questions


@lru_cache
def get_random_question_generator() -> RandomQuestionGenerator:
    return RandomQuestionGenerator(load_question_templates())
