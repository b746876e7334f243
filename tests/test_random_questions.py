import random

from app.data.question_templates import RANDOM_QUESTION_SUBJECTS, load_question_templates
from app.models.enums import QuizLevel
from app.services.random_questions import RandomQuestionGenerator


def test_generates_numbered_questions_with_one_correct_option():
    generator = RandomQuestionGenerator(load_question_templates(), rng=random.Random(7))

    questions = generator.generate(QuizLevel.MIDDLE, 12)

    assert len(questions) == 12
    for i, question in enumerate(questions):
        assert question.text.endswith(f"(Random Question {i + 1})")
        assert len(question.options) == 4
        assert sum(option.is_correct for option in question.options) == 1
        assert any(subject in question.text for subject in RANDOM_QUESTION_SUBJECTS)


def test_templates_cycle_in_order():
    templates = load_question_templates()
    bank = templates[QuizLevel.BEGINNER]
    generator = RandomQuestionGenerator(templates, subjects=["CSS"], rng=random.Random(1))

    questions = generator.generate(QuizLevel.BEGINNER, len(bank) + 1)

    assert questions[0].text == f"{bank[0].text.format(subject='CSS')} (Random Question 1)"
    assert questions[len(bank)].text.startswith(bank[0].text.format(subject="CSS"))
