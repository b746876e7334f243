"""
Quiz grading

Quizzes are resolved once into immutable values at the data-access boundary,
then graded by pure functions that never touch ORM state.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

POINTS_PER_CORRECT_ANSWER = 10


@dataclass(frozen=True)
class ResolvedOption:
    id: str
    text: str
    is_correct: bool


@dataclass(frozen=True)
class ResolvedQuestion:
    id: str
    text: str
    type: str
    options: Tuple[ResolvedOption, ...]
    topic_slug: Optional[str] = None
    learning_resources: Tuple[dict, ...] = ()

    @property
    def correct_option_id(self) -> Optional[str]:
        """Id of the first option flagged correct, if any"""
        for option in self.options:
            if option.is_correct:
                return option.id
        return None


@dataclass(frozen=True)
class ResolvedQuiz:
    id: str
    title: str
    level: str
    subject_name: Optional[str]
    questions: Tuple[ResolvedQuestion, ...]


@dataclass(frozen=True)
class WrongAnswer:
    question_id: str
    question_text: str
    selected_option_id: str
    correct_option_id: str
    suggested_articles: List
    explanation: Optional[str] = None


@dataclass(frozen=True)
class GradeResult:
    correct_answers_count: int
    total_questions: int
    answers: List[dict] = field(default_factory=list)
    wrong_answers: List[WrongAnswer] = field(default_factory=list)

    @property
    def score(self) -> int:
        return self.correct_answers_count

    @property
    def points_earned(self) -> int:
        return self.correct_answers_count * POINTS_PER_CORRECT_ANSWER


# (question, subject name, level) -> list of recommendations
SuggestionLookup = Callable[[ResolvedQuestion, str, str], List]


def _enum_value(value) -> str:
    return getattr(value, "value", value)


def resolve_quiz(quiz) -> ResolvedQuiz:
    """Snapshot an ORM quiz, its questions and their options in stored order"""
    questions = tuple(
        ResolvedQuestion(
            id=question.id,
            text=question.text,
            type=_enum_value(question.type),
            topic_slug=question.topic_slug,
            learning_resources=tuple(question.learning_resources or ()),
            options=tuple(
                ResolvedOption(id=option.id, text=option.text, is_correct=bool(option.is_correct))
                for option in question.options
            ),
        )
        for question in quiz.questions
    )
    return ResolvedQuiz(
        id=quiz.id,
        title=quiz.title,
        level=_enum_value(quiz.level),
        subject_name=_enum_value(quiz.subject.name) if quiz.subject is not None else None,
        questions=questions,
    )


def index_answers(answers: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Map question id to selected option id; a repeated question keeps its last answer"""
    indexed: Dict[str, str] = {}
    for question_id, selected_option_id in answers:
        indexed[str(question_id)] = str(selected_option_id)
    return indexed


def grade_submission(
    quiz: ResolvedQuiz,
    answers: Iterable[Tuple[str, str]],
    suggest: SuggestionLookup,
) -> GradeResult:
    """
    Grade submitted (question id, option id) pairs against a resolved quiz.

    Unanswered questions, and questions without a correct option, count as
    wrong. Answers for questions outside the quiz are ignored. Only submitted
    answers are recorded.
    """
    submitted = index_answers(answers)
    subject_name = quiz.subject_name or "Unknown"

    correct_count = 0
    recorded: List[dict] = []
    wrong: List[WrongAnswer] = []

    for question in quiz.questions:
        selected = submitted.get(question.id)
        correct_id = question.correct_option_id
        is_correct = selected is not None and correct_id is not None and selected == correct_id

        if selected is not None:
            recorded.append(
                {"questionId": question.id, "selectedOptionId": selected, "isCorrect": is_correct}
            )

        if is_correct:
            correct_count += 1
            continue

        wrong.append(
            WrongAnswer(
                question_id=question.id,
                question_text=question.text,
                selected_option_id=selected or "",
                correct_option_id=correct_id or "",
                suggested_articles=list(suggest(question, subject_name, quiz.level)),
            )
        )

    return GradeResult(
        correct_answers_count=correct_count,
        total_questions=len(quiz.questions),
        answers=recorded,
        wrong_answers=wrong,
    )
