from app.services.grading import (
    ResolvedOption,
    ResolvedQuestion,
    ResolvedQuiz,
    grade_submission,
)
from app.utils.numbers import round_half_up, score_percentage


def _question(qid, correct="a", with_correct=True):
    return ResolvedQuestion(
        id=qid,
        text=f"Text {qid}",
        type="mcq",
        options=(
            ResolvedOption(id="a", text="A", is_correct=with_correct and correct == "a"),
            ResolvedOption(id="b", text="B", is_correct=with_correct and correct == "b"),
        ),
    )


def _quiz(*questions, subject="HTML"):
    return ResolvedQuiz(id="quiz", title="Quiz", level="beginner", subject_name=subject, questions=questions)


def _no_suggestions(question, subject, level):
    return [f"{subject}:{level}:{question.id}"]


def test_all_correct_awards_ten_points_each():
    quiz = _quiz(_question("q1"), _question("q2", correct="b"))

    result = grade_submission(quiz, [("q1", "a"), ("q2", "b")], _no_suggestions)

    assert result.score == 2
    assert result.correct_answers_count == 2
    assert result.total_questions == 2
    assert result.points_earned == 20
    assert result.wrong_answers == []


def test_unanswered_question_is_wrong_and_not_recorded():
    quiz = _quiz(_question("q1"), _question("q2"))

    result = grade_submission(quiz, [("q1", "a")], _no_suggestions)

    assert result.score == 1
    assert result.answers == [{"questionId": "q1", "selectedOptionId": "a", "isCorrect": True}]
    [wrong] = result.wrong_answers
    assert wrong.question_id == "q2"
    assert wrong.selected_option_id == ""
    assert wrong.correct_option_id == "a"
    assert wrong.explanation is None
    assert wrong.suggested_articles == ["HTML:beginner:q2"]


def test_last_answer_for_a_question_wins():
    quiz = _quiz(_question("q1"))

    result = grade_submission(quiz, [("q1", "b"), ("q1", "a")], _no_suggestions)

    assert result.score == 1
    assert result.answers == [{"questionId": "q1", "selectedOptionId": "a", "isCorrect": True}]


def test_answers_outside_the_quiz_are_ignored():
    quiz = _quiz(_question("q1"))

    result = grade_submission(quiz, [("other", "a"), ("q1", "b")], _no_suggestions)

    assert result.score == 0
    assert [answer["questionId"] for answer in result.answers] == ["q1"]


def test_question_without_correct_option_is_always_wrong():
    quiz = _quiz(_question("q1", with_correct=False))

    result = grade_submission(quiz, [("q1", "a")], _no_suggestions)

    assert result.score == 0
    assert result.wrong_answers[0].correct_option_id == ""


def test_missing_subject_is_reported_as_unknown():
    quiz = _quiz(_question("q1"), subject=None)

    result = grade_submission(quiz, [], _no_suggestions)

    assert result.wrong_answers[0].suggested_articles == ["Unknown:beginner:q1"]


def test_percentages_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert score_percentage(1, 8) == 13
    assert score_percentage(2, 3) == 67
    assert score_percentage(0, 0) == 0
