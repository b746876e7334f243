from conftest import auth_headers, correct_answers, wrong_answers

from app.models.enums import QuizLevel, SubjectName
from app.models.quiz import Question, QuizAttempt
from app.schemas.quizzes import AnswerOptionCreate, QuestionCreate, QuizCreate
from app.services.quizzes import quiz_service
from app.services.subjects import subject_service


def test_list_subjects_seeds_catalog(client):
    response = client.get("/api/v1/subjects")

    assert response.status_code == 200
    names = {subject["name"] for subject in response.json()}
    assert names == {name.value for name in SubjectName}


def test_create_subject_requires_admin(client, student, admin):
    body = {"name": "React", "description": "Components"}

    assert client.post("/api/v1/subjects", json=body, headers=auth_headers(student)).status_code == 403
    created = client.post("/api/v1/subjects", json=body, headers=auth_headers(admin))
    assert created.status_code == 201
    duplicate = client.post("/api/v1/subjects", json=body, headers=auth_headers(admin))
    assert duplicate.status_code == 400


def test_quiz_view_hides_correct_answers(client, make_quiz):
    quiz = make_quiz()

    response = client.get(f"/api/v1/quizzes/{quiz.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["timerMinutes"] == 20
    assert set(body["questions"][0]["options"][0]) == {"id", "text"}


def test_create_quiz_with_unknown_subject(client, admin):
    body = {
        "subjectId": "missing",
        "level": "beginner",
        "title": "Nope",
        "questions": [{"text": "Q", "options": [{"text": "A", "isCorrect": True}, {"text": "B"}]}],
    }

    response = client.post("/api/v1/quizzes", json=body, headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Subject not found"


def test_create_quiz_rejects_single_option_question(client, admin, db):
    subject = subject_service.get_or_create(db, SubjectName.CSS)
    db.commit()
    body = {
        "subjectId": subject.id,
        "level": "beginner",
        "title": "Bad",
        "questions": [{"text": "Q", "options": [{"text": "A", "isCorrect": True}]}],
    }

    response = client.post("/api/v1/quizzes", json=body, headers=auth_headers(admin))

    assert response.status_code == 422


def test_submit_grades_and_awards_points(client, student, make_quiz, db):
    quiz = make_quiz(questions=3)

    response = client.post(
        f"/api/v1/quizzes/{quiz.id}/submit",
        json={"answers": correct_answers(quiz, count=2)},
        headers=auth_headers(student),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["score"] == 2
    assert body["totalQuestions"] == 3
    assert body["pointsEarned"] == 20
    assert body["updatedUserTotalPoints"] == 20
    [wrong] = body["wrongAnswers"]
    assert wrong["selectedOptionId"] == ""
    assert wrong["suggestedArticles"][0]["id"] == "mdn-html-beginner-1"

    attempt = db.get(QuizAttempt, body["attemptId"])
    assert len(attempt.answers) == 2


def test_every_submission_creates_a_new_attempt(client, student, make_quiz):
    quiz = make_quiz(questions=2)
    headers = auth_headers(student)

    first = client.post(f"/api/v1/quizzes/{quiz.id}/submit", json={"answers": correct_answers(quiz)}, headers=headers)
    second = client.post(f"/api/v1/quizzes/{quiz.id}/submit", json={"answers": correct_answers(quiz)}, headers=headers)

    assert first.json()["attemptId"] != second.json()["attemptId"]
    assert second.json()["updatedUserTotalPoints"] == 40


def test_submit_unknown_quiz(client, student):
    response = client.post("/api/v1/quizzes/missing/submit", json={"answers": []}, headers=auth_headers(student))

    assert response.status_code == 404


def test_submit_requires_authentication(client, make_quiz):
    quiz = make_quiz()

    response = client.post(f"/api/v1/quizzes/{quiz.id}/submit", json={"answers": []})

    assert response.status_code == 401


def test_list_marks_taken_quizzes(client, student, make_quiz):
    taken = make_quiz(title="Taken")
    make_quiz(title="Fresh")
    headers = auth_headers(student)
    client.post(f"/api/v1/quizzes/{taken.id}/submit", json={"answers": []}, headers=headers)

    response = client.get("/api/v1/quizzes", headers=headers)

    flags = {quiz["title"]: quiz["hasTaken"] for quiz in response.json()}
    assert flags == {"Taken": True, "Fresh": False}


def test_update_replaces_questions_and_keeps_creator(client, admin, make_user, make_quiz, db):
    quiz = make_quiz(questions=3)
    other_admin = make_user(name="Other", email="other@example.com", role=admin.role)
    body = {
        "subjectId": quiz.subject.id,
        "level": "middle",
        "title": "Renamed",
        "questions": [{"text": "Only", "options": [{"text": "A", "isCorrect": True}, {"text": "B"}]}],
    }

    response = client.put(f"/api/v1/quizzes/{quiz.id}", json=body, headers=auth_headers(other_admin))

    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "Renamed"
    assert updated["level"] == "middle"
    assert [q["text"] for q in updated["questions"]] == ["Only"]
    assert updated["createdById"] == admin.id
    assert db.query(Question).count() == 1


def test_delete_keeps_attempt_history(client, admin, student, make_quiz):
    quiz = make_quiz()
    headers = auth_headers(student)
    attempt_id = client.post(
        f"/api/v1/quizzes/{quiz.id}/submit", json={"answers": correct_answers(quiz)}, headers=headers
    ).json()["attemptId"]

    deleted = client.delete(f"/api/v1/quizzes/{quiz.id}", headers=auth_headers(admin))
    assert deleted.json() == {"deleted": True}
    assert client.get(f"/api/v1/quizzes/{quiz.id}").status_code == 404

    attempts = client.get("/api/v1/quizzes/attempts/my", headers=headers).json()
    assert attempts[0]["quiz"]["title"] == "Unknown Quiz"
    detail = client.get(f"/api/v1/attempts/{attempt_id}", headers=headers).json()
    assert detail["questions"] == []


def test_attempt_detail_is_owner_only(client, student, make_user, make_quiz):
    quiz = make_quiz(questions=2)
    attempt_id = client.post(
        f"/api/v1/quizzes/{quiz.id}/submit",
        json={"answers": wrong_answers(quiz)[:1]},
        headers=auth_headers(student),
    ).json()["attemptId"]

    detail = client.get(f"/api/v1/quizzes/attempts/{attempt_id}", headers=auth_headers(student)).json()
    assert detail["questions"][0]["userAnswer"] == {
        "selectedOptionId": quiz.questions[0].options[1].id,
        "isCorrect": False,
    }
    assert detail["questions"][1]["userAnswer"] is None
    assert detail["questions"][0]["options"][0]["isCorrect"] is True

    stranger = make_user(name="Stranger", email="stranger@example.com")
    response = client.get(f"/api/v1/quizzes/attempts/{attempt_id}", headers=auth_headers(stranger))
    assert response.status_code == 404


def test_level_gate_and_random_questions(client, student, make_quiz):
    first = make_quiz(title="One", level=QuizLevel.BEGINNER)
    second = make_quiz(title="Two", level=QuizLevel.BEGINNER)
    headers = auth_headers(student)

    client.post(f"/api/v1/quizzes/{first.id}/submit", json={"answers": []}, headers=headers)
    status = client.get("/api/v1/quizzes/level/beginner/completion", headers=headers).json()
    assert status == {
        "level": "beginner",
        "totalQuizzes": 2,
        "completedQuizzes": 1,
        "isCompleted": False,
        "canGenerateRandom": False,
    }

    blocked = client.post(
        "/api/v1/quizzes/generate-random-questions", json={"level": "beginner"}, headers=headers
    )
    assert blocked.status_code == 404
    assert blocked.json()["error"]["details"]["remaining"] == 1

    client.post(f"/api/v1/quizzes/{second.id}/submit", json={"answers": []}, headers=headers)
    allowed = client.post(
        "/api/v1/quizzes/generate-random-questions", json={"level": "beginner", "count": 5}, headers=headers
    )
    assert allowed.status_code == 200
    assert allowed.json()["count"] == 5
    assert len(allowed.json()["questions"]) == 5


def test_empty_level_is_never_complete(client, student):
    status = client.get("/api/v1/quizzes/level/intermediate/completion", headers=auth_headers(student)).json()

    assert status["totalQuizzes"] == 0
    assert status["isCompleted"] is False


def test_ai_generate_quiz_creates_subject_and_quiz(client, student):
    response = client.post(
        "/api/v1/ai/generate-quiz",
        json={"subject": "NestJS", "level": "middle", "count": 4},
        headers=auth_headers(student),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "AI NestJS middle quiz"
    assert body["subject"]["description"] == "NestJS subject auto-created"
    assert [q["text"] for q in body["questions"]][0] == "(middle) NestJS question #1"
    assert body["createdById"] == student.id


def test_empty_submission_marks_every_question_wrong(client, student, make_quiz):
    quiz = make_quiz(questions=4)

    body = client.post(
        f"/api/v1/quizzes/{quiz.id}/submit", json={"answers": []}, headers=auth_headers(student)
    ).json()

    assert body["correctAnswersCount"] == 0
    assert body["pointsEarned"] == 0
    assert len(body["wrongAnswers"]) == 4


def test_wrong_choice_reports_the_correct_option(client, student, db):
    subject = subject_service.get_or_create(db, SubjectName.CSS)
    db.commit()
    quiz = quiz_service.create_quiz(
        db,
        QuizCreate(
            subject_id=subject.id,
            level=QuizLevel.BEGINNER,
            title="Selectors",
            questions=[
                QuestionCreate(
                    text="Which selector targets ids?",
                    options=[
                        AnswerOptionCreate(text="A"),
                        AnswerOptionCreate(text="B", is_correct=True),
                        AnswerOptionCreate(text="C"),
                    ],
                ),
                QuestionCreate(
                    text="Which property sets color?",
                    options=[AnswerOptionCreate(text="color", is_correct=True), AnswerOptionCreate(text="fill")],
                ),
            ],
        ),
        creator_id=None,
    )
    first, second = quiz.questions
    answers = [
        {"questionId": first.id, "selectedOptionId": first.options[2].id},
        {"questionId": second.id, "selectedOptionId": second.options[0].id},
    ]

    body = client.post(
        f"/api/v1/quizzes/{quiz.id}/submit", json={"answers": answers}, headers=auth_headers(student)
    ).json()

    assert body["score"] == 1
    assert body["pointsEarned"] == 10
    [wrong] = body["wrongAnswers"]
    assert wrong["questionId"] == first.id
    assert wrong["selectedOptionId"] == first.options[2].id
    assert wrong["correctOptionId"] == first.options[1].id
