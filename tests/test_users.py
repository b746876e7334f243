from datetime import date, datetime, timedelta

from conftest import auth_headers, correct_answers

from app.models.enums import SubjectName
from app.models.quiz import QuizAttempt
from app.services.users import calculate_streak_days, user_service


def test_me_includes_default_preferences(client, student):
    body = client.get("/api/v1/users/me", headers=auth_headers(student)).json()

    assert body["preferences"] == {
        "theme": "system",
        "language": "en",
        "emailNotifications": True,
        "pushNotifications": True,
    }


def test_update_me_merges_preferences(client, student):
    headers = auth_headers(student)
    client.patch("/api/v1/users/me", json={"preferences": {"theme": "dark"}}, headers=headers)

    body = client.patch(
        "/api/v1/users/me", json={"bio": "Hi", "preferences": {"language": "ar"}}, headers=headers
    ).json()

    assert body["bio"] == "Hi"
    assert body["preferences"]["theme"] == "dark"
    assert body["preferences"]["language"] == "ar"


def test_update_profile_rejects_taken_email(client, student, make_user):
    make_user(name="Other", email="taken@example.com")

    response = client.put(
        "/api/v1/users/me/profile", json={"email": "taken@example.com"}, headers=auth_headers(student)
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Email already in use"


def test_update_password(client, student, make_user):
    headers = auth_headers(student)

    wrong = client.patch(
        "/api/v1/users/me/password",
        json={"currentPassword": "nope", "newPassword": "another1"},
        headers=headers,
    )
    assert wrong.json()["error"]["message"] == "Current password is incorrect"

    ok = client.patch(
        "/api/v1/users/me/password",
        json={"currentPassword": "secret123", "newPassword": "another1"},
        headers=headers,
    )
    assert ok.json() == {"message": "Password updated successfully"}
    login = client.post("/api/v1/auth/login", json={"email": student.email, "password": "another1"})
    assert login.status_code == 200

    social = make_user(name="Social", email="social@example.com", password=None)
    rejected = client.patch(
        "/api/v1/users/me/password",
        json={"currentPassword": "x", "newPassword": "another1"},
        headers=auth_headers(social),
    )
    assert rejected.json()["error"]["message"] == "Password change not available for social-only accounts"


def test_update_selected_subjects(client, student):
    response = client.patch(
        "/api/v1/users/me/subjects", json={"selectedSubjects": ["React", "NodeJS"]}, headers=auth_headers(student)
    )

    assert response.json()["selectedSubjects"] == ["React", "NodeJS"]


def test_sync_points_reports_previous_and_calculated(client, db, make_user, make_quiz):
    user = make_user(total_points=999)
    quiz = make_quiz(questions=2)
    headers = auth_headers(user)
    client.post(f"/api/v1/quizzes/{quiz.id}/submit", json={"answers": correct_answers(quiz)}, headers=headers)

    body = client.post("/api/v1/users/me/sync-points", headers=headers).json()

    assert body == {"previousPoints": 1019, "calculatedPoints": 20, "attemptsCount": 1}
    assert client.get("/api/v1/users/me/points", headers=headers).json() == {"totalPoints": 20}


def test_leaderboard_and_position(client, make_user):
    top = make_user(name="Top", email="top@example.com", total_points=300)
    mid = make_user(name="Mid", email="mid@example.com", total_points=200)
    make_user(name="Low", email="low@example.com", total_points=100)

    board = client.get("/api/v1/leaderboard", params={"limit": 2}).json()
    assert [(entry["rank"], entry["userId"]) for entry in board] == [(1, top.id), (2, mid.id)]

    position = client.get("/api/v1/users/me/leaderboard-position", headers=auth_headers(mid)).json()
    assert position == {"position": 2, "totalUsers": 3, "percentile": 67, "totalPoints": 200}


def test_leaderboard_limit_is_capped(client):
    assert client.get("/api/v1/leaderboard", params={"limit": 101}).status_code == 422


def test_streak_counts_back_from_today():
    today = date(2024, 5, 10)
    days = [today, today - timedelta(days=1), today - timedelta(days=2), today - timedelta(days=4)]

    assert calculate_streak_days(days, today) == 3
    assert calculate_streak_days([today - timedelta(days=1)], today) == 0


def test_stats_group_by_subject(db, student, make_quiz):
    html = make_quiz(subject=SubjectName.HTML, questions=4)
    css = make_quiz(subject=SubjectName.CSS, title="CSS", questions=2)
    now = datetime(2024, 5, 10, 12, 0)
    for quiz_id, correct, total in ((html.id, 3, 4), (html.id, 1, 4), (css.id, 2, 2)):
        db.add(
            QuizAttempt(
                user_id=student.id,
                quiz_id=quiz_id,
                score=correct,
                total_questions=total,
                correct_answers_count=correct,
                points_earned=correct * 10,
                answers=[],
                started_at=now,
                finished_at=now,
            )
        )
    db.commit()

    stats = user_service.get_user_stats(db, student.id, today=date(2024, 5, 10))

    assert stats.total_quizzes_taken == 3
    assert stats.total_correct_answers == 6
    assert stats.total_questions_answered == 10
    assert stats.streak_days == 1
    assert [(s.subject, s.quizzes_taken, s.average_score, s.total_points) for s in stats.per_subject_stats] == [
        ("HTML", 2, 50, 40),
        ("CSS", 1, 100, 20),
    ]


def test_get_user_by_id(client, student, make_user):
    other = make_user(name="Other", email="other@example.com")

    response = client.get(f"/api/v1/users/{other.id}", headers=auth_headers(student))

    assert response.json()["name"] == "Other"
    assert client.get("/api/v1/users/missing", headers=auth_headers(student)).status_code == 404
