from datetime import timedelta

from conftest import auth_headers

from app.models.enums import QuizSessionStatus
from app.models.quiz import QuizAttempt, QuizSession
from app.services.sessions import session_service
from app.utils.dates import utcnow


def test_start_session_resumes_same_quiz(client, student, make_quiz):
    quiz = make_quiz()
    headers = auth_headers(student)

    first = client.post(f"/api/v1/quizzes/{quiz.id}/sessions", headers=headers)
    second = client.post(f"/api/v1/quizzes/{quiz.id}/sessions", headers=headers)

    assert first.status_code == 201
    assert first.json()["id"] == second.json()["id"]
    assert first.json()["status"] == "active"


def test_starting_another_quiz_abandons_the_previous_session(client, db, student, make_quiz):
    first_quiz = make_quiz(title="First")
    second_quiz = make_quiz(title="Second")
    headers = auth_headers(student)

    first = client.post(f"/api/v1/quizzes/{first_quiz.id}/sessions", headers=headers).json()
    second = client.post(f"/api/v1/quizzes/{second_quiz.id}/sessions", headers=headers).json()

    assert first["id"] != second["id"]
    assert db.get(QuizSession, first["id"]).status == QuizSessionStatus.ABANDONED


def test_submit_closes_the_session(client, db, student, make_quiz):
    quiz = make_quiz()
    headers = auth_headers(student)
    session_id = client.post(f"/api/v1/quizzes/{quiz.id}/sessions", headers=headers).json()["id"]

    attempt_id = client.post(f"/api/v1/quizzes/{quiz.id}/submit", json={"answers": []}, headers=headers).json()[
        "attemptId"
    ]

    session = db.get(QuizSession, session_id)
    assert session.status == QuizSessionStatus.SUBMITTED
    assert session.attempt_id == attempt_id
    assert db.get(QuizAttempt, attempt_id).started_at == session.started_at


def test_heartbeat_on_expired_session(client, db, student, make_quiz):
    quiz = make_quiz()
    headers = auth_headers(student)
    session_id = client.post(f"/api/v1/quizzes/{quiz.id}/sessions", headers=headers).json()["id"]
    session = db.get(QuizSession, session_id)
    session.expires_at = utcnow() - timedelta(seconds=1)
    db.commit()

    response = client.post(f"/api/v1/quizzes/sessions/{session_id}/heartbeat", headers=headers)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Quiz session has expired"
    db.expire_all()
    assert db.get(QuizSession, session_id).status == QuizSessionStatus.ABANDONED


def test_sweep_abandons_idle_and_expired_sessions(db, student, make_user, make_quiz):
    quiz = make_quiz()
    other = make_user(name="Other", email="other@example.com")
    third = make_user(name="Third", email="third@example.com")
    now = utcnow()

    def _session(user, last_seen, expires):
        return QuizSession(
            user_id=user.id,
            quiz_id=quiz.id,
            status=QuizSessionStatus.ACTIVE,
            started_at=now - timedelta(minutes=10),
            last_seen_at=last_seen,
            expires_at=expires,
        )

    idle = _session(student, now - timedelta(minutes=5), now + timedelta(minutes=10))
    expired = _session(other, now, now - timedelta(seconds=1))
    live = _session(third, now, now + timedelta(minutes=10))
    db.add_all([idle, expired, live])
    db.commit()

    count = session_service.abandon_stale_sessions(db, now=now, inactive_timeout=timedelta(minutes=2))
    db.commit()
    db.expire_all()

    assert count == 2
    assert idle.status == QuizSessionStatus.ABANDONED
    assert expired.status == QuizSessionStatus.ABANDONED
    assert live.status == QuizSessionStatus.ACTIVE
