import asyncio
from unittest import mock
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.exceptions import BadRequestException, ExternalServiceException
from app.main import app
from app.models.enums import SocialProvider
from app.models.user import SocialAccount, User
from app.schemas.auth import SocialProfile
from app.services.auth import auth_service, display_name_for, should_update_name
from app.services.oauth import GoogleOAuthProvider, LinkedInOAuthProvider, get_google_provider


def _profile(**overrides):
    data = {
        "provider": SocialProvider.GOOGLE,
        "provider_user_id": "g-123",
        "email": "jane.doe@example.com",
        "name": "Jane Doe",
        "avatar_url": "https://example.com/jane.png",
    }
    data.update(overrides)
    return SocialProfile(**data)


# Password auth

def test_register_and_login(client):
    registered = client.post(
        "/api/v1/auth/register",
        json={"name": "Ana", "email": "ana@example.com", "password": "secret123", "selectedSubjects": ["CSS"]},
    )
    assert registered.status_code == 201
    body = registered.json()
    assert body["user"]["role"] == "student"
    assert body["user"]["selectedSubjects"] == ["CSS"]
    assert "passwordHash" not in body["user"]

    login = client.post("/api/v1/auth/login", json={"email": "ana@example.com", "password": "secret123"})
    assert login.status_code == 200

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {login.json()['accessToken']}"})
    assert me.json()["email"] == "ana@example.com"


def test_register_duplicate_email(client, student):
    response = client.post(
        "/api/v1/auth/register",
        json={"name": "Again", "email": student.email, "password": "secret123"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Email already in use"


def test_register_rejects_short_password(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"name": "Ana", "email": "ana@example.com", "password": "x" * (settings.PASSWORD_MIN_LENGTH - 1)},
    )

    assert response.status_code == 422


def test_login_rejects_bad_password_and_social_only_accounts(client, make_user):
    make_user(email="pw@example.com", password="secret123")
    make_user(name="Social", email="social@example.com", password=None)

    wrong = client.post("/api/v1/auth/login", json={"email": "pw@example.com", "password": "nope"})
    social = client.post("/api/v1/auth/login", json={"email": "social@example.com", "password": "anything"})

    assert wrong.status_code == 401
    assert wrong.json()["error"]["message"] == "Invalid credentials"
    assert social.status_code == 401


# Social-login state machine

def test_new_social_user_is_created_and_linked(db):
    result = auth_service.social_login(db, _profile())

    assert result.new_user is True
    user = db.get(User, result.user.id)
    assert user.password_hash is None
    assert user.total_points == 0
    assert db.query(SocialAccount).filter_by(user_id=user.id).count() == 1


def test_linked_account_returns_same_user(db):
    first = auth_service.social_login(db, _profile())
    second = auth_service.social_login(db, _profile())

    assert second.new_user is False
    assert second.user.id == first.user.id
    assert db.query(SocialAccount).count() == 1


def test_email_match_links_existing_user(db, make_user):
    existing = make_user(name="Jane", email="jane.doe@example.com")

    result = auth_service.social_login(db, _profile())

    assert result.new_user is False
    assert result.user.id == existing.id
    account = db.query(SocialAccount).one()
    assert account.user_id == existing.id


def test_email_match_rejected_when_policy_disabled(db, make_user, monkeypatch):
    make_user(email="jane.doe@example.com")
    monkeypatch.setattr(settings, "SOCIAL_LINK_BY_EMAIL", False)

    with pytest.raises(BadRequestException):
        auth_service.social_login(db, _profile())
    assert db.query(SocialAccount).count() == 0


def test_orphaned_link_is_removed_and_user_recreated(db):
    db.add(SocialAccount(user_id="gone", provider=SocialProvider.GOOGLE, provider_user_id="g-123"))
    db.commit()

    result = auth_service.social_login(db, _profile(email=None))

    assert result.new_user is True
    [account] = db.query(SocialAccount).all()
    assert account.user_id == result.user.id


def test_orphaned_link_is_removed_even_when_login_is_rejected(db, make_user, monkeypatch):
    make_user(email="jane.doe@example.com")
    monkeypatch.setattr(settings, "SOCIAL_LINK_BY_EMAIL", False)
    db.add(SocialAccount(user_id="gone", provider=SocialProvider.GOOGLE, provider_user_id="g-123"))
    db.commit()

    with pytest.raises(BadRequestException):
        auth_service.social_login(db, _profile())
    db.rollback()

    other = SessionLocal()
    try:
        assert other.query(SocialAccount).count() == 0
    finally:
        other.close()


def test_returning_user_gets_missing_avatar_but_keeps_avatar_set(db):
    first = auth_service.social_login(db, _profile(avatar_url=None))
    assert first.user.avatar_url is None

    second = auth_service.social_login(db, _profile(avatar_url="https://example.com/new.png"))
    assert second.user.avatar_url == "https://example.com/new.png"

    third = auth_service.social_login(db, _profile(avatar_url="https://example.com/other.png"))
    assert third.user.avatar_url == "https://example.com/new.png"


def test_display_name_fallbacks():
    assert display_name_for(_profile(name=None)) == "Jane.doe"
    assert display_name_for(_profile(name=None, email=None)) == "User"
    assert display_name_for(_profile()) == "Jane Doe"


@pytest.mark.parametrize(
    "current, incoming, expected",
    [
        ("User", "Jane", True),
        ("New User", "Jane", True),
        ("jane.doe", "Jane", True),
        ("", "Jane", True),
        ("Jane", "Jane Doe", True),
        ("Jane Doe", "Jane", False),
        ("Jane Doe", "  Jane Doe  ", False),
        ("Jane", "", False),
    ],
)
def test_name_update_rules(current, incoming, expected):
    assert should_update_name(current, incoming, "jane.doe@example.com") is expected


# OAuth providers

def test_google_profile_from_userinfo():
    profile = GoogleOAuthProvider.profile_from_userinfo(
        {"sub": "42", "given_name": "Ada", "family_name": "Lovelace", "email": "ada@example.com"}
    )

    assert profile.provider_user_id == "42"
    assert profile.name == "Ada Lovelace"
    assert profile.avatar_url is None


def test_linkedin_falls_back_to_legacy_profile():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/accessToken"):
            return httpx.Response(200, json={"access_token": "tok"})
        if request.url.path == "/v2/userinfo":
            return httpx.Response(403, json={})
        if request.url.path == "/v2/me":
            return httpx.Response(200, json={"id": "li-9", "localizedFirstName": "Grace", "localizedLastName": "Hopper"})
        if request.url.path == "/v2/emailAddress":
            return httpx.Response(200, json={"elements": [{"handle~": {"emailAddress": "grace@example.com"}}]})
        return httpx.Response(404)

    provider = LinkedInOAuthProvider("id", "secret", "http://cb", transport=httpx.MockTransport(handler))

    profile = asyncio.run(provider.authenticate("code"))

    assert profile.provider == SocialProvider.LINKEDIN
    assert profile.provider_user_id == "li-9"
    assert profile.name == "Grace Hopper"
    assert profile.email == "grace@example.com"


# OAuth endpoints

@pytest.fixture
def google_provider():
    provider = GoogleOAuthProvider("client-id", "client-secret", "http://localhost:3000/cb")
    app.dependency_overrides[get_google_provider] = lambda: provider
    yield provider
    app.dependency_overrides.clear()


def test_google_redirect_sets_state_cookie(client, google_provider):
    response = client.get("/api/v1/auth/google", follow_redirects=False)

    assert response.status_code == 302
    query = parse_qs(urlparse(response.headers["location"]).query)
    assert query["client_id"] == ["client-id"]
    assert query["state"][0] == response.cookies["oauth_state_google"]


def test_google_callback_success_redirects_with_token(client, google_provider):
    client.cookies.set("oauth_state_google", "state-1")

    with mock.patch.object(google_provider, "authenticate", mock.AsyncMock(return_value=_profile())):
        response = client.get(
            "/api/v1/auth/google/callback", params={"code": "c", "state": "state-1"}, follow_redirects=False
        )

    location = response.headers["location"]
    assert location.startswith(settings.FRONTEND_SUCCESS_REDIRECT)
    query = parse_qs(urlparse(location).query)
    assert query["newUser"] == ["true"]
    assert query["token"][0]


def test_google_callback_with_bad_state_redirects_to_failure(client, google_provider):
    client.cookies.set("oauth_state_google", "state-1")

    response = client.get(
        "/api/v1/auth/google/callback", params={"code": "c", "state": "forged"}, follow_redirects=False
    )

    assert response.status_code == 302
    assert response.headers["location"] == f"{settings.FRONTEND_FAILURE_REDIRECT}?error=social_login_failed"


def test_google_callback_with_garbled_token_response_redirects_to_failure(client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway hiccup</html>")

    provider = GoogleOAuthProvider(
        "client-id", "client-secret", "http://localhost:3000/cb", transport=httpx.MockTransport(handler)
    )
    app.dependency_overrides[get_google_provider] = lambda: provider
    client.cookies.set("oauth_state_google", "state-1")
    try:
        response = client.get(
            "/api/v1/auth/google/callback", params={"code": "c", "state": "state-1"}, follow_redirects=False
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 302
    assert response.headers["location"] == f"{settings.FRONTEND_FAILURE_REDIRECT}?error=social_login_failed"


def test_garbled_userinfo_becomes_external_service_error():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/token":
            return httpx.Response(200, json={"access_token": "tok"})
        return httpx.Response(200, text="not json")

    provider = GoogleOAuthProvider("id", "secret", "http://cb", transport=httpx.MockTransport(handler))

    with pytest.raises(ExternalServiceException):
        asyncio.run(provider.authenticate("code"))
