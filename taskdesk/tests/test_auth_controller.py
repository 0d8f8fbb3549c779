from __future__ import annotations

import json
from datetime import timedelta
from urllib.parse import parse_qs, urlsplit

import jwt
from flask.testing import FlaskClient
from sqlalchemy import func, select

from taskdesk.app import create_app
from taskdesk.infrastructure.auth import JwtTokenService
from taskdesk.infrastructure.container import Container
from taskdesk.infrastructure.db.models import User
from taskdesk.shared.config import GitHubConfig

from .conftest import (
    FRONTEND_URL,
    JWT_SECRET,
    PASSWORD,
    FakeGitHub,
    bearer,
    build_config,
    signup,
)


def _user_count(container: Container) -> int:
    with container.session_factory() as session:
        return session.scalar(select(func.count()).select_from(User))


def test_signup_then_login_returns_verifiable_token(client: FlaskClient) -> None:
    response = client.post(
        "/api/auth/signup", json={"email": "Alice@Example.com", "password": PASSWORD}
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body["user"]["email"] == "alice@example.com"

    login = client.post("/api/auth/login", json={"email": "alice@example.com", "password": PASSWORD})
    assert login.status_code == 200
    token = login.get_json()["token"]

    payload = jwt.decode(
        token, JWT_SECRET, algorithms=["HS256"], options={"verify_exp": False}
    )
    assert payload["sub"] == str(body["user"]["id"])


def test_signup_duplicate_email_is_conflict(client: FlaskClient) -> None:
    signup(client)
    response = client.post(
        "/api/auth/signup", json={"email": "alice@example.com", "password": PASSWORD}
    )

    assert response.status_code == 409
    assert response.get_json()["error"] == "user_already_exists"


def test_signup_invalid_payload_returns_422(client: FlaskClient) -> None:
    response = client.post("/api/auth/signup", json={"email": "not-an-email", "password": "short"})

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert payload["context"]["fields"] == ["email", "password"]


def test_wrong_password_and_unknown_email_fail_identically(client: FlaskClient) -> None:
    signup(client)

    wrong_password = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass-1"}
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json()
    assert wrong_password.get_json()["error"] == "invalid_credentials"


def test_me_requires_token(client: FlaskClient) -> None:
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.get_json()["error"] == "unauthorized"


def test_me_returns_current_user(client: FlaskClient, token: str) -> None:
    response = client.get("/api/auth/me", headers=bearer(token))

    assert response.status_code == 200
    assert response.get_json()["user"]["email"] == "alice@example.com"


def test_me_rejects_expired_token(client: FlaskClient, container: Container) -> None:
    signup(client)
    issuer = JwtTokenService(JWT_SECRET, ttl=timedelta(seconds=-1))
    expired, _ = issuer.issue(1)

    response = client.get("/api/auth/me", headers=bearer(expired))

    assert response.status_code == 401
    assert response.get_json()["error"] == "token_expired"


def test_me_rejects_tampered_token(client: FlaskClient, token: str) -> None:
    response = client.get("/api/auth/me", headers=bearer(token[:-2] + "xx"))

    assert response.status_code == 401
    assert response.get_json()["error"] == "invalid_token"


def test_callback_without_code_is_400_without_redirect(client: FlaskClient) -> None:
    response = client.get("/api/auth/github/callback")

    assert response.status_code == 400
    assert "Location" not in response.headers
    assert response.get_json()["message"] == "Authorization code is required"


def test_callback_success_redirects_with_token_and_user(
    client: FlaskClient, container: Container
) -> None:
    response = client.get("/api/auth/github/callback?code=abc")

    assert response.status_code == 302
    location = urlsplit(response.headers["Location"])
    assert f"{location.scheme}://{location.netloc}{location.path}" == f"{FRONTEND_URL}/auth"
    query = parse_qs(location.query)
    user = json.loads(query["user"][0])
    assert user["email"] == "b@x.com"
    assert container.token_service.verify(query["token"][0]).user_id == user["id"]


def test_callback_without_access_token_redirects_with_error(
    client: FlaskClient, container: Container, fake_github: FakeGitHub
) -> None:
    fake_github.token_payload = {"error": "bad_verification_code"}

    response = client.get("/api/auth/github/callback?code=stale")

    assert response.status_code == 302
    location = urlsplit(response.headers["Location"])
    assert location.path == "/auth"
    assert parse_qs(location.query)["error"] == ["Failed to get access token from GitHub"]
    assert _user_count(container) == 0
    assert fake_github.calls == ["POST /login/oauth/access_token"]


def test_callback_provider_failure_redirects_with_error(
    client: FlaskClient, fake_github: FakeGitHub
) -> None:
    fake_github.profile = {"unexpected": True}

    response = client.get("/api/auth/github/callback?code=abc")

    assert response.status_code == 302
    query = parse_qs(urlsplit(response.headers["Location"]).query)
    assert query["error"] == ["Unexpected GitHub profile response"]


def test_callback_without_credentials_is_500_diagnostic(
    tmp_path, fake_github: FakeGitHub
) -> None:
    config = build_config(tmp_path, github=GitHubConfig(client_id="cid", _env_file=None))
    container = Container(config)
    container.github_client = fake_github.client(config.github)
    client = create_app(container=container).test_client()

    response = client.get("/api/auth/github/callback?code=abc")

    assert response.status_code == 500
    assert response.get_json()["context"]["details"] == {
        "clientId": "Present",
        "clientSecret": "Missing",
    }
    assert fake_github.calls == []
    container.engine.dispose()


def test_oauth_user_cannot_log_in_with_password(client: FlaskClient) -> None:
    client.get("/api/auth/github/callback?code=abc")

    response = client.post("/api/auth/login", json={"email": "b@x.com", "password": PASSWORD})

    assert response.status_code == 401
    assert response.get_json()["error"] == "invalid_credentials"


def test_github_authorize_redirects_to_github(client: FlaskClient) -> None:
    response = client.get("/api/auth/github/authorize")

    assert response.status_code == 302
    location = urlsplit(response.headers["Location"])
    assert location.netloc == "github.com"
    assert parse_qs(location.query)["client_id"] == ["cid"]
