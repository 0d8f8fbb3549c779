from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import httpx
import pytest
from flask import Flask
from flask.testing import FlaskClient

from taskdesk.app import create_app
from taskdesk.application.services.password_hashing import WerkzeugPasswordHasher
from taskdesk.infrastructure.container import Container
from taskdesk.infrastructure.github import GitHubOAuthClient
from taskdesk.shared.config import (
    AppConfig,
    DatabaseConfig,
    GitHubConfig,
    SecurityConfig,
    StorageConfig,
)

JWT_SECRET = "test-secret-with-enough-length-for-hs256"
FRONTEND_URL = "http://front.test"
PASSWORD = "hunter22pass"


class FakeGitHub:
    """Routes the three GitHub endpoints to canned answers and records calls."""

    def __init__(self) -> None:
        self.token_payload: dict[str, Any] = {"access_token": "gho_test", "token_type": "bearer"}
        self.profile: dict[str, Any] = {"id": 1, "login": "bob", "email": None}
        self.emails: list[dict[str, Any]] = [
            {"email": "b@x.com", "primary": True, "verified": True}
        ]
        self.calls: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(f"{request.method} {request.url.path}")
        if request.url.path == "/login/oauth/access_token":
            return httpx.Response(200, json=self.token_payload)
        if request.url.path == "/user":
            return httpx.Response(200, json=self.profile)
        if request.url.path == "/user/emails":
            return httpx.Response(200, json=self.emails)
        return httpx.Response(404, json={"message": "Not Found"})

    def client(self, config: GitHubConfig) -> GitHubOAuthClient:
        return GitHubOAuthClient(
            config, http=httpx.Client(transport=httpx.MockTransport(self.handler))
        )


def build_config(tmp_path: Path, **overrides: Any) -> AppConfig:
    values: dict[str, Any] = {
        "jwt_secret": JWT_SECRET,
        "frontend_url": FRONTEND_URL,
        "database": DatabaseConfig(url=f"sqlite:///{tmp_path / 'app.db'}", _env_file=None),
        "github": GitHubConfig(client_id="cid", client_secret="csecret", _env_file=None),
        "storage": StorageConfig(directory=tmp_path / "uploads", _env_file=None),
        "security": SecurityConfig(enable_rate_limit=False, _env_file=None),
    }
    values.update(overrides)
    return AppConfig(_env_file=None, **values)


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    return build_config(tmp_path)


@pytest.fixture()
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture()
def container(app_config: AppConfig, fake_github: FakeGitHub) -> Iterator[Container]:
    container = Container(app_config)
    container.password_hasher = WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")
    container.github_client = fake_github.client(app_config.github)
    yield container
    container.engine.dispose()


@pytest.fixture()
def app(container: Container) -> Flask:
    return create_app(container=container)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


def signup(client: FlaskClient, email: str = "alice@example.com", password: str = PASSWORD) -> str:
    response = client.post("/api/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 201, response.get_json()
    return response.get_json()["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def token(client: FlaskClient) -> str:
    return signup(client)


@pytest.fixture()
def auth_headers(token: str) -> dict[str, str]:
    return bearer(token)


class FakeClock:
    def __init__(self, moment: datetime) -> None:
        self.now = moment

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


T0 = datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)
