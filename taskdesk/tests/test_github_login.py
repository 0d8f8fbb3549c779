from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

import pytest

from taskdesk.application.use_cases.users.github_login import GitHubLoginUseCase
from taskdesk.domain.users.entities import AuthProvider, User
from taskdesk.domain.users.exceptions import UserAlreadyExistsError
from taskdesk.domain.users.oauth import (
    GitHubEmail,
    GitHubProfile,
    MissingAuthorizationCodeError,
    OAuthNotConfiguredError,
    TokenExchangeError,
    UnverifiedEmailError,
    resolve_email,
    resolve_identity,
)
from taskdesk.shared.config import GitHubConfig

from .test_auth_use_cases import InMemoryUserRepository, StaticTokenService


class StubGitHub:
    def __init__(
        self,
        profile: GitHubProfile,
        emails: Sequence[GitHubEmail] = (),
        *,
        access_token: str | None = "gho_token",
    ) -> None:
        self.profile = profile
        self.emails = list(emails)
        self.access_token = access_token
        self.calls: list[str] = []

    def exchange_code(self, code: str) -> str:
        self.calls.append("exchange")
        if not self.access_token:
            raise TokenExchangeError("bad_verification_code")
        return self.access_token

    def fetch_profile(self, access_token: str) -> GitHubProfile:
        self.calls.append("profile")
        return self.profile

    def fetch_emails(self, access_token: str) -> list[GitHubEmail]:
        self.calls.append("emails")
        return self.emails


def _config(**overrides) -> GitHubConfig:
    values = {"client_id": "cid", "client_secret": "csecret"}
    values.update(overrides)
    return GitHubConfig(_env_file=None, **values)


def _use_case(github: StubGitHub, users: InMemoryUserRepository, config=None) -> GitHubLoginUseCase:
    return GitHubLoginUseCase(
        github=github, users=users, tokens=StaticTokenService(), config=config or _config()
    )


def test_resolve_email_prefers_profile_then_primary_then_login() -> None:
    bob = GitHubProfile(id=1, login="bob")

    assert resolve_email(bob, [GitHubEmail(email="b@x.com", primary=True)]) == "b@x.com"
    assert resolve_email(bob, []) == "bob@github.com"
    assert resolve_email(bob, [GitHubEmail(email="other@x.com")]) == "bob@github.com"
    assert resolve_email(GitHubProfile(id=1, login="bob", email="pub@x.com"), []) == "pub@x.com"


def test_creates_github_user_from_primary_email() -> None:
    users = InMemoryUserRepository()
    github = StubGitHub(
        GitHubProfile(id=1, login="bob"), [GitHubEmail(email="b@x.com", primary=True)]
    )

    session = _use_case(github, users).execute("code-1")

    assert session.user.email == "b@x.com"
    assert session.user.auth_provider is AuthProvider.GITHUB
    assert session.user.password_hash is None
    assert session.user.provider_user_id == "1"
    assert github.calls == ["exchange", "profile", "emails"]


def test_falls_back_to_login_address_without_emails() -> None:
    users = InMemoryUserRepository()

    session = _use_case(StubGitHub(GitHubProfile(id=1, login="bob"), []), users).execute("c")

    assert session.user.email == "bob@github.com"


def test_profile_email_skips_email_lookup() -> None:
    github = StubGitHub(GitHubProfile(id=5, login="carol", email="Carol@X.com"))

    session = _use_case(github, InMemoryUserRepository()).execute("c")

    assert session.user.email == "carol@x.com"
    assert "emails" not in github.calls


def test_existing_user_is_reused() -> None:
    users = InMemoryUserRepository()
    github = StubGitHub(
        GitHubProfile(id=1, login="bob"), [GitHubEmail(email="b@x.com", primary=True)]
    )
    first = _use_case(github, users).execute("c1")
    second = _use_case(github, users).execute("c2")

    assert first.user.id == second.user.id


def _local_user(users: InMemoryUserRepository, email: str) -> User:
    return users.add(
        User(
            id=0,
            email=email,
            password_hash="hashed:secret123",
            created_at=datetime.now(UTC),
            auth_provider=AuthProvider.LOCAL,
        )
    )


def test_resolve_identity_reports_verification() -> None:
    bob = GitHubProfile(id=1, login="bob")

    assert resolve_identity(bob, [GitHubEmail(email="b@x.com", primary=True, verified=True)]) == (
        "b@x.com",
        True,
    )
    assert resolve_identity(bob, [GitHubEmail(email="b@x.com", primary=True)]) == ("b@x.com", False)
    assert resolve_identity(bob, []) == ("bob@github.com", False)
    assert resolve_identity(GitHubProfile(id=1, login="bob", email="p@x.com"), []) == ("p@x.com", True)


def test_verified_primary_email_links_local_account() -> None:
    users = InMemoryUserRepository()
    local = _local_user(users, "b@x.com")
    github = StubGitHub(
        GitHubProfile(id=1, login="bob"),
        [GitHubEmail(email="b@x.com", primary=True, verified=True)],
    )

    session = _use_case(github, users).execute("c")

    assert session.user.id == local.id


def test_unverified_primary_email_does_not_link_local_account() -> None:
    users = InMemoryUserRepository()
    _local_user(users, "b@x.com")
    github = StubGitHub(
        GitHubProfile(id=1, login="bob"), [GitHubEmail(email="b@x.com", primary=True)]
    )

    with pytest.raises(UnverifiedEmailError):
        _use_case(github, users).execute("c")


def test_login_placeholder_does_not_link_local_account() -> None:
    users = InMemoryUserRepository()
    _local_user(users, "bob@github.com")

    with pytest.raises(UnverifiedEmailError):
        _use_case(StubGitHub(GitHubProfile(id=1, login="bob")), users).execute("c")


def test_missing_access_token_creates_no_user() -> None:
    users = InMemoryUserRepository()
    github = StubGitHub(GitHubProfile(id=1, login="bob"), access_token=None)

    with pytest.raises(TokenExchangeError) as excinfo:
        _use_case(github, users).execute("c")

    assert "Failed to get access token from GitHub" in str(excinfo.value.message)
    assert users.find_by_email("bob@github.com") is None
    assert github.calls == ["exchange"]


def test_missing_code_is_rejected_before_any_call() -> None:
    github = StubGitHub(GitHubProfile(id=1, login="bob"))

    with pytest.raises(MissingAuthorizationCodeError):
        _use_case(github, InMemoryUserRepository()).execute(None)
    assert github.calls == []


def test_missing_credentials_report_which_is_absent() -> None:
    github = StubGitHub(GitHubProfile(id=1, login="bob"))
    config = _config(client_secret=None)

    with pytest.raises(OAuthNotConfiguredError) as excinfo:
        _use_case(github, InMemoryUserRepository(), config).execute("code")

    assert excinfo.value.context == {
        "details": {"clientId": "Present", "clientSecret": "Missing"}
    }
    assert github.calls == []


def test_lost_creation_race_returns_existing_user() -> None:
    class RacingRepository(InMemoryUserRepository):
        def __init__(self) -> None:
            super().__init__()
            self.lookups = 0

        def find_by_email(self, email):
            self.lookups += 1
            if self.lookups == 1:
                # another request inserts between lookup and insert
                return None
            return super().find_by_email(email)

        def add(self, user):
            if not self._users:
                super().add(user)
                raise UserAlreadyExistsError()
            return super().add(user)

    users = RacingRepository()
    session = _use_case(StubGitHub(GitHubProfile(id=1, login="bob")), users).execute("c")

    assert session.user.email == "bob@github.com"
    assert session.user.id == 1
