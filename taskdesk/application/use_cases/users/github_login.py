# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from taskdesk.application.interfaces import GitHubOAuthPort
from taskdesk.domain.users.entities import AuthProvider, IssuedSession, User
from taskdesk.domain.users.exceptions import UserAlreadyExistsError
from taskdesk.domain.users.oauth import (
    GitHubProfile,
    MissingAuthorizationCodeError,
    OAuthNotConfiguredError,
    UnverifiedEmailError,
    resolve_identity,
)
from taskdesk.domain.users.repositories import TokenService, UserRepository
from taskdesk.shared.config import GitHubConfig
from taskdesk.shared.logging import logger

from .register_user import normalize_email


class GitHubLoginUseCase:
    """Turns a GitHub authorization code into a local session.

    Accounts created here have no local password; they can only sign in
    through GitHub again.
    """

    def __init__(
        self,
        *,
        github: GitHubOAuthPort,
        users: UserRepository,
        tokens: TokenService,
        config: GitHubConfig,
    ) -> None:
        self._github = github
        self._users = users
        self._tokens = tokens
        self._config = config

    def check_preconditions(self, code: str | None) -> str:
        if not code:
            raise MissingAuthorizationCodeError()
        if not self._config.is_configured():
            logger.error(f"oauth.github: missing credentials {self._config.missing_details()}")
            raise OAuthNotConfiguredError(self._config.missing_details())
        return code

    def execute(self, code: str | None) -> IssuedSession:
        code = self.check_preconditions(code)

        access_token = self._github.exchange_code(code)
        profile = self._github.fetch_profile(access_token)
        email, verified = self._resolve_email(access_token, profile)

        user = self._find_or_create(email, profile, verified=verified)
        token, claims = self._tokens.issue(user.id)
        logger.info(f"oauth.github: ok user_id={user.id} github_id={profile.id}")
        return IssuedSession(token=token, claims=claims, user=user)

    def _resolve_email(self, access_token: str, profile: GitHubProfile) -> tuple[str, bool]:
        emails = None if profile.email else self._github.fetch_emails(access_token)
        email, verified = resolve_identity(profile, emails)
        return normalize_email(email), verified

    def _find_or_create(self, email: str, profile: GitHubProfile, *, verified: bool) -> User:
        existing = self._users.find_by_email(email)
        if existing is not None:
            return self._link(existing, verified=verified)

        candidate = User(
            id=0,
            email=email,
            password_hash=None,
            created_at=datetime.now(UTC),
            auth_provider=AuthProvider.GITHUB,
            provider_user_id=str(profile.id),
        )
        try:
            created = self._users.add(candidate)
        except UserAlreadyExistsError:
            # concurrent first login for the same email
            winner = self._users.find_by_email(email)
            if winner is None:
                raise
            return self._link(winner, verified=verified)
        logger.info(f"oauth.github: created user_id={created.id}")
        return created

    def _link(self, user: User, *, verified: bool) -> User:
        # password accounts are only linked through a verified address
        if user.password_hash is not None and not verified:
            logger.warning(f"oauth.github: unverified email for local user_id={user.id}")
            raise UnverifiedEmailError()
        return user
