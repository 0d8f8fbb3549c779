# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from taskdesk.domain.users.entities import AuthProvider, IssuedSession, User
from taskdesk.domain.users.exceptions import UserAlreadyExistsError
from taskdesk.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from taskdesk.shared.logging import logger


def normalize_email(email: str) -> str:
    return email.strip().lower()


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, email: str, password: str) -> IssuedSession:
        email = normalize_email(email)
        if self._users.find_by_email(email):
            logger.info("auth.signup: email already registered")
            raise UserAlreadyExistsError()
        user = User(
            id=0,
            email=email,
            password_hash=self._password_hasher.hash(password),
            created_at=datetime.now(UTC),
            auth_provider=AuthProvider.LOCAL,
        )
        persisted = self._users.add(user)
        token, claims = self._tokens.issue(persisted.id)
        return IssuedSession(token=token, claims=claims, user=persisted)
