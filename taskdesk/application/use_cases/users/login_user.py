# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets

from taskdesk.domain.users.entities import IssuedSession
from taskdesk.domain.users.exceptions import InvalidCredentialsError
from taskdesk.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from taskdesk.shared.logging import logger

from .register_user import normalize_email


class LoginUserUseCase:
    """Password login.

    Unknown email, wrong password and accounts without a local password all
    fail with the same error, and a password check runs in every case.
    """

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
        self._dummy_hash: str | None = None

    def _decoy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash(secrets.token_urlsafe(16))
        return self._dummy_hash

    def execute(self, email: str, password: str) -> IssuedSession:
        user = self._users.find_by_email(normalize_email(email))

        if user is not None and user.has_local_password and user.password_hash:
            password_valid = self._password_hasher.verify(password, user.password_hash)
        else:
            self._password_hasher.verify(password, self._decoy_hash())
            password_valid = False

        if not password_valid or user is None:
            logger.info("auth.login: rejected")
            raise InvalidCredentialsError()

        token, claims = self._tokens.issue(user.id)
        return IssuedSession(token=token, claims=claims, user=user)
