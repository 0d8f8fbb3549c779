# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from taskdesk.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT
    message = "User already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid email or password"


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.UNAUTHORIZED
    message = "User no longer exists"


class InvalidTokenError(DomainError):
    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid session token"


class TokenExpiredError(DomainError):
    code = "token_expired"
    status = HTTPStatus.UNAUTHORIZED
    message = "Session token has expired"
