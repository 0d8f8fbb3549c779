# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps

from flask import g, request

from taskdesk.domain.users.repositories import TokenService
from taskdesk.shared.errors import UnauthorizedError
from taskdesk.shared.logging import logger


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if auth[:7].lower() == "bearer ":
        return auth[7:].strip()
    return ""


def current_user_id() -> int:
    return int(g.user_id)


class AuthGuard:
    """Decorator that requires a valid session token and sets ``g.user_id``."""

    def __init__(self, tokens: TokenService) -> None:
        self._tokens = tokens

    def __call__(self, view: Callable) -> Callable:
        @wraps(view)
        def inner(*args, **kwargs):
            token = bearer_token()
            if not token:
                logger.warning(
                    f"No Authorization header on {request.method} {request.path} "
                    f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
                )
                raise UnauthorizedError()

            claims = self._tokens.verify(token)
            g.user_id = claims.user_id
            logger.debug(f"Auth OK: user={claims.user_id} {request.method} {request.path}")
            return view(*args, **kwargs)

        return inner


__all__ = ["AuthGuard", "bearer_token", "current_user_id"]
