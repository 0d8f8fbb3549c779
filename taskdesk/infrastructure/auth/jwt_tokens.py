# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless session tokens (HS256 JWT)."""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from taskdesk.domain.users.entities import SessionClaims
from taskdesk.domain.users.exceptions import InvalidTokenError, TokenExpiredError
from taskdesk.domain.users.repositories import TokenService
from taskdesk.shared.errors import ConfigurationError
from taskdesk.shared.logging import logger

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    """Issues and verifies session tokens against one shared secret.

    Expiry is checked here against the injected clock rather than by PyJWT,
    so a token issued at T is accepted up to and including T + ttl.
    """

    def __init__(
        self,
        secret: str,
        *,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ConfigurationError("JWT_SECRET is not defined")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: int) -> tuple[str, SessionClaims]:
        now = self._clock()
        # exp is never earlier than now + ttl
        iat = int(now.timestamp())
        exp = math.ceil((now + self._ttl).timestamp())
        issued_at = datetime.fromtimestamp(iat, UTC)
        expires_at = datetime.fromtimestamp(exp, UTC)
        payload = {"sub": str(user_id), "iat": iat, "exp": exp}
        token = jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        logger.debug(f"tokens: issued user_id={user_id} exp={expires_at.isoformat()}")
        return token, SessionClaims(user_id=user_id, issued_at=issued_at, expires_at=expires_at)

    def verify(self, token: str) -> SessionClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            user_id = int(payload["sub"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as exc:
            logger.info(f"tokens: rejected ({type(exc).__name__})")
            raise InvalidTokenError() from exc

        if self._clock() > expires_at:
            logger.info(f"tokens: expired user_id={user_id}")
            raise TokenExpiredError()

        return SessionClaims(user_id=user_id, issued_at=issued_at, expires_at=expires_at)


__all__ = ["ALGORITHM", "DEFAULT_TTL", "JwtTokenService"]
