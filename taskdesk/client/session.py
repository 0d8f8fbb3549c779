# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Persistent client-side session (token + user)."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlsplit

from taskdesk.shared.logging import logger

TOKEN_KEY = "token"
USER_KEY = "user"


class NotAuthenticatedError(Exception):
    """Raised before any request when no session token is stored."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class OAuthRedirectError(Exception):
    """The OAuth redirect carried an ``error`` instead of a session."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SessionStore:
    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._token: str | None = None
        self._user: dict[str, Any] | None = None
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def user(self) -> dict[str, Any] | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def require_token(self) -> str:
        if not self._token:
            raise NotAuthenticatedError()
        return self._token

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning(f"client.session: unreadable session file {self._path}")
            return
        if not isinstance(data, dict):
            return
        token = data.get(TOKEN_KEY)
        user = data.get(USER_KEY)
        self._token = token if isinstance(token, str) and token else None
        self._user = user if isinstance(user, dict) else None

    def save(self, token: str, user: dict[str, Any]) -> None:
        self._token = token
        self._user = dict(user)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(
            json.dumps({TOKEN_KEY: token, USER_KEY: self._user}), encoding="utf-8"
        )
        os.replace(tmp, self._path)
        logger.debug(f"client.session: saved user_id={self._user.get('id')}")

    def clear(self) -> None:
        self._token = None
        self._user = None
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
        logger.debug("client.session: cleared")

    def complete_oauth_redirect(self, url: str) -> dict[str, Any]:
        """Store the session carried by ``/auth?token=..&user=..`` and return the user."""
        params = parse_qs(urlsplit(url).query)
        error = params.get("error", [None])[0]
        if error:
            raise OAuthRedirectError(error)

        token = params.get(TOKEN_KEY, [None])[0]
        raw_user = params.get(USER_KEY, [None])[0]
        if not token or not raw_user:
            raise OAuthRedirectError("Redirect is missing token or user")
        try:
            user = json.loads(raw_user)
        except ValueError as exc:
            raise OAuthRedirectError("Redirect carries malformed user data") from exc
        if not isinstance(user, dict):
            raise OAuthRedirectError("Redirect carries malformed user data")

        self.save(token, user)
        return user


__all__ = [
    "NotAuthenticatedError",
    "OAuthRedirectError",
    "SessionStore",
    "TOKEN_KEY",
    "USER_KEY",
]
