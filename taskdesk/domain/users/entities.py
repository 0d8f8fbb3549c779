# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class AuthProvider(str, Enum):
    LOCAL = "local"
    GITHUB = "github"


@dataclass(slots=True, frozen=True)
class User:

    id: int
    email: str
    password_hash: str | None
    created_at: datetime
    auth_provider: AuthProvider = AuthProvider.LOCAL
    provider_user_id: str | None = None

    @property
    def has_local_password(self) -> bool:
        return self.auth_provider is AuthProvider.LOCAL and bool(self.password_hash)

    def public_fields(self) -> dict[str, Any]:
        return {"id": self.id, "email": self.email}


@dataclass(slots=True, frozen=True)
class SessionClaims:

    user_id: int
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class IssuedSession:
    """A freshly signed token together with the user it was issued for."""

    token: str
    claims: SessionClaims
    user: User
