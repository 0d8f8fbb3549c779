# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Provider-side identity types for the GitHub sign-in bridge."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from taskdesk.shared.errors.base import DomainError


@dataclass(slots=True, frozen=True)
class GitHubProfile:

    id: int
    login: str
    email: str | None = None


@dataclass(slots=True, frozen=True)
class GitHubEmail:

    email: str
    primary: bool = False
    verified: bool = False


def resolve_identity(
    profile: GitHubProfile, emails: Sequence[GitHubEmail] | None
) -> tuple[str, bool]:
    """Email to sign in with and whether GitHub vouches for it.

    Public profile email first (GitHub only publishes verified ones), then
    the primary address with its own flag, then the unverified
    ``{login}@github.com`` placeholder.
    """
    if profile.email:
        return profile.email, True
    for entry in emails or ():
        if entry.primary and entry.email:
            return entry.email, entry.verified
    return f"{profile.login}@github.com", False


def resolve_email(profile: GitHubProfile, emails: Sequence[GitHubEmail] | None) -> str:
    """Public profile email, else the primary address, else ``{login}@github.com``."""
    return resolve_identity(profile, emails)[0]


class MissingAuthorizationCodeError(DomainError):
    code = "authorization_code_required"
    status = HTTPStatus.BAD_REQUEST
    message = "Authorization code is required"


class OAuthNotConfiguredError(DomainError):
    code = "oauth_not_configured"
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "GitHub OAuth configuration is missing"

    def __init__(self, details: Mapping[str, Any]) -> None:
        super().__init__(context={"details": dict(details)})


class OAuthProviderError(DomainError):
    """Any failure while talking to the provider; rendered as an error redirect."""

    code = "oauth_provider_error"
    status = HTTPStatus.BAD_GATEWAY

    def __init__(self, message: str, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message=message, context=context)


class UnverifiedEmailError(OAuthProviderError):
    code = "oauth_email_unverified"

    def __init__(self) -> None:
        super().__init__("GitHub email is not verified; sign in with your password instead")


class TokenExchangeError(OAuthProviderError):
    code = "oauth_token_exchange_failed"

    def __init__(self, description: str | None = None) -> None:
        message = "Failed to get access token from GitHub"
        if description:
            message = f"{message}: {description}"
        super().__init__(message)
