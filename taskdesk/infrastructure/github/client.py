# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""GitHub OAuth adapter (authorization-code flow)."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

import httpx

from taskdesk.application.interfaces import GitHubOAuthPort
from taskdesk.domain.users.oauth import (
    GitHubEmail,
    GitHubProfile,
    OAuthNotConfiguredError,
    OAuthProviderError,
    TokenExchangeError,
)
from taskdesk.infrastructure.resilience import call_with_retries
from taskdesk.shared.config import GitHubConfig
from taskdesk.shared.logging import logger

AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"
API_URL = "https://api.github.com"


def build_authorize_url(
    client_id: str,
    *,
    scope: str = "user:email",
    redirect_uri: str | None = None,
    state: str | None = None,
) -> str:
    params = {"client_id": client_id, "scope": scope}
    if redirect_uri:
        params["redirect_uri"] = redirect_uri
    if state:
        params["state"] = state
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


class GitHubOAuthClient(GitHubOAuthPort):
    def __init__(self, config: GitHubConfig, *, http: httpx.Client | None = None) -> None:
        self._config = config
        self._http = http or httpx.Client(timeout=config.timeout)

    def authorize_url(self, *, redirect_uri: str | None = None, state: str | None = None) -> str:
        if not self._config.client_id:
            raise OAuthNotConfiguredError(self._config.missing_details())
        return build_authorize_url(
            self._config.client_id,
            scope=self._config.scope,
            redirect_uri=redirect_uri,
            state=state,
        )

    def exchange_code(self, code: str) -> str:
        # single-use code, never retried
        try:
            response = self._http.post(
                TOKEN_URL,
                data={
                    "client_id": self._config.client_id,
                    "client_secret": self._config.client_secret,
                    "code": code,
                },
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.warning(f"github.token: transport error {type(exc).__name__}")
            raise OAuthProviderError(f"Could not reach GitHub: {exc}") from exc

        payload = self._json(response)
        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            description = payload.get("error_description") if isinstance(payload, dict) else None
            logger.info(
                f"github.token: no access token status={response.status_code} "
                f"error={payload.get('error') if isinstance(payload, dict) else None}"
            )
            raise TokenExchangeError(description)

        logger.debug("github.token: ok")
        return str(access_token)

    def fetch_profile(self, access_token: str) -> GitHubProfile:
        payload = self._get("/user", access_token)
        if not isinstance(payload, dict) or "id" not in payload or "login" not in payload:
            raise OAuthProviderError("Unexpected GitHub profile response")
        profile = GitHubProfile(
            id=int(payload["id"]),
            login=str(payload["login"]),
            email=payload.get("email") or None,
        )
        logger.debug(f"github.user: ok id={profile.id} has_email={bool(profile.email)}")
        return profile

    def fetch_emails(self, access_token: str) -> list[GitHubEmail]:
        payload = self._get("/user/emails", access_token)
        if not isinstance(payload, list):
            raise OAuthProviderError("Unexpected GitHub emails response")
        emails = [
            GitHubEmail(
                email=str(item.get("email") or ""),
                primary=bool(item.get("primary")),
                verified=bool(item.get("verified")),
            )
            for item in payload
            if isinstance(item, dict)
        ]
        logger.debug(f"github.emails: ok n={len(emails)}")
        return emails

    def _get(self, path: str, access_token: str) -> Any:
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/vnd.github+json",
        }
        try:
            response = call_with_retries(
                self._http.get,
                f"{API_URL}{path}",
                headers=headers,
                max_retries=self._config.max_retries,
                backoff_base=self._config.backoff_base,
            )
        except httpx.HTTPError as exc:
            logger.warning(f"github.api: transport error path={path} {type(exc).__name__}")
            raise OAuthProviderError(f"Could not reach GitHub: {exc}") from exc

        if response.is_error:
            payload = self._json(response)
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.info(f"github.api: error path={path} status={response.status_code}")
            raise OAuthProviderError(
                message or f"GitHub API error ({response.status_code})",
                context={"status": response.status_code},
            )
        return self._json(response)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise OAuthProviderError(
                f"Invalid response from GitHub ({response.status_code})"
            ) from exc

    def close(self) -> None:
        self._http.close()


__all__ = ["API_URL", "AUTHORIZE_URL", "GitHubOAuthClient", "TOKEN_URL", "build_authorize_url"]
