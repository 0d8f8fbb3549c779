# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import json
from urllib.parse import urlencode

from flask import Blueprint, Response, jsonify, redirect, request
from pydantic import ValidationError

from taskdesk.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from taskdesk.application.use_cases.users.github_login import GitHubLoginUseCase
from taskdesk.application.use_cases.users.login_user import LoginUserUseCase
from taskdesk.application.use_cases.users.register_user import RegisterUserUseCase
from taskdesk.domain.users.entities import IssuedSession
from taskdesk.domain.users.oauth import MissingAuthorizationCodeError, OAuthNotConfiguredError
from taskdesk.infrastructure.auth import AuthGuard, current_user_id
from taskdesk.infrastructure.github import GitHubOAuthClient
from taskdesk.interfaces.http.dto.auth import AuthSuccessDTO, LoginRequestDTO, SignupRequestDTO
from taskdesk.shared.config import SecurityConfig
from taskdesk.shared.errors import AppError
from taskdesk.shared.errors.validation import raise_validation_error
from taskdesk.shared.logging import logger
from taskdesk.shared.middleware.rate_limit import rate_limit


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _session_payload(session: IssuedSession) -> dict:
    return AuthSuccessDTO.model_validate(
        {"token": session.token, "user": session.user.public_fields()}
    ).model_dump()


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        current_user_use_case: GetCurrentUserUseCase,
        github_login_use_case: GitHubLoginUseCase,
        github_client: GitHubOAuthClient,
        guard: AuthGuard,
        frontend_url: str,
        security: SecurityConfig,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._current_user_use_case = current_user_use_case
        self._github_login_use_case = github_login_use_case
        self._github_client = github_client
        self._guard = guard
        self._frontend_url = frontend_url
        self._security = security

    def signup(self) -> tuple[Response, int]:
        try:
            dto = SignupRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        session = self._register_use_case.execute(dto.email, dto.password)
        logger.info(f"auth.signup: ok user_id={session.user.id} ip={_get_client_ip()}")
        return jsonify(_session_payload(session)), 201

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        session = self._login_use_case.execute(dto.email, dto.password)
        logger.info(f"auth.login: ok user_id={session.user.id} ip={_get_client_ip()}")
        return jsonify(_session_payload(session)), 200

    def me(self) -> tuple[Response, int]:
        user = self._current_user_use_case.execute(current_user_id())
        return jsonify({"user": user.public_fields()}), 200

    def github_authorize(self) -> Response:
        url = self._github_client.authorize_url(
            redirect_uri=request.args.get("redirect_uri"),
            state=request.args.get("state"),
        )
        return redirect(url, code=302)

    def github_callback(self) -> Response:
        code = request.args.get("code")
        error_url = f"{self._frontend_url}/auth"
        try:
            session = self._github_login_use_case.execute(code)
        except (MissingAuthorizationCodeError, OAuthNotConfiguredError):
            # rendered as JSON by the error handler, no redirect
            raise
        except Exception as exc:
            message = exc.message if isinstance(exc, AppError) and exc.message else str(exc)
            logger.exception(f"oauth.github: failed ({type(exc).__name__})")
            return redirect(f"{error_url}?{urlencode({'error': message or 'Authentication failed'})}")

        user_json = json.dumps(session.user.public_fields(), separators=(",", ":"))
        query = urlencode({"token": session.token, "user": user_json})
        return redirect(f"{error_url}?{query}")

    def as_blueprint(self) -> Blueprint:
        limited = rate_limit(self._security)

        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/signup", view_func=limited(self.signup), methods=["POST"])
        bp.add_url_rule("/login", view_func=limited(self.login), methods=["POST"])
        bp.add_url_rule("/me", view_func=self._guard(self.me), methods=["GET"])
        bp.add_url_rule(
            "/github/authorize",
            view_func=self.github_authorize,
            methods=["GET"],
            endpoint="github_authorize",
        )
        bp.add_url_rule(
            "/github/callback",
            view_func=self.github_callback,
            methods=["GET"],
            endpoint="github_callback",
        )
        return bp
