# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Synchronous HTTP client for the taskdesk API."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import httpx

from taskdesk.infrastructure.github.client import build_authorize_url
from taskdesk.shared.config import ClientConfig
from taskdesk.shared.logging import logger

from .session import NotAuthenticatedError, SessionStore


class ApiError(Exception):
    def __init__(self, status: int, code: str | None, message: str | None) -> None:
        super().__init__(f"{status} {code or 'error'}: {message or ''}".rstrip(": "))
        self.status = status
        self.code = code
        self.message = message


class TaskdeskClient:
    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        session: SessionStore | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self._config = config or ClientConfig()
        self.session = session or SessionStore(self._config.session_file)
        self._http = http or httpx.Client(
            base_url=self._config.api_url, timeout=self._config.timeout
        )

    def __enter__(self) -> TaskdeskClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        auth: bool = True,
        **kwargs: Any,
    ) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        if auth:
            # checked before any I/O
            headers["Authorization"] = f"Bearer {self.session.require_token()}"
        response = self._http.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            logger.debug(f"client.api: {method} {path} failed status={response.status_code}")
            raise ApiError(response.status_code, body.get("error"), body.get("message"))
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Auth

    def signup(self, email: str, password: str) -> dict[str, Any]:
        data = self._request(
            "POST", "/api/auth/signup", auth=False, json={"email": email, "password": password}
        )
        self.session.save(data["token"], data["user"])
        return data["user"]

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request(
            "POST", "/api/auth/login", auth=False, json={"email": email, "password": password}
        )
        self.session.save(data["token"], data["user"])
        return data["user"]

    def logout(self) -> None:
        self.session.clear()

    def complete_oauth_redirect(self, url: str) -> dict[str, Any]:
        return self.session.complete_oauth_redirect(url)

    def github_authorize_url(self, redirect_uri: str | None = None) -> str:
        if not self._config.github_client_id:
            raise ValueError("GITHUB_CLIENT_ID is not configured")
        return build_authorize_url(self._config.github_client_id, redirect_uri=redirect_uri)

    def me(self) -> dict[str, Any]:
        return self._request("GET", "/api/auth/me")["user"]

    # Tasks

    def list_tasks(self, **filters: Any) -> dict[str, Any]:
        params: dict[str, Any] = {}
        for key, value in filters.items():
            if value is None:
                continue
            if isinstance(value, bool):
                params[key] = "true" if value else "false"
            elif isinstance(value, (list, tuple)):
                params[key] = [str(item) for item in value]
            else:
                params[key] = value
        return self._request("GET", "/api/tasks", params=params)

    def get_task(self, task_pk: int) -> dict[str, Any]:
        return self._request("GET", f"/api/tasks/{task_pk}")

    def create_task(self, title: str, **fields: Any) -> dict[str, Any]:
        return self._request("POST", "/api/tasks", json={"title": title, **fields})

    def update_task(self, task_pk: int, **changes: Any) -> dict[str, Any]:
        return self._request("PATCH", f"/api/tasks/{task_pk}", json=changes)

    def toggle_favorite(self, task_pk: int) -> dict[str, Any]:
        return self._request("POST", f"/api/tasks/{task_pk}/favorite")

    def delete_task(self, task_pk: int) -> None:
        self._request("DELETE", f"/api/tasks/{task_pk}")

    # Files

    def upload_files(self, paths: Iterable[Path | str]) -> list[dict[str, Any]]:
        self.session.require_token()
        files = [("files", (Path(p).name, Path(p).read_bytes())) for p in paths]
        return self._request("POST", "/api/files", files=files)

    def list_files(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/files")["items"]

    def parse_document(self, path: Path | str) -> Mapping[str, Any]:
        self.session.require_token()
        source = Path(path)
        return self._request(
            "POST", "/api/files/parse", files={"file": (source.name, source.read_bytes())}
        )

    def stored_text(self, stored_path: str) -> Mapping[str, Any]:
        return self._request("GET", f"/api/files/{stored_path}/text")


__all__ = ["ApiError", "NotAuthenticatedError", "TaskdeskClient"]
