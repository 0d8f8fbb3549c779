from __future__ import annotations

import json
from pathlib import Path
from urllib.parse import urlencode

import httpx
import pytest

from taskdesk.client import (
    ApiError,
    NotAuthenticatedError,
    OAuthRedirectError,
    SessionStore,
    TaskdeskClient,
)
from taskdesk.shared.config import ClientConfig


@pytest.fixture()
def session_file(tmp_path: Path) -> Path:
    return tmp_path / "state" / "session.json"


def _client(session_file: Path, handler) -> TaskdeskClient:
    config = ClientConfig(
        api_url="http://api.test", github_client_id="cid", session_file=session_file
    )
    http = httpx.Client(base_url=config.api_url, transport=httpx.MockTransport(handler))
    return TaskdeskClient(config, session=SessionStore(session_file), http=http)


def test_login_persists_token_and_user(session_file: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/auth/login"
        assert "Authorization" not in request.headers
        return httpx.Response(
            200, json={"token": "jwt-1", "user": {"id": 3, "email": "a@x.com"}}
        )

    client = _client(session_file, handler)
    user = client.login("a@x.com", "secret123")

    assert user == {"id": 3, "email": "a@x.com"}
    assert json.loads(session_file.read_text()) == {
        "token": "jwt-1",
        "user": {"id": 3, "email": "a@x.com"},
    }
    assert SessionStore(session_file).token == "jwt-1"


def test_protected_call_without_token_makes_no_request(session_file: Path) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={})

    client = _client(session_file, handler)

    with pytest.raises(NotAuthenticatedError):
        client.list_tasks(status=["Todo"])
    with pytest.raises(NotAuthenticatedError):
        client.me()
    assert requests == []


def test_protected_call_sends_bearer_token(session_file: Path) -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["status"] = request.url.params.get_list("status")
        seen["favorite"] = request.url.params.get("favorite")
        return httpx.Response(
            200, json={"items": [], "total": 0, "page": 1, "page_size": 10, "pages": 0}
        )

    SessionStore(session_file).save("jwt-9", {"id": 9, "email": "z@x.com"})
    client = _client(session_file, handler)

    page = client.list_tasks(status=["Todo", "Done"], favorite=True, q=None)

    assert page["total"] == 0
    assert seen == {"auth": "Bearer jwt-9", "status": ["Todo", "Done"], "favorite": "true"}


def test_expired_token_surfaces_as_api_error(session_file: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "token_expired", "message": "Session expired"})

    SessionStore(session_file).save("old", {"id": 1, "email": "a@x.com"})
    client = _client(session_file, handler)

    with pytest.raises(ApiError) as excinfo:
        client.me()

    assert excinfo.value.status == 401
    assert excinfo.value.code == "token_expired"


def test_complete_oauth_redirect_stores_session(session_file: Path) -> None:
    store = SessionStore(session_file)
    url = "http://localhost:5173/auth?" + urlencode(
        {"token": "jwt-gh", "user": json.dumps({"id": 4, "email": "b@x.com"})}
    )

    user = store.complete_oauth_redirect(url)

    assert user == {"id": 4, "email": "b@x.com"}
    assert SessionStore(session_file).user == {"id": 4, "email": "b@x.com"}


def test_complete_oauth_redirect_raises_on_error(session_file: Path) -> None:
    store = SessionStore(session_file)
    url = "http://localhost:5173/auth?" + urlencode(
        {"error": "Failed to get access token from GitHub"}
    )

    with pytest.raises(OAuthRedirectError) as excinfo:
        store.complete_oauth_redirect(url)

    assert excinfo.value.message == "Failed to get access token from GitHub"
    assert not store.is_authenticated
    assert not session_file.exists()


def test_logout_clears_persisted_session(session_file: Path) -> None:
    SessionStore(session_file).save("jwt-1", {"id": 1, "email": "a@x.com"})
    client = _client(session_file, lambda request: httpx.Response(204))

    client.logout()

    assert not session_file.exists()
    assert SessionStore(session_file).token is None


def test_corrupt_session_file_is_ignored(session_file: Path) -> None:
    session_file.parent.mkdir(parents=True)
    session_file.write_text("{not json")

    assert SessionStore(session_file).is_authenticated is False


def test_client_config_reads_vite_aliases(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TASKDESK_API_URL", raising=False)
    monkeypatch.delenv("GITHUB_CLIENT_ID", raising=False)
    monkeypatch.setenv("VITE_API_URL", "http://vite.test/")
    monkeypatch.setenv("VITE_GITHUB_CLIENT_ID", "vite-cid")

    config = ClientConfig(_env_file=None)

    assert config.api_url == "http://vite.test"
    assert config.github_client_id == "vite-cid"


def test_github_authorize_url_offline(session_file: Path) -> None:
    client = _client(session_file, lambda request: httpx.Response(500))

    url = client.github_authorize_url()

    assert url.startswith("https://github.com/login/oauth/authorize?")
    assert "client_id=cid" in url
