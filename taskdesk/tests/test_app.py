from __future__ import annotations

from io import BytesIO
from pathlib import Path

from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy import create_engine

from taskdesk.app import create_app
from taskdesk.infrastructure.container import Container
from taskdesk.interfaces.http.controllers.misc_controller import MiscController
from taskdesk.shared.config import SecurityConfig, StorageConfig

from .conftest import bearer, build_config, signup


def test_health_reports_database(client: FlaskClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "database": "ok"}
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Request-ID"]


def test_health_reports_unreachable_database(tmp_path: Path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'app.db'}")
    app = Flask(__name__)
    app.register_blueprint(MiscController(engine=engine).as_blueprint())

    response = app.test_client().get("/api/health")

    assert response.status_code == 503
    assert response.get_json() == {"ok": False, "database": "error"}
    engine.dispose()


def test_request_id_is_echoed(client: FlaskClient) -> None:
    response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_unknown_route_is_plain_404(client: FlaskClient) -> None:
    assert client.get("/api/nope").status_code == 404


def test_login_is_rate_limited(tmp_path: Path) -> None:
    config = build_config(
        tmp_path,
        security=SecurityConfig(
            enable_rate_limit=True, rate_limit_requests=2, rate_limit_window=60, _env_file=None
        ),
    )
    container = Container(config)
    client = create_app(container=container).test_client()
    payload = {"email": "nobody@example.com", "password": "whatever1"}

    statuses = [client.post("/api/auth/login", json=payload).status_code for _ in range(3)]

    assert statuses == [401, 401, 429]
    assert client.post("/api/auth/login", json=payload).get_json()["error"] == "rate_limited"
    container.engine.dispose()


def test_upload_size_is_bounded(tmp_path: Path) -> None:
    config = build_config(
        tmp_path,
        storage=StorageConfig(directory=tmp_path / "up", max_upload_bytes=1024, _env_file=None),
    )
    container = Container(config)
    client = create_app(container=container).test_client()
    token = signup(client)

    response = client.post(
        "/api/files",
        data={"files": [(BytesIO(b"x" * 4096), "big.pdf")]},
        headers=bearer(token),
        content_type="multipart/form-data",
    )

    assert response.status_code == 413
    assert response.get_json() == {
        "error": "payload_too_large",
        "message": "Request body exceeds the upload limit",
        "context": {"limit_bytes": 1024},
    }
    container.engine.dispose()
