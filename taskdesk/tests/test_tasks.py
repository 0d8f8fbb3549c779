from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from taskdesk.domain.exceptions import InvariantViolation
from taskdesk.domain.tasks.entities import TaskQuery, format_task_id, task_number

from .conftest import bearer, signup


def _create(client: FlaskClient, headers: dict[str, str], **fields) -> dict:
    response = client.post("/api/tasks", json=fields, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_task_id_helpers() -> None:
    assert format_task_id(7) == "TASK-0007"
    assert format_task_id(12345) == "TASK-12345"
    assert task_number("TASK-0042") == 42
    with pytest.raises(InvariantViolation):
        task_number("BUG-1")


def test_task_query_bounds() -> None:
    with pytest.raises(InvariantViolation):
        TaskQuery(owner_id=1, page=0)
    with pytest.raises(InvariantViolation):
        TaskQuery(owner_id=1, page_size=101)
    assert TaskQuery(owner_id=1, page=3, page_size=20).offset == 40


def test_tasks_require_token(client: FlaskClient) -> None:
    assert client.get("/api/tasks").status_code == 401


def test_create_applies_defaults_and_numbers_ids(client: FlaskClient, auth_headers) -> None:
    first = _create(client, auth_headers, title="Write docs")
    second = _create(client, auth_headers, title="Fix bug", type="Bug", priority="High")

    assert first["task_id"] == "TASK-0001"
    assert first["status"] == "Todo"
    assert first["priority"] == "Medium"
    assert first["type"] == "Feature"
    assert first["favorite"] is False
    assert second["task_id"] == "TASK-0002"
    assert second["priority"] == "High"


def test_create_requires_title(client: FlaskClient, auth_headers) -> None:
    response = client.post("/api/tasks", json={"title": "   "}, headers=auth_headers)

    assert response.status_code == 422
    assert response.get_json()["context"]["fields"] == ["title"]


def test_duplicate_task_id_is_conflict(client: FlaskClient, auth_headers) -> None:
    _create(client, auth_headers, title="One", task_id="TASK-0100")

    response = client.post(
        "/api/tasks", json={"title": "Two", "task_id": "TASK-0100"}, headers=auth_headers
    )

    assert response.status_code == 409
    assert response.get_json()["error"] == "task_id_taken"
    assert _create(client, auth_headers, title="Three")["task_id"] == "TASK-0101"


def test_filters_and_search(client: FlaskClient, auth_headers) -> None:
    _create(client, auth_headers, title="Login page", status="Todo", priority="High")
    _create(client, auth_headers, title="Signup page", status="Done", priority="Low")
    _create(client, auth_headers, title="Dashboard", status="In Progress", type="Bug")

    by_status = client.get("/api/tasks?status=Todo,Done", headers=auth_headers).get_json()
    assert {t["title"] for t in by_status["items"]} == {"Login page", "Signup page"}

    repeated = client.get(
        "/api/tasks?priority=High&priority=Low", headers=auth_headers
    ).get_json()
    assert repeated["total"] == 2

    by_type = client.get("/api/tasks?type=Bug", headers=auth_headers).get_json()
    assert [t["title"] for t in by_type["items"]] == ["Dashboard"]

    search = client.get("/api/tasks?q=PAGE", headers=auth_headers).get_json()
    assert search["total"] == 2

    by_id = client.get("/api/tasks?q=task-0003", headers=auth_headers).get_json()
    assert [t["title"] for t in by_id["items"]] == ["Dashboard"]


def test_status_and_priority_sort_by_declared_order(client: FlaskClient, auth_headers) -> None:
    for title, status, priority in [
        ("a", "Done", "Low"),
        ("b", "Backlog", "High"),
        ("c", "In Progress", "Medium"),
        ("d", "Canceled", "Low"),
        ("e", "Todo", "High"),
    ]:
        _create(client, auth_headers, title=title, status=status, priority=priority)

    by_status = client.get(
        "/api/tasks?sort=status&order=asc", headers=auth_headers
    ).get_json()
    assert [t["status"] for t in by_status["items"]] == [
        "Backlog",
        "Todo",
        "In Progress",
        "Done",
        "Canceled",
    ]

    by_priority = client.get(
        "/api/tasks?sort=priority&order=desc", headers=auth_headers
    ).get_json()
    assert [t["priority"] for t in by_priority["items"]] == [
        "High",
        "High",
        "Medium",
        "Low",
        "Low",
    ]


def test_pagination(client: FlaskClient, auth_headers) -> None:
    for i in range(12):
        _create(client, auth_headers, title=f"Task {i}")

    first = client.get(
        "/api/tasks?sort=task_id&order=asc&page_size=5", headers=auth_headers
    ).get_json()
    last = client.get(
        "/api/tasks?sort=task_id&order=asc&page_size=5&page=3", headers=auth_headers
    ).get_json()

    assert first["total"] == 12
    assert first["pages"] == 3
    assert [t["task_id"] for t in first["items"]][0] == "TASK-0001"
    assert [t["task_id"] for t in last["items"]] == ["TASK-0011", "TASK-0012"]


@pytest.mark.parametrize("query", ["page=0", "page_size=101", "sort=owner", "order=up", "status=Nope"])
def test_invalid_list_query_is_422(client: FlaskClient, auth_headers, query: str) -> None:
    assert client.get(f"/api/tasks?{query}", headers=auth_headers).status_code == 422


def test_update_toggle_and_delete(client: FlaskClient, auth_headers) -> None:
    task = _create(client, auth_headers, title="Draft")

    updated = client.patch(
        f"/api/tasks/{task['id']}",
        json={"title": "Final", "status": "Done", "description": None},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.get_json()["title"] == "Final"
    assert updated.get_json()["status"] == "Done"

    starred = client.post(f"/api/tasks/{task['id']}/favorite", headers=auth_headers)
    assert starred.get_json()["favorite"] is True
    unstarred = client.post(f"/api/tasks/{task['id']}/favorite", headers=auth_headers)
    assert unstarred.get_json()["favorite"] is False

    favorites = client.get("/api/tasks?favorite=true", headers=auth_headers).get_json()
    assert favorites["total"] == 0

    assert client.delete(f"/api/tasks/{task['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/tasks/{task['id']}", headers=auth_headers).status_code == 404


def test_update_rejects_null_title(client: FlaskClient, auth_headers) -> None:
    task = _create(client, auth_headers, title="Draft")

    response = client.patch(f"/api/tasks/{task['id']}", json={"title": None}, headers=auth_headers)

    assert response.status_code == 422


def test_other_users_tasks_are_not_visible(client: FlaskClient, auth_headers) -> None:
    task = _create(client, auth_headers, title="Private")
    other = bearer(signup(client, email="mallory@example.com"))

    assert client.get(f"/api/tasks/{task['id']}", headers=other).status_code == 404
    assert client.patch(
        f"/api/tasks/{task['id']}", json={"title": "Mine"}, headers=other
    ).status_code == 404
    assert client.delete(f"/api/tasks/{task['id']}", headers=other).status_code == 404
    assert client.get("/api/tasks", headers=other).get_json()["total"] == 0
    assert _create(client, other, title="Theirs")["task_id"] == "TASK-0001"
