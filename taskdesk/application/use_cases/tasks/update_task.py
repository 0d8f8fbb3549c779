# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from taskdesk.domain.exceptions import InvariantViolation
from taskdesk.domain.tasks.entities import Task, task_number
from taskdesk.domain.tasks.exceptions import TaskNotFoundError
from taskdesk.domain.tasks.repositories import TaskRepository
from taskdesk.shared.logging import logger

_UPDATABLE = frozenset(
    {"task_id", "title", "description", "type", "status", "priority", "favorite"}
)


class UpdateTaskUseCase:
    def __init__(self, *, tasks: TaskRepository) -> None:
        self._tasks = tasks

    def execute(self, owner_id: int, task_pk: int, changes: Mapping[str, Any]) -> Task:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise InvariantViolation(f"unknown fields {sorted(unknown)}")
        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                raise InvariantViolation("must not be blank", field="title")
            changes = {**changes, "title": title}
        if changes.get("task_id") is not None:
            task_number(changes["task_id"])

        updated = self._tasks.update(owner_id, task_pk, changes)
        if updated is None:
            raise TaskNotFoundError(task_pk)
        logger.info(
            f"tasks.update: ok user_id={owner_id} id={task_pk} fields={sorted(changes)}"
        )
        return updated


class ToggleFavoriteUseCase:
    def __init__(self, *, tasks: TaskRepository) -> None:
        self._tasks = tasks

    def execute(self, owner_id: int, task_pk: int) -> Task:
        current = self._tasks.get(owner_id, task_pk)
        if current is None:
            raise TaskNotFoundError(task_pk)
        updated = self._tasks.update(owner_id, task_pk, {"favorite": not current.favorite})
        if updated is None:
            raise TaskNotFoundError(task_pk)
        return updated


__all__ = ["ToggleFavoriteUseCase", "UpdateTaskUseCase"]
