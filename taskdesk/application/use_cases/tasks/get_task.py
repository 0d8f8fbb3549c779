# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from taskdesk.domain.tasks.entities import Task
from taskdesk.domain.tasks.exceptions import TaskNotFoundError
from taskdesk.domain.tasks.repositories import TaskRepository


class GetTaskUseCase:
    def __init__(self, *, tasks: TaskRepository) -> None:
        self._tasks = tasks

    def execute(self, owner_id: int, task_pk: int) -> Task:
        task = self._tasks.get(owner_id, task_pk)
        if task is None:
            raise TaskNotFoundError(task_pk)
        return task


__all__ = ["GetTaskUseCase"]
