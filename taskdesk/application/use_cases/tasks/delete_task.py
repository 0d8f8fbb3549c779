# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from taskdesk.domain.tasks.exceptions import TaskNotFoundError
from taskdesk.domain.tasks.repositories import TaskRepository
from taskdesk.shared.logging import logger


class DeleteTaskUseCase:
    def __init__(self, *, tasks: TaskRepository) -> None:
        self._tasks = tasks

    def execute(self, owner_id: int, task_pk: int) -> None:
        if not self._tasks.delete(owner_id, task_pk):
            raise TaskNotFoundError(task_pk)
        logger.info(f"tasks.delete: ok user_id={owner_id} id={task_pk}")


__all__ = ["DeleteTaskUseCase"]
