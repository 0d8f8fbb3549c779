# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from taskdesk.domain.tasks.entities import (
    DEFAULT_TASK_TYPE,
    Task,
    TaskPriority,
    TaskStatus,
    format_task_id,
)
from taskdesk.domain.tasks.repositories import TaskRepository
from taskdesk.shared.logging import logger


@dataclass(slots=True, frozen=True)
class CreateTaskInput:
    title: str
    description: str | None = None
    type: str = DEFAULT_TASK_TYPE
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    favorite: bool = False
    task_id: str | None = None


class CreateTaskUseCase:
    def __init__(self, *, tasks: TaskRepository) -> None:
        self._tasks = tasks

    def execute(self, owner_id: int, data: CreateTaskInput) -> Task:
        task_id = data.task_id or format_task_id(self._tasks.next_task_number(owner_id))
        task = Task(
            id=0,
            owner_id=owner_id,
            task_id=task_id,
            title=data.title.strip(),
            description=data.description,
            type=data.type,
            status=data.status,
            priority=data.priority,
            favorite=data.favorite,
        )
        created = self._tasks.add(task)
        logger.info(f"tasks.create: ok user_id={owner_id} task_id={created.task_id}")
        return created


__all__ = ["CreateTaskInput", "CreateTaskUseCase"]
