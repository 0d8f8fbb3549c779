# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from taskdesk.domain.tasks.entities import TaskPage, TaskQuery
from taskdesk.domain.tasks.repositories import TaskRepository


class ListTasksUseCase:
    def __init__(self, *, tasks: TaskRepository) -> None:
        self._tasks = tasks

    def execute(self, query: TaskQuery) -> TaskPage:
        return self._tasks.find_page(query)


__all__ = ["ListTasksUseCase"]
