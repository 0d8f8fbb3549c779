# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from .entities import Task, TaskPage, TaskQuery


class TaskRepository(Protocol):
    def find_page(self, query: TaskQuery) -> TaskPage: ...
    def get(self, owner_id: int, task_pk: int) -> Task | None: ...
    def next_task_number(self, owner_id: int) -> int: ...
    def add(self, task: Task) -> Task: ...
    def update(self, owner_id: int, task_pk: int, changes: Mapping[str, Any]) -> Task | None: ...
    def delete(self, owner_id: int, task_pk: int) -> bool: ...
