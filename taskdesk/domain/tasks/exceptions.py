# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from taskdesk.shared.errors.base import DomainError


class TaskNotFoundError(DomainError):
    code = "task_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "Task not found"

    def __init__(self, task_pk: int) -> None:
        super().__init__(context={"id": task_pk})


class TaskIdTakenError(DomainError):
    code = "task_id_taken"
    status = HTTPStatus.CONFLICT
    message = "Task id is already in use"

    def __init__(self, task_id: str) -> None:
        super().__init__(context={"task_id": task_id})
