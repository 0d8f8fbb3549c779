# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from taskdesk.domain.exceptions import InvariantViolation

TASK_ID_PREFIX = "TASK-"
TASK_ID_PATTERN = re.compile(r"^TASK-\d+$")
DEFAULT_TASK_TYPE = "Feature"
MAX_PAGE_SIZE = 100


class TaskStatus(str, Enum):
    BACKLOG = "Backlog"
    TODO = "Todo"
    IN_PROGRESS = "In Progress"
    DONE = "Done"
    CANCELED = "Canceled"


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskSortField(str, Enum):
    TASK_ID = "task_id"
    TITLE = "title"
    TYPE = "type"
    STATUS = "status"
    PRIORITY = "priority"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


def format_task_id(number: int) -> str:
    return f"{TASK_ID_PREFIX}{number:04d}"


def task_number(task_id: str) -> int:
    if not TASK_ID_PATTERN.match(task_id):
        raise InvariantViolation("must look like TASK-<digits>", field="task_id")
    return int(task_id[len(TASK_ID_PREFIX):])


@dataclass(slots=True)
class Task:

    id: int
    owner_id: int
    task_id: str
    title: str
    description: str | None = None
    type: str = DEFAULT_TASK_TYPE
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    favorite: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise InvariantViolation("must not be blank", field="title")
        task_number(self.task_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "status": self.status.value,
            "priority": self.priority.value,
            "favorite": self.favorite,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(slots=True, frozen=True)
class TaskQuery:

    owner_id: int
    statuses: tuple[TaskStatus, ...] = ()
    priorities: tuple[TaskPriority, ...] = ()
    types: tuple[str, ...] = ()
    favorite: bool | None = None
    search: str | None = None
    sort: TaskSortField = TaskSortField.CREATED_AT
    descending: bool = True
    page: int = 1
    page_size: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise InvariantViolation("must be >= 1", field="page")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise InvariantViolation(f"must be between 1 and {MAX_PAGE_SIZE}", field="page_size")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(slots=True)
class TaskPage:

    items: list[Task] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0
