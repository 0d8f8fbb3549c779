# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from taskdesk.domain.tasks.entities import (
    DEFAULT_TASK_TYPE,
    MAX_PAGE_SIZE,
    TASK_ID_PATTERN,
    TaskPriority,
    TaskSortField,
    TaskStatus,
)
from taskdesk.shared.errors.validation_types import ValidationErrorType


def _check_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise PydanticCustomError(ValidationErrorType.BLANK, "Title cannot be empty", {})
    return value


def _check_task_id(value: str) -> str:
    value = value.strip()
    if not TASK_ID_PATTERN.match(value):
        raise PydanticCustomError(
            ValidationErrorType.TASK_ID_FORMAT,
            "Task id must look like TASK-<digits>",
            {"pattern": TASK_ID_PATTERN.pattern},
        )
    return value


class TaskCreateDTO(BaseModel):
    title: str = Field(max_length=255)
    description: str | None = Field(None, max_length=10_000)
    type: str = Field(DEFAULT_TASK_TYPE, min_length=1, max_length=32)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    favorite: bool = False
    task_id: str | None = Field(None, max_length=32)

    model_config = ConfigDict(extra="forbid")

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _check_title(value)

    @field_validator("task_id")
    @classmethod
    def validate_task_id(cls, value: str | None) -> str | None:
        return _check_task_id(value) if value is not None else None


class TaskUpdateDTO(BaseModel):
    title: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=10_000)
    type: str | None = Field(None, min_length=1, max_length=32)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    favorite: bool | None = None
    task_id: str | None = Field(None, max_length=32)

    model_config = ConfigDict(extra="forbid")

    @field_validator("title", "type", "status", "priority", "favorite", "task_id", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        # only description may be cleared
        if value is None:
            raise PydanticCustomError(ValidationErrorType.BLANK, "Field cannot be null", {})
        return value

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _check_title(value)

    @field_validator("task_id")
    @classmethod
    def validate_task_id(cls, value: str) -> str:
        return _check_task_id(value)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


def _split_multi(values: list[str]) -> list[str]:
    items: list[str] = []
    for raw in values:
        items.extend(part.strip() for part in raw.split(",") if part.strip())
    return items


class TaskListQueryDTO(BaseModel):
    status: list[TaskStatus] = Field(default_factory=list)
    priority: list[TaskPriority] = Field(default_factory=list)
    type: list[str] = Field(default_factory=list)
    favorite: bool | None = None
    q: str | None = Field(None, max_length=255)
    sort: TaskSortField = TaskSortField.CREATED_AT
    order: str = Field("desc", pattern="^(asc|desc)$")
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=MAX_PAGE_SIZE)

    @field_validator("status", "priority", "type", mode="before")
    @classmethod
    def split_comma_values(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_multi([value])
        if isinstance(value, list):
            return _split_multi([str(item) for item in value])
        return value

    @field_validator("q", mode="after")
    @classmethod
    def blank_search_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class TaskPageDTO(BaseModel):
    items: list[dict[str, Any]]
    total: int
    page: int
    page_size: int
    pages: int
