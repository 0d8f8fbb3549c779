# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from sqlalchemy import asc, case, desc, or_
from sqlalchemy.exc import IntegrityError

from taskdesk.domain.exceptions import InvariantViolation
from taskdesk.domain.tasks.entities import (
    TASK_ID_PREFIX,
    Task as DomainTask,
    TaskPage,
    TaskPriority,
    TaskQuery,
    TaskSortField,
    TaskStatus,
    task_number,
)
from taskdesk.domain.tasks.exceptions import TaskIdTakenError
from taskdesk.domain.tasks.repositories import TaskRepository
from taskdesk.infrastructure.db.models import Task
from taskdesk.infrastructure.unit_of_work import SessionFactory, unit_of_work_scope
from taskdesk.shared.logging import logger

# status and priority sort by declared order, not alphabetically
_STATUS_RANK = case(
    {status.value: rank for rank, status in enumerate(TaskStatus)},
    value=Task.status,
    else_=len(TaskStatus),
)
_PRIORITY_RANK = case(
    {priority.value: rank for rank, priority in enumerate(TaskPriority)},
    value=Task.priority,
    else_=len(TaskPriority),
)

_SORT_COLUMNS = {
    TaskSortField.TASK_ID: Task.task_id,
    TaskSortField.TITLE: Task.title,
    TaskSortField.TYPE: Task.type,
    TaskSortField.STATUS: _STATUS_RANK,
    TaskSortField.PRIORITY: _PRIORITY_RANK,
    TaskSortField.CREATED_AT: Task.created_at,
    TaskSortField.UPDATED_AT: Task.updated_at,
}


def _to_domain(row: Task) -> DomainTask:
    return DomainTask(
        id=row.id,
        owner_id=row.owner_id,
        task_id=row.task_id,
        title=row.title,
        description=row.description,
        type=row.type,
        status=TaskStatus(row.status),
        priority=TaskPriority(row.priority),
        favorite=row.favorite,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _column_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class SqlAlchemyTaskRepository(TaskRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def find_page(self, query: TaskQuery) -> TaskPage:
        with unit_of_work_scope(self._session_factory) as session:
            q = session.query(Task).filter(Task.owner_id == query.owner_id)

            if query.statuses:
                q = q.filter(Task.status.in_([s.value for s in query.statuses]))
            if query.priorities:
                q = q.filter(Task.priority.in_([p.value for p in query.priorities]))
            if query.types:
                q = q.filter(Task.type.in_(query.types))
            if query.favorite is not None:
                q = q.filter(Task.favorite.is_(query.favorite))
            if query.search:
                q = q.filter(
                    or_(
                        Task.title.icontains(query.search, autoescape=True),
                        Task.task_id.icontains(query.search, autoescape=True),
                    )
                )

            total = q.count()

            direction = desc if query.descending else asc
            q = q.order_by(direction(_SORT_COLUMNS[query.sort]), direction(Task.id))
            rows = q.offset(query.offset).limit(query.page_size).all()

            items = [_to_domain(row) for row in rows]

        logger.debug(
            f"tasks.repo: page user_id={query.owner_id} page={query.page} "
            f"n={len(items)} total={total}"
        )
        return TaskPage(items=items, total=total, page=query.page, page_size=query.page_size)

    def get(self, owner_id: int, task_pk: int) -> DomainTask | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(Task)
                .filter(Task.owner_id == owner_id, Task.id == task_pk)
                .first()
            )
            return _to_domain(row) if row else None

    def next_task_number(self, owner_id: int) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            task_ids = (
                session.query(Task.task_id)
                .filter(Task.owner_id == owner_id, Task.task_id.startswith(TASK_ID_PREFIX))
                .all()
            )
        numbers = []
        for (value,) in task_ids:
            try:
                numbers.append(task_number(value))
            except InvariantViolation:
                continue
        return max(numbers, default=0) + 1

    def add(self, task: DomainTask) -> DomainTask:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = Task(
                    owner_id=task.owner_id,
                    task_id=task.task_id,
                    title=task.title,
                    description=task.description,
                    type=task.type,
                    status=task.status.value,
                    priority=task.priority.value,
                    favorite=task.favorite,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            raise TaskIdTakenError(task.task_id) from exc

    def update(
        self, owner_id: int, task_pk: int, changes: Mapping[str, Any]
    ) -> DomainTask | None:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = (
                    session.query(Task)
                    .filter(Task.owner_id == owner_id, Task.id == task_pk)
                    .first()
                )
                if row is None:
                    return None
                for key, value in changes.items():
                    setattr(row, key, _column_value(value))
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            raise TaskIdTakenError(str(changes.get("task_id"))) from exc

    def delete(self, owner_id: int, task_pk: int) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            deleted = (
                session.query(Task)
                .filter(Task.owner_id == owner_id, Task.id == task_pk)
                .delete(synchronize_session=False)
            )
        return bool(deleted)


__all__ = ["SqlAlchemyTaskRepository"]
