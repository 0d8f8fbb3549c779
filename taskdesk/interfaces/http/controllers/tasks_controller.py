# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from time import perf_counter

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from taskdesk.application.use_cases.tasks.create_task import CreateTaskInput, CreateTaskUseCase
from taskdesk.application.use_cases.tasks.delete_task import DeleteTaskUseCase
from taskdesk.application.use_cases.tasks.get_task import GetTaskUseCase
from taskdesk.application.use_cases.tasks.list_tasks import ListTasksUseCase
from taskdesk.application.use_cases.tasks.update_task import (
    ToggleFavoriteUseCase,
    UpdateTaskUseCase,
)
from taskdesk.domain.tasks.entities import TaskQuery
from taskdesk.infrastructure.auth import AuthGuard, current_user_id
from taskdesk.interfaces.http.dto.tasks import (
    TaskCreateDTO,
    TaskListQueryDTO,
    TaskPageDTO,
    TaskUpdateDTO,
)
from taskdesk.shared.errors.validation import raise_validation_error
from taskdesk.shared.logging import logger

_MULTI_PARAMS = ("status", "priority", "type")


class TasksController:
    def __init__(
        self,
        *,
        list_tasks: ListTasksUseCase,
        get_task: GetTaskUseCase,
        create_task: CreateTaskUseCase,
        update_task: UpdateTaskUseCase,
        toggle_favorite: ToggleFavoriteUseCase,
        delete_task: DeleteTaskUseCase,
        guard: AuthGuard,
    ) -> None:
        self._list_tasks = list_tasks
        self._get_task = get_task
        self._create_task = create_task
        self._update_task = update_task
        self._toggle_favorite = toggle_favorite
        self._delete_task = delete_task
        self._guard = guard

    def list_tasks(self) -> tuple[Response, int]:
        t0 = perf_counter()
        user_id = current_user_id()
        params: dict[str, object] = {
            key: value for key, value in request.args.items() if key not in _MULTI_PARAMS
        }
        for key in _MULTI_PARAMS:
            values = request.args.getlist(key)
            if values:
                params[key] = values
        try:
            dto = TaskListQueryDTO.model_validate(params)
        except ValidationError as exc:
            raise_validation_error(exc)

        page = self._list_tasks.execute(
            TaskQuery(
                owner_id=user_id,
                statuses=tuple(dto.status),
                priorities=tuple(dto.priority),
                types=tuple(dto.type),
                favorite=dto.favorite,
                search=dto.q,
                sort=dto.sort,
                descending=dto.order == "desc",
                page=dto.page,
                page_size=dto.page_size,
            )
        )
        dt = (perf_counter() - t0) * 1000
        logger.info(
            f"tasks.list: ok (user_id={user_id}, n={len(page.items)}, "
            f"total={page.total}, dt_ms={dt:.0f})"
        )
        payload = TaskPageDTO(
            items=[task.to_dict() for task in page.items],
            total=page.total,
            page=page.page,
            page_size=page.page_size,
            pages=page.pages,
        )
        return jsonify(payload.model_dump()), 200

    def create(self) -> tuple[Response, int]:
        try:
            dto = TaskCreateDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        task = self._create_task.execute(current_user_id(), CreateTaskInput(**dto.model_dump()))
        return jsonify(task.to_dict()), 201

    def get(self, task_pk: int) -> tuple[Response, int]:
        task = self._get_task.execute(current_user_id(), task_pk)
        return jsonify(task.to_dict()), 200

    def update(self, task_pk: int) -> tuple[Response, int]:
        try:
            dto = TaskUpdateDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        task = self._update_task.execute(current_user_id(), task_pk, dto.changes())
        return jsonify(task.to_dict()), 200

    def toggle_favorite(self, task_pk: int) -> tuple[Response, int]:
        task = self._toggle_favorite.execute(current_user_id(), task_pk)
        return jsonify(task.to_dict()), 200

    def delete(self, task_pk: int) -> tuple[str, int]:
        self._delete_task.execute(current_user_id(), task_pk)
        return "", 204

    def as_blueprint(self) -> Blueprint:
        guard = self._guard
        bp = Blueprint("tasks", __name__, url_prefix="/api/tasks")
        bp.add_url_rule("", view_func=guard(self.list_tasks), methods=["GET"], endpoint="list")
        bp.add_url_rule("", view_func=guard(self.create), methods=["POST"], endpoint="create")
        bp.add_url_rule(
            "/<int:task_pk>", view_func=guard(self.get), methods=["GET"], endpoint="get"
        )
        bp.add_url_rule(
            "/<int:task_pk>", view_func=guard(self.update), methods=["PATCH"], endpoint="update"
        )
        bp.add_url_rule(
            "/<int:task_pk>", view_func=guard(self.delete), methods=["DELETE"], endpoint="delete"
        )
        bp.add_url_rule(
            "/<int:task_pk>/favorite",
            view_func=guard(self.toggle_favorite),
            methods=["POST"],
            endpoint="favorite",
        )
        return bp
