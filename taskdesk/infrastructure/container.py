# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from taskdesk.application.services.password_hashing import WerkzeugPasswordHasher
from taskdesk.application.use_cases.files.extract_text import ExtractTextUseCase
from taskdesk.application.use_cases.files.list_files import ListFilesUseCase
from taskdesk.application.use_cases.files.upload_files import UploadFilesUseCase
from taskdesk.application.use_cases.tasks.create_task import CreateTaskUseCase
from taskdesk.application.use_cases.tasks.delete_task import DeleteTaskUseCase
from taskdesk.application.use_cases.tasks.get_task import GetTaskUseCase
from taskdesk.application.use_cases.tasks.list_tasks import ListTasksUseCase
from taskdesk.application.use_cases.tasks.update_task import (
    ToggleFavoriteUseCase,
    UpdateTaskUseCase,
)
from taskdesk.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from taskdesk.application.use_cases.users.github_login import GitHubLoginUseCase
from taskdesk.application.use_cases.users.login_user import LoginUserUseCase
from taskdesk.application.use_cases.users.register_user import RegisterUserUseCase
from taskdesk.infrastructure.auth import AuthGuard, JwtTokenService
from taskdesk.infrastructure.db import create_db_engine, create_session_factory
from taskdesk.infrastructure.extractors import DocumentTextExtractor
from taskdesk.infrastructure.github import GitHubOAuthClient
from taskdesk.infrastructure.repositories import (
    SqlAlchemyTaskRepository,
    SqlAlchemyUserRepository,
)
from taskdesk.infrastructure.storage import LocalFileStorage
from taskdesk.interfaces.http.controllers.auth_controller import AuthController
from taskdesk.interfaces.http.controllers.files_controller import FilesController
from taskdesk.interfaces.http.controllers.misc_controller import MiscController
from taskdesk.interfaces.http.controllers.tasks_controller import TasksController
from taskdesk.shared.config import AppConfig


class Container:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    # Infrastructure

    @cached_property
    def engine(self) -> Engine:
        return create_db_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return create_session_factory(self.engine)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(
            self.config.jwt_secret,
            ttl=timedelta(seconds=self.config.token_ttl_seconds),
        )

    @cached_property
    def auth_guard(self) -> AuthGuard:
        return AuthGuard(self.token_service)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def task_repository(self) -> SqlAlchemyTaskRepository:
        return SqlAlchemyTaskRepository(self.session_factory)

    @cached_property
    def github_client(self) -> GitHubOAuthClient:
        return GitHubOAuthClient(self.config.github)

    @cached_property
    def storage(self) -> LocalFileStorage:
        return LocalFileStorage(self.config.storage.directory)

    @cached_property
    def text_extractor(self) -> DocumentTextExtractor:
        return DocumentTextExtractor()

    # Auth use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def get_current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(users=self.user_repository)

    @cached_property
    def github_login_use_case(self) -> GitHubLoginUseCase:
        return GitHubLoginUseCase(
            github=self.github_client,
            users=self.user_repository,
            tokens=self.token_service,
            config=self.config.github,
        )

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            current_user_use_case=self.get_current_user_use_case,
            github_login_use_case=self.github_login_use_case,
            github_client=self.github_client,
            guard=self.auth_guard,
            frontend_url=self.config.frontend_url,
            security=self.config.security,
        )

    @cached_property
    def tasks_controller(self) -> TasksController:
        return TasksController(
            list_tasks=ListTasksUseCase(tasks=self.task_repository),
            get_task=GetTaskUseCase(tasks=self.task_repository),
            create_task=CreateTaskUseCase(tasks=self.task_repository),
            update_task=UpdateTaskUseCase(tasks=self.task_repository),
            toggle_favorite=ToggleFavoriteUseCase(tasks=self.task_repository),
            delete_task=DeleteTaskUseCase(tasks=self.task_repository),
            guard=self.auth_guard,
        )

    @cached_property
    def files_controller(self) -> FilesController:
        return FilesController(
            upload_files=UploadFilesUseCase(storage=self.storage),
            list_files=ListFilesUseCase(storage=self.storage),
            extract_text=ExtractTextUseCase(
                extractor=self.text_extractor, storage=self.storage
            ),
            guard=self.auth_guard,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)
