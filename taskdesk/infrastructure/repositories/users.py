# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from taskdesk.domain.users.entities import AuthProvider
from taskdesk.domain.users.entities import User as DomainUser
from taskdesk.domain.users.exceptions import UserAlreadyExistsError
from taskdesk.domain.users.repositories import UserRepository
from taskdesk.infrastructure.db.models import User
from taskdesk.infrastructure.unit_of_work import SessionFactory, unit_of_work_scope


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
        auth_provider=AuthProvider(row.auth_provider),
        provider_user_id=row.provider_user_id,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def find_by_email(self, email: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.email == email).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(
                    email=user.email,
                    password_hash=user.password_hash,
                    auth_provider=user.auth_provider.value,
                    provider_user_id=user.provider_user_id,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            # lost the lookup-then-insert race against another signup
            raise UserAlreadyExistsError() from exc
