# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import IntegrityError

from spacebook.domain.users.entities import SessionToken as DomainSessionToken
from spacebook.domain.users.entities import User as DomainUser
from spacebook.domain.users.exceptions import UserAlreadyExistsError
from spacebook.domain.users.repositories import SessionTokenRepository, UserStore
from spacebook.infrastructure.db.models import SessionToken, User
from spacebook.infrastructure.db.session import session_scope


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        normalized_username=row.normalized_username,
        email=row.email,
        normalized_email=row.normalized_email,
        password_hash=row.password_hash,
        created_at=row.created_at,
    )


class SqlAlchemyUserStore(UserStore):
    def find_by_id(self, user_id: int) -> DomainUser | None:
        with session_scope() as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def find_by_normalized_email(self, normalized_email: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.query(User).filter(User.normalized_email == normalized_email).first()
            return _to_domain(row) if row else None

    def find_by_normalized_username(self, normalized_username: str) -> DomainUser | None:
        with session_scope() as session:
            row = (
                session.query(User)
                .filter(User.normalized_username == normalized_username)
                .first()
            )
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with session_scope() as session:
                row = User(
                    username=user.username,
                    normalized_username=user.normalized_username,
                    email=user.email,
                    normalized_email=user.normalized_email,
                    password_hash=user.password_hash,
                    created_at=user.created_at or datetime.now(UTC),
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                persisted = _to_domain(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc
        return persisted


class SqlAlchemySessionTokenRepository(SessionTokenRepository):
    def __init__(self, *, lifetime_seconds: int) -> None:
        self._lifetime = timedelta(seconds=lifetime_seconds)

    def issue(self, user_id: int, *, persistent: bool) -> DomainSessionToken:
        with session_scope() as session:
            token_value = secrets.token_urlsafe(48)
            expires_at = datetime.now(UTC) + self._lifetime
            row = SessionToken(
                user_id=user_id,
                token=token_value,
                persistent=persistent,
                expires_at=expires_at,
            )
            session.add(row)
            return DomainSessionToken(
                user_id=user_id,
                token=token_value,
                expires_at=expires_at,
                persistent=persistent,
            )

    def find_active(self, token: str) -> DomainSessionToken | None:
        with session_scope() as session:
            row = (
                session.query(SessionToken)
                .filter(
                    SessionToken.token == token,
                    SessionToken.expires_at > datetime.now(UTC),
                )
                .first()
            )
            if not row:
                return None
            return DomainSessionToken(
                user_id=row.user_id,
                token=row.token,
                expires_at=row.expires_at,
                persistent=row.persistent,
            )

    def revoke(self, token: str) -> None:
        with session_scope() as session:
            session.query(SessionToken).filter(SessionToken.token == token).delete()
