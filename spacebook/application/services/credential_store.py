# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from datetime import UTC, datetime

from spacebook.application.services.password_policy import PasswordPolicy
from spacebook.domain.users.entities import (IdentityError, IdentityResult,
                                             User, normalize)
from spacebook.domain.users.exceptions import UserAlreadyExistsError
from spacebook.domain.users.repositories import (CredentialStore,
                                                 PasswordHasher, UserStore)
from spacebook.shared.logging import logger

ALLOWED_USERNAME_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._@+"
)
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


def invalid_username(username: str | None) -> IdentityError:
    return IdentityError(
        "InvalidUserName",
        f"Username '{username or ''}' is invalid, can only contain letters or digits.",
    )


def duplicate_username(username: str | None) -> IdentityError:
    return IdentityError("DuplicateUserName", f"Username '{username}' is already taken.")


def invalid_email(email: str | None) -> IdentityError:
    return IdentityError("InvalidEmail", f"Email '{email or ''}' is invalid.")


def duplicate_email(email: str | None) -> IdentityError:
    return IdentityError("DuplicateEmail", f"Email '{email}' is already taken.")


class IdentityCredentialStore(CredentialStore):
    """Validates and persists users on top of a plain ``UserStore``."""

    def __init__(
        self,
        *,
        users: UserStore,
        password_hasher: PasswordHasher,
        password_policy: PasswordPolicy,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._password_policy = password_policy

    @property
    def supports_user_email(self) -> bool:
        return True

    def find_by_email(self, email: str) -> User | None:
        normalized = normalize(email)
        if not normalized:
            return None
        return self._users.find_by_normalized_email(normalized)

    def set_username(self, user: User, username: str) -> None:
        user.username = username
        user.normalized_username = normalize(username)

    def set_email(self, user: User, email: str) -> None:
        user.email = email
        user.normalized_email = normalize(email)

    def create(self, user: User, password: str) -> IdentityResult:
        errors = self._validate_user(user)
        errors.extend(self._password_policy.validate(password))
        if errors:
            logger.info(
                f"credential_store.create: rejected codes={[e.code for e in errors]}"
            )
            return IdentityResult.failed(*errors)

        user.password_hash = self._password_hasher.hash(password)
        user.created_at = datetime.now(UTC)
        try:
            persisted = self._users.add(user)
        except UserAlreadyExistsError:
            # lost a race against a concurrent registration; the unique
            # constraint on normalized_email/normalized_username decided it
            logger.warning("credential_store.create: uniqueness constraint violated")
            if user.normalized_email and self._users.find_by_normalized_email(
                user.normalized_email
            ):
                return IdentityResult.failed(duplicate_email(user.email))
            return IdentityResult.failed(duplicate_username(user.username))

        user.id = persisted.id
        logger.info(f"credential_store.create: ok user_id={persisted.id}")
        return IdentityResult.success()

    def _validate_user(self, user: User) -> list[IdentityError]:
        errors: list[IdentityError] = []

        username = user.username
        if not username or any(ch not in ALLOWED_USERNAME_CHARS for ch in username):
            errors.append(invalid_username(username))
        elif user.normalized_username:
            owner = self._users.find_by_normalized_username(user.normalized_username)
            if owner is not None and owner.id != user.id:
                errors.append(duplicate_username(username))

        email = user.email
        if not email or not _EMAIL_RE.match(email.strip()):
            errors.append(invalid_email(email))
        elif user.normalized_email:
            owner = self._users.find_by_normalized_email(user.normalized_email)
            if owner is not None and owner.id != user.id:
                errors.append(duplicate_email(email))

        return errors


__all__ = [
    "ALLOWED_USERNAME_CHARS",
    "IdentityCredentialStore",
    "duplicate_email",
    "duplicate_username",
    "invalid_email",
    "invalid_username",
]
