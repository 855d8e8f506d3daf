# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import IdentityResult, SessionToken, SignInResult, User


class UserStore(Protocol):
    def find_by_id(self, user_id: int) -> User | None: ...
    def find_by_normalized_email(self, normalized_email: str) -> User | None: ...
    def find_by_normalized_username(self, normalized_username: str) -> User | None: ...
    def add(self, user: User) -> User: ...


class SessionTokenRepository(Protocol):
    def issue(self, user_id: int, *, persistent: bool) -> SessionToken: ...
    def find_active(self, token: str) -> SessionToken | None: ...
    def revoke(self, token: str) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class CredentialStore(Protocol):
    """Persists users and their hashed credentials."""

    @property
    def supports_user_email(self) -> bool: ...

    def find_by_email(self, email: str) -> User | None: ...
    def set_username(self, user: User, username: str) -> None: ...
    def set_email(self, user: User, email: str) -> None: ...
    def create(self, user: User, password: str) -> IdentityResult: ...


class SessionAuthority(Protocol):
    """Checks credentials and owns the lifecycle of session tokens."""

    def password_sign_in(
        self, user: User, password: str, *, persistent: bool
    ) -> SignInResult: ...

    def sign_in(self, user: User, *, persistent: bool) -> SessionToken: ...
    def sign_out(self, token: str | None) -> None: ...
    def authenticate(self, token: str | None) -> User | None: ...
