# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import cached_property

from spacebook.application.services.credential_store import \
    IdentityCredentialStore
from spacebook.application.services.password_hashing import \
    WerkzeugPasswordHasher
from spacebook.application.services.password_policy import PasswordPolicy
from spacebook.application.services.session_authority import \
    TokenSessionAuthority
from spacebook.application.use_cases.users.login_user import LoginUserUseCase
from spacebook.application.use_cases.users.logout_user import LogoutUserUseCase
from spacebook.application.use_cases.users.prepare_login import \
    PrepareLoginViewUseCase
from spacebook.application.use_cases.users.register_user import \
    RegisterUserUseCase
from spacebook.domain.users.entities import User
from spacebook.domain.users.repositories import (CredentialStore,
                                                 SessionAuthority)
from spacebook.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemySessionTokenRepository, SqlAlchemyUserStore)
from spacebook.interfaces.http.controllers.auth_controller import AuthController
from spacebook.shared.config import AppConfig, load_config


class Container:
    """Wires the auth flow; every collaborator can be swapped at construction."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        credential_store: CredentialStore | None = None,
        session_authority: SessionAuthority | None = None,
        user_factory: Callable[[], User] = User,
    ) -> None:
        self.config = config or load_config()
        self._credential_store_override = credential_store
        self._session_authority_override = session_authority
        self.user_factory = user_factory

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def password_policy(self) -> PasswordPolicy:
        return PasswordPolicy.from_config(self.config.password_policy)

    @cached_property
    def user_store(self) -> SqlAlchemyUserStore:
        return SqlAlchemyUserStore()

    @cached_property
    def session_token_repository(self) -> SqlAlchemySessionTokenRepository:
        return SqlAlchemySessionTokenRepository(
            lifetime_seconds=self.config.security.session_lifetime
        )

    @cached_property
    def credential_store(self) -> CredentialStore:
        if self._credential_store_override is not None:
            return self._credential_store_override
        return IdentityCredentialStore(
            users=self.user_store,
            password_hasher=self.password_hasher,
            password_policy=self.password_policy,
        )

    @cached_property
    def session_authority(self) -> SessionAuthority:
        if self._session_authority_override is not None:
            return self._session_authority_override
        return TokenSessionAuthority(
            users=self.user_store,
            tokens=self.session_token_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def prepare_login_use_case(self) -> PrepareLoginViewUseCase:
        return PrepareLoginViewUseCase(
            default_return_url=self.config.redirects.default_return_url
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            credentials=self.credential_store,
            sessions=self.session_authority,
            default_return_url=self.config.redirects.default_return_url,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            credentials=self.credential_store,
            sessions=self.session_authority,
            user_factory=self.user_factory,
            default_return_url=self.config.redirects.default_return_url,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(
            sessions=self.session_authority,
            default_redirect=self.config.redirects.logout_redirect_path,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            prepare_login_use_case=self.prepare_login_use_case,
            login_use_case=self.login_user_use_case,
            register_use_case=self.register_user_use_case,
            logout_use_case=self.logout_user_use_case,
        )


__all__ = ["Container"]
