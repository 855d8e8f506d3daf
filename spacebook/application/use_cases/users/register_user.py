# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from spacebook.application.use_cases.users.results import (
    INVALID_REGISTRATION_MESSAGE, AuthOutcome, require_email_support)
from spacebook.domain.users.entities import User
from spacebook.domain.users.repositories import (CredentialStore,
                                                 SessionAuthority)
from spacebook.shared.logging import logger
from spacebook.shared.utils.redirects import resolve_local_url


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        credentials: CredentialStore,
        sessions: SessionAuthority,
        user_factory: Callable[[], User] = User,
        default_return_url: str = "/",
    ) -> None:
        self._credentials = require_email_support(credentials)
        self._sessions = sessions
        self._user_factory = user_factory
        self._default_return_url = default_return_url

    def execute(
        self,
        username: str,
        email: str,
        password: str,
        *,
        return_url: str | None = None,
    ) -> AuthOutcome:
        target = resolve_local_url(return_url, self._default_return_url)

        user = self._user_factory()
        self._credentials.set_username(user, username)
        self._credentials.set_email(user, email)

        result = self._credentials.create(user, password)
        if not result.succeeded:
            return AuthOutcome.rejected(
                *(error.description for error in result.errors),
                return_url=target,
                form={"username": username, "email": email},
            )

        session = self._sessions.sign_in(user, persistent=False)
        logger.info(f"auth.register: ok user_id={user.id}")
        return AuthOutcome.redirect(target, session=session)

    def prepare_form(self, return_url: str | None = None) -> AuthOutcome:
        return AuthOutcome.rejected(
            return_url=resolve_local_url(return_url, self._default_return_url)
        )

    def reject_malformed(
        self,
        *,
        username: str = "",
        email: str = "",
        return_url: str | None = None,
    ) -> AuthOutcome:
        """Outcome for a request that failed format validation."""
        target = resolve_local_url(return_url, self._default_return_url)
        return AuthOutcome.rejected(
            INVALID_REGISTRATION_MESSAGE,
            return_url=target,
            form={"username": username, "email": email},
        )
