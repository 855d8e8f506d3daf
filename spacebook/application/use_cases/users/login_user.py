# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from spacebook.application.use_cases.users.results import (
    INVALID_EMAIL_MESSAGE, INVALID_LOGIN_MESSAGE, AuthOutcome,
    require_email_support)
from spacebook.domain.users.repositories import (CredentialStore,
                                                 SessionAuthority)
from spacebook.shared.logging import logger
from spacebook.shared.utils.redirects import resolve_local_url


class LoginUserUseCase:
    def __init__(
        self,
        *,
        credentials: CredentialStore,
        sessions: SessionAuthority,
        default_return_url: str = "/",
    ) -> None:
        self._credentials = require_email_support(credentials)
        self._sessions = sessions
        self._default_return_url = default_return_url

    def execute(
        self,
        email: str,
        password: str,
        *,
        remember_me: bool = False,
        return_url: str | None = None,
    ) -> AuthOutcome:
        target = resolve_local_url(return_url, self._default_return_url)
        form = {"email": email}

        user = self._credentials.find_by_email(email)
        if user is None:
            # TODO: merge with INVALID_LOGIN_MESSAGE once product signs off on
            # hiding whether an address is registered
            logger.info("auth.login: unknown email")
            return AuthOutcome.rejected(INVALID_EMAIL_MESSAGE, return_url=target, form=form)

        result = self._sessions.password_sign_in(user, password, persistent=remember_me)
        if not result.succeeded:
            logger.info(f"auth.login: rejected user_id={user.id}")
            return AuthOutcome.rejected(INVALID_LOGIN_MESSAGE, return_url=target, form=form)

        logger.info(f"auth.login: ok user_id={user.id} remember_me={remember_me}")
        return AuthOutcome.redirect(target, session=result.session)
