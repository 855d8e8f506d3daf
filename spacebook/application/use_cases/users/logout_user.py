"""Use-case for ending the current session."""

from __future__ import annotations

from spacebook.application.use_cases.users.results import AuthOutcome
from spacebook.domain.users.repositories import SessionAuthority
from spacebook.shared.logging import logger
from spacebook.shared.utils.redirects import is_local_url, resolve_local_url


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionAuthority, default_redirect: str) -> None:
        self._sessions = sessions
        self._default_redirect = default_redirect

    def execute(self, token: str | None, return_url: str | None = None) -> AuthOutcome:
        self._sessions.sign_out(token)
        logger.info("User logged out.")
        if return_url is not None and not is_local_url(return_url):
            logger.warning("auth.logout: ignored non-local return url")
        return AuthOutcome.redirect(resolve_local_url(return_url, self._default_redirect))
