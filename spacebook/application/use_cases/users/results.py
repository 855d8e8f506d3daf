# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from spacebook.domain.users.entities import SessionToken
from spacebook.domain.users.repositories import CredentialStore
from spacebook.shared.errors.base import ConfigurationError

INVALID_EMAIL_MESSAGE = "Invalid email address."
INVALID_LOGIN_MESSAGE = "Invalid login attempt."
INVALID_REGISTRATION_MESSAGE = "Invalid registration attempt."


@dataclass(slots=True, frozen=True)
class AuthOutcome:
    """What the HTTP layer should do once an auth request has been handled.

    Either ``redirect_to`` is set, or the originating form is shown again with
    ``errors``. ``session`` is only present when a new session was issued.
    """

    return_url: str
    redirect_to: str | None = None
    errors: tuple[str, ...] = ()
    session: SessionToken | None = None
    form: Mapping[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.redirect_to is not None

    @classmethod
    def redirect(
        cls, target: str, *, session: SessionToken | None = None
    ) -> AuthOutcome:
        return cls(return_url=target, redirect_to=target, session=session)

    @classmethod
    def rejected(
        cls,
        *errors: str,
        return_url: str,
        form: Mapping[str, str] | None = None,
    ) -> AuthOutcome:
        return cls(return_url=return_url, errors=tuple(errors), form=dict(form or {}))


def require_email_support(credentials: CredentialStore) -> CredentialStore:
    if not getattr(credentials, "supports_user_email", False):
        raise ConfigurationError(
            "The authentication flow requires a credential store with email support."
        )
    return credentials


__all__ = [
    "AuthOutcome",
    "INVALID_EMAIL_MESSAGE",
    "INVALID_LOGIN_MESSAGE",
    "INVALID_REGISTRATION_MESSAGE",
    "require_email_support",
]
