# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from spacebook.domain.users.entities import SessionToken, SignInResult, User
from spacebook.domain.users.repositories import (PasswordHasher,
                                                 SessionAuthority,
                                                 SessionTokenRepository,
                                                 UserStore)
from spacebook.shared.logging import logger


class TokenSessionAuthority(SessionAuthority):
    """Issues opaque, server-side session tokens.

    The token value travels in the session cookie; the HTTP layer owns the
    cookie itself, this class only decides whether a token exists.
    """

    def __init__(
        self,
        *,
        users: UserStore,
        tokens: SessionTokenRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def password_sign_in(
        self, user: User, password: str, *, persistent: bool
    ) -> SignInResult:
        if not user.password_hash or not self._password_hasher.verify(
            password, user.password_hash
        ):
            logger.info(f"session_authority: password check failed user_id={user.id}")
            return SignInResult.failed()
        return SignInResult(succeeded=True, session=self.sign_in(user, persistent=persistent))

    def sign_in(self, user: User, *, persistent: bool) -> SessionToken:
        if user.id is None:
            raise ValueError("cannot sign in a user that has not been persisted")
        session = self._tokens.issue(user.id, persistent=persistent)
        logger.info(
            f"session_authority: signed in user_id={user.id} persistent={persistent}"
        )
        return session

    def sign_out(self, token: str | None) -> None:
        if token:
            self._tokens.revoke(token)

    def authenticate(self, token: str | None) -> User | None:
        if not token:
            return None
        session = self._tokens.find_active(token)
        if session is None:
            return None
        return self._users.find_by_id(session.user_id)


__all__ = ["TokenSessionAuthority"]
