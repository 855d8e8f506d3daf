# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Request, Response

from spacebook.domain.users.entities import SessionToken
from spacebook.shared.config import load_config


def read_session_token(request: Request) -> str | None:
    config = load_config()
    return request.cookies.get(config.security.session_cookie_name) or None


def write_session_cookie(response: Response, session: SessionToken) -> None:
    """Attach the session cookie; only persistent sessions outlive the browser."""
    config = load_config()
    max_age = config.security.session_lifetime if session.persistent else None
    response.set_cookie(
        config.security.session_cookie_name,
        session.token,
        max_age=max_age,
        path="/",
        httponly=True,
        samesite=config.security.cookie_samesite,
        secure=config.security.cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    config = load_config()
    response.delete_cookie(
        config.security.session_cookie_name,
        path="/",
        httponly=True,
        samesite=config.security.cookie_samesite,
        secure=config.security.cookie_secure,
    )


def clear_external_cookie(response: Response) -> None:
    config = load_config()
    response.delete_cookie(
        config.security.external_cookie_name,
        path="/",
        httponly=True,
        samesite=config.security.cookie_samesite,
        secure=config.security.cookie_secure,
    )


__all__ = [
    "clear_external_cookie",
    "clear_session_cookie",
    "read_session_token",
    "write_session_cookie",
]
