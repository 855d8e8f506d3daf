# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import wraps
from typing import cast
from urllib.parse import urlencode

from flask import Request, current_app, flash, g, redirect, request

from spacebook.domain.users.entities import User
from spacebook.domain.users.repositories import SessionAuthority
from spacebook.interfaces.http.cookies import clear_session_cookie, read_session_token
from spacebook.shared.config import load_config
from spacebook.shared.logging import logger

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."
EXTENSION_KEY = "spacebook.session_authority"


class AuthedRequest(Request):
    user: User


def authed_request() -> AuthedRequest:
    """Return the current request cast to include authentication attributes."""
    return cast(AuthedRequest, request)


def session_authority() -> SessionAuthority:
    return cast(SessionAuthority, current_app.extensions[EXTENSION_KEY])


def _login_redirect():
    config = load_config()
    target = request.full_path if request.query_string else request.path
    return redirect(f"{config.redirects.login_path}?{urlencode({'returnUrl': target})}")


def auth_required(f):
    @wraps(f)
    def inner(*a, **kw):
        token = read_session_token(request)
        if not token:
            logger.debug(f"auth: anonymous request to {request.method} {request.path}")
            return _login_redirect()

        user = session_authority().authenticate(token)
        if user is None:
            logger.warning(
                f"Auth failed (token not found/expired) on {request.method} {request.path}"
            )
            flash(SESSION_EXPIRED_MESSAGE, "error")
            response = _login_redirect()
            clear_session_cookie(response)
            return response

        request.user = user
        g.user_id = user.id
        logger.debug(f"Auth OK: user={user.id} {request.method} {request.path}")
        return f(*a, **kw)

    return inner


__all__ = [
    "EXTENSION_KEY",
    "SESSION_EXPIRED_MESSAGE",
    "auth_required",
    "authed_request",
    "session_authority",
]
